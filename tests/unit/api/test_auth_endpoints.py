"""
Name: Auth Endpoint Tests

Responsibilities:
  - Register / login / me / logout flow with the session cookie
  - Bearer and raw Authorization header as session carriers
  - Public session validation, refresh, session listing
  - Password change revokes the session
  - Rate limiting surfaces as 429 + Retry-After

Collaborators:
  - FastAPI TestClient against create_app() (APP_ENV=test, in-memory adapters)
  - csrf fixture: fresh double-submit token per unsafe request
"""

import pytest

pytestmark = pytest.mark.unit

API = "/api/v1"
PASSWORD = "Str0ngPassw0rd"


def _register(client, csrf, email: str = "ada@example.com", **overrides):
    body = {
        "email": email,
        "password": PASSWORD,
        "first_name": "Ada",
        "last_name": "Lovelace",
    }
    body.update(overrides)
    return client.post(f"{API}/auth/register", json=body, headers=csrf(client))


def _login(client, csrf, email: str = "ada@example.com", password: str = PASSWORD):
    return client.post(
        f"{API}/auth/login",
        json={"email": email, "password": password},
        headers=csrf(client),
    )


class TestRegisterAndLogin:
    def test_register_sets_session_cookie(self, client, csrf):
        res = _register(client, csrf)

        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "Registration successful"
        assert body["user"]["email"] == "ada@example.com"
        assert body["user"]["version"] == 1
        assert res.cookies.get("session_id") == body["session"]["id"]

        set_cookie = " ".join(res.headers.get_list("set-cookie")).lower()
        assert "httponly" in set_cookie
        assert "samesite=strict" in set_cookie

    def test_register_duplicate_email(self, client, csrf):
        _register(client, csrf)
        res = _register(client, csrf, email="ADA@example.com")

        assert res.status_code == 409
        assert res.json()["error"] == "USER_ALREADY_EXISTS"

    def test_register_validation_details(self, client, csrf):
        res = _register(client, csrf, email="bad", password="password123")

        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["field"] == "email"
        messages = [d["message"] for d in body["details"]]
        assert "password is too common, please choose a stronger password" in messages

    def test_padded_email_is_normalized(self, client, csrf):
        res = _register(client, csrf, email="  Grace@Example.com ")
        assert res.status_code == 201
        assert res.json()["user"]["email"] == "grace@example.com"
        client.cookies.clear()

        res = _login(client, csrf, email=" GRACE@example.com")

        assert res.status_code == 200
        assert res.json()["user"]["email"] == "grace@example.com"

    def test_login_and_me(self, client, csrf):
        _register(client, csrf)
        client.cookies.clear()

        res = _login(client, csrf)
        assert res.status_code == 200
        assert res.json()["message"] == "Login successful"

        me = client.get(f"{API}/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "ada@example.com"

    def test_login_wrong_password(self, client, csrf):
        _register(client, csrf)

        res = _login(client, csrf, password="Wr0ngPassw0rd")

        assert res.status_code == 401
        assert res.json() == {
            "error": "INVALID_CREDENTIALS",
            "message": "Invalid email or password",
        }

    def test_login_rate_limited(self, client, csrf):
        headers = csrf(client)
        body = {"email": "ghost@example.com", "password": PASSWORD}
        for _ in range(5):
            assert client.post(f"{API}/auth/login", json=body, headers=headers).status_code == 401

        res = client.post(f"{API}/auth/login", json=body, headers=headers)

        assert res.status_code == 429
        assert res.json()["error"] == "RATE_LIMIT_EXCEEDED"
        assert int(res.headers["Retry-After"]) > 0

    def test_suspended_account(self, client, csrf):
        user = client.post(
            f"{API}/users",
            json={
                "email": "sus@example.com",
                "password": PASSWORD,
                "first_name": "Sus",
                "last_name": "Pended",
            },
        ).json()["data"]
        client.put(
            f"{API}/users/{user['id']}/status",
            json={"status": "suspended", "version": 1},
        )

        res = _login(client, csrf, email="sus@example.com")

        assert res.status_code == 403
        assert res.json()["error"] == "ACCOUNT_SUSPENDED"


class TestSessionCarriers:
    def test_me_requires_session(self, client):
        res = client.get(f"{API}/auth/me")

        assert res.status_code == 401
        assert res.json()["error"] == "UNAUTHORIZED"
        assert res.json()["message"] == "Authentication required"

    def test_empty_bearer_is_missing_credentials(self, client):
        res = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer"})

        assert res.status_code == 401
        assert res.json()["message"] == "Authentication required"

    def test_bearer_header(self, client, csrf):
        session_id = _register(client, csrf).json()["session"]["id"]
        client.cookies.clear()

        res = client.get(
            f"{API}/auth/me", headers={"Authorization": f"Bearer {session_id}"}
        )

        assert res.status_code == 200

    def test_raw_authorization_header(self, client, csrf):
        session_id = _register(client, csrf).json()["session"]["id"]
        client.cookies.clear()

        res = client.get(f"{API}/auth/me", headers={"Authorization": session_id})

        assert res.status_code == 200

    def test_invalid_session_clears_cookie(self, client):
        res = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer " + "f" * 64})

        assert res.status_code == 401
        assert res.json()["message"] == "Invalid or expired session"
        cleared = [c for c in res.headers.get_list("set-cookie") if c.startswith("session_id=")]
        assert cleared and "max-age=0" in cleared[0].lower()


class TestValidateEndpoint:
    def test_valid_by_query(self, client, csrf):
        session_id = _register(client, csrf).json()["session"]["id"]
        client.cookies.clear()

        res = client.get(f"{API}/auth/validate", params={"session_id": session_id})

        assert res.status_code == 200
        assert res.json()["valid"] is True
        assert res.json()["session"]["id"] == session_id

    def test_missing_session_id(self, client):
        res = client.get(f"{API}/auth/validate")

        assert res.status_code == 400
        assert res.json()["field"] == "session_id"

    def test_unknown_session(self, client):
        res = client.get(f"{API}/auth/validate", params={"session_id": "nope"})

        assert res.status_code == 401
        assert res.json() == {
            "error": "INVALID_SESSION",
            "message": "Session is invalid or expired",
        }


class TestAuthenticatedActions:
    def test_logout(self, client, csrf):
        _register(client, csrf)

        res = client.post(f"{API}/auth/logout", headers=csrf(client))

        assert res.status_code == 200
        assert res.json()["message"] == "Logout successful"
        assert client.get(f"{API}/auth/me").status_code == 401

    def test_refresh(self, client, csrf):
        _register(client, csrf)

        res = client.post(f"{API}/auth/refresh", headers=csrf(client))

        assert res.status_code == 200
        assert res.json()["message"] == "Session refreshed successfully"
        assert res.json()["data"]["id"]

    def test_list_sessions_marks_current(self, client, csrf):
        session_id = _register(client, csrf).json()["session"]["id"]

        res = client.get(f"{API}/auth/sessions")

        assert res.status_code == 200
        body = res.json()
        assert body["total"] == 1
        assert body["sessions"][0]["id"] == session_id
        assert body["sessions"][0]["current"] is True

    def test_change_password_requires_new_login(self, client, csrf):
        _register(client, csrf)

        res = client.put(
            f"{API}/auth/password",
            json={"old_password": PASSWORD, "new_password": "N3wPassw0rd!"},
            headers=csrf(client),
        )

        assert res.status_code == 200
        assert res.json()["message"] == "Password changed successfully. Please log in again."
        assert client.get(f"{API}/auth/me").status_code == 401
        assert _login(client, csrf, password="N3wPassw0rd!").status_code == 200

    def test_change_password_wrong_old(self, client, csrf):
        _register(client, csrf)

        res = client.put(
            f"{API}/auth/password",
            json={"old_password": "Wr0ngPassw0rd", "new_password": "N3wPassw0rd!"},
            headers=csrf(client),
        )

        assert res.status_code == 401
        assert res.json()["error"] == "INVALID_CREDENTIALS"
