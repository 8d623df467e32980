"""
Name: User + Activation Endpoint Tests

Responsibilities:
  - CRUD over /users with optimistic locking (409 on stale version)
  - Listing filters, pagination bounds and date range validation
  - Activation flow: deactivate -> request token -> activate
  - Path / body binding errors map to the standard error body
"""

from uuid import uuid4

import pytest

pytestmark = pytest.mark.unit

API = "/api/v1"
PASSWORD = "Str0ngPassw0rd"


def _create(client, email: str = "ada@example.com", **overrides):
    body = {
        "email": email,
        "password": PASSWORD,
        "first_name": "Ada",
        "last_name": "Lovelace",
    }
    body.update(overrides)
    return client.post(f"{API}/users", json=body)


class TestCreateAndRead:
    def test_create_returns_201_with_version_one(self, client):
        res = _create(client)

        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "User created successfully"
        assert body["data"]["version"] == 1
        assert body["data"]["status"] == "active"
        assert body["data"]["full_name"] == "Ada Lovelace"
        assert "password" not in body["data"]
        assert "password_hash" not in body["data"]

    def test_create_normalizes_padded_email(self, client):
        res = _create(client, email=" Ada@Example.COM ")

        assert res.status_code == 201
        assert res.json()["data"]["email"] == "ada@example.com"

    def test_create_duplicate_is_409(self, client):
        _create(client)
        res = _create(client, email="ADA@example.com")

        assert res.status_code == 409
        assert res.json()["error"] == "USER_ALREADY_EXISTS"

    def test_create_invalid(self, client):
        res = _create(client, first_name="R2D2")

        assert res.status_code == 400
        assert res.json()["details"] == [
            {"field": "first_name", "message": "first name contains invalid characters"}
        ]

    def test_get_by_id_and_email(self, client):
        user = _create(client).json()["data"]

        assert client.get(f"{API}/users/{user['id']}").json()["email"] == "ada@example.com"
        by_email = client.get(f"{API}/users/by-email/ADA@example.com")
        assert by_email.status_code == 200
        assert by_email.json()["id"] == user["id"]

    def test_get_unknown(self, client):
        res = client.get(f"{API}/users/{uuid4()}")

        assert res.status_code == 404
        assert res.json() == {"error": "USER_NOT_FOUND", "message": "User not found"}

    def test_malformed_id(self, client):
        res = client.get(f"{API}/users/not-a-uuid")

        assert res.status_code == 400
        assert res.json()["error"] == "VALIDATION_ERROR"
        assert res.json()["details"][0]["field"] == "user_id"


class TestList:
    def test_list_with_pagination(self, client):
        for i in range(3):
            _create(client, email=f"u{i}@example.com")

        res = client.get(f"{API}/users", params={"limit": 2})

        body = res.json()
        assert res.status_code == 200
        assert len(body["users"]) == 2
        assert body["total"] == 3
        assert body["has_more"] is True

    def test_status_filter(self, client):
        user = _create(client).json()["data"]
        _create(client, email="other@example.com")
        client.put(
            f"{API}/users/{user['id']}/status",
            json={"status": "inactive", "version": 1},
        )

        res = client.get(f"{API}/users", params={"status": "inactive"})

        assert [u["id"] for u in res.json()["users"]] == [user["id"]]

    def test_limit_too_large(self, client):
        res = client.get(f"{API}/users", params={"limit": 1000})

        assert res.status_code == 400
        assert res.json()["field"] == "limit"

    def test_inverted_date_range(self, client):
        res = client.get(
            f"{API}/users",
            params={
                "created_after": "2025-02-01T00:00:00Z",
                "created_before": "2025-01-01T00:00:00Z",
            },
        )

        assert res.status_code == 400
        assert res.json()["field"] == "created_after"


class TestMutations:
    def test_update_then_stale_version(self, client):
        user = _create(client).json()["data"]
        url = f"{API}/users/{user['id']}"

        first = client.put(url, json={"first_name": "Grace", "last_name": "Hopper", "version": 1})
        stale = client.put(url, json={"first_name": "Alan", "last_name": "Turing", "version": 1})

        assert first.status_code == 200
        assert first.json()["data"]["version"] == 2
        assert stale.status_code == 409
        assert stale.json()["error"] == "OPTIMISTIC_LOCK_ERROR"
        assert client.get(url).json()["first_name"] == "Grace"

    def test_version_required(self, client):
        user = _create(client).json()["data"]

        res = client.put(
            f"{API}/users/{user['id']}", json={"first_name": "Grace", "last_name": "Hopper"}
        )

        assert res.status_code == 400
        assert res.json()["field"] == "version"

    def test_update_email(self, client):
        user = _create(client).json()["data"]

        res = client.put(
            f"{API}/users/{user['id']}/email", json={"email": "new@example.com", "version": 1}
        )

        assert res.status_code == 200
        assert res.json()["message"] == "User email updated successfully"
        assert res.json()["data"]["email"] == "new@example.com"

    def test_update_email_normalizes_padded_value(self, client):
        user = _create(client).json()["data"]

        res = client.put(
            f"{API}/users/{user['id']}/email",
            json={"email": "  NEW@example.com", "version": 1},
        )

        assert res.status_code == 200
        assert res.json()["data"]["email"] == "new@example.com"

    def test_change_password_wrong_old(self, client):
        user = _create(client).json()["data"]

        res = client.put(
            f"{API}/users/{user['id']}/password",
            json={"old_password": "Wr0ngPassw0rd", "new_password": "N3wPassw0rd", "version": 1},
        )

        assert res.status_code == 401
        assert res.json()["error"] == "INVALID_PASSWORD"

    def test_change_password(self, client):
        user = _create(client).json()["data"]

        res = client.put(
            f"{API}/users/{user['id']}/password",
            json={"old_password": PASSWORD, "new_password": "N3wPassw0rd", "version": 1},
        )

        assert res.status_code == 200
        assert res.json()["data"]["version"] == 2

    def test_delete(self, client):
        user = _create(client).json()["data"]
        url = f"{API}/users/{user['id']}"

        res = client.delete(url, params={"deleted_by": "admin", "reason": "cleanup"})

        assert res.status_code == 200
        assert res.json() == {"message": "User deleted successfully"}
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404


class TestActivationFlow:
    def test_deactivate_request_and_activate(self, client):
        user = _create(client).json()["data"]

        deactivated = client.post(
            f"{API}/users/{user['id']}/deactivate",
            json={"version": 1, "deactivated_by": "admin", "reason": "audit"},
        )
        assert deactivated.status_code == 200
        assert deactivated.json()["data"]["status"] == "inactive"

        issued = client.post(f"{API}/users/{user['id']}/activation")
        assert issued.status_code == 201
        assert issued.json()["message"] == "Activation token generated successfully"
        token = issued.json()["data"]["token"]

        activated = client.post(f"{API}/activation/activate", json={"token": token})
        assert activated.status_code == 200
        assert activated.json()["message"] == "User activated successfully"
        assert activated.json()["data"]["status"] == "active"
        assert activated.json()["data"]["version"] == 3

        reused = client.post(f"{API}/activation/activate", json={"token": token})
        assert reused.status_code == 400

    def test_activation_for_active_user(self, client):
        user = _create(client).json()["data"]

        res = client.post(f"{API}/users/{user['id']}/activation")

        assert res.status_code == 400
        assert res.json() == {
            "error": "BUSINESS_RULE_VIOLATION",
            "message": "user is already active",
        }

    def test_unknown_token(self, client):
        res = client.post(f"{API}/activation/activate", json={"token": "a" * 64})

        assert res.status_code == 400
        assert res.json()["field"] == "token"
