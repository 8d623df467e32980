"""
Name: Admin Endpoint Tests

Responsibilities:
  - X-Admin-Token guard (disabled => 404, wrong/missing => 403)
  - Maintenance cleanup counts
  - Audit listing with filters and pagination bounds
"""

import pytest
from app.crosscutting import config

pytestmark = pytest.mark.unit

API = "/api/v1"
ADMIN_TOKEN = "a" * 40


@pytest.fixture
def admin_headers(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", ADMIN_TOKEN)
    config.get_settings.cache_clear()
    return {"X-Admin-Token": ADMIN_TOKEN}


class TestGuard:
    def test_disabled_without_admin_token(self, client, monkeypatch):
        monkeypatch.delenv("ADMIN_TOKEN", raising=False)
        config.get_settings.cache_clear()

        res = client.get(f"{API}/admin/audit", headers={"X-Admin-Token": "whatever"})

        assert res.status_code == 404
        assert res.json()["error"] == "NOT_FOUND"

    def test_missing_header(self, client, admin_headers):
        res = client.get(f"{API}/admin/audit")

        assert res.status_code == 403
        assert res.json() == {"error": "FORBIDDEN", "message": "Invalid admin token"}

    def test_wrong_token(self, client, admin_headers):
        res = client.post(
            f"{API}/admin/maintenance/cleanup", headers={"X-Admin-Token": "b" * 40}
        )
        assert res.status_code == 403


class TestMaintenance:
    def test_cleanup_reports_counts(self, client, admin_headers):
        res = client.post(f"{API}/admin/maintenance/cleanup", headers=admin_headers)

        assert res.status_code == 200
        assert res.json() == {"sessions_deleted": 0, "tokens_deleted": 0}


class TestAudit:
    def _create_user(self, client, email="ada@example.com"):
        return client.post(
            f"{API}/users",
            json={
                "email": email,
                "password": "Str0ngPassw0rd",
                "first_name": "Ada",
                "last_name": "Lovelace",
            },
            headers={"X-Request-Id": "req-audit-1"},
        ).json()["data"]

    def test_lists_events_with_correlation(self, client, admin_headers):
        user = self._create_user(client)

        res = client.get(f"{API}/admin/audit", headers=admin_headers)

        assert res.status_code == 200
        events = res.json()["events"]
        assert len(events) == 1
        event = events[0]
        assert event["event_type"] == "user.created"
        assert event["user_id"] == user["id"]
        assert event["action"] == "user_created"
        assert event["details"]["email"] == "ada@example.com"
        assert event["metadata"]["request_id"] == "req-audit-1"
        assert res.json()["next_offset"] is None

    def test_filters(self, client, admin_headers):
        first = self._create_user(client)
        self._create_user(client, email="other@example.com")
        client.put(
            f"{API}/users/{first['id']}",
            json={"first_name": "Grace", "last_name": "Hopper", "version": 1},
        )

        by_user = client.get(
            f"{API}/admin/audit", params={"user_id": first["id"]}, headers=admin_headers
        ).json()["events"]
        by_type = client.get(
            f"{API}/admin/audit",
            params={"event_type_prefix": "user.updated"},
            headers=admin_headers,
        ).json()["events"]

        assert {e["event_type"] for e in by_user} == {"user.created", "user.updated"}
        assert [e["user_id"] for e in by_type] == [first["id"]]

    def test_next_offset_when_page_is_full(self, client, admin_headers):
        self._create_user(client)
        self._create_user(client, email="other@example.com")

        res = client.get(f"{API}/admin/audit", params={"limit": 1}, headers=admin_headers)

        assert res.json()["next_offset"] == 1

    @pytest.mark.parametrize("limit", [0, 201])
    def test_limit_bounds(self, client, admin_headers, limit):
        res = client.get(f"{API}/admin/audit", params={"limit": limit}, headers=admin_headers)
        assert res.status_code == 400

    def test_inverted_range(self, client, admin_headers):
        res = client.get(
            f"{API}/admin/audit",
            params={"start_at": "2025-02-01T00:00:00Z", "end_at": "2025-01-01T00:00:00Z"},
            headers=admin_headers,
        )

        assert res.status_code == 400
        assert res.json()["field"] == "start_at"
