"""
Name: Session Auth Helper Tests

Responsibilities:
  - Session id extraction (cookie > Bearer > raw Authorization)
  - Client IP resolution behind proxies
"""

import pytest
from app.identity.session_auth import (
    _session_id_from_authorization,
    client_ip,
    extract_session_id,
    user_agent,
)
from starlette.requests import Request

pytestmark = pytest.mark.unit


def _request(headers: dict[str, str] | None = None, client=("10.0.0.9", 5000)) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": raw,
            "query_string": b"",
            "client": client,
        }
    )


class TestAuthorizationParsing:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Bearer abc", "abc"),
            ("bearer   abc ", "abc"),
            ("abc", "abc"),
            ("", None),
            (None, None),
            ("Bearer ", None),
            ("Bearer", None),
            ("Bearer   ", None),
        ],
    )
    def test_parse(self, value, expected):
        assert _session_id_from_authorization(value) == expected


class TestExtractSessionId:
    def test_cookie_wins(self):
        request = _request({"cookie": "session_id=from-cookie"})
        assert extract_session_id(request, "Bearer from-header") == "from-cookie"

    def test_falls_back_to_header(self):
        assert extract_session_id(_request(), "Bearer from-header") == "from-header"

    def test_nothing(self):
        assert extract_session_id(_request(), None) is None


class TestClientIp:
    def test_forwarded_for_first_hop(self):
        request = _request({"x-forwarded-for": "203.0.113.7, 10.0.0.1"})
        assert client_ip(request) == "203.0.113.7"

    def test_real_ip(self):
        assert client_ip(_request({"x-real-ip": "198.51.100.4"})) == "198.51.100.4"

    def test_socket_peer(self):
        assert client_ip(_request()) == "10.0.0.9"

    def test_no_client(self):
        assert client_ip(_request(client=None)) == ""

    def test_user_agent(self):
        assert user_agent(_request({"user-agent": "pytest"})) == "pytest"
        assert user_agent(_request()) == ""
