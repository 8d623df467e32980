"""
Name: Use Case Error -> HTTP Mapping Tests

Responsibilities:
  - Every AuthErrorCode / UserErrorCode has an HTTP status and a body code
  - Retry-After on rate limiting
  - field / details are carried through
"""

import pytest
from app.application.usecases import AuthError, AuthErrorCode, UserError, UserErrorCode
from app.crosscutting.error_responses import AppHTTPException, ErrorCode
from app.interfaces.api.http.error_mapping import (
    AUTH_ERROR_STATUS,
    USER_ERROR_STATUS,
    auth_http_error,
    raise_user_error,
    user_http_error,
)

pytestmark = pytest.mark.unit


class TestTables:
    def test_every_auth_code_is_mapped(self):
        assert set(AUTH_ERROR_STATUS) == set(AuthErrorCode)
        for code in AuthErrorCode:
            assert ErrorCode(code.value)

    def test_every_user_code_is_mapped(self):
        assert set(USER_ERROR_STATUS) == set(UserErrorCode)
        for code in UserErrorCode:
            assert ErrorCode(code.value)


class TestAuthMapping:
    def test_rate_limit_sets_retry_after(self):
        exc = auth_http_error(
            AuthError(AuthErrorCode.RATE_LIMIT_EXCEEDED, "Too many attempts", retry_after=90)
        )

        assert exc.status_code == 429
        assert exc.headers == {"Retry-After": "90"}

    def test_retry_after_is_at_least_one(self):
        exc = auth_http_error(AuthError(AuthErrorCode.RATE_LIMIT_EXCEEDED, "slow down"))
        assert exc.headers == {"Retry-After": "1"}

    def test_suspended_is_403(self):
        exc = auth_http_error(AuthError(AuthErrorCode.ACCOUNT_SUSPENDED, "suspended"))
        assert exc.status_code == 403
        assert exc.code == ErrorCode.ACCOUNT_SUSPENDED
        assert exc.headers is None


class TestUserMapping:
    def test_validation_carries_details(self):
        details = [{"field": "email", "message": "invalid email format"}]

        exc = user_http_error(
            UserError(UserErrorCode.VALIDATION_ERROR, "Validation failed", "email", details)
        )

        assert exc.status_code == 400
        assert exc.field == "email"
        assert exc.details == details

    @pytest.mark.parametrize(
        "code,status",
        [
            (UserErrorCode.OPTIMISTIC_LOCK_ERROR, 409),
            (UserErrorCode.INVALID_PASSWORD, 401),
            (UserErrorCode.USER_NOT_FOUND, 404),
            (UserErrorCode.INTERNAL_ERROR, 500),
        ],
    )
    def test_status(self, code, status):
        with pytest.raises(AppHTTPException) as info:
            raise_user_error(UserError(code, "x"))
        assert info.value.status_code == status
