"""
===============================================================================
AUTH USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Contrato tipado entre los casos de uso de autenticación y la capa HTTP.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    auth_results models (module)

Responsibilities:
    - AuthErrorCode: categorías estables (mapean 1:1 a status HTTP).
    - AuthError: code + message (+ field / details / retry_after).
    - Resultados: AuthResult (user + session), SessionValidationResult,
      SessionResult, SessionListResult, ChangePasswordResult, LogoutResult.
    - Builders para errores repetidos.

Collaborators:
    - domain.users.User
    - domain.sessions.Session
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Sequence

from ....domain.sessions import Session
from ....domain.users import User
from ....domain.validation import FieldError, to_dicts


class AuthErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    SESSION_INVALID = "SESSION_INVALID"
    ACCOUNT_SUSPENDED = "ACCOUNT_SUSPENDED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class AuthError:
    code: AuthErrorCode
    message: str
    field: str | None = None
    details: list[dict[str, Any]] | None = None
    retry_after: int | None = None


@dataclass
class AuthResult:
    user: User | None = None
    session: Session | None = None
    error: AuthError | None = None


@dataclass
class SessionValidationResult:
    """valid=False no es un error: el caller decide (401 / limpiar cookie)."""

    valid: bool = False
    user: User | None = None
    session: Session | None = None


@dataclass
class SessionResult:
    session: Session | None = None
    error: AuthError | None = None


@dataclass
class SessionListResult:
    sessions: List[Session] = field(default_factory=list)
    error: AuthError | None = None


@dataclass
class LogoutResult:
    error: AuthError | None = None


@dataclass
class ChangePasswordResult:
    sessions_revoked: int = 0
    error: AuthError | None = None


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------
def validation_failed(errors: Sequence[FieldError]) -> AuthError:
    return AuthError(
        code=AuthErrorCode.VALIDATION_ERROR,
        message="Validation failed",
        field=errors[0].field if errors else None,
        details=to_dicts(errors),
    )


def invalid_credentials() -> AuthError:
    return AuthError(
        code=AuthErrorCode.INVALID_CREDENTIALS, message="Invalid email or password"
    )


def account_suspended() -> AuthError:
    return AuthError(
        code=AuthErrorCode.ACCOUNT_SUSPENDED, message="Account has been suspended"
    )


def user_not_found() -> AuthError:
    return AuthError(code=AuthErrorCode.USER_NOT_FOUND, message="User not found")


def session_not_found() -> AuthError:
    return AuthError(
        code=AuthErrorCode.SESSION_NOT_FOUND, message="Session not found or invalid"
    )


def session_expired() -> AuthError:
    return AuthError(
        code=AuthErrorCode.SESSION_EXPIRED,
        message="Session has expired, please login again",
    )


def user_already_exists() -> AuthError:
    return AuthError(
        code=AuthErrorCode.USER_ALREADY_EXISTS,
        message="A user with this email already exists",
        field="email",
    )


def rate_limit_exceeded(message: str, retry_after: int) -> AuthError:
    return AuthError(
        code=AuthErrorCode.RATE_LIMIT_EXCEEDED,
        message=message,
        retry_after=retry_after,
    )
