"""
===============================================================================
TARJETA CRC - error_mapping.py (UseCase Error -> HTTP)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a AppHTTPException.
  - Centralizar el mapeo (una tabla por módulo) para evitar duplicación en routers.
  - Mantener el dominio libre de HTTP.

Reglas:
  - NUNCA se propagan excepciones de infraestructura hacia la API.
  - Los use cases devuelven errores tipados (code + message [+ field/details]).
  - La API traduce al cuerpo estándar (crosscutting.error_responses).

Colaboradores:
  - application.usecases.* (AuthErrorCode, UserErrorCode)
  - crosscutting.error_responses (AppHTTPException, ErrorCode)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from app.application.usecases import AuthError, AuthErrorCode, UserError, UserErrorCode
from app.crosscutting.error_responses import AppHTTPException, ErrorCode

AUTH_ERROR_STATUS: dict[AuthErrorCode, int] = {
    AuthErrorCode.VALIDATION_ERROR: 400,
    AuthErrorCode.INVALID_CREDENTIALS: 401,
    AuthErrorCode.SESSION_EXPIRED: 401,
    AuthErrorCode.SESSION_INVALID: 401,
    AuthErrorCode.ACCOUNT_SUSPENDED: 403,
    AuthErrorCode.USER_NOT_FOUND: 404,
    AuthErrorCode.SESSION_NOT_FOUND: 404,
    AuthErrorCode.USER_ALREADY_EXISTS: 409,
    AuthErrorCode.RATE_LIMIT_EXCEEDED: 429,
    AuthErrorCode.INTERNAL_ERROR: 500,
}

USER_ERROR_STATUS: dict[UserErrorCode, int] = {
    UserErrorCode.VALIDATION_ERROR: 400,
    UserErrorCode.BUSINESS_RULE_VIOLATION: 400,
    UserErrorCode.INVALID_PASSWORD: 401,
    UserErrorCode.USER_NOT_FOUND: 404,
    UserErrorCode.USER_ALREADY_EXISTS: 409,
    UserErrorCode.OPTIMISTIC_LOCK_ERROR: 409,
    UserErrorCode.INTERNAL_ERROR: 500,
}


def _build(
    status_code: int,
    code_value: str,
    message: str,
    field: str | None,
    details: list[dict] | None,
    headers: dict[str, str] | None = None,
) -> AppHTTPException:
    return AppHTTPException(
        status_code,
        ErrorCode(code_value),
        message,
        field=field,
        details=details,
        headers=headers,
    )


def auth_http_error(error: AuthError) -> AppHTTPException:
    status_code = AUTH_ERROR_STATUS.get(error.code, 500)
    headers = None
    if error.code == AuthErrorCode.RATE_LIMIT_EXCEEDED:
        headers = {"Retry-After": str(max(1, error.retry_after or 1))}
    return _build(
        status_code, error.code.value, error.message, error.field, error.details, headers
    )


def user_http_error(error: UserError) -> AppHTTPException:
    # R: Fallback seguro: un código desconocido es un 500 sin detalle interno.
    status_code = USER_ERROR_STATUS.get(error.code, 500)
    return _build(status_code, error.code.value, error.message, error.field, error.details)


def raise_auth_error(error: AuthError) -> NoReturn:
    raise auth_http_error(error)


def raise_user_error(error: UserError) -> NoReturn:
    raise user_http_error(error)
