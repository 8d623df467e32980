"""
===============================================================================
MÓDULO: Respuestas de error estándar
===============================================================================

Objetivo
--------
Uniformar TODOS los errores HTTP con un único cuerpo JSON:

    {"error": "<CODE>", "message": "...", "field": "...", "details": [...]}

para que:
- El frontend pueda manejar por "error" (código estable)
- Los errores de validación lleguen con detalle por campo
- El backend correlacione por X-Request-Id (header, no body)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + factories + handlers

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode)
  - Construir payload ErrorResponse
  - Proveer factories de errores frecuentes
  - Proveer handlers (FastAPI) para HTTPException / RequestValidationError

Colaboradores:
  - crosscutting/middleware.py, crosscutting/csrf.py (respuestas fuera de routers)
  - api/exception_handlers.py (registro + fallback)
  - interfaces/api/http/error_mapping.py (UseCase error -> HTTP)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"

    # 401
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_SESSION = "INVALID_SESSION"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    SESSION_INVALID = "SESSION_INVALID"

    # 403
    FORBIDDEN = "FORBIDDEN"
    ACCOUNT_SUSPENDED = "ACCOUNT_SUSPENDED"
    CSRF_TOKEN_MISSING = "CSRF_TOKEN_MISSING"
    CSRF_TOKEN_INVALID = "CSRF_TOKEN_INVALID"

    # 404 / 405
    NOT_FOUND = "NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # 409
    CONFLICT = "CONFLICT"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    OPTIMISTIC_LOCK_ERROR = "OPTIMISTIC_LOCK_ERROR"

    # 413 / 429
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class FieldErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """
    Cuerpo de error estándar.

    Campos:
    - error: código estable (ErrorCode)
    - message: mensaje humano
    - field: campo responsable (errores de un solo campo)
    - details: lista de errores por campo (validación)
    """

    error: ErrorCode
    message: str
    field: str | None = None
    details: list[FieldErrorDetail] | None = None


INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"

_OPENAPI_ERROR_CONTENT = {
    "application/json": {"schema": {"$ref": "#/components/schemas/ErrorResponse"}}
}


def _openapi_entry(description: str) -> dict[str, Any]:
    return {
        "description": description,
        "model": ErrorResponse,
        "content": _OPENAPI_ERROR_CONTENT,
    }


OPENAPI_ERROR_RESPONSES = {
    "400": _openapi_entry("Bad Request"),
    "401": _openapi_entry("Unauthorized"),
    "403": _openapi_entry("Forbidden"),
    "404": _openapi_entry("Not Found"),
    "409": _openapi_entry("Conflict"),
    "429": _openapi_entry("Too Many Requests"),
    "default": _openapi_entry("Error"),
}


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      AppHTTPException

    Responsabilidades:
      - Adjuntar un ErrorCode estable
      - Transportar field / details de validación
      - Permitir headers custom (Retry-After, Set-Cookie de limpieza, etc.)

    Colaboradores:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        *,
        field: str | None = None,
        details: list[dict[str, str]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.field = field
        self.details = details
        self.clear_cookies: list[str] = []


def build_error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    *,
    field: str | None = None,
    details: list[dict[str, str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Arma la JSONResponse de error (usado por handlers y middlewares)."""
    body = ErrorResponse(
        error=code,
        message=message,
        field=field or None,
        details=[FieldErrorDetail(**d) for d in details] if details else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def validation_failed(details: list[dict[str, str]]) -> AppHTTPException:
    return AppHTTPException(
        400, ErrorCode.VALIDATION_ERROR, "Validation failed", details=details
    )


def validation_error(message: str, field: str | None = None) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, message, field=field)


def not_found(code: ErrorCode, message: str) -> AppHTTPException:
    return AppHTTPException(404, code, message)


def unauthorized(
    detail: str = "Authentication required",
    code: ErrorCode = ErrorCode.UNAUTHORIZED,
) -> AppHTTPException:
    return AppHTTPException(401, code, detail)


def forbidden(
    detail: str = "Access denied", code: ErrorCode = ErrorCode.FORBIDDEN
) -> AppHTTPException:
    return AppHTTPException(403, code, detail)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """
    Handler para AppHTTPException.

    Propaga headers opcionales (Retry-After) y borra cookies pedidas por el router.
    """
    response = build_error_response(
        exc.status_code,
        exc.code,
        str(exc.detail),
        field=exc.field,
        details=exc.details,
        headers=getattr(exc, "headers", None),
    )
    for cookie_name in exc.clear_cookies:
        response.delete_cookie(cookie_name, path="/")
    return response


_STATUS_TO_CODE: dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    409: ErrorCode.CONFLICT,
    413: ErrorCode.PAYLOAD_TOO_LARGE,
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    HTTPException “genérica” (404 de ruta, 405, etc.) con el mismo cuerpo.
    """
    code = _STATUS_TO_CODE.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    message = str(exc.detail) if exc.status_code < 500 else INTERNAL_ERROR_MESSAGE
    return build_error_response(
        exc.status_code, code, message, headers=getattr(exc, "headers", None)
    )


def _field_from_loc(loc: tuple[Any, ...] | list[Any]) -> str:
    # R: ("body", "email") -> "email"; ("query", "limit") -> "limit"
    parts = [str(p) for p in loc if p not in {"body", "query", "path", "header", "cookie"}]
    return ".".join(parts) or "body"


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Errores de binding (JSON inválido, tipos incorrectos) -> 400 VALIDATION_ERROR.
    """
    details = [
        {"field": _field_from_loc(err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return build_error_response(
        400, ErrorCode.VALIDATION_ERROR, "Validation failed", details=details
    )
