"""
===============================================================================
TARJETA CRC - app/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Registrar los handlers del cuerpo de error estándar
    ({"error", "message", "field"?, "details"?}).
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> INTERNAL_ERROR (con logging).
  - Observabilidad: correlación por request_id y error_id.

Colaboradores:
  - crosscutting.error_responses: handlers + build_error_response
  - crosscutting.exceptions: AccountsError y derivadas (DatabaseError, ...)
  - infrastructure.db.errors: fallas del pool de conexiones
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..crosscutting.error_responses import (
    INTERNAL_ERROR_MESSAGE,
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    build_error_response,
    http_exception_handler,
    request_validation_handler,
)
from ..crosscutting.exceptions import AccountsError
from ..crosscutting.logger import logger
from ..infrastructure.db.errors import DatabasePoolError


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def accounts_error_handler(request: Request, exc: AccountsError) -> JSONResponse:
    """
    Errores internos tipados que escaparon de los casos de uso.

    El mensaje real queda en logs (con error_id); el cliente recibe 500 genérico.
    """
    logger.error(
        "Error interno tipado",
        extra={
            "code": exc.error_code,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "request_id": _request_id_from(request),
        },
    )
    return build_error_response(500, ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)


async def pool_error_handler(request: Request, exc: DatabasePoolError) -> JSONResponse:
    logger.error(
        "Pool de base de datos no disponible",
        extra={"error": str(exc), "request_id": _request_id_from(request)},
    )
    return build_error_response(
        503, ErrorCode.SERVICE_UNAVAILABLE, "Service temporarily unavailable"
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler de último recurso para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica (nunca se filtran detalles internos).
    """
    logger.error(
        "Excepción no controlada",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"request_id": _request_id_from(request)},
    )
    return build_error_response(500, ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - AppHTTPException antes que HTTPException (más específico).
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AccountsError, accounts_error_handler)
    app.add_exception_handler(DatabasePoolError, pool_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
