"""
===============================================================================
MÓDULO: Middlewares HTTP (contexto + límites de payload)
===============================================================================

Objetivo
--------
1) RequestContextMiddleware:
   - Aceptar/generar X-Request-Id y devolverlo en la respuesta
   - Abrir el contexto de correlación (request_id, método, path, IP cliente)
   - Un log por request con status y latencia

2) BodyLimitMiddleware:
   - 413 para bodies mayores a MAX_BODY_BYTES (declarados o en streaming)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componentes:
  - client_ip() (también usado por los routers de auth vía session_auth)
  - RequestContextMiddleware
  - BodyLimitMiddleware

Colaboradores:
  - app/context.py
  - crosscutting/error_responses.py
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .error_responses import ErrorCode, build_error_response
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"
MAX_REQUEST_ID_LENGTH = 128


def client_ip(request: Request) -> str:
    """Primer hop de X-Forwarded-For, luego X-Real-IP, luego el peer del socket."""
    forwarded = (request.headers.get("x-forwarded-for") or "").strip()
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = (request.headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip
    return request.client.host if request.client else ""


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      RequestContextMiddleware

    Responsabilidades:
      - Resolver request_id (entrante si es razonable, UUID4 si no)
      - Poblar app/context.py y request.state
      - Loguear fin de request (salvo health checks)
      - clear_context() siempre, incluso si el handler falla

    Colaboradores:
      - crosscutting.logger
    ----------------------------------------------------------------------------
    """

    _QUIET_PATHS = frozenset({"/healthz", "/readyz"})

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        request_id = (
            incoming if 0 < len(incoming) <= MAX_REQUEST_ID_LENGTH else str(uuid.uuid4())
        )
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip(request),
        )

        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            logger.exception("request falló", extra={"status_code": 500})
            raise
        finally:
            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completado",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                    },
                )
            clear_context()


class BodyLimitMiddleware:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      BodyLimitMiddleware (ASGI puro)

    Responsabilidades:
      - Cortar antes de leer si Content-Length supera el límite
      - Sin Content-Length (chunked): leer y contar el body acá, y recién
        después pasarlo a la app reproduciendo los mensajes

    Colaboradores:
      - crosscutting.config.get_settings()
      - crosscutting.error_responses.build_error_response
    ----------------------------------------------------------------------------
    """

    def __init__(self, app, max_bytes: int | None = None):
        from .config import get_settings

        self.app = app
        self._max_bytes = (
            max_bytes if max_bytes is not None else get_settings().max_body_bytes
        )

    @staticmethod
    def _declared_length(scope) -> int | None:
        for key, value in scope.get("headers", []):
            if key.lower() == b"content-length":
                try:
                    return int(value.decode("latin-1"))
                except ValueError:
                    return None
        return None

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = self._declared_length(scope)
        if declared is not None:
            if declared > self._max_bytes:
                logger.warning(
                    "payload demasiado grande (content-length)",
                    extra={"content_length": declared, "max_bytes": self._max_bytes},
                )
                await self._reject(scope, receive, send)
                return
            # R: El servidor ASGI no entrega más bytes que los declarados.
            await self.app(scope, receive, send)
            return

        buffered = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body") or b"")
            if received > self._max_bytes:
                logger.warning(
                    "payload demasiado grande (streaming)",
                    extra={"received_bytes": received, "max_bytes": self._max_bytes},
                )
                await self._reject(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay_receive():
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay_receive, send)

    async def _reject(self, scope, receive, send) -> None:
        response = build_error_response(
            413,
            ErrorCode.PAYLOAD_TOO_LARGE,
            f"Request body too large. Maximum allowed: {self._max_bytes} bytes",
        )
        await response(scope, receive, send)
