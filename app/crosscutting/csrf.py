"""
===============================================================================
MÓDULO: Protección CSRF (double submit cookie)
===============================================================================

Objetivo
--------
Proteger las rutas de autenticación (cookie de sesión) contra CSRF:

- Métodos seguros (GET/HEAD/OPTIONS): se emite un token nuevo, se setea la
  cookie `csrf_token` y se expone en `request.state.csrf_token`.
- Métodos con efectos: el token del request (header `X-CSRF-Token` o campo de
  formulario `_csrf_token`) debe coincidir con la cookie.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  CSRFMiddleware + helpers (generate_csrf_token, tokens_match)

Responsabilidades:
  - Generar tokens (32 bytes aleatorios, base64 URL-safe)
  - Validar en tiempo constante sobre los bytes decodificados
  - Responder 403 con el cuerpo de error estándar

Colaboradores:
  - crosscutting.config.get_settings (nombres de cookie/header, prefijos, TTL)
  - crosscutting.error_responses.build_error_response
  - crosscutting.logger
===============================================================================
"""

from __future__ import annotations

import base64
import binascii
import hmac
import secrets
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .error_responses import ErrorCode, build_error_response
from .logger import logger

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
CSRF_TOKEN_BYTES = 32

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def generate_csrf_token() -> str:
    """32 bytes aleatorios en base64 URL-safe (sin padding)."""
    return secrets.token_urlsafe(CSRF_TOKEN_BYTES)


def _decode_token(token: str) -> bytes:
    padded = token + "=" * (-len(token) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def tokens_match(request_token: str, cookie_token: str) -> bool:
    """
    Compara ambos tokens en tiempo constante.

    Un token que no decodifica como base64 se considera inválido.
    """
    try:
        left = _decode_token(request_token)
        right = _decode_token(cookie_token)
    except (binascii.Error, ValueError, UnicodeEncodeError):
        return False
    if not left or not right:
        return False
    return hmac.compare_digest(left, right)


def path_is_protected(path: str, prefixes: list[str]) -> bool:
    for prefix in prefixes:
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return False


class CSRFMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      CSRFMiddleware

    Responsabilidades:
      - Emitir cookie + request.state.csrf_token en métodos seguros
      - Rechazar métodos con efectos sin token válido (403)
      - Ignorar rutas fuera de los prefijos protegidos

    Colaboradores:
      - crosscutting.config
    ----------------------------------------------------------------------------
    """

    def __init__(self, app, prefixes: list[str] | None = None):
        super().__init__(app)
        from .config import get_settings

        settings = get_settings()
        self._prefixes = (
            prefixes if prefixes is not None else settings.get_csrf_protected_prefixes()
        )
        self._cookie_name = settings.csrf_cookie_name
        self._header_name = settings.csrf_header_name
        self._form_field = settings.csrf_form_field
        self._max_age = settings.csrf_token_ttl_seconds
        self._secure = settings.session_cookie_secure

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not path_is_protected(request.url.path, self._prefixes):
            return await call_next(request)

        if request.method in SAFE_METHODS:
            token = generate_csrf_token()
            request.state.csrf_token = token
            response = await call_next(request)
            self._set_cookie(response, token)
            return response

        request_token = await self._request_token(request)
        if not request_token:
            logger.warning("CSRF token ausente", extra={"path": request.url.path})
            return build_error_response(
                403, ErrorCode.CSRF_TOKEN_MISSING, "CSRF token is required"
            )

        cookie_token = request.cookies.get(self._cookie_name) or ""
        if not cookie_token or not tokens_match(request_token, cookie_token):
            logger.warning("CSRF token inválido", extra={"path": request.url.path})
            return build_error_response(
                403, ErrorCode.CSRF_TOKEN_INVALID, "CSRF token is invalid"
            )

        return await call_next(request)

    async def _request_token(self, request: Request) -> str:
        header_token = (request.headers.get(self._header_name) or "").strip()
        if header_token:
            return header_token

        content_type = (request.headers.get("content-type") or "").lower()
        if not content_type.startswith(_FORM_CONTENT_TYPES):
            return ""

        # R: body() cachea el contenido para que el handler pueda releerlo.
        await request.body()
        form = await request.form()
        value = form.get(self._form_field)
        return value.strip() if isinstance(value, str) else ""

    def _set_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self._cookie_name,
            value=token,
            max_age=self._max_age,
            path="/",
            secure=self._secure,
            httponly=False,
            samesite="strict",
        )
