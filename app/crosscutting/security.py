"""
===============================================================================
MÓDULO: Security headers (OWASP hardening)
===============================================================================

Objetivo
--------
Agregar headers de seguridad a todas las respuestas de la API:
- CSP restrictiva (la API sólo sirve JSON)
- HSTS (solo cuando corresponde)
- Anti-clickjacking, anti-sniffing, etc.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  SecurityHeadersMiddleware

Responsabilidades:
  - Añadir headers de hardening sin romper dev
  - Ajustar CSP según entorno

Colaboradores:
  - crosscutting.config.get_settings
===============================================================================
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


_STATIC_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "camera=(), geolocation=(), microphone=(), payment=()",
}

_HSTS = "max-age=31536000; includeSubDomains"


def _forwarded_proto(request: Request) -> str:
    return (request.headers.get("x-forwarded-proto") or request.url.scheme or "").lower()


def _build_csp(is_production: bool) -> str:
    # API JSON: nada que cargar. Fuera de producción se permite /docs (Swagger CDN).
    if is_production:
        return "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"

    return (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "img-src 'self' data: https://fastapi.tiangolo.com; "
        "frame-ancestors 'none'"
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      SecurityHeadersMiddleware

    Responsabilidades:
      - Agregar headers de seguridad OWASP a respuestas JSON
      - HSTS solo si producción y request por HTTPS

    Colaboradores:
      - crosscutting.config
    ----------------------------------------------------------------------------
    """

    def __init__(self, app):
        super().__init__(app)
        from .config import get_settings

        self._is_production = get_settings().is_production()
        self._csp = _build_csp(self._is_production)

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        for name, value in _STATIC_HEADERS.items():
            response.headers[name] = value
        response.headers.setdefault("Cache-Control", "no-store")
        response.headers["Content-Security-Policy"] = self._csp

        # HSTS: solo si prod + HTTPS (directo o detrás de proxy)
        if self._is_production and _forwarded_proto(request) == "https":
            response.headers["Strict-Transport-Security"] = _HSTS

        return response
