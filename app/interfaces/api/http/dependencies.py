"""
===============================================================================
TARJETA CRC - dependencies.py (Dependencias y helpers comunes)
===============================================================================

Responsabilidades:
  - Centralizar helpers que se repiten en routers:
      * guardia X-Admin-Token para endpoints de mantenimiento
      * lectura del token CSRF emitido por el middleware
      * validación de rangos de fechas en filtros

Patrones aplicados:
  - DRY + Single Responsibility: helpers chicos, reutilizables.
  - Fail-fast: validar temprano y cortar requests peligrosas.

Colaboradores:
  - crosscutting.config.get_settings
  - crosscutting.error_responses (factories)
===============================================================================
"""

from __future__ import annotations

import hmac
from datetime import datetime

from app.crosscutting.config import get_settings
from app.crosscutting.error_responses import (
    ErrorCode,
    forbidden,
    not_found,
    validation_error,
)
from app.crosscutting.logger import logger
from fastapi import Header, Request


def require_admin_token(
    x_admin_token: str | None = Header(None, alias="X-Admin-Token"),
) -> None:
    """
    Dependency FastAPI: exige X-Admin-Token == ADMIN_TOKEN.

    Reglas:
      - ADMIN_TOKEN vacío => endpoints deshabilitados (404).
      - Token ausente o distinto => 403.
    """
    expected = (get_settings().admin_token or "").strip()
    if not expected:
        raise not_found(ErrorCode.NOT_FOUND, "Not Found")

    provided = (x_admin_token or "").strip()
    if not provided or not hmac.compare_digest(
        provided.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Admin token inválido")
        raise forbidden("Invalid admin token")


def csrf_token_from(request: Request) -> str:
    """Token emitido por CSRFMiddleware en este request (vacío si no aplica)."""
    return getattr(request.state, "csrf_token", "") or ""


def validate_date_range(
    start: datetime | None,
    end: datetime | None,
    *,
    start_field: str,
    end_field: str,
) -> None:
    if start and end and start > end:
        raise validation_error(f"{start_field} must be before {end_field}", field=start_field)
