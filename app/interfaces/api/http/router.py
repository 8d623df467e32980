"""
===============================================================================
TARJETA CRC - router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses de error para OpenAPI.
  - Componer routers por feature (auth/users/activation/admin).

Patrones aplicados:
  - Composition over inheritance: router raíz compone sub-routers.
  - Factory: build_router() para testear composición y evitar side-effects al importar.

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (sub-routers por feature)

Notas:
  - Este router se incluye desde app/api/main.py con prefix=settings.api_prefix.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import activation_router, admin_router, auth_router, users_router


def build_router() -> APIRouter:
    """Construye el router raíz versionado."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    # R: activation antes que users: comparten el prefijo /users/{id}/...
    api_router.include_router(auth_router)
    api_router.include_router(activation_router)
    api_router.include_router(users_router)
    api_router.include_router(admin_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]
