"""
===============================================================================
TARJETA CRC - app/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer routers segmentados por feature para ser incluidos por el
      router principal.
    - Mantener importaciones limpias y explícitas.

Collaborators:
    - routers.auth
    - routers.users
    - routers.activation
    - routers.admin

Notas:
    - Este archivo NO define endpoints. Solo re-exporta routers.
===============================================================================
"""

from .activation import router as activation_router
from .admin import router as admin_router
from .auth import router as auth_router
from .users import router as users_router

__all__ = [
    "activation_router",
    "admin_router",
    "auth_router",
    "users_router",
]
