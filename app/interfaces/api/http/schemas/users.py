"""
===============================================================================
TARJETA CRC - schemas/users.py
===============================================================================

Módulo:
    Schemas HTTP para gestión de usuarios

Responsabilidades:
    - Requests de alta, perfil, email, contraseña y estado (con version).
    - Responses envolventes {message, data} y listado paginado.

Colaboradores:
    - schemas.common.UserResponse
===============================================================================
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .common import UserResponse


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateUserRequest(BaseModel):
    email: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""


class UpdateUserRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    version: int = 0


class UpdateEmailRequest(BaseModel):
    email: str = ""
    version: int = 0


class ChangeUserPasswordRequest(BaseModel):
    old_password: str = ""
    new_password: str = ""
    version: int = 0


class ChangeStatusRequest(BaseModel):
    status: str = ""
    version: int = 0
    changed_by: str = ""
    reason: str = ""


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserEnvelope(BaseModel):
    """{message, data} para mutaciones."""

    message: str
    data: UserResponse


class UserListResponse(BaseModel):
    users: list[UserResponse] = Field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0
    has_more: bool = False
