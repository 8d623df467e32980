"""
===============================================================================
TARJETA CRC - schemas/common.py
===============================================================================

Módulo:
    DTOs compartidos entre routers (usuario, sesión, mensajes)

Responsabilidades:
    - UserResponse: vista pública del usuario (sin password_hash).
    - SessionResponse: vista mínima de la sesión.
    - Adapters dominio -> DTO.

Colaboradores:
    - domain.users.User
    - domain.sessions.Session
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from app.domain.sessions import Session
from app.domain.users import User
from pydantic import BaseModel


class UserResponse(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    full_name: str
    status: str
    created_at: datetime
    updated_at: datetime
    version: int


class SessionResponse(BaseModel):
    id: str
    expires_at: datetime
    created_at: datetime


class SessionDetailResponse(SessionResponse):
    """Sesión con datos de origen (listado de sesiones del usuario)."""

    ip_address: str = ""
    user_agent: str = ""
    current: bool = False


class MessageResponse(BaseModel):
    message: str


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        status=user.status.value,
        created_at=user.created_at,
        updated_at=user.updated_at,
        version=user.version,
    )


def to_session_response(session: Session) -> SessionResponse:
    return SessionResponse(
        id=session.id, expires_at=session.expires_at, created_at=session.created_at
    )
