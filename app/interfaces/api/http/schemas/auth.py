"""
===============================================================================
TARJETA CRC - schemas/auth.py
===============================================================================

Módulo:
    Schemas HTTP para autenticación por sesión

Responsabilidades:
    - Requests de login / registro / cambio de contraseña.
    - Responses con usuario + sesión y mensajes estables.

Notas:
    - Los requests NO validan reglas de negocio: los campos faltantes llegan
      como "" y el caso de uso responde VALIDATION_ERROR con detalle por campo.
===============================================================================
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .common import SessionDetailResponse, SessionResponse, UserResponse


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class RegisterRequest(BaseModel):
    email: str = ""
    password: str = ""
    first_name: str = ""
    last_name: str = ""


class ChangePasswordRequest(BaseModel):
    old_password: str = ""
    new_password: str = ""


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class AuthResponse(BaseModel):
    user: UserResponse
    session: SessionResponse
    message: str


class ValidateSessionResponse(BaseModel):
    valid: bool
    user: UserResponse
    session: SessionResponse


class RefreshSessionResponse(BaseModel):
    message: str
    data: SessionResponse


class SessionsResponse(BaseModel):
    sessions: list[SessionDetailResponse] = Field(default_factory=list)
    total: int = 0


class CsrfTokenResponse(BaseModel):
    csrf_token: str
