"""
===============================================================================
TARJETA CRC - schemas/activation.py
===============================================================================

Módulo:
    Schemas HTTP para activación / desactivación de cuentas
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from .common import UserResponse


class ActivateRequest(BaseModel):
    token: str = ""


class DeactivateRequest(BaseModel):
    version: int = 0
    deactivated_by: str = ""
    reason: str = ""


class ActivationTokenResponse(BaseModel):
    """El token viaja una sola vez; el envío (email) queda fuera del backend."""

    token: str
    user_id: UUID
    expires_at: datetime


class ActivationRequestedEnvelope(BaseModel):
    message: str
    data: ActivationTokenResponse


class ActivationEnvelope(BaseModel):
    message: str
    data: UserResponse
