"""
===============================================================================
TARJETA CRC - schemas/admin.py
===============================================================================

Módulo:
    Schemas HTTP para Admin / Mantenimiento / Auditoría

Responsabilidades:
    - DTOs de response para endpoints administrativos (cleanup, audit).
    - Mantener contratos estables para observabilidad.

Colaboradores:
    - domain.audit.AuditEvent
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class CleanupRes(BaseModel):
    """Resultado del barrido de sesiones y tokens vencidos."""

    sessions_deleted: int
    tokens_deleted: int


class AuditEventRes(BaseModel):
    """Evento de auditoría serializable."""

    id: UUID
    event_id: UUID
    event_type: str
    aggregate_id: str
    aggregate_type: str
    user_id: str | None = None
    action: str
    resource: str
    resource_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime


class AuditEventsRes(BaseModel):
    """Listado paginado simple (offset-based)."""

    events: list[AuditEventRes]
    next_offset: int | None = None
