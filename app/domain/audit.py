"""
===============================================================================
TARJETA CRC - domain/audit.py
===============================================================================

Módulo:
    Modelos de Auditoría (Dominio)

Responsabilidades:
    - Definir la fila de auditoría derivada de un evento de dominio (AuditEvent).
    - Mapear event_type -> (action, resource).

Colaboradores:
    - domain.events: origen de los datos.
    - application.audit: construye y persiste AuditEvent.
    - domain.repositories.AuditEventRepository: persiste y lista eventos.

Notas:
    - Auditoría es append-only (no se edita ni se borra).
    - details = payload del evento; metadata = datos de correlación (request_id).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from . import events as ev

# R: event_type -> (action, resource)
_AUDIT_ACTIONS: dict[str, tuple[str, str]] = {
    ev.USER_CREATED: ("user_created", "user"),
    ev.USER_UPDATED: ("user_updated", "user"),
    ev.USER_DELETED: ("user_deleted", "user"),
    ev.USER_STATUS_CHANGED: ("user_status_changed", "user"),
    ev.USER_EMAIL_CHANGED: ("user_email_changed", "user"),
    ev.USER_ACTIVATED: ("user_activated", "user"),
    ev.USER_DEACTIVATED: ("user_deactivated", "user"),
    ev.USER_ACTIVATION_REQUESTED: ("user_activation_requested", "user"),
    ev.USER_ACTIVATION_TOKEN_EXPIRED: ("user_activation_token_expired", "user"),
    ev.AUTH_USER_LOGGED_IN: ("user_logged_in", "session"),
    ev.AUTH_USER_LOGGED_OUT: ("user_logged_out", "session"),
    ev.AUTH_USER_REGISTERED: ("user_registered", "user"),
    ev.AUTH_SESSION_EXPIRED: ("session_expired", "session"),
    ev.AUTH_PASSWORD_CHANGED: ("password_changed", "user"),
}


def audit_action_for(event_type: str) -> tuple[str, str]:
    return _AUDIT_ACTIONS.get(event_type, ("event_occurred", "unknown"))


@dataclass(slots=True)
class AuditEvent:
    """Evento de auditoría del sistema."""

    id: UUID
    event_id: UUID
    event_type: str
    aggregate_id: str
    aggregate_type: str
    action: str
    resource: str
    occurred_at: datetime
    user_id: str | None = None
    resource_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
