"""
===============================================================================
TARJETA CRC - app/audit.py (Auditoría de eventos de dominio)
===============================================================================

Responsabilidades:
  - Suscribirse a TODOS los eventos del bus ("*").
  - Traducir cada DomainEvent a una fila AuditEvent (action/resource/details).
  - Persistir vía AuditEventRepository dentro de la transacción en curso.

Colaboradores:
  - app.domain.audit.AuditEvent / audit_action_for
  - app.domain.repositories.AuditEventRepository
  - app.application.event_bus.EventBus
  - app.context (request_id para correlación)

Decisiones:
  - NO es best-effort: si la escritura falla, el bus lanza EventPublishError y la
    operación completa hace rollback (el cambio y su auditoría van juntos).
  - details = payload del evento, sanitizado a tipos JSON.
===============================================================================
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from .application.event_bus import WILDCARD, EventBus
from .context import get_context_dict
from .domain.audit import AuditEvent, audit_action_for
from .domain.events import DomainEvent
from .domain.repositories import AuditEventRepository

_RESOURCE_ID_KEYS = ("session_id", "token_id")


def _sanitize(value: Any) -> Any:
    """
    Convierte valores a tipos serializables para JSON.
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, dict):
        return {str(k): _sanitize(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_sanitize(v) for v in value]

    return str(value)


def build_audit_event(event: DomainEvent) -> AuditEvent:
    action, resource = audit_action_for(event.event_type)
    details = _sanitize(event.payload())

    # R: Para eventos de sesión/token el recurso es la sesión/token, no el usuario.
    resource_id = event.aggregate_id
    for key in _RESOURCE_ID_KEYS:
        if resource != "user" and details.get(key):
            resource_id = str(details[key])
            break

    metadata: dict[str, Any] = {"event_version": event.version}
    metadata.update(get_context_dict())

    return AuditEvent(
        id=uuid4(),
        event_id=event.event_id,
        event_type=event.event_type,
        aggregate_id=event.aggregate_id,
        aggregate_type=event.aggregate_type,
        user_id=event.aggregate_id,
        action=action,
        resource=resource,
        resource_id=resource_id,
        details=details,
        occurred_at=event.occurred_at,
        metadata=metadata,
    )


class AuditEventHandler:
    """Suscriptor "*" que persiste cada evento publicado."""

    def __init__(self, repository: AuditEventRepository) -> None:
        self._repository = repository

    def __call__(self, event: DomainEvent) -> None:
        self._repository.record_event(build_audit_event(event))


def register_audit_handler(bus: EventBus, repository: AuditEventRepository) -> None:
    bus.subscribe(WILDCARD, AuditEventHandler(repository))
