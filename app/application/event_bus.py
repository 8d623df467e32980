"""
===============================================================================
TARJETA CRC - application/event_bus.py (Event Bus en proceso)
===============================================================================

Responsabilidades:
  - Registrar handlers por event_type (o "*" para todos).
  - Despachar eventos de forma síncrona, en orden de suscripción.
  - Fail-closed: si un handler falla, se loguea y se lanza EventPublishError
    para que la transacción que publica haga rollback.

Colaboradores:
  - domain.events.DomainEvent
  - application.audit.AuditEventHandler (suscriptor "*")
  - application.usecases.* (publican dentro de uow.transaction())

Notas:
  - Sin reintentos ni entrega asíncrona: el publish es parte del request.
  - Thread-safe para subscribe/unsubscribe (lock); el dispatch usa un snapshot.
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Callable, Iterable

from ..crosscutting.exceptions import EventPublishError
from ..crosscutting.logger import logger
from ..domain.events import DomainEvent

EventHandler = Callable[[DomainEvent], None]

WILDCARD = "*"


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

    def handlers_for(self, event_type: str) -> list[EventHandler]:
        with self._lock:
            return [
                *self._handlers.get(event_type, []),
                *self._handlers.get(WILDCARD, []),
            ]

    def publish(self, event: DomainEvent) -> None:
        for handler in self.handlers_for(event.event_type):
            try:
                handler(event)
            except Exception as exc:
                logger.error(
                    "Handler de evento falló",
                    exc_info=True,
                    extra={
                        "event_type": event.event_type,
                        "event_id": str(event.event_id),
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                    },
                )
                raise EventPublishError(
                    f"failed to publish {event.event_type}", original_error=exc
                ) from exc

        logger.debug(
            "Evento publicado",
            extra={"event_type": event.event_type, "event_id": str(event.event_id)},
        )

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.publish(event)
