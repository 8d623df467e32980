"""
===============================================================================
TARJETA CRC - domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios (Protocols)

Responsabilidades:
    - Definir contratos para hashing de passwords y publicación de eventos.
    - Mantener el dominio independiente de librerías concretas (argon2, bus).

Colaboradores:
    - identity/passwords.py: Argon2PasswordHasher.
    - application/event_bus.py: EventBus.
    - application/usecases: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
===============================================================================
"""

from __future__ import annotations

from typing import Iterable, Protocol

from .events import DomainEvent


class PasswordHasher(Protocol):
    """Contrato para hashear / verificar passwords."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        """True si coincide; False ante mismatch o hash corrupto."""
        ...


class EventPublisher(Protocol):
    """Contrato para publicar eventos de dominio (síncrono, fail-closed)."""

    def publish(self, event: DomainEvent) -> None:
        ...

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        ...
