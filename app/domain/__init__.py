"""
===============================================================================
TARJETA CRC - domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el “surface area” del dominio.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .activation import ActivationToken
from .audit import AuditEvent
from .events import DomainEvent
from .repositories import (
    ActivationTokenRepository,
    AuditEventRepository,
    SessionRepository,
    UnitOfWork,
    UserFilter,
    UserRepository,
)
from .services import EventPublisher, PasswordHasher
from .sessions import Session
from .users import User, UserStatus, UserValidationError
from .validation import FieldError

__all__ = [
    # Entities
    "User",
    "UserStatus",
    "UserValidationError",
    "Session",
    "ActivationToken",
    "AuditEvent",
    "DomainEvent",
    "FieldError",
    # Repositories
    "UserRepository",
    "UserFilter",
    "SessionRepository",
    "ActivationTokenRepository",
    "AuditEventRepository",
    "UnitOfWork",
    # Services
    "PasswordHasher",
    "EventPublisher",
]
