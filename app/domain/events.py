"""
===============================================================================
TARJETA CRC - domain/events.py (Eventos de dominio tipados)
===============================================================================

Responsabilidades:
  - Un dataclass inmutable por tipo de evento (payload tipado, sin dicts dinámicos).
  - Contrato común: event_id, event_type, aggregate_id, aggregate_type,
    occurred_at, version, payload().

Colaboradores:
  - application.event_bus (publica / despacha por event_type)
  - application.audit (persiste cada evento en audit_events)
  - application.usecases.* (construyen eventos luego del cambio de estado)

Notas:
  - aggregate_id es siempre el id del usuario afectado (str).
  - payload() devuelve un dict JSON-safe con los campos tipados.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID, uuid4

# -----------------------------------------------------------------------------
# Tipos de evento (strings estables: se persisten en audit_events)
# -----------------------------------------------------------------------------
USER_CREATED = "user.created"
USER_UPDATED = "user.updated"
USER_DELETED = "user.deleted"
USER_STATUS_CHANGED = "user.status_changed"
USER_EMAIL_CHANGED = "user.email_changed"
USER_ACTIVATION_REQUESTED = "user.activation_requested"
USER_ACTIVATED = "user.activated"
USER_DEACTIVATED = "user.deactivated"
USER_ACTIVATION_TOKEN_EXPIRED = "user.activation_token_expired"

AUTH_USER_LOGGED_IN = "auth.user.logged_in"
AUTH_USER_REGISTERED = "auth.user.registered"
AUTH_USER_LOGGED_OUT = "auth.user.logged_out"
AUTH_SESSION_EXPIRED = "auth.session.expired"
AUTH_PASSWORD_CHANGED = "auth.password.changed"

_BASE_FIELDS = frozenset({"event_id", "aggregate_id", "occurred_at", "version"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _json_safe(value: Any) -> Any:
    if isinstance(value, (UUID, datetime)):
        return value.isoformat() if isinstance(value, datetime) else str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainEvent:
    event_type: ClassVar[str] = "domain.event"
    aggregate_type: ClassVar[str] = "User"

    aggregate_id: str
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    version: int = 1

    def payload(self) -> dict[str, Any]:
        return {
            f.name: _json_safe(getattr(self, f.name))
            for f in fields(self)
            if f.name not in _BASE_FIELDS
        }


# =============================================================================
# Eventos de usuario
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class UserCreated(DomainEvent):
    event_type: ClassVar[str] = USER_CREATED

    email: str
    first_name: str
    last_name: str
    status: str


@dataclass(frozen=True, slots=True, kw_only=True)
class UserUpdated(DomainEvent):
    event_type: ClassVar[str] = USER_UPDATED

    changes: dict[str, Any]


@dataclass(frozen=True, slots=True, kw_only=True)
class UserDeleted(DomainEvent):
    event_type: ClassVar[str] = USER_DELETED

    email: str
    deleted_by: str = ""
    reason: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class UserStatusChanged(DomainEvent):
    event_type: ClassVar[str] = USER_STATUS_CHANGED

    previous_status: str
    new_status: str
    changed_by: str = ""
    reason: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class UserEmailChanged(DomainEvent):
    event_type: ClassVar[str] = USER_EMAIL_CHANGED

    previous_email: str
    new_email: str


@dataclass(frozen=True, slots=True, kw_only=True)
class UserActivationRequested(DomainEvent):
    event_type: ClassVar[str] = USER_ACTIVATION_REQUESTED

    email: str
    token_id: str
    expires_at: datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class UserActivated(DomainEvent):
    event_type: ClassVar[str] = USER_ACTIVATED

    email: str
    activated_by: str = ""
    method: str = "token"


@dataclass(frozen=True, slots=True, kw_only=True)
class UserDeactivated(DomainEvent):
    event_type: ClassVar[str] = USER_DEACTIVATED

    email: str
    deactivated_by: str = ""
    reason: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class UserActivationTokenExpired(DomainEvent):
    event_type: ClassVar[str] = USER_ACTIVATION_TOKEN_EXPIRED

    token_id: str
    expired_at: datetime


# =============================================================================
# Eventos de autenticación
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class UserLoggedIn(DomainEvent):
    event_type: ClassVar[str] = AUTH_USER_LOGGED_IN

    session_id: str
    ip_address: str = ""
    user_agent: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class UserRegistered(DomainEvent):
    event_type: ClassVar[str] = AUTH_USER_REGISTERED

    email: str
    session_id: str
    ip_address: str = ""
    user_agent: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class UserLoggedOut(DomainEvent):
    event_type: ClassVar[str] = AUTH_USER_LOGGED_OUT

    session_id: str
    logout_type: str = "manual"


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionExpired(DomainEvent):
    event_type: ClassVar[str] = AUTH_SESSION_EXPIRED

    session_id: str
    expired_at: datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class PasswordChanged(DomainEvent):
    event_type: ClassVar[str] = AUTH_PASSWORD_CHANGED

    ip_address: str = ""
    user_agent: str = ""
    sessions_revoked: int = 0
