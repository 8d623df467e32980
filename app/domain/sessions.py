"""
===============================================================================
TARJETA CRC - domain/sessions.py (Session)
===============================================================================

Responsabilidades:
  - Representar una sesión autenticada (id opaco de 256 bits en hex).
  - Decidir validez: activa y no expirada.
  - Extender / invalidar la sesión.

Colaboradores:
  - application.usecases.auth (crea, valida, refresca, elimina)
  - infrastructure.repositories.* (persistencia)
===============================================================================
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID

DEFAULT_SESSION_DURATION = timedelta(hours=24)
SESSION_CLEANUP_INTERVAL = timedelta(hours=1)
SESSION_ID_BYTES = 32


def generate_session_id() -> str:
    return secrets.token_hex(SESSION_ID_BYTES)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    id: str
    user_id: UUID
    ip_address: str = ""
    user_agent: str = ""
    created_at: datetime = field(default_factory=_utcnow)
    expires_at: datetime = field(
        default_factory=lambda: _utcnow() + DEFAULT_SESSION_DURATION
    )
    is_active: bool = True

    @classmethod
    def new(
        cls,
        user_id: UUID,
        *,
        ip_address: str = "",
        user_agent: str = "",
        duration: timedelta = DEFAULT_SESSION_DURATION,
    ) -> "Session":
        now = _utcnow()
        return cls(
            id=generate_session_id(),
            user_id=user_id,
            ip_address=ip_address or "",
            user_agent=user_agent or "",
            created_at=now,
            expires_at=now + duration,
            is_active=True,
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or _utcnow()) >= self.expires_at

    def is_valid(self, now: datetime | None = None) -> bool:
        return self.is_active and not self.is_expired(now)

    def extend(self, duration: timedelta = DEFAULT_SESSION_DURATION) -> None:
        self.expires_at = _utcnow() + duration

    def invalidate(self) -> None:
        self.is_active = False
