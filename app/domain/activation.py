"""
===============================================================================
TARJETA CRC - domain/activation.py (ActivationToken)
===============================================================================

Responsabilidades:
  - Token de activación de un solo uso con vencimiento.
  - Estados: emitido -> (usado | expirado).

Notas:
  - token: 32 bytes aleatorios en hex (256 bits).
  - Un token vivo por usuario: el caso de uso borra los anteriores antes de emitir.
===============================================================================
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

DEFAULT_ACTIVATION_TTL = timedelta(hours=24)
ACTIVATION_TOKEN_BYTES = 32


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ActivationToken:
    id: UUID
    user_id: UUID
    token: str
    expires_at: datetime
    used_at: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def new(
        cls, user_id: UUID, *, ttl: timedelta = DEFAULT_ACTIVATION_TTL
    ) -> "ActivationToken":
        now = _utcnow()
        return cls(
            id=uuid4(),
            user_id=user_id,
            token=secrets.token_hex(ACTIVATION_TOKEN_BYTES),
            expires_at=now + ttl,
            used_at=None,
            created_at=now,
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or _utcnow()) >= self.expires_at

    @property
    def is_used(self) -> bool:
        return self.used_at is not None

    def is_valid(self, now: datetime | None = None) -> bool:
        return not self.is_expired(now) and not self.is_used

    def mark_used(self, now: datetime | None = None) -> None:
        self.used_at = now or _utcnow()
