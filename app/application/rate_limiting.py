# =============================================================================
# FILE: application/rate_limiting.py
# =============================================================================
"""
===============================================================================
SERVICE: Attempt Limiting (login / registration)
===============================================================================

Qué es:
    Limitador de intentos por key (`login:{email}`, `register:{ip}`) con
    ventana fija y bloqueo temporal.

Why:
    - Frena fuerza bruta sobre credenciales.
    - Frena creación masiva de cuentas desde una misma IP.

Arquitectura:
    - Capa: Application (policy/service)
    - Storage: memoria del proceso (dict protegido por lock)

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Component: AttemptLimiter
Responsibilities:
  - Decidir si una key puede intentar (check)
  - Registrar fallos y bloquear al superar el máximo
  - Resetear tras un intento exitoso
  - Limpiar entradas vencidas
Collaborators:
  - LoginUseCase / RegisterUseCase
  - Settings: login_* / register_*
===============================================================================
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Final

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------
LOGIN_MAX_ATTEMPTS: Final[int] = 5
LOGIN_WINDOW: Final[timedelta] = timedelta(minutes=15)
LOGIN_LOCKOUT: Final[timedelta] = timedelta(minutes=30)

REGISTER_MAX_ATTEMPTS: Final[int] = 3
REGISTER_WINDOW: Final[timedelta] = timedelta(hours=1)
REGISTER_LOCKOUT: Final[timedelta] = timedelta(hours=2)


def login_key(email: str) -> str:
    return f"login:{email.strip().lower()}"


def register_key(ip_address: str) -> str:
    return f"register:{ip_address}"


@dataclass
class AttemptRecord:
    count: int
    first_attempt: datetime
    last_attempt: datetime
    locked_until: datetime | None = None


@dataclass(frozen=True)
class RateLimitDecision:
    """
    Resultado de check().

    Attributes:
        allowed: True si el intento está permitido
        retry_after: Segundos hasta poder reintentar (0 si allowed)
    """

    allowed: bool
    retry_after: int = 0


class AttemptLimiter:
    def __init__(
        self,
        max_attempts: int,
        window: timedelta,
        lockout: timedelta,
        *,
        clock: Callable[[], datetime] | None = None,
    ):
        if max_attempts <= 0:
            raise ValueError("max_attempts debe ser > 0")
        if window.total_seconds() <= 0 or lockout.total_seconds() <= 0:
            raise ValueError("window y lockout deben ser > 0")

        self.max_attempts = int(max_attempts)
        self.window = window
        self.lockout = lockout
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._records: dict[str, AttemptRecord] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> RateLimitDecision:
        with self._lock:
            now = self._clock()
            record = self._records.get(key)
            if record is None:
                return RateLimitDecision(allowed=True)

            if record.locked_until is not None:
                if now < record.locked_until:
                    return RateLimitDecision(
                        allowed=False,
                        retry_after=_seconds_until(now, record.locked_until),
                    )
                # Lock-out vencido: arranca de cero
                del self._records[key]
                return RateLimitDecision(allowed=True)

            if now - record.first_attempt > self.window:
                del self._records[key]

            return RateLimitDecision(allowed=True)

    def record_failure(self, key: str) -> None:
        with self._lock:
            now = self._clock()
            record = self._records.get(key)

            if record is None or (
                record.locked_until is None and now - record.first_attempt > self.window
            ):
                self._records[key] = AttemptRecord(
                    count=1, first_attempt=now, last_attempt=now
                )
                record = self._records[key]
            else:
                record.count += 1
                record.last_attempt = now

            if record.count >= self.max_attempts and record.locked_until is None:
                record.locked_until = now + self.lockout

    def reset(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def cleanup(self) -> int:
        """Elimina keys sin lock activo y con ventana vencida. Retorna cuántas."""
        with self._lock:
            now = self._clock()
            stale = [
                key
                for key, record in self._records.items()
                if (record.locked_until is not None and now >= record.locked_until)
                or (record.locked_until is None and now - record.first_attempt > self.window)
            ]
            for key in stale:
                del self._records[key]
            return len(stale)

    def attempts(self, key: str) -> int:
        with self._lock:
            record = self._records.get(key)
            return record.count if record else 0


def _seconds_until(now: datetime, deadline: datetime) -> int:
    return max(1, math.ceil((deadline - now).total_seconds()))


def too_many_attempts_message(retry_after: int) -> str:
    return f"Too many attempts. Try again after {retry_after} seconds"
