"""
===============================================================================
TARJETA CRC - domain/users.py (Aggregate User)
===============================================================================

Responsabilidades:
  - Representar la cuenta de usuario con sus invariantes (email, nombres, estado).
  - Controlar transiciones de estado (active / inactive / suspended).
  - Mantener el contador de versión (optimistic locking): +1 por cada mutación.

Colaboradores:
  - domain.validation: reglas de email / nombre compartidas con la capa HTTP.
  - infrastructure.repositories.*: persisten el aggregate y chequean version.

Notas:
  - El hash del password se calcula afuera (PasswordHasher port); la entidad
    solo guarda el hash.
  - Las mutaciones NO persisten: el caso de uso decide cuándo guardar.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from .validation import email_errors, name_errors


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"

    @classmethod
    def parse(cls, value: str | None) -> "UserStatus | None":
        """Devuelve el status o None si el valor no es válido."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return None


class UserValidationError(ValueError):
    """Una mutación o construcción violó un invariante del aggregate."""


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    id: UUID
    email: str
    password_hash: str
    first_name: str
    last_name: str
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    version: int = 1

    @classmethod
    def new(
        cls,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        allow_unicode_names: bool = False,
    ) -> "User":
        now = _utcnow()
        user = cls(
            id=uuid4(),
            email=normalize_email(email),
            password_hash=password_hash,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            status=UserStatus.ACTIVE,
            created_at=now,
            updated_at=now,
            version=1,
        )
        user.validate(allow_unicode_names=allow_unicode_names)
        return user

    # ------------------------------------------------------------------
    # Invariantes
    # ------------------------------------------------------------------
    def validate(self, *, allow_unicode_names: bool = False) -> None:
        if not self.id:
            raise UserValidationError("user ID cannot be empty")

        problems = email_errors(self.email)
        problems += name_errors(
            self.first_name, "first_name", "first name", allow_unicode=allow_unicode_names
        )
        problems += name_errors(
            self.last_name, "last_name", "last name", allow_unicode=allow_unicode_names
        )
        if problems:
            raise UserValidationError(problems[0].message)

        if not isinstance(self.status, UserStatus):
            raise UserValidationError(f"invalid user status: {self.status}")

    # ------------------------------------------------------------------
    # Mutaciones (cada una incrementa version)
    # ------------------------------------------------------------------
    def _touch(self) -> None:
        self.updated_at = _utcnow()
        self.version += 1

    def update_profile(
        self, first_name: str, last_name: str, *, allow_unicode_names: bool = False
    ) -> None:
        problems = name_errors(
            first_name, "first_name", "first name", allow_unicode=allow_unicode_names
        ) + name_errors(
            last_name, "last_name", "last name", allow_unicode=allow_unicode_names
        )
        if problems:
            raise UserValidationError(problems[0].message)
        self.first_name = first_name.strip()
        self.last_name = last_name.strip()
        self._touch()

    def update_email(self, email: str) -> None:
        normalized = normalize_email(email)
        problems = email_errors(normalized)
        if problems:
            raise UserValidationError(problems[0].message)
        self.email = normalized
        self._touch()

    def change_password_hash(self, password_hash: str) -> None:
        if not password_hash:
            raise UserValidationError("password hash cannot be empty")
        self.password_hash = password_hash
        self._touch()

    def change_status(self, status: UserStatus | str) -> None:
        parsed = status if isinstance(status, UserStatus) else UserStatus.parse(status)
        if parsed is None:
            raise UserValidationError(f"invalid user status: {status}")
        self.status = parsed
        self._touch()

    def activate(self) -> None:
        self.change_status(UserStatus.ACTIVE)

    def deactivate(self) -> None:
        self.change_status(UserStatus.INACTIVE)

    def suspend(self) -> None:
        self.change_status(UserStatus.SUSPENDED)

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_suspended(self) -> bool:
        return self.status == UserStatus.SUSPENDED

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
