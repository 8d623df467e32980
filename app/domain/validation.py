"""
===============================================================================
TARJETA CRC - domain/validation.py (Reglas de validación por campo)
===============================================================================

Responsabilidades:
  - Reglas puras por campo (email, password, nombres, version, status).
  - Validadores por “forma de request” que devuelven una lista ORDENADA de
    FieldError (lista vacía = válido).
  - Juntar TODAS las violaciones de un campo antes de devolver.

Colaboradores:
  - domain.users (invariantes del aggregate)
  - application.usecases.* (validación de comandos)

Notas:
  - Funciones puras: sin IO, sin settings globales (allow_unicode llega por parámetro).
  - Los mensajes son contrato con el frontend: no cambiarlos a la ligera.
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
NAME_MAX_LENGTH = 100
ACTIVATION_TOKEN_MIN_LENGTH = 10
LIST_DEFAULT_LIMIT = 20
LIST_MAX_LIMIT = 100

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_NAME_RE = re.compile(r"^[a-zA-Z\s\-']+$")
_UPPER_RE = re.compile(r"[A-Z]")
_LOWER_RE = re.compile(r"[a-z]")
_DIGIT_RE = re.compile(r"\d")

_VALID_STATUSES = frozenset({"active", "inactive", "suspended"})

COMMON_PASSWORDS: frozenset[str] = frozenset(
    {
        "password",
        "123456",
        "123456789",
        "12345678",
        "12345",
        "1234567",
        "password123",
        "admin",
        "qwerty",
        "abc123",
        "letmein",
        "monkey",
        "1234567890",
        "dragon",
        "111111",
        "baseball",
        "iloveyou",
        "trustno1",
        "1234",
        "sunshine",
    }
)


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


def to_dicts(errors: Iterable[FieldError]) -> list[dict[str, str]]:
    return [e.to_dict() for e in errors]


# =============================================================================
# Reglas por campo
# =============================================================================


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))


def has_password_complexity(password: str) -> bool:
    return bool(
        _UPPER_RE.search(password)
        and _LOWER_RE.search(password)
        and _DIGIT_RE.search(password)
    )


def is_valid_name(name: str, *, allow_unicode: bool = False) -> bool:
    if not name:
        return False
    if not allow_unicode:
        return bool(_NAME_RE.match(name))
    return all(ch.isalpha() or ch.isspace() or ch in "-'" for ch in name)


def is_common_password(password: str) -> bool:
    return password in COMMON_PASSWORDS


def email_errors(email: str, field: str = "email") -> list[FieldError]:
    if not email:
        return [FieldError(field, "email is required")]
    errors: list[FieldError] = []
    if not is_valid_email(email):
        errors.append(FieldError(field, "invalid email format"))
    if len(email) > EMAIL_MAX_LENGTH:
        errors.append(
            FieldError(field, f"email cannot exceed {EMAIL_MAX_LENGTH} characters")
        )
    return errors


def password_errors(
    password: str, field: str = "password", label: str = "password"
) -> list[FieldError]:
    if not password:
        return [FieldError(field, f"{label} is required")]
    errors: list[FieldError] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(
            FieldError(
                field, f"{label} must be at least {PASSWORD_MIN_LENGTH} characters long"
            )
        )
    if len(password) > PASSWORD_MAX_LENGTH:
        errors.append(
            FieldError(field, f"{label} cannot exceed {PASSWORD_MAX_LENGTH} characters")
        )
    if not has_password_complexity(password):
        errors.append(
            FieldError(
                field,
                f"{label} must contain at least one uppercase letter, "
                "one lowercase letter, and one digit",
            )
        )
    return errors


def name_errors(
    name: str, field: str, label: str, *, allow_unicode: bool = False
) -> list[FieldError]:
    if not name or not name.strip():
        return [FieldError(field, f"{label} is required")]
    errors: list[FieldError] = []
    if len(name) > NAME_MAX_LENGTH:
        errors.append(
            FieldError(field, f"{label} cannot exceed {NAME_MAX_LENGTH} characters")
        )
    if not is_valid_name(name, allow_unicode=allow_unicode):
        errors.append(FieldError(field, f"{label} contains invalid characters"))
    return errors


def version_errors(version: int | None) -> list[FieldError]:
    if version is None or version < 1:
        return [FieldError("version", "version must be greater than 0")]
    return []


def status_errors(status: str | None) -> list[FieldError]:
    if (status or "").strip().lower() not in _VALID_STATUSES:
        return [FieldError("status", "invalid user status")]
    return []


# =============================================================================
# Validadores por forma de request
# =============================================================================


def validate_login(email: str, password: str) -> list[FieldError]:
    errors = email_errors(email)
    if not password:
        errors.append(FieldError("password", "password is required"))
    return errors


def validate_registration(
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    *,
    allow_unicode_names: bool = False,
) -> list[FieldError]:
    return (
        email_errors(email)
        + password_errors(password)
        + name_errors(
            first_name, "first_name", "first name", allow_unicode=allow_unicode_names
        )
        + name_errors(
            last_name, "last_name", "last name", allow_unicode=allow_unicode_names
        )
    )


# R: Crear usuario (admin) comparte reglas con el registro.
validate_create_user = validate_registration


def validate_password_change(old_password: str, new_password: str) -> list[FieldError]:
    errors: list[FieldError] = []
    if not old_password:
        errors.append(FieldError("old_password", "old password is required"))
    errors += password_errors(new_password, "new_password", "new password")
    if old_password and new_password and old_password == new_password:
        errors.append(
            FieldError(
                "new_password",
                "new password must be different from the current password",
            )
        )
    return errors


def validate_update_user(
    first_name: str,
    last_name: str,
    version: int | None,
    *,
    allow_unicode_names: bool = False,
) -> list[FieldError]:
    return (
        name_errors(
            first_name, "first_name", "first name", allow_unicode=allow_unicode_names
        )
        + name_errors(
            last_name, "last_name", "last name", allow_unicode=allow_unicode_names
        )
        + version_errors(version)
    )


def validate_update_email(email: str, version: int | None) -> list[FieldError]:
    return email_errors(email) + version_errors(version)


def validate_change_user_password(
    old_password: str, new_password: str, version: int | None
) -> list[FieldError]:
    errors: list[FieldError] = []
    if not old_password:
        errors.append(FieldError("old_password", "old password is required"))
    errors += password_errors(new_password, "new_password", "new password")
    return errors + version_errors(version)


def validate_change_status(status: str | None, version: int | None) -> list[FieldError]:
    return status_errors(status) + version_errors(version)


def validate_list_users(
    limit: int, offset: int, status: str | None
) -> list[FieldError]:
    errors: list[FieldError] = []
    if limit > LIST_MAX_LIMIT:
        errors.append(FieldError("limit", f"limit cannot exceed {LIST_MAX_LIMIT}"))
    if offset < 0:
        errors.append(FieldError("offset", "offset cannot be negative"))
    if status is not None and status != "":
        errors += status_errors(status)
    return errors


def validate_activation_token(token: str) -> list[FieldError]:
    if not token:
        return [FieldError("token", "activation token is required")]
    if len(token) < ACTIVATION_TOKEN_MIN_LENGTH:
        return [FieldError("token", "invalid activation token format")]
    return []


def normalize_list_limit(limit: int | None) -> int:
    """limit <= 0 (o ausente) => default."""
    if limit is None or limit <= 0:
        return LIST_DEFAULT_LIMIT
    return limit


def common_password_errors(password: str, field: str = "password") -> list[FieldError]:
    if password and is_common_password(password):
        return [
            FieldError(field, "password is too common, please choose a stronger password")
        ]
    return []
