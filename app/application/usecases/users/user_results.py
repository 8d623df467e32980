"""
===============================================================================
USER USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Modelos compartidos de resultados y errores para los casos de uso de
    gestión de usuarios, con un contrato estable para la capa HTTP.

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar excepciones
      de negocio; el router traduce UserErrorCode -> status HTTP.
    - Fallas de infraestructura (DatabaseError) sí se propagan: terminan en
      500 INTERNAL_ERROR vía el handler global.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    user_results models (module)

Responsibilities:
    - UserErrorCode: categorías estables de error.
    - UserError: code + message (+ field / details para validación).
    - UserResult / UserListResult / DeleteUserResult.
    - Helpers para construir errores frecuentes de forma consistente.

Collaborators:
    - domain.users.User
    - domain.validation.FieldError
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Sequence

from ....domain.users import User
from ....domain.validation import FieldError, to_dicts


class UserErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    OPTIMISTIC_LOCK_ERROR = "OPTIMISTIC_LOCK_ERROR"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class UserError:
    code: UserErrorCode
    message: str
    field: str | None = None
    details: list[dict[str, Any]] | None = None


@dataclass
class UserResult:
    """
    Contrato:
      - error is None => user presente
      - error != None => user None
    """

    user: User | None = None
    error: UserError | None = None


@dataclass
class UserListResult:
    users: List[User] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0
    has_more: bool = False
    error: UserError | None = None


@dataclass
class DeleteUserResult:
    deleted: bool = False
    error: UserError | None = None


# -----------------------------------------------------------------------------
# Builders de errores frecuentes
# -----------------------------------------------------------------------------
def validation_failed(errors: Sequence[FieldError]) -> UserError:
    """Varios FieldError -> un VALIDATION_ERROR con details (y field del primero)."""
    return UserError(
        code=UserErrorCode.VALIDATION_ERROR,
        message="Validation failed",
        field=errors[0].field if errors else None,
        details=to_dicts(errors),
    )


def validation_error(field_name: str, message: str) -> UserError:
    return UserError(
        code=UserErrorCode.VALIDATION_ERROR, message=message, field=field_name
    )


def user_not_found() -> UserError:
    return UserError(code=UserErrorCode.USER_NOT_FOUND, message="User not found")


def user_already_exists() -> UserError:
    return UserError(
        code=UserErrorCode.USER_ALREADY_EXISTS,
        message="User with this email already exists",
    )


def stale_version() -> UserError:
    return UserError(
        code=UserErrorCode.OPTIMISTIC_LOCK_ERROR,
        message="User was modified by another request. Please refresh and try again",
    )


def business_rule(message: str) -> UserError:
    return UserError(code=UserErrorCode.BUSINESS_RULE_VIOLATION, message=message)
