"""
Resultados de los casos de uso de activación.

Reusa UserError / UserErrorCode: los códigos (USER_NOT_FOUND,
BUSINESS_RULE_VIOLATION, VALIDATION_ERROR, OPTIMISTIC_LOCK_ERROR) y su mapeo
HTTP son los mismos que en gestión de usuarios.
"""

from __future__ import annotations

from dataclasses import dataclass

from ....domain.activation import ActivationToken
from ..users.user_results import UserError, UserErrorCode, business_rule


@dataclass
class ActivationTokenResult:
    token: ActivationToken | None = None
    error: UserError | None = None


def token_error(message: str) -> UserError:
    return UserError(code=UserErrorCode.VALIDATION_ERROR, message=message, field="token")


def already_active() -> UserError:
    return business_rule("user is already active")


def already_inactive() -> UserError:
    return business_rule("user is already inactive")
