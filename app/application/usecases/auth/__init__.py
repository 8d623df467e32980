"""
===============================================================================
AUTH USE CASES PACKAGE (Public API / Exports)
===============================================================================

Login / registro / logout / sesiones / cambio de password.
===============================================================================
"""

from __future__ import annotations

from .auth_results import (
    AuthError,
    AuthErrorCode,
    AuthResult,
    ChangePasswordResult,
    LogoutResult,
    SessionListResult,
    SessionResult,
    SessionValidationResult,
)
from .change_password import ChangePasswordInput, ChangePasswordUseCase
from .login import LoginInput, LoginUseCase
from .logout import LogoutUseCase
from .register import RegisterInput, RegisterUseCase
from .sessions import (
    CleanupExpiredSessionsUseCase,
    ListUserSessionsUseCase,
    RefreshSessionUseCase,
    ValidateSessionUseCase,
)

__all__ = [
    # Use cases
    "LoginUseCase",
    "RegisterUseCase",
    "LogoutUseCase",
    "ValidateSessionUseCase",
    "RefreshSessionUseCase",
    "ChangePasswordUseCase",
    "ListUserSessionsUseCase",
    "CleanupExpiredSessionsUseCase",
    # Inputs
    "LoginInput",
    "RegisterInput",
    "ChangePasswordInput",
    # Results
    "AuthResult",
    "AuthError",
    "AuthErrorCode",
    "SessionValidationResult",
    "SessionResult",
    "SessionListResult",
    "LogoutResult",
    "ChangePasswordResult",
]
