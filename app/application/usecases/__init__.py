"""
Use Cases Layer (Business Operations)

This package exposes entry points for business logic, organized by feature.

Structure
---------
usecases/
├── auth/         # Login, registration, sessions, password change
├── users/        # User management with optimistic locking
└── activation/   # Activation tokens and account (de)activation

Usage
-----
Import from subpackages for clarity:

    from app.application.usecases.auth import LoginUseCase
    from app.application.usecases.users import CreateUserUseCase

Or use the barrel exports from this module:

    from app.application.usecases import LoginUseCase, CreateUserUseCase
"""

# Activation
from .activation import (
    ActivateUserUseCase,
    ActivationTokenResult,
    CleanupExpiredTokensUseCase,
    DeactivateUserUseCase,
    RequestActivationUseCase,
)

# Auth
from .auth import (
    AuthError,
    AuthErrorCode,
    AuthResult,
    ChangePasswordInput,
    ChangePasswordResult,
    ChangePasswordUseCase,
    CleanupExpiredSessionsUseCase,
    ListUserSessionsUseCase,
    LoginInput,
    LoginUseCase,
    LogoutResult,
    LogoutUseCase,
    RefreshSessionUseCase,
    RegisterInput,
    RegisterUseCase,
    SessionListResult,
    SessionResult,
    SessionValidationResult,
    ValidateSessionUseCase,
)

# Users
from .users import (
    ChangeUserPasswordUseCase,
    ChangeUserStatusUseCase,
    CreateUserInput,
    CreateUserUseCase,
    DeleteUserResult,
    DeleteUserUseCase,
    GetUserByEmailUseCase,
    GetUserUseCase,
    ListUsersInput,
    ListUsersUseCase,
    UpdateUserEmailUseCase,
    UpdateUserUseCase,
    UserError,
    UserErrorCode,
    UserListResult,
    UserResult,
)

__all__ = [
    # Activation
    "RequestActivationUseCase",
    "ActivateUserUseCase",
    "DeactivateUserUseCase",
    "CleanupExpiredTokensUseCase",
    "ActivationTokenResult",
    # Auth
    "LoginUseCase",
    "LoginInput",
    "RegisterUseCase",
    "RegisterInput",
    "LogoutUseCase",
    "ValidateSessionUseCase",
    "RefreshSessionUseCase",
    "ChangePasswordUseCase",
    "ChangePasswordInput",
    "ListUserSessionsUseCase",
    "CleanupExpiredSessionsUseCase",
    "AuthResult",
    "AuthError",
    "AuthErrorCode",
    "SessionValidationResult",
    "SessionResult",
    "SessionListResult",
    "LogoutResult",
    "ChangePasswordResult",
    # Users
    "CreateUserUseCase",
    "CreateUserInput",
    "GetUserUseCase",
    "GetUserByEmailUseCase",
    "ListUsersUseCase",
    "ListUsersInput",
    "UpdateUserUseCase",
    "UpdateUserEmailUseCase",
    "ChangeUserPasswordUseCase",
    "ChangeUserStatusUseCase",
    "DeleteUserUseCase",
    "UserResult",
    "UserListResult",
    "DeleteUserResult",
    "UserError",
    "UserErrorCode",
]
