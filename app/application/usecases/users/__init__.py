"""
===============================================================================
USER USE CASES PACKAGE (Public API / Exports)
===============================================================================

Punto único de importación para los casos de uso de gestión de usuarios,
sus inputs y resultados.
===============================================================================
"""

from __future__ import annotations

from .change_user_password import ChangeUserPasswordUseCase
from .change_user_status import ChangeUserStatusUseCase
from .create_user import CreateUserInput, CreateUserUseCase
from .delete_user import DeleteUserUseCase
from .get_user import GetUserByEmailUseCase, GetUserUseCase
from .list_users import ListUsersInput, ListUsersUseCase
from .update_user import UpdateUserEmailUseCase, UpdateUserUseCase
from .user_results import (
    DeleteUserResult,
    UserError,
    UserErrorCode,
    UserListResult,
    UserResult,
)

__all__ = [
    # Use cases
    "CreateUserUseCase",
    "GetUserUseCase",
    "GetUserByEmailUseCase",
    "ListUsersUseCase",
    "UpdateUserUseCase",
    "UpdateUserEmailUseCase",
    "ChangeUserPasswordUseCase",
    "ChangeUserStatusUseCase",
    "DeleteUserUseCase",
    # Inputs
    "CreateUserInput",
    "ListUsersInput",
    # Results
    "UserResult",
    "UserListResult",
    "DeleteUserResult",
    "UserError",
    "UserErrorCode",
]
