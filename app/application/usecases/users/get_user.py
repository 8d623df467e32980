"""
===============================================================================
USE CASES: Get User / Get User By Email (queries)
===============================================================================

Responsibilities:
    - Cargar un usuario por id o por email (normalizado).
    - USER_NOT_FOUND si no existe.

Collaborators:
    - UserRepository
    - user_results
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.repositories import UserRepository
from ....domain.users import normalize_email
from ....domain.validation import email_errors
from .user_results import UserResult, user_not_found, validation_failed


class GetUserUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, user_id: UUID) -> UserResult:
        user = self._users.get_by_id(user_id)
        if user is None:
            return UserResult(error=user_not_found())
        return UserResult(user=user)


class GetUserByEmailUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, email: str) -> UserResult:
        email = normalize_email(email or "")
        errors = email_errors(email)
        if errors:
            return UserResult(error=validation_failed(errors))

        user = self._users.get_by_email(email)
        if user is None:
            return UserResult(error=user_not_found())
        return UserResult(user=user)
