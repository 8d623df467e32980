"""
===============================================================================
USE CASE: List Users (query con filtros + paginación)
===============================================================================

Responsibilities:
    - Validar limit/offset/status.
    - Normalizar limit (<= 0 -> 20) y construir UserFilter.
    - Devolver página + total + has_more.

Collaborators:
    - UserRepository.list(UserFilter) -> (users, total)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ....domain.repositories import UserFilter, UserRepository
from ....domain.users import UserStatus
from ....domain.validation import normalize_list_limit, validate_list_users
from .user_results import UserListResult, validation_failed


@dataclass(frozen=True)
class ListUsersInput:
    status: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    limit: int = 0
    offset: int = 0


class ListUsersUseCase:
    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, input_data: ListUsersInput) -> UserListResult:
        errors = validate_list_users(input_data.limit, input_data.offset, input_data.status)
        if errors:
            return UserListResult(error=validation_failed(errors))

        limit = normalize_list_limit(input_data.limit)
        user_filter = UserFilter(
            status=UserStatus.parse(input_data.status) if input_data.status else None,
            email=input_data.email or None,
            first_name=input_data.first_name or None,
            last_name=input_data.last_name or None,
            created_after=input_data.created_after,
            created_before=input_data.created_before,
            limit=limit,
            offset=input_data.offset,
        )

        users, total = self._users.list(user_filter)
        return UserListResult(
            users=users,
            total=total,
            limit=limit,
            offset=input_data.offset,
            has_more=input_data.offset + len(users) < total,
        )
