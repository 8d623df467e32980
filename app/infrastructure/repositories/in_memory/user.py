"""
============================================================
TARJETA CRC - infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev).
  - Replicar el contrato de Postgres: unicidad de email, optimistic locking,
    filtros de listado y ordering created_at DESC.

Collaborators:
  - domain.users.User
  - domain.repositories.UserRepository / UserFilter
  - InMemoryUnitOfWork (snapshot / restore)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Se guardan y devuelven copias: el caller nunca comparte instancia con la "tabla",
    así una mutación sin update() no altera lo almacenado.
============================================================
"""

from __future__ import annotations

import copy
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....crosscutting.exceptions import (
    DuplicateKeyError,
    EntityNotFoundError,
    OptimisticLockError,
)
from ....domain.repositories import UserFilter
from ....domain.users import User


def _matches(user: User, user_filter: UserFilter) -> bool:
    if user_filter.status is not None and user.status != user_filter.status:
        return False
    # R: Emula ILIKE '%value%'.
    for value, actual in (
        (user_filter.email, user.email),
        (user_filter.first_name, user.first_name),
        (user_filter.last_name, user.last_name),
    ):
        if value and value.lower() not in actual.lower():
            return False
    if user_filter.created_after is not None and user.created_at < user_filter.created_after:
        return False
    if user_filter.created_before is not None and user.created_at > user_filter.created_before:
        return False
    return True


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    def _email_taken(self, email: str, *, exclude: UUID | None = None) -> bool:
        return any(u.email == email and u.id != exclude for u in self._users.values())

    def create(self, user: User) -> None:
        with self._lock:
            if user.id in self._users or self._email_taken(user.email):
                raise DuplicateKeyError(f"user {user.email} already exists")
            self._users[user.id] = copy.copy(user)

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return copy.copy(user) if user else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return copy.copy(user)
            return None

    def exists_by_email(self, email: str) -> bool:
        with self._lock:
            return self._email_taken(email)

    def update(self, user: User) -> None:
        with self._lock:
            stored = self._users.get(user.id)
            if stored is None:
                raise EntityNotFoundError(f"user {user.id} not found")
            if stored.version != user.version - 1:
                raise OptimisticLockError(
                    f"user {user.id} was modified concurrently "
                    f"(expected version {user.version - 1}, found {stored.version})"
                )
            if self._email_taken(user.email, exclude=user.id):
                raise DuplicateKeyError(f"user {user.email} already exists")
            self._users[user.id] = copy.copy(user)

    def delete(self, user_id: UUID) -> None:
        with self._lock:
            if self._users.pop(user_id, None) is None:
                raise EntityNotFoundError(f"user {user_id} not found")

    def list(self, user_filter: UserFilter) -> tuple[List[User], int]:
        with self._lock:
            matched = [u for u in self._users.values() if _matches(u, user_filter)]

        matched.sort(key=lambda u: (u.created_at, str(u.id)), reverse=True)
        start = max(user_filter.offset, 0)
        page = matched[start : start + user_filter.limit]
        return [copy.copy(u) for u in page], len(matched)

    # -------------------------------------------------------------------------
    # UnitOfWork / testing helpers
    # -------------------------------------------------------------------------
    def snapshot(self) -> Dict[UUID, User]:
        with self._lock:
            return {k: copy.copy(v) for k, v in self._users.items()}

    def restore(self, state: Dict[UUID, User]) -> None:
        with self._lock:
            self._users = state

    def clear(self) -> None:
        with self._lock:
            self._users.clear()
