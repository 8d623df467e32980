"""
===============================================================================
USE CASES: Update User (profile) / Update User Email
===============================================================================

Business Goal:
    Modificar nombre/apellido o email de un usuario con optimistic locking:
    el cliente envía la versión que leyó; si no coincide, 409.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Classes:
    UpdateUserUseCase, UpdateUserEmailUseCase

Responsibilities:
    - Validar comando (nombres/email + version >= 1).
    - Cargar usuario y comparar versión esperada.
    - Mutar el aggregate (version + 1) y persistir dentro de uow.transaction().
    - Publicar user.updated (cambios old/new) o user.email_changed.

Collaborators:
    - UserRepository, UnitOfWork, EventPublisher
    - user_results
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import (
    DuplicateKeyError,
    EntityNotFoundError,
    OptimisticLockError,
)
from ....domain.events import UserEmailChanged, UserUpdated
from ....domain.repositories import UnitOfWork, UserRepository
from ....domain.services import EventPublisher
from ....domain.users import normalize_email
from ....domain.validation import validate_update_email, validate_update_user
from .user_results import (
    UserResult,
    stale_version,
    user_already_exists,
    user_not_found,
    validation_failed,
)


class UpdateUserUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        unit_of_work: UnitOfWork,
        event_publisher: EventPublisher,
        *,
        allow_unicode_names: bool = False,
    ) -> None:
        self._users = user_repository
        self._uow = unit_of_work
        self._events = event_publisher
        self._allow_unicode_names = allow_unicode_names

    def execute(
        self, user_id: UUID, *, first_name: str, last_name: str, version: int
    ) -> UserResult:
        errors = validate_update_user(
            first_name,
            last_name,
            version,
            allow_unicode_names=self._allow_unicode_names,
        )
        if errors:
            return UserResult(error=validation_failed(errors))

        try:
            with self._uow.transaction():
                user = self._users.get_by_id(user_id)
                if user is None:
                    return UserResult(error=user_not_found())
                if user.version != version:
                    return UserResult(error=stale_version())

                changes = {
                    "first_name": {"old": user.first_name, "new": first_name.strip()},
                    "last_name": {"old": user.last_name, "new": last_name.strip()},
                }
                user.update_profile(
                    first_name,
                    last_name,
                    allow_unicode_names=self._allow_unicode_names,
                )
                self._users.update(user)
                self._events.publish(
                    UserUpdated(aggregate_id=str(user.id), changes=changes)
                )
        except OptimisticLockError:
            return UserResult(error=stale_version())
        except EntityNotFoundError:
            return UserResult(error=user_not_found())

        return UserResult(user=user)


class UpdateUserEmailUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        unit_of_work: UnitOfWork,
        event_publisher: EventPublisher,
    ) -> None:
        self._users = user_repository
        self._uow = unit_of_work
        self._events = event_publisher

    def execute(self, user_id: UUID, *, email: str, version: int) -> UserResult:
        new_email = normalize_email(email)
        errors = validate_update_email(new_email, version)
        if errors:
            return UserResult(error=validation_failed(errors))

        try:
            with self._uow.transaction():
                user = self._users.get_by_id(user_id)
                if user is None:
                    return UserResult(error=user_not_found())
                if user.version != version:
                    return UserResult(error=stale_version())

                if new_email != user.email and self._users.exists_by_email(new_email):
                    return UserResult(error=user_already_exists())

                previous_email = user.email
                user.update_email(new_email)
                self._users.update(user)
                self._events.publish(
                    UserEmailChanged(
                        aggregate_id=str(user.id),
                        previous_email=previous_email,
                        new_email=user.email,
                    )
                )
        except OptimisticLockError:
            return UserResult(error=stale_version())
        except EntityNotFoundError:
            return UserResult(error=user_not_found())
        except DuplicateKeyError:
            return UserResult(error=user_already_exists())

        return UserResult(user=user)
