"""
===============================================================================
USE CASE: Change User Password (gestión de usuarios)
===============================================================================

Responsibilities:
    - Validar old/new password + version.
    - Verificar el password actual -> INVALID_PASSWORD si no coincide.
    - Re-hashear, persistir (version + 1) y publicar user.updated
      ({"password_changed": true}).

Notas:
    - A diferencia de auth.ChangePassword, NO revoca sesiones: es la variante
      administrativa con optimistic locking.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import EntityNotFoundError, OptimisticLockError
from ....domain.events import UserUpdated
from ....domain.repositories import UnitOfWork, UserRepository
from ....domain.services import EventPublisher, PasswordHasher
from ....domain.validation import validate_change_user_password
from .user_results import (
    UserError,
    UserErrorCode,
    UserResult,
    stale_version,
    user_not_found,
    validation_failed,
)


class ChangeUserPasswordUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        unit_of_work: UnitOfWork,
        password_hasher: PasswordHasher,
        event_publisher: EventPublisher,
    ) -> None:
        self._users = user_repository
        self._uow = unit_of_work
        self._hasher = password_hasher
        self._events = event_publisher

    def execute(
        self, user_id: UUID, *, old_password: str, new_password: str, version: int
    ) -> UserResult:
        errors = validate_change_user_password(old_password, new_password, version)
        if errors:
            return UserResult(error=validation_failed(errors))

        try:
            with self._uow.transaction():
                user = self._users.get_by_id(user_id)
                if user is None:
                    return UserResult(error=user_not_found())
                if user.version != version:
                    return UserResult(error=stale_version())

                if not self._hasher.verify(old_password, user.password_hash):
                    return UserResult(error=self._invalid_password())

                user.change_password_hash(self._hasher.hash(new_password))
                self._users.update(user)
                self._events.publish(
                    UserUpdated(
                        aggregate_id=str(user.id),
                        changes={"password_changed": True},
                    )
                )
        except OptimisticLockError:
            return UserResult(error=stale_version())
        except EntityNotFoundError:
            return UserResult(error=user_not_found())

        return UserResult(user=user)

    @staticmethod
    def _invalid_password() -> UserError:
        return UserError(
            code=UserErrorCode.INVALID_PASSWORD,
            message="Current password is incorrect",
            field="old_password",
        )
