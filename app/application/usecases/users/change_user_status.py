"""
===============================================================================
USE CASE: Change User Status
===============================================================================

Responsibilities:
    - Validar status (active | inactive | suspended) + version.
    - Cambiar estado con optimistic locking.
    - Publicar user.status_changed (previous/new, changed_by, reason).
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import EntityNotFoundError, OptimisticLockError
from ....domain.events import UserStatusChanged
from ....domain.repositories import UnitOfWork, UserRepository
from ....domain.services import EventPublisher
from ....domain.users import UserStatus
from ....domain.validation import validate_change_status
from .user_results import UserResult, stale_version, user_not_found, validation_failed


class ChangeUserStatusUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        unit_of_work: UnitOfWork,
        event_publisher: EventPublisher,
    ) -> None:
        self._users = user_repository
        self._uow = unit_of_work
        self._events = event_publisher

    def execute(
        self,
        user_id: UUID,
        *,
        status: str,
        version: int,
        changed_by: str = "",
        reason: str = "",
    ) -> UserResult:
        errors = validate_change_status(status, version)
        if errors:
            return UserResult(error=validation_failed(errors))

        new_status = UserStatus.parse(status)
        try:
            with self._uow.transaction():
                user = self._users.get_by_id(user_id)
                if user is None:
                    return UserResult(error=user_not_found())
                if user.version != version:
                    return UserResult(error=stale_version())

                previous_status = user.status
                user.change_status(new_status)
                self._users.update(user)
                self._events.publish(
                    UserStatusChanged(
                        aggregate_id=str(user.id),
                        previous_status=previous_status.value,
                        new_status=user.status.value,
                        changed_by=changed_by,
                        reason=reason,
                    )
                )
        except OptimisticLockError:
            return UserResult(error=stale_version())
        except EntityNotFoundError:
            return UserResult(error=user_not_found())

        return UserResult(user=user)
