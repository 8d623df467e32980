"""
===============================================================================
USE CASE: Deactivate User
===============================================================================

Responsibilities:
    - USER_NOT_FOUND / OPTIMISTIC_LOCK_ERROR / ya inactivo -> BUSINESS_RULE_VIOLATION.
    - Desactivar (version + 1), borrar tokens pendientes y publicar
      user.deactivated.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import EntityNotFoundError, OptimisticLockError
from ....domain.events import UserDeactivated
from ....domain.repositories import (
    ActivationTokenRepository,
    UnitOfWork,
    UserRepository,
)
from ....domain.services import EventPublisher
from ....domain.users import UserStatus
from ....domain.validation import version_errors
from ..users.user_results import (
    UserResult,
    stale_version,
    user_not_found,
    validation_failed,
)
from .activation_results import already_inactive


class DeactivateUserUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        token_repository: ActivationTokenRepository,
        unit_of_work: UnitOfWork,
        event_publisher: EventPublisher,
    ) -> None:
        self._users = user_repository
        self._tokens = token_repository
        self._uow = unit_of_work
        self._events = event_publisher

    def execute(
        self,
        user_id: UUID,
        *,
        version: int,
        deactivated_by: str = "",
        reason: str = "",
    ) -> UserResult:
        errors = version_errors(version)
        if errors:
            return UserResult(error=validation_failed(errors))

        try:
            with self._uow.transaction():
                user = self._users.get_by_id(user_id)
                if user is None:
                    return UserResult(error=user_not_found())
                if user.version != version:
                    return UserResult(error=stale_version())
                if user.status == UserStatus.INACTIVE:
                    return UserResult(error=already_inactive())

                user.deactivate()
                self._users.update(user)
                self._tokens.delete_by_user_id(user.id)
                self._events.publish(
                    UserDeactivated(
                        aggregate_id=str(user.id),
                        email=user.email,
                        deactivated_by=deactivated_by,
                        reason=reason,
                    )
                )
        except OptimisticLockError:
            return UserResult(error=stale_version())
        except EntityNotFoundError:
            return UserResult(error=user_not_found())

        return UserResult(user=user)
