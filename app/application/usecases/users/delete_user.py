"""
===============================================================================
USE CASE: Delete User
===============================================================================

Responsibilities:
    - Borrar el usuario (sesiones y tokens caen por ON DELETE CASCADE).
    - Publicar user.deleted (deleted_by, reason) en la misma transacción.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import EntityNotFoundError
from ....domain.events import UserDeleted
from ....domain.repositories import UnitOfWork, UserRepository
from ....domain.services import EventPublisher
from .user_results import DeleteUserResult, user_not_found


class DeleteUserUseCase:
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
        self, user_id: UUID, *, deleted_by: str = "", reason: str = ""
    ) -> DeleteUserResult:
        try:
            with self._uow.transaction():
                user = self._users.get_by_id(user_id)
                if user is None:
                    return DeleteUserResult(error=user_not_found())

                self._users.delete(user_id)
                self._events.publish(
                    UserDeleted(
                        aggregate_id=str(user.id),
                        email=user.email,
                        deleted_by=deleted_by,
                        reason=reason,
                    )
                )
        except EntityNotFoundError:
            return DeleteUserResult(error=user_not_found())

        return DeleteUserResult(deleted=True)
