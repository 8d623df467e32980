"""
USE CASE: Logout - borra la sesión y publica auth.user.logged_out.
"""

from __future__ import annotations

from ....crosscutting.exceptions import EntityNotFoundError
from ....domain.events import UserLoggedOut
from ....domain.repositories import SessionRepository, UnitOfWork
from ....domain.services import EventPublisher
from .auth_results import LogoutResult, session_not_found


class LogoutUseCase:
    def __init__(
        self,
        session_repository: SessionRepository,
        unit_of_work: UnitOfWork,
        event_publisher: EventPublisher,
    ) -> None:
        self._sessions = session_repository
        self._uow = unit_of_work
        self._events = event_publisher

    def execute(self, session_id: str) -> LogoutResult:
        if not session_id:
            return LogoutResult(error=session_not_found())

        try:
            with self._uow.transaction():
                session = self._sessions.get_by_id(session_id)
                if session is None:
                    return LogoutResult(error=session_not_found())

                self._sessions.delete(session.id)
                self._events.publish(
                    UserLoggedOut(
                        aggregate_id=str(session.user_id),
                        session_id=session.id,
                        logout_type="manual",
                    )
                )
        except EntityNotFoundError:
            return LogoutResult(error=session_not_found())

        return LogoutResult()
