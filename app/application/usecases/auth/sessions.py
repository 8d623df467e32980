"""
===============================================================================
USE CASES: Validate / Refresh / List / Cleanup sessions
===============================================================================

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Classes:
    ValidateSessionUseCase, RefreshSessionUseCase,
    ListUserSessionsUseCase, CleanupExpiredSessionsUseCase

Responsibilities:
    - Validate: sesión inexistente / expirada / usuario no activo -> inválida.
      Una sesión expirada se borra y publica auth.session.expired.
    - Refresh: extender expiración (mismo id) o SESSION_EXPIRED.
    - List: sesiones vigentes del usuario, más nuevas primero.
    - Cleanup: borrar expiradas/inactivas y devolver el conteo.

Collaborators:
    - SessionRepository, UserRepository, UnitOfWork, EventPublisher
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

from ....crosscutting.exceptions import EntityNotFoundError
from ....crosscutting.logger import logger
from ....domain.events import SessionExpired
from ....domain.repositories import SessionRepository, UnitOfWork, UserRepository
from ....domain.services import EventPublisher
from ....domain.sessions import DEFAULT_SESSION_DURATION
from .auth_results import (
    SessionListResult,
    SessionResult,
    SessionValidationResult,
    session_expired,
)


class ValidateSessionUseCase:
    def __init__(
        self,
        session_repository: SessionRepository,
        user_repository: UserRepository,
        unit_of_work: UnitOfWork,
        event_publisher: EventPublisher,
    ) -> None:
        self._sessions = session_repository
        self._users = user_repository
        self._uow = unit_of_work
        self._events = event_publisher

    def execute(self, session_id: str) -> SessionValidationResult:
        if not session_id:
            return SessionValidationResult(valid=False)

        session = self._sessions.get_by_id(session_id)
        if session is None:
            return SessionValidationResult(valid=False)

        now = datetime.now(timezone.utc)
        if session.is_expired(now):
            self._expire(session.id, session.user_id, session.expires_at)
            return SessionValidationResult(valid=False)
        if not session.is_active:
            return SessionValidationResult(valid=False)

        user = self._users.get_by_id(session.user_id)
        if user is None or not user.is_active:
            return SessionValidationResult(valid=False)

        return SessionValidationResult(valid=True, user=user, session=session)

    def _expire(self, session_id: str, user_id: UUID, expired_at: datetime) -> None:
        try:
            with self._uow.transaction():
                self._events.publish(
                    SessionExpired(
                        aggregate_id=str(user_id),
                        session_id=session_id,
                        expired_at=expired_at,
                    )
                )
                self._sessions.delete(session_id)
        except EntityNotFoundError:
            # R: Otro request ya la borró.
            logger.info("Sesión expirada ya eliminada")


class RefreshSessionUseCase:
    def __init__(
        self,
        session_repository: SessionRepository,
        unit_of_work: UnitOfWork,
        *,
        session_duration: timedelta = DEFAULT_SESSION_DURATION,
    ) -> None:
        self._sessions = session_repository
        self._uow = unit_of_work
        self._session_duration = session_duration

    def execute(self, session_id: str) -> SessionResult:
        try:
            with self._uow.transaction():
                session = self._sessions.get_by_id(session_id) if session_id else None
                if session is None or not session.is_valid():
                    return SessionResult(error=session_expired())

                session.extend(self._session_duration)
                self._sessions.update(session)
        except EntityNotFoundError:
            return SessionResult(error=session_expired())

        return SessionResult(session=session)


class ListUserSessionsUseCase:
    def __init__(self, session_repository: SessionRepository) -> None:
        self._sessions = session_repository

    def execute(self, user_id: UUID) -> SessionListResult:
        return SessionListResult(sessions=self._sessions.get_by_user_id(user_id))


class CleanupExpiredSessionsUseCase:
    def __init__(self, session_repository: SessionRepository) -> None:
        self._sessions = session_repository

    def execute(self) -> int:
        deleted = self._sessions.cleanup_expired()
        logger.info("Limpieza de sesiones expiradas", extra={"deleted": deleted})
        return deleted
