"""
===============================================================================
USE CASE: Change Password (usuario autenticado)
===============================================================================

Business Goal:
    Permitir al usuario cambiar su password y forzar re-login en todos sus
    dispositivos.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ChangePasswordUseCase

Responsibilities:
    - Rechazar old == new ANTES de tocar storage.
    - Reglas de password + lista de passwords comunes.
    - Verificar password actual -> INVALID_CREDENTIALS.
    - Persistir hash (version + 1), borrar TODAS las sesiones del usuario y
      publicar auth.password.changed en una transacción.

Collaborators:
    - UserRepository, SessionRepository, UnitOfWork
    - PasswordHasher, EventPublisher
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.exceptions import EntityNotFoundError, OptimisticLockError
from ....crosscutting.logger import logger
from ....domain.events import PasswordChanged
from ....domain.repositories import SessionRepository, UnitOfWork, UserRepository
from ....domain.services import EventPublisher, PasswordHasher
from ....domain.validation import common_password_errors, validate_password_change
from .auth_results import (
    AuthError,
    AuthErrorCode,
    ChangePasswordResult,
    invalid_credentials,
    user_not_found,
    validation_failed,
)


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: UUID
    old_password: str
    new_password: str
    ip_address: str = ""
    user_agent: str = ""


class ChangePasswordUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        session_repository: SessionRepository,
        unit_of_work: UnitOfWork,
        password_hasher: PasswordHasher,
        event_publisher: EventPublisher,
    ) -> None:
        self._users = user_repository
        self._sessions = session_repository
        self._uow = unit_of_work
        self._hasher = password_hasher
        self._events = event_publisher

    def execute(self, input_data: ChangePasswordInput) -> ChangePasswordResult:
        errors = validate_password_change(input_data.old_password, input_data.new_password)
        errors += common_password_errors(input_data.new_password, "new_password")
        if errors:
            return ChangePasswordResult(error=validation_failed(errors))

        try:
            with self._uow.transaction():
                user = self._users.get_by_id(input_data.user_id)
                if user is None:
                    return ChangePasswordResult(error=user_not_found())

                if not self._hasher.verify(input_data.old_password, user.password_hash):
                    return ChangePasswordResult(error=invalid_credentials())

                user.change_password_hash(self._hasher.hash(input_data.new_password))
                self._users.update(user)
                revoked = self._sessions.delete_by_user_id(user.id)
                self._events.publish(
                    PasswordChanged(
                        aggregate_id=str(user.id),
                        ip_address=input_data.ip_address,
                        user_agent=input_data.user_agent,
                        sessions_revoked=revoked,
                    )
                )
        except EntityNotFoundError:
            return ChangePasswordResult(error=user_not_found())
        except OptimisticLockError:
            return ChangePasswordResult(error=self._concurrent_change())

        logger.info(
            "Password cambiado; sesiones revocadas",
            extra={"user_id": str(input_data.user_id), "sessions_revoked": revoked},
        )
        return ChangePasswordResult(sessions_revoked=revoked)

    @staticmethod
    def _concurrent_change() -> AuthError:
        return AuthError(
            code=AuthErrorCode.VALIDATION_ERROR,
            message="Account was modified concurrently, please try again",
        )
