"""
===============================================================================
USE CASE: Activate User (canjear token)
===============================================================================

Business Goal:
    Activar una cuenta canjeando un token de un solo uso.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ActivateUserUseCase

Responsibilities:
    - Validar formato del token (>= 10 chars).
    - Token desconocido / expirado / usado -> VALIDATION_ERROR (field token).
    - Token expirado: publicar user.activation_token_expired y COMMITEAR ese
      evento antes de devolver el error.
    - Usuario ya activo -> BUSINESS_RULE_VIOLATION.
    - Éxito: activar (version + 1), marcar token usado y publicar
      user.activated (method="token") en una transacción.

Collaborators:
    - UserRepository, ActivationTokenRepository, UnitOfWork, EventPublisher
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone

from ....crosscutting.exceptions import EntityNotFoundError, OptimisticLockError
from ....domain.events import UserActivated, UserActivationTokenExpired
from ....domain.repositories import (
    ActivationTokenRepository,
    UnitOfWork,
    UserRepository,
)
from ....domain.services import EventPublisher
from ....domain.validation import validate_activation_token
from ..users.user_results import (
    UserResult,
    stale_version,
    user_not_found,
    validation_failed,
)
from .activation_results import already_active, token_error


class ActivateUserUseCase:
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

    def execute(self, token: str, *, activated_by: str = "") -> UserResult:
        errors = validate_activation_token(token)
        if errors:
            return UserResult(error=validation_failed(errors))

        now = datetime.now(timezone.utc)
        try:
            with self._uow.transaction():
                activation = self._tokens.get_by_token(token)
                if activation is None:
                    return UserResult(error=token_error("invalid activation token"))

                if activation.is_expired(now):
                    # R: El evento se commitea; el error se devuelve igual.
                    self._events.publish(
                        UserActivationTokenExpired(
                            aggregate_id=str(activation.user_id),
                            token_id=str(activation.id),
                            expired_at=activation.expires_at,
                        )
                    )
                    return UserResult(error=token_error("activation token has expired"))

                if activation.is_used:
                    return UserResult(
                        error=token_error("activation token has already been used")
                    )

                user = self._users.get_by_id(activation.user_id)
                if user is None:
                    return UserResult(error=user_not_found())
                if user.is_active:
                    return UserResult(error=already_active())

                user.activate()
                self._users.update(user)
                activation.mark_used(now)
                self._tokens.update(activation)
                self._events.publish(
                    UserActivated(
                        aggregate_id=str(user.id),
                        email=user.email,
                        activated_by=activated_by,
                        method="token",
                    )
                )
        except OptimisticLockError:
            return UserResult(error=stale_version())
        except EntityNotFoundError:
            return UserResult(error=user_not_found())

        return UserResult(user=user)
