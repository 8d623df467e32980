"""
===============================================================================
USE CASE: Request Activation (emitir token)
===============================================================================

Responsibilities:
    - Verificar que el usuario exista y NO esté activo.
    - Un solo token vivo por usuario: borrar los previos.
    - Emitir token (256 bits, hex) con TTL configurable y publicar
      user.activation_requested.

Collaborators:
    - UserRepository, ActivationTokenRepository, UnitOfWork, EventPublisher
===============================================================================
"""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

from ....domain.activation import DEFAULT_ACTIVATION_TTL, ActivationToken
from ....domain.events import UserActivationRequested
from ....domain.repositories import (
    ActivationTokenRepository,
    UnitOfWork,
    UserRepository,
)
from ....domain.services import EventPublisher
from ..users.user_results import user_not_found
from .activation_results import ActivationTokenResult, already_active


class RequestActivationUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        token_repository: ActivationTokenRepository,
        unit_of_work: UnitOfWork,
        event_publisher: EventPublisher,
        *,
        token_ttl: timedelta = DEFAULT_ACTIVATION_TTL,
    ) -> None:
        self._users = user_repository
        self._tokens = token_repository
        self._uow = unit_of_work
        self._events = event_publisher
        self._token_ttl = token_ttl

    def execute(self, user_id: UUID) -> ActivationTokenResult:
        with self._uow.transaction():
            user = self._users.get_by_id(user_id)
            if user is None:
                return ActivationTokenResult(error=user_not_found())
            if user.is_active:
                return ActivationTokenResult(error=already_active())

            self._tokens.delete_by_user_id(user.id)
            token = ActivationToken.new(user.id, ttl=self._token_ttl)
            self._tokens.create(token)
            self._events.publish(
                UserActivationRequested(
                    aggregate_id=str(user.id),
                    email=user.email,
                    token_id=str(token.id),
                    expires_at=token.expires_at,
                )
            )

        return ActivationTokenResult(token=token)
