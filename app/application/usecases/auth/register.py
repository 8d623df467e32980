"""
===============================================================================
USE CASE: Register (alta + sesión)
===============================================================================

Responsibilities:
    - Validar forma + rechazar passwords comunes.
    - Limitar por IP (`register:{ip}`): cada intento cuenta.
    - Crear usuario + sesión y publicar user.created y auth.user.registered
      en UNA transacción.

Collaborators:
    - UserRepository, SessionRepository, UnitOfWork
    - PasswordHasher, EventPublisher, AttemptLimiter
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ....crosscutting.exceptions import DuplicateKeyError
from ....crosscutting.logger import logger
from ....domain.events import UserCreated, UserRegistered
from ....domain.repositories import SessionRepository, UnitOfWork, UserRepository
from ....domain.services import EventPublisher, PasswordHasher
from ....domain.sessions import DEFAULT_SESSION_DURATION, Session
from ....domain.users import User, normalize_email
from ....domain.validation import common_password_errors, validate_registration
from ...rate_limiting import AttemptLimiter, register_key, too_many_attempts_message
from .auth_results import (
    AuthResult,
    rate_limit_exceeded,
    user_already_exists,
    validation_failed,
)


@dataclass(frozen=True)
class RegisterInput:
    email: str
    password: str
    first_name: str
    last_name: str
    ip_address: str = ""
    user_agent: str = ""


class RegisterUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        session_repository: SessionRepository,
        unit_of_work: UnitOfWork,
        password_hasher: PasswordHasher,
        event_publisher: EventPublisher,
        limiter: AttemptLimiter,
        *,
        session_duration: timedelta = DEFAULT_SESSION_DURATION,
        allow_unicode_names: bool = False,
    ) -> None:
        self._users = user_repository
        self._sessions = session_repository
        self._uow = unit_of_work
        self._hasher = password_hasher
        self._events = event_publisher
        self._limiter = limiter
        self._session_duration = session_duration
        self._allow_unicode_names = allow_unicode_names

    def execute(self, input_data: RegisterInput) -> AuthResult:
        email = normalize_email(input_data.email)
        errors = validate_registration(
            email,
            input_data.password,
            input_data.first_name,
            input_data.last_name,
            allow_unicode_names=self._allow_unicode_names,
        )
        errors += common_password_errors(input_data.password)
        if errors:
            return AuthResult(error=validation_failed(errors))

        key = register_key(input_data.ip_address)
        decision = self._limiter.check(key)
        if not decision.allowed:
            logger.warning("Registro bloqueado por rate limit", extra={"retry_after": decision.retry_after})
            return AuthResult(
                error=rate_limit_exceeded(
                    too_many_attempts_message(decision.retry_after),
                    decision.retry_after,
                )
            )
        self._limiter.record_failure(key)

        if self._users.exists_by_email(email):
            return AuthResult(error=user_already_exists())

        user = User.new(
            email=email,
            password_hash=self._hasher.hash(input_data.password),
            first_name=input_data.first_name,
            last_name=input_data.last_name,
            allow_unicode_names=self._allow_unicode_names,
        )
        session = Session.new(
            user.id,
            ip_address=input_data.ip_address,
            user_agent=input_data.user_agent,
            duration=self._session_duration,
        )

        try:
            with self._uow.transaction():
                self._users.create(user)
                self._sessions.create(session)
                self._events.publish_all(
                    [
                        UserCreated(
                            aggregate_id=str(user.id),
                            email=user.email,
                            first_name=user.first_name,
                            last_name=user.last_name,
                            status=user.status.value,
                        ),
                        UserRegistered(
                            aggregate_id=str(user.id),
                            email=user.email,
                            session_id=session.id,
                            ip_address=input_data.ip_address,
                            user_agent=input_data.user_agent,
                        ),
                    ]
                )
        except DuplicateKeyError:
            return AuthResult(error=user_already_exists())

        logger.info("Usuario registrado", extra={"user_id": str(user.id)})
        return AuthResult(user=user, session=session)
