"""
===============================================================================
USE CASE: Login (email + password -> session)
===============================================================================

Business Goal:
    Autenticar credenciales y abrir una sesión opaca, sin revelar si el email
    existe.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    LoginUseCase

Responsibilities:
    - Validar forma (email / password).
    - Consultar el limitador `login:{email}` ANTES de tocar storage.
    - Registrar intento fallido ante email desconocido o password incorrecto.
    - suspended -> ACCOUNT_SUSPENDED; inactive -> INVALID_CREDENTIALS.
    - En éxito: reset del limitador, crear sesión y publicar
      auth.user.logged_in en una sola transacción.

Collaborators:
    - UserRepository, SessionRepository, UnitOfWork
    - PasswordHasher, EventPublisher
    - application.rate_limiting.AttemptLimiter
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ....crosscutting.logger import logger
from ....domain.events import UserLoggedIn
from ....domain.repositories import SessionRepository, UnitOfWork, UserRepository
from ....domain.services import EventPublisher, PasswordHasher
from ....domain.sessions import DEFAULT_SESSION_DURATION, Session
from ....domain.users import UserStatus, normalize_email
from ....domain.validation import validate_login
from ...rate_limiting import AttemptLimiter, login_key, too_many_attempts_message
from .auth_results import (
    AuthResult,
    account_suspended,
    invalid_credentials,
    rate_limit_exceeded,
    validation_failed,
)


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str
    ip_address: str = ""
    user_agent: str = ""


class LoginUseCase:
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
    ) -> None:
        self._users = user_repository
        self._sessions = session_repository
        self._uow = unit_of_work
        self._hasher = password_hasher
        self._events = event_publisher
        self._limiter = limiter
        self._session_duration = session_duration

    def execute(self, input_data: LoginInput) -> AuthResult:
        email = normalize_email(input_data.email)
        errors = validate_login(email, input_data.password)
        if errors:
            return AuthResult(error=validation_failed(errors))

        key = login_key(email)

        decision = self._limiter.check(key)
        if not decision.allowed:
            logger.warning("Login bloqueado por rate limit", extra={"retry_after": decision.retry_after})
            return AuthResult(
                error=rate_limit_exceeded(
                    too_many_attempts_message(decision.retry_after),
                    decision.retry_after,
                )
            )

        user = self._users.get_by_email(email)
        if user is None:
            self._limiter.record_failure(key)
            return AuthResult(error=invalid_credentials())

        if user.status == UserStatus.SUSPENDED:
            return AuthResult(error=account_suspended())
        if user.status != UserStatus.ACTIVE:
            return AuthResult(error=invalid_credentials())

        if not self._hasher.verify(input_data.password, user.password_hash):
            self._limiter.record_failure(key)
            return AuthResult(error=invalid_credentials())

        self._limiter.reset(key)

        session = Session.new(
            user.id,
            ip_address=input_data.ip_address,
            user_agent=input_data.user_agent,
            duration=self._session_duration,
        )
        with self._uow.transaction():
            self._sessions.create(session)
            self._events.publish(
                UserLoggedIn(
                    aggregate_id=str(user.id),
                    session_id=session.id,
                    ip_address=input_data.ip_address,
                    user_agent=input_data.user_agent,
                )
            )

        logger.info("Login exitoso", extra={"user_id": str(user.id)})
        return AuthResult(user=user, session=session)
