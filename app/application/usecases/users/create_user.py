"""
===============================================================================
USE CASE: Create User
===============================================================================

Business Goal:
    Alta de una cuenta de usuario (status active, version 1) con password
    hasheado y evento user.created auditado en la misma transacción.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateUserUseCase

Responsibilities:
    - Validar el comando (email, password, nombres).
    - Pre-chequear unicidad de email (exists_by_email).
    - Hashear password y crear el aggregate User.
    - Persistir + publicar user.created dentro de uow.transaction().
    - Traducir DuplicateKeyError (carrera entre pre-check e insert) a
      USER_ALREADY_EXISTS.

Collaborators:
    - UserRepository, UnitOfWork, PasswordHasher, EventPublisher
    - domain.validation.validate_create_user
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.exceptions import DuplicateKeyError
from ....domain.events import UserCreated
from ....domain.repositories import UnitOfWork, UserRepository
from ....domain.services import EventPublisher, PasswordHasher
from ....domain.users import User, normalize_email
from ....domain.validation import validate_create_user
from .user_results import UserResult, user_already_exists, validation_failed


@dataclass(frozen=True)
class CreateUserInput:
    email: str
    password: str
    first_name: str
    last_name: str


class CreateUserUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        unit_of_work: UnitOfWork,
        password_hasher: PasswordHasher,
        event_publisher: EventPublisher,
        *,
        allow_unicode_names: bool = False,
    ) -> None:
        self._users = user_repository
        self._uow = unit_of_work
        self._hasher = password_hasher
        self._events = event_publisher
        self._allow_unicode_names = allow_unicode_names

    def execute(self, input_data: CreateUserInput) -> UserResult:
        email = normalize_email(input_data.email)
        errors = validate_create_user(
            email,
            input_data.password,
            input_data.first_name,
            input_data.last_name,
            allow_unicode_names=self._allow_unicode_names,
        )
        if errors:
            return UserResult(error=validation_failed(errors))

        if self._users.exists_by_email(email):
            return UserResult(error=user_already_exists())

        user = User.new(
            email=email,
            password_hash=self._hasher.hash(input_data.password),
            first_name=input_data.first_name,
            last_name=input_data.last_name,
            allow_unicode_names=self._allow_unicode_names,
        )

        try:
            with self._uow.transaction():
                self._users.create(user)
                self._events.publish(
                    UserCreated(
                        aggregate_id=str(user.id),
                        email=user.email,
                        first_name=user.first_name,
                        last_name=user.last_name,
                        status=user.status.value,
                    )
                )
        except DuplicateKeyError:
            return UserResult(error=user_already_exists())

        return UserResult(user=user)
