"""
CRC - domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep the application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing.

Collaborators
- domain.users / domain.sessions / domain.activation / domain.audit
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Lookups return None when the row does not exist (no exception for "not found").
- Writes that target a missing row raise EntityNotFoundError; stale versions raise
  OptimisticLockError; unique violations raise DuplicateKeyError
  (crosscutting.exceptions).

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- All mutating use cases run inside UnitOfWork.transaction(); repositories pick
  up the transaction's connection transparently.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import ContextManager, List, Optional, Protocol
from uuid import UUID

from .activation import ActivationToken
from .audit import AuditEvent
from .sessions import Session
from .users import User, UserStatus


@dataclass(frozen=True, slots=True)
class UserFilter:
    """R: Filters for user listing (all optional, combined with AND)."""

    status: UserStatus | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    limit: int = 20
    offset: int = 0


class UserRepository(Protocol):
    """
    R: Interface for user account persistence.

    Update contract (optimistic locking):
      - The caller mutates the entity (version already incremented).
      - update() writes WHERE id = user.id AND version = user.version - 1.
    """

    def create(self, user: User) -> None:
        ...

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def exists_by_email(self, email: str) -> bool:
        ...

    def update(self, user: User) -> None:
        ...

    def delete(self, user_id: UUID) -> None:
        ...

    def list(self, user_filter: UserFilter) -> tuple[List[User], int]:
        """R: Returns (page, total matching rows ignoring limit/offset)."""
        ...


class SessionRepository(Protocol):
    """R: Interface for session persistence."""

    def create(self, session: Session) -> None:
        ...

    def get_by_id(self, session_id: str) -> Optional[Session]:
        ...

    def get_by_user_id(self, user_id: UUID) -> List[Session]:
        """R: Active, unexpired sessions, newest first."""
        ...

    def update(self, session: Session) -> None:
        ...

    def delete(self, session_id: str) -> None:
        ...

    def delete_by_user_id(self, user_id: UUID) -> int:
        ...

    def cleanup_expired(self) -> int:
        """R: Delete expired or inactive sessions; return deleted count."""
        ...


class ActivationTokenRepository(Protocol):
    """R: Interface for activation token persistence."""

    def create(self, token: ActivationToken) -> None:
        ...

    def get_by_token(self, token: str) -> Optional[ActivationToken]:
        ...

    def get_by_user_id(self, user_id: UUID) -> List[ActivationToken]:
        ...

    def update(self, token: ActivationToken) -> None:
        ...

    def delete_by_user_id(self, user_id: UUID) -> int:
        ...

    def cleanup_expired(self) -> int:
        ...


class AuditEventRepository(Protocol):
    """R: Append-only audit log."""

    def record_event(self, event: AuditEvent) -> None:
        ...

    def list_events(
        self,
        *,
        user_id: str | None = None,
        event_type_prefix: str | None = None,
        start_at: datetime | None = None,
        end_at: datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditEvent]:
        ...


class UnitOfWork(Protocol):
    """
    R: Transaction boundary.

    Usage:
        with uow.transaction():
            repo.update(...)
            bus.publish(...)

    Any exception inside the block rolls back every write made through the
    repositories during the block, then propagates.
    """

    def transaction(self) -> ContextManager[None]:
        ...
