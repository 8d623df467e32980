"""
In-memory SessionRepository (tests / local dev).

Mismo contrato que PostgresSessionRepository: get_by_user_id devuelve solo
sesiones activas y no expiradas, más nuevas primero.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateKeyError, EntityNotFoundError
from ....domain.sessions import Session


class InMemorySessionRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: Dict[str, Session] = {}

    def create(self, session: Session) -> None:
        with self._lock:
            if session.id in self._sessions:
                raise DuplicateKeyError("session already exists")
            self._sessions[session.id] = copy.copy(session)

    def get_by_id(self, session_id: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.get(session_id)
            return copy.copy(session) if session else None

    def get_by_user_id(self, user_id: UUID) -> List[Session]:
        now = datetime.now(timezone.utc)
        with self._lock:
            sessions = [
                copy.copy(s)
                for s in self._sessions.values()
                if s.user_id == user_id and s.is_valid(now)
            ]
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        return sessions

    def update(self, session: Session) -> None:
        with self._lock:
            if session.id not in self._sessions:
                raise EntityNotFoundError("session not found")
            self._sessions[session.id] = copy.copy(session)

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise EntityNotFoundError("session not found")

    def delete_by_user_id(self, user_id: UUID) -> int:
        with self._lock:
            ids = [k for k, s in self._sessions.items() if s.user_id == user_id]
            for key in ids:
                del self._sessions[key]
            return len(ids)

    def cleanup_expired(self) -> int:
        now = datetime.now(timezone.utc)
        with self._lock:
            ids = [k for k, s in self._sessions.items() if not s.is_valid(now)]
            for key in ids:
                del self._sessions[key]
            return len(ids)

    def snapshot(self) -> Dict[str, Session]:
        with self._lock:
            return {k: copy.copy(v) for k, v in self._sessions.items()}

    def restore(self, state: Dict[str, Session]) -> None:
        with self._lock:
            self._sessions = state

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
