"""
In-memory ActivationTokenRepository (tests / local dev).
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateKeyError, EntityNotFoundError
from ....domain.activation import ActivationToken


class InMemoryActivationTokenRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._tokens: Dict[UUID, ActivationToken] = {}

    def create(self, token: ActivationToken) -> None:
        with self._lock:
            if token.id in self._tokens or any(
                t.token == token.token for t in self._tokens.values()
            ):
                raise DuplicateKeyError("activation token already exists")
            self._tokens[token.id] = copy.copy(token)

    def get_by_token(self, token: str) -> Optional[ActivationToken]:
        with self._lock:
            for stored in self._tokens.values():
                if stored.token == token:
                    return copy.copy(stored)
            return None

    def get_by_user_id(self, user_id: UUID) -> List[ActivationToken]:
        with self._lock:
            tokens = [copy.copy(t) for t in self._tokens.values() if t.user_id == user_id]
        tokens.sort(key=lambda t: t.created_at, reverse=True)
        return tokens

    def update(self, token: ActivationToken) -> None:
        with self._lock:
            if token.id not in self._tokens:
                raise EntityNotFoundError(f"activation token {token.id} not found")
            self._tokens[token.id] = copy.copy(token)

    def delete_by_user_id(self, user_id: UUID) -> int:
        with self._lock:
            ids = [k for k, t in self._tokens.items() if t.user_id == user_id]
            for key in ids:
                del self._tokens[key]
            return len(ids)

    def cleanup_expired(self) -> int:
        now = datetime.now(timezone.utc)
        with self._lock:
            ids = [k for k, t in self._tokens.items() if t.is_expired(now)]
            for key in ids:
                del self._tokens[key]
            return len(ids)

    def snapshot(self) -> Dict[UUID, ActivationToken]:
        with self._lock:
            return {k: copy.copy(v) for k, v in self._tokens.items()}

    def restore(self, state: Dict[UUID, ActivationToken]) -> None:
        with self._lock:
            self._tokens = state

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()
