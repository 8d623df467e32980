# =============================================================================
# FILE: infrastructure/repositories/in_memory/audit_event.py
# =============================================================================
"""
In-Memory Audit Event Repository for testing and development.

NOT FOR PRODUCTION USE - data is lost on restart.
"""

from __future__ import annotations

from datetime import datetime
from threading import Lock
from typing import List

from ....domain.audit import AuditEvent


class InMemoryAuditEventRepository:
    """
    In-memory implementation of AuditEventRepository.

    Useful for:
      - Unit testing (asserting which events were audited)
      - Local development without database
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._events: List[AuditEvent] = []

    def record_event(self, event: AuditEvent) -> None:
        with self._lock:
            self._events.append(event)

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
        if limit <= 0:
            return []

        with self._lock:
            results = list(self._events)

        if user_id:
            results = [e for e in results if e.user_id == user_id]
        if event_type_prefix:
            results = [e for e in results if e.event_type.startswith(event_type_prefix)]
        if start_at is not None:
            results = [e for e in results if e.occurred_at >= start_at]
        if end_at is not None:
            results = [e for e in results if e.occurred_at <= end_at]

        # R: Orden estable: más nuevo primero; empate -> orden de inserción inverso.
        results = list(reversed(results))
        results.sort(key=lambda e: e.occurred_at, reverse=True)

        offset = max(offset, 0)
        return results[offset : offset + limit]

    # -------------------------------------------------------------------------
    # UnitOfWork / testing helpers
    # -------------------------------------------------------------------------
    def snapshot(self) -> List[AuditEvent]:
        with self._lock:
            return list(self._events)

    def restore(self, state: List[AuditEvent]) -> None:
        with self._lock:
            self._events = state

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def event_types(self) -> List[str]:
        """Tipos auditados en orden de inserción (para asserts en tests)."""
        with self._lock:
            return [e.event_type for e in self._events]
