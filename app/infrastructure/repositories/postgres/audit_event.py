"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/audit_event.py
============================================================
Class: PostgresAuditEventRepository

Responsibilities:
  - Persistir eventos de auditoría en PostgreSQL (tabla audit_events).
  - Listar eventos con filtros opcionales (user_id, prefijo de event_type, fechas).
  - Mantener respuestas determinísticas (orden estable) para APIs/tests.

Collaborators:
  - app.domain.audit.AuditEvent (entidad de dominio)
  - psycopg.types.json.Json (JSONB seguro hacia PostgreSQL)
  - PostgresRepositoryBase (pool, conexión transaccional, errores)

Constraints / Notes:
  - Repo puro: NO define qué se audita (eso lo decide app.audit).
  - record_event corre dentro de la transacción del caso de uso: si falla,
    DatabaseError aborta la operación completa.
  - Queries SIEMPRE parametrizadas.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from psycopg.types.json import Json

from ....domain.audit import AuditEvent
from .base import PostgresRepositoryBase

_AUDIT_COLUMNS = """
    id, event_id, event_type, aggregate_id, aggregate_type, user_id,
    action, resource, resource_id, details, occurred_at, metadata
"""


def _row_to_audit_event(row: tuple) -> AuditEvent:
    (
        row_id,
        event_id,
        event_type,
        aggregate_id,
        aggregate_type,
        user_id,
        action,
        resource,
        resource_id,
        details,
        occurred_at,
        metadata,
    ) = row
    return AuditEvent(
        id=row_id,
        event_id=event_id,
        event_type=event_type,
        aggregate_id=aggregate_id,
        aggregate_type=aggregate_type,
        user_id=user_id,
        action=action,
        resource=resource,
        resource_id=resource_id,
        details=details or {},
        occurred_at=occurred_at,
        metadata=metadata or {},
    )


class PostgresAuditEventRepository(PostgresRepositoryBase):
    """Repositorio PostgreSQL para auditoría (audit_events)."""

    def record_event(self, event: AuditEvent) -> None:
        self._execute(
            query=f"""
                INSERT INTO audit_events ({_AUDIT_COLUMNS})
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            params=(
                event.id,
                event.event_id,
                event.event_type,
                event.aggregate_id,
                event.aggregate_type,
                event.user_id,
                event.action,
                event.resource,
                event.resource_id,
                Json(event.details or {}),
                event.occurred_at,
                Json(event.metadata or {}),
            ),
            log_msg="PostgresAuditEventRepository: Failed to record audit event",
            log_extra={"event_id": str(event.event_id), "event_type": event.event_type},
        )

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
        """
        Lista eventos con filtros opcionales.

        - event_type_prefix: "auth." -> event_type LIKE 'auth.%'
        - start_at / end_at: rango inclusivo sobre occurred_at.
        - Orden: occurred_at DESC, id DESC.
        """
        if limit <= 0:
            return []
        if offset < 0:
            offset = 0

        conditions: list[str] = []
        params: list[object] = []

        if user_id:
            conditions.append("user_id = %s")
            params.append(user_id)

        if event_type_prefix:
            conditions.append("event_type LIKE %s")
            params.append(f"{event_type_prefix}%")

        if start_at is not None:
            conditions.append("occurred_at >= %s")
            params.append(start_at)

        if end_at is not None:
            conditions.append("occurred_at <= %s")
            params.append(end_at)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        rows = self._fetchall(
            query=f"""
                SELECT {_AUDIT_COLUMNS}
                FROM audit_events
                {where_clause}
                ORDER BY occurred_at DESC, id DESC
                LIMIT %s OFFSET %s
            """,
            params=[*params, limit, offset],
            log_msg="PostgresAuditEventRepository: Failed to list audit events",
            log_extra={
                "user_id": user_id,
                "event_type_prefix": event_type_prefix,
                "limit": limit,
                "offset": offset,
            },
        )
        return [_row_to_audit_event(r) for r in rows]
