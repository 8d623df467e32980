"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/session.py
============================================================
Class: PostgresSessionRepository

Responsibilities:
  - Persistir sesiones opacas (id = 64 hex) en la tabla `sessions`.
  - Listar sesiones vigentes de un usuario (activas y no expiradas).
  - Borrar por id / por usuario y limpiar expiradas o inactivas.

Collaborators:
  - domain.sessions.Session
  - PostgresRepositoryBase
============================================================
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from ....crosscutting.exceptions import EntityNotFoundError
from ....domain.sessions import Session
from .base import PostgresRepositoryBase

_SESSION_COLUMNS = "id, user_id, ip_address, user_agent, created_at, expires_at, is_active"


def _row_to_session(row: tuple) -> Session:
    return Session(
        id=row[0],
        user_id=row[1],
        ip_address=row[2] or "",
        user_agent=row[3] or "",
        created_at=row[4],
        expires_at=row[5],
        is_active=row[6],
    )


class PostgresSessionRepository(PostgresRepositoryBase):
    def create(self, session: Session) -> None:
        self._execute(
            query="""
                INSERT INTO sessions (
                    id, user_id, ip_address, user_agent, created_at, expires_at, is_active
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            params=(
                session.id,
                session.user_id,
                session.ip_address,
                session.user_agent,
                session.created_at,
                session.expires_at,
                session.is_active,
            ),
            log_msg="PostgresSessionRepository: create failed",
            log_extra={"user_id": str(session.user_id)},
        )

    def get_by_id(self, session_id: str) -> Optional[Session]:
        row = self._fetchone(
            query=f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE id = %s",
            params=(session_id,),
            log_msg="PostgresSessionRepository: get_by_id failed",
            log_extra={},
        )
        return _row_to_session(row) if row else None

    def get_by_user_id(self, user_id: UUID) -> List[Session]:
        rows = self._fetchall(
            query=f"""
                SELECT {_SESSION_COLUMNS}
                FROM sessions
                WHERE user_id = %s AND is_active = true AND expires_at > now()
                ORDER BY created_at DESC
            """,
            params=(user_id,),
            log_msg="PostgresSessionRepository: get_by_user_id failed",
            log_extra={"user_id": str(user_id)},
        )
        return [_row_to_session(r) for r in rows]

    def update(self, session: Session) -> None:
        affected = self._execute(
            query="""
                UPDATE sessions
                SET expires_at = %s, is_active = %s
                WHERE id = %s
            """,
            params=(session.expires_at, session.is_active, session.id),
            log_msg="PostgresSessionRepository: update failed",
            log_extra={"user_id": str(session.user_id)},
        )
        if not affected:
            raise EntityNotFoundError("session not found")

    def delete(self, session_id: str) -> None:
        affected = self._execute(
            query="DELETE FROM sessions WHERE id = %s",
            params=(session_id,),
            log_msg="PostgresSessionRepository: delete failed",
            log_extra={},
        )
        if not affected:
            raise EntityNotFoundError("session not found")

    def delete_by_user_id(self, user_id: UUID) -> int:
        return self._execute(
            query="DELETE FROM sessions WHERE user_id = %s",
            params=(user_id,),
            log_msg="PostgresSessionRepository: delete_by_user_id failed",
            log_extra={"user_id": str(user_id)},
        )

    def cleanup_expired(self) -> int:
        return self._execute(
            query="DELETE FROM sessions WHERE expires_at < now() OR is_active = false",
            log_msg="PostgresSessionRepository: cleanup_expired failed",
            log_extra={},
        )
