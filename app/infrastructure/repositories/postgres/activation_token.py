"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/activation_token.py
============================================================
Class: PostgresActivationTokenRepository

Responsibilities:
  - Persistir tokens de activación (tabla `activation_tokens`).
  - Buscar por token / por usuario, marcar como usado, borrar y limpiar.

Collaborators:
  - domain.activation.ActivationToken
  - PostgresRepositoryBase
============================================================
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from ....crosscutting.exceptions import EntityNotFoundError
from ....domain.activation import ActivationToken
from .base import PostgresRepositoryBase

_TOKEN_COLUMNS = "id, user_id, token, expires_at, used_at, created_at"


def _row_to_token(row: tuple) -> ActivationToken:
    return ActivationToken(
        id=row[0],
        user_id=row[1],
        token=row[2],
        expires_at=row[3],
        used_at=row[4],
        created_at=row[5],
    )


class PostgresActivationTokenRepository(PostgresRepositoryBase):
    def create(self, token: ActivationToken) -> None:
        self._execute(
            query="""
                INSERT INTO activation_tokens (id, user_id, token, expires_at, used_at, created_at)
                VALUES (%s, %s, %s, %s, %s, %s)
            """,
            params=(
                token.id,
                token.user_id,
                token.token,
                token.expires_at,
                token.used_at,
                token.created_at,
            ),
            log_msg="PostgresActivationTokenRepository: create failed",
            log_extra={"user_id": str(token.user_id), "token_id": str(token.id)},
        )

    def get_by_token(self, token: str) -> Optional[ActivationToken]:
        row = self._fetchone(
            query=f"SELECT {_TOKEN_COLUMNS} FROM activation_tokens WHERE token = %s",
            params=(token,),
            log_msg="PostgresActivationTokenRepository: get_by_token failed",
            log_extra={},
        )
        return _row_to_token(row) if row else None

    def get_by_user_id(self, user_id: UUID) -> List[ActivationToken]:
        rows = self._fetchall(
            query=f"""
                SELECT {_TOKEN_COLUMNS}
                FROM activation_tokens
                WHERE user_id = %s
                ORDER BY created_at DESC
            """,
            params=(user_id,),
            log_msg="PostgresActivationTokenRepository: get_by_user_id failed",
            log_extra={"user_id": str(user_id)},
        )
        return [_row_to_token(r) for r in rows]

    def update(self, token: ActivationToken) -> None:
        affected = self._execute(
            query="UPDATE activation_tokens SET used_at = %s, expires_at = %s WHERE id = %s",
            params=(token.used_at, token.expires_at, token.id),
            log_msg="PostgresActivationTokenRepository: update failed",
            log_extra={"token_id": str(token.id)},
        )
        if not affected:
            raise EntityNotFoundError(f"activation token {token.id} not found")

    def delete_by_user_id(self, user_id: UUID) -> int:
        return self._execute(
            query="DELETE FROM activation_tokens WHERE user_id = %s",
            params=(user_id,),
            log_msg="PostgresActivationTokenRepository: delete_by_user_id failed",
            log_extra={"user_id": str(user_id)},
        )

    def cleanup_expired(self) -> int:
        return self._execute(
            query="DELETE FROM activation_tokens WHERE expires_at < now()",
            log_msg="PostgresActivationTokenRepository: cleanup_expired failed",
            log_extra={},
        )
