"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/base.py
============================================================
Class: PostgresRepositoryBase

Responsibilities:
  - Resolver el pool (inyectado o global) y la conexión (transacción en curso
    vía ContextVar, o una conexión nueva del pool).
  - Ejecutar SQL parametrizado con logging + DatabaseError consistentes.
  - Traducir unique violation (SQLSTATE 23505) a DuplicateKeyError.

Collaborators:
  - infrastructure.db.transaction.connection_scope
  - psycopg.errors.UniqueViolation
  - crosscutting.exceptions (DatabaseError / DuplicateKeyError)

Notes:
  - Las escrituras corren dentro de conn.transaction(): si ya hay una
    transacción abierta es un SAVEPOINT, así un 23505 no deja la transacción
    externa abortada y el caso de uso puede responder USER_ALREADY_EXISTS.
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, DuplicateKeyError
from ....crosscutting.logger import logger
from ...db.transaction import connection_scope


class PostgresRepositoryBase:
    def __init__(self, pool: Optional[ConnectionPool] = None):
        # R: Pool inyectable para tests; en producción se obtiene por factory global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def _fetchone(
        self,
        *,
        query: str,
        params: Iterable[object] = (),
        log_msg: str,
        log_extra: dict[str, object],
    ) -> tuple | None:
        try:
            with connection_scope(self._get_pool()) as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}") from exc

    def _fetchall(
        self,
        *,
        query: str,
        params: Iterable[object] = (),
        log_msg: str,
        log_extra: dict[str, object],
    ) -> list[tuple]:
        try:
            with connection_scope(self._get_pool()) as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}") from exc

    def _execute(
        self,
        *,
        query: str,
        params: Iterable[object] = (),
        log_msg: str,
        log_extra: dict[str, object],
    ) -> int:
        """Ejecuta una escritura y retorna rowcount."""
        try:
            with connection_scope(self._get_pool()) as conn:
                with conn.transaction():
                    return conn.execute(query, tuple(params)).rowcount
        except pg_errors.UniqueViolation as exc:
            logger.info(
                "Violación de unicidad",
                extra={**log_extra, "constraint": _constraint_name(exc)},
            )
            raise DuplicateKeyError(f"{log_msg}: duplicate key") from exc
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}") from exc


def _constraint_name(exc: pg_errors.UniqueViolation) -> str | None:
    diag = getattr(exc, "diag", None)
    return getattr(diag, "constraint_name", None)
