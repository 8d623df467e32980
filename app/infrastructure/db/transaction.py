"""
===============================================================================
CRC CARD - infrastructure/db/transaction.py
===============================================================================

Componente:
  PostgresUnitOfWork + conexión transaccional compartida

Responsabilidades:
  - Abrir UNA transacción por operación mutante (`with uow.transaction():`).
  - Publicar la conexión de esa transacción en un ContextVar para que todos
    los repositorios Postgres la usen sin recibirla por parámetro.
  - Commit al salir sin error; rollback ante cualquier excepción
    (incluido EventPublishError del bus).

Colaboradores:
  - infrastructure/db/pool.get_pool
  - infrastructure/repositories/postgres/* (connection_scope)
===============================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Iterator, Optional

from ...crosscutting.logger import logger
from .pool import get_pool

current_connection: ContextVar[Optional[Any]] = ContextVar(
    "current_connection", default=None
)


@contextmanager
def connection_scope(pool: Any) -> Iterator[Any]:
    """
    Devuelve la conexión de la transacción en curso o una del pool.

    Fuera de una transacción, el context manager del pool hace commit al salir.
    """
    conn = current_connection.get()
    if conn is not None:
        yield conn
        return

    with pool.connection() as conn:
        yield conn


class PostgresUnitOfWork:
    """
    Unit of Work sobre psycopg 3.

    Las transacciones anidadas reutilizan la conexión externa y abren un
    savepoint (conn.transaction() anidado).
    """

    def __init__(self, pool_provider: Callable[[], Any] = get_pool) -> None:
        self._pool_provider = pool_provider

    @contextmanager
    def transaction(self) -> Iterator[None]:
        outer = current_connection.get()
        if outer is not None:
            with outer.transaction():
                yield
            return

        with self._pool_provider().connection() as conn:
            token = current_connection.set(conn)
            try:
                with conn.transaction():
                    yield
            except Exception:
                logger.info("Transacción revertida")
                raise
            finally:
                current_connection.reset(token)
