"""Infra DB: pool + transacciones + errores tipados."""

from .errors import (
    DatabaseConnectionError,
    DatabasePoolError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)
from .pool import close_pool, get_pool, init_pool, is_pool_initialized, reset_pool
from .transaction import PostgresUnitOfWork, connection_scope, current_connection

__all__ = [
    "init_pool",
    "get_pool",
    "close_pool",
    "reset_pool",
    "is_pool_initialized",
    "PostgresUnitOfWork",
    "connection_scope",
    "current_connection",
    "DatabasePoolError",
    "PoolAlreadyInitializedError",
    "PoolNotInitializedError",
    "DatabaseConnectionError",
]
