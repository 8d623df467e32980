"""
PostgreSQL Repository Implementations.

psycopg 3 + SQL parametrizado; la conexión de la transacción en curso se
comparte vía infrastructure.db.transaction.
"""

from .activation_token import PostgresActivationTokenRepository
from .audit_event import PostgresAuditEventRepository
from .session import PostgresSessionRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresSessionRepository",
    "PostgresActivationTokenRepository",
    "PostgresAuditEventRepository",
]
