"""
============================================================
TARJETA CRC
============================================================
Class: app.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.
- Mantener una API estable para el container.

Collaborators:
- Repositorios Postgres (SQL crudo, psycopg 3)
- Repositorios InMemory (tests / APP_ENV=test)
============================================================
"""

# ---------------------------
# In-memory implementations
# Usados para tests unitarios rápidos. No persisten datos tras reiniciar.
# ---------------------------
from .in_memory import (
    InMemoryActivationTokenRepository,
    InMemoryAuditEventRepository,
    InMemorySessionRepository,
    InMemoryUnitOfWork,
    InMemoryUserRepository,
)

# ---------------------------
# Postgres implementations
# Persistencia real; comparten la conexión de la transacción en curso.
# ---------------------------
from .postgres import (
    PostgresActivationTokenRepository,
    PostgresAuditEventRepository,
    PostgresSessionRepository,
    PostgresUserRepository,
)

__all__ = [
    # Postgres
    "PostgresUserRepository",
    "PostgresSessionRepository",
    "PostgresActivationTokenRepository",
    "PostgresAuditEventRepository",
    # In-memory
    "InMemoryUserRepository",
    "InMemorySessionRepository",
    "InMemoryActivationTokenRepository",
    "InMemoryAuditEventRepository",
    "InMemoryUnitOfWork",
]
