"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AccountsError + subclases

Responsabilidades:
  - Estandarizar errores de infraestructura que luego se mapean a HTTP
  - Distinguir fallas de persistencia “esperables” (duplicado, lock optimista,
    no encontrado) de fallas genéricas de DB

Colaboradores:
  - infrastructure/repositories/* (lanzan)
  - application/usecases/* (traducen a errores tipados de caso de uso)
  - api/exception_handlers.py (fallback -> INTERNAL_ERROR)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class AccountsError(Exception):
    """
    Base para errores internos del sistema.

    Provee error_code + error_id + message.
    """

    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(AccountsError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class EntityNotFoundError(DatabaseError):
    """La fila esperada no existe (UPDATE/DELETE sin filas afectadas)."""

    error_code: str = "NOT_FOUND"


class DuplicateKeyError(DatabaseError):
    """Violación de constraint UNIQUE (SQLSTATE 23505)."""

    error_code: str = "DUPLICATE_KEY"


class OptimisticLockError(DatabaseError):
    """La fila existe pero su versión ya no coincide con la esperada."""

    error_code: str = "OPTIMISTIC_LOCK"


class EventPublishError(AccountsError):
    """Un handler del event bus falló; la transacción debe abortarse."""

    error_code: str = "EVENT_PUBLISH_ERROR"
