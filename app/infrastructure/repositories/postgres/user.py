"""
============================================================
TARJETA CRC - infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - CRUD de la tabla `users` con SQL parametrizado.
  - Optimistic locking: UPDATE ... WHERE id = %s AND version = %s.
  - Distinguir "no existe" de "versión vieja" cuando el UPDATE no afecta filas.
  - Listado con filtros (status, ILIKE sobre email/nombres, rango de fechas)
    + total para paginación.

Collaborators:
  - domain.users.User / UserStatus
  - domain.repositories.UserFilter
  - PostgresRepositoryBase (pool, conexión transaccional, errores)

Constraints / Notes:
  - Repositorio puro: sin reglas de negocio.
  - Retorna None cuando el usuario no existe en lecturas.
  - El email llega normalizado (lower/trim) desde el dominio.
  - Orden estable en listados: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from ....crosscutting.exceptions import (
    DatabaseError,
    EntityNotFoundError,
    OptimisticLockError,
)
from ....domain.repositories import UserFilter
from ....domain.users import User, UserStatus
from .base import PostgresRepositoryBase

# R: Lista explícita de columnas: contrato estable con migraciones.
_USER_COLUMNS = (
    "id, email, password_hash, first_name, last_name, status, "
    "created_at, updated_at, version"
)

_USER_ORDER_BY = "created_at DESC, id DESC"


def _row_to_user(row: tuple) -> User:
    try:
        status = UserStatus(row[5])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user status in database: {row[5]}") from exc

    return User(
        id=row[0],
        email=row[1],
        password_hash=row[2],
        first_name=row[3],
        last_name=row[4],
        status=status,
        created_at=row[6],
        updated_at=row[7],
        version=row[8],
    )


def _build_where(user_filter: UserFilter) -> tuple[str, list[object]]:
    conditions: list[str] = []
    params: list[object] = []

    if user_filter.status is not None:
        conditions.append("status = %s")
        params.append(user_filter.status.value)

    # R: ILIKE con %...% = búsqueda parcial case-insensitive.
    for column, value in (
        ("email", user_filter.email),
        ("first_name", user_filter.first_name),
        ("last_name", user_filter.last_name),
    ):
        if value:
            conditions.append(f"{column} ILIKE %s")
            params.append(f"%{value}%")

    if user_filter.created_after is not None:
        conditions.append("created_at >= %s")
        params.append(user_filter.created_after)

    if user_filter.created_before is not None:
        conditions.append("created_at <= %s")
        params.append(user_filter.created_before)

    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return where, params


class PostgresUserRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL del repositorio de usuarios."""

    # --- Escritura ---
    def create(self, user: User) -> None:
        self._execute(
            query="""
                INSERT INTO users (
                    id, email, password_hash, first_name, last_name, status,
                    created_at, updated_at, version
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            params=(
                user.id,
                user.email,
                user.password_hash,
                user.first_name,
                user.last_name,
                user.status.value,
                user.created_at,
                user.updated_at,
                user.version,
            ),
            log_msg="PostgresUserRepository: create failed",
            log_extra={"user_id": str(user.id)},
        )

    def update(self, user: User) -> None:
        """
        Persiste el usuario si la versión almacenada es user.version - 1.

        Raises:
            EntityNotFoundError: el usuario no existe.
            OptimisticLockError: existe pero con otra versión.
            DuplicateKeyError: el nuevo email ya está tomado.
        """
        expected_version = user.version - 1
        affected = self._execute(
            query="""
                UPDATE users
                SET email = %s,
                    password_hash = %s,
                    first_name = %s,
                    last_name = %s,
                    status = %s,
                    updated_at = %s,
                    version = %s
                WHERE id = %s AND version = %s
            """,
            params=(
                user.email,
                user.password_hash,
                user.first_name,
                user.last_name,
                user.status.value,
                user.updated_at,
                user.version,
                user.id,
                expected_version,
            ),
            log_msg="PostgresUserRepository: update failed",
            log_extra={"user_id": str(user.id), "expected_version": expected_version},
        )
        if affected:
            return

        if self.get_by_id(user.id) is None:
            raise EntityNotFoundError(f"user {user.id} not found")
        raise OptimisticLockError(
            f"user {user.id} was modified concurrently (expected version {expected_version})"
        )

    def delete(self, user_id: UUID) -> None:
        affected = self._execute(
            query="DELETE FROM users WHERE id = %s",
            params=(user_id,),
            log_msg="PostgresUserRepository: delete failed",
            log_extra={"user_id": str(user_id)},
        )
        if not affected:
            raise EntityNotFoundError(f"user {user_id} not found")

    # --- Lectura ---
    def get_by_id(self, user_id: UUID) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            log_msg="PostgresUserRepository: get_by_id failed",
            log_extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s",
            params=(email,),
            log_msg="PostgresUserRepository: get_by_email failed",
            log_extra={},
        )
        return _row_to_user(row) if row else None

    def exists_by_email(self, email: str) -> bool:
        row = self._fetchone(
            query="SELECT EXISTS(SELECT 1 FROM users WHERE email = %s)",
            params=(email,),
            log_msg="PostgresUserRepository: exists_by_email failed",
            log_extra={},
        )
        return bool(row and row[0])

    def list(self, user_filter: UserFilter) -> tuple[List[User], int]:
        where, params = _build_where(user_filter)
        log_extra = {"limit": user_filter.limit, "offset": user_filter.offset}

        count_row = self._fetchone(
            query=f"SELECT COUNT(*) FROM users {where}",
            params=params,
            log_msg="PostgresUserRepository: count failed",
            log_extra=log_extra,
        )
        total = int(count_row[0]) if count_row else 0

        rows = self._fetchall(
            query=f"""
                SELECT {_USER_COLUMNS}
                FROM users
                {where}
                ORDER BY {_USER_ORDER_BY}
                LIMIT %s OFFSET %s
            """,
            params=[*params, user_filter.limit, user_filter.offset],
            log_msg="PostgresUserRepository: list failed",
            log_extra=log_extra,
        )
        return [_row_to_user(r) for r in rows], total
