"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Directorio de usuarios sobre la tabla `users` (SQL crudo).
  - Lecturas y listados del directorio; las escrituras de login y de rol
    pasan por el Role Store (postgres.role_assignment).
  - Mapear filas -> `User` validando `UserRole` estrictamente.

Collaborators:
  - PostgresRepositoryBase (pool + errores)
  - identity.users.User / UserRole

Constraints / Notes:
  - Retorna None cuando no existe el recurso (no exception por "not found").
  - Rol persistido fuera del enum -> DatabaseError (drift de esquema/datos).
  - Orden: list_users created_at DESC, email ASC; list_users_by_role name ASC.
============================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import DatabaseError
from ....identity.users import User, UserRole
from ._base import PostgresRepositoryBase

# R: Lista explícita de columnas: contrato con la migración 001.
USER_COLUMNS = "id, email, name, role, picture, google_id, created_at, last_login_at"


def row_to_user(row: tuple) -> User:
    try:
        role = UserRole(row[3])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[3]}") from exc

    return User(
        id=row[0],
        email=row[1],
        name=row[2],
        role=role,
        picture=row[4],
        google_id=row[5],
        created_at=row[6],
        last_login_at=row[7],
    )


class PostgresUserRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL del directorio de usuarios."""

    def get_user_by_id(self, user_id: UUID) -> User | None:
        row = self._fetchone(
            query=f"SELECT {USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            context_msg="PostgresUserRepository: get_user_by_id failed",
            extra={"user_id": str(user_id)},
        )
        return row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> User | None:
        row = self._fetchone(
            query=f"SELECT {USER_COLUMNS} FROM users WHERE email = %s",
            params=(email,),
            context_msg="PostgresUserRepository: get_user_by_email failed",
            extra={},
        )
        return row_to_user(row) if row else None

    def list_users(self) -> list[User]:
        rows = self._fetchall(
            query=f"""
                SELECT {USER_COLUMNS}
                FROM users
                ORDER BY created_at DESC NULLS LAST, email ASC
            """,
            params=(),
            context_msg="PostgresUserRepository: list_users failed",
            extra={},
        )
        return [row_to_user(r) for r in rows]

    def list_users_by_role(self, role: UserRole) -> list[User]:
        rows = self._fetchall(
            query=f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE role = %s
                ORDER BY name ASC, email ASC
            """,
            params=(role.value,),
            context_msg="PostgresUserRepository: list_users_by_role failed",
            extra={"role": role.value},
        )
        return [row_to_user(r) for r in rows]
