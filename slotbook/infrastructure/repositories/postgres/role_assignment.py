"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/role_assignment.py
============================================================
Class: PostgresRoleAssignmentRepository

Responsibilities:
  - Role Store sobre la tabla `user_roles` (email único).
  - ensure_assignment: INSERT ... ON CONFLICT DO NOTHING + SELECT, así dos
    primeros logins concurrentes leen la misma asignación.
  - assign_role: upsert en user_roles + UPDATE users.role en UNA transacción.
  - record_login: asignación default + SELECT ... FOR UPDATE + upsert del
    usuario en UNA transacción. El lock de fila sobre user_roles ordena el
    login respecto de un assign_role concurrente (que toma el mismo lock).

Collaborators:
  - PostgresRepositoryBase
  - postgres.user.row_to_user (mapping del usuario sincronizado)
============================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from ....crosscutting.exceptions import DatabaseError
from ....identity.users import RoleAssignment, User, UserRole
from ._base import PostgresRepositoryBase
from .user import USER_COLUMNS, row_to_user

_ROLE_COLUMNS = "email, role, created_at, updated_at"


def _row_to_assignment(row: tuple) -> RoleAssignment:
    try:
        role = UserRole(row[1])
    except ValueError as exc:
        raise DatabaseError(f"Invalid role in user_roles: {row[1]}") from exc
    return RoleAssignment(email=row[0], role=role, created_at=row[2], updated_at=row[3])


class PostgresRoleAssignmentRepository(PostgresRepositoryBase):
    _SQL_INSERT_DEFAULT = """
        INSERT INTO user_roles (email, role, created_at, updated_at)
        VALUES (%s, %s, %s, %s)
        ON CONFLICT (email) DO NOTHING
    """

    _SQL_SELECT_ONE = f"SELECT {_ROLE_COLUMNS} FROM user_roles WHERE email = %s"

    _SQL_SELECT_FOR_UPDATE = f"""
        SELECT {_ROLE_COLUMNS} FROM user_roles WHERE email = %s FOR UPDATE
    """

    _SQL_UPSERT = f"""
        INSERT INTO user_roles (email, role, created_at, updated_at)
        VALUES (%s, %s, %s, %s)
        ON CONFLICT (email) DO UPDATE SET
            role = EXCLUDED.role,
            updated_at = EXCLUDED.updated_at
        RETURNING {_ROLE_COLUMNS}
    """

    _SQL_SYNC_USER = f"""
        UPDATE users SET role = %s
        WHERE email = %s
        RETURNING {USER_COLUMNS}
    """

    _SQL_UPSERT_LOGIN = f"""
        INSERT INTO users (
            id, email, name, picture, google_id, role, created_at, last_login_at
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        ON CONFLICT (email) DO UPDATE SET
            name = EXCLUDED.name,
            picture = EXCLUDED.picture,
            google_id = EXCLUDED.google_id,
            role = EXCLUDED.role,
            last_login_at = EXCLUDED.last_login_at
        RETURNING {USER_COLUMNS}
    """

    def get_assignment(self, email: str) -> RoleAssignment | None:
        row = self._fetchone(
            query=self._SQL_SELECT_ONE,
            params=(email,),
            context_msg="PostgresRoleAssignmentRepository: get_assignment failed",
            extra={},
        )
        return _row_to_assignment(row) if row else None

    def ensure_assignment(
        self, email: str, *, default_role: UserRole, at: datetime
    ) -> RoleAssignment:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                conn.execute(
                    self._SQL_INSERT_DEFAULT, (email, default_role.value, at, at)
                )
                row = conn.execute(self._SQL_SELECT_ONE, (email,)).fetchone()
        except Exception as exc:
            raise self._fail(
                "PostgresRoleAssignmentRepository: ensure_assignment failed",
                {"default_role": default_role.value},
                exc,
            ) from exc

        if row is None:  # pragma: no cover - el INSERT o una fila previa existe
            raise DatabaseError("Unexpected: role assignment missing after insert")
        return _row_to_assignment(row)

    def assign_role(
        self, email: str, role: UserRole, *, at: datetime
    ) -> tuple[RoleAssignment, User | None]:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                with conn.transaction():
                    role_row = conn.execute(
                        self._SQL_UPSERT, (email, role.value, at, at)
                    ).fetchone()
                    user_row = conn.execute(
                        self._SQL_SYNC_USER, (role.value, email)
                    ).fetchone()
        except Exception as exc:
            raise self._fail(
                "PostgresRoleAssignmentRepository: assign_role failed",
                {"role": role.value},
                exc,
            ) from exc

        if role_row is None:  # pragma: no cover - RETURNING siempre devuelve
            raise DatabaseError("Unexpected: RETURNING clause returned no rows")
        user = row_to_user(user_row) if user_row else None
        return _row_to_assignment(role_row), user

    def record_login(
        self,
        *,
        email: str,
        name: str,
        picture: str | None,
        google_id: str | None,
        default_role: UserRole,
        at: datetime,
    ) -> User:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                with conn.transaction():
                    conn.execute(
                        self._SQL_INSERT_DEFAULT, (email, default_role.value, at, at)
                    )
                    role_row = conn.execute(
                        self._SQL_SELECT_FOR_UPDATE, (email,)
                    ).fetchone()
                    if role_row is None:  # pragma: no cover - la fila existe
                        raise DatabaseError("Unexpected: role assignment missing")
                    role = _row_to_assignment(role_row).role
                    user_row = conn.execute(
                        self._SQL_UPSERT_LOGIN,
                        (uuid4(), email, name, picture, google_id, role.value, at, at),
                    ).fetchone()
        except DatabaseError:
            raise
        except Exception as exc:
            raise self._fail(
                "PostgresRoleAssignmentRepository: record_login failed",
                {"default_role": default_role.value},
                exc,
            ) from exc

        if user_row is None:  # pragma: no cover - RETURNING siempre devuelve
            raise DatabaseError("Unexpected: RETURNING clause returned no rows")
        return row_to_user(user_row)

    def list_assignments(self) -> list[RoleAssignment]:
        rows = self._fetchall(
            query=f"""
                SELECT {_ROLE_COLUMNS}
                FROM user_roles
                ORDER BY created_at DESC NULLS LAST, email ASC
            """,
            params=(),
            context_msg="PostgresRoleAssignmentRepository: list_assignments failed",
            extra={},
        )
        return [_row_to_assignment(r) for r in rows]
