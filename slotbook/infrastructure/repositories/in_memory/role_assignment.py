"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/role_assignment.py
============================================================
Class: InMemoryRoleAssignmentRepository

Responsibilities:
  - Role Store en memoria (email -> rol).
  - ensure_assignment: "INSERT ... ON CONFLICT DO NOTHING" + lectura.
  - assign_role: upsert + sync de users.role bajo el MISMO lock
    (emula la transacción de Postgres).
  - record_login: asignación default + alta/refresco del usuario con ese rol
    bajo el mismo lock (un assign_role concurrente queda antes o después).

Collaborators:
  - InMemoryUserRepository (lock compartido + set_role_by_email)
  - identity.users.RoleAssignment, UserRole
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List

from ....identity.users import RoleAssignment, User, UserRole
from .user import InMemoryUserRepository

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryRoleAssignmentRepository:
    def __init__(self, users: InMemoryUserRepository) -> None:
        self._users = users
        self._lock = users.lock
        self._assignments: Dict[str, RoleAssignment] = {}

    def get_assignment(self, email: str) -> RoleAssignment | None:
        with self._lock:
            return self._assignments.get(email)

    def ensure_assignment(
        self, email: str, *, default_role: UserRole, at: datetime
    ) -> RoleAssignment:
        with self._lock:
            existing = self._assignments.get(email)
            if existing is not None:
                return existing
            created = RoleAssignment(
                email=email, role=default_role, created_at=at, updated_at=at
            )
            self._assignments[email] = created
            return created

    def assign_role(
        self, email: str, role: UserRole, *, at: datetime
    ) -> tuple[RoleAssignment, User | None]:
        with self._lock:
            existing = self._assignments.get(email)
            if existing is None:
                assignment = RoleAssignment(
                    email=email, role=role, created_at=at, updated_at=at
                )
            else:
                assignment = replace(existing, role=role, updated_at=at)
            self._assignments[email] = assignment
            user = self._users.set_role_by_email(email, role)
            return assignment, user

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
        with self._lock:
            assignment = self.ensure_assignment(
                email, default_role=default_role, at=at
            )
            return self._users.save_login(
                email=email,
                name=name,
                picture=picture,
                google_id=google_id,
                role=assignment.role,
                at=at,
            )

    def list_assignments(self) -> List[RoleAssignment]:
        with self._lock:
            values = list(self._assignments.values())
        by_email = sorted(values, key=lambda a: a.email)
        return sorted(by_email, key=lambda a: a.created_at or _EPOCH, reverse=True)
