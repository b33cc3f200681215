"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Directorio de usuarios en memoria (tests / local dev).
  - save_login: alta o refresco de perfil + rol por email (lo invoca el Role
    Store con el lock tomado).
  - Ordering determinístico alineado con Postgres:
      list_users:         created_at DESC NULLS LAST, email ASC
      list_users_by_role: name ASC, email ASC

Collaborators:
  - identity.users.User, UserRole
  - InMemoryRoleAssignmentRepository: comparte el lock para la escritura dual

Constraints / Notes:
  - Thread-safe: RLock (re-entrante porque el Role Store lo toma primero).
  - User es inmutable: se reemplaza con dataclasses.replace.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, List
from uuid import UUID, uuid4

from ....identity.users import User, UserRole

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryUserRepository:
    """Repositorio in-memory, thread-safe, para el directorio de usuarios."""

    def __init__(self) -> None:
        self.lock = RLock()
        self._users: Dict[UUID, User] = {}

    def _find_by_email(self, email: str) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    # =========================================================
    # Lecturas
    # =========================================================
    def get_user_by_id(self, user_id: UUID) -> User | None:
        with self.lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self.lock:
            return self._find_by_email(email)

    def list_users(self) -> List[User]:
        with self.lock:
            values = list(self._users.values())
        # R: dos pasadas estables: desempate por email ASC, luego created_at DESC.
        by_email = sorted(values, key=lambda u: u.email)
        return sorted(by_email, key=lambda u: u.created_at or _EPOCH, reverse=True)

    def list_users_by_role(self, role: UserRole) -> List[User]:
        with self.lock:
            values = [u for u in self._users.values() if u.role == role]
        return sorted(values, key=lambda u: (u.name, u.email))

    # =========================================================
    # Escrituras
    # =========================================================
    def save_login(
        self,
        *,
        email: str,
        name: str,
        picture: str | None,
        google_id: str | None,
        role: UserRole,
        at: datetime,
    ) -> User:
        """Alta o refresco de login; llamar con el lock tomado por el Role Store."""
        with self.lock:
            existing = self._find_by_email(email)
            if existing is None:
                user = User(
                    id=uuid4(),
                    email=email,
                    name=name,
                    role=role,
                    picture=picture,
                    google_id=google_id,
                    created_at=at,
                    last_login_at=at,
                )
            else:
                user = replace(
                    existing,
                    name=name,
                    picture=picture,
                    google_id=google_id,
                    role=role,
                    last_login_at=at,
                )
            self._users[user.id] = user
            return user

    def set_role_by_email(self, email: str, role: UserRole) -> User | None:
        """Sincroniza users.role; llamar con el lock tomado por el Role Store."""
        with self.lock:
            existing = self._find_by_email(email)
            if existing is None:
                return None
            updated = replace(existing, role=role)
            self._users[updated.id] = updated
            return updated

    def add_user(self, user: User) -> User:
        """Alta directa (seed de tests)."""
        with self.lock:
            self._users[user.id] = user
            return user
