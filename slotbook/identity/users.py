"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario y de Asignación de Rol

Responsabilidades:
    - Definir el enum de roles (scholar / faculty / admin).
    - Definir User (directorio de usuarios, con copia denormalizada del rol).
    - Definir RoleAssignment (rol autoritativo por email, puede existir sin User).

Colaboradores:
    - identity/auth_users.py: emite/valida JWT con User y UserRole.
    - application/role_service.py: mantiene User.role == RoleAssignment.role.
    - infrastructure/repositories/*: mapean filas -> User / RoleAssignment.

Notas:
    - Este módulo NO contiene lógica de negocio: solo "shapes" de datos.
    - El email es la clave de rol y se compara tal cual (case-sensitive).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados."""

    SCHOLAR = "scholar"
    FACULTY = "faculty"
    ADMIN = "admin"


DEFAULT_ROLE: UserRole = UserRole.SCHOLAR


@dataclass(frozen=True, slots=True)
class User:
    """Usuario del directorio (creado en el primer login exitoso)."""

    id: UUID
    email: str
    name: str
    role: UserRole
    picture: str | None = None
    google_id: str | None = None
    created_at: datetime | None = None
    last_login_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class RoleAssignment:
    """Rol autoritativo para un email."""

    email: str
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Proyección pública de un usuario (embebida en slots)."""

    id: UUID
    name: str
    email: str
    picture: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(id=user.id, name=user.name, email=user.email, picture=user.picture)


def normalize_email(email: str | None) -> str:
    """Trim de espacios; el email es case-sensitive como clave de rol."""
    return (email or "").strip()
