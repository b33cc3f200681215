"""
===============================================================================
TARJETA CRC — identity/access_control.py
===============================================================================

Módulo:
    Authorization Gate (capacidad -> roles permitidos)

Responsabilidades:
    - Catalogar las capacidades del sistema (Capability).
    - Mapear cada capacidad al conjunto de roles que la habilita.
    - Responder "¿este rol puede X?" sin FastAPI ni DB (lógica pura).

Colaboradores:
    - identity.users.UserRole
    - identity.auth_users: require_capability (dependencia FastAPI)
    - application.usecases.*: re-chequean la capacidad sobre el actor recibido

Reglas:
    - BROWSE: cualquier usuario autenticado.
    - VIEW_USERS / MUTATE_ROLE: solo admin.
    - MANAGE_SLOTS: faculty y admin.
    - BOOK_SLOT: solo scholar.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping
from uuid import UUID

from .users import UserRole


class Capability(str, Enum):
    """Capacidades protegidas por rol."""

    BROWSE = "browse"
    VIEW_USERS = "users:view"
    MUTATE_ROLE = "roles:mutate"
    MANAGE_SLOTS = "slots:manage"
    BOOK_SLOT = "slots:book"


CAPABILITY_ROLES: Mapping[Capability, frozenset[UserRole]] = {
    Capability.BROWSE: frozenset(UserRole),
    Capability.VIEW_USERS: frozenset({UserRole.ADMIN}),
    Capability.MUTATE_ROLE: frozenset({UserRole.ADMIN}),
    Capability.MANAGE_SLOTS: frozenset({UserRole.FACULTY, UserRole.ADMIN}),
    Capability.BOOK_SLOT: frozenset({UserRole.SCHOLAR}),
}

# Capacidades que deben evaluarse contra el rol persistido (no el claim del token).
FRESH_ROLE_CAPABILITIES: frozenset[Capability] = frozenset({Capability.MUTATE_ROLE})


@dataclass(frozen=True, slots=True)
class Actor:
    """Sujeto que ejecuta un caso de uso."""

    user_id: UUID | None
    email: str | None
    role: UserRole | None


def allowed_roles(capability: Capability) -> frozenset[UserRole]:
    return CAPABILITY_ROLES[capability]


def is_allowed(role: UserRole | None, capability: Capability) -> bool:
    """True si el rol habilita la capacidad."""
    if role is None:
        return False
    return role in CAPABILITY_ROLES[capability]


def actor_can(actor: Actor | None, capability: Capability) -> bool:
    """Igual que is_allowed, pero exige un actor identificado."""
    if actor is None or actor.user_id is None:
        return False
    return is_allowed(actor.role, capability)


def requires_fresh_role(capability: Capability) -> bool:
    return capability in FRESH_ROLE_CAPABILITIES
