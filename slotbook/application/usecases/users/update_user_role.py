"""
===============================================================================
USE CASES: Role mutation (by user id / by email)
===============================================================================

Name:
    UpdateUserRoleUseCase / AssignRoleByEmailUseCase

Business Goal:
    Permitir que un admin cambie el rol de un usuario existente o pre-asigne
    un rol a un email que todavía no inició sesión.

Reglas:
    - Capacidad MUTATE_ROLE (la capa HTTP la evalúa contra el rol persistido).
    - Nadie puede cambiar su propio rol, ni por id ni por email (incluido admin).
    - Toda escritura pasa por RoleService.assign_role (escritura dual en una
      transacción: user_roles + users.role).

Error Mapping:
    - FORBIDDEN: sin capacidad o auto-modificación
    - VALIDATION_ERROR: email vacío
    - NOT_FOUND: usuario inexistente (solo por id)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....domain.repositories import UserRepository
from ....identity.access_control import Actor, Capability, actor_can
from ....identity.users import UserRole, normalize_email
from ...role_service import RoleService
from .user_results import (
    RoleAssignmentResult,
    UserError,
    UserErrorCode,
    UserResult,
)

SELF_CHANGE_MESSAGE = "Cannot change your own role"


def _is_self(
    actor: Actor, *, user_id: UUID | None = None, email: str | None = None
) -> bool:
    if user_id is not None and actor.user_id == user_id:
        return True
    return email is not None and actor.email is not None and actor.email == email


@dataclass(frozen=True)
class UpdateUserRoleInput:
    user_id: UUID
    role: UserRole
    actor: Actor | None = None


class UpdateUserRoleUseCase:
    def __init__(
        self, *, user_repository: UserRepository, role_service: RoleService
    ) -> None:
        self._users = user_repository
        self._roles = role_service

    def execute(self, input_data: UpdateUserRoleInput) -> UserResult:
        actor = input_data.actor
        if not actor_can(actor, Capability.MUTATE_ROLE):
            return self._error(UserErrorCode.FORBIDDEN, "Rol insuficiente.")

        if _is_self(actor, user_id=input_data.user_id):
            return self._error(UserErrorCode.FORBIDDEN, SELF_CHANGE_MESSAGE)

        target = self._users.get_user_by_id(input_data.user_id)
        if target is None:
            return self._error(UserErrorCode.NOT_FOUND, "User not found")

        # R: el email es la clave de rol; el id del token puede no coincidir.
        if _is_self(actor, email=target.email):
            return self._error(UserErrorCode.FORBIDDEN, SELF_CHANGE_MESSAGE)

        change = self._roles.assign_role(target.email, input_data.role)
        if change.user is None:
            return self._error(UserErrorCode.NOT_FOUND, "User not found")
        return UserResult(user=change.user)

    @staticmethod
    def _error(code: UserErrorCode, message: str) -> UserResult:
        return UserResult(error=UserError(code=code, message=message))


@dataclass(frozen=True)
class AssignRoleByEmailInput:
    email: str
    role: UserRole
    actor: Actor | None = None


class AssignRoleByEmailUseCase:
    def __init__(self, role_service: RoleService) -> None:
        self._roles = role_service

    def execute(self, input_data: AssignRoleByEmailInput) -> RoleAssignmentResult:
        actor = input_data.actor
        if not actor_can(actor, Capability.MUTATE_ROLE):
            return self._error(UserErrorCode.FORBIDDEN, "Rol insuficiente.")

        email = normalize_email(input_data.email)
        if not email:
            return self._error(
                UserErrorCode.VALIDATION_ERROR, "Email and role are required"
            )

        if _is_self(actor, email=email):
            return self._error(UserErrorCode.FORBIDDEN, SELF_CHANGE_MESSAGE)

        change = self._roles.assign_role(email, input_data.role)
        return RoleAssignmentResult(
            assignment=change.assignment,
            applied_immediately=change.applied_immediately,
        )

    @staticmethod
    def _error(code: UserErrorCode, message: str) -> RoleAssignmentResult:
        return RoleAssignmentResult(error=UserError(code=code, message=message))
