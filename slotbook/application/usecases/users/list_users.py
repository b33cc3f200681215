"""
===============================================================================
USE CASES: User directory queries
===============================================================================

    - ListUsersUseCase: todos los usuarios, created_at DESC. VIEW_USERS.
    - ListFacultiesUseCase: usuarios con rol faculty, por nombre. BROWSE.
    - ListRoleAssignmentsUseCase: el Role Store completo, created_at DESC.
      VIEW_USERS.
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import UserRepository
from ....identity.access_control import Actor, Capability, actor_can
from ....identity.users import UserRole
from ...role_service import RoleService
from .user_results import (
    RoleAssignmentListResult,
    UserError,
    UserErrorCode,
    UserListResult,
)

_FORBIDDEN = UserError(code=UserErrorCode.FORBIDDEN, message="Rol insuficiente.")


class ListUsersUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, actor: Actor | None) -> UserListResult:
        if not actor_can(actor, Capability.VIEW_USERS):
            return UserListResult(error=_FORBIDDEN)
        return UserListResult(users=self._users.list_users())


class ListFacultiesUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, actor: Actor | None) -> UserListResult:
        if not actor_can(actor, Capability.BROWSE):
            return UserListResult(error=_FORBIDDEN)
        return UserListResult(users=self._users.list_users_by_role(UserRole.FACULTY))


class ListRoleAssignmentsUseCase:
    def __init__(self, role_service: RoleService) -> None:
        self._roles = role_service

    def execute(self, actor: Actor | None) -> RoleAssignmentListResult:
        if not actor_can(actor, Capability.VIEW_USERS):
            return RoleAssignmentListResult(error=_FORBIDDEN)
        return RoleAssignmentListResult(assignments=self._roles.list_assignments())
