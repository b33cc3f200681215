"""User use cases: login, directorio y asignación de roles."""

from .authenticate_with_google import (
    AuthenticateWithGoogleInput,
    AuthenticateWithGoogleUseCase,
)
from .list_users import (
    ListFacultiesUseCase,
    ListRoleAssignmentsUseCase,
    ListUsersUseCase,
)
from .update_user_role import (
    AssignRoleByEmailInput,
    AssignRoleByEmailUseCase,
    UpdateUserRoleInput,
    UpdateUserRoleUseCase,
)
from .user_results import (
    RoleAssignmentListResult,
    RoleAssignmentResult,
    UserError,
    UserErrorCode,
    UserListResult,
    UserResult,
)

__all__ = [
    "AuthenticateWithGoogleInput",
    "AuthenticateWithGoogleUseCase",
    "ListFacultiesUseCase",
    "ListRoleAssignmentsUseCase",
    "ListUsersUseCase",
    "AssignRoleByEmailInput",
    "AssignRoleByEmailUseCase",
    "UpdateUserRoleInput",
    "UpdateUserRoleUseCase",
    "RoleAssignmentListResult",
    "RoleAssignmentResult",
    "UserError",
    "UserErrorCode",
    "UserListResult",
    "UserResult",
]
