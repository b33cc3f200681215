"""
===============================================================================
TARJETA CRC — slotbook/interfaces/api/http/routers/users.py
===============================================================================

Class/Module:
    Users Router

Responsibilities:
    - Exponer el directorio de usuarios y el catálogo de faculties.
    - Exponer la administración de roles (por id de usuario o por email).
    - Traducir UserError -> RFC7807.

Collaborators:
    - slotbook.application.usecases (List*/UpdateUserRole/AssignRoleByEmail)
    - slotbook.identity.auth_users.require_capability
    - slotbook.container (factories DI)
    - schemas.users (DTOs Pydantic)

Notas:
    - MUTATE_ROLE se evalúa contra el rol persistido (ver access_control).
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from slotbook.application.usecases import (
    AssignRoleByEmailInput,
    AssignRoleByEmailUseCase,
    ListFacultiesUseCase,
    ListRoleAssignmentsUseCase,
    ListUsersUseCase,
    UpdateUserRoleInput,
    UpdateUserRoleUseCase,
)
from slotbook.container import (
    get_assign_role_by_email_use_case,
    get_list_faculties_use_case,
    get_list_role_assignments_use_case,
    get_list_users_use_case,
    get_update_user_role_use_case,
)
from slotbook.crosscutting.error_responses import internal_error
from slotbook.identity.access_control import Actor, Capability
from slotbook.identity.auth_users import require_capability
from slotbook.identity.users import RoleAssignment, User

from ..error_mapping import raise_user_error
from ..schemas.users import (
    AssignRoleByEmailReq,
    FacultiesListRes,
    FacultyRes,
    RoleAssignedRes,
    RoleAssignmentRes,
    RoleAssignmentsListRes,
    UpdateUserRoleReq,
    UserRes,
    UserRoleUpdatedRes,
    UsersListRes,
)

router = APIRouter()

_NOTE_APPLIED = "User exists - role updated immediately"
_NOTE_DEFERRED = "Role will be applied when user logs in"


def to_user_res(user: User) -> UserRes:
    """Mapea User -> DTO HTTP (también lo usa /auth/me)."""
    return UserRes(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        picture=user.picture,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )


def _to_assignment_res(assignment: RoleAssignment) -> RoleAssignmentRes:
    return RoleAssignmentRes(
        email=assignment.email,
        role=assignment.role,
        created_at=assignment.created_at,
        updated_at=assignment.updated_at,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/users", response_model=UsersListRes, tags=["users"])
def list_users(
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
    actor: Actor = Depends(require_capability(Capability.VIEW_USERS)),
):
    result = use_case.execute(actor)
    if result.error is not None:
        raise_user_error(result.error)
    return UsersListRes(users=[to_user_res(u) for u in result.users])


@router.get("/users/faculties", response_model=FacultiesListRes, tags=["users"])
def list_faculties(
    use_case: ListFacultiesUseCase = Depends(get_list_faculties_use_case),
    actor: Actor = Depends(require_capability(Capability.BROWSE)),
):
    result = use_case.execute(actor)
    if result.error is not None:
        raise_user_error(result.error)
    return FacultiesListRes(
        faculties=[
            FacultyRes(id=u.id, name=u.name, email=u.email, picture=u.picture)
            for u in result.users
        ]
    )


@router.get("/users/roles", response_model=RoleAssignmentsListRes, tags=["users"])
def list_role_assignments(
    use_case: ListRoleAssignmentsUseCase = Depends(
        get_list_role_assignments_use_case
    ),
    actor: Actor = Depends(require_capability(Capability.VIEW_USERS)),
):
    result = use_case.execute(actor)
    if result.error is not None:
        raise_user_error(result.error)
    return RoleAssignmentsListRes(
        roles=[_to_assignment_res(a) for a in result.assignments]
    )


@router.patch(
    "/users/{user_id}/role",
    response_model=UserRoleUpdatedRes,
    tags=["users"],
)
def update_user_role(
    user_id: UUID,
    req: UpdateUserRoleReq,
    use_case: UpdateUserRoleUseCase = Depends(get_update_user_role_use_case),
    actor: Actor = Depends(require_capability(Capability.MUTATE_ROLE)),
):
    result = use_case.execute(
        UpdateUserRoleInput(user_id=user_id, role=req.role, actor=actor)
    )
    if result.error is not None:
        raise_user_error(result.error)
    if result.user is None:
        raise internal_error("Rol no actualizado")

    return UserRoleUpdatedRes(
        user=to_user_res(result.user), message="User role updated successfully"
    )


@router.post("/users/roles/email", response_model=RoleAssignedRes, tags=["users"])
def assign_role_by_email(
    req: AssignRoleByEmailReq,
    use_case: AssignRoleByEmailUseCase = Depends(get_assign_role_by_email_use_case),
    actor: Actor = Depends(require_capability(Capability.MUTATE_ROLE)),
):
    result = use_case.execute(
        AssignRoleByEmailInput(email=req.email, role=req.role, actor=actor)
    )
    if result.error is not None:
        raise_user_error(result.error)
    if result.assignment is None:
        raise internal_error("Rol no asignado")

    return RoleAssignedRes(
        email=result.assignment.email,
        role=result.assignment.role,
        applied_immediately=result.applied_immediately,
        message="Role assigned successfully",
        note=_NOTE_APPLIED if result.applied_immediately else _NOTE_DEFERRED,
    )
