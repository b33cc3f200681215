"""
===============================================================================
TARJETA CRC — schemas/users.py
===============================================================================

Módulo:
    Schemas HTTP para Usuarios y Roles

Responsabilidades:
    - DTOs del directorio de usuarios y de las asignaciones de rol.
    - Normalizar el email de entrada (trim; sin cambiar mayúsculas: es clave).

Colaboradores:
    - identity.users.UserRole
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from slotbook.identity.users import UserRole


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class UpdateUserRoleReq(BaseModel):
    role: UserRole


class AssignRoleByEmailReq(BaseModel):
    email: str = Field(..., max_length=320)
    role: UserRole

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserRes(BaseModel):
    id: UUID
    email: str
    name: str
    role: UserRole
    picture: str | None = None
    created_at: datetime | None = None
    last_login_at: datetime | None = None


class UsersListRes(BaseModel):
    users: list[UserRes]


class FacultyRes(BaseModel):
    id: UUID
    name: str
    email: str
    picture: str | None = None


class FacultiesListRes(BaseModel):
    faculties: list[FacultyRes]


class UserRoleUpdatedRes(BaseModel):
    user: UserRes
    message: str


class RoleAssignmentRes(BaseModel):
    email: str
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleAssignedRes(BaseModel):
    """Asignación por email; note indica si aplicó ya o en el próximo login."""

    email: str
    role: UserRole
    applied_immediately: bool
    message: str
    note: str


class RoleAssignmentsListRes(BaseModel):
    roles: list[RoleAssignmentRes]
