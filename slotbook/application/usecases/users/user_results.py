"""
===============================================================================
USER USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Component:
    user_results models (module)

Responsibilities:
    - Definir UserErrorCode y UserError (code + message).
    - Representar resultados de login, directorio y asignación de roles:
        * UserResult (single user)
        * UserListResult (directorio / faculties)
        * RoleAssignmentResult (asignación + si se aplicó de inmediato)
        * RoleAssignmentListResult

Collaborators:
    - identity.users.User / RoleAssignment
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....identity.users import RoleAssignment, User


class UserErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: email/rol inválidos o credencial vacía.
      - UNAUTHORIZED: credencial externa rechazada.
      - FORBIDDEN: actor sin la capacidad o intento de auto-modificación.
      - NOT_FOUND: usuario inexistente.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class UserError:
    code: UserErrorCode
    message: str


@dataclass
class UserResult:
    user: User | None = None
    error: UserError | None = None


@dataclass
class UserListResult:
    users: List[User] = field(default_factory=list)
    error: UserError | None = None


@dataclass
class RoleAssignmentResult:
    """
    Resultado de asignar un rol por email.

    applied_immediately:
      - True  => existía un usuario y su users.role quedó sincronizado
      - False => el rol se aplicará en el próximo login
    """

    assignment: RoleAssignment | None = None
    applied_immediately: bool = False
    error: UserError | None = None


@dataclass
class RoleAssignmentListResult:
    assignments: List[RoleAssignment] = field(default_factory=list)
    error: UserError | None = None
