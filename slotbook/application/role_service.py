"""
===============================================================================
TARJETA CRC — application/role_service.py
===============================================================================

Class:
    RoleService

Responsibilities:
    - Ser el ÚNICO dueño de las dos representaciones del rol:
        * user_roles (email -> rol, autoritativo, puede existir sin usuario)
        * users.role (copia denormalizada en el directorio)
    - get_role: leer el rol de un email creando la asignación default
      (scholar) si no existe.
    - assign_role: upsert + sincronización del usuario en una sola
      transacción (delegada al repositorio).
    - record_login: alta/refresco del usuario con el rol del Role Store, leído
      y copiado en la misma transacción que serializa con assign_role.

Collaborators:
    - domain.repositories.RoleAssignmentRepository
    - domain.services.Clock
    - crosscutting.logger

Constraints:
    - No hay triggers ni sincronización en background: toda escritura de rol
      pasa por acá.
    - El guard de auto-modificación vive en los casos de uso (conocen al actor).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ..crosscutting.logger import logger
from ..domain.repositories import RoleAssignmentRepository
from ..domain.services import Clock
from ..domain.value_objects import VerifiedIdentity
from ..identity.users import DEFAULT_ROLE, RoleAssignment, User, UserRole


@dataclass(frozen=True, slots=True)
class RoleChange:
    """Resultado de una asignación de rol."""

    assignment: RoleAssignment
    user: User | None

    @property
    def applied_immediately(self) -> bool:
        """True si ya existía un usuario y su rol quedó actualizado."""
        return self.user is not None


class RoleService:
    """Fachada transaccional sobre Role Store + User Directory."""

    def __init__(
        self,
        *,
        role_repository: RoleAssignmentRepository,
        clock: Clock,
    ) -> None:
        self._roles = role_repository
        self._clock = clock

    def get_role(self, email: str) -> UserRole:
        """Rol autoritativo del email; persiste scholar si no había asignación."""
        assignment = self._roles.ensure_assignment(
            email, default_role=DEFAULT_ROLE, at=self._clock.now()
        )
        return assignment.role

    def assign_role(self, email: str, role: UserRole) -> RoleChange:
        """Upsert del rol + sync de users.role en la misma transacción."""
        role = UserRole(role)
        assignment, user = self._roles.assign_role(email, role, at=self._clock.now())

        logger.info(
            "rol asignado",
            extra={
                "email": email,
                "role": role.value,
                "user_synced": user is not None,
            },
        )
        return RoleChange(assignment=assignment, user=user)

    def record_login(self, identity: VerifiedIdentity) -> User:
        """Crea o refresca el usuario con el rol vigente del email."""
        return self._roles.record_login(
            email=identity.email,
            name=identity.name,
            picture=identity.picture,
            google_id=identity.subject,
            default_role=DEFAULT_ROLE,
            at=self._clock.now(),
        )

    def list_assignments(self) -> list[RoleAssignment]:
        return self._roles.list_assignments()
