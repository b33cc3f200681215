"""
===============================================================================
TARJETA CRC — domain/repositories.py
===============================================================================

Módulo:
    Puertos de Persistencia (Protocols)

Responsabilidades:
    - Definir contratos de persistencia para usuarios, roles y slots.
    - Expresar las garantías atómicas que el negocio necesita del store:
        * alta de slot sin solapamiento (chequeo + insert atómicos)
        * reserva condicionada a status = available
        * escritura dual rol (user_roles + users.role) en una transacción
        * login: rol leído y copiado a users.role en la misma transacción

Colaboradores:
    - infrastructure/repositories/in_memory/*: implementación con Lock.
    - infrastructure/repositories/postgres/*: implementación SQL.
    - application/*: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Listados con orden determinístico (documentado por método).
===============================================================================
"""

from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from typing import Protocol
from uuid import UUID

from ..identity.users import RoleAssignment, User, UserRole
from .entities import Slot, SlotDetails, SlotStatus


class UserRepository(Protocol):
    """Directorio de usuarios (perfil + copia denormalizada del rol)."""

    def get_user_by_id(self, user_id: UUID) -> User | None: ...

    def get_user_by_email(self, email: str) -> User | None: ...

    def list_users(self) -> list[User]:
        """Todos los usuarios, created_at DESC."""
        ...

    def list_users_by_role(self, role: UserRole) -> list[User]:
        """Usuarios con un rol, name ASC."""
        ...


class RoleAssignmentRepository(Protocol):
    """Role Store: email -> rol (autoritativo)."""

    def get_assignment(self, email: str) -> RoleAssignment | None: ...

    def ensure_assignment(
        self, email: str, *, default_role: UserRole, at: datetime
    ) -> RoleAssignment:
        """Devuelve la asignación existente o persiste default_role."""
        ...

    def assign_role(
        self, email: str, role: UserRole, *, at: datetime
    ) -> tuple[RoleAssignment, User | None]:
        """
        Upsert de la asignación y, en la MISMA transacción, actualización de
        users.role si existe un usuario con ese email.
        """
        ...

    def record_login(
        self,
        *,
        email: str,
        name: str,
        picture: str | None,
        google_id: str | None,
        default_role: UserRole,
        at: datetime,
    ) -> User:
        """
        Asegura la asignación (default_role si no existe), la bloquea y crea o
        refresca el usuario con ESE rol, en la misma transacción. Una
        asignación concurrente queda serializada antes o después del login.
        """
        ...

    def list_assignments(self) -> list[RoleAssignment]:
        """Todas las asignaciones, created_at DESC."""
        ...


class SlotRepository(Protocol):
    """Slots de disponibilidad."""

    def create_slot_if_free(self, slot: Slot) -> Slot | None:
        """
        Inserta el slot si no se solapa con otro slot bloqueante del mismo
        faculty y fecha. Devuelve None ante conflicto. Chequeo + insert atómicos.
        """
        ...

    def list_slots_for_faculty_on(self, faculty_id: UUID, day: Date) -> list[Slot]:
        """Slots (cualquier estado) de un faculty en una fecha, start_time ASC."""
        ...

    def get_slot(self, slot_id: UUID) -> Slot | None: ...

    def get_available_slot(self, slot_id: UUID) -> SlotDetails | None:
        """Slot con id y status = available (con perfil del faculty)."""
        ...

    def get_owned_slot(self, slot_id: UUID, faculty_id: UUID) -> Slot | None:
        """Slot con id y faculty_id (ownership en la query)."""
        ...

    def get_slot_details(self, slot_id: UUID) -> SlotDetails | None:
        """Slot con perfiles de faculty y scholar."""
        ...

    def book_slot(
        self,
        slot_id: UUID,
        *,
        scholar_id: UUID,
        notes: str | None,
        meeting_link: str,
        at: datetime,
    ) -> Slot | None:
        """UPDATE condicionado a status = available. None si se perdió la carrera."""
        ...

    def transition_slot(
        self,
        slot_id: UUID,
        *,
        expected: SlotStatus,
        target: SlotStatus,
        at: datetime,
    ) -> Slot | None:
        """UPDATE condicionado al estado esperado. None si cambió en el medio."""
        ...

    def delete_slot_if_deletable(self, slot_id: UUID, faculty_id: UUID) -> bool:
        """DELETE condicionado a ownership y status en DELETABLE_STATUSES."""
        ...

    def list_available_slots(
        self,
        *,
        from_date: Date,
        faculty_id: UUID | None = None,
        on_date: Date | None = None,
    ) -> list[SlotDetails]:
        """Slots available desde from_date, date ASC, start_time ASC."""
        ...

    def list_slots_by_scholar(self, scholar_id: UUID) -> list[SlotDetails]:
        """Reservas de un scholar, date ASC, start_time ASC."""
        ...

    def list_slots_by_faculty(self, faculty_id: UUID) -> list[SlotDetails]:
        """Slots de un faculty (con scholar), date ASC, start_time ASC."""
        ...

    def ping(self) -> bool: ...
