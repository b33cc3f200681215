"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Slot, SlotStatus, SlotDetails)

Responsabilidades:
    - Definir el slot de disponibilidad publicado por un faculty.
    - Exponer helpers mínimos (intervalo UTC, estados que bloquean horario).
    - Definir la proyección SlotDetails (slot + perfiles faculty/scholar).

Colaboradores:
    - domain.slot_policy: reglas puras (solapamiento, transiciones).
    - domain.repositories: persisten/recuperan estas entidades.
    - identity.users.UserProfile: proyección de usuario embebida.

Principios:
    - Sin dependencias a DB/FastAPI.
    - Inmutables: los cambios de estado producen una copia (dataclasses.replace).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date as Date
from datetime import datetime, timezone
from datetime import time as Time
from enum import Enum
from uuid import UUID

from ..identity.users import UserProfile


class SlotStatus(str, Enum):
    """Estado del ciclo de vida de un slot."""

    AVAILABLE = "available"
    BOOKED = "booked"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Estados que ocupan el horario del faculty (participan del chequeo de solapamiento).
BLOCKING_STATUSES: frozenset[SlotStatus] = frozenset(
    {SlotStatus.AVAILABLE, SlotStatus.BOOKED}
)

# Un slot reservado no se borra: hay un scholar esperando la reunión.
DELETABLE_STATUSES: frozenset[SlotStatus] = frozenset(
    {SlotStatus.AVAILABLE, SlotStatus.CANCELLED, SlotStatus.COMPLETED}
)


@dataclass(frozen=True, slots=True)
class Slot:
    """Ventana [start_time, end_time) de un faculty en una fecha."""

    id: UUID
    faculty_id: UUID
    date: Date
    start_time: Time
    end_time: Time
    status: SlotStatus = SlotStatus.AVAILABLE
    scholar_id: UUID | None = None
    notes: str | None = None
    meeting_link: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.status == SlotStatus.AVAILABLE

    @property
    def is_booked(self) -> bool:
        return self.status == SlotStatus.BOOKED

    @property
    def blocks_schedule(self) -> bool:
        return self.status in BLOCKING_STATUSES

    @property
    def starts_at(self) -> datetime:
        """Inicio como datetime UTC (fecha + hora del slot)."""
        return datetime.combine(self.date, self.start_time, tzinfo=timezone.utc)

    @property
    def ends_at(self) -> datetime:
        """Fin como datetime UTC (fecha + hora del slot)."""
        return datetime.combine(self.date, self.end_time, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class SlotDetails:
    """Slot + perfiles públicos del faculty dueño y del scholar (si hay)."""

    slot: Slot
    faculty: UserProfile | None = None
    scholar: UserProfile | None = None
