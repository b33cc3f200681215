"""
===============================================================================
USE CASES: Slot listings (queries)
===============================================================================

Queries de solo lectura sobre slots, cada una con su capacidad:

    - ListAvailableSlotsUseCase: slots available desde hoy (reloj inyectado),
      filtros opcionales por faculty y fecha. BROWSE.
    - ListMyBookingsUseCase: reservas del scholar (con perfil del faculty).
      BOOK_SLOT.
    - ListFacultySlotsUseCase: slots propios del faculty (con perfil del
      scholar). MANAGE_SLOTS.

Orden: date ASC, start_time ASC (lo garantiza el repositorio).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date as Date
from uuid import UUID

from ....domain.repositories import SlotRepository
from ....domain.services import Clock
from ....identity.access_control import Actor, Capability, actor_can
from .slot_results import SlotError, SlotErrorCode, SlotListResult


def _forbidden(message: str) -> SlotListResult:
    return SlotListResult(
        slots=[], error=SlotError(code=SlotErrorCode.FORBIDDEN, message=message)
    )


@dataclass(frozen=True)
class ListAvailableSlotsInput:
    actor: Actor | None = None
    faculty_id: UUID | None = None
    on_date: Date | None = None


class ListAvailableSlotsUseCase:
    def __init__(self, repository: SlotRepository, clock: Clock) -> None:
        self._slots = repository
        self._clock = clock

    def execute(self, input_data: ListAvailableSlotsInput) -> SlotListResult:
        if not actor_can(input_data.actor, Capability.BROWSE):
            return _forbidden("Authentication required.")

        today = self._clock.now().date()
        slots = self._slots.list_available_slots(
            from_date=today,
            faculty_id=input_data.faculty_id,
            on_date=input_data.on_date,
        )
        return SlotListResult(slots=slots)


class ListMyBookingsUseCase:
    def __init__(self, repository: SlotRepository) -> None:
        self._slots = repository

    def execute(self, actor: Actor | None) -> SlotListResult:
        if not actor_can(actor, Capability.BOOK_SLOT):
            return _forbidden("Only scholars have bookings.")
        return SlotListResult(slots=self._slots.list_slots_by_scholar(actor.user_id))


class ListFacultySlotsUseCase:
    def __init__(self, repository: SlotRepository) -> None:
        self._slots = repository

    def execute(self, actor: Actor | None) -> SlotListResult:
        if not actor_can(actor, Capability.MANAGE_SLOTS):
            return _forbidden("Only faculty or admins own slots.")
        return SlotListResult(slots=self._slots.list_slots_by_faculty(actor.user_id))
