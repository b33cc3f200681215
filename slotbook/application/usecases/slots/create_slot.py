"""
===============================================================================
USE CASE: Create Slot
===============================================================================

Name:
    Create Slot Use Case

Business Goal:
    Publicar una ventana de disponibilidad de un faculty garantizando que no
    se solape con otra ventana bloqueante del mismo faculty en la misma fecha.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateSlotUseCase

Responsibilities:
    - Validar actor (capacidad MANAGE_SLOTS).
    - Validar el rango horario (end_time > start_time).
    - Pre-chequear solapamiento para devolver un error explícito.
    - Persistir con create_slot_if_free (chequeo + insert atómicos en el store).

Collaborators:
    - SlotRepository:
        list_slots_for_faculty_on(faculty_id, day)
        create_slot_if_free(slot) -> Slot | None
    - domain.slot_policy: is_valid_range, find_conflicts
    - identity.access_control: Actor, Capability
    - Clock: created_at / updated_at

Error Mapping:
    - FORBIDDEN: actor ausente o sin MANAGE_SLOTS
    - VALIDATION_ERROR: rango inválido
    - CONFLICT: solapamiento (pre-chequeo o detectado por el store)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date as Date
from datetime import time as Time
from uuid import uuid4

from ....crosscutting.logger import logger
from ....domain.entities import Slot, SlotStatus
from ....domain.repositories import SlotRepository
from ....domain.services import Clock
from ....domain.slot_policy import find_conflicts, is_valid_range
from ....identity.access_control import Actor, Capability, actor_can
from .slot_results import SlotError, SlotErrorCode, SlotResult

OVERLAP_MESSAGE = "Time slot overlaps with existing slot"


@dataclass(frozen=True)
class CreateSlotInput:
    date: Date
    start_time: Time
    end_time: Time
    actor: Actor | None = None
    notes: str | None = None


class CreateSlotUseCase:
    """Command: alta de slot con rechazo de solapamientos."""

    def __init__(self, repository: SlotRepository, clock: Clock) -> None:
        self._slots = repository
        self._clock = clock

    def execute(self, input_data: CreateSlotInput) -> SlotResult:
        actor = input_data.actor
        if not actor_can(actor, Capability.MANAGE_SLOTS):
            return self._forbidden("Only faculty or admins can create slots.")

        if not is_valid_range(input_data.start_time, input_data.end_time):
            return self._validation_error("End time must be after start time")

        # R: pre-chequeo para el caso común; el store re-valida bajo lock/transacción.
        existing = self._slots.list_slots_for_faculty_on(
            actor.user_id, input_data.date
        )
        if find_conflicts(input_data.start_time, input_data.end_time, existing):
            return self._conflict(OVERLAP_MESSAGE)

        now = self._clock.now()
        slot = Slot(
            id=uuid4(),
            faculty_id=actor.user_id,
            date=input_data.date,
            start_time=input_data.start_time,
            end_time=input_data.end_time,
            status=SlotStatus.AVAILABLE,
            notes=(input_data.notes or "").strip() or None,
            created_at=now,
            updated_at=now,
        )

        created = self._slots.create_slot_if_free(slot)
        if created is None:
            return self._conflict(OVERLAP_MESSAGE)

        logger.info(
            "slot creado",
            extra={
                "slot_id": str(created.id),
                "faculty_id": str(created.faculty_id),
                "date": created.date.isoformat(),
            },
        )
        return SlotResult(slot=created)

    @staticmethod
    def _forbidden(message: str) -> SlotResult:
        return SlotResult(
            error=SlotError(code=SlotErrorCode.FORBIDDEN, message=message)
        )

    @staticmethod
    def _validation_error(message: str) -> SlotResult:
        return SlotResult(
            error=SlotError(code=SlotErrorCode.VALIDATION_ERROR, message=message)
        )

    @staticmethod
    def _conflict(message: str) -> SlotResult:
        return SlotResult(
            error=SlotError(code=SlotErrorCode.CONFLICT, message=message)
        )
