"""
===============================================================================
USE CASE: Delete Slot
===============================================================================

Business Goal:
    Permitir que un faculty borre sus propios slots mientras no estén
    reservados.

Reglas:
    - Ownership en la query: un slot ajeno se reporta como NOT_FOUND
      (no se filtra su existencia). Admins siguen la misma regla.
    - booked -> FORBIDDEN ("Cannot delete booked slot").
    - El DELETE es condicional (status en DELETABLE_STATUSES): si una reserva
      entra entre la lectura y el borrado, el slot sobrevive.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import DELETABLE_STATUSES
from ....domain.repositories import SlotRepository
from ....identity.access_control import Actor, Capability, actor_can
from .slot_results import DeleteSlotResult, SlotError, SlotErrorCode

BOOKED_MESSAGE = "Cannot delete booked slot"
NOT_FOUND_MESSAGE = "Slot not found"


@dataclass(frozen=True)
class DeleteSlotInput:
    slot_id: UUID
    actor: Actor | None = None


class DeleteSlotUseCase:
    def __init__(self, repository: SlotRepository) -> None:
        self._slots = repository

    def execute(self, input_data: DeleteSlotInput) -> DeleteSlotResult:
        actor = input_data.actor
        if not actor_can(actor, Capability.MANAGE_SLOTS):
            return self._error(
                SlotErrorCode.FORBIDDEN, "Only faculty or admins can delete slots."
            )

        slot = self._slots.get_owned_slot(input_data.slot_id, actor.user_id)
        if slot is None:
            return self._error(SlotErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)

        if slot.status not in DELETABLE_STATUSES:
            return self._error(SlotErrorCode.FORBIDDEN, BOOKED_MESSAGE)

        if not self._slots.delete_slot_if_deletable(slot.id, actor.user_id):
            current = self._slots.get_owned_slot(slot.id, actor.user_id)
            if current is None:
                return self._error(SlotErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE)
            return self._error(SlotErrorCode.FORBIDDEN, BOOKED_MESSAGE)

        logger.info(
            "slot borrado",
            extra={"slot_id": str(slot.id), "faculty_id": str(actor.user_id)},
        )
        return DeleteSlotResult(deleted=True)

    @staticmethod
    def _error(code: SlotErrorCode, message: str) -> DeleteSlotResult:
        return DeleteSlotResult(
            deleted=False, error=SlotError(code=code, message=message)
        )
