"""
===============================================================================
USE CASE: Update Slot Status
===============================================================================

Name:
    Update Slot Status Use Case

Business Goal:
    Cerrar el ciclo de vida de un slot: marcar una reserva como completada o
    cancelar un slot (disponible o reservado).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateSlotStatusUseCase

Responsibilities:
    - Aceptar solo destinos administrativos (completed / cancelled); la
      transición a booked pasa exclusivamente por BookSlotUseCase.
    - Verificar que el actor gestione el slot (dueño o admin).
    - Validar la transición con la máquina de estados.
    - Aplicarla con UPDATE condicionado al estado leído.

Collaborators:
    - SlotRepository: get_slot, transition_slot
    - domain.slot_policy: can_transition, can_manage_slot
    - Clock

Error Mapping:
    - FORBIDDEN: actor sin MANAGE_SLOTS
    - VALIDATION_ERROR: destino no administrativo
    - NOT_FOUND: slot inexistente o no gestionable por el actor
    - CONFLICT: transición ilegal o estado cambiado en el medio

Notas:
    - Cancelar un slot reservado libera al scholar: el store limpia
      scholar_id y meeting_link.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import SlotStatus
from ....domain.repositories import SlotRepository
from ....domain.services import Clock
from ....domain.slot_policy import can_manage_slot, can_transition
from ....identity.access_control import Actor, Capability, actor_can
from .slot_results import SlotError, SlotErrorCode, SlotResult

ADMINISTRATIVE_TARGETS: frozenset[SlotStatus] = frozenset(
    {SlotStatus.COMPLETED, SlotStatus.CANCELLED}
)


@dataclass(frozen=True)
class UpdateSlotStatusInput:
    slot_id: UUID
    status: SlotStatus
    actor: Actor | None = None


class UpdateSlotStatusUseCase:
    def __init__(self, repository: SlotRepository, clock: Clock) -> None:
        self._slots = repository
        self._clock = clock

    def execute(self, input_data: UpdateSlotStatusInput) -> SlotResult:
        actor = input_data.actor
        if not actor_can(actor, Capability.MANAGE_SLOTS):
            return self._error(
                SlotErrorCode.FORBIDDEN, "Only faculty or admins can update slots."
            )

        target = input_data.status
        if target not in ADMINISTRATIVE_TARGETS:
            return self._error(
                SlotErrorCode.VALIDATION_ERROR,
                "Status must be 'completed' or 'cancelled'.",
            )

        slot = self._slots.get_slot(input_data.slot_id)
        if slot is None or not can_manage_slot(slot, actor):
            return self._error(SlotErrorCode.NOT_FOUND, "Slot not found")

        if not can_transition(slot.status, target):
            return self._error(
                SlotErrorCode.CONFLICT,
                f"Cannot change slot from {slot.status.value} to {target.value}.",
            )

        updated = self._slots.transition_slot(
            slot.id, expected=slot.status, target=target, at=self._clock.now()
        )
        if updated is None:
            return self._error(
                SlotErrorCode.CONFLICT, "Slot status changed concurrently."
            )

        logger.info(
            "estado de slot actualizado",
            extra={
                "slot_id": str(slot.id),
                "from_status": slot.status.value,
                "to_status": target.value,
            },
        )
        return SlotResult(slot=updated)

    @staticmethod
    def _error(code: SlotErrorCode, message: str) -> SlotResult:
        return SlotResult(error=SlotError(code=code, message=message))
