"""
===============================================================================
TARJETA CRC — domain/slot_policy.py
===============================================================================

Módulo:
    Política de Slots (rango, solapamiento, transiciones, ownership)

Responsabilidades:
    - Validar el rango horario de un slot.
    - Detectar solapamientos contra los slots que bloquean el horario.
    - Definir la máquina de estados del slot.
    - Decidir quién puede gestionar un slot ya creado.

Colaboradores:
    - domain.entities.Slot, SlotStatus
    - identity.access_control.Actor
    - application.usecases.slots.*: consumen estas reglas
    - infrastructure.repositories.*: reusan find_conflicts bajo lock/transacción

Reglas (intención):
    - end_time > start_time.
    - Solapamiento de [a, b) con [c, d): el inicio nuevo cae dentro de uno
      existente, o el fin nuevo cae dentro, o el nuevo contiene al existente.
    - Solo AVAILABLE/BOOKED bloquean; CANCELLED/COMPLETED liberan el horario.
    - available -> booked | cancelled ; booked -> completed | cancelled.
===============================================================================
"""

from __future__ import annotations

from datetime import time as Time
from typing import Iterable, Mapping

from ..identity.access_control import Actor
from ..identity.users import UserRole
from .entities import Slot, SlotStatus

ALLOWED_TRANSITIONS: Mapping[SlotStatus, frozenset[SlotStatus]] = {
    SlotStatus.AVAILABLE: frozenset({SlotStatus.BOOKED, SlotStatus.CANCELLED}),
    SlotStatus.BOOKED: frozenset({SlotStatus.COMPLETED, SlotStatus.CANCELLED}),
    SlotStatus.CANCELLED: frozenset(),
    SlotStatus.COMPLETED: frozenset(),
}


def is_valid_range(start_time: Time, end_time: Time) -> bool:
    return end_time > start_time


def intervals_overlap(
    new_start: Time, new_end: Time, existing_start: Time, existing_end: Time
) -> bool:
    """Condición de solapamiento en tres ramas (intervalos semiabiertos)."""
    starts_inside = existing_start <= new_start < existing_end
    ends_inside = existing_start < new_end <= existing_end
    contains = new_start <= existing_start and existing_end <= new_end
    return starts_inside or ends_inside or contains


def find_conflicts(
    start_time: Time, end_time: Time, existing: Iterable[Slot]
) -> list[Slot]:
    """Slots que bloquean el horario y se solapan con [start_time, end_time)."""
    return [
        slot
        for slot in existing
        if slot.blocks_schedule
        and intervals_overlap(start_time, end_time, slot.start_time, slot.end_time)
    ]


def can_transition(current: SlotStatus, target: SlotStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def can_manage_slot(slot: Slot, actor: Actor | None) -> bool:
    """Dueño del slot o admin."""
    if actor is None or actor.user_id is None or actor.role is None:
        return False
    if actor.role == UserRole.ADMIN:
        return True
    return actor.role == UserRole.FACULTY and slot.faculty_id == actor.user_id
