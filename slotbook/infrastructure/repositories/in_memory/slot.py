"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/slot.py
============================================================
Class: InMemorySlotRepository

Responsibilities:
  - Almacenar slots en memoria (tests / local dev).
  - Emular bajo Lock las garantías atómicas del store:
      * create_slot_if_free: chequeo de solapamiento + insert
      * book_slot / transition_slot: UPDATE condicionado al estado
      * delete_slot_if_deletable: DELETE condicionado a ownership + estado
  - Armar proyecciones SlotDetails con perfiles del directorio.
  - Ordering determinístico: date ASC, start_time ASC, id ASC.

Collaborators:
  - domain.entities.Slot, SlotDetails, SlotStatus
  - domain.slot_policy.find_conflicts (misma regla que el use case)
  - InMemoryUserRepository (perfiles faculty / scholar)
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date as Date
from datetime import datetime
from threading import Lock
from typing import Callable, Dict, Iterable, List
from uuid import UUID

from ....domain.entities import DELETABLE_STATUSES, Slot, SlotDetails, SlotStatus
from ....domain.slot_policy import find_conflicts
from ....identity.users import UserProfile
from .user import InMemoryUserRepository


class InMemorySlotRepository:
    def __init__(self, users: InMemoryUserRepository) -> None:
        self._lock = Lock()
        self._slots: Dict[UUID, Slot] = {}
        self._users = users

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _sorted(items: Iterable[Slot]) -> List[Slot]:
        return sorted(items, key=lambda s: (s.date, s.start_time, s.id))

    def _profile(self, user_id: UUID | None) -> UserProfile | None:
        if user_id is None:
            return None
        user = self._users.get_user_by_id(user_id)
        return UserProfile.from_user(user) if user is not None else None

    def _details(self, slot: Slot) -> SlotDetails:
        return SlotDetails(
            slot=slot,
            faculty=self._profile(slot.faculty_id),
            scholar=self._profile(slot.scholar_id),
        )

    def _select(self, predicate: Callable[[Slot], bool]) -> List[Slot]:
        with self._lock:
            values = [s for s in self._slots.values() if predicate(s)]
        return self._sorted(values)

    # =========================================================
    # Escrituras atómicas
    # =========================================================
    def create_slot_if_free(self, slot: Slot) -> Slot | None:
        with self._lock:
            same_day = [
                s
                for s in self._slots.values()
                if s.faculty_id == slot.faculty_id and s.date == slot.date
            ]
            if find_conflicts(slot.start_time, slot.end_time, same_day):
                return None
            self._slots[slot.id] = slot
            return slot

    def book_slot(
        self,
        slot_id: UUID,
        *,
        scholar_id: UUID,
        notes: str | None,
        meeting_link: str,
        at: datetime,
    ) -> Slot | None:
        with self._lock:
            current = self._slots.get(slot_id)
            if current is None or current.status != SlotStatus.AVAILABLE:
                return None
            booked = replace(
                current,
                status=SlotStatus.BOOKED,
                scholar_id=scholar_id,
                notes=notes,
                meeting_link=meeting_link,
                updated_at=at,
            )
            self._slots[slot_id] = booked
            return booked

    def transition_slot(
        self,
        slot_id: UUID,
        *,
        expected: SlotStatus,
        target: SlotStatus,
        at: datetime,
    ) -> Slot | None:
        with self._lock:
            current = self._slots.get(slot_id)
            if current is None or current.status != expected:
                return None
            updated = replace(current, status=target, updated_at=at)
            if target == SlotStatus.CANCELLED:
                updated = replace(updated, scholar_id=None, meeting_link=None)
            self._slots[slot_id] = updated
            return updated

    def delete_slot_if_deletable(self, slot_id: UUID, faculty_id: UUID) -> bool:
        with self._lock:
            current = self._slots.get(slot_id)
            if (
                current is None
                or current.faculty_id != faculty_id
                or current.status not in DELETABLE_STATUSES
            ):
                return False
            del self._slots[slot_id]
            return True

    # =========================================================
    # Lecturas
    # =========================================================
    def list_slots_for_faculty_on(self, faculty_id: UUID, day: Date) -> List[Slot]:
        return self._select(lambda s: s.faculty_id == faculty_id and s.date == day)

    def get_slot(self, slot_id: UUID) -> Slot | None:
        with self._lock:
            return self._slots.get(slot_id)

    def get_available_slot(self, slot_id: UUID) -> SlotDetails | None:
        slot = self.get_slot(slot_id)
        if slot is None or slot.status != SlotStatus.AVAILABLE:
            return None
        return SlotDetails(slot=slot, faculty=self._profile(slot.faculty_id))

    def get_owned_slot(self, slot_id: UUID, faculty_id: UUID) -> Slot | None:
        slot = self.get_slot(slot_id)
        if slot is None or slot.faculty_id != faculty_id:
            return None
        return slot

    def get_slot_details(self, slot_id: UUID) -> SlotDetails | None:
        slot = self.get_slot(slot_id)
        return self._details(slot) if slot is not None else None

    def list_available_slots(
        self,
        *,
        from_date: Date,
        faculty_id: UUID | None = None,
        on_date: Date | None = None,
    ) -> List[SlotDetails]:
        def predicate(s: Slot) -> bool:
            if s.status != SlotStatus.AVAILABLE or s.date < from_date:
                return False
            if faculty_id is not None and s.faculty_id != faculty_id:
                return False
            if on_date is not None and s.date != on_date:
                return False
            return True

        return [
            SlotDetails(slot=s, faculty=self._profile(s.faculty_id))
            for s in self._select(predicate)
        ]

    def list_slots_by_scholar(self, scholar_id: UUID) -> List[SlotDetails]:
        slots = self._select(lambda s: s.scholar_id == scholar_id)
        return [self._details(s) for s in slots]

    def list_slots_by_faculty(self, faculty_id: UUID) -> List[SlotDetails]:
        slots = self._select(lambda s: s.faculty_id == faculty_id)
        return [self._details(s) for s in slots]

    def ping(self) -> bool:
        return True
