"""Slot use cases: alta, reserva, listados, cambio de estado y borrado."""

from .book_slot import BookSlotInput, BookSlotUseCase
from .create_slot import CreateSlotInput, CreateSlotUseCase
from .delete_slot import DeleteSlotInput, DeleteSlotUseCase
from .list_slots import (
    ListAvailableSlotsInput,
    ListAvailableSlotsUseCase,
    ListFacultySlotsUseCase,
    ListMyBookingsUseCase,
)
from .slot_results import (
    BookingResult,
    DeleteSlotResult,
    SlotError,
    SlotErrorCode,
    SlotListResult,
    SlotResult,
)
from .update_slot_status import UpdateSlotStatusInput, UpdateSlotStatusUseCase

__all__ = [
    "BookSlotInput",
    "BookSlotUseCase",
    "CreateSlotInput",
    "CreateSlotUseCase",
    "DeleteSlotInput",
    "DeleteSlotUseCase",
    "ListAvailableSlotsInput",
    "ListAvailableSlotsUseCase",
    "ListFacultySlotsUseCase",
    "ListMyBookingsUseCase",
    "UpdateSlotStatusInput",
    "UpdateSlotStatusUseCase",
    "BookingResult",
    "DeleteSlotResult",
    "SlotError",
    "SlotErrorCode",
    "SlotListResult",
    "SlotResult",
]
