"""
===============================================================================
TARJETA CRC — slotbook/interfaces/api/http/routers/slots.py
===============================================================================

Class/Module:
    Slots Router

Responsibilities:
    - Exponer endpoints HTTP para publicar, listar, reservar, cerrar y borrar
      slots.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir SlotError -> RFC7807.
    - Enforce de capacidades en el borde (Authorization Gate).

Collaborators:
    - slotbook.application.usecases (Create/List/Book/UpdateStatus/Delete)
    - slotbook.identity.auth_users.require_capability
    - slotbook.container (factories DI)
    - schemas.slots (DTOs Pydantic)

Patterns:
    - Controller / Router
    - Adapter (HTTP -> UseCase)
    - Error Mapping
===============================================================================
"""

from __future__ import annotations

from datetime import date as Date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response

from slotbook.application.usecases import (
    BookSlotInput,
    BookSlotUseCase,
    CreateSlotInput,
    CreateSlotUseCase,
    DeleteSlotInput,
    DeleteSlotUseCase,
    ListAvailableSlotsInput,
    ListAvailableSlotsUseCase,
    ListFacultySlotsUseCase,
    ListMyBookingsUseCase,
    UpdateSlotStatusInput,
    UpdateSlotStatusUseCase,
)
from slotbook.container import (
    get_book_slot_use_case,
    get_create_slot_use_case,
    get_delete_slot_use_case,
    get_list_available_slots_use_case,
    get_list_faculty_slots_use_case,
    get_list_my_bookings_use_case,
    get_update_slot_status_use_case,
)
from slotbook.crosscutting.error_responses import internal_error
from slotbook.domain.entities import Slot, SlotDetails
from slotbook.identity.access_control import Actor, Capability
from slotbook.identity.auth_users import require_capability
from slotbook.identity.users import UserProfile

from ..error_mapping import raise_slot_error
from ..schemas.slots import (
    BookingRes,
    BookingsListRes,
    BookSlotReq,
    CreateSlotReq,
    SlotEnvelopeRes,
    SlotRes,
    SlotsListRes,
    UpdateSlotStatusReq,
    UserProfileRes,
)

router = APIRouter()


# =============================================================================
# Helpers internos (puros / sin IO)
# =============================================================================


def _to_profile_res(profile: UserProfile | None) -> UserProfileRes | None:
    if profile is None:
        return None
    return UserProfileRes(
        id=profile.id, name=profile.name, email=profile.email, picture=profile.picture
    )


def _to_slot_res(slot: Slot, details: SlotDetails | None = None) -> SlotRes:
    """Mapea entidad de dominio (+ proyección opcional) -> DTO HTTP."""
    return SlotRes(
        id=slot.id,
        faculty_id=slot.faculty_id,
        date=slot.date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        status=slot.status,
        scholar_id=slot.scholar_id,
        notes=slot.notes,
        meeting_link=slot.meeting_link,
        created_at=slot.created_at,
        updated_at=slot.updated_at,
        faculty=_to_profile_res(details.faculty) if details else None,
        scholar=_to_profile_res(details.scholar) if details else None,
    )


def _details_res(details: SlotDetails) -> SlotRes:
    return _to_slot_res(details.slot, details)


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/slots",
    response_model=SlotEnvelopeRes,
    status_code=201,
    tags=["slots"],
)
def create_slot(
    req: CreateSlotReq,
    use_case: CreateSlotUseCase = Depends(get_create_slot_use_case),
    actor: Actor = Depends(require_capability(Capability.MANAGE_SLOTS)),
):
    result = use_case.execute(
        CreateSlotInput(
            date=req.date,
            start_time=req.start_time,
            end_time=req.end_time,
            actor=actor,
            notes=req.notes,
        )
    )
    if result.error is not None:
        raise_slot_error(result.error)
    if result.slot is None:
        raise internal_error("Slot no creado")

    return SlotEnvelopeRes(
        slot=_to_slot_res(result.slot), message="Slot created successfully"
    )


@router.get(
    "/slots/available",
    response_model=SlotsListRes,
    tags=["slots"],
)
def list_available_slots(
    faculty_id: UUID | None = Query(None),
    date: Date | None = Query(None),
    use_case: ListAvailableSlotsUseCase = Depends(get_list_available_slots_use_case),
    actor: Actor = Depends(require_capability(Capability.BROWSE)),
):
    result = use_case.execute(
        ListAvailableSlotsInput(actor=actor, faculty_id=faculty_id, on_date=date)
    )
    if result.error is not None:
        raise_slot_error(result.error)
    return SlotsListRes(slots=[_details_res(d) for d in result.slots])


@router.post(
    "/slots/{slot_id}/book",
    response_model=BookingRes,
    tags=["slots"],
)
def book_slot(
    slot_id: UUID,
    req: BookSlotReq | None = None,
    use_case: BookSlotUseCase = Depends(get_book_slot_use_case),
    actor: Actor = Depends(require_capability(Capability.BOOK_SLOT)),
):
    notes = req.notes if req is not None else None
    result = use_case.execute(BookSlotInput(slot_id=slot_id, actor=actor, notes=notes))
    if result.error is not None:
        raise_slot_error(result.error)
    if result.booking is None:
        raise internal_error("Reserva no registrada")

    booked = result.booking.slot
    return BookingRes(
        slot=_details_res(result.booking),
        message="Slot booked successfully",
        meeting_link=booked.meeting_link or "",
        calendar_link=result.calendar_link,
    )


@router.get(
    "/slots/my-bookings",
    response_model=BookingsListRes,
    tags=["slots"],
)
def list_my_bookings(
    use_case: ListMyBookingsUseCase = Depends(get_list_my_bookings_use_case),
    actor: Actor = Depends(require_capability(Capability.BOOK_SLOT)),
):
    result = use_case.execute(actor)
    if result.error is not None:
        raise_slot_error(result.error)
    return BookingsListRes(bookings=[_details_res(d) for d in result.slots])


@router.get(
    "/slots/my-slots",
    response_model=SlotsListRes,
    tags=["slots"],
)
def list_my_slots(
    use_case: ListFacultySlotsUseCase = Depends(get_list_faculty_slots_use_case),
    actor: Actor = Depends(require_capability(Capability.MANAGE_SLOTS)),
):
    result = use_case.execute(actor)
    if result.error is not None:
        raise_slot_error(result.error)
    return SlotsListRes(slots=[_details_res(d) for d in result.slots])


@router.patch(
    "/slots/{slot_id}/status",
    response_model=SlotEnvelopeRes,
    tags=["slots"],
)
def update_slot_status(
    slot_id: UUID,
    req: UpdateSlotStatusReq,
    use_case: UpdateSlotStatusUseCase = Depends(get_update_slot_status_use_case),
    actor: Actor = Depends(require_capability(Capability.MANAGE_SLOTS)),
):
    result = use_case.execute(
        UpdateSlotStatusInput(slot_id=slot_id, status=req.status, actor=actor)
    )
    if result.error is not None:
        raise_slot_error(result.error)
    if result.slot is None:
        raise internal_error("Slot no actualizado")

    return SlotEnvelopeRes(
        slot=_to_slot_res(result.slot), message="Slot status updated successfully"
    )


@router.delete(
    "/slots/{slot_id}",
    status_code=204,
    tags=["slots"],
)
def delete_slot(
    slot_id: UUID,
    use_case: DeleteSlotUseCase = Depends(get_delete_slot_use_case),
    actor: Actor = Depends(require_capability(Capability.MANAGE_SLOTS)),
):
    result = use_case.execute(DeleteSlotInput(slot_id=slot_id, actor=actor))
    if result.error is not None:
        raise_slot_error(result.error)
    return Response(status_code=204)
