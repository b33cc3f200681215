"""
===============================================================================
TARJETA CRC — schemas/slots.py
===============================================================================

Módulo:
    Schemas HTTP para Slots y Reservas

Responsabilidades:
    - Definir DTOs de request/response para endpoints de slots.
    - Validar campos (notas, estado destino) con límites desde settings.
    - Horarios en UTC: se aceptan sin zona, con Z o +00:00.
    - Mantener contratos estables: listados envueltos ({"slots": [...]}).

Colaboradores:
    - domain.entities.SlotStatus
    - crosscutting.config.get_settings (límites)
===============================================================================
"""

from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from datetime import time as Time
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from slotbook.crosscutting.config import get_settings
from slotbook.domain.entities import SlotStatus

_settings = get_settings()


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateSlotReq(BaseModel):
    """Request para publicar un slot."""

    date: Date = Field(..., description="Fecha del slot (YYYY-MM-DD)")
    start_time: Time = Field(..., description="Hora de inicio (HH:MM)")
    end_time: Time = Field(..., description="Hora de fin (HH:MM)")
    notes: str | None = Field(default=None, max_length=_settings.max_notes_chars)

    @field_validator("start_time", "end_time")
    @classmethod
    def require_utc(cls, v: Time) -> Time:
        # R: los slots se guardan sin zona y se interpretan UTC; un offset
        # distinto de cero se rechaza (convertirlo podría cambiar la fecha).
        if v.utcoffset():
            raise ValueError("time must be UTC (use Z or no offset)")
        return v.replace(tzinfo=None)


class BookSlotReq(BaseModel):
    """Request para reservar un slot (notas opcionales)."""

    notes: str | None = Field(default=None, max_length=_settings.max_notes_chars)


class UpdateSlotStatusReq(BaseModel):
    status: SlotStatus


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserProfileRes(BaseModel):
    """Perfil público embebido en un slot."""

    id: UUID
    name: str
    email: str
    picture: str | None = None


class SlotRes(BaseModel):
    id: UUID
    faculty_id: UUID
    date: Date
    start_time: Time
    end_time: Time
    status: SlotStatus
    scholar_id: UUID | None = None
    notes: str | None = None
    meeting_link: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    faculty: UserProfileRes | None = None
    scholar: UserProfileRes | None = None


class SlotEnvelopeRes(BaseModel):
    slot: SlotRes
    message: str


class SlotsListRes(BaseModel):
    slots: list[SlotRes]


class BookingsListRes(BaseModel):
    bookings: list[SlotRes]


class BookingRes(BaseModel):
    """Respuesta de reserva: slot + link de reunión + deep link de calendario."""

    slot: SlotRes
    message: str
    meeting_link: str
    calendar_link: str | None = None
