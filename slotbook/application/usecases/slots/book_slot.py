"""
===============================================================================
USE CASE: Book Slot
===============================================================================

Name:
    Book Slot Use Case

Business Goal:
    Reservar un slot disponible para un scholar, obtener un link de reunión
    (proveedor externo o respaldo local) y devolver el deep link de calendario.

Why (Context / Intención):
    - Dos scholars pueden intentar reservar el mismo slot a la vez: la única
      mutación durable es un UPDATE condicionado a status = available, así
      exactamente uno gana y el resto recibe UNAVAILABLE.
    - El proveedor de reuniones es best-effort: su falla nunca rompe la reserva.
    - Si la reserva no se concreta después de crear la reunión, el evento se
      cancela (best-effort) para que no queden invitaciones huérfanas.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    BookSlotUseCase

Responsibilities:
    - Validar actor (capacidad BOOK_SLOT) y notas.
    - Leer el slot disponible con el perfil del faculty.
    - Armar el MeetingRequest y adquirir el link (con respaldo).
    - Aplicar la reserva condicional y re-leer el slot con ambos perfiles.
    - Liberar la reunión si el UPDATE pierde la carrera o falla.
    - Derivar el link "add event" de Google Calendar.

Collaborators:
    - SlotRepository: get_available_slot, book_slot, get_slot_details
    - UserRepository: perfil del scholar
    - MeetingProvisioner (opcional): reunión real
    - application.meeting_links / calendar_links
    - Clock, random.Random (inyectados)

Error Mapping:
    - FORBIDDEN: actor sin BOOK_SLOT o sin usuario en el directorio
    - VALIDATION_ERROR: notas demasiado largas
    - UNAVAILABLE: slot inexistente, no disponible o carrera perdida
===============================================================================
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.repositories import SlotRepository, UserRepository
from ....domain.services import Clock, MeetingProvisioner
from ....identity.access_control import Actor, Capability, actor_can
from ....identity.users import UserProfile
from ...calendar_links import build_calendar_link
from ...meeting_links import (
    DEFAULT_MEETING_HOST,
    acquire_meeting_link,
    build_meeting_request,
    release_meeting_link,
)
from .slot_results import BookingResult, SlotError, SlotErrorCode

UNAVAILABLE_MESSAGE = "Slot not available"
DEFAULT_MAX_NOTES_CHARS = 2000


@dataclass(frozen=True)
class BookSlotInput:
    slot_id: UUID
    actor: Actor | None = None
    notes: str | None = None


class BookSlotUseCase:
    """Command: reserva race-safe de un slot disponible."""

    def __init__(
        self,
        *,
        slot_repository: SlotRepository,
        user_repository: UserRepository,
        meeting_provisioner: MeetingProvisioner | None,
        clock: Clock,
        rng: random.Random | None = None,
        meeting_link_host: str = DEFAULT_MEETING_HOST,
        max_notes_chars: int = DEFAULT_MAX_NOTES_CHARS,
    ) -> None:
        self._slots = slot_repository
        self._users = user_repository
        self._provisioner = meeting_provisioner
        self._clock = clock
        self._rng = rng or random.Random()
        self._meeting_link_host = meeting_link_host
        self._max_notes_chars = max_notes_chars

    def execute(self, input_data: BookSlotInput) -> BookingResult:
        actor = input_data.actor
        if not actor_can(actor, Capability.BOOK_SLOT):
            return self._error(SlotErrorCode.FORBIDDEN, "Only scholars can book slots.")

        notes = (input_data.notes or "").strip() or None
        if notes is not None and len(notes) > self._max_notes_chars:
            return self._error(
                SlotErrorCode.VALIDATION_ERROR,
                f"Notes must be at most {self._max_notes_chars} characters.",
            )

        available = self._slots.get_available_slot(input_data.slot_id)
        if available is None or available.faculty is None:
            return self._error(SlotErrorCode.UNAVAILABLE, UNAVAILABLE_MESSAGE)

        scholar_user = self._users.get_user_by_id(actor.user_id)
        if scholar_user is None:
            return self._error(SlotErrorCode.FORBIDDEN, "Unknown scholar.")
        scholar = UserProfile.from_user(scholar_user)

        request = build_meeting_request(
            available.slot, scholar=scholar, faculty=available.faculty, notes=notes
        )
        link = acquire_meeting_link(
            self._provisioner,
            request,
            rng=self._rng,
            host=self._meeting_link_host,
        )

        try:
            booked = self._slots.book_slot(
                input_data.slot_id,
                scholar_id=scholar.id,
                notes=notes,
                meeting_link=link.url,
                at=self._clock.now(),
            )
        except Exception:
            release_meeting_link(self._provisioner, link)
            raise
        if booked is None:
            # R: otro scholar ganó la carrera entre la lectura y el UPDATE.
            release_meeting_link(self._provisioner, link)
            logger.info(
                "reserva rechazada: slot ya no disponible",
                extra={"slot_id": str(input_data.slot_id)},
            )
            return self._error(SlotErrorCode.UNAVAILABLE, UNAVAILABLE_MESSAGE)

        details = self._slots.get_slot_details(booked.id)
        if details is None:
            return self._error(SlotErrorCode.UNAVAILABLE, UNAVAILABLE_MESSAGE)

        calendar_link = build_calendar_link(
            details.slot,
            scholar=details.scholar or scholar,
            faculty=details.faculty or available.faculty,
            meeting_link=link.url,
            notes=notes,
        )

        logger.info(
            "slot reservado",
            extra={
                "slot_id": str(booked.id),
                "scholar_id": str(scholar.id),
                "faculty_id": str(booked.faculty_id),
                "meeting_link_source": link.source.value,
            },
        )
        return BookingResult(
            booking=details,
            calendar_link=calendar_link,
            meeting_link_source=link.source,
        )

    @staticmethod
    def _error(code: SlotErrorCode, message: str) -> BookingResult:
        return BookingResult(error=SlotError(code=code, message=message))
