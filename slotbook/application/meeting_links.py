"""
===============================================================================
TARJETA CRC — application/meeting_links.py
===============================================================================

Módulo:
    Adquisición del link de reunión de una reserva

Responsabilidades:
    - Armar el MeetingRequest (título, descripción, horario UTC, invitados).
    - Pedir la reunión al MeetingProvisioner.
    - Ante CUALQUIER falla del proveedor, generar un link local de respaldo
      (https://<host>/xxx-xxxx-xxx) para que la reserva no falle.
    - Liberar la reunión del proveedor cuando la reserva no se concreta
      (carrera perdida o error al persistir): los invitados reciben la
      cancelación.

Colaboradores:
    - domain.services.MeetingProvisioner
    - domain.value_objects.MeetingRequest / MeetingEvent
    - random.Random (inyectado: tests deterministas)

Reglas:
    - El respaldo usa letras minúsculas en segmentos 3-4-3.
    - La falla del proveedor se loguea como warning y nunca se propaga.
    - Los links de respaldo no tienen evento: no hay nada que liberar.
===============================================================================
"""

from __future__ import annotations

import random
import string
from dataclasses import dataclass
from enum import Enum

from ..crosscutting.logger import logger
from ..domain.entities import Slot
from ..domain.services import MeetingProvisioner
from ..domain.value_objects import MeetingRequest
from ..identity.users import UserProfile

DEFAULT_MEETING_HOST = "meet.google.com"
_FALLBACK_SEGMENTS = (3, 4, 3)
_NO_NOTES = "No additional notes"


class MeetingLinkSource(str, Enum):
    PROVIDER = "provider"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class MeetingLink:
    url: str
    source: MeetingLinkSource
    event_id: str | None = None
    event_link: str | None = None


def meeting_title(scholar: UserProfile, faculty: UserProfile) -> str:
    return f"Assignment Demo - {scholar.name} with {faculty.name}"


def notes_or_default(notes: str | None) -> str:
    cleaned = (notes or "").strip()
    return cleaned or _NO_NOTES


def build_meeting_request(
    slot: Slot,
    *,
    scholar: UserProfile,
    faculty: UserProfile,
    notes: str | None,
) -> MeetingRequest:
    """Request para el proveedor: horarios del slot interpretados en UTC."""
    description = (
        "Assignment demonstration session.\n\n"
        f"Scholar: {scholar.name} ({scholar.email})\n"
        f"Faculty: {faculty.name} ({faculty.email})\n\n"
        f"Notes: {notes_or_default(notes)}"
    )
    return MeetingRequest(
        summary=meeting_title(scholar, faculty),
        description=description,
        start=slot.starts_at,
        end=slot.ends_at,
        attendee_emails=(scholar.email, faculty.email),
    )


def generate_fallback_link(
    rng: random.Random, host: str = DEFAULT_MEETING_HOST
) -> str:
    segments = [
        "".join(rng.choice(string.ascii_lowercase) for _ in range(size))
        for size in _FALLBACK_SEGMENTS
    ]
    return f"https://{host}/{'-'.join(segments)}"


def acquire_meeting_link(
    provisioner: MeetingProvisioner | None,
    request: MeetingRequest,
    *,
    rng: random.Random,
    host: str = DEFAULT_MEETING_HOST,
) -> MeetingLink:
    """Link del proveedor o, si falla / no hay proveedor, link de respaldo."""
    if provisioner is not None:
        try:
            event = provisioner.create_meeting(request)
            if event.meeting_link:
                return MeetingLink(
                    url=event.meeting_link,
                    source=MeetingLinkSource.PROVIDER,
                    event_id=event.event_id,
                    event_link=event.event_link,
                )
            logger.warning("proveedor de reuniones no devolvió link")
            if event.event_id:
                _cancel_event(provisioner, event.event_id)
        except Exception as exc:  # noqa: BLE001 - cualquier falla degrada a respaldo
            logger.warning(
                "falló la provisión de la reunión; se usa link de respaldo",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )

    return MeetingLink(
        url=generate_fallback_link(rng, host),
        source=MeetingLinkSource.FALLBACK,
    )


def release_meeting_link(
    provisioner: MeetingProvisioner | None, link: MeetingLink
) -> None:
    """Cancela el evento de un link del proveedor que no quedó reservado."""
    if provisioner is None or link.source != MeetingLinkSource.PROVIDER:
        return
    if link.event_id:
        _cancel_event(provisioner, link.event_id)


def _cancel_event(provisioner: MeetingProvisioner, event_id: str) -> None:
    try:
        provisioner.cancel_meeting(event_id)
    except Exception as exc:  # noqa: BLE001 - la limpieza es best-effort
        logger.warning(
            "no se pudo cancelar la reunión descartada",
            extra={
                "event_id": event_id,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )
