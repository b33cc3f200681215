"""
===============================================================================
SLOT USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Slot Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para los casos de uso
    de slots (alta, reserva, listado, cambio de estado y borrado).

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar
      excepciones hacia afuera: la capa HTTP mapea códigos a status codes y
      los tests verifican flujos sin levantar FastAPI.
    - UNAVAILABLE existe aparte de NOT_FOUND: el slot puede existir pero ya
      no estar disponible para reservar (carrera perdida).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    slot_results models (module)

Responsibilities:
    - Definir SlotErrorCode y SlotError (code + message).
    - Representar resultados:
        * SlotResult (single slot)
        * SlotListResult (listados con proyecciones)
        * BookingResult (reserva + deep link de calendario)
        * DeleteSlotResult (command specific: deleted flag)

Collaborators:
    - domain.entities.Slot / SlotDetails
    - application.meeting_links.MeetingLinkSource
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import Slot, SlotDetails
from ...meeting_links import MeetingLinkSource


class SlotErrorCode(str, Enum):
    """
    Códigos de error estables para casos de uso de slots.

    Códigos:
      - VALIDATION_ERROR: inputs inválidos (rango horario, estado destino).
      - FORBIDDEN: actor sin la capacidad requerida o borrado de slot reservado.
      - NOT_FOUND: slot inexistente o que no pertenece al actor.
      - CONFLICT: solapamiento o transición de estado ilegal.
      - UNAVAILABLE: el slot no existe o ya no está disponible para reservar.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass(frozen=True)
class SlotError:
    """Error de caso de uso (sin metadata de infraestructura)."""

    code: SlotErrorCode
    message: str


@dataclass
class SlotResult:
    """
    Resultado para casos de uso que retornan un único Slot.

    Contrato:
      - Si error is None => slot presente (éxito)
      - Si error != None => slot es None (fallo)
    """

    slot: Slot | None = None
    error: SlotError | None = None


@dataclass
class SlotListResult:
    """Resultado de listados; siempre lista (posiblemente vacía)."""

    slots: List[SlotDetails] = field(default_factory=list)
    error: SlotError | None = None


@dataclass
class BookingResult:
    """
    Resultado de la reserva.

    Campos:
      - booking: slot reservado con perfiles de faculty y scholar
      - calendar_link: deep link "add event" de Google Calendar
      - meeting_link_source: provider | fallback (observabilidad)
    """

    booking: SlotDetails | None = None
    calendar_link: str | None = None
    meeting_link_source: MeetingLinkSource | None = None
    error: SlotError | None = None


@dataclass
class DeleteSlotResult:
    deleted: bool
    error: SlotError | None = None
