# =============================================================================
# FILE: domain/value_objects.py
# =============================================================================
"""
===============================================================================
DOMAIN: Value Objects (Immutable Domain Primitives)
===============================================================================

Contenido:
    - VerifiedIdentity: identidad devuelta por el verificador externo (Google)
    - MeetingRequest: datos para provisionar la reunión de una reserva
    - MeetingEvent: resultado del proveedor de reuniones

Principios:
    - Inmutabilidad (frozen dataclasses)
    - Validación en constructor
    - Sin side effects
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class VerifiedIdentity:
    """Identidad externa ya verificada (claims mínimos del ID token)."""

    email: str
    name: str
    subject: str
    picture: str | None = None

    def __post_init__(self) -> None:
        if not self.email.strip():
            raise ValueError("VerifiedIdentity.email is required")


@dataclass(frozen=True, slots=True)
class MeetingRequest:
    """Pedido de reunión (horarios en UTC)."""

    summary: str
    description: str
    start: datetime
    end: datetime
    attendee_emails: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("MeetingRequest.end must be after start")


@dataclass(frozen=True, slots=True)
class MeetingEvent:
    """Evento creado por el proveedor de reuniones."""

    event_id: str | None
    meeting_link: str
    event_link: str | None = None
