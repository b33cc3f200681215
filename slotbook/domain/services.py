"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir contratos para colaboradores externos:
        * verificación de identidad (ID token de Google)
        * provisión de reuniones (Calendar + Meet)
        * reloj (inyectable para tests deterministas)
    - Proteger a application de detalles del proveedor.

Colaboradores:
    - infrastructure/services/*: implementaciones concretas.
    - application/usecases: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .value_objects import MeetingEvent, MeetingRequest, VerifiedIdentity


class IdentityVerifier(Protocol):
    """Contrato para verificar credenciales externas."""

    def verify(self, credential: str) -> VerifiedIdentity:
        """Devuelve la identidad o lanza AuthenticationError."""
        ...


class MeetingProvisioner(Protocol):
    """Contrato para crear la reunión de una reserva."""

    def create_meeting(self, request: MeetingRequest) -> MeetingEvent:
        """Devuelve el evento creado o lanza MeetingProvisioningError."""
        ...

    def cancel_meeting(self, event_id: str) -> None:
        """Borra el evento y avisa a los invitados; lanza MeetingProvisioningError."""
        ...


class Clock(Protocol):
    """Fuente de tiempo (UTC, timezone-aware)."""

    def now(self) -> datetime: ...
