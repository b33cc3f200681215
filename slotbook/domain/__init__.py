"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Evitar imports profundos y acoplamientos innecesarios.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    BLOCKING_STATUSES,
    DELETABLE_STATUSES,
    Slot,
    SlotDetails,
    SlotStatus,
)
from .repositories import RoleAssignmentRepository, SlotRepository, UserRepository
from .services import Clock, IdentityVerifier, MeetingProvisioner
from .value_objects import MeetingEvent, MeetingRequest, VerifiedIdentity

__all__ = [
    # Entities
    "Slot",
    "SlotDetails",
    "SlotStatus",
    "BLOCKING_STATUSES",
    "DELETABLE_STATUSES",
    # Repository Interfaces (Ports)
    "UserRepository",
    "RoleAssignmentRepository",
    "SlotRepository",
    # Service Interfaces (Ports)
    "Clock",
    "IdentityVerifier",
    "MeetingProvisioner",
    # Value Objects
    "MeetingEvent",
    "MeetingRequest",
    "VerifiedIdentity",
]
