"""
===============================================================================
APPLICATION LAYER (Public API / Exports)
===============================================================================

Expone los puntos de entrada estables de la capa de aplicación:
  - RoleService: dueño único de las dos representaciones del rol
  - meeting_links: link de reunión con respaldo local
  - calendar_links: deep link "add event" de Google Calendar
  - ensure_bootstrap_admins: seed de admins al arrancar

Nota:
  - Los casos de uso se importan desde `usecases/` subdirectories.
===============================================================================
"""

from .bootstrap_admins import ensure_bootstrap_admins
from .calendar_links import build_calendar_link
from .meeting_links import (
    MeetingLink,
    MeetingLinkSource,
    acquire_meeting_link,
    build_meeting_request,
    generate_fallback_link,
)
from .role_service import RoleChange, RoleService

__all__ = [
    # Roles
    "RoleChange",
    "RoleService",
    "ensure_bootstrap_admins",
    # Meeting / calendar links
    "MeetingLink",
    "MeetingLinkSource",
    "acquire_meeting_link",
    "build_meeting_request",
    "generate_fallback_link",
    "build_calendar_link",
]
