"""
Name: Calendar "add event" deep link

Responsibilities:
  - Build the Google Calendar TEMPLATE URL returned after a booking, so the
    client can add the session to any calendar with one click.

Collaborators:
  - application/meeting_links.py: shared title and notes wording
  - domain.entities.Slot (UTC start/end)

Notes:
  - Pure derived data: nothing is persisted.
  - Parameters are percent-encoded (spaces as %20, newlines as %0A).
"""

from __future__ import annotations

from datetime import datetime
from urllib.parse import quote, urlencode

from ..domain.entities import Slot
from ..identity.users import UserProfile
from .meeting_links import meeting_title, notes_or_default

CALENDAR_RENDER_URL = "https://calendar.google.com/calendar/render"
_CALENDAR_TS_FORMAT = "%Y%m%dT%H%M%SZ"


def _calendar_ts(value: datetime) -> str:
    return value.strftime(_CALENDAR_TS_FORMAT)


def build_calendar_link(
    slot: Slot,
    *,
    scholar: UserProfile,
    faculty: UserProfile,
    meeting_link: str,
    notes: str | None = None,
) -> str:
    details = (
        f"Meeting between {scholar.name} and {faculty.name}\n\n"
        f"Notes: {notes_or_default(notes)}\n\n"
        f"Google Meet: {meeting_link}"
    )
    params = {
        "action": "TEMPLATE",
        "text": meeting_title(scholar, faculty),
        "details": details,
        "dates": f"{_calendar_ts(slot.starts_at)}/{_calendar_ts(slot.ends_at)}",
        "add": f"{scholar.email},{faculty.email}",
        "sf": "true",
        "output": "xml",
    }
    return f"{CALENDAR_RENDER_URL}?{urlencode(params, quote_via=quote)}"
