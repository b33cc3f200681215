"""
============================================================
TARJETA CRC — infrastructure/services/google_calendar.py
============================================================
Class: GoogleCalendarMeetingProvisioner

Responsibilities:
  - Implementar MeetingProvisioner con Google Calendar v3 + Google Meet.
  - Obtener un access token a partir del refresh token configurado.
  - Crear el evento (events.insert) con conferencia hangoutsMeet, invitados
    y recordatorios (email 24 h antes, popup 30 min antes).
  - Extraer el link de Meet (hangoutLink o primer entryPoint).
  - Cancelar el evento (events.delete con sendUpdates=all) cuando la reserva
    no se concreta; 404/410 cuentan como ya cancelado.

Collaborators:
  - domain.services.MeetingProvisioner / domain.value_objects.MeetingRequest
  - httpx (HTTP client, timeout = meeting_provider_timeout_seconds)
  - services.retry (token refresh y events.delete; events.insert no es
    idempotente y se intenta una sola vez)

Constraints:
  - Cualquier falla se traduce a MeetingProvisioningError; el caso de uso
    la absorbe con el link de respaldo.
============================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import quote
from uuid import uuid4

import httpx

from ...crosscutting.exceptions import MeetingProvisioningError
from ...crosscutting.logger import logger
from ...domain.value_objects import MeetingEvent, MeetingRequest
from .retry import create_retry_decorator

_GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
_CALENDAR_EVENTS_URL = (
    "https://www.googleapis.com/calendar/v3/calendars/{calendar_id}/events"
)

_REMINDER_EMAIL_MINUTES = 24 * 60
_REMINDER_POPUP_MINUTES = 30
_ALREADY_GONE = frozenset({404, 410})


def _rfc3339(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def build_event_body(request: MeetingRequest) -> dict:
    """Payload de events.insert para un MeetingRequest."""
    return {
        "summary": request.summary,
        "description": request.description,
        "start": {"dateTime": _rfc3339(request.start), "timeZone": "UTC"},
        "end": {"dateTime": _rfc3339(request.end), "timeZone": "UTC"},
        "attendees": [{"email": email} for email in request.attendee_emails],
        "conferenceData": {
            "createRequest": {
                "requestId": f"meet-{uuid4().hex}",
                "conferenceSolutionKey": {"type": "hangoutsMeet"},
            }
        },
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": _REMINDER_EMAIL_MINUTES},
                {"method": "popup", "minutes": _REMINDER_POPUP_MINUTES},
            ],
        },
    }


def extract_meeting_link(event: dict) -> str | None:
    if event.get("hangoutLink"):
        return event["hangoutLink"]
    entry_points = (event.get("conferenceData") or {}).get("entryPoints") or []
    if entry_points:
        return entry_points[0].get("uri")
    return None


class GoogleCalendarMeetingProvisioner:
    """Implementación de MeetingProvisioner sobre Google Calendar."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        calendar_id: str = "primary",
        timeout_seconds: float = 10.0,
    ):
        if not client_id or not client_secret or not refresh_token:
            raise ValueError(
                "GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN "
                "are required"
            )
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._calendar_id = calendar_id
        self._timeout = timeout_seconds
        retrying = create_retry_decorator()
        self._refresh = retrying(self._request_access_token)
        self._delete = retrying(self._delete_event)

    def _request_access_token(self) -> str:
        resp = httpx.post(
            _GOOGLE_TOKEN_URL,
            data={
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "refresh_token": self._refresh_token,
                "grant_type": "refresh_token",
            },
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return resp.json()["access_token"]

    def _events_url(self) -> str:
        return _CALENDAR_EVENTS_URL.format(
            calendar_id=quote(self._calendar_id, safe="")
        )

    def _delete_event(self, event_id: str, access_token: str) -> None:
        resp = httpx.delete(
            f"{self._events_url()}/{quote(event_id, safe='')}",
            params={"sendUpdates": "all"},
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=self._timeout,
        )
        if resp.status_code in _ALREADY_GONE:
            return
        resp.raise_for_status()

    def create_meeting(self, request: MeetingRequest) -> MeetingEvent:
        try:
            access_token = self._refresh()
            resp = httpx.post(
                self._events_url(),
                params={"conferenceDataVersion": 1, "sendUpdates": "all"},
                headers={"Authorization": f"Bearer {access_token}"},
                json=build_event_body(request),
                timeout=self._timeout,
            )
            resp.raise_for_status()
            event = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "google calendar event creation failed",
                extra={"status": exc.response.status_code},
            )
            raise MeetingProvisioningError(
                f"Failed to create Google Meet: HTTP {exc.response.status_code}",
                original_error=exc,
            ) from exc
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.error(
                "google calendar error",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            raise MeetingProvisioningError(
                f"Failed to create Google Meet: {exc}", original_error=exc
            ) from exc

        meeting_link = extract_meeting_link(event)
        if not meeting_link:
            if event.get("id"):
                self._discard(event["id"])
            raise MeetingProvisioningError("Calendar event has no Meet link")

        return MeetingEvent(
            event_id=event.get("id"),
            meeting_link=meeting_link,
            event_link=event.get("htmlLink"),
        )

    def cancel_meeting(self, event_id: str) -> None:
        try:
            self._delete(event_id, self._refresh())
        except httpx.HTTPStatusError as exc:
            raise MeetingProvisioningError(
                f"Failed to cancel Google Meet: HTTP {exc.response.status_code}",
                original_error=exc,
            ) from exc
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            raise MeetingProvisioningError(
                f"Failed to cancel Google Meet: {exc}", original_error=exc
            ) from exc
        logger.info("google calendar event cancelled", extra={"event_id": event_id})

    def _discard(self, event_id: str) -> None:
        try:
            self.cancel_meeting(event_id)
        except MeetingProvisioningError as exc:
            logger.warning(
                "could not cancel calendar event without Meet link",
                extra={"event_id": event_id, "error": exc.message},
            )
