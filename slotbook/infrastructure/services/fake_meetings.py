"""
Fake MeetingProvisioner (tests / local dev).

Genera links deterministas a partir de un contador; `fail=True` simula una
caída del proveedor para ejercitar el link de respaldo. `cancelled` registra
los eventos descartados por reservas que no se concretaron.
"""

from __future__ import annotations

from itertools import count
from threading import Lock

from ...crosscutting.exceptions import MeetingProvisioningError
from ...domain.value_objects import MeetingEvent, MeetingRequest


class FakeMeetingProvisioner:
    def __init__(self, *, host: str = "meet.example.test", fail: bool = False):
        self._host = host
        self._fail = fail
        self._counter = count(1)
        self._lock = Lock()
        self.requests: list[MeetingRequest] = []
        self.cancelled: list[str] = []

    def create_meeting(self, request: MeetingRequest) -> MeetingEvent:
        with self._lock:
            self.requests.append(request)
            number = next(self._counter)
        if self._fail:
            raise MeetingProvisioningError("fake provider unavailable")
        return MeetingEvent(
            event_id=f"fake-event-{number}",
            meeting_link=f"https://{self._host}/fake-{number:04d}",
            event_link=f"https://calendar.example.test/event/{number}",
        )

    def cancel_meeting(self, event_id: str) -> None:
        with self._lock:
            self.cancelled.append(event_id)
