"""
Infrastructure Services (Infrastructure Layer)

Facade/Barrel del paquete `infrastructure.services`: adapters concretos de
los puertos de dominio (IdentityVerifier, MeetingProvisioner, Clock).

- Google: GoogleIdentityVerifier (tokeninfo), GoogleCalendarMeetingProvisioner
  (Calendar v3 + Meet).
- Fakes: FakeIdentityVerifier, FakeMeetingProvisioner para tests/desarrollo.
- SystemClock: reloj UTC.
"""

from .clock import SystemClock
from .fake_identity import FakeIdentityVerifier
from .fake_meetings import FakeMeetingProvisioner
from .google_calendar import GoogleCalendarMeetingProvisioner
from .google_identity import GoogleIdentityVerifier

__all__ = [
    "SystemClock",
    "FakeIdentityVerifier",
    "FakeMeetingProvisioner",
    "GoogleCalendarMeetingProvisioner",
    "GoogleIdentityVerifier",
]
