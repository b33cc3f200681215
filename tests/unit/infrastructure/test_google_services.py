"""
Name: Google Adapter Tests

Responsibilities:
  - GoogleIdentityVerifier: claim checks over the tokeninfo response
  - GoogleCalendarMeetingProvisioner: token refresh + events.insert payload
  - GoogleCalendarMeetingProvisioner: events.delete on cancel
  - Meet link extraction and error translation

Collaborators:
  - httpx: responses are built in-process (no network)
  - unittest.mock.patch: replaces httpx.get / httpx.post / httpx.delete

Notes:
  - Permanent errors (4xx) are not retried, so these tests never sleep
"""

from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest

from slotbook.crosscutting.exceptions import (
    AuthenticationError,
    MeetingProvisioningError,
)
from slotbook.domain.value_objects import MeetingRequest
from slotbook.infrastructure.services import (
    GoogleCalendarMeetingProvisioner,
    GoogleIdentityVerifier,
)
from slotbook.infrastructure.services.google_calendar import (
    build_event_body,
    extract_meeting_link,
)
from slotbook.infrastructure.services.retry import is_transient_error

pytestmark = pytest.mark.unit

CLIENT_ID = "client-123.apps.googleusercontent.com"


def _response(status: int, payload: dict, method: str = "GET") -> httpx.Response:
    return httpx.Response(
        status,
        json=payload,
        request=httpx.Request(method, "https://google.test"),
    )


def _claims(**overrides) -> dict:
    claims = {
        "aud": CLIENT_ID,
        "iss": "https://accounts.google.com",
        "email": "scholar@uni.edu",
        "email_verified": "true",
        "name": "Sam Scholar",
        "sub": "1099",
        "picture": "https://lh3.test/photo.png",
    }
    claims.update(overrides)
    return claims


@pytest.fixture
def meeting_request() -> MeetingRequest:
    return MeetingRequest(
        summary="Assignment Demo - Sam with Dr. F",
        description="demo",
        start=datetime(2025, 3, 11, 10, 0, tzinfo=timezone.utc),
        end=datetime(2025, 3, 11, 11, 0, tzinfo=timezone.utc),
        attendee_emails=("scholar@uni.edu", "faculty@uni.edu"),
    )


@pytest.fixture
def provisioner() -> GoogleCalendarMeetingProvisioner:
    return GoogleCalendarMeetingProvisioner(
        client_id=CLIENT_ID,
        client_secret="secret",
        refresh_token="refresh",
        calendar_id="team@group.calendar.google.com",
    )


# =============================================================================
# Identity
# =============================================================================


class TestGoogleIdentityVerifier:
    def test_requires_client_id(self):
        with pytest.raises(ValueError):
            GoogleIdentityVerifier(client_id="")

    def test_valid_token_returns_identity(self):
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID)

        with patch("httpx.get", return_value=_response(200, _claims())) as mock_get:
            identity = verifier.verify("id-token")

        assert identity.email == "scholar@uni.edu"
        assert identity.name == "Sam Scholar"
        assert identity.subject == "1099"
        assert identity.picture == "https://lh3.test/photo.png"
        assert mock_get.call_args.kwargs["params"] == {"id_token": "id-token"}

    @pytest.mark.parametrize(
        "overrides",
        [
            {"aud": "someone-else"},
            {"iss": "evil.example.com"},
            {"email_verified": "false"},
            {"email": ""},
        ],
    )
    def test_claim_mismatch_is_rejected(self, overrides):
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID)

        with patch("httpx.get", return_value=_response(200, _claims(**overrides))):
            with pytest.raises(AuthenticationError):
                verifier.verify("id-token")

    def test_rejected_token_is_not_retried(self):
        verifier = GoogleIdentityVerifier(client_id=CLIENT_ID)
        bad = _response(400, {"error": "invalid_token"})

        with patch("httpx.get", return_value=bad) as mock_get:
            with pytest.raises(AuthenticationError):
                verifier.verify("garbage")

        assert mock_get.call_count == 1


# =============================================================================
# Calendar
# =============================================================================


class TestEventBody:
    def test_event_body_shape(self, meeting_request):
        body = build_event_body(meeting_request)

        assert body["start"] == {"dateTime": "2025-03-11T10:00:00Z", "timeZone": "UTC"}
        assert body["end"]["dateTime"] == "2025-03-11T11:00:00Z"
        assert body["attendees"] == [
            {"email": "scholar@uni.edu"},
            {"email": "faculty@uni.edu"},
        ]
        create = body["conferenceData"]["createRequest"]
        assert create["conferenceSolutionKey"] == {"type": "hangoutsMeet"}
        assert create["requestId"].startswith("meet-")
        assert body["reminders"]["overrides"] == [
            {"method": "email", "minutes": 1440},
            {"method": "popup", "minutes": 30},
        ]

    def test_request_ids_are_unique(self, meeting_request):
        first = build_event_body(meeting_request)["conferenceData"]["createRequest"]
        second = build_event_body(meeting_request)["conferenceData"]["createRequest"]
        assert first["requestId"] != second["requestId"]

    def test_extract_prefers_hangout_link(self):
        event = {
            "hangoutLink": "https://meet.google.com/abc-defg-hij",
            "conferenceData": {"entryPoints": [{"uri": "https://other.test"}]},
        }
        assert extract_meeting_link(event) == "https://meet.google.com/abc-defg-hij"

    def test_extract_falls_back_to_entry_point(self):
        entry = {"uri": "https://meet.google.com/x"}
        event = {"conferenceData": {"entryPoints": [entry]}}
        assert extract_meeting_link(event) == "https://meet.google.com/x"

    @pytest.mark.parametrize("event", [{}, {"conferenceData": {}}])
    def test_extract_without_conference(self, event):
        assert extract_meeting_link(event) is None


class TestGoogleCalendarMeetingProvisioner:
    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            GoogleCalendarMeetingProvisioner(
                client_id=CLIENT_ID, client_secret="", refresh_token="r"
            )

    def test_creates_meeting(self, provisioner, meeting_request):
        token = _response(200, {"access_token": "at-1"}, "POST")
        event = _response(
            200,
            {
                "id": "evt-1",
                "hangoutLink": "https://meet.google.com/abc-defg-hij",
                "htmlLink": "https://calendar.google.com/event?eid=1",
            },
            "POST",
        )

        with patch("httpx.post", side_effect=[token, event]) as mock_post:
            result = provisioner.create_meeting(meeting_request)

        assert result.event_id == "evt-1"
        assert result.meeting_link == "https://meet.google.com/abc-defg-hij"
        assert result.event_link == "https://calendar.google.com/event?eid=1"

        token_call, insert_call = mock_post.call_args_list
        assert token_call.kwargs["data"]["grant_type"] == "refresh_token"
        assert insert_call.args[0].endswith(
            "/calendars/team%40group.calendar.google.com/events"
        )
        assert insert_call.kwargs["headers"] == {"Authorization": "Bearer at-1"}
        assert insert_call.kwargs["params"] == {
            "conferenceDataVersion": 1,
            "sendUpdates": "all",
        }

    def test_http_error_becomes_provisioning_error(self, provisioner, meeting_request):
        token = _response(200, {"access_token": "at-1"}, "POST")
        denied = _response(403, {"error": "forbidden"}, "POST")

        with patch("httpx.post", side_effect=[token, denied]) as mock_post:
            with pytest.raises(MeetingProvisioningError, match="HTTP 403"):
                provisioner.create_meeting(meeting_request)

        assert mock_post.call_count == 2

    def test_event_without_link_is_an_error(self, provisioner, meeting_request):
        token = _response(200, {"access_token": "at-1"}, "POST")
        event = _response(200, {"id": "evt-1"}, "POST")
        gone = _response(204, {}, "DELETE")

        with patch("httpx.post", side_effect=[token, event, token]), patch(
            "httpx.delete", return_value=gone
        ) as mock_delete:
            with pytest.raises(MeetingProvisioningError):
                provisioner.create_meeting(meeting_request)

        assert mock_delete.call_args.args[0].endswith("/events/evt-1")

    def test_rejected_refresh_token_is_an_error(self, provisioner, meeting_request):
        revoked = _response(401, {"error": "invalid_grant"}, "POST")

        with patch("httpx.post", return_value=revoked) as mock_post:
            with pytest.raises(MeetingProvisioningError, match="HTTP 401"):
                provisioner.create_meeting(meeting_request)

        assert mock_post.call_count == 1

    def test_malformed_token_response_is_an_error(self, provisioner, meeting_request):
        with patch("httpx.post", return_value=_response(200, {}, "POST")):
            with pytest.raises(MeetingProvisioningError):
                provisioner.create_meeting(meeting_request)

    def test_cancel_deletes_event_and_notifies(self, provisioner):
        token = _response(200, {"access_token": "at-1"}, "POST")

        with patch("httpx.post", return_value=token), patch(
            "httpx.delete", return_value=_response(204, {}, "DELETE")
        ) as mock_delete:
            provisioner.cancel_meeting("evt-9")

        assert mock_delete.call_args.args[0].endswith(
            "/calendars/team%40group.calendar.google.com/events/evt-9"
        )
        assert mock_delete.call_args.kwargs["params"] == {"sendUpdates": "all"}
        assert mock_delete.call_args.kwargs["headers"] == {
            "Authorization": "Bearer at-1"
        }

    @pytest.mark.parametrize("status", [404, 410])
    def test_cancel_of_missing_event_is_ok(self, provisioner, status):
        token = _response(200, {"access_token": "at-1"}, "POST")

        with patch("httpx.post", return_value=token), patch(
            "httpx.delete", return_value=_response(status, {}, "DELETE")
        ):
            provisioner.cancel_meeting("evt-9")

    def test_cancel_denied_is_an_error(self, provisioner):
        token = _response(200, {"access_token": "at-1"}, "POST")

        with patch("httpx.post", return_value=token), patch(
            "httpx.delete", return_value=_response(403, {}, "DELETE")
        ) as mock_delete:
            with pytest.raises(MeetingProvisioningError, match="HTTP 403"):
                provisioner.cancel_meeting("evt-9")

        assert mock_delete.call_count == 1


# =============================================================================
# Retry classification
# =============================================================================


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://google.test")
    return httpx.HTTPStatusError(
        "err", request=request, response=httpx.Response(code, request=request)
    )


@pytest.mark.parametrize("code", [408, 429, 500, 502, 503, 504])
def test_transient_status_codes(code):
    assert is_transient_error(_status_error(code)) is True


@pytest.mark.parametrize("code", [400, 401, 403, 404])
def test_permanent_status_codes(code):
    assert is_transient_error(_status_error(code)) is False


def test_network_errors_are_transient():
    assert is_transient_error(httpx.ConnectError("boom")) is True
    assert is_transient_error(ValueError("boom")) is False
