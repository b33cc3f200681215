"""
Name: Slot Endpoint Tests

Responsibilities:
  - Create / list / book / status / delete over HTTP
  - Error mapping: 409 SLOT_CONFLICT, 404 SLOT_UNAVAILABLE, 403, 422
  - /v1 and /api/v1 serve the same routes
"""

import re

import pytest

from slotbook.identity.users import UserRole

pytestmark = pytest.mark.unit

FAKE_LINK_RE = re.compile(r"^https://meet\.google\.com/fake-\d{4}$")


@pytest.fixture
def faculty_headers(login):
    headers, _ = login("prof@uni.edu", UserRole.FACULTY, name="Prof Ada")
    return headers


@pytest.fixture
def scholar_headers(login):
    headers, _ = login("student@uni.edu", name="Stu Dent")
    return headers


@pytest.fixture
def create(client, faculty_headers, future_day):
    def _create(start="10:00", end="11:00", headers=None, day=None):
        return client.post(
            "/v1/slots",
            json={
                "date": (day or future_day).isoformat(),
                "start_time": start,
                "end_time": end,
            },
            headers=headers or faculty_headers,
        )

    return _create


def test_create_slot_returns_201(create, future_day):
    response = create()

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Slot created successfully"
    assert body["slot"]["status"] == "available"
    assert body["slot"]["date"] == future_day.isoformat()
    assert body["slot"]["start_time"] == "10:00:00"


def test_overlapping_slot_is_409(create):
    create("09:00", "10:00")

    response = create("09:30", "10:30")

    assert response.status_code == 409
    assert response.json()["code"] == "SLOT_CONFLICT"


def test_adjacent_slot_is_accepted(create):
    create("09:00", "10:00")

    assert create("10:00", "11:00").status_code == 201


def test_invalid_range_is_422(create):
    response = create("11:00", "10:00")

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_utc_times_are_stored_without_zone(create):
    response = create("08:00:00Z", "09:00:00+00:00")

    assert response.status_code == 201
    assert response.json()["slot"]["start_time"] == "08:00:00"
    assert response.json()["slot"]["end_time"] == "09:00:00"


def test_time_with_non_utc_offset_is_422(create):
    response = create("09:00:00+05:00", "10:00:00+05:00")

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_malformed_body_is_422(client, faculty_headers):
    response = client.post(
        "/v1/slots", json={"date": "not-a-date"}, headers=faculty_headers
    )

    assert response.status_code == 422
    assert response.json()["errors"]


def test_scholar_cannot_create(create, scholar_headers):
    response = create(headers=scholar_headers)

    assert response.status_code == 403


def test_unauthenticated_is_401(client):
    assert client.get("/v1/slots/available").status_code == 401


def test_book_flow(client, create, scholar_headers, login):
    slot_id = create().json()["slot"]["id"]

    response = client.post(
        f"/v1/slots/{slot_id}/book",
        json={"notes": "Chapter 3 demo"},
        headers=scholar_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Slot booked successfully"
    assert body["slot"]["status"] == "booked"
    assert body["slot"]["notes"] == "Chapter 3 demo"
    assert body["slot"]["faculty"]["name"] == "Prof Ada"
    assert body["slot"]["scholar"]["name"] == "Stu Dent"
    assert FAKE_LINK_RE.match(body["meeting_link"])
    assert body["slot"]["meeting_link"] == body["meeting_link"]
    assert body["calendar_link"].startswith("https://calendar.google.com/")

    other_headers, _ = login("second@uni.edu")
    again = client.post(f"/v1/slots/{slot_id}/book", headers=other_headers)
    assert again.status_code == 404
    assert again.json()["code"] == "SLOT_UNAVAILABLE"
    assert again.json()["detail"] == "Slot not available"


def test_book_without_body(client, create, scholar_headers):
    slot_id = create().json()["slot"]["id"]

    response = client.post(f"/v1/slots/{slot_id}/book", headers=scholar_headers)

    assert response.status_code == 200
    assert response.json()["slot"]["notes"] is None


def test_faculty_cannot_book(client, create, faculty_headers):
    slot_id = create().json()["slot"]["id"]

    response = client.post(f"/v1/slots/{slot_id}/book", headers=faculty_headers)

    assert response.status_code == 403


def test_listings(client, create, scholar_headers, faculty_headers, future_day):
    booked_id = create("09:00", "10:00").json()["slot"]["id"]
    open_id = create("11:00", "12:00").json()["slot"]["id"]
    client.post(f"/v1/slots/{booked_id}/book", headers=scholar_headers)

    available = client.get(
        "/v1/slots/available",
        params={"date": future_day.isoformat()},
        headers=scholar_headers,
    ).json()
    bookings = client.get("/v1/slots/my-bookings", headers=scholar_headers).json()
    mine = client.get("/v1/slots/my-slots", headers=faculty_headers).json()

    assert [s["id"] for s in available["slots"]] == [open_id]
    assert available["slots"][0]["faculty"]["email"] == "prof@uni.edu"
    assert [s["id"] for s in bookings["bookings"]] == [booked_id]
    assert [s["id"] for s in mine["slots"]] == [booked_id, open_id]


def test_delete_available_slot_is_204(client, create, faculty_headers):
    slot_id = create().json()["slot"]["id"]

    response = client.delete(f"/v1/slots/{slot_id}", headers=faculty_headers)

    assert response.status_code == 204
    assert response.content == b""
    mine = client.get("/v1/slots/my-slots", headers=faculty_headers).json()
    assert mine["slots"] == []


def test_delete_booked_slot_is_403(client, create, faculty_headers, scholar_headers):
    slot_id = create().json()["slot"]["id"]
    client.post(f"/v1/slots/{slot_id}/book", headers=scholar_headers)

    response = client.delete(f"/v1/slots/{slot_id}", headers=faculty_headers)

    assert response.status_code == 403
    assert response.json()["detail"] == "Cannot delete booked slot"


def test_delete_unknown_slot_is_404(client, faculty_headers):
    response = client.delete(
        "/v1/slots/00000000-0000-0000-0000-000000000000", headers=faculty_headers
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_status_update(client, create, faculty_headers, scholar_headers):
    slot_id = create().json()["slot"]["id"]
    client.post(f"/v1/slots/{slot_id}/book", headers=scholar_headers)

    response = client.patch(
        f"/v1/slots/{slot_id}/status",
        json={"status": "completed"},
        headers=faculty_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Slot status updated successfully"
    assert response.json()["slot"]["status"] == "completed"

    again = client.patch(
        f"/v1/slots/{slot_id}/status",
        json={"status": "cancelled"},
        headers=faculty_headers,
    )
    assert again.status_code == 409


def test_api_alias_serves_same_routes(client, scholar_headers):
    legacy = client.get("/api/v1/slots/available", headers=scholar_headers)
    current = client.get("/v1/slots/available", headers=scholar_headers)

    assert legacy.status_code == current.status_code == 200
    assert legacy.json() == current.json()


def test_provider_outage_falls_back_to_local_link(client, create, scholar_headers):
    from slotbook.api.main import app
    from slotbook.application.usecases import BookSlotUseCase
    from slotbook.container import (
        get_book_slot_use_case,
        get_clock,
        get_slot_repository,
        get_user_repository,
    )
    from slotbook.infrastructure.services import FakeMeetingProvisioner

    app.dependency_overrides[get_book_slot_use_case] = lambda: BookSlotUseCase(
        slot_repository=get_slot_repository(),
        user_repository=get_user_repository(),
        meeting_provisioner=FakeMeetingProvisioner(fail=True),
        clock=get_clock(),
    )
    try:
        slot_id = create().json()["slot"]["id"]
        response = client.post(f"/v1/slots/{slot_id}/book", headers=scholar_headers)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert re.match(
        r"^https://meet\.google\.com/[a-z]{3}-[a-z]{4}-[a-z]{3}$",
        response.json()["meeting_link"],
    )
