"""
Name: In-Memory Repository Tests

Responsibilities:
  - Ordering contracts shared with the Postgres repositories
  - Atomic conditional writes (create if free, book, transition, delete)
  - Dual write between the Role Store and the user directory
"""

from datetime import date, datetime, time, timedelta, timezone
from uuid import uuid4

import pytest

from slotbook.domain.entities import Slot, SlotStatus
from slotbook.identity.users import UserRole

pytestmark = pytest.mark.unit

AT = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)
DAY = date(2025, 3, 11)


def _slot(faculty_id, start, end, *, day=DAY, status=SlotStatus.AVAILABLE) -> Slot:
    return Slot(
        id=uuid4(),
        faculty_id=faculty_id,
        date=day,
        start_time=start,
        end_time=end,
        status=status,
        created_at=AT,
        updated_at=AT,
    )


class TestSlotRepository:
    def test_create_rejects_overlap_for_same_faculty_and_day(self, slot_repo, faculty):
        assert slot_repo.create_slot_if_free(_slot(faculty.id, time(9), time(10)))

        overlapping = _slot(faculty.id, time(9, 30), time(11))
        assert slot_repo.create_slot_if_free(overlapping) is None
        assert slot_repo.create_slot_if_free(_slot(faculty.id, time(10), time(11)))
        assert slot_repo.create_slot_if_free(
            _slot(faculty.id, time(9), time(10), day=DAY + timedelta(days=1))
        )

    def test_cancelled_slots_do_not_block(self, slot_repo, faculty):
        slot_repo.create_slot_if_free(
            _slot(faculty.id, time(9), time(10), status=SlotStatus.CANCELLED)
        )

        assert slot_repo.create_slot_if_free(_slot(faculty.id, time(9), time(10)))

    def test_listing_order(self, slot_repo, faculty):
        later_day = _slot(faculty.id, time(8), time(9), day=DAY + timedelta(days=1))
        afternoon = _slot(faculty.id, time(14), time(15))
        morning = _slot(faculty.id, time(9), time(10))
        for slot in (later_day, afternoon, morning):
            slot_repo.create_slot_if_free(slot)

        listed = slot_repo.list_slots_by_faculty(faculty.id)

        assert [d.slot.id for d in listed] == [morning.id, afternoon.id, later_day.id]
        assert listed[0].faculty.name == "Dr. Faculty"

    def test_book_is_conditional_on_available(self, slot_repo, faculty, scholar):
        slot = slot_repo.create_slot_if_free(_slot(faculty.id, time(9), time(10)))

        booked = slot_repo.book_slot(
            slot.id, scholar_id=scholar.id, notes="hi", meeting_link="https://m", at=AT
        )
        again = slot_repo.book_slot(
            slot.id, scholar_id=uuid4(), notes=None, meeting_link="https://n", at=AT
        )

        assert booked.status == SlotStatus.BOOKED
        assert booked.scholar_id == scholar.id
        assert again is None
        assert slot_repo.get_available_slot(slot.id) is None

    def test_transition_checks_expected_status(self, slot_repo, faculty):
        slot = slot_repo.create_slot_if_free(_slot(faculty.id, time(9), time(10)))

        missed = slot_repo.transition_slot(
            slot.id, expected=SlotStatus.BOOKED, target=SlotStatus.COMPLETED, at=AT
        )
        cancelled = slot_repo.transition_slot(
            slot.id, expected=SlotStatus.AVAILABLE, target=SlotStatus.CANCELLED, at=AT
        )

        assert missed is None
        assert cancelled.status == SlotStatus.CANCELLED

    def test_delete_requires_owner_and_deletable_status(
        self, slot_repo, faculty, scholar
    ):
        slot = slot_repo.create_slot_if_free(_slot(faculty.id, time(9), time(10)))
        booked = slot_repo.create_slot_if_free(_slot(faculty.id, time(11), time(12)))
        slot_repo.book_slot(
            booked.id, scholar_id=scholar.id, notes=None, meeting_link="x", at=AT
        )

        assert slot_repo.delete_slot_if_deletable(slot.id, uuid4()) is False
        assert slot_repo.delete_slot_if_deletable(booked.id, faculty.id) is False
        assert slot_repo.delete_slot_if_deletable(slot.id, faculty.id) is True
        assert slot_repo.get_slot(slot.id) is None


class TestUserAndRoleRepositories:
    def test_record_login_keeps_identity(self, role_repo):
        first = role_repo.record_login(
            email="a@uni.edu",
            name="A",
            picture=None,
            google_id="g-1",
            default_role=UserRole.SCHOLAR,
            at=AT,
        )
        role_repo.assign_role("a@uni.edu", UserRole.FACULTY, at=AT)
        second = role_repo.record_login(
            email="a@uni.edu",
            name="A2",
            picture="p.png",
            google_id="g-1",
            default_role=UserRole.SCHOLAR,
            at=AT + timedelta(hours=1),
        )

        assert second.id == first.id
        assert second.created_at == AT
        assert (second.name, second.picture, second.role) == (
            "A2",
            "p.png",
            UserRole.FACULTY,
        )

    def test_list_users_newest_first(self, user_repo, role_repo):
        for offset, email in enumerate(["old@uni.edu", "new@uni.edu"]):
            role_repo.record_login(
                email=email,
                name=email,
                picture=None,
                google_id=None,
                default_role=UserRole.SCHOLAR,
                at=AT + timedelta(days=offset),
            )

        assert [u.email for u in user_repo.list_users()] == [
            "new@uni.edu",
            "old@uni.edu",
        ]

    def test_ensure_assignment_does_not_overwrite(self, role_repo):
        role_repo.assign_role("x@uni.edu", UserRole.ADMIN, at=AT)

        kept = role_repo.ensure_assignment(
            "x@uni.edu", default_role=UserRole.SCHOLAR, at=AT
        )

        assert kept.role == UserRole.ADMIN

    def test_assign_role_updates_both_stores(self, role_repo, user_repo, scholar):
        assignment, user = role_repo.assign_role(
            scholar.email, UserRole.FACULTY, at=AT + timedelta(minutes=5)
        )

        assert assignment.role == UserRole.FACULTY
        assert user.role == UserRole.FACULTY
        assert user_repo.get_user_by_id(scholar.id).role == UserRole.FACULTY

    def test_reassign_preserves_created_at(self, role_repo):
        first, _ = role_repo.assign_role("y@uni.edu", UserRole.FACULTY, at=AT)
        later = AT + timedelta(days=1)

        second, user = role_repo.assign_role("y@uni.edu", UserRole.ADMIN, at=later)

        assert user is None
        assert second.created_at == first.created_at
        assert second.updated_at == later
