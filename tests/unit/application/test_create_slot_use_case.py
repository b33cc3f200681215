"""
Name: Create Slot Use Case Tests

Responsibilities:
  - Validate capability check, time range validation and overlap rejection
  - Verify accepted same-faculty/same-date slots stay pairwise disjoint,
    also under concurrent creation
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import time
from itertools import combinations

import pytest

from slotbook.application.usecases import (
    CreateSlotInput,
    CreateSlotUseCase,
    SlotErrorCode,
)
from slotbook.domain.entities import SlotStatus
from slotbook.domain.slot_policy import intervals_overlap

pytestmark = pytest.mark.unit


@pytest.fixture
def use_case(slot_repo, clock) -> CreateSlotUseCase:
    return CreateSlotUseCase(slot_repo, clock)


def _create(use_case, actor, day, start, end, notes=None):
    return use_case.execute(
        CreateSlotInput(
            date=day, start_time=start, end_time=end, actor=actor, notes=notes
        )
    )


def test_faculty_creates_available_slot(use_case, faculty, as_actor, tomorrow, clock):
    result = _create(
        use_case, as_actor(faculty), tomorrow, time(10, 0), time(11, 0), "  Room 4 "
    )

    assert result.error is None
    slot = result.slot
    assert slot.faculty_id == faculty.id
    assert slot.status == SlotStatus.AVAILABLE
    assert slot.scholar_id is None
    assert slot.notes == "Room 4"
    assert slot.created_at == clock.now()


def test_admin_can_create_slot(use_case, admin, as_actor, tomorrow):
    result = _create(use_case, as_actor(admin), tomorrow, time(10, 0), time(11, 0))

    assert result.error is None
    assert result.slot.faculty_id == admin.id


def test_scholar_cannot_create_slot(use_case, scholar, as_actor, tomorrow):
    result = _create(use_case, as_actor(scholar), tomorrow, time(10, 0), time(11, 0))

    assert result.slot is None
    assert result.error.code == SlotErrorCode.FORBIDDEN


@pytest.mark.parametrize(
    "start,end", [(time(11, 0), time(10, 0)), (time(10, 0), time(10, 0))]
)
def test_invalid_range_is_rejected(use_case, faculty, as_actor, tomorrow, start, end):
    result = _create(use_case, as_actor(faculty), tomorrow, start, end)

    assert result.error.code == SlotErrorCode.VALIDATION_ERROR
    assert result.error.message == "End time must be after start time"


@pytest.mark.parametrize(
    "start,end",
    [
        (time(10, 30), time(11, 30)),
        (time(9, 30), time(10, 30)),
        (time(9, 0), time(12, 0)),
        (time(10, 0), time(11, 0)),
    ],
)
def test_overlap_is_rejected(use_case, faculty, as_actor, tomorrow, start, end):
    actor = as_actor(faculty)
    assert _create(use_case, actor, tomorrow, time(10, 0), time(11, 0)).error is None

    result = _create(use_case, actor, tomorrow, start, end)

    assert result.error.code == SlotErrorCode.CONFLICT
    assert result.error.message == "Time slot overlaps with existing slot"


def test_adjacent_slots_are_accepted(use_case, faculty, as_actor, tomorrow):
    actor = as_actor(faculty)

    first = _create(use_case, actor, tomorrow, time(10, 0), time(11, 0))
    second = _create(use_case, actor, tomorrow, time(11, 0), time(12, 0))

    assert first.error is None
    assert second.error is None


def test_other_faculty_and_other_dates_do_not_conflict(
    use_case, faculty, make_user, as_actor, tomorrow
):
    other = make_user("other@uni.edu", faculty.role)
    _create(use_case, as_actor(faculty), tomorrow, time(10, 0), time(11, 0))

    same_time_other_faculty = _create(
        use_case, as_actor(other), tomorrow, time(10, 0), time(11, 0)
    )
    same_faculty_next_day = _create(
        use_case,
        as_actor(faculty),
        tomorrow.replace(day=tomorrow.day + 1),
        time(10, 0),
        time(11, 0),
    )

    assert same_time_other_faculty.error is None
    assert same_faculty_next_day.error is None


def test_cancelled_slot_frees_the_window(
    use_case, slot_repo, faculty, as_actor, tomorrow, clock
):
    actor = as_actor(faculty)
    created = _create(use_case, actor, tomorrow, time(10, 0), time(11, 0)).slot
    slot_repo.transition_slot(
        created.id,
        expected=SlotStatus.AVAILABLE,
        target=SlotStatus.CANCELLED,
        at=clock.now(),
    )

    result = _create(use_case, actor, tomorrow, time(10, 0), time(11, 0))

    assert result.error is None


def test_concurrent_overlapping_creations_keep_slots_disjoint(
    use_case, slot_repo, faculty, as_actor, tomorrow
):
    actor = as_actor(faculty)
    windows = [
        (time(hour, minute), time(hour + 1, minute))
        for hour in range(9, 13)
        for minute in (0, 20, 40)
    ]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(
            pool.map(
                lambda w: _create(use_case, actor, tomorrow, w[0], w[1]), windows
            )
        )

    accepted = slot_repo.list_slots_for_faculty_on(faculty.id, tomorrow)
    assert len(accepted) == sum(1 for r in results if r.error is None)
    assert accepted
    for a, b in combinations(accepted, 2):
        assert not intervals_overlap(a.start_time, a.end_time, b.start_time, b.end_time)
