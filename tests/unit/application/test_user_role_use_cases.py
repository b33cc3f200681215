"""
Name: User & Role Use Case Tests

Responsibilities:
  - Validate RoleService (default role, dual write, pre-assignment)
  - Validate Google login (first login, role re-sync on every login)
  - Validate role mutation guards (capability, self-change by id and email)
  - Validate directory listings and bootstrap admins
"""

import threading
from datetime import date, time
from uuid import uuid4

import pytest

from slotbook.application.bootstrap_admins import ensure_bootstrap_admins
from slotbook.application.usecases import (
    AssignRoleByEmailInput,
    AssignRoleByEmailUseCase,
    AuthenticateWithGoogleInput,
    AuthenticateWithGoogleUseCase,
    BookSlotInput,
    BookSlotUseCase,
    CreateSlotInput,
    CreateSlotUseCase,
    DeleteSlotInput,
    DeleteSlotUseCase,
    ListFacultiesUseCase,
    ListRoleAssignmentsUseCase,
    ListUsersUseCase,
    SlotErrorCode,
    UpdateUserRoleInput,
    UpdateUserRoleUseCase,
    UserErrorCode,
)
from slotbook.application.usecases.users.update_user_role import SELF_CHANGE_MESSAGE
from slotbook.domain.entities import SlotStatus
from slotbook.identity.users import UserRole
from slotbook.infrastructure.services import FakeIdentityVerifier

pytestmark = pytest.mark.unit


@pytest.fixture
def login(role_service):
    use_case = AuthenticateWithGoogleUseCase(
        identity_verifier=FakeIdentityVerifier(),
        role_service=role_service,
    )

    def _login(credential: str):
        return use_case.execute(AuthenticateWithGoogleInput(credential=credential))

    return _login


@pytest.fixture
def update_role(user_repo, role_service):
    return UpdateUserRoleUseCase(user_repository=user_repo, role_service=role_service)


# =============================================================================
# RoleService
# =============================================================================


def test_get_role_defaults_to_scholar_and_persists(role_service, role_repo):
    assert role_service.get_role("nobody@uni.edu") == UserRole.SCHOLAR
    assert role_repo.get_assignment("nobody@uni.edu").role == UserRole.SCHOLAR


def test_assign_role_without_user_is_deferred(role_service):
    change = role_service.assign_role("later@uni.edu", UserRole.FACULTY)

    assert change.applied_immediately is False
    assert change.user is None
    assert role_service.get_role("later@uni.edu") == UserRole.FACULTY


def test_assign_role_syncs_directory(role_service, user_repo, make_user):
    user = make_user("someone@uni.edu")

    change = role_service.assign_role(user.email, UserRole.ADMIN)

    assert change.applied_immediately is True
    assert change.user.role == UserRole.ADMIN
    assert user_repo.get_user_by_id(user.id).role == UserRole.ADMIN
    assert role_service.get_role(user.email) == UserRole.ADMIN


def test_role_keys_are_case_sensitive(role_service):
    role_service.assign_role("Mixed@Uni.edu", UserRole.FACULTY)

    assert role_service.get_role("mixed@uni.edu") == UserRole.SCHOLAR


# =============================================================================
# Login
# =============================================================================


def test_first_login_creates_scholar(login, role_repo):
    result = login("fake:first@uni.edu:First Timer")

    assert result.error is None
    assert result.user.email == "first@uni.edu"
    assert result.user.name == "First Timer"
    assert result.user.role == UserRole.SCHOLAR
    assert result.user.google_id
    assert role_repo.get_assignment("first@uni.edu").role == UserRole.SCHOLAR


def test_pre_assigned_role_is_applied_on_first_login(
    login, role_service, admin, as_actor
):
    assigned = AssignRoleByEmailUseCase(role_service).execute(
        AssignRoleByEmailInput(
            email="new@x.com", role=UserRole.FACULTY, actor=as_actor(admin)
        )
    )
    assert assigned.applied_immediately is False

    result = login("fake:new@x.com")

    assert result.user.role == UserRole.FACULTY


def test_repeat_login_refreshes_profile_and_role(login, role_repo, clock):
    first = login("fake:repeat@uni.edu:Old Name")
    role_repo.assign_role("repeat@uni.edu", UserRole.FACULTY, at=clock.now())
    clock.advance(hours=1)

    second = login("fake:repeat@uni.edu:New Name")

    assert second.user.id == first.user.id
    assert second.user.name == "New Name"
    assert second.user.role == UserRole.FACULTY
    assert second.user.created_at == first.user.created_at
    assert second.user.last_login_at > first.user.last_login_at


def test_role_change_during_login_is_not_overwritten(
    login, role_service, role_repo, user_repo, monkeypatch
):
    login("fake:racer@uni.edu")
    ensure = role_repo.ensure_assignment
    promoters = []

    def ensure_then_promote(email, **kwargs):
        assignment = ensure(email, **kwargs)
        promoter = threading.Thread(
            target=role_service.assign_role, args=(email, UserRole.FACULTY)
        )
        promoter.start()
        promoter.join(timeout=0.1)
        promoters.append(promoter)
        return assignment

    monkeypatch.setattr(role_repo, "ensure_assignment", ensure_then_promote)
    login("fake:racer@uni.edu")
    for promoter in promoters:
        promoter.join()

    assert role_repo.get_assignment("racer@uni.edu").role == UserRole.FACULTY
    assert user_repo.get_user_by_email("racer@uni.edu").role == UserRole.FACULTY


@pytest.mark.parametrize("credential", ["", "   "])
def test_login_requires_token(login, credential):
    result = login(credential)

    assert result.error.code == UserErrorCode.VALIDATION_ERROR
    assert result.error.message == "Token is required"


def test_login_with_bad_credential_is_unauthorized(login, user_repo):
    result = login("not-a-google-token")

    assert result.error.code == UserErrorCode.UNAUTHORIZED
    assert result.error.message == "Authentication failed"
    assert user_repo.list_users() == []


# =============================================================================
# Role mutation
# =============================================================================


def test_admin_updates_role_by_id(update_role, admin, scholar, as_actor, role_service):
    result = update_role.execute(
        UpdateUserRoleInput(
            user_id=scholar.id, role=UserRole.FACULTY, actor=as_actor(admin)
        )
    )

    assert result.error is None
    assert result.user.role == UserRole.FACULTY
    assert role_service.get_role(scholar.email) == UserRole.FACULTY


@pytest.mark.parametrize("role", list(UserRole))
def test_nobody_changes_their_own_role_by_id(update_role, make_user, as_actor, role):
    me = make_user(f"{role.value}-self@uni.edu", role)

    result = update_role.execute(
        UpdateUserRoleInput(user_id=me.id, role=UserRole.ADMIN, actor=as_actor(me))
    )

    assert result.error.code == UserErrorCode.FORBIDDEN
    if role == UserRole.ADMIN:
        assert result.error.message == SELF_CHANGE_MESSAGE


@pytest.mark.parametrize("role", list(UserRole))
def test_nobody_changes_their_own_role_by_email(
    role_service, role_repo, make_user, as_actor, role
):
    me = make_user(f"{role.value}-self@uni.edu", role)

    result = AssignRoleByEmailUseCase(role_service).execute(
        AssignRoleByEmailInput(
            email=f"  {me.email} ", role=UserRole.SCHOLAR, actor=as_actor(me)
        )
    )

    assert result.error.code == UserErrorCode.FORBIDDEN
    assert role_repo.get_assignment(me.email) is None


def test_update_role_unknown_user(update_role, admin, as_actor):
    result = update_role.execute(
        UpdateUserRoleInput(
            user_id=uuid4(), role=UserRole.FACULTY, actor=as_actor(admin)
        )
    )

    assert result.error.code == UserErrorCode.NOT_FOUND
    assert result.error.message == "User not found"


@pytest.mark.parametrize("actor_role", [UserRole.FACULTY, UserRole.SCHOLAR])
def test_non_admins_cannot_assign_roles(role_service, make_user, as_actor, actor_role):
    actor = make_user("actor@uni.edu", actor_role)

    result = AssignRoleByEmailUseCase(role_service).execute(
        AssignRoleByEmailInput(
            email="victim@uni.edu", role=UserRole.ADMIN, actor=as_actor(actor)
        )
    )

    assert result.error.code == UserErrorCode.FORBIDDEN
    assert role_service.get_role("victim@uni.edu") == UserRole.SCHOLAR


def test_assign_by_email_requires_email(role_service, admin, as_actor):
    result = AssignRoleByEmailUseCase(role_service).execute(
        AssignRoleByEmailInput(
            email="   ", role=UserRole.FACULTY, actor=as_actor(admin)
        )
    )

    assert result.error.code == UserErrorCode.VALIDATION_ERROR
    assert result.error.message == "Email and role are required"


def test_assign_by_email_existing_user_is_immediate(
    role_service, user_repo, scholar, admin, as_actor
):
    result = AssignRoleByEmailUseCase(role_service).execute(
        AssignRoleByEmailInput(
            email=scholar.email, role=UserRole.FACULTY, actor=as_actor(admin)
        )
    )

    assert result.applied_immediately is True
    assert result.assignment.role == UserRole.FACULTY
    assert user_repo.get_user_by_email(scholar.email).role == UserRole.FACULTY


# =============================================================================
# Listings
# =============================================================================


def test_list_users_is_admin_only(user_repo, admin, faculty, scholar, as_actor):
    use_case = ListUsersUseCase(user_repo)

    assert use_case.execute(as_actor(faculty)).error.code == UserErrorCode.FORBIDDEN
    listed = use_case.execute(as_actor(admin))
    assert {u.email for u in listed.users} == {
        admin.email,
        faculty.email,
        scholar.email,
    }


def test_list_faculties_sorted_by_name(user_repo, make_user, scholar, as_actor):
    make_user("zed@uni.edu", UserRole.FACULTY, name="Zed")
    make_user("amy@uni.edu", UserRole.FACULTY, name="Amy")

    result = ListFacultiesUseCase(user_repo).execute(as_actor(scholar))

    assert [u.name for u in result.users] == ["Amy", "Zed"]


def test_list_role_assignments(role_service, admin, scholar, as_actor):
    role_service.assign_role("pending@uni.edu", UserRole.FACULTY)
    use_case = ListRoleAssignmentsUseCase(role_service)

    assert use_case.execute(as_actor(scholar)).error.code == UserErrorCode.FORBIDDEN
    result = use_case.execute(as_actor(admin))
    assert [a.email for a in result.assignments] == ["pending@uni.edu"]


# =============================================================================
# Bootstrap admins
# =============================================================================


def test_bootstrap_admins_is_idempotent(role_service):
    emails = ["root@uni.edu", " ", "ops@uni.edu"]

    assert ensure_bootstrap_admins(role_service, emails) == [
        "root@uni.edu",
        "ops@uni.edu",
    ]
    assert ensure_bootstrap_admins(role_service, emails) == []
    assert role_service.get_role("ops@uni.edu") == UserRole.ADMIN


# =============================================================================
# End to end (use case level)
# =============================================================================


def test_booking_walkthrough(
    slot_repo, user_repo, clock, meetings, make_user, faculty, scholar, as_actor
):
    other_scholar = make_user("s2@uni.edu", UserRole.SCHOLAR)
    create = CreateSlotUseCase(slot_repo, clock)
    book = BookSlotUseCase(
        slot_repository=slot_repo,
        user_repository=user_repo,
        meeting_provisioner=meetings,
        clock=clock,
    )
    day = date(2025, 3, 11)

    first = create.execute(
        CreateSlotInput(
            date=day,
            start_time=time(9, 0),
            end_time=time(10, 0),
            actor=as_actor(faculty),
        )
    )
    assert first.slot.status == SlotStatus.AVAILABLE

    overlapping = create.execute(
        CreateSlotInput(
            date=day,
            start_time=time(9, 30),
            end_time=time(10, 30),
            actor=as_actor(faculty),
        )
    )
    assert overlapping.error.code == SlotErrorCode.CONFLICT

    booked = book.execute(BookSlotInput(slot_id=first.slot.id, actor=as_actor(scholar)))
    assert booked.booking.slot.status == SlotStatus.BOOKED
    assert booked.booking.slot.scholar_id == scholar.id
    assert booked.booking.slot.meeting_link

    second = book.execute(
        BookSlotInput(slot_id=first.slot.id, actor=as_actor(other_scholar))
    )
    assert second.error.code == SlotErrorCode.UNAVAILABLE

    deleted = DeleteSlotUseCase(slot_repo).execute(
        DeleteSlotInput(slot_id=first.slot.id, actor=as_actor(faculty))
    )
    assert deleted.error.code == SlotErrorCode.FORBIDDEN
