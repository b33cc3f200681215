"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (APP_ENV=test, no .env file)
  - Provide a fixed clock and a seeded random source
  - Provide in-memory repositories, services and user/actor factories
  - Reset the DI container between tests

Collaborators:
  - pytest: Test framework
  - slotbook.container: lru_cache factories (reset per test)
  - slotbook.infrastructure.repositories.in_memory: stores under test

Notes:
  - Fixtures are auto-discovered by pytest
  - Use @pytest.fixture(scope="function") for per-test isolation
"""

import os
import random
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")

from slotbook.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from slotbook.application.role_service import RoleService  # noqa: E402
from slotbook.container import reset_container  # noqa: E402
from slotbook.crosscutting.config import get_settings  # noqa: E402
from slotbook.identity.access_control import Actor  # noqa: E402
from slotbook.identity.users import User, UserRole  # noqa: E402
from slotbook.infrastructure.repositories import (  # noqa: E402
    InMemoryRoleAssignmentRepository,
    InMemorySlotRepository,
    InMemoryUserRepository,
)
from slotbook.infrastructure.services import FakeMeetingProvisioner  # noqa: E402

FIXED_NOW = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)
TODAY = FIXED_NOW.date()
TOMORROW = TODAY + timedelta(days=1)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests against PostgreSQL (RUN_INTEGRATION=1)"
    )


class FixedClock:
    """Clock determinista; `advance` mueve el tiempo hacia adelante."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


# ============================================================================
# Environment isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _isolated_container():
    """R: Each test starts with fresh settings and container singletons."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


# ============================================================================
# Services
# ============================================================================


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def meetings() -> FakeMeetingProvisioner:
    return FakeMeetingProvisioner()


# ============================================================================
# Repositories
# ============================================================================


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def role_repo(user_repo: InMemoryUserRepository) -> InMemoryRoleAssignmentRepository:
    return InMemoryRoleAssignmentRepository(user_repo)


@pytest.fixture
def slot_repo(user_repo: InMemoryUserRepository) -> InMemorySlotRepository:
    return InMemorySlotRepository(user_repo)


@pytest.fixture
def role_service(
    role_repo: InMemoryRoleAssignmentRepository, clock: FixedClock
) -> RoleService:
    return RoleService(role_repository=role_repo, clock=clock)


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def make_user(user_repo: InMemoryUserRepository):
    """R: Seed a user in the directory and return it."""

    def _make(
        email: str,
        role: UserRole = UserRole.SCHOLAR,
        name: str | None = None,
    ) -> User:
        user = User(
            id=uuid4(),
            email=email,
            name=name or email.split("@", 1)[0].title(),
            role=role,
            created_at=FIXED_NOW,
            last_login_at=FIXED_NOW,
        )
        return user_repo.add_user(user)

    return _make


@pytest.fixture
def as_actor():
    """R: Build the Actor a use case receives for a seeded user."""

    def _as_actor(user: User) -> Actor:
        return Actor(user_id=user.id, email=user.email, role=user.role)

    return _as_actor


@pytest.fixture
def faculty(make_user) -> User:
    return make_user("faculty@uni.edu", UserRole.FACULTY, name="Dr. Faculty")


@pytest.fixture
def scholar(make_user) -> User:
    return make_user("scholar@uni.edu", UserRole.SCHOLAR, name="Sam Scholar")


@pytest.fixture
def admin(make_user) -> User:
    return make_user("admin@uni.edu", UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
def tomorrow() -> date:
    return TOMORROW
