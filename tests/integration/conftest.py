"""
Name: Integration Test DB Setup

Responsibilities:
  - Ensure database schema exists before integration tests run
  - Run Alembic migrations once per test session
  - Truncate tables between tests

Notes:
  - Only runs when RUN_INTEGRATION=1
  - Uses DATABASE_URL from environment (see alembic/env.py)
  - Unit tests keep APP_ENV=test; integration tests build Postgres
    repositories explicitly over the global pool
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from psycopg import connect

from slotbook.infrastructure.db.pool import close_pool, get_pool, init_pool

DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")
DB_PORT = os.getenv("POSTGRES_HOST_PORT", "5432")
DB_NAME = os.getenv("POSTGRES_DB", "slotbook")
DEFAULT_DATABASE_URL = (
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

RUN_INTEGRATION = os.getenv("RUN_INTEGRATION") == "1"


def _database_url() -> str:
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def _btree_gist_available(url: str) -> None:
    with connect(url, autocommit=True, connect_timeout=2) as conn:
        row = conn.execute(
            "SELECT 1 FROM pg_available_extensions WHERE name = 'btree_gist'"
        ).fetchone()
    if row is None:
        raise RuntimeError(
            "btree_gist is required for integration tests (slots_no_overlap)."
        )


def pytest_collection_modifyitems(config, items) -> None:
    if RUN_INTEGRATION:
        return
    skip = pytest.mark.skip(reason="set RUN_INTEGRATION=1 to run against Postgres")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def apply_migrations() -> None:
    """Run Alembic migrations for integration tests."""
    database_url = _database_url()
    _btree_gist_available(database_url)
    os.environ["DATABASE_URL"] = database_url

    root_dir = Path(__file__).resolve().parents[2]
    config = Config(str(root_dir / "alembic.ini"))
    config.set_main_option("script_location", str(root_dir / "alembic"))

    command.upgrade(config, "head")


@pytest.fixture(scope="session")
def db_pool(apply_migrations):
    pool = init_pool(database_url=_database_url(), min_size=1, max_size=5)
    yield pool
    close_pool()


@pytest.fixture
def clean_db(db_pool):
    with get_pool().connection() as conn:
        conn.execute("TRUNCATE slots, user_roles, users CASCADE")
    yield
