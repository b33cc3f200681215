"""
Name: Role Assignment Script

Responsibilities:
  - Assign a role to an email from the command line (idempotent)
  - Go through RoleService so user_roles and users.role stay in sync
  - Work before the user's first login (role applied on next login)

Usage:
  DATABASE_URL=postgresql://... python scripts/assign_role.py --email a@x.com --role admin
"""

from __future__ import annotations

import argparse
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from slotbook.application.role_service import RoleService  # noqa: E402
from slotbook.identity.users import UserRole, normalize_email  # noqa: E402
from slotbook.infrastructure.db.pool import close_pool, init_pool  # noqa: E402
from slotbook.infrastructure.repositories import (  # noqa: E402
    PostgresRoleAssignmentRepository,
)
from slotbook.infrastructure.services import SystemClock  # noqa: E402


def _require_database_url() -> str:
    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        raise SystemExit("DATABASE_URL is required to assign a role.")
    return db_url


def _parse_args() -> argparse.Namespace:
    argv = sys.argv[1:]
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(
        description="Assign a role to an email (idempotent)."
    )
    parser.add_argument("--email", required=True, help="User email (role key)")
    parser.add_argument(
        "--role",
        default=UserRole.ADMIN.value,
        choices=[role.value for role in UserRole],
        help="Role to assign (default: admin)",
    )
    return parser.parse_args(argv)


def main() -> None:
    args = _parse_args()
    email = normalize_email(args.email)
    if not email:
        raise SystemExit("Email is required.")

    init_pool(_require_database_url(), min_size=1, max_size=1)
    try:
        service = RoleService(
            role_repository=PostgresRoleAssignmentRepository(),
            clock=SystemClock(),
        )
        change = service.assign_role(email, UserRole(args.role))
    finally:
        close_pool()

    when = "now" if change.applied_immediately else "on next login"
    print(f"Assigned role={change.assignment.role.value} email={email} ({when})")


if __name__ == "__main__":
    main()
