"""
PostgreSQL Repository Implementations.

Raw parameterized SQL over a psycopg_pool connection pool.
"""

from .role_assignment import PostgresRoleAssignmentRepository
from .slot import PostgresSlotRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresRoleAssignmentRepository",
    "PostgresSlotRepository",
]
