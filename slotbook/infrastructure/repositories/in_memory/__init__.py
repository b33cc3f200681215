"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .role_assignment import InMemoryRoleAssignmentRepository
from .slot import InMemorySlotRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryUserRepository",
    "InMemoryRoleAssignmentRepository",
    "InMemorySlotRepository",
]
