"""
Use Cases Layer (Business Operations)

This package exposes entry points for business logic, organized by feature.

Structure
---------
usecases/
├── slots/   # Slot publishing, booking, listings, status changes, deletion
└── users/   # Google login, user directory, role assignment

Usage
-----
Import from subpackages for clarity:

    from slotbook.application.usecases.slots import BookSlotUseCase
    from slotbook.application.usecases.users import UpdateUserRoleUseCase

Or use the barrel exports from this module:

    from slotbook.application.usecases import BookSlotUseCase, UpdateUserRoleUseCase
"""

# Slots
from .slots import (
    BookingResult,
    BookSlotInput,
    BookSlotUseCase,
    CreateSlotInput,
    CreateSlotUseCase,
    DeleteSlotInput,
    DeleteSlotResult,
    DeleteSlotUseCase,
    ListAvailableSlotsInput,
    ListAvailableSlotsUseCase,
    ListFacultySlotsUseCase,
    ListMyBookingsUseCase,
    SlotError,
    SlotErrorCode,
    SlotListResult,
    SlotResult,
    UpdateSlotStatusInput,
    UpdateSlotStatusUseCase,
)

# Users
from .users import (
    AssignRoleByEmailInput,
    AssignRoleByEmailUseCase,
    AuthenticateWithGoogleInput,
    AuthenticateWithGoogleUseCase,
    ListFacultiesUseCase,
    ListRoleAssignmentsUseCase,
    ListUsersUseCase,
    RoleAssignmentListResult,
    RoleAssignmentResult,
    UpdateUserRoleInput,
    UpdateUserRoleUseCase,
    UserError,
    UserErrorCode,
    UserListResult,
    UserResult,
)

__all__ = [
    # Slots
    "BookingResult",
    "BookSlotInput",
    "BookSlotUseCase",
    "CreateSlotInput",
    "CreateSlotUseCase",
    "DeleteSlotInput",
    "DeleteSlotResult",
    "DeleteSlotUseCase",
    "ListAvailableSlotsInput",
    "ListAvailableSlotsUseCase",
    "ListFacultySlotsUseCase",
    "ListMyBookingsUseCase",
    "SlotError",
    "SlotErrorCode",
    "SlotListResult",
    "SlotResult",
    "UpdateSlotStatusInput",
    "UpdateSlotStatusUseCase",
    # Users
    "AssignRoleByEmailInput",
    "AssignRoleByEmailUseCase",
    "AuthenticateWithGoogleInput",
    "AuthenticateWithGoogleUseCase",
    "ListFacultiesUseCase",
    "ListRoleAssignmentsUseCase",
    "ListUsersUseCase",
    "RoleAssignmentListResult",
    "RoleAssignmentResult",
    "UpdateUserRoleInput",
    "UpdateUserRoleUseCase",
    "UserError",
    "UserErrorCode",
    "UserListResult",
    "UserResult",
]
