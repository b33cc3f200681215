"""
===============================================================================
TARJETA CRC — slotbook/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, servicios, adapters) siguiendo DIP.
  - Exponer factories para FastAPI (Depends) y para scripts.
  - Mantener singletons con caching (lru_cache).
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - slotbook.crosscutting.config.get_settings
  - slotbook.domain.repositories.* / slotbook.domain.services.* (puertos)
  - slotbook.infrastructure.* (implementaciones)
  - slotbook.application.* (casos de uso)

Reglas runtime:
  - app_env ∈ {test, testing, ci} => repositorios in-memory.
  - fake_identity => FakeIdentityVerifier; fake_meetings (o sin credenciales
    de Calendar) => FakeMeetingProvisioner / sin proveedor.

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
===============================================================================
"""

from __future__ import annotations

import random
from functools import lru_cache

from .application.role_service import RoleService
from .application.usecases import (
    AssignRoleByEmailUseCase,
    AuthenticateWithGoogleUseCase,
    BookSlotUseCase,
    CreateSlotUseCase,
    DeleteSlotUseCase,
    ListAvailableSlotsUseCase,
    ListFacultiesUseCase,
    ListFacultySlotsUseCase,
    ListMyBookingsUseCase,
    ListRoleAssignmentsUseCase,
    ListUsersUseCase,
    UpdateSlotStatusUseCase,
    UpdateUserRoleUseCase,
)
from .crosscutting.config import get_settings
from .crosscutting.logger import logger
from .domain.repositories import (
    RoleAssignmentRepository,
    SlotRepository,
    UserRepository,
)
from .domain.services import Clock, IdentityVerifier, MeetingProvisioner
from .infrastructure.repositories import (
    InMemoryRoleAssignmentRepository,
    InMemorySlotRepository,
    InMemoryUserRepository,
    PostgresRoleAssignmentRepository,
    PostgresSlotRepository,
    PostgresUserRepository,
)
from .infrastructure.services import (
    FakeIdentityVerifier,
    FakeMeetingProvisioner,
    GoogleCalendarMeetingProvisioner,
    GoogleIdentityVerifier,
    SystemClock,
)

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    return get_settings().is_test_env()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Directorio de usuarios (in-memory en test; Postgres en runtime)."""
    if _is_test_env():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_role_assignment_repository() -> RoleAssignmentRepository:
    """Role Store; in-memory comparte lock con el directorio (escritura dual)."""
    if _is_test_env():
        return InMemoryRoleAssignmentRepository(get_user_repository())
    return PostgresRoleAssignmentRepository()


@lru_cache(maxsize=1)
def get_slot_repository() -> SlotRepository:
    if _is_test_env():
        return InMemorySlotRepository(get_user_repository())
    return PostgresSlotRepository()


# =============================================================================
# Servicios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_clock() -> Clock:
    return SystemClock()


@lru_cache(maxsize=1)
def get_rng() -> random.Random:
    """Fuente aleatoria de los links de respaldo (SystemRandom en runtime)."""
    return random.SystemRandom()


@lru_cache(maxsize=1)
def get_identity_verifier() -> IdentityVerifier:
    settings = get_settings()
    if settings.fake_identity or _is_test_env():
        return FakeIdentityVerifier()
    return GoogleIdentityVerifier(
        client_id=settings.google_client_id,
        timeout_seconds=settings.meeting_provider_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_meeting_provisioner() -> MeetingProvisioner | None:
    """
    Proveedor de reuniones.

    Sin refresh token de Calendar no hay proveedor: toda reserva usa el link
    de respaldo (y se avisa una vez al construir el singleton).
    """
    settings = get_settings()
    if settings.fake_meetings or _is_test_env():
        return FakeMeetingProvisioner(host=settings.meeting_link_host)

    if not (
        settings.google_client_id
        and settings.google_client_secret
        and settings.google_refresh_token
    ):
        logger.warning("Google Calendar no configurado: se usarán links de respaldo")
        return None

    return GoogleCalendarMeetingProvisioner(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        refresh_token=settings.google_refresh_token,
        calendar_id=settings.google_calendar_id,
        timeout_seconds=settings.meeting_provider_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_role_service() -> RoleService:
    return RoleService(
        role_repository=get_role_assignment_repository(), clock=get_clock()
    )


# =============================================================================
# Casos de uso (instancias por request; baratos de construir)
# =============================================================================


def get_authenticate_with_google_use_case() -> AuthenticateWithGoogleUseCase:
    return AuthenticateWithGoogleUseCase(
        identity_verifier=get_identity_verifier(),
        role_service=get_role_service(),
    )


def get_create_slot_use_case() -> CreateSlotUseCase:
    return CreateSlotUseCase(repository=get_slot_repository(), clock=get_clock())


def get_list_available_slots_use_case() -> ListAvailableSlotsUseCase:
    return ListAvailableSlotsUseCase(
        repository=get_slot_repository(), clock=get_clock()
    )


def get_book_slot_use_case() -> BookSlotUseCase:
    settings = get_settings()
    return BookSlotUseCase(
        slot_repository=get_slot_repository(),
        user_repository=get_user_repository(),
        meeting_provisioner=get_meeting_provisioner(),
        clock=get_clock(),
        rng=get_rng(),
        meeting_link_host=settings.meeting_link_host,
        max_notes_chars=settings.max_notes_chars,
    )


def get_list_my_bookings_use_case() -> ListMyBookingsUseCase:
    return ListMyBookingsUseCase(repository=get_slot_repository())


def get_list_faculty_slots_use_case() -> ListFacultySlotsUseCase:
    return ListFacultySlotsUseCase(repository=get_slot_repository())


def get_update_slot_status_use_case() -> UpdateSlotStatusUseCase:
    return UpdateSlotStatusUseCase(repository=get_slot_repository(), clock=get_clock())


def get_delete_slot_use_case() -> DeleteSlotUseCase:
    return DeleteSlotUseCase(repository=get_slot_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(repository=get_user_repository())


def get_list_faculties_use_case() -> ListFacultiesUseCase:
    return ListFacultiesUseCase(repository=get_user_repository())


def get_update_user_role_use_case() -> UpdateUserRoleUseCase:
    return UpdateUserRoleUseCase(
        user_repository=get_user_repository(), role_service=get_role_service()
    )


def get_assign_role_by_email_use_case() -> AssignRoleByEmailUseCase:
    return AssignRoleByEmailUseCase(role_service=get_role_service())


def get_list_role_assignments_use_case() -> ListRoleAssignmentsUseCase:
    return ListRoleAssignmentsUseCase(role_service=get_role_service())


# =============================================================================
# Tests
# =============================================================================


def reset_container() -> None:
    """Descarta singletons (tests: estado in-memory limpio por test)."""
    for factory in (
        get_user_repository,
        get_role_assignment_repository,
        get_slot_repository,
        get_clock,
        get_rng,
        get_identity_verifier,
        get_meeting_provisioner,
        get_role_service,
    ):
        factory.cache_clear()
