# =============================================================================
# FILE: application/bootstrap_admins.py
# =============================================================================
"""
===============================================================================
TASK: Bootstrap Admins (startup seed)
===============================================================================

Qué es:
    Pre-asigna el rol admin a los emails de BOOTSTRAP_ADMIN_EMAILS al arrancar,
    para que un deploy nuevo pueda loguear a su primer admin.

Patrones:
    - Task orchestration (seed)
    - Dependency Injection (RoleService)
    - Idempotencia (re-asignar admin a un admin no cambia nada)

CRC:
    Component: ensure_bootstrap_admins
    Responsibilities:
      - Saltear emails que ya son admin
      - Asignar admin vía RoleService (escritura dual)
    Collaborators:
      - RoleService
      - Settings.get_bootstrap_admin_emails
===============================================================================
"""

from __future__ import annotations

from typing import Iterable

from ..crosscutting.logger import logger
from ..identity.users import UserRole, normalize_email
from .role_service import RoleService


def ensure_bootstrap_admins(
    role_service: RoleService, emails: Iterable[str]
) -> list[str]:
    """Asigna admin a cada email; devuelve los que cambiaron."""
    promoted: list[str] = []
    for raw in emails:
        email = normalize_email(raw)
        if not email:
            continue
        if role_service.get_role(email) == UserRole.ADMIN:
            continue
        role_service.assign_role(email, UserRole.ADMIN)
        promoted.append(email)

    if promoted:
        logger.info("Bootstrap admins: roles asignados", extra={"count": len(promoted)})
    return promoted
