# infrastructure/repositories/__init__.py
"""
============================================================
TARJETA CRC — infrastructure/repositories/__init__.py
============================================================
Module: infrastructure.repositories (Public Export Surface)

Responsibilities:
  - Exponer una API pública y estable de repositorios de infraestructura.
  - Mantener un orden lógico (Postgres primero, luego InMemory).

Policy:
  - Solo re-exporta símbolos; no debe tener side effects.
============================================================
"""

# ------------------------------------------------------------
# PostgreSQL implementations (infra real)
# ------------------------------------------------------------
from .postgres import (
    PostgresRoleAssignmentRepository,
    PostgresSlotRepository,
    PostgresUserRepository,
)

# ------------------------------------------------------------
# In-memory implementations (tests / local dev)
# ------------------------------------------------------------
from .in_memory import (
    InMemoryRoleAssignmentRepository,
    InMemorySlotRepository,
    InMemoryUserRepository,
)

__all__ = [
    # Postgres
    "PostgresUserRepository",
    "PostgresRoleAssignmentRepository",
    "PostgresSlotRepository",
    # InMemory
    "InMemoryUserRepository",
    "InMemoryRoleAssignmentRepository",
    "InMemorySlotRepository",
]
