"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores tipados del ciclo de vida del pool

Responsabilidades:
  - Distinguir "no inicializado" de "ya inicializado" sin RuntimeError genéricos.
===============================================================================
"""


class DatabasePoolError(Exception):
    """Base de errores del pool."""


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() llamado dos veces en el mismo proceso."""


class PoolNotInitializedError(DatabasePoolError):
    """get_pool() antes de init_pool() (o después de close_pool())."""
