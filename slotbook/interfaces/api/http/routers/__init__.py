"""
===============================================================================
TARJETA CRC — slotbook/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer routers segmentados por bounded context para ser incluidos por el
      router principal.

Collaborators:
    - routers.slots
    - routers.users

Notas:
    - Este archivo NO define endpoints. Solo re-exporta routers.
===============================================================================
"""

from .slots import router as slots_router
from .users import router as users_router

__all__ = [
    "slots_router",
    "users_router",
]
