"""
===============================================================================
TARJETA CRC — slotbook/api/versioning.py (Prefijos de versión)
===============================================================================

Responsabilidades:
  - Montar el router de negocio (slots/users) bajo /v1.
  - Exponer el alias /api/v1 para clientes que esperan el prefijo /api.

Patrones aplicados:
  - Router Composition: reutiliza el mismo router bajo diferentes prefijos.

Colaboradores:
  - interfaces.api.http.router.router (slots/users)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, FastAPI

from ..interfaces.api.http.router import router as business_router

API_VERSION_PREFIX = "/v1"
ALIAS_PREFIXES: tuple[str, ...] = ("/api",)


def include_versioned_routes(app: FastAPI, router: APIRouter = business_router) -> None:
    """Incluye /v1/... y cada alias (/api/v1/...) apuntando al mismo router."""
    app.include_router(router, prefix=API_VERSION_PREFIX)

    for alias in ALIAS_PREFIXES:
        alias_router = APIRouter(prefix=alias)
        alias_router.include_router(router, prefix=API_VERSION_PREFIX)
        app.include_router(alias_router)


__all__ = ["include_versioned_routes", "API_VERSION_PREFIX"]
