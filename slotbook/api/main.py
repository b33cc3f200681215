"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount auth routes (/auth) and business routes under /v1 (+ /api/v1 alias)
  - Expose health and readiness endpoints
  - Pre-assign bootstrap admin roles at startup

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - versioning.include_versioned_routes: slots/users endpoints
  - application.bootstrap_admins: first-admin provisioning

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - Test environments run on in-memory repositories (no DB pool)

Notes:
  - Middleware order matters: RequestContext → CORS → routes
  - /healthz and /readyz follow the Kubernetes health check convention
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..application.bootstrap_admins import ensure_bootstrap_admins
from ..container import get_role_service, get_slot_repository
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import RequestContextMiddleware
from ..infrastructure.db.pool import close_pool, init_pool
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers
from .versioning import include_versioned_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and initializes pool."""
    settings = get_settings()
    uses_database = not settings.is_test_env()

    # Initialize DB pool (must happen before any repository usage)
    if uses_database:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        try:
            ensure_bootstrap_admins(
                get_role_service(), settings.get_bootstrap_admin_emails()
            )
        except Exception as e:
            logger.error(f"Startup failed: {e}")
            raise

        logger.info(
            "Slotbook API starting up",
            extra={
                "app_env": settings.app_env,
                "fake_identity": settings.fake_identity,
                "fake_meetings": settings.fake_meetings,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )

        yield

    finally:
        if uses_database:
            close_pool()
        logger.info("Slotbook API shutting down")


# R: Get settings for CORS configuration (safe at module level after env is loaded)
def _get_allowed_origins() -> list[str]:
    """Get CORS origins from settings, with fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except Exception:
        # Fallback for tests that don't set env vars
        return ["http://localhost:3000"]


# R: Create FastAPI application instance with API metadata
app = FastAPI(
    title="Slotbook API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "auth",
            "description": "Google sign-in and session (JWT)",
        },
        {
            "name": "slots",
            "description": "Availability slots and bookings",
        },
        {
            "name": "users",
            "description": "User directory and role administration",
        },
    ],
)


# R: Middleware order (bottom = first to execute):
# 1. CORSMiddleware - handles preflight
# 2. RequestContextMiddleware - sets request_id

# R: Add request context middleware
app.add_middleware(RequestContextMiddleware)

# R: Read CORS allow_credentials with safe fallback (avoid import-time env failures)
try:
    _cors_allow_credentials = get_settings().cors_allow_credentials
except Exception:
    _cors_allow_credentials = False
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=_cors_allow_credentials,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "X-Request-Id",
    ],
)

# R: Register auth routes (no version prefix)
app.include_router(auth_router)

# R: Register business routes under /v1 and the /api/v1 alias
include_versioned_routes(app)

# R: Register exception handlers for structured error responses
register_exception_handlers(app)


def _db_status() -> str:
    try:
        if get_slot_repository().ping():
            return "connected"
    except Exception as e:
        logger.warning("Health check: DB unavailable", extra={"error": str(e)})
    return "disconnected"


# R: Health check endpoint for monitoring/orchestration (Kubernetes, Docker)
@app.get("/healthz")
def healthz(request: Request):
    """
    R: Health check that verifies the database.

    Returns:
        ok: True if the database answers
        db: "connected" or "disconnected"
        request_id: Correlation ID for this request
    """
    db_status = _db_status()
    return {
        "ok": db_status == "connected",
        "db": db_status,
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/readyz")
def readyz(request: Request):
    """R: Readiness check for core dependencies only."""
    db_status = _db_status()
    return {
        "ok": db_status == "connected",
        "db": db_status,
        "request_id": getattr(request.state, "request_id", None),
    }
