"""
===============================================================================
TARJETA CRC — slotbook/api/auth_routes.py (Autenticación de Usuarios)
===============================================================================

Responsabilidades:
  - Exponer login con Google (ID token -> usuario + JWT propio).
  - Exponer logout (borra cookie) y me (usuario autenticado).
  - Gestionar cookie httpOnly de forma consistente.

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP ↔ caso de uso.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - application.usecases.AuthenticateWithGoogleUseCase
  - identity.auth_users: create_access_token, require_user
  - interfaces.api.http.error_mapping: UserError -> RFC7807
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from ..application.usecases import (
    AuthenticateWithGoogleInput,
    AuthenticateWithGoogleUseCase,
)
from ..container import get_authenticate_with_google_use_case
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, internal_error
from ..identity.auth_users import DEFAULT_ACCESS_TOKEN_COOKIE as ACCESS_TOKEN_COOKIE
from ..identity.auth_users import (
    create_access_token,
    get_auth_settings,
    require_user,
)
from ..identity.users import User
from ..interfaces.api.http.error_mapping import raise_user_error
from ..interfaces.api.http.routers.users import to_user_res
from ..interfaces.api.http.schemas.users import UserRes

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class GoogleLoginRequest(BaseModel):
    # Vacío se valida en el caso de uso ("Token is required").
    credential: str = Field(default="", max_length=8192)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRes


class MeResponse(BaseModel):
    user: UserRes


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _set_auth_cookie(response: Response, token: str, expires_in: int) -> None:
    """Setea cookie httpOnly de acceso."""
    settings = get_auth_settings()
    cookie_name = settings.jwt_cookie_name or ACCESS_TOKEN_COOKIE
    response.set_cookie(
        key=cookie_name,
        value=token,
        httponly=True,
        secure=settings.jwt_cookie_secure,
        samesite="lax",
        max_age=expires_in,
        path="/",
    )


def _clear_auth_cookie(response: Response) -> None:
    settings = get_auth_settings()
    cookie_name = settings.jwt_cookie_name or ACCESS_TOKEN_COOKIE
    response.delete_cookie(
        key=cookie_name,
        path="/",
        samesite="lax",
        secure=settings.jwt_cookie_secure,
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("/auth/google", response_model=LoginResponse, tags=["auth"])
def login_with_google(
    req: GoogleLoginRequest,
    response: Response,
    use_case: AuthenticateWithGoogleUseCase = Depends(
        get_authenticate_with_google_use_case
    ),
):
    """
    Verifica el ID token de Google y devuelve un JWT propio.

    - El rol sale del Role Store (scholar por defecto en el primer login).
    - También setea cookie httpOnly.
    """
    result = use_case.execute(AuthenticateWithGoogleInput(credential=req.credential))
    if result.error is not None:
        raise_user_error(result.error)
    if result.user is None:
        raise internal_error("Login sin usuario")

    token, expires_in = create_access_token(result.user)
    _set_auth_cookie(response, token, expires_in)

    return LoginResponse(
        access_token=token,
        expires_in=expires_in,
        user=to_user_res(result.user),
    )


@router.post("/auth/logout", tags=["auth"])
def logout(response: Response):
    """Cierra sesión. Idempotente: siempre borra la cookie."""
    _clear_auth_cookie(response)
    return {"ok": True}


@router.get("/auth/me", response_model=MeResponse, tags=["auth"])
def me(user: User = Depends(require_user())):
    """Devuelve el usuario autenticado (JWT o cookie), leído del directorio."""
    return MeResponse(user=to_user_res(user))


__all__ = ["router"]
