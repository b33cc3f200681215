"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Sesión slotbook (JWT propio) + Authorization Gate HTTP

Responsabilidades:
    - Emitir el access token de slotbook después del login con Google.
    - Validar el token de cada request y resolver al usuario en el directorio.
    - Exponer require_user y require_capability como dependencias FastAPI.

Colaboradores:
    - crosscutting.config.get_settings: secreto, TTL, cookie.
    - container.get_user_repository: directorio de usuarios.
    - identity.access_control: capacidad -> roles permitidos.

Reglas:
    - El token lleva el rol vigente al login (claims sub/email/role/typ).
    - Asignar/listar roles se evalúa contra el rol PERSISTIDO: un admin
      degradado pierde el permiso sin esperar a que expire su token.
    - Todo fallo de token es 401 con mensaje fijo; el token no se loguea.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt
from fastapi import Header, Request

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.logger import logger
from .access_control import Actor, Capability, is_allowed, requires_fresh_role
from .users import User, UserRole

JWT_ALGORITHM = "HS256"
DEFAULT_ACCESS_TOKEN_COOKIE = "access_token"
ACCESS_TOKEN_TYPE = "access"

_REQUIRED_CLAIMS = ["sub", "email", "role", "exp"]
_INVALID = "Token inválido."


@dataclass(frozen=True, slots=True)
class AuthSettings:
    jwt_secret: str
    jwt_access_ttl_minutes: int
    jwt_cookie_name: str
    jwt_cookie_secure: bool


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """Lo que slotbook confía de un access token ya verificado."""

    user_id: str
    email: str
    role: UserRole


def get_auth_settings() -> AuthSettings:
    s = get_settings()
    return AuthSettings(
        jwt_secret=s.jwt_secret,
        jwt_access_ttl_minutes=s.jwt_access_ttl_minutes,
        jwt_cookie_name=s.jwt_cookie_name,
        jwt_cookie_secure=s.jwt_cookie_secure,
    )


def create_access_token(
    user: User, settings: AuthSettings | None = None
) -> tuple[str, int]:
    """Firma el token de sesión de `user`. Retorna (token, expires_in_seconds)."""
    auth = settings or get_auth_settings()
    issued_at = datetime.now(timezone.utc)
    expires_in = auth.jwt_access_ttl_minutes * 60

    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(seconds=expires_in)).timestamp()),
        "typ": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, auth.jwt_secret, algorithm=JWT_ALGORITHM), expires_in


def decode_access_token(
    token: str, settings: AuthSettings | None = None
) -> TokenPayload:
    auth = settings or get_auth_settings()
    try:
        claims = jwt.decode(
            token,
            auth.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expirado.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized(_INVALID) from exc

    if claims.get("typ", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
        raise unauthorized("Tipo de token inválido.")
    if not all(claims[name] for name in _REQUIRED_CLAIMS):
        raise unauthorized(_INVALID)
    try:
        role = UserRole(str(claims["role"]))
    except ValueError as exc:
        raise unauthorized(_INVALID) from exc

    return TokenPayload(
        user_id=str(claims["sub"]), email=str(claims["email"]), role=role
    )


def _directory_user(payload: TokenPayload) -> User:
    try:
        user_id = UUID(payload.user_id)
    except ValueError as exc:
        raise unauthorized(_INVALID) from exc

    # R: import diferido; container importa este módulo indirectamente vía api.
    from ..container import get_user_repository

    user = get_user_repository().get_user_by_id(user_id)
    if user is None:
        raise unauthorized(_INVALID)
    return user


def _request_token(request: Request, authorization: str | None) -> str:
    scheme, _, credentials = (authorization or "").strip().partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    cookie_name = get_auth_settings().jwt_cookie_name.strip()
    token = request.cookies.get(cookie_name or DEFAULT_ACCESS_TOKEN_COOKIE)
    if not token:
        raise unauthorized("Falta token Bearer.")
    return token


def _authenticate(
    request: Request, authorization: str | None
) -> tuple[TokenPayload, User]:
    payload = decode_access_token(_request_token(request, authorization))
    user = _directory_user(payload)
    request.state.user = user
    return payload, user


# R: dependencias sync: el directorio es I/O bloqueante (threadpool de FastAPI).


def require_user() -> Callable:
    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> User:
        return _authenticate(request, authorization)[1]

    return dependency


def require_capability(capability: Capability) -> Callable:
    """
    Authorization Gate: devuelve el Actor con el que corre el caso de uso.
    """

    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> Actor:
        payload, user = _authenticate(request, authorization)
        role = user.role if requires_fresh_role(capability) else payload.role

        if not is_allowed(role, capability):
            logger.info(
                "acceso denegado",
                extra={"capability": capability.value, "role": role.value},
            )
            raise forbidden("Rol insuficiente.")

        return Actor(user_id=user.id, email=user.email, role=role)

    return dependency
