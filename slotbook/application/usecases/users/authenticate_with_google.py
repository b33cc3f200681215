"""
===============================================================================
USE CASE: Authenticate With Google
===============================================================================

Business Goal:
    Convertir un ID token de Google en un usuario del directorio con el rol
    autoritativo del Role Store.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    AuthenticateWithGoogleUseCase

Responsibilities:
    - Verificar la credencial con el IdentityVerifier.
    - Crear el usuario o refrescar nombre, foto, google_id, rol y
      last_login_at (el rol del directorio se re-sincroniza en cada login).
    - El rol sale del Role Store (scholar si no hay asignación) y se copia a
      users.role en la misma transacción: un cambio de rol concurrente no se
      pisa con un valor viejo.

Collaborators:
    - IdentityVerifier (Google / fake)
    - RoleService.record_login

Notas:
    - La emisión del JWT queda en la capa HTTP (identity.auth_users).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.exceptions import AuthenticationError
from ....crosscutting.logger import logger
from ....domain.services import IdentityVerifier
from ...role_service import RoleService
from .user_results import UserError, UserErrorCode, UserResult


@dataclass(frozen=True)
class AuthenticateWithGoogleInput:
    credential: str


class AuthenticateWithGoogleUseCase:
    def __init__(
        self,
        *,
        identity_verifier: IdentityVerifier,
        role_service: RoleService,
    ) -> None:
        self._verifier = identity_verifier
        self._roles = role_service

    def execute(self, input_data: AuthenticateWithGoogleInput) -> UserResult:
        credential = (input_data.credential or "").strip()
        if not credential:
            return UserResult(
                error=UserError(
                    code=UserErrorCode.VALIDATION_ERROR, message="Token is required"
                )
            )

        try:
            identity = self._verifier.verify(credential)
        except AuthenticationError as exc:
            logger.warning("login rechazado", extra={"reason": exc.message})
            return UserResult(
                error=UserError(
                    code=UserErrorCode.UNAUTHORIZED, message="Authentication failed"
                )
            )

        user = self._roles.record_login(identity)

        logger.info(
            "login de usuario",
            extra={"user_id": str(user.id), "role": user.role.value},
        )
        return UserResult(user=user)
