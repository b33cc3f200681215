"""
============================================================
TARJETA CRC — infrastructure/services/google_identity.py
============================================================
Class: GoogleIdentityVerifier

Responsibilities:
  - Implementar IdentityVerifier para ID tokens de Google Sign-In.
  - Validar el token contra el endpoint tokeninfo de Google.
  - Verificar audiencia (aud == google_client_id) y email verificado.
  - Devolver VerifiedIdentity (email, name, subject, picture).

Collaborators:
  - domain.services.IdentityVerifier / domain.value_objects.VerifiedIdentity
  - httpx (HTTP client, timeout explícito)
  - services.retry (reintentos de fallas transitorias)
============================================================
"""

from __future__ import annotations

import httpx

from ...crosscutting.exceptions import AuthenticationError
from ...crosscutting.logger import logger
from ...domain.value_objects import VerifiedIdentity
from .retry import create_retry_decorator

_GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
_VALID_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})


class GoogleIdentityVerifier:
    """Implementación de IdentityVerifier para Google."""

    def __init__(self, *, client_id: str, timeout_seconds: float = 10.0):
        if not client_id:
            raise ValueError("GOOGLE_CLIENT_ID is required")
        self._client_id = client_id
        self._timeout = timeout_seconds
        self._fetch_claims = create_retry_decorator()(self._request_tokeninfo)

    def _request_tokeninfo(self, credential: str) -> dict:
        resp = httpx.get(
            _GOOGLE_TOKENINFO_URL,
            params={"id_token": credential},
            timeout=self._timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def verify(self, credential: str) -> VerifiedIdentity:
        try:
            claims = self._fetch_claims(credential)
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "google id token rejected",
                extra={"status": exc.response.status_code},
            )
            raise AuthenticationError("Invalid Google credential") from exc
        except httpx.HTTPError as exc:
            logger.error("google tokeninfo unreachable", extra={"error": str(exc)})
            raise AuthenticationError(
                "Google verification unavailable", original_error=exc
            ) from exc

        if claims.get("aud") != self._client_id:
            raise AuthenticationError("Google credential audience mismatch")
        if claims.get("iss") not in _VALID_ISSUERS:
            raise AuthenticationError("Google credential issuer mismatch")
        if str(claims.get("email_verified", "")).lower() != "true":
            raise AuthenticationError("Google email is not verified")

        email = (claims.get("email") or "").strip()
        if not email:
            raise AuthenticationError("Google credential has no email")

        return VerifiedIdentity(
            email=email,
            name=claims.get("name") or email,
            subject=claims.get("sub") or "",
            picture=claims.get("picture"),
        )
