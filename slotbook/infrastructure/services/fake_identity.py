"""
Fake IdentityVerifier (tests / local dev / E2E).

Acepta credenciales con forma `fake:<email>` o `fake:<email>:<name>` y
rechaza cualquier otra cosa con AuthenticationError.
"""

from __future__ import annotations

import hashlib

from ...crosscutting.exceptions import AuthenticationError
from ...domain.value_objects import VerifiedIdentity

FAKE_PREFIX = "fake:"


class FakeIdentityVerifier:
    def verify(self, credential: str) -> VerifiedIdentity:
        if not credential or not credential.startswith(FAKE_PREFIX):
            raise AuthenticationError("Invalid fake credential")

        email, _, name = credential[len(FAKE_PREFIX) :].partition(":")
        email = email.strip()
        if "@" not in email:
            raise AuthenticationError("Invalid fake credential")

        # R: subject estable por email (imita el `sub` de Google).
        subject = hashlib.sha256(email.encode("utf-8")).hexdigest()[:21]
        return VerifiedIdentity(
            email=email,
            name=name.strip() or email.split("@", 1)[0],
            subject=subject,
        )
