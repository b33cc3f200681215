"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a HTTP Exceptions RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener el dominio libre de HTTP.

Reglas:
  - NUNCA se propagan excepciones de infraestructura hacia la API.
  - Los use cases devuelven errores tipados (code + message).
  - La API traduce a RFC7807 (crosscutting.error_responses).
  - UNAVAILABLE (slot ya reservado o inexistente) -> 404 SLOT_UNAVAILABLE.
  - CONFLICT de slots (solapamiento / transición ilegal) -> 409 SLOT_CONFLICT.

Colaboradores:
  - application.usecases.* (SlotErrorCode, UserErrorCode)
  - crosscutting.error_responses (validation_error, forbidden, etc.)
===============================================================================
"""

from __future__ import annotations

from slotbook.application.usecases import (
    SlotError,
    SlotErrorCode,
    UserError,
    UserErrorCode,
)
from slotbook.crosscutting.error_responses import (
    forbidden,
    not_found,
    slot_conflict,
    slot_unavailable,
    unauthorized,
    validation_error,
)


def raise_slot_error(error: SlotError) -> None:
    """Traduce SlotError -> HTTP."""
    if error.code == SlotErrorCode.UNAVAILABLE:
        raise slot_unavailable(error.message)
    if error.code == SlotErrorCode.CONFLICT:
        raise slot_conflict(error.message)
    if error.code == SlotErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == SlotErrorCode.NOT_FOUND:
        raise not_found(error.message)
    # Fallback seguro: si aparece un código nuevo, lo tratamos como 422
    raise validation_error(error.message)


def raise_user_error(error: UserError) -> None:
    """Traduce UserError -> HTTP."""
    if error.code == UserErrorCode.UNAUTHORIZED:
        raise unauthorized(error.message)
    if error.code == UserErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == UserErrorCode.NOT_FOUND:
        raise not_found(error.message)
    raise validation_error(error.message)


__all__ = ["raise_slot_error", "raise_user_error"]
