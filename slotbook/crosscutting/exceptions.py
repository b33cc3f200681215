"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message "humana" (sin filtrar secretos)

Los resultados de negocio (conflicto de horario, slot no disponible, etc.)
NO son excepciones: viajan como errores tipados en los *Result de los use
cases. Acá viven solo fallas de infraestructura y de colaboradores externos.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  SlotbookError + subclases

Colaboradores:
  - api/exception_handlers.py (mapea a RFC7807)
  - infrastructure/* (las lanza)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class SlotbookError(Exception):
    """Base para errores internos del sistema (error_code + error_id + message)."""

    error_code: str = "SLOTBOOK_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(SlotbookError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class AuthenticationError(SlotbookError):
    """Credencial externa (ID token de Google) inválida o no verificable."""

    error_code: str = "AUTHENTICATION_ERROR"


class MeetingProvisioningError(SlotbookError):
    """El proveedor de reuniones (Calendar/Meet) falló o no respondió a tiempo."""

    error_code: str = "MEETING_PROVISIONING_ERROR"
