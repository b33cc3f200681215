"""
===============================================================================
TARJETA CRC — slotbook/api/exception_handlers.py (Excepciones -> RFC7807)
===============================================================================

Responsabilidades:
  - Registrar los handlers de la app: AppHTTPException, validación de
    request, errores internos tipados y el fallback para lo no tipado.
  - Mapear cada SlotbookError a status + ErrorCode:
      DatabaseError         -> 503 DATABASE_ERROR
      AuthenticationError   -> 401 UNAUTHORIZED
      SlotbookError (resto) -> 500 INTERNAL_ERROR
  - Correlacionar por request_id y error_id en log y respuesta.

Reglas:
  - Los resultados de negocio NO llegan acá: los routers los traducen con
    interfaces/api/http/error_mapping.py.
  - En producción el detail de errores internos es genérico (el mensaje de
    un DatabaseError incluye la query que falló).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: SlotbookError y subclases
  - crosscutting.config.get_settings (nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import (
    AuthenticationError,
    DatabaseError,
    SlotbookError,
)
from ..crosscutting.logger import logger

GENERIC_DETAIL = "Error interno."

Handler = Callable[[Request, Exception], Awaitable[JSONResponse]]

# R: orden de registro = de más específico a más general.
_SERVICE_ERRORS: tuple[tuple[type[SlotbookError], ErrorCode, int], ...] = (
    (DatabaseError, ErrorCode.DATABASE_ERROR, 503),
    (AuthenticationError, ErrorCode.UNAUTHORIZED, 401),
    (SlotbookError, ErrorCode.INTERNAL_ERROR, 500),
)


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _public_detail(message: str) -> str:
    return GENERIC_DETAIL if get_settings().is_production() else message


def _service_error_handler(code: ErrorCode, status_code: int) -> Handler:
    async def handler(request: Request, exc: SlotbookError) -> JSONResponse:
        request_id = _request_id_from(request)
        logger.error(
            "Error de servicio",
            extra={
                "code": code.value,
                "error_code": exc.error_code,
                "error_id": exc.error_id,
                "request_id": request_id,
            },
        )
        detail = exc.message if status_code < 500 else _public_detail(exc.message)
        app_exc = AppHTTPException(
            status_code=status_code,
            code=code,
            detail=detail,
            errors=[{"error_id": exc.error_id, "request_id": request_id}],
        )
        return await app_exception_handler(request, app_exc)

    return handler


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Errores de validación de FastAPI/pydantic -> 422 RFC7807."""
    errors = [
        {
            "loc": ".".join(str(part) for part in err.get("loc", ())),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    app_exc = AppHTTPException(
        status_code=422,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Request inválido.",
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Excepciones no tipadas: stacktrace al log, respuesta 500 genérica."""
    request_id = _request_id_from(request)
    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=_public_detail(str(exc)),
        errors=[{"request_id": request_id}],
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    for exc_type, code, status_code in _SERVICE_ERRORS:
        app.add_exception_handler(exc_type, _service_error_handler(code, status_code))
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers", "GENERIC_DETAIL"]
