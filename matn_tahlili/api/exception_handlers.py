"""
===============================================================================
TARJETA CRC — matn_tahlili/api/exception_handlers.py (Manejo Centralizado)
===============================================================================

Responsabilidades:
  - Traducir excepciones internas (TextCheckError y derivadas) a JSON
    {error, code, error_id, request_id} con el status HTTP correcto.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Patrones aplicados:
  - Exception Mapping (Presentation Layer): tabla clase -> (ErrorCode, status).
  - Fail-safe: cualquier excepción no tipada -> INTERNAL_ERROR (con logging).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: TextCheckError y derivadas
  - infrastructure.parsers.errors: DocumentParsingError
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    internal_error,
    validation_error,
)
from ..crosscutting.exceptions import (
    EmptyExportError,
    EmptyInputError,
    OracleError,
    OversizedInputError,
    TextCheckError,
    UnsupportedFormatError,
)
from ..crosscutting.logger import logger
from ..infrastructure.parsers.errors import DocumentParsingError

# R: Orden irrelevante: se resuelve por MRO de la excepción.
_ERROR_MAP: dict[type[TextCheckError], tuple[ErrorCode, int]] = {
    EmptyInputError: (ErrorCode.EMPTY_INPUT, 400),
    UnsupportedFormatError: (ErrorCode.UNSUPPORTED_FORMAT, 400),
    DocumentParsingError: (ErrorCode.INVALID_DOCUMENT, 400),
    EmptyExportError: (ErrorCode.EMPTY_EXPORT, 400),
    OversizedInputError: (ErrorCode.PAYLOAD_TOO_LARGE, 413),
    OracleError: (ErrorCode.ORACLE_ERROR, 500),
}


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def resolve_error(exc: TextCheckError) -> tuple[ErrorCode, int]:
    for cls in type(exc).__mro__:
        if cls in _ERROR_MAP:
            return _ERROR_MAP[cls]
    return ErrorCode.INTERNAL_ERROR, 500


async def text_check_error_handler(
    request: Request, exc: TextCheckError
) -> JSONResponse:
    code, status_code = resolve_error(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Error de servicio",
        exc_info=exc.original_error is not None and status_code >= 500,
        extra={
            "code": code.value,
            "status_code": status_code,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "chunk_index": getattr(exc, "chunk_index", None),
        },
    )

    detail = exc.message if code != ErrorCode.INTERNAL_ERROR else "Server xatosi"
    app_exc = AppHTTPException(
        status_code=status_code, code=code, detail=detail, error_id=exc.error_id
    )
    return await app_exception_handler(request, app_exc)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Errores de validación del request -> 400 (no 422)."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")

    logger.warning(
        "Request inválido",
        extra={"validation_errors": len(errors), "location": location},
    )

    detail = "So'rov noto'g'ri"
    if location:
        detail = f"{detail}: {location}"
    return await app_exception_handler(request, validation_error(detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica en producción.
    """
    request_id = _request_id_from(request)

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"error": str(exc)},
    )

    detail = "Server xatosi" if get_settings().is_production() else str(exc)
    app_exc = internal_error(detail or "Server xatosi")
    # ServerErrorMiddleware corre fuera de RequestContextMiddleware.
    if request_id:
        app_exc.headers = {"X-Request-Id": request_id}
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(TextCheckError, text_check_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers", "resolve_error"]
