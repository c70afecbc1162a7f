# matn_tahlili/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Respuestas de error estándar
===============================================================================

Objetivo
--------
Uniformar TODOS los errores HTTP para que:
- La UI muestre siempre `error` (mensaje corto y accionable)
- El frontend pueda ramificar por `code`
- El backend pueda correlacionar por request_id / error_id

Formato
-------
    {"error": "...", "code": "EMPTY_INPUT", "error_id": "...", "request_id": "..."}

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + handlers

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode)
  - Construir payload (ErrorBody)
  - Proveer factories de errores frecuentes
  - Proveer handler (FastAPI) para devolver JSON

Colaboradores:
  - crosscutting/middleware.py (request_id, 413 temprano)
  - api/exception_handlers.py (mapea errores internos)
===============================================================================
"""

from __future__ import annotations

from enum import Enum

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EMPTY_INPUT = "EMPTY_INPUT"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    INVALID_DOCUMENT = "INVALID_DOCUMENT"
    EMPTY_EXPORT = "EMPTY_EXPORT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    ORACLE_ERROR = "ORACLE_ERROR"


class ErrorBody(BaseModel):
    """Payload de error (el campo `error` es el único que la UI necesita)."""

    error: str
    code: ErrorCode
    error_id: str | None = None
    request_id: str | None = None


OPENAPI_ERROR_RESPONSES = {
    "400": {"description": "Bad Request", "model": ErrorBody},
    "413": {"description": "Payload Too Large", "model": ErrorBody},
    "500": {"description": "Internal / Oracle Error", "model": ErrorBody},
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode estable y error_id opcional."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        error_id: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.error_id = error_id


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def validation_error(detail: str) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail)


def internal_error(detail: str = "Server xatosi") -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
def build_error_body(
    *,
    code: ErrorCode,
    detail: str,
    error_id: str | None = None,
    request_id: str | None = None,
) -> dict:
    return ErrorBody(
        error=detail, code=code, error_id=error_id, request_id=request_id
    ).model_dump(mode="json", exclude_none=True)


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Handler para AppHTTPException (propaga headers opcionales)."""
    request_id = getattr(getattr(request, "state", None), "request_id", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_body(
            code=exc.code,
            detail=str(exc.detail),
            error_id=exc.error_id,
            request_id=request_id,
        ),
        headers=getattr(exc, "headers", None),
    )
