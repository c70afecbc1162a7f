"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (prefix="/api").
  - Centralizar responses de error para OpenAPI.
  - Componer routers por feature (analysis / export).

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (sub-routers por feature)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.analysis import router as analysis_router
from .routers.export import router as export_router


def build_router() -> APIRouter:
    """Construye el router raíz (sin side-effects al importar submódulos)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(analysis_router)
    api_router.include_router(export_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
