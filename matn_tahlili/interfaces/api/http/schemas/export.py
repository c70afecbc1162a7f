"""
===============================================================================
TARJETA CRC — schemas/export.py
===============================================================================

Módulo:
    Schemas HTTP para exportar runs

Responsabilidades:
    - Request de /api/export: {runs, format, baseName}.
    - Validar tope de runs para no renderizar documentos absurdos.

Colaboradores:
    - schemas.analysis.RunDTO
    - domain.entities.ExportFormat
===============================================================================
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .....domain.entities import ExportFormat
from .analysis import RunDTO

MAX_EXPORT_RUNS = 50_000


class ExportReq(BaseModel):
    """Request para /api/export (runs vacío -> EMPTY_EXPORT en el caso de uso)."""

    model_config = ConfigDict(populate_by_name=True)

    runs: list[RunDTO] = Field(default_factory=list, max_length=MAX_EXPORT_RUNS)
    format: ExportFormat = ExportFormat.PLAIN_MARKED
    base_name: str | None = Field(default=None, alias="baseName", max_length=255)
