"""
===============================================================================
TARJETA CRC — routers/export.py
===============================================================================

Módulo:
    Endpoint de exportación (POST /api/export)

Responsabilidades:
    - Recibir runs + formato + baseName.
    - Devolver el artefacto como attachment (Content-Disposition RFC 6266,
      con filename* UTF-8 para nombres no ASCII).

Colaboradores:
    - container.get_export_runs_use_case
    - schemas.export.ExportReq
===============================================================================
"""

from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from .....application.usecases import ExportRunsUseCase
from .....container import get_export_runs_use_case
from ..schemas.export import ExportReq

router = APIRouter(tags=["export"])


def content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "")
    return f"attachment; filename=\"{fallback or 'export'}\"; filename*=UTF-8''{quote(filename)}"


@router.post("/export")
def export_runs(
    req: ExportReq,
    use_case: ExportRunsUseCase = Depends(get_export_runs_use_case),
) -> Response:
    exported = use_case.execute(
        [run.to_entity() for run in req.runs], req.format, req.base_name
    )
    return Response(
        content=exported.content,
        media_type=exported.content_type,
        headers={"Content-Disposition": content_disposition(exported.filename)},
    )
