"""
===============================================================================
ARCHIVO: docx_exporter.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Nombre:
    Export de runs como DOCX con estilos (python-docx)

Responsabilidades:
    - Un único párrafo; un run de Word por AnnotatedRun.
    - removed: tachado en rojo; added: negrita en verde; same: sin estilo.
    - Salida byte-determinista (core properties fijas + timestamps del zip fijos).

Colaboradores:
    - python-docx (Document, RGBColor)
    - exporters.export (dispatcher)
===============================================================================
"""

from __future__ import annotations

import zipfile
from datetime import datetime, timezone
from io import BytesIO
from typing import Sequence

from docx import Document
from docx.shared import RGBColor

from ...domain.entities import AnnotatedRun, RunKind

REMOVED_COLOR = RGBColor.from_string("DC2626")
ADDED_COLOR = RGBColor.from_string("047857")

_FIXED_DATETIME = datetime(2000, 1, 1, tzinfo=timezone.utc)
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def _pin_core_properties(doc) -> None:
    props = doc.core_properties
    props.title = "To'g'rilangan matn"
    props.author = "matn-tahlili"
    props.last_modified_by = "matn-tahlili"
    props.comments = ""
    props.revision = 1
    props.created = _FIXED_DATETIME
    props.modified = _FIXED_DATETIME
    props.last_printed = _FIXED_DATETIME


def _normalize_zip(payload: bytes) -> bytes:
    """Reescribe el contenedor con fecha fija por entrada (mismo orden)."""
    out = BytesIO()
    with zipfile.ZipFile(BytesIO(payload)) as src, zipfile.ZipFile(
        out, "w", compression=zipfile.ZIP_DEFLATED
    ) as dst:
        for item in src.infolist():
            info = zipfile.ZipInfo(item.filename, date_time=_ZIP_EPOCH)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            dst.writestr(info, src.read(item.filename))
    return out.getvalue()


def export_rich_text(runs: Sequence[AnnotatedRun]) -> bytes:
    doc = Document()
    _pin_core_properties(doc)

    paragraph = doc.add_paragraph()
    for run in runs:
        # add_run convierte "\n" en saltos de línea dentro del párrafo
        r = paragraph.add_run(run.text)
        if run.kind == RunKind.REMOVED:
            r.font.strike = True
            r.font.color.rgb = REMOVED_COLOR
        elif run.kind == RunKind.ADDED:
            r.font.bold = True
            r.font.color.rgb = ADDED_COLOR

    buffer = BytesIO()
    doc.save(buffer)
    return _normalize_zip(buffer.getvalue())
