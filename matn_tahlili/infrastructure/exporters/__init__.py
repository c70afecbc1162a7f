"""
===============================================================================
MÓDULO: Infrastructure / Exporters
===============================================================================

CRC CARD (Package)
-------------------------------------------------------------------------------
Responsabilidades:
    - Dispatcher único export(runs, format) -> bytes.
    - Metadatos de formato (content type + extensión).
    - Validar entrada: secuencia vacía -> EmptyExportError.

Colaboradores:
    - plain_marked.export_plain_marked
    - docx_exporter.export_rich_text
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from ...crosscutting.exceptions import EmptyExportError
from ...domain.entities import AnnotatedRun, ExportFormat
from .docx_exporter import export_rich_text
from .plain_marked import export_plain_marked, render_plain_marked, strip_markers


@dataclass(frozen=True)
class FormatSpec:
    extension: str
    content_type: str
    render: Callable[[Sequence[AnnotatedRun]], bytes]


FORMATS: dict[ExportFormat, FormatSpec] = {
    ExportFormat.PLAIN_MARKED: FormatSpec(
        extension="txt",
        content_type="text/plain; charset=utf-8",
        render=export_plain_marked,
    ),
    ExportFormat.RICH_TEXT: FormatSpec(
        extension="docx",
        content_type=(
            "application/vnd.openxmlformats-officedocument"
            ".wordprocessingml.document"
        ),
        render=export_rich_text,
    ),
}


def export(runs: Sequence[AnnotatedRun], format: ExportFormat) -> bytes:
    """Renderiza runs al formato pedido (no muta `runs`)."""
    if not runs:
        raise EmptyExportError()
    return FORMATS[ExportFormat(format)].render(tuple(runs))


__all__ = [
    "FORMATS",
    "FormatSpec",
    "export",
    "render_plain_marked",
    "strip_markers",
]
