"""
===============================================================================
USE CASE: Export Runs (runs -> artefacto descargable)
===============================================================================

Business Goal:
    Convertir la secuencia de runs del análisis en un archivo descargable
    (.txt con marcadores o .docx con estilos) con nombre seguro.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ExportRunsUseCase

Responsibilities:
    - Sanitizar base_name (sin separadores de path ni caracteres de control).
    - Delegar el render al exporter del formato.
    - Devolver filename + content_type + bytes.

Collaborators:
    - infrastructure.exporters (export, FORMATS)
    - crosscutting.metrics.record_export
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Sequence

from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_export
from ...domain.entities import AnnotatedRun, ExportFormat
from ...infrastructure.exporters import FORMATS, export

DEFAULT_BASE_NAME: Final[str] = "togrilangan-matn"
_MAX_BASE_NAME: Final[int] = 100

_UNSAFE = re.compile(r'[\x00-\x1f\x7f<>:"|?*]')


def sanitize_base_name(base_name: str | None, *, extension: str = "") -> str:
    """Nombre de archivo seguro para Content-Disposition."""
    name = (base_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE.sub("", name).strip().strip(".")
    if extension and name.lower().endswith(f".{extension}"):
        name = name[: -(len(extension) + 1)].rstrip()
    name = name[:_MAX_BASE_NAME]
    return name or DEFAULT_BASE_NAME


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    content_type: str
    content: bytes


class ExportRunsUseCase:
    """Use Case (Query): runs -> ExportedFile."""

    def execute(
        self,
        runs: Sequence[AnnotatedRun],
        format: ExportFormat,
        base_name: str | None = None,
    ) -> ExportedFile:
        fmt = ExportFormat(format)
        spec = FORMATS[fmt]

        content = export(runs, fmt)
        filename = f"{sanitize_base_name(base_name, extension=spec.extension)}.{spec.extension}"

        record_export(fmt.value)
        logger.info(
            "Export generado",
            extra={"format": fmt.value, "runs": len(runs), "bytes": len(content)},
        )
        return ExportedFile(
            filename=filename, content_type=spec.content_type, content=content
        )
