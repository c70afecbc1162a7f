"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Document, Chunk, CorrectionRecord, AnnotatedRun,
    AnalysisResult)

Responsabilidades:
    - Definir estructuras centrales del análisis de texto (sin infraestructura).
    - Modelar el resultado del oráculo como unión etiquetada (FullText | Records).
    - Brindar helpers mínimos para invariantes simples (is_noop, reconstrucción).

Colaboradores:
    - application/reconciler.py: consume OracleOutcome / CorrectionRecord.
    - application/differ.py: produce AnnotatedRun.
    - application/usecases: construyen AnalysisResult.
    - interfaces/api: serializan DTOs basados en estas entidades.

Principios:
    - Sin dependencias a FastAPI ni SDKs.
    - Inmutables (frozen): el análisis es request-scoped, nada se muta.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Union


class SourceFormat(str, Enum):
    """Origen del texto: texto plano (.txt / pegado) o documento rico (.docx)."""

    PLAIN = "plain"
    RICH_TEXT = "richText"


class CorrectionKind(str, Enum):
    SPELLING = "spelling"
    GRAMMAR = "grammar"
    STYLE = "style"


class RunKind(str, Enum):
    SAME = "same"
    REMOVED = "removed"
    ADDED = "added"


class ExportFormat(str, Enum):
    """Formato del artefacto exportado."""

    PLAIN_MARKED = "plainMarked"
    RICH_TEXT = "richText"


# ---------------------------------------------------------------------------
# Document / Chunk
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Document:
    """
    Documento a analizar.

    Importante:
      - raw_text es el texto tal cual se extrajo (sin colapsar whitespace).
      - display_name es solo para la UI (nombre de archivo o "").
    """

    raw_text: str
    source_format: SourceFormat = SourceFormat.PLAIN
    display_name: str = ""


@dataclass(frozen=True)
class Chunk:
    """Unidad de trabajo enviada al oráculo (conserva separadores originales)."""

    index: int
    text: str


# ---------------------------------------------------------------------------
# Oráculo: CorrectionRecord + OracleOutcome
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CorrectionRecord:
    """
    Sustitución propuesta por el oráculo.

    wrong/correct son formas de superficie (no posiciones): el reconciliador
    busca `wrong` en el texto.
    """

    wrong: str
    correct: str
    kind: CorrectionKind = CorrectionKind.GRAMMAR
    reason: str = ""

    @property
    def is_noop(self) -> bool:
        """True si el registro no cambia nada (se descarta antes de aplicar)."""
        return not self.wrong or not self.correct or self.wrong == self.correct


@dataclass(frozen=True)
class FullText:
    """Protocolo rewrite: el oráculo devolvió el chunk completo corregido."""

    text: str


@dataclass(frozen=True)
class Records:
    """Protocolo structured: lista (posiblemente vacía) de correcciones."""

    records: tuple[CorrectionRecord, ...] = ()


OracleOutcome = Union[FullText, Records]


# ---------------------------------------------------------------------------
# Runs / resultado
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnnotatedRun:
    text: str
    kind: RunKind


def original_text(runs: Iterable[AnnotatedRun]) -> str:
    """Reconstruye el original (same + removed)."""
    return "".join(r.text for r in runs if r.kind != RunKind.ADDED)


def corrected_text(runs: Iterable[AnnotatedRun]) -> str:
    """Reconstruye el corregido (same + added)."""
    return "".join(r.text for r in runs if r.kind != RunKind.REMOVED)


@dataclass(frozen=True)
class AnalysisResult:
    """
    Resultado de un análisis (sin persistencia; vive lo que vive el request).

    corrections:
      Registros que efectivamente cambiaron el texto (vacío en protocolo rewrite).
    """

    original: str
    corrected: str
    runs: list[AnnotatedRun] = field(default_factory=list)
    corrections: list[CorrectionRecord] = field(default_factory=list)
    source_format: SourceFormat = SourceFormat.PLAIN
    display_name: str = ""
    chunk_count: int = 0
