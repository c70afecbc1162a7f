"""
===============================================================================
TARJETA CRC — schemas/analysis.py
===============================================================================

Módulo:
    Schemas HTTP para el análisis de texto

Responsabilidades:
    - DTOs de respuesta de /api/analyze (contrato con la UI, camelCase).
    - Traducir AnalysisResult (dominio) -> AnalyzeRes.

Colaboradores:
    - domain.entities (AnalysisResult, AnnotatedRun, CorrectionRecord)
===============================================================================
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .....domain.entities import (
    AnalysisResult,
    AnnotatedRun,
    CorrectionKind,
    CorrectionRecord,
    RunKind,
)

InputFormat = Literal["txt", "docx", "text"]


class RunDTO(BaseModel):
    """Run anotado (same | removed | added)."""

    text: str
    kind: RunKind

    @classmethod
    def from_entity(cls, run: AnnotatedRun) -> "RunDTO":
        return cls(text=run.text, kind=run.kind)

    def to_entity(self) -> AnnotatedRun:
        return AnnotatedRun(text=self.text, kind=self.kind)


class CorrectionDTO(BaseModel):
    wrong: str
    correct: str
    kind: CorrectionKind
    reason: str = ""

    @classmethod
    def from_entity(cls, record: CorrectionRecord) -> "CorrectionDTO":
        return cls(
            wrong=record.wrong,
            correct=record.correct,
            kind=record.kind,
            reason=record.reason,
        )


class AnalyzeRes(BaseModel):
    """Response de /api/analyze (la presencia de original/corrected = éxito)."""

    model_config = ConfigDict(populate_by_name=True)

    original: str
    corrected: str
    runs: list[RunDTO]
    input_format: InputFormat = Field(alias="inputFormat")
    filename: str = ""
    corrections: list[CorrectionDTO] = Field(default_factory=list)


def to_analyze_res(result: AnalysisResult, *, input_format: InputFormat) -> AnalyzeRes:
    return AnalyzeRes(
        original=result.original,
        corrected=result.corrected,
        runs=[RunDTO.from_entity(r) for r in result.runs],
        input_format=input_format,
        filename=result.display_name,
        corrections=[CorrectionDTO.from_entity(c) for c in result.corrections],
    )
