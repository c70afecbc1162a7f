"""
===============================================================================
TARJETA CRC — matn_tahlili/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (oráculo, chunker, casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener el handle del oráculo como singleton de solo lectura (lru_cache).
  - Centralizar decisiones runtime basadas en Settings (fake vs Google, protocolo).

Colaboradores:
  - matn_tahlili.crosscutting.config.get_settings
  - matn_tahlili.infrastructure.* (implementaciones)
  - matn_tahlili.application.usecases.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Los casos de uso son request-scoped (baratos); el oráculo no.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases import AnalyzeDocumentUseCase, ExportRunsUseCase
from .crosscutting.config import get_settings
from .domain.services import CorrectionOracle, TextChunkerService
from .infrastructure.services.oracle import (
    FakeCorrectionOracle,
    GoogleCorrectionOracle,
)
from .infrastructure.services.retry import RetryPolicy
from .infrastructure.text.chunker import ParagraphChunker


@lru_cache(maxsize=1)
def get_retry_policy() -> RetryPolicy:
    return RetryPolicy.from_settings(get_settings())


@lru_cache(maxsize=1)
def get_correction_oracle() -> CorrectionOracle:
    """Oráculo de corrección (fake en test/dev si está habilitado)."""
    settings = get_settings()
    if settings.fake_oracle:
        return FakeCorrectionOracle(protocol=settings.oracle_protocol)
    return GoogleCorrectionOracle(
        api_key=settings.google_api_key,
        model_id=settings.oracle_model,
        protocol=settings.oracle_protocol,
        retry_policy=get_retry_policy(),
    )


@lru_cache(maxsize=1)
def get_text_chunker() -> TextChunkerService:
    return ParagraphChunker(max_len=get_settings().chunk_max_chars)


def get_analyze_document_use_case() -> AnalyzeDocumentUseCase:
    settings = get_settings()
    return AnalyzeDocumentUseCase(
        oracle=get_correction_oracle(),
        chunker=get_text_chunker(),
        min_input_chars=settings.min_input_chars,
        max_input_chars=settings.max_input_chars,
        max_workers=settings.oracle_max_workers,
        call_delay_seconds=settings.oracle_call_delay_seconds,
        failure_policy=settings.oracle_failure_policy,
    )


def get_export_runs_use_case() -> ExportRunsUseCase:
    return ExportRunsUseCase()
