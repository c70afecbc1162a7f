"""
===============================================================================
USE CASE: Analyze Document (chunk -> oracle -> reconcile -> diff)
===============================================================================

Name:
    Analyze Document Use Case

Business Goal:
    Corregir un documento completo con el oráculo externo y devolver el texto
    original, el corregido y la secuencia de runs para resaltado/exportación,
    garantizando:
      - validación de contenido antes de cualquier llamada externa (fail-fast)
      - orden de chunks restaurado aunque las llamadas terminen desordenadas
      - sin resultado parcial si una llamada falla (política abort)

Why (Context / Intención):
    - El oráculo tiene límites de tamaño y de rate: se trabaja por chunks.
    - Cada chunk se corrige aislado, por eso se puede paralelizar con un tope.
    - Las llamadas al SDK son bloqueantes: corren en threads (asyncio.to_thread)
      para no bloquear el event loop.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    AnalyzeDocumentUseCase

Responsibilities:
    - Validar mínimo/máximo de caracteres (EmptyInputError / OversizedInputError).
    - Dividir en chunks (TextChunkerService).
    - Llamar al oráculo por chunk: secuencial con pausa o paralelo acotado.
    - Aplicar política de falla (abort | keep_original).
    - Reconciliar por chunk y concatenar.
    - Calcular runs (diff original vs corregido).

Collaborators:
    - domain.services.CorrectionOracle / TextChunkerService
    - application.reconciler / application.differ
    - crosscutting.metrics / crosscutting.logger
===============================================================================
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Final

from ...crosscutting.exceptions import (
    EmptyInputError,
    OracleError,
    OversizedInputError,
)
from ...crosscutting.logger import logger
from ...crosscutting.metrics import observe_chunks_per_document
from ...domain.entities import (
    AnalysisResult,
    Chunk,
    CorrectionRecord,
    Document,
    FullText,
    OracleOutcome,
)
from ...domain.services import CorrectionOracle, TextChunkerService
from ..differ import diff
from ..reconciler import reconcile_detailed

POLICY_ABORT: Final[str] = "abort"
POLICY_KEEP_ORIGINAL: Final[str] = "keep_original"


def rewrap(original: str, rewritten: str) -> str:
    """
    Adopta un chunk reescrito conservando el whitespace de borde del original.

    Los modelos suelen recortar o agregar saltos al final; así los separadores
    entre chunks siguen siendo los del documento. Una reescritura vacía deja el
    chunk original.
    """
    body = rewritten.strip()
    if not body or not original.strip():
        return original
    lead = original[: len(original) - len(original.lstrip())]
    trail = original[len(original.rstrip()) :]
    return f"{lead}{body}{trail}"


class AnalyzeDocumentUseCase:
    """
    Use Case (Application Service / Query):
        Corrige un documento y produce AnalysisResult (request-scoped).
    """

    def __init__(
        self,
        oracle: CorrectionOracle,
        chunker: TextChunkerService,
        *,
        min_input_chars: int = 5,
        max_input_chars: int = 200_000,
        max_workers: int = 1,
        call_delay_seconds: float = 0.0,
        failure_policy: str = POLICY_ABORT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if failure_policy not in (POLICY_ABORT, POLICY_KEEP_ORIGINAL):
            raise ValueError(f"failure_policy desconocida: {failure_policy}")

        self._oracle = oracle
        self._chunker = chunker
        self._min_input_chars = min_input_chars
        self._max_input_chars = max_input_chars
        self._max_workers = max_workers
        self._call_delay = call_delay_seconds
        self._failure_policy = failure_policy
        self._sleep = sleep

    async def execute(self, document: Document) -> AnalysisResult:
        text = document.raw_text

        # 1) Validación (antes de cualquier llamada externa)
        if len(text.strip()) < self._min_input_chars:
            raise EmptyInputError()
        if len(text) > self._max_input_chars:
            raise OversizedInputError(
                limit_name="input_chars",
                actual=len(text),
                maximum=self._max_input_chars,
            )

        # 2) Chunking
        chunks = self._chunker.chunk(text)
        observe_chunks_per_document(len(chunks))

        # 3) Oráculo (orden de chunks garantizado)
        outcomes = await self._correct_all(chunks)

        # 4) Reconciliación por chunk
        pieces: list[str] = []
        corrections: list[CorrectionRecord] = []
        for chunk, outcome in zip(chunks, outcomes):
            if outcome is None:
                pieces.append(chunk.text)
                continue
            fixed, applied = reconcile_detailed(chunk.text, outcome)
            if isinstance(outcome, FullText):
                fixed = rewrap(chunk.text, fixed)
            pieces.append(fixed)
            corrections.extend(applied)

        corrected = "".join(pieces)

        # 5) Diff
        runs = diff(text, corrected)

        logger.info(
            "Análisis completado",
            extra={
                "chunks": len(chunks),
                "input_chars": len(text),
                "corrected_chars": len(corrected),
                "corrections": len(corrections),
                "runs": len(runs),
                "source_format": document.source_format.value,
                "protocol": getattr(self._oracle, "protocol", None),
            },
        )

        return AnalysisResult(
            original=text,
            corrected=corrected,
            runs=runs,
            corrections=corrections,
            source_format=document.source_format,
            display_name=document.display_name,
            chunk_count=len(chunks),
        )

    # ------------------------------------------------------------------
    # Oráculo
    # ------------------------------------------------------------------

    async def _correct_one(self, chunk: Chunk) -> OracleOutcome | None:
        """None = chunk conservado sin cambios (política keep_original)."""
        try:
            return await asyncio.to_thread(self._oracle.correct, chunk)
        except OracleError as exc:
            if self._failure_policy == POLICY_KEEP_ORIGINAL:
                logger.warning(
                    "Oracle falló; se conserva el chunk original",
                    extra={"chunk_index": chunk.index, "error_id": exc.error_id},
                )
                return None
            logger.error(
                "Oracle falló; se aborta el análisis",
                extra={"chunk_index": chunk.index, "error_id": exc.error_id},
            )
            raise

    async def _correct_all(self, chunks: list[Chunk]) -> list[OracleOutcome | None]:
        if self._max_workers == 1:
            return await self._correct_sequential(chunks)
        return await self._correct_parallel(chunks)

    async def _correct_sequential(
        self, chunks: list[Chunk]
    ) -> list[OracleOutcome | None]:
        results: list[OracleOutcome | None] = []
        for chunk in chunks:
            if results and self._call_delay > 0:
                await self._sleep(self._call_delay)
            results.append(await self._correct_one(chunk))
        return results

    async def _correct_parallel(
        self, chunks: list[Chunk]
    ) -> list[OracleOutcome | None]:
        semaphore = asyncio.Semaphore(self._max_workers)

        async def guarded(chunk: Chunk) -> OracleOutcome | None:
            async with semaphore:
                return await self._correct_one(chunk)

        tasks = [asyncio.ensure_future(guarded(chunk)) for chunk in chunks]
        try:
            # gather devuelve en el orden de `tasks` (= orden de chunks)
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
