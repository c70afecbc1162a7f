"""
Name: Base del Oracle Client Adapter

Qué hace
--------
Lógica común a todos los oráculos (real o fake):
  - Medir latencia por chunk (Prometheus)
  - Envolver cualquier falla del proveedor en OracleError(chunk_index)
  - Interpretar el cuerpo según protocolo:
      * rewrite    -> FullText(body)
      * structured -> Records(parse_structured_response(body))
  - Degradar respuestas estructuradas malformadas a cero correcciones

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: BaseCorrectionOracle
Responsibilities:
  - Template method: `correct()` llama a `_complete()` (provider) e interpreta
Collaborators:
  - parsing.parse_structured_response
  - crosscutting.metrics / crosscutting.logger
"""

from __future__ import annotations

import time

from ....crosscutting.exceptions import MalformedOracleResponseError, OracleError
from ....crosscutting.logger import logger
from ....crosscutting.metrics import (
    observe_oracle_latency,
    record_malformed_oracle_response,
    record_oracle_failure,
)
from ....domain.entities import Chunk, FullText, OracleOutcome, Records
from .parsing import parse_structured_response


class BaseCorrectionOracle:
    """Template method para oráculos; las subclases implementan `_complete`."""

    def __init__(self, protocol: str = "structured") -> None:
        if protocol not in ("rewrite", "structured"):
            raise ValueError(f"protocol desconocido: {protocol}")
        self.protocol = protocol

    def _complete(self, chunk: Chunk) -> str:
        """Devuelve el cuerpo crudo de la respuesta del proveedor."""
        raise NotImplementedError

    def correct(self, chunk: Chunk) -> OracleOutcome:
        start = time.perf_counter()
        try:
            body = self._complete(chunk)
        except OracleError:
            record_oracle_failure(self.protocol)
            raise
        except Exception as exc:
            record_oracle_failure(self.protocol)
            logger.error(
                "Oracle: llamada fallida",
                exc_info=True,
                extra={
                    "chunk_index": chunk.index,
                    "protocol": self.protocol,
                    "error_type": type(exc).__name__,
                },
            )
            raise OracleError(chunk_index=chunk.index, original_error=exc) from exc
        finally:
            observe_oracle_latency(self.protocol, time.perf_counter() - start)

        return self._interpret(body or "", chunk)

    def _interpret(self, body: str, chunk: Chunk) -> OracleOutcome:
        if self.protocol == "rewrite":
            return FullText(text=body)

        try:
            records, dropped = parse_structured_response(body)
        except MalformedOracleResponseError as exc:
            record_malformed_oracle_response()
            logger.warning(
                "Oracle: respuesta estructurada malformada, se ignora",
                extra={
                    "chunk_index": chunk.index,
                    "error_id": exc.error_id,
                    "body_chars": len(body),
                },
            )
            return Records(records=())

        if dropped:
            record_malformed_oracle_response(dropped)
            logger.warning(
                "Oracle: ítems de corrección descartados",
                extra={"chunk_index": chunk.index, "dropped": dropped},
            )
        return Records(records=tuple(records))
