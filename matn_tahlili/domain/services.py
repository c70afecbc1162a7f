"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir contratos para el oráculo de corrección y el chunking.
    - Proteger a application de detalles del proveedor (Google GenAI, fake).
    - Mantener el dominio independiente de SDKs.

Colaboradores:
    - infrastructure/services/oracle/*: implementaciones concretas.
    - infrastructure/text/chunker.py: ParagraphChunker.
    - application/usecases: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol

from .entities import Chunk, OracleOutcome


class CorrectionOracle(Protocol):
    """Contrato del oráculo externo (una llamada por chunk)."""

    protocol: str

    def correct(self, chunk: Chunk) -> OracleOutcome:
        """
        Corrige un chunk.

        Errores esperables:
          - OracleError(chunk_index) si la llamada falla luego de reintentos.
        """
        ...


class TextChunkerService(Protocol):
    """Contrato para dividir texto en chunks acotados."""

    def chunk(self, text: str) -> list[Chunk]: ...
