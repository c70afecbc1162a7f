"""
===============================================================================
CRC CARD — infrastructure/text/chunker.py
===============================================================================

Componente:
  Chunking de texto por párrafos (sin pérdida)

Responsabilidades:
  - Acotar la unidad de trabajo enviada al oráculo (límite de tamaño / rate).
  - Cortar en límites de párrafo (una o más líneas en blanco).
  - Garantizar: concatenar los chunks reproduce el texto EXACTO.
  - Exponer:
      * chunk(text, max_len) -> list[Chunk]
      * ParagraphChunker (servicio con max_len configurado)

Colaboradores:
  - domain/entities.Chunk
  - application/usecases/analyze_document.py

Decisiones:
  - El separador (líneas en blanco) queda pegado al párrafo que lo precede;
    nada se descarta ni se normaliza.
  - Un párrafo más largo que max_len se corta duro en rebanadas de max_len.
===============================================================================
"""

from __future__ import annotations

import re
from typing import Final

from ...domain.entities import Chunk

# Límite de párrafo: salto de línea, whitespace horizontal opcional y otro salto
# (incluye corridas de varias líneas en blanco).
_PARAGRAPH_BREAK: Final[re.Pattern[str]] = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)*")


def split_paragraphs(text: str) -> list[str]:
    """
    Divide en unidades "párrafo + separador siguiente".

    "".join(split_paragraphs(t)) == t siempre.
    """
    units: list[str] = []
    start = 0
    for match in _PARAGRAPH_BREAK.finditer(text):
        units.append(text[start : match.end()])
        start = match.end()
    if start < len(text):
        units.append(text[start:])
    return units


def _hard_slices(unit: str, max_len: int) -> list[str]:
    return [unit[i : i + max_len] for i in range(0, len(unit), max_len)]


def chunk(text: str, max_len: int) -> list[Chunk]:
    """
    Empaqueta párrafos de forma greedy en chunks de a lo sumo max_len chars.

    - Texto vacío -> [] (la política de contenido mínimo es del caller).
    - max_len < 1 -> ValueError.
    """
    if max_len < 1:
        raise ValueError(f"max_len debe ser >= 1. got={max_len}")
    if not text:
        return []

    pieces: list[str] = []
    buffer = ""

    for unit in split_paragraphs(text):
        if len(unit) > max_len:
            if buffer:
                pieces.append(buffer)
                buffer = ""
            pieces.extend(_hard_slices(unit, max_len))
            continue

        if len(buffer) + len(unit) > max_len:
            pieces.append(buffer)
            buffer = unit
        else:
            buffer += unit

    if buffer:
        pieces.append(buffer)

    return [Chunk(index=i, text=piece) for i, piece in enumerate(pieces)]


class ParagraphChunker:
    """
    Servicio de chunking por párrafos.

    Diseño:
      - Valida max_len al construir (fail-fast en el composition root).
      - `chunk()` delega a la función pura.
    """

    def __init__(self, max_len: int = 3000):
        if max_len < 1:
            raise ValueError(f"max_len debe ser >= 1, got {max_len}")
        self.max_len = max_len

    def chunk(self, text: str) -> list[Chunk]:
        return chunk(text, self.max_len)
