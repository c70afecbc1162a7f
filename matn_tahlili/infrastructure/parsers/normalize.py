"""
===============================================================================
ARCHIVO: normalize.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Nombre:
    Normalización de Texto extraído

Responsabilidades:
    - Normalizar texto de forma consistente (NUL, BOM, saltos CRLF/CR -> LF).
    - NO colapsar whitespace: el diff y el chunking dependen del texto exacto.

Colaboradores:
    - docx_parser.DocxParser
    - registry.TextParser
===============================================================================
"""

from __future__ import annotations

_NULL_CHAR = "\x00"
_BOM = "\ufeff"


def normalize_text(text: str) -> str:
    """
    Normaliza texto para consumo estable.

    Qué hace:
      - Elimina caracteres NULL.
      - Elimina BOM inicial.
      - Unifica saltos de línea (\\r\\n y \\r -> \\n).
    """
    if not text:
        return ""

    text = text.replace(_NULL_CHAR, "")
    if text.startswith(_BOM):
        text = text[len(_BOM) :]
    return text.replace("\r\n", "\n").replace("\r", "\n")
