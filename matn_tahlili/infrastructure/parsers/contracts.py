"""
===============================================================================
ARCHIVO: contracts.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Nombre:
    Contratos del Sub-sistema de Parsers

Responsabilidades:
    - Definir el contrato de parser (BaseParser) mediante Protocol.
    - Definir el resultado (ExtractedText) con metadatos y warnings.
    - Definir opciones compartidas (ParserOptions).

Colaboradores:
    - parsers específicos (DocxParser, TextParser)
    - registry.ParserRegistry / extract_document
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ParserOptions:
    """
    Opciones compartidas para todos los parsers.

    encoding:
      Para text/plain (BOM se elimina aparte).
    paragraph_separator:
      Cómo se unen los párrafos de un DOCX (línea en blanco por defecto).
    """

    encoding: str = "utf-8"
    paragraph_separator: str = "\n\n"


@dataclass(frozen=True)
class ExtractedText:
    """
    Resultado de extracción.

    content:
      Texto final (normalizado: sin NUL, saltos LF).
    metadata:
      Metadatos técnicos (source, paragraphs, etc.).
    warnings:
      Avisos no fatales (tablas que fallaron, bytes inválidos, etc.).
    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


@runtime_checkable
class BaseParser(Protocol):
    """
    Interfaz que deben implementar los parsers específicos.

    Nota:
      - Usamos Protocol para favorecer test doubles sin herencia forzada.
    """

    def parse(self, content: bytes, *, options: ParserOptions) -> ExtractedText:
        """
        Parsear bytes -> texto + metadatos.

        Errores esperables:
          - DocumentParsingError
        """
        ...
