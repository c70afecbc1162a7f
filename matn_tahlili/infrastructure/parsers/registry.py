"""
===============================================================================
ARCHIVO: registry.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Nombre:
    Dispatch de extracción por tipo de fuente

Responsabilidades:
    - Clasificar un archivo en un conjunto cerrado (SourceKind) por extensión.
    - Mantener el mapeo SourceKind -> Strategy (parser) en ParserRegistry.
    - Exponer una única función de extracción (extract_document).

Colaboradores:
    - contracts.BaseParser / ExtractedText / ParserOptions
    - docx_parser.DocxParser
    - crosscutting.exceptions.UnsupportedFormatError
===============================================================================
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import PurePath

from ...crosscutting.exceptions import UnsupportedFormatError
from .contracts import BaseParser, ExtractedText, ParserOptions
from .docx_parser import DocxParser
from .normalize import normalize_text


class SourceKind(str, Enum):
    """Variantes cerradas de fuente (sin if/else anidados por formato)."""

    TEXT = "text"
    RICH_DOCUMENT = "rich_document"
    UNSUPPORTED = "unsupported"


_EXTENSIONS: dict[str, SourceKind] = {
    ".txt": SourceKind.TEXT,
    ".docx": SourceKind.RICH_DOCUMENT,
}


def classify_source(filename: str) -> SourceKind:
    """Clasifica por extensión (case-insensitive)."""
    suffix = PurePath(filename or "").suffix.lower()
    return _EXTENSIONS.get(suffix, SourceKind.UNSUPPORTED)


class TextParser(BaseParser):
    """
    Parser simple para text/plain.

    Nota:
      - Bytes inválidos se reemplazan (U+FFFD) y se reporta warning.
    """

    def parse(self, content: bytes, *, options: ParserOptions) -> ExtractedText:
        warnings: list[str] = []
        try:
            text = content.decode(options.encoding)
        except UnicodeDecodeError:
            text = content.decode(options.encoding, errors="replace")
            warnings.append("Faylda noto'g'ri UTF-8 baytlar bor edi")

        return ExtractedText(
            content=normalize_text(text),
            metadata={"source": "text"},
            warnings=warnings,
        )


ParserFactory = Callable[[], BaseParser]


class ParserRegistry:
    """Registry/Factory de parsers por SourceKind."""

    def __init__(self) -> None:
        # Factories (callables) para instanciación tardía y tests simples.
        self._factories: dict[SourceKind, ParserFactory] = {
            SourceKind.TEXT: TextParser,
            SourceKind.RICH_DOCUMENT: DocxParser,
        }

    def register(self, kind: SourceKind, factory: ParserFactory) -> None:
        if kind == SourceKind.UNSUPPORTED:
            raise ValueError("UNSUPPORTED no admite parser")
        self._factories[kind] = factory

    def get_parser(self, kind: SourceKind, *, filename: str = "") -> BaseParser:
        """
        Retorna un parser instanciado para el tipo solicitado.

        Errores:
          - UnsupportedFormatError si no existe mapping.
        """
        factory = self._factories.get(kind)
        if not factory:
            raise UnsupportedFormatError(filename=filename)
        return factory()


_default_registry = ParserRegistry()


def extract_document(
    filename: str,
    content: bytes,
    *,
    registry: ParserRegistry | None = None,
    options: ParserOptions | None = None,
) -> ExtractedText:
    """
    Punto único de extracción: clasifica, resuelve parser y parsea.

    Errores:
      - UnsupportedFormatError (extensión distinta de .txt/.docx)
      - DocumentParsingError (contenedor corrupto)
    """
    kind = classify_source(filename)
    parser = (registry or _default_registry).get_parser(kind, filename=filename)
    return parser.parse(content, options=options or ParserOptions())
