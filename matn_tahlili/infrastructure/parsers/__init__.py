"""
===============================================================================
MÓDULO: Infrastructure / Parsers
===============================================================================

CRC CARD (Package)
-------------------------------------------------------------------------------
Nombre:
    infrastructure.parsers

Responsabilidades:
    - Exponer la función única de extracción (extract_document).
    - Exponer la clasificación cerrada por extensión (SourceKind).
    - Exponer el scope de archivo temporal para uploads (spooled_upload).

Colaboradores:
    - registry.extract_document / classify_source
    - uploads.spooled_upload
===============================================================================
"""

from .errors import DocumentParsingError
from .registry import ParserRegistry, SourceKind, classify_source, extract_document
from .uploads import spooled_upload

__all__ = [
    "DocumentParsingError",
    "ParserRegistry",
    "SourceKind",
    "classify_source",
    "extract_document",
    "spooled_upload",
]
