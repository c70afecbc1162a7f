"""
===============================================================================
ARCHIVO: errors.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Nombre:
    Excepciones Tipadas del Sub-sistema de Parsers

Responsabilidades:
    - Modelar errores explícitos (sin ValueError genérico).
    - Transportar contexto útil (original_error, filename).
    - Colgar de la raíz TextCheckError para un mapping HTTP uniforme.

Colaboradores:
    - docx_parser.DocxParser
    - registry.extract_document
    - api/exception_handlers.py
===============================================================================
"""

from __future__ import annotations

from ...crosscutting.exceptions import TextCheckError


class DocumentParsingError(TextCheckError):
    """Se lanza cuando el documento está corrupto/malformado o el parser falla."""

    error_code: str = "INVALID_DOCUMENT"
    default_message: str = "Faylni o'qib bo'lmadi. Fayl buzilgan bo'lishi mumkin."

    def __init__(self, message: str | None = None, *, filename: str = "", **kwargs):
        super().__init__(message=message, **kwargs)
        self.filename = filename
