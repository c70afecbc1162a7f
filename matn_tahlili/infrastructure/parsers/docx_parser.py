"""
===============================================================================
ARCHIVO: docx_parser.py
===============================================================================

CRC CARD (Class)
-------------------------------------------------------------------------------
Clase:
    DocxParser

Responsabilidades:
    - Extraer texto desde DOCX usando python-docx.
    - Respetar el orden del documento (párrafos y tablas intercalados).
    - Unir párrafos con una línea en blanco (texto "crudo", sin formato).
    - Reportar warnings no fatales (tablas que no se pudieron leer).

Colaboradores:
    - contracts.ParserOptions / ExtractedText
    - errors.DocumentParsingError
    - normalize.normalize_text
===============================================================================
"""

from __future__ import annotations

from io import BytesIO
from typing import Iterator

from docx import Document
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from .contracts import BaseParser, ExtractedText, ParserOptions
from .errors import DocumentParsingError
from .normalize import normalize_text

_TAG_PARAGRAPH = qn("w:p")
_TAG_TABLE = qn("w:tbl")


def _table_paragraphs(table: Table) -> Iterator[Paragraph]:
    # Celdas combinadas aparecen repetidas en row.cells.
    seen: list = []
    for row in table.rows:
        for cell in row.cells:
            if any(cell._tc is tc for tc in seen):
                continue
            seen.append(cell._tc)
            yield from cell.paragraphs
            for nested in cell.tables:
                yield from _table_paragraphs(nested)


class DocxParser(BaseParser):
    """Estrategia de parsing para DOCX (python-docx)."""

    def parse(self, content: bytes, *, options: ParserOptions) -> ExtractedText:
        try:
            doc = Document(BytesIO(content))
        except Exception as e:
            raise DocumentParsingError(original_error=e) from e

        parts: list[str] = []
        warnings: list[str] = []

        body = doc.element.body
        for child in body.iterchildren():
            if child.tag == _TAG_PARAGRAPH:
                text = Paragraph(child, doc).text or ""
                if text.strip():
                    parts.append(text)
            elif child.tag == _TAG_TABLE:
                # Degradación suave: una tabla ilegible no invalida el documento
                try:
                    for p in _table_paragraphs(Table(child, doc)):
                        text = p.text or ""
                        if text.strip():
                            parts.append(text)
                except Exception as e:
                    warnings.append(
                        f"Jadval matnini to'liq o'qib bo'lmadi: {type(e).__name__}"
                    )

        raw_text = options.paragraph_separator.join(parts)

        return ExtractedText(
            content=normalize_text(raw_text),
            metadata={"source": "docx", "paragraphs": len(parts)},
            warnings=warnings,
        )
