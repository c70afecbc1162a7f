"""
Name: Document Extraction Unit Tests

Responsibilities:
  - Source classification by extension
  - TXT decoding and normalization
  - DOCX paragraphs + tables in document order
  - Error mapping (unsupported / corrupt)
"""

import pytest

from matn_tahlili.crosscutting.exceptions import UnsupportedFormatError
from matn_tahlili.infrastructure.parsers import (
    DocumentParsingError,
    ParserRegistry,
    SourceKind,
    classify_source,
    extract_document,
)
from matn_tahlili.infrastructure.parsers.contracts import ExtractedText
from matn_tahlili.infrastructure.parsers.normalize import normalize_text

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("insho.txt", SourceKind.TEXT),
        ("INSHO.TXT", SourceKind.TEXT),
        ("hisobot.docx", SourceKind.RICH_DOCUMENT),
        ("Hisobot.DocX", SourceKind.RICH_DOCUMENT),
        ("eski.doc", SourceKind.UNSUPPORTED),
        ("rasm.pdf", SourceKind.UNSUPPORTED),
        ("nomsiz", SourceKind.UNSUPPORTED),
        ("", SourceKind.UNSUPPORTED),
    ],
)
def test_classify_source(filename, expected):
    assert classify_source(filename) == expected


def test_normalize_text():
    assert normalize_text("\ufeffa\r\nb\rc\x00") == "a\nb\nc"
    assert normalize_text("") == ""


def test_txt_is_decoded_and_normalized():
    content = "\ufeffBirinchi satr\r\nIkkinchi satr".encode("utf-8")
    extracted = extract_document("matn.txt", content)

    assert extracted.content == "Birinchi satr\nIkkinchi satr"
    assert extracted.warnings == []


def test_txt_with_invalid_bytes_is_replaced_with_warning():
    extracted = extract_document("matn.txt", b"salom \xff dunyo")

    assert "\ufffd" in extracted.content
    assert extracted.warnings


def test_docx_paragraphs_and_tables_in_order(make_docx):
    content = make_docx(
        ["Birinchi xat boshi.", "", "Ikkinchi xat boshi."],
        table=[["A1", "B1"], ["A2", "B2"]],
    )
    extracted = extract_document("hujjat.docx", content)

    assert extracted.content == (
        "Birinchi xat boshi.\n\nIkkinchi xat boshi.\n\nA1\n\nB1\n\nA2\n\nB2"
    )
    assert extracted.metadata["source"] == "docx"
    assert extracted.metadata["paragraphs"] == 6


def test_docx_merged_cells_are_read_once():
    from io import BytesIO

    from docx import Document

    doc = Document()
    table = doc.add_table(rows=1, cols=2)
    merged = table.cell(0, 0).merge(table.cell(0, 1))
    merged.text = "Birlashgan"
    buffer = BytesIO()
    doc.save(buffer)

    extracted = extract_document("jadval.docx", buffer.getvalue())
    assert extracted.content == "Birlashgan"


def test_corrupt_docx_raises_parsing_error():
    with pytest.raises(DocumentParsingError):
        extract_document("buzuq.docx", b"bu zip emas")


def test_unsupported_extension_raises():
    with pytest.raises(UnsupportedFormatError):
        extract_document("rasm.pdf", b"%PDF-1.4")


def test_registry_register_and_reject_unsupported():
    class UpperParser:
        def parse(self, content, *, options):
            return ExtractedText(content=content.decode().upper())

    registry = ParserRegistry()
    registry.register(SourceKind.TEXT, UpperParser)

    assert extract_document("a.txt", b"salom", registry=registry).content == "SALOM"

    with pytest.raises(ValueError):
        registry.register(SourceKind.UNSUPPORTED, UpperParser)
