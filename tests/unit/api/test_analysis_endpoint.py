"""
Name: /api/analyze Endpoint Tests

Responsibilities:
  - Pasted text and TXT/DOCX uploads produce AnalyzeRes
  - Error mapping (unsupported, empty, oversized, oracle failure)
  - Request correlation header on success and error paths

Notes:
  - FAKE_ORACLE=1 (conftest) wires the deterministic fake oracle
"""

import pytest
from fastapi.testclient import TestClient

from matn_tahlili.api.main import app
from matn_tahlili.application.usecases import AnalyzeDocumentUseCase
from matn_tahlili.container import get_analyze_document_use_case
from matn_tahlili.crosscutting.exceptions import OracleError
from matn_tahlili.infrastructure.text.chunker import ParagraphChunker

pytestmark = pytest.mark.unit

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class FailingOracle:
    protocol = "structured"

    def correct(self, chunk):
        raise OracleError(chunk_index=chunk.index)


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_analyze_pasted_text(client):
    response = client.post(
        "/api/analyze", data={"text": "Men maktabga bordim va kitop oqidim."}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["original"] == "Men maktabga bordim va kitop oqidim."
    assert body["corrected"] == "Men maktabga bordim va kitob o'qidim."
    assert body["inputFormat"] == "text"
    assert body["runs"][1] == {"text": "kitop", "kind": "removed"}
    assert body["runs"][2] == {"text": "kitob", "kind": "added"}
    assert {c["wrong"] for c in body["corrections"]} == {"kitop", "oqidim"}
    assert response.headers["X-Request-Id"]


def test_analyze_txt_upload(client):
    content = "Bu notogri\r\nyozilgan matn.".encode("utf-8")
    response = client.post(
        "/api/analyze", files={"file": ("insho.txt", content, "text/plain")}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["inputFormat"] == "txt"
    assert body["filename"] == "insho.txt"
    assert body["original"] == "Bu notogri\nyozilgan matn."
    assert body["corrected"] == "Bu noto'g'ri\nyozilgan matn."


def test_analyze_docx_upload(client, make_docx):
    content = make_docx(["Birinchi kitop.", "Ikkinchi xat boshi."])
    response = client.post(
        "/api/analyze", files={"file": ("hujjat.docx", content, DOCX_MIME)}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["inputFormat"] == "docx"
    assert body["original"] == "Birinchi kitop.\n\nIkkinchi xat boshi."
    assert body["corrected"] == "Birinchi kitob.\n\nIkkinchi xat boshi."


def test_file_takes_precedence_over_text(client):
    response = client.post(
        "/api/analyze",
        data={"text": "bu e'tiborga olinmaydi"},
        files={"file": ("a.txt", b"fayldagi kitop", "text/plain")},
    )

    assert response.status_code == 200
    assert response.json()["original"] == "fayldagi kitop"


def test_unsupported_extension(client):
    response = client.post(
        "/api/analyze", files={"file": ("rasm.pdf", b"%PDF", "application/pdf")}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "UNSUPPORTED_FORMAT"
    assert body["error"] == "Faqat TXT yoki DOCX fayl yuklang."
    assert body["request_id"] == response.headers["X-Request-Id"]


def test_corrupt_docx(client):
    response = client.post(
        "/api/analyze", files={"file": ("buzuq.docx", b"zip emas", DOCX_MIME)}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_DOCUMENT"


@pytest.mark.parametrize("data", [{}, {"text": ""}, {"text": "   "}])
def test_missing_or_blank_input(client, data):
    response = client.post("/api/analyze", data=data)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "EMPTY_INPUT"
    assert body["error"] == "Matn topilmadi"


def test_blank_txt_upload_is_empty_input(client):
    response = client.post(
        "/api/analyze", files={"file": ("bosh.txt", b"\n\n  \n", "text/plain")}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "EMPTY_INPUT"


def test_oversized_upload(client, monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "10")

    response = client.post(
        "/api/analyze", files={"file": ("katta.txt", b"x" * 64, "text/plain")}
    )

    assert response.status_code == 413
    assert response.json()["code"] == "PAYLOAD_TOO_LARGE"


def test_oversized_text(client, monkeypatch):
    monkeypatch.setenv("MAX_INPUT_CHARS", "20")

    response = client.post("/api/analyze", data={"text": "uzun matn " * 5})

    assert response.status_code == 413
    body = response.json()
    assert body["code"] == "PAYLOAD_TOO_LARGE"
    assert "20" in body["error"]


def test_oracle_failure_maps_to_500(client):
    app.dependency_overrides[get_analyze_document_use_case] = lambda: (
        AnalyzeDocumentUseCase(FailingOracle(), ParagraphChunker())
    )

    response = client.post("/api/analyze", data={"text": "Salom dunyo, qalaysan?"})

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "ORACLE_ERROR"
    assert body["error_id"]


def test_incoming_request_id_is_echoed(client):
    response = client.post(
        "/api/analyze",
        data={"text": "Hammasi joyida."},
        headers={"X-Request-Id": "req-123"},
    )

    assert response.status_code == 200
    assert response.headers["X-Request-Id"] == "req-123"
