"""
Name: /api/export Endpoint Tests (+ health, metrics, middleware)

Responsibilities:
  - Attachment download in both formats
  - Validation and empty-export errors
  - Health/metrics endpoints and body-size guard
  - Generic 500 envelope for unexpected errors
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from matn_tahlili.api.main import app
from matn_tahlili.application.usecases.export_runs import sanitize_base_name
from matn_tahlili.container import get_export_runs_use_case
from matn_tahlili.crosscutting.middleware import BodyLimitMiddleware
from matn_tahlili.interfaces.api.http.routers.export import content_disposition

pytestmark = pytest.mark.unit

RUNS = [
    {"text": "Men ", "kind": "same"},
    {"text": "kitop", "kind": "removed"},
    {"text": "kitob", "kind": "added"},
    {"text": ".", "kind": "same"},
]


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_export_plain_marked(client):
    response = client.post(
        "/api/export", json={"runs": RUNS, "format": "plainMarked", "baseName": "insho"}
    )

    assert response.status_code == 200
    assert response.content.decode("utf-8") == "Men ~~kitop~~[[kitob]]."
    assert response.headers["content-type"].startswith("text/plain")
    assert 'filename="insho.txt"' in response.headers["content-disposition"]


def test_export_defaults_to_plain_marked_and_default_name(client):
    response = client.post("/api/export", json={"runs": RUNS})

    assert response.status_code == 200
    assert "togrilangan-matn.txt" in response.headers["content-disposition"]


def test_export_rich_text(client):
    response = client.post(
        "/api/export", json={"runs": RUNS, "format": "richText", "baseName": "hisobot.docx"}
    )

    assert response.status_code == 200
    assert response.content[:2] == b"PK"
    assert "wordprocessingml" in response.headers["content-type"]
    assert 'filename="hisobot.docx"' in response.headers["content-disposition"]


def test_export_empty_runs(client):
    response = client.post("/api/export", json={"runs": [], "format": "richText"})

    assert response.status_code == 400
    assert response.json()["code"] == "EMPTY_EXPORT"


@pytest.mark.parametrize(
    "payload",
    [
        {"runs": [{"text": "a", "kind": "changed"}]},
        {"runs": RUNS, "format": "pdf"},
        {"runs": "bu ro'yxat emas"},
    ],
)
def test_export_validation_errors(client, payload):
    response = client.post("/api/export", json=payload)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_unexpected_error_returns_generic_envelope():
    class Boom:
        def execute(self, *args, **kwargs):
            raise RuntimeError("kutilmagan")

    app.dependency_overrides[get_export_runs_use_case] = lambda: Boom()
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.post("/api/export", json={"runs": RUNS})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "INTERNAL_ERROR"
    assert response.headers["X-Request-Id"] == body["request_id"]


# ============================================================================
# Helpers
# ============================================================================


@pytest.mark.parametrize(
    "base_name, expected",
    [
        (None, "togrilangan-matn"),
        ("", "togrilangan-matn"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\a\\insho.txt", "insho"),
        ('ya"xshi?<>', "yaxshi"),
        ("...", "togrilangan-matn"),
        ("x" * 300, "x" * 100),
    ],
)
def test_sanitize_base_name(base_name, expected):
    assert sanitize_base_name(base_name, extension="txt") == expected


def test_content_disposition_non_ascii():
    header = content_disposition("to'g'rilangan-o‘zbek.txt")

    assert header.startswith("attachment; ")
    assert "filename*=UTF-8''" in header
    assert "‘" not in header


# ============================================================================
# Health, metrics, body limit
# ============================================================================


def test_healthz(client):
    response = client.get("/healthz", headers={"X-Request-Id": "abc"})

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "request_id": "abc"}


def test_metrics_exposes_request_counter(client):
    client.get("/healthz")
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "matn_requests_total" in response.text


def test_body_limit_middleware_rejects_large_body():
    small = FastAPI()

    @small.post("/echo")
    async def echo():
        return {"ok": True}

    small.add_middleware(BodyLimitMiddleware, max_body_bytes=10)
    response = TestClient(small).post("/echo", content=b"x" * 64)

    assert response.status_code == 413
    body = response.json()
    assert body["code"] == "PAYLOAD_TOO_LARGE"
    assert response.headers["x-request-id"] == body["request_id"]
