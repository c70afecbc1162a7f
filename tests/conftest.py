"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test, FAKE_ORACLE=1, no .env)
  - Reset cached settings/singletons between tests
  - Provide small builders for chunks, runs and docx payloads

Notes:
  - Fixtures are auto-discovered by pytest
  - The real Google oracle is never reached from tests
"""

import os
from io import BytesIO

import pytest

os.environ.setdefault("APP_ENV", "test")
os.environ["FAKE_ORACLE"] = "1"
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["ORACLE_CALL_DELAY_SECONDS"] = "0"

from matn_tahlili.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from matn_tahlili import container  # noqa: E402
from matn_tahlili.domain.entities import AnnotatedRun, RunKind  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


def _clear_caches() -> None:
    app_config.get_settings.cache_clear()
    container.get_retry_policy.cache_clear()
    container.get_correction_oracle.cache_clear()
    container.get_text_chunker.cache_clear()


@pytest.fixture(autouse=True)
def reset_singletons():
    _clear_caches()
    yield
    _clear_caches()


# ============================================================================
# Builders
# ============================================================================


@pytest.fixture
def sample_runs() -> list[AnnotatedRun]:
    """R: Runs del escenario 'kitop oqidim'."""
    return [
        AnnotatedRun("Men maktabga bordim va ", RunKind.SAME),
        AnnotatedRun("kitop", RunKind.REMOVED),
        AnnotatedRun("kitob", RunKind.ADDED),
        AnnotatedRun(" ", RunKind.SAME),
        AnnotatedRun("oqidim", RunKind.REMOVED),
        AnnotatedRun("o'qidim", RunKind.ADDED),
        AnnotatedRun(".", RunKind.SAME),
    ]


@pytest.fixture
def make_docx():
    """R: Construye un .docx en memoria con párrafos y (opcional) una tabla."""
    from docx import Document

    def _build(paragraphs: list[str], table: list[list[str]] | None = None) -> bytes:
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        if table:
            t = doc.add_table(rows=len(table), cols=len(table[0]))
            for r, row in enumerate(table):
                for c, value in enumerate(row):
                    t.cell(r, c).text = value
        buffer = BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    return _build
