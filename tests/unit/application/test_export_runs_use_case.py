import pytest

from matn_tahlili.application.usecases import ExportRunsUseCase
from matn_tahlili.crosscutting.exceptions import EmptyExportError
from matn_tahlili.domain.entities import ExportFormat

pytestmark = pytest.mark.unit


def test_plain_marked_file(sample_runs):
    exported = ExportRunsUseCase().execute(
        sample_runs, ExportFormat.PLAIN_MARKED, "mening insho"
    )

    assert exported.filename == "mening insho.txt"
    assert exported.content_type == "text/plain; charset=utf-8"
    assert b"~~kitop~~[[kitob]]" in exported.content


def test_rich_text_file_uses_default_name(sample_runs):
    exported = ExportRunsUseCase().execute(sample_runs, ExportFormat.RICH_TEXT)

    assert exported.filename == "togrilangan-matn.docx"
    assert exported.content.startswith(b"PK")


def test_empty_runs_raise():
    with pytest.raises(EmptyExportError):
        ExportRunsUseCase().execute([], ExportFormat.PLAIN_MARKED)
