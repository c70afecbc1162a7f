import pytest

from matn_tahlili.domain.entities import (
    CorrectionKind,
    CorrectionRecord,
    corrected_text,
    original_text,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "wrong, correct",
    [("", "x"), ("x", ""), ("same", "same"), ("", "")],
)
def test_noop_records(wrong, correct):
    assert CorrectionRecord(wrong=wrong, correct=correct).is_noop


def test_real_record_is_not_noop():
    record = CorrectionRecord(wrong="kitop", correct="kitob")
    assert not record.is_noop
    assert record.kind == CorrectionKind.GRAMMAR


def test_reconstruction_helpers(sample_runs):
    assert original_text(sample_runs) == "Men maktabga bordim va kitop oqidim."
    assert corrected_text(sample_runs) == "Men maktabga bordim va kitob o'qidim."
