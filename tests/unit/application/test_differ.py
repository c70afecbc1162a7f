"""
Name: Differ Unit Tests

Responsibilities:
  - Exact run sequence for the reference scenario
  - Dual reconstruction for assorted pairs
  - Identity and empty inputs
  - Heavily edited text (block-matching heuristic) rebuilds exactly
"""

import pytest

from matn_tahlili.application.differ import diff, tokenize
from matn_tahlili.domain.entities import (
    AnnotatedRun,
    RunKind,
    corrected_text,
    original_text,
)

pytestmark = pytest.mark.unit

PAIRS = [
    ("Men maktabga bordim va kitop oqidim.", "Men maktabga bordim va kitob o'qidim."),
    ("", "yangi matn"),
    ("eski matn", ""),
    ("bir  ikki\n\nuch", "bir ikki\nuch"),
    ("Salom, dunyo!", "Salom dunyo!!"),
    ("a b c d e", "e d c b a"),
    ("  boshida va oxirida  ", "boshida va oxirida"),
]


def test_reference_scenario_runs(sample_runs):
    runs = diff(
        "Men maktabga bordim va kitop oqidim.",
        "Men maktabga bordim va kitob o'qidim.",
    )
    assert runs == sample_runs


@pytest.mark.parametrize("original, corrected", PAIRS)
def test_dual_reconstruction(original, corrected):
    runs = diff(original, corrected)

    assert original_text(runs) == original
    assert corrected_text(runs) == corrected


@pytest.mark.parametrize("original, corrected", PAIRS)
def test_adjacent_runs_never_share_kind(original, corrected):
    runs = diff(original, corrected)
    assert all(a.kind != b.kind for a, b in zip(runs, runs[1:]))
    assert all(run.text for run in runs)


def test_identity_is_single_same_run():
    text = "Hech qanday o'zgarish yo'q.\n\nIkkinchi xat boshi."
    assert diff(text, text) == [AnnotatedRun(text, RunKind.SAME)]


def test_empty_pair_yields_no_runs():
    assert diff("", "") == []


def test_is_deterministic():
    a, b = PAIRS[5]
    assert diff(a, b) == diff(a, b)


def test_tokenize_is_lossless_and_keeps_apostrophe_words():
    text = "U o'qidim, 12-sinf  bilan!\n"
    tokens = tokenize(text)
    assert "".join(tokens) == text
    assert "o'qidim" in tokens
    assert "12-sinf" in tokens
    assert "  " in tokens


def test_heavily_edited_text_still_rebuilds_both_sides():
    original = " ".join(f"soz{i % 7}" for i in range(120))
    corrected = " ".join(f"soz{(i * 3) % 7}" for i in range(100)) + " yangi"

    runs = diff(original, corrected)

    assert original_text(runs) == original
    assert corrected_text(runs) == corrected
    assert any(run.kind == RunKind.SAME for run in runs)
