"""
Name: Reconciler Unit Tests

Responsibilities:
  - Boundary-scoped replacement for single-token records
  - Literal replacement for phrases / punctuation
  - No-op safety and ordered application
"""

import pytest

from matn_tahlili.application.reconciler import (
    applied_records,
    is_single_token,
    reconcile,
    reconcile_detailed,
)
from matn_tahlili.domain.entities import CorrectionRecord, FullText, Records

pytestmark = pytest.mark.unit

BASE = "bu yerda notogri soz"


def _records(*pairs) -> Records:
    return Records(tuple(CorrectionRecord(wrong=w, correct=c) for w, c in pairs))


def test_single_token_record_is_applied():
    assert reconcile(BASE, _records(("notogri", "noto'g'ri"))) == "bu yerda noto'g'ri soz"


def test_single_token_does_not_touch_longer_words():
    assert reconcile(BASE, _records(("yer", "X"))) == BASE


def test_absent_wrong_is_silent_noop():
    assert reconcile(BASE, _records(("yoq", "yo'q"))) == BASE


def test_noop_records_are_discarded():
    assert reconcile(BASE, _records(("soz", "soz"), ("", "x"), ("bu", ""))) == BASE


def test_all_occurrences_replaced_in_one_pass():
    text = "kitop, kitop va kitoplar"
    assert reconcile(text, _records(("kitop", "kitob"))) == "kitob, kitob va kitoplar"


def test_phrase_is_literal_unanchored():
    text = "U maktabga bordi.Keyin uyga"
    result = reconcile(text, _records(("bordi.Keyin", "bordi. Keyin")))
    assert result == "U maktabga bordi. Keyin uyga"


def test_regex_metacharacters_are_literal():
    text = "narxi (10$) edi"
    assert reconcile(text, _records(("(10$)", "(10 $)"))) == "narxi (10 $) edi"


def test_replacement_is_not_expanded_as_backreference():
    assert reconcile("ab cd", _records(("cd", r"\1\g<0>"))) == r"ab \1\g<0>"


def test_records_apply_in_order_on_working_copy():
    text = "aaa bbb"
    result = reconcile(text, _records(("aaa", "bbb"), ("bbb", "ccc")))
    assert result == "ccc ccc"


def test_apostrophe_words_are_single_tokens():
    assert is_single_token("o'qidim")
    assert is_single_token("qo‘shma")
    assert is_single_token("ikki-uch")
    assert not is_single_token("ikki so'z")
    assert not is_single_token("soz.")


def test_full_text_is_adopted_unchanged():
    assert reconcile(BASE, FullText("butunlay boshqa matn")) == "butunlay boshqa matn"


def test_applied_records_reports_only_effective_records():
    records = [
        CorrectionRecord(wrong="notogri", correct="noto'g'ri"),
        CorrectionRecord(wrong="yer", correct="X"),
        CorrectionRecord(wrong="soz", correct="so'z"),
    ]
    text, applied = applied_records(BASE, records)

    assert text == "bu yerda noto'g'ri so'z"
    assert [r.wrong for r in applied] == ["notogri", "soz"]


def test_detailed_full_text_has_no_records():
    assert reconcile_detailed(BASE, FullText("boshqa")) == ("boshqa", [])


def test_detailed_records_match_reconcile():
    outcome = _records(("notogri", "noto'g'ri"), ("yer", "X"))
    text, applied = reconcile_detailed(BASE, outcome)

    assert text == reconcile(BASE, outcome)
    assert [r.wrong for r in applied] == ["notogri"]


def test_unknown_outcome_is_rejected():
    with pytest.raises(TypeError):
        reconcile_detailed(BASE, "matn")
