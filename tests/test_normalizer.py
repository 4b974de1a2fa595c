import pytest

from chinese_namer.fallback import GENERIC_NAMES
from chinese_namer.llm_service import ModelTimeout, UpstreamError
from chinese_namer.models import NameCandidate, SUGGESTION_FIELDS
from chinese_namer.normalizer import (
    ALTERNATE_MARKER,
    is_complete,
    normalize_outcome,
    normalize_suggestions,
)
from chinese_namer.parser import MalformedPayload


def record(n: int) -> dict:
    return {
        "chineseName": f"名{n}",
        "pinyin": f"Míng {n}",
        "chineseMeaning": f"寓意{n}",
        "englishMeaning": f"Meaning {n}",
    }


def assert_complete_set(names):
    assert len(names) == 3
    for suggestion in names:
        for field in SUGGESTION_FIELDS:
            assert getattr(suggestion, field).strip()


@pytest.mark.parametrize("error", [
    ModelTimeout("slow"),
    UpstreamError("502"),
    MalformedPayload("not json"),
])
def test_pipeline_errors_fall_back(error):
    outcome = normalize_outcome(error, NameCandidate("John"))
    assert outcome.source == "fallback"
    assert outcome.names[0].chineseName == "约翰"
    assert_complete_set(outcome.names)


def test_three_valid_records_pass_through():
    outcome = normalize_outcome([record(1), record(2), record(3)], NameCandidate("Alice"))
    assert outcome.source == "model"
    assert [s.chineseName for s in outcome.names] == ["名1", "名2", "名3"]


def test_single_record_is_padded_with_alternates():
    names = normalize_suggestions([record(1)], NameCandidate("Alice"))

    assert_complete_set(names)
    assert names[0].chineseName == "名1"
    for padded in names[1:]:
        assert padded.chineseName == "名1" + ALTERNATE_MARKER
        assert padded.pinyin == "Míng 1"
        assert padded.englishMeaning == "Meaning 1"


def test_two_records_pad_from_the_last():
    names = normalize_suggestions([record(1), record(2)], NameCandidate("Alice"))
    assert [s.chineseName for s in names] == ["名1", "名2", "名2" + ALTERNATE_MARKER]


def test_five_records_are_truncated():
    names = normalize_suggestions([record(i) for i in range(1, 6)], NameCandidate("Alice"))
    assert [s.chineseName for s in names] == ["名1", "名2", "名3"]


def test_incomplete_records_are_filtered_before_padding():
    blank = dict(record(2), pinyin="  ")
    missing = {k: v for k, v in record(3).items() if k != "englishMeaning"}
    wrong_type = dict(record(4), chineseMeaning=None)
    names = normalize_suggestions([blank, record(1), missing, wrong_type, "junk"], NameCandidate("Alice"))
    assert [s.chineseName for s in names] == ["名1", "名1" + ALTERNATE_MARKER, "名1" + ALTERNATE_MARKER]


def test_extra_fields_are_dropped():
    names = normalize_suggestions([dict(record(1), tone="rising")] * 3, NameCandidate("Alice"))
    assert "tone" not in names[0].model_dump()


@pytest.mark.parametrize("records", [[], [{"chineseName": "约翰"}], ["a", 1, None], None])
def test_nothing_usable_falls_back_to_generic(records):
    outcome = normalize_outcome(records, NameCandidate("Zephyr"))
    assert outcome.source == "fallback"
    assert outcome.names == list(GENERIC_NAMES)


def test_is_complete():
    assert is_complete(record(1))
    assert not is_complete(dict(record(1), chineseName=""))
    assert not is_complete(["not", "a", "dict"])
