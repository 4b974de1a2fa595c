import pytest

from chinese_namer.parser import MalformedPayload, parse_response, strip_code_fences

from conftest import VALID_JSON


@pytest.mark.parametrize("raw,expected", [
    ('```json\n{"names": []}\n```', '{"names": []}'),
    ('```json{"names": []}```', '{"names": []}'),
    ('```\n{"names": []}\n```', '{"names": []}'),
    ('  {"names": []}  ', '{"names": []}'),
    ('{"names": []}', '{"names": []}'),
])
def test_strip_code_fences(raw, expected):
    assert strip_code_fences(raw) == expected


def test_strip_code_fences_leaves_other_text_alone():
    assert strip_code_fences("Here you go:\n```json\n{}\n```") == "Here you go:{}"
    assert strip_code_fences("{\"pinyin\": \"Yuē hàn\"}") == "{\"pinyin\": \"Yuē hàn\"}"


def test_parse_plain_json():
    records = parse_response(VALID_JSON)
    assert len(records) == 3
    assert records[0]["chineseName"] == "乔安"


def test_parse_fenced_json():
    records = parse_response(f"```json\n{VALID_JSON}\n```")
    assert [r["pinyin"] for r in records] == ["Qiáo ān", "Zhuó ēn", "Jùn lǎng"]


def test_records_are_returned_unvalidated():
    records = parse_response('{"names": [{"chineseName": ""}, "junk"]}')
    assert records == [{"chineseName": ""}, "junk"]


@pytest.mark.parametrize("raw", [
    "Sorry, I cannot help with that.",
    '{"names": [',
    '{"suggestions": []}',
    '{"names": "约翰"}',
    '[{"chineseName": "约翰"}]',
    "",
])
def test_malformed_payloads(raw):
    with pytest.raises(MalformedPayload):
        parse_response(raw)
