from __future__ import annotations

import json

import pytest

from elastic_lite.errors import DecodeError
from elastic_lite.protocol.spans import array_items, document_source, hit_sources, object_members


def test_object_members_yields_raw_value_spans() -> None:
    text = '{ "a" : 1.50, "b": {"c": [1, 2]}, "d": "x\\"y" }'

    members = {name: text[start:end] for name, (start, end) in object_members(text)}

    assert members == {"a": "1.50", "b": '{"c": [1, 2]}', "d": '"x\\"y"'}


def test_array_items_handles_empty_and_nested_arrays() -> None:
    text = ' [ [], {"a": [1]} , 3e2 ] '

    assert [text[start:end] for start, end in array_items(text)] == ["[]", '{"a": [1]}', "3e2"]
    assert list(array_items("[]")) == []


@pytest.mark.parametrize("text", ["[1 2]", '{"a" 1}', '{"a": 1,}', "nope"])
def test_malformed_json_raises_json_decode_error(text: str) -> None:
    with pytest.raises(json.JSONDecodeError):
        list(object_members(text) if text.startswith("{") else array_items(text))


def test_document_source_uses_last_duplicate_key() -> None:
    assert document_source(b'{"_source": {"v": 1}, "_source": {"v": 2}}') == b'{"v": 2}'


def test_document_source_rejects_non_object_payload() -> None:
    with pytest.raises(DecodeError):
        document_source(b"[1]")


def test_hit_sources_ignores_nested_hits_keys_inside_sources() -> None:
    payload = b'{"hits": {"hits": [{"_source": {"hits": {"hits": [0]}}}]}, "took": 1}'

    assert hit_sources(payload) == [b'{"hits": {"hits": [0]}}']


def test_hit_sources_rejects_invalid_utf8() -> None:
    with pytest.raises(DecodeError, match="UTF-8"):
        hit_sources(b'{"hits": {"hits": [{"_source": "\xff"}]}}')
