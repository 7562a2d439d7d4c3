"""
Unit tests for body decoding and value stringification.
"""

import pytest

from pagefetch.exceptions import JsonDecodeError
from pagefetch.serializer import decode_body, json_type_name, stringify


@pytest.mark.unit
class TestDecodeBody:
    def test_decode_text(self):
        assert decode_body('[{"id": 1}]') == [{"id": 1}]

    def test_decode_bytes(self):
        assert decode_body('{"name": "café"}'.encode()) == {"name": "café"}

    def test_malformed_json_raises(self):
        with pytest.raises(JsonDecodeError) as exc_info:
            decode_body("{not json")

        assert exc_info.value.original_error is not None
        assert "Failed to parse JSON response" in exc_info.value.message

    def test_invalid_utf8_raises(self):
        with pytest.raises(JsonDecodeError):
            decode_body(b"\xff\xfe\x00")

    def test_empty_body_raises(self):
        with pytest.raises(JsonDecodeError):
            decode_body("")


@pytest.mark.unit
class TestJsonTypeName:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ({}, "object"),
            ([], "array"),
            ("x", "string"),
            (1, "number"),
            (1.5, "number"),
            (True, "boolean"),
            (None, "null"),
        ],
    )
    def test_json_type_names(self, value, expected):
        assert json_type_name(value) == expected


@pytest.mark.unit
class TestStringify:
    def test_json_spelling_for_literals(self):
        assert stringify(True) == "true"
        assert stringify(False) == "false"
        assert stringify(None) == "null"

    def test_scalars(self):
        assert stringify("Alice") == "Alice"
        assert stringify(42) == "42"
        assert stringify(2.5) == "2.5"

    def test_containers_are_compact_json(self):
        assert stringify({"city": "Rome"}) == '{"city":"Rome"}'
        assert stringify([1, "a"]) == '[1,"a"]'
