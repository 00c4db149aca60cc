"""Tests for JSON completion parsing helpers."""

import pytest

from src.services.json_result import (
    JsonParseError,
    JsonResult,
    extract_json_object,
    parse_json_object,
    strip_code_fences,
)


class TestJsonResult:
    def test_unwrap_or_default_returns_value(self):
        assert JsonResult.ok({"a": 1}).unwrap_or_default({}) == {"a": 1}

    def test_unwrap_or_default_returns_fallback_on_error(self):
        result = JsonResult.fail(JsonParseError("bad"))
        assert result.unwrap_or_default({"fallback": True}) == {"fallback": True}

    def test_unwrap_raises_carried_error(self):
        with pytest.raises(JsonParseError, match="bad"):
            JsonResult.fail(JsonParseError("bad")).unwrap()


class TestParseJsonObject:
    def test_parses_object(self):
        result = parse_json_object('{"summary": "x"}')
        assert result.is_ok
        assert result.value == {"summary": "x"}

    @pytest.mark.parametrize("text", [None, "", "not json", "[1, 2]", '"str"'])
    def test_rejects_non_objects(self, text):
        result = parse_json_object(text)
        assert not result.is_ok
        assert isinstance(result.error, JsonParseError)


class TestExtractJsonObject:
    def test_ignores_surrounding_prose(self):
        text = 'Sure! Here you go: {"eventType": "meeting"} Hope that helps.'
        assert extract_json_object(text).value == {"eventType": "meeting"}

    def test_fails_without_braces(self):
        assert not extract_json_object("no json here").is_ok


class TestStripCodeFences:
    def test_removes_fences_and_comments(self):
        text = '```json\n{\n  "events": [] // none found\n}\n```'
        assert strip_code_fences(text) == '{\n  "events": [] \n}'

    def test_keeps_urls_in_strings(self):
        text = '{"link": "https://example.com"}'
        assert strip_code_fences(text) == text
