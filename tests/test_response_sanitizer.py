"""
Unit tests for generative response sanitisation.

Tests:
- Code fence stripping
- Outermost-object extraction
- Parse errors vs schema errors
"""

import sys
import os
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.errors import ResponseParseError, ResponseSchemaError
from services.response_sanitizer import (
    extract_json_object,
    parse_translation_response,
    strip_code_fences,
)


class TestStripCodeFences:

    def test_removes_json_fence(self):
        assert strip_code_fences('```json\n{"items": []}\n```') == '{"items": []}'

    def test_removes_uppercase_and_bare_fences(self):
        assert strip_code_fences('```JSON\n{"a": 1}```') == '{"a": 1}'
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_leaves_plain_json_untouched(self):
        assert strip_code_fences('  {"items": []}  ') == '{"items": []}'


class TestExtractJsonObject:

    def test_discards_surrounding_prose(self):
        text = 'Here you go: {"items": [{"thai": "ก"}]} Let me know!'
        assert extract_json_object(text) == '{"items": [{"thai": "ก"}]}'

    def test_keeps_nested_objects(self):
        text = 'x {"a": {"b": {}}} y'
        assert extract_json_object(text) == '{"a": {"b": {}}}'

    def test_without_braces_returns_input(self):
        assert extract_json_object('no json here') == 'no json here'


class TestParseTranslationResponse:

    def test_parses_fenced_response_with_prose(self):
        raw = 'Result:\n```json\n{"items": [{"id": 1, "thai": "ผัดไทย", "zh": "泰式炒河粉"}]}\n```\nThanks'

        result = parse_translation_response(raw)

        assert len(result.items) == 1
        assert result.items[0].thai == 'ผัดไทย'
        assert result.items[0].zh == '泰式炒河粉'

    def test_keeps_unknown_fields(self):
        raw = '{"items": [{"thai": "ก", "zh": "甲", "calories": 300}]}'

        result = parse_translation_response(raw)

        assert result.to_dict()['items'][0]['calories'] == 300

    def test_omits_absent_optional_fields(self):
        result = parse_translation_response('{"items": [{"thai": "ก", "zh": "甲"}]}')

        assert result.to_dict() == {'items': [{'thai': 'ก', 'zh': '甲'}]}

    def test_missing_text_fields_default_to_empty(self):
        result = parse_translation_response('{"items": [{"id": 3, "thai": null}]}')

        assert result.items[0].thai == ''
        assert result.items[0].zh == ''

    def test_scalar_tag_is_wrapped_in_list(self):
        raw = '{"items": [{"id": 1, "thai": "ต้มยำกุ้ง", "zh": "冬蔭功", "tags": "推薦"}]}'

        result = parse_translation_response(raw)

        assert result.items[0].tags == ['推薦']
        assert result.items[0].zh == '冬蔭功'

    def test_bad_field_is_dropped_without_losing_items(self):
        raw = (
            '{"items": ['
            '{"id": 1, "thai": "ผัดไทย", "zh": "泰式炒河粉", "isSpicy": "very", "desc": {"note": "x"}},'
            '{"id": 2, "thai": "ส้มตำ", "zh": "青木瓜沙拉", "tags": 5, "isSpicy": "true"}'
            ']}'
        )

        result = parse_translation_response(raw)
        items = result.to_dict()['items']

        assert len(items) == 2
        assert 'isSpicy' not in items[0]
        assert 'desc' not in items[0]
        assert items[0]['zh'] == '泰式炒河粉'
        assert items[1]['isSpicy'] is True
        assert 'tags' not in items[1]

    def test_numeric_text_fields_are_stringified(self):
        result = parse_translation_response('{"items": [{"thai": 123, "zh": "甲", "price": 80.5}]}')

        assert result.items[0].thai == '123'
        assert result.items[0].price == '80.5'

    def test_invalid_json_raises_parse_error(self):
        with pytest.raises(ResponseParseError) as exc_info:
            parse_translation_response('I cannot help with that.')

        assert exc_info.value.kind == 'ResponseParseError'
        assert exc_info.value.raw == 'I cannot help with that.'

    def test_truncated_json_raises_parse_error(self):
        with pytest.raises(ResponseParseError):
            parse_translation_response('{"items": [{"thai": "ก", "zh": }]}')

    def test_missing_items_raises_schema_error(self):
        with pytest.raises(ResponseSchemaError) as exc_info:
            parse_translation_response('{"result": "ok"}')

        assert exc_info.value.kind == 'ResponseSchemaError'

    def test_items_of_wrong_type_raise_schema_error(self):
        with pytest.raises(ResponseSchemaError):
            parse_translation_response('{"items": ["ผัดไทย"]}')

    def test_none_raises_parse_error(self):
        with pytest.raises(ResponseParseError):
            parse_translation_response(None)
