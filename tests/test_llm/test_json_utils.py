"""Tests for JSON extraction utility."""

import pytest

from article_dedup.llm.exceptions import LLMResponseError
from article_dedup.llm.json_utils import extract_json, snake_keys


class TestExtractCleanJson:
    def test_simple_object(self):
        assert extract_json('{"is_duplicate": true}') == {"is_duplicate": True}

    def test_with_whitespace(self):
        assert extract_json('  {"a": 1}  ') == {"a": 1}

    def test_nested_duplicates_list(self):
        text = '{"is_duplicate": true, "duplicates": [{"url": "u2", "reason": "Same H1"}]}'
        result = extract_json(text)
        assert result["duplicates"][0]["url"] == "u2"

    def test_top_level_array_rejected(self):
        with pytest.raises(LLMResponseError, match="got an array"):
            extract_json('[{"url": "u2"}]')

    def test_array_of_verdicts_rejected(self):
        with pytest.raises(LLMResponseError):
            extract_json('  [{"is_duplicate": true, "reason": "Same H1"}]\n')

    def test_fenced_array_rejected(self):
        with pytest.raises(LLMResponseError, match="got an array"):
            extract_json('```json\n[{"is_duplicate": true}]\n```')


class TestExtractMarkdownFenced:
    def test_json_tag(self):
        text = '```json\n{"is_duplicate": false}\n```'
        assert extract_json(text) == {"is_duplicate": False}

    def test_no_tag(self):
        text = '```\n{"reason": "Identical H1"}\n```'
        assert extract_json(text) == {"reason": "Identical H1"}

    def test_with_extra_text_around_fence(self):
        text = 'Verdict:\n```json\n{"is_duplicate": true}\n```\nDone.'
        assert extract_json(text) == {"is_duplicate": True}


class TestExtractSurroundingText:
    def test_text_before_and_after(self):
        text = 'Here is the result:\n{"similarity_score": 0.9}\nHope this helps!'
        assert extract_json(text) == {"similarity_score": 0.9}

    def test_text_before_only(self):
        assert extract_json('Result: {"a": 1}') == {"a": 1}


class TestExtractFailures:
    def test_empty_string(self):
        with pytest.raises(LLMResponseError, match="Empty LLM response"):
            extract_json("")

    def test_whitespace_only(self):
        with pytest.raises(LLMResponseError, match="Empty LLM response"):
            extract_json("   ")

    def test_no_json(self):
        with pytest.raises(LLMResponseError, match="Failed to extract JSON"):
            extract_json("These articles are not duplicates")

    def test_invalid_json(self):
        with pytest.raises(LLMResponseError):
            extract_json("{invalid json content}")


class TestSnakeKeys:
    def test_camel_case(self):
        assert snake_keys({"isDuplicate": True, "similarityScore": 0.5}) == {
            "is_duplicate": True,
            "similarity_score": 0.5,
        }

    def test_snake_case_untouched(self):
        assert snake_keys({"is_duplicate": False, "reason": "x"}) == {
            "is_duplicate": False,
            "reason": "x",
        }
