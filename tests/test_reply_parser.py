"""Tests for the two-stage reply normaliser.

Run: python -m pytest tests/test_reply_parser.py -v
"""

from __future__ import annotations

import pytest

from guess_relay.reply_parser import (
    STAGE_FALLBACK,
    STAGE_STRUCTURED,
    from_raw_text,
    normalize_reply,
    parse_structured,
)


def test_structured_reply() -> None:
    result = normalize_reply('{"guess":"苹果","confidence":0.8}')
    assert result.to_payload() == {"guess": "苹果", "confidence": 0.8}
    assert result.stage == STAGE_STRUCTURED


def test_structured_guess_truncated_to_16_chars() -> None:
    long_guess = "一二三四五六七八九十甲乙丙丁戊己庚辛壬癸"
    assert len(long_guess) == 20
    result = normalize_reply('{"guess":"%s","confidence":0.5}' % long_guess)
    assert result.guess == long_guess[:16]
    assert result.confidence == 0.5


def test_non_json_reply_falls_back_to_text() -> None:
    result = normalize_reply("大概是猫")
    assert result.to_payload() == {"guess": "大概是猫", "confidence": None}
    assert result.stage == STAGE_FALLBACK


def test_fallback_text_is_truncated() -> None:
    result = normalize_reply("this is definitely a very long guess")
    assert result.guess == "this is definite"
    assert result.confidence is None


@pytest.mark.parametrize("content", ["", "   ", "\n\t", None])
def test_empty_reply_yields_sentinel(content: object) -> None:
    result = normalize_reply(content)
    assert result.guess == "不确定"
    assert result.confidence is None


def test_empty_guess_field_yields_sentinel() -> None:
    result = normalize_reply('{"guess":"","confidence":0.0}')
    assert result.guess == "不确定"
    assert result.confidence == 0.0


def test_missing_guess_field_yields_sentinel() -> None:
    result = normalize_reply('{"confidence":0.3}')
    assert result.guess == "不确定"
    assert result.confidence == 0.3


@pytest.mark.parametrize("raw", ['"0.9"', "true", "null", '[0.9]'])
def test_non_numeric_confidence_is_dropped(raw: str) -> None:
    result = normalize_reply('{"guess":"狗","confidence":%s}' % raw)
    assert result.guess == "狗"
    assert result.confidence is None


def test_integer_confidence_kept_as_float() -> None:
    result = normalize_reply('{"guess":"狗","confidence":1}')
    assert result.confidence == 1.0
    assert isinstance(result.confidence, float)


def test_non_string_guess_is_coerced() -> None:
    assert normalize_reply('{"guess":42}').guess == "42"
    assert normalize_reply('{"guess":true}').guess == "true"


@pytest.mark.parametrize("content", ["null", "42", '"苹果"', "[1,2]", "true"])
def test_json_non_object_yields_sentinel(content: str) -> None:
    result = normalize_reply(content)
    assert result.to_payload() == {"guess": "不确定", "confidence": None}
    assert result.stage == STAGE_STRUCTURED


def test_unparsable_reply_skips_structured_stage() -> None:
    assert parse_structured("大概是猫") is None
    assert parse_structured("") is None


def test_already_decoded_object_is_accepted() -> None:
    result = parse_structured({"guess": "房子", "confidence": 0.7})
    assert result is not None
    assert result.guess == "房子"


def test_raw_text_ignores_non_string_content() -> None:
    assert from_raw_text(["not", "text"]).guess == "不确定"
