import json

import pytest

from conftest import evaluation_payload
from rakugaki.application.services.response_parser import (
    extract_json_object,
    parse_evaluation,
    strip_code_fence,
)
from rakugaki.domain.errors import ParseError, ParseErrorKind
from rakugaki.domain.evaluation import DEFAULT_DIMENSIONS


def test_parse_plain_json():
    evaluation = parse_evaluation(json.dumps(evaluation_payload()))

    assert evaluation.title == "Silent Orbit"
    assert evaluation.price == 5_000_000
    assert evaluation.next_expectation.startswith("Expect")


def test_parse_tolerates_prose_and_code_fence():
    raw = (
        "Here is my verdict on this masterpiece:\n"
        "```json\n"
        f"{json.dumps(evaluation_payload(), ensure_ascii=False, indent=2)}\n"
        "```\n"
        "I hope the auction goes well."
    )

    assert parse_evaluation(raw) == parse_evaluation(json.dumps(evaluation_payload()))


def test_parse_fenced_json_between_greeting_and_signoff():
    bare = json.dumps(evaluation_payload(title="Morning Static", price=12_000_000))
    raw = f"Here you go:\n```json\n{bare}\n```\nEnjoy!"

    evaluation = parse_evaluation(raw)

    assert evaluation == parse_evaluation(bare)
    assert evaluation.title == "Morning Static"
    assert evaluation.price == 12_000_000


def test_parse_strips_uppercase_fence_and_whitespace():
    raw = "\n\n```JSON\n" + json.dumps(evaluation_payload()) + "\n```\n  "

    assert parse_evaluation(raw).medium == "Crayon on digital paper"


def test_parse_defaults_dimensions_and_ignores_extra_keys():
    payload = evaluation_payload(mood="melancholic")
    payload.pop("dimensions")

    evaluation = parse_evaluation(json.dumps(payload))

    assert evaluation.dimensions == DEFAULT_DIMENSIONS
    assert "mood" not in evaluation.to_dict()


def test_parse_accepts_continuation_fields():
    payload = evaluation_payload(priceChange="increase", priceChangeReason="Bolder strokes than before.")

    evaluation = parse_evaluation(json.dumps(payload))

    assert evaluation.price_change.value == "increase"
    assert evaluation.to_dict()["priceChangeReason"] == "Bolder strokes than before."


@pytest.mark.parametrize("raw", ["", "   ", "no braces at all", "} backwards {"])
def test_parse_rejects_missing_object(raw):
    with pytest.raises(ParseError) as exc_info:
        parse_evaluation(raw)

    assert exc_info.value.kind == ParseErrorKind.INVALID_STRUCTURE
    assert "no JSON object found" in str(exc_info.value)


def test_parse_reports_decode_error():
    with pytest.raises(ParseError) as exc_info:
        parse_evaluation("{title: 'not json'}")

    assert exc_info.value.kind == ParseErrorKind.DECODE_ERROR
    assert exc_info.value.code == "PARSE_ERROR"


def test_parse_rejects_price_below_minimum():
    with pytest.raises(ParseError) as exc_info:
        parse_evaluation(json.dumps(evaluation_payload(price=999_999)))

    err = exc_info.value
    assert err.kind == ParseErrorKind.SCHEMA_VIOLATION
    assert err.field == "price"
    assert err.reason.startswith("price - ")


@pytest.mark.parametrize("price", ["5000000", 5000000.5, True, 10_000_000_001])
def test_parse_rejects_coerced_or_out_of_range_price(price):
    with pytest.raises(ParseError) as exc_info:
        parse_evaluation(json.dumps(evaluation_payload(price=price)))

    assert exc_info.value.kind == ParseErrorKind.SCHEMA_VIOLATION


def test_parse_rejects_short_critique():
    with pytest.raises(ParseError) as exc_info:
        parse_evaluation(json.dumps(evaluation_payload(critique="Too short.")))

    assert exc_info.value.field == "critique"


def test_parse_rejects_unknown_price_change():
    with pytest.raises(ParseError) as exc_info:
        parse_evaluation(json.dumps(evaluation_payload(priceChange="skyrocket")))

    assert exc_info.value.field == "priceChange"


def test_parse_keeps_raw_text_for_diagnostics():
    raw = "```json\n{\"title\": 1}\n```"

    with pytest.raises(ParseError) as exc_info:
        parse_evaluation(raw)

    assert exc_info.value.raw_text == raw


def test_strip_code_fence_only_touches_edges():
    assert strip_code_fence("```python\n{}\n```") == "{}"
    assert strip_code_fence("{\"a\": \"```\"}") == "{\"a\": \"```\"}"


def test_extract_json_object_spans_first_to_last_brace():
    assert extract_json_object('x {"a": {"b": 1}} y') == '{"a": {"b": 1}}'
