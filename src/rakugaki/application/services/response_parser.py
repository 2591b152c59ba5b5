from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError

from rakugaki.domain.errors import ParseError, ParseErrorKind
from rakugaki.domain.evaluation import Evaluation

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"^```[a-z0-9_+\-]*\s*", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\s*```$", re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    cleaned = _LEADING_FENCE_RE.sub("", text)
    return _TRAILING_FENCE_RE.sub("", cleaned)


def extract_json_object(text: str) -> str:
    """Return the span from the first ``{`` to the last ``}``."""
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end < 0 or end <= start:
        raise ParseError(
            ParseErrorKind.INVALID_STRUCTURE,
            "no JSON object found",
            raw_text=text,
        )
    return text[start : end + 1]


def _first_issue(exc: ValidationError) -> tuple[str, str]:
    issues = exc.errors()
    if not issues:
        return "unknown", "validation failed"
    first = issues[0]
    path = ".".join(str(part) for part in first.get("loc") or ()) or "unknown"
    return path, str(first.get("msg") or "validation failed")


def parse_evaluation(raw: str) -> Evaluation:
    """
    Turn raw model text into a validated Evaluation.

    Tolerant of prose and code fences around the payload, strict about the
    payload itself. Raises ParseError with kind InvalidStructure, DecodeError
    or SchemaViolation.
    """
    text = strip_code_fence((raw or "").strip())
    payload = extract_json_object(text)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ParseError(ParseErrorKind.DECODE_ERROR, str(e), raw_text=raw or "", cause=e) from e

    if not isinstance(data, dict):
        raise ParseError(
            ParseErrorKind.SCHEMA_VIOLATION,
            f"expected a JSON object, got {type(data).__name__}",
            raw_text=raw or "",
        )

    try:
        return Evaluation.model_validate(data)
    except ValidationError as e:
        path, reason = _first_issue(e)
        logger.debug("Evaluation schema violation issues=%s", e.errors())
        raise ParseError(
            ParseErrorKind.SCHEMA_VIOLATION,
            f"{path} - {reason}",
            field=path,
            raw_text=raw or "",
            cause=e,
        ) from e
