# tests/conftest.py
"""
Pytest configuration and fixtures.
Adds src to sys.path so `import rakugaki` works without an install.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pytest

project_root = Path(__file__).parent.parent
src_root = project_root / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from rakugaki.domain.evaluation import Evaluation  # noqa: E402

VALID_IMAGE = "aGVsbG8="  # base64 of b"hello"

VALID_CRITIQUE = (
    "A single trembling line crosses the void and becomes a horizon. "
    "The artist refuses comfort, leaving the corners empty so that the "
    "viewer must finish the thought alone."
)


def evaluation_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "title": "Silent Orbit",
        "artist": "Mika Tanabe",
        "medium": "Crayon on digital paper",
        "dimensions": "1024 x 768 px",
        "critique": VALID_CRITIQUE,
        "price": 5_000_000,
        "nextExpectation": "Expect a braver palette in the next piece.",
    }
    payload.update(overrides)
    return payload


class ManualClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeVisionModel:
    """Replays scripted responses; an Exception instance is raised instead of returned."""

    def __init__(self, responses: List[Union[str, BaseException]], repeat_last: bool = True):
        self.responses = list(responses)
        self.repeat_last = repeat_last
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, **kwargs: Any) -> str:
        self.calls.append(kwargs)
        if len(self.responses) > 1 or not self.repeat_last:
            item = self.responses.pop(0)
        else:
            item = self.responses[0]
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def make_evaluation():
    def _make(**overrides: Any) -> Evaluation:
        return Evaluation.model_validate(evaluation_payload(**overrides))

    return _make


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
