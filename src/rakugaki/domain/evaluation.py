# src/rakugaki/domain/evaluation.py
"""
Critique domain models.

Contains the records exchanged between the model pipeline and the API:
- Evaluation: validated critique produced by the model (or the fallback)
- PriceChange: direction of a continuation's price movement
- PreviousWork: client-supplied projection used for continuations
- Artwork: an Evaluation plus its image and provenance
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

TITLE_MIN, TITLE_MAX = 5, 40
ARTIST_MIN, ARTIST_MAX = 2, 20
MEDIUM_MIN, MEDIUM_MAX = 5, 50
CRITIQUE_MIN, CRITIQUE_MAX = 100, 300
NEXT_EXPECTATION_MIN, NEXT_EXPECTATION_MAX = 20, 100
PRICE_CHANGE_REASON_MAX = 80
PRICE_MIN = 1_000_000
PRICE_MAX = 10_000_000_000

DEFAULT_DIMENSIONS = "Variable; exists in digital space"

_ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_-"
ARTWORK_ID_LENGTH = 10


class PriceChange(str, Enum):
    """Price movement relative to the previous work in a series."""

    INCREASE = "increase"
    DECREASE = "decrease"
    UNCHANGED = "unchanged"


class Evaluation(BaseModel):
    """
    A critique that satisfies every field constraint.

    Instances only exist in a valid state: construction goes through
    ``Evaluation.model_validate`` and the model is frozen afterwards.
    ``price`` is strict, so numeric strings, floats and booleans are rejected
    rather than coerced.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    title: str = Field(..., min_length=TITLE_MIN, max_length=TITLE_MAX)
    artist: str = Field(..., min_length=ARTIST_MIN, max_length=ARTIST_MAX)
    medium: str = Field(..., min_length=MEDIUM_MIN, max_length=MEDIUM_MAX)
    dimensions: str = DEFAULT_DIMENSIONS
    critique: str = Field(..., min_length=CRITIQUE_MIN, max_length=CRITIQUE_MAX)
    price: int = Field(..., ge=PRICE_MIN, le=PRICE_MAX, strict=True)
    price_change: Optional[PriceChange] = Field(default=None, alias="priceChange")
    price_change_reason: Optional[str] = Field(
        default=None, alias="priceChangeReason", max_length=PRICE_CHANGE_REASON_MAX
    )
    next_expectation: str = Field(
        ...,
        alias="nextExpectation",
        min_length=NEXT_EXPECTATION_MIN,
        max_length=NEXT_EXPECTATION_MAX,
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PreviousWork(BaseModel):
    """Minimal view of an earlier artwork, sent back by the client to continue a series."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    artist: str = Field(..., min_length=1)
    critique: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    series_number: int = Field(..., alias="seriesNumber", ge=1)


def new_artwork_id(length: int = ARTWORK_ID_LENGTH) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Artwork(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    image: str
    evaluation: Evaluation
    series_number: int = Field(..., alias="seriesNumber", ge=1)
    created_at: str = Field(..., alias="createdAt")
    previous_work_id: Optional[str] = Field(default=None, alias="previousWorkId")

    @classmethod
    def create(
        cls,
        *,
        image: str,
        evaluation: Evaluation,
        previous_work: Optional[PreviousWork] = None,
    ) -> "Artwork":
        """Build a new artwork, numbering it after ``previous_work`` when given."""
        return cls(
            id=new_artwork_id(),
            image=image,
            evaluation=evaluation,
            series_number=previous_work.series_number + 1 if previous_work else 1,
            created_at=_utcnow_iso(),
            previous_work_id=previous_work.id if previous_work else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
