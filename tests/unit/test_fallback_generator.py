import random

import pytest

from rakugaki.application.services.fallback_generator import (
    FALLBACK_ARTISTS,
    FALLBACK_CRITIQUES,
    FALLBACK_EXPECTATIONS,
    FALLBACK_MEDIA,
    FALLBACK_PRICE_MAX,
    FALLBACK_PRICE_MIN,
    FALLBACK_PRICE_STEP,
    FALLBACK_TITLES,
    generate_fallback,
)
from rakugaki.domain.evaluation import Evaluation


def test_fallback_is_always_schema_valid():
    rng = random.Random(1234)
    for _ in range(200):
        evaluation = generate_fallback(rng)
        # Round-trips through the validating model unchanged.
        assert Evaluation.model_validate(evaluation.to_dict()) == evaluation
        assert FALLBACK_PRICE_MIN <= evaluation.price <= FALLBACK_PRICE_MAX
        assert evaluation.price % FALLBACK_PRICE_STEP == 0
        assert evaluation.price_change is None


@pytest.mark.parametrize(
    "field, pool",
    [
        ("title", FALLBACK_TITLES),
        ("artist", FALLBACK_ARTISTS),
        ("medium", FALLBACK_MEDIA),
        ("critique", FALLBACK_CRITIQUES),
        ("next_expectation", FALLBACK_EXPECTATIONS),
    ],
)
def test_every_preset_is_drawn_from(field, pool):
    rng = random.Random(7)
    seen = {getattr(generate_fallback(rng), field) for _ in range(500)}
    assert seen == set(pool)


def test_fallback_is_deterministic_for_seeded_rng():
    assert generate_fallback(random.Random(42)) == generate_fallback(random.Random(42))


def test_fallback_without_rng_varies():
    prices = {generate_fallback().price for _ in range(20)}
    assert len(prices) > 1
