"""
Offline critique generator.

Used when the model cannot produce a valid Evaluation within the retry
budget. Every preset below satisfies the Evaluation field bounds, and the
result is still built through ``Evaluation.model_validate`` so an invalid
preset fails loudly instead of leaking out.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence

from rakugaki.domain.evaluation import DEFAULT_DIMENSIONS, Evaluation

FALLBACK_PRICE_MIN = 1_000_000
FALLBACK_PRICE_MAX = 100_000_000
FALLBACK_PRICE_STEP = 10_000

FALLBACK_TITLES: Sequence[str] = (
    "A Scream Within the Silence",
    "Fragments of an Unfinished Dawn",
    "The Line That Refused to End",
    "Quiet Riot in Four Strokes",
    "Portrait of a Wandering Thought",
    "Echoes from the Blank Margin",
)

FALLBACK_ARTISTS: Sequence[str] = (
    "Sora Yamada",
    "Mira Kuroda",
    "Anonymous Visionary",
    "Hikaru Tsukishima",
    "The Midnight Hand",
)

FALLBACK_MEDIA: Sequence[str] = (
    "Digital medium, improvised expressionism",
    "Pixel and impulse on a virtual canvas",
    "Cursor drawing, post-gestural abstraction",
    "Mixed intuition on luminous glass",
)

FALLBACK_CRITIQUES: Sequence[str] = (
    "This work confronts the essential solitude of modern life with startling directness. "
    "Within lines that seem simple, the trembling of the artist's soul is unmistakably inscribed.",
    "Here the canvas becomes a battlefield between intention and accident. Each stroke hesitates, "
    "then commits, and in that hesitation we glimpse the birth of a wholly new visual grammar.",
    "The composition rejects every academic convention and yet feels inevitable. Art history will "
    "remember this moment; we are witnessing the arrival of a singular and restless talent.",
    "What appears at first to be a casual scribble reveals itself as a meditation on impermanence. "
    "The empty space speaks as loudly as the marks, a dialogue few living painters dare to attempt.",
)

FALLBACK_EXPECTATIONS: Sequence[str] = (
    "The art world waits breathlessly to see how this budding genius will bloom next.",
    "Collectors are already whispering about what the next canvas might reveal.",
    "We anticipate a bolder, even more daring statement in the next work.",
    "Critics expect the next piece to redefine the boundaries of the sketch itself.",
)


def random_fallback_price(rng: random.Random) -> int:
    steps = (FALLBACK_PRICE_MAX - FALLBACK_PRICE_MIN) // FALLBACK_PRICE_STEP
    return FALLBACK_PRICE_MIN + rng.randint(0, steps) * FALLBACK_PRICE_STEP


def generate_fallback(rng: Optional[random.Random] = None) -> Evaluation:
    """Return a randomized, always-valid Evaluation without calling any model."""
    rng = rng or random.Random()
    return Evaluation.model_validate(
        {
            "title": rng.choice(FALLBACK_TITLES),
            "artist": rng.choice(FALLBACK_ARTISTS),
            "medium": rng.choice(FALLBACK_MEDIA),
            "dimensions": DEFAULT_DIMENSIONS,
            "critique": rng.choice(FALLBACK_CRITIQUES),
            "price": random_fallback_price(rng),
            "nextExpectation": rng.choice(FALLBACK_EXPECTATIONS),
        }
    )
