from __future__ import annotations

from fastapi import APIRouter, Request

from rakugaki.domain.errors import InvalidIdError, NotFoundError
from rakugaki.utils.formatting import build_share_text

router = APIRouter()

MIN_ID_LENGTH = 5


@router.get("/work/{artwork_id}")
async def get_work(artwork_id: str, http_request: Request):
    """Look up a shared artwork by id."""
    if len(artwork_id) < MIN_ID_LENGTH:
        raise InvalidIdError(f"artwork id too short: {artwork_id!r}", field="id")

    artwork = http_request.app.state.artwork_store.get(artwork_id)
    if artwork is None:
        raise NotFoundError("Artwork", artwork_id)

    return {
        "success": True,
        "artwork": artwork.to_dict(),
        "shareText": build_share_text(artwork),
    }


@router.get("/stats")
async def get_stats(http_request: Request):
    state = http_request.app.state
    return {
        "rateLimiter": state.rate_limiter.stats(),
        "artworkStore": state.artwork_store.stats(),
    }
