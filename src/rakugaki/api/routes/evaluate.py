"""
POST /api/evaluate

Accepts a doodle (base64, optionally as a data URL) and an optional
``previousWork`` projection, and returns a freshly critiqued Artwork.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rakugaki.api.client_ip import get_client_ip
from rakugaki.domain.errors import (
    AppError,
    InputValidationError,
    RateLimitExceeded,
    normalize_error,
)
from rakugaki.domain.evaluation import Artwork, PreviousWork
from rakugaki.utils.formatting import format_price
from rakugaki.utils.images import estimated_decoded_size

logger = logging.getLogger(__name__)

router = APIRouter()


class EvaluateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image: str = Field(..., min_length=1)
    previous_work: Optional[PreviousWork] = Field(default=None, alias="previousWork")


def _parse_body(payload: object) -> EvaluateRequest:
    if not isinstance(payload, dict):
        raise InputValidationError("request body must be a JSON object", user_message="The request was malformed.")
    try:
        return EvaluateRequest.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        user_message = "No image was provided." if field == "image" else None
        raise InputValidationError(
            f"{field or 'body'} - {first.get('msg', 'invalid value')}",
            field=field,
            user_message=user_message,
        ) from exc


@router.post("/evaluate")
async def evaluate(request: Request):
    settings = request.app.state.settings
    critique_service = request.app.state.critique_service
    rate_limiter = request.app.state.rate_limiter
    artwork_store = request.app.state.artwork_store

    ip = get_client_ip(request)
    admission = rate_limiter.check(ip)
    if not admission.allowed:
        logger.info("Rate limit exceeded for ip=%s", ip)
        raise RateLimitExceeded(
            f"rate limit exceeded for {ip}",
            retry_after_ms=admission.reset_after_ms,
            remaining=0,
        )

    try:
        payload = await request.json()
    except ValueError as exc:
        raise InputValidationError(
            f"malformed JSON body: {exc}",
            user_message="The request was malformed.",
        ) from exc

    body = _parse_body(payload)
    if estimated_decoded_size(body.image) > settings.max_image_bytes:
        raise InputValidationError(
            f"image too large: ~{estimated_decoded_size(body.image)} bytes > {settings.max_image_bytes}",
            field="image",
            user_message="The image is too large.",
        )

    logger.info("Generating critique ip=%s has_previous_work=%s", ip, body.previous_work is not None)
    try:
        evaluation = await critique_service.generate_critique(body.image, body.previous_work)
    except AppError:
        raise
    except Exception as exc:
        raise normalize_error(exc) from exc

    artwork = Artwork.create(image=body.image, evaluation=evaluation, previous_work=body.previous_work)
    artwork_store.save(artwork)
    logger.info(
        'Critique generated id=%s title="%s" price=%s',
        artwork.id,
        evaluation.title,
        format_price(evaluation.price),
    )

    return JSONResponse(
        {"success": True, "artwork": artwork.to_dict()},
        headers={"X-RateLimit-Remaining": str(admission.remaining)},
    )
