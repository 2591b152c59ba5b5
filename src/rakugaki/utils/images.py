from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from rakugaki.domain.errors import InputValidationError

DEFAULT_MIME_TYPE = "image/png"

_DATA_URL_RE = re.compile(r"^data:(image/[\w.+\-]+);base64,", re.IGNORECASE)


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    mime_type: str


def estimated_decoded_size(image_base64: str) -> int:
    """Approximate decoded byte size; base64 carries roughly 33% overhead."""
    return int(len(image_base64 or "") * 0.75)


def strip_data_url_prefix(image_base64: str) -> str:
    return _DATA_URL_RE.sub("", (image_base64 or "").strip(), count=1)


def decode_image_payload(image_base64: str) -> ImagePayload:
    """Decode a base64 image, with or without a ``data:image/...;base64,`` prefix."""
    text = (image_base64 or "").strip()
    match = _DATA_URL_RE.match(text)
    mime_type = match.group(1).lower() if match else DEFAULT_MIME_TYPE
    body = strip_data_url_prefix(text)
    if not body:
        raise InputValidationError("image payload is empty", field="image", user_message="No image was provided.")
    try:
        data = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InputValidationError(
            f"image is not valid base64: {exc}",
            field="image",
            user_message="The image data could not be read.",
        ) from exc
    return ImagePayload(data=data, mime_type=mime_type)
