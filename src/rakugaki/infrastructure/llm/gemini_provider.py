"""
Gemini vision provider.

Wraps the ``google-genai`` async client behind the small ``VisionModel``
contract used by the critique service: image + prompt in, raw text out.
Transport failures are mapped onto ``ModelError`` here so callers never
depend on the SDK's exception hierarchy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from rakugaki.domain.errors import ModelError

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


@dataclass(frozen=True)
class GenerationParams:
    temperature: float = 0.9
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 2048


class VisionModel(Protocol):
    async def generate(
        self,
        *,
        image: bytes,
        mime_type: str,
        prompt: str,
        system: str,
        params: GenerationParams,
    ) -> str: ...


class GeminiVisionModel:
    """Async Gemini client producing raw critique text for one image."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_GEMINI_MODEL,
        *,
        client: Any | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise ModelError(ModelError.API_ERROR, "GEMINI_API_KEY environment variable is not set")
        self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate(
        self,
        *,
        image: bytes,
        mime_type: str,
        prompt: str,
        system: str,
        params: GenerationParams,
    ) -> str:
        client = self._get_client()
        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=params.temperature,
            top_p=params.top_p,
            top_k=params.top_k,
            max_output_tokens=params.max_output_tokens,
        )
        contents = [
            types.Part.from_bytes(data=image, mime_type=mime_type),
            types.Part.from_text(text=prompt),
        ]

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as exc:
            if exc.code == 429:
                logger.warning("Gemini rate limited model=%s: %s", self.model, exc)
                raise ModelError(ModelError.RATE_LIMIT, f"Gemini rate limit: {exc}", cause=exc) from exc
            logger.error("Gemini API error model=%s code=%s: %s", self.model, exc.code, exc)
            raise ModelError(ModelError.API_ERROR, f"Gemini API error {exc.code}: {exc}", cause=exc) from exc

        # Empty or blocked candidates surface as empty text; the parser rejects it.
        text = response.text or ""
        logger.debug("Gemini response received model=%s chars=%d", self.model, len(text))
        return text

    async def close(self) -> None:
        if self._client is None:
            return
        aio = getattr(self._client, "aio", None)
        aclose = getattr(aio, "aclose", None)
        if aclose is not None:
            await aclose()
