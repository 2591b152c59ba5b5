from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from pydantic import ValidationError

from rakugaki.application.prompts import PromptRegistry, RenderedPrompt
from rakugaki.application.services.fallback_generator import generate_fallback
from rakugaki.application.services.response_parser import parse_evaluation
from rakugaki.domain.errors import AppError, ParseError, normalize_error
from rakugaki.domain.evaluation import Evaluation, PreviousWork
from rakugaki.infrastructure.llm.gemini_provider import GenerationParams, VisionModel
from rakugaki.utils.images import ImagePayload, decode_image_payload

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 2

_PARSE_FAILURES = (ParseError, json.JSONDecodeError, ValidationError)


@dataclass(frozen=True)
class Success:
    evaluation: Evaluation


@dataclass(frozen=True)
class Retryable:
    reason: str
    error: Exception


@dataclass(frozen=True)
class Fatal:
    error: AppError


AttemptOutcome = Union[Success, Retryable, Fatal]


class CritiqueService:
    """Generate one critique: prompt, model call, parse, bounded retry, fallback."""

    def __init__(
        self,
        model: VisionModel,
        *,
        prompt_registry: Optional[PromptRegistry] = None,
        params: Optional[GenerationParams] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        parser: Callable[[str], Evaluation] = parse_evaluation,
        fallback: Callable[[], Evaluation] = generate_fallback,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._model = model
        self._prompts = prompt_registry or PromptRegistry()
        self._params = params or GenerationParams()
        self._max_retries = int(max_retries)
        self._parse = parser
        self._fallback = fallback

    @property
    def max_attempts(self) -> int:
        return self._max_retries + 1

    def build_prompt(self, previous_work: Optional[PreviousWork] = None) -> RenderedPrompt:
        return self._prompts.render_critique(previous_work)

    async def aclose(self) -> None:
        """Release the model client, if the model holds one."""
        close = getattr(self._model, "close", None)
        if close is not None:
            await close()

    async def generate_critique(
        self,
        image: str,
        previous_work: Optional[PreviousWork] = None,
    ) -> Evaluation:
        """
        Return a valid Evaluation for ``image``.

        Parse failures are retried up to ``max_retries`` times and then
        replaced by a fallback critique. Rate limits and other model errors
        are raised immediately as ``ModelError``.
        """
        payload = decode_image_payload(image)
        base_prompt = self.build_prompt(previous_work)

        last: Optional[Retryable] = None
        for attempt in range(self.max_attempts):
            prompt = base_prompt if attempt == 0 else base_prompt.with_retry_warning()
            logger.info(
                "Critique attempt %d/%d continuation=%s",
                attempt + 1,
                self.max_attempts,
                previous_work is not None,
            )
            outcome = await self._attempt(payload, prompt)

            if isinstance(outcome, Success):
                logger.info('Critique parsed title="%s" attempt=%d', outcome.evaluation.title, attempt + 1)
                return outcome.evaluation
            if isinstance(outcome, Fatal):
                logger.warning(
                    "Critique attempt %d failed fatally code=%s: %s",
                    attempt + 1,
                    outcome.error.code,
                    outcome.error,
                )
                raise outcome.error

            last = outcome
            logger.warning("Critique attempt %d unusable: %s", attempt + 1, outcome.reason)

        logger.error(
            "All %d critique attempts failed, using fallback. last_error=%s",
            self.max_attempts,
            last.reason if last else "-",
        )
        return self._fallback()

    async def _attempt(self, payload: ImagePayload, prompt: RenderedPrompt) -> AttemptOutcome:
        try:
            raw = await self._model.generate(
                image=payload.data,
                mime_type=payload.mime_type,
                prompt=prompt.user,
                system=prompt.system,
                params=self._params,
            )
        except _PARSE_FAILURES as exc:
            return Retryable(reason=str(exc), error=exc)
        except Exception as exc:
            return Fatal(error=normalize_error(exc))

        logger.debug("Model response chars=%d", len(raw or ""))
        try:
            return Success(evaluation=self._parse(raw))
        except _PARSE_FAILURES as exc:
            if isinstance(exc, ParseError):
                logger.debug("Rejected model output (%s): %r", exc.kind.value, (raw or "")[:500])
            return Retryable(reason=str(exc), error=exc)
