from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from rakugaki.application.prompts.critique import (
    CONTINUATION_CRITIQUE_USER,
    CONTINUATION_SCHEMA,
    CRITIQUE_SCHEMA,
    CRITIQUE_SYSTEM,
    INITIAL_CRITIQUE_USER,
    RETRY_WARNING,
)
from rakugaki.domain.evaluation import PreviousWork


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    system: str
    user: str


@dataclass(frozen=True)
class RenderedPrompt:
    system: str
    user: str

    def with_retry_warning(self) -> "RenderedPrompt":
        return RenderedPrompt(system=self.system, user=self.user + RETRY_WARNING)


class PromptRegistry:
    def __init__(self) -> None:
        self._templates: Dict[str, PromptTemplate] = {
            "initial_critique": PromptTemplate(
                name="initial_critique",
                system=CRITIQUE_SYSTEM,
                user=INITIAL_CRITIQUE_USER,
            ),
            "continuation_critique": PromptTemplate(
                name="continuation_critique",
                system=CRITIQUE_SYSTEM,
                user=CONTINUATION_CRITIQUE_USER,
            ),
        }

    def get(self, name: str) -> PromptTemplate:
        key = (name or "").strip().lower()
        if key not in self._templates:
            raise KeyError(f"Unknown prompt template: {name}")
        return self._templates[key]

    def list(self):
        return sorted(self._templates.keys())

    def render_critique(self, previous_work: Optional[PreviousWork] = None) -> RenderedPrompt:
        """Fresh critique prompt, or a continuation prompt when ``previous_work`` is given."""
        if previous_work is None:
            prompt = self.get("initial_critique")
            return RenderedPrompt(system=prompt.system, user=prompt.user.format(schema=CRITIQUE_SCHEMA))

        prompt = self.get("continuation_critique")
        return RenderedPrompt(
            system=prompt.system,
            user=prompt.user.format(
                schema=CONTINUATION_SCHEMA,
                series_number=previous_work.series_number + 1,
                title=previous_work.title,
                artist=previous_work.artist,
                critique=previous_work.critique,
                price=previous_work.price,
            ),
        )
