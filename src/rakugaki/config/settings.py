"""
Runtime settings for the Rakugaki Gallery API.

All values come from the environment (a local ``.env`` is loaded by the API
entrypoint). Unset variables fall back to the defaults below; malformed
numbers raise ``ValueError`` naming the offending variable.

    GEMINI_API_KEY / GOOGLE_API_KEY   Gemini credentials
    RAKUGAKI_GEMINI_MODEL             model name (default gemini-2.0-flash)
    RAKUGAKI_MAX_RETRIES              extra attempts after a parse failure (2)
    RAKUGAKI_TEMPERATURE / _TOP_P / _TOP_K / _MAX_OUTPUT_TOKENS
    RAKUGAKI_RATE_LIMIT               requests per window per client (5)
    RAKUGAKI_RATE_LIMIT_WINDOW_MS     window length (60000)
    RAKUGAKI_CLEANUP_INTERVAL_MS      sweep interval for limiter and store (60000)
    RAKUGAKI_MAX_IMAGE_BYTES          decoded image size cap (10 MiB)
    RAKUGAKI_CACHE_TTL_MS             artwork lifetime (24h)
    RAKUGAKI_CACHE_MAX_SIZE           artwork capacity (1000)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from rakugaki.infrastructure.llm.gemini_provider import DEFAULT_GEMINI_MODEL, GenerationParams

DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024
DEFAULT_CACHE_TTL_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    max_retries: int = 2
    temperature: float = 0.9
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 2048
    rate_limit: int = 5
    rate_limit_window_ms: int = 60_000
    cleanup_interval_ms: int = 60_000
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS
    cache_max_size: int = 1000

    @property
    def generation_params(self) -> GenerationParams:
        return GenerationParams(
            temperature=self.temperature,
            top_p=self.top_p,
            top_k=self.top_k,
            max_output_tokens=self.max_output_tokens,
        )


def _env_int(env: Mapping[str, str], name: str, default: int, *, minimum: int = 0) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    api_key = (env.get("GEMINI_API_KEY") or env.get("GOOGLE_API_KEY") or "").strip() or None
    return Settings(
        gemini_api_key=api_key,
        gemini_model=(env.get("RAKUGAKI_GEMINI_MODEL") or "").strip() or DEFAULT_GEMINI_MODEL,
        max_retries=_env_int(env, "RAKUGAKI_MAX_RETRIES", 2),
        temperature=_env_float(env, "RAKUGAKI_TEMPERATURE", 0.9),
        top_p=_env_float(env, "RAKUGAKI_TOP_P", 0.95),
        top_k=_env_int(env, "RAKUGAKI_TOP_K", 40, minimum=1),
        max_output_tokens=_env_int(env, "RAKUGAKI_MAX_OUTPUT_TOKENS", 2048, minimum=1),
        rate_limit=_env_int(env, "RAKUGAKI_RATE_LIMIT", 5, minimum=1),
        rate_limit_window_ms=_env_int(env, "RAKUGAKI_RATE_LIMIT_WINDOW_MS", 60_000, minimum=1),
        cleanup_interval_ms=_env_int(env, "RAKUGAKI_CLEANUP_INTERVAL_MS", 60_000, minimum=1),
        max_image_bytes=_env_int(env, "RAKUGAKI_MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES, minimum=1),
        cache_ttl_ms=_env_int(env, "RAKUGAKI_CACHE_TTL_MS", DEFAULT_CACHE_TTL_MS, minimum=1),
        cache_max_size=_env_int(env, "RAKUGAKI_CACHE_MAX_SIZE", 1000, minimum=1),
    )
