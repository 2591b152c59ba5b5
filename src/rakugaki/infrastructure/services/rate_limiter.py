"""
Sliding-window rate limiter keyed by client identity (normally an IP).

State lives in process memory, so limits apply per worker process.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from rakugaki.infrastructure.services.sweeper import PeriodicSweeper

logger = logging.getLogger(__name__)


def monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


@dataclass(frozen=True)
class RateLimiterConfig:
    max_requests: int
    window_ms: int
    cleanup_interval_ms: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")

    @property
    def effective_cleanup_interval_ms(self) -> int:
        return self.cleanup_interval_ms or self.window_ms


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_after_ms: int


@dataclass
class _Record:
    count: int
    reset_time: int


class RateLimiter:
    def __init__(self, config: RateLimiterConfig, *, clock: Callable[[], int] = monotonic_ms):
        self.config = config
        self._clock = clock
        self._records: Dict[str, _Record] = {}
        self._lock = threading.Lock()
        self._sweeper: Optional[PeriodicSweeper] = None

    def check(self, key: str) -> RateLimitResult:
        """Count one request for ``key`` and report whether it is admitted."""
        now = self._clock()
        limit = self.config.max_requests
        window = self.config.window_ms

        with self._lock:
            record = self._records.get(key)
            if record is None or now > record.reset_time:
                self._records[key] = _Record(count=1, reset_time=now + window)
                return RateLimitResult(allowed=True, remaining=limit - 1, reset_after_ms=window)

            if record.count >= limit:
                return RateLimitResult(allowed=False, remaining=0, reset_after_ms=record.reset_time - now)

            record.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=limit - record.count,
                reset_after_ms=record.reset_time - now,
            )

    def reset(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, record in self._records.items() if now > record.reset_time]
            for key in expired:
                del self._records[key]
        if expired:
            logger.debug("Rate limiter purged %d expired keys", len(expired))
        return len(expired)

    def stats(self) -> dict:
        with self._lock:
            return {"activeKeys": len(self._records)}

    def start_cleanup(self) -> PeriodicSweeper:
        if self._sweeper is None:
            self._sweeper = PeriodicSweeper(
                "rate_limiter",
                self.purge_expired,
                self.config.effective_cleanup_interval_ms / 1000,
            )
        self._sweeper.start()
        return self._sweeper

    async def shutdown(self) -> None:
        if self._sweeper is not None:
            await self._sweeper.stop()
