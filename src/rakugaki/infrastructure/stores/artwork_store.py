from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from loguru import logger

from rakugaki.domain.evaluation import Artwork
from rakugaki.infrastructure.services.rate_limiter import monotonic_ms
from rakugaki.infrastructure.services.sweeper import PeriodicSweeper

DEFAULT_TTL_MS = 24 * 60 * 60 * 1000
DEFAULT_MAX_SIZE = 1000


@dataclass(frozen=True)
class _Entry:
    artwork: Artwork
    expires_at: int


class ArtworkStore:
    """
    In-memory artwork cache with a TTL and a capacity bound.

    When full, the oldest *inserted* entry is evicted; reads do not refresh
    an entry's position or lifetime.
    """

    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        max_size: int = DEFAULT_MAX_SIZE,
        *,
        clock: Callable[[], int] = monotonic_ms,
        cleanup_interval_ms: Optional[int] = None,
    ):
        if ttl_ms < 1:
            raise ValueError("ttl_ms must be >= 1")
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.ttl_ms = int(ttl_ms)
        self.max_size = int(max_size)
        self._clock = clock
        self._cleanup_interval_ms = cleanup_interval_ms
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._sweeper: Optional[PeriodicSweeper] = None

    def save(self, artwork: Artwork) -> None:
        now = self._clock()
        with self._lock:
            self._purge_locked(now)
            if artwork.id not in self._entries and len(self._entries) >= self.max_size:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.info(f"ArtworkStore evicted oldest artwork: {oldest}")
            self._entries[artwork.id] = _Entry(artwork=artwork, expires_at=now + self.ttl_ms)
        logger.info(f"ArtworkStore saved artwork: {artwork.id}")

    def get(self, artwork_id: str) -> Optional[Artwork]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(artwork_id)
            if entry is None:
                logger.debug(f"ArtworkStore artwork not found: {artwork_id}")
                return None
            if now > entry.expires_at:
                del self._entries[artwork_id]
                logger.info(f"ArtworkStore artwork expired: {artwork_id}")
                return None
            return entry.artwork

    def delete(self, artwork_id: str) -> bool:
        with self._lock:
            deleted = self._entries.pop(artwork_id, None) is not None
        logger.info(f"ArtworkStore deleted artwork: {artwork_id}, success: {deleted}")
        return deleted

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            return self._purge_locked(now)

    def _purge_locked(self, now: int) -> int:
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info(f"ArtworkStore cleaned up {len(expired)} expired entries")
        return len(expired)

    def stats(self) -> dict:
        with self._lock:
            return {"size": len(self._entries), "maxSize": self.max_size}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def start_cleanup(self) -> PeriodicSweeper:
        if self._sweeper is None:
            interval_ms = self._cleanup_interval_ms or min(self.ttl_ms, 60_000)
            self._sweeper = PeriodicSweeper("artwork_store", self.purge_expired, interval_ms / 1000)
        self._sweeper.start()
        return self._sweeper

    async def shutdown(self) -> None:
        if self._sweeper is not None:
            await self._sweeper.stop()
