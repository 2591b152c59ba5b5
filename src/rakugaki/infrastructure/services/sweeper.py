from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicSweeper:
    """
    Runs ``func`` every ``interval_s`` seconds on the running event loop.

    ``func`` is a short synchronous callable (e.g. ``purge_expired``); its
    return value is logged when truthy. ``stop()`` cancels the task and waits
    for it to finish.
    """

    def __init__(self, name: str, func: Callable[[], object], interval_s: float):
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.name = name
        self._func = func
        self._interval_s = float(interval_s)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"sweeper:{self.name}")
        logger.debug("Sweeper %s started interval=%.1fs", self.name, self._interval_s)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Sweeper %s stopped", self.name)

    def run_once(self) -> object:
        result = self._func()
        if result:
            logger.info("Sweeper %s removed=%s", self.name, result)
        return result

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            try:
                self.run_once()
            except Exception:
                logger.exception("Sweeper %s failed", self.name)
