"""Periodic reconciliation for streak-freeze."""

from __future__ import annotations

import asyncio
import logging

from streak_freeze.errors import StorageUnavailable
from streak_freeze.service import StreakService

logger = logging.getLogger(__name__)


class ReconcileScheduler:
    """Calls StreakService.reconcile every ``interval`` seconds.

    Ticks that land while a reconciliation is already running are skipped by
    the service. Storage failures are logged and retried on the next tick.
    """

    def __init__(self, service: StreakService, interval: float = 300.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.service = service
        self.interval = interval
        self.ticks = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> None:
        """Run one reconciliation, absorbing storage failures."""
        self.ticks += 1
        try:
            result = await self.service.reconcile()
        except StorageUnavailable as exc:
            logger.error("Scheduled reconciliation failed, will retry: %s", exc)
            return
        if result is None:
            logger.debug("Tick %d skipped", self.ticks)
        else:
            logger.debug("Tick %d: %s", self.ticks, result.outcome.value)

    async def _loop(self) -> None:
        while True:
            await self.tick()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="streak_reconcile")
        logger.info("Scheduler started (every %ss)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Scheduler stopped after %d tick(s)", self.ticks)

    async def run_forever(self) -> None:
        self.start()
        try:
            await self._task
        finally:
            await self.stop()
