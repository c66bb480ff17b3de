"""
Refresh Scheduler

Uses APScheduler to launch the perpetual VLAN refresh loop once, after an
initial delay that lets the start-up warm-up load settle first.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from ikuai_exporter.polling.refresh import VlanRefresher

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Owns the background refresh task."""

    def __init__(self, refresher: VlanRefresher, initial_delay: float = 60.0):
        self._refresher = refresher
        self._initial_delay = initial_delay
        self._scheduler: AsyncIOScheduler | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the refresh loop to start after the initial delay."""
        self._scheduler = AsyncIOScheduler()

        run_date = datetime.now(timezone.utc) + timedelta(seconds=self._initial_delay)
        self._scheduler.add_job(
            self._start_loop,
            DateTrigger(run_date=run_date),
            id="vlan_refresh",
            name="Refresh VLAN inventory from iKuai",
            replace_existing=True,
            misfire_grace_time=None,
        )

        self._scheduler.start()
        logger.info("Refresh scheduler started: first refresh in %ds", self._initial_delay)

    async def _start_loop(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._refresher.run_forever(), name="vlan_refresh")

    async def stop(self) -> None:
        """Stop the scheduler and cancel the refresh loop."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        logger.info("Refresh scheduler stopped")
