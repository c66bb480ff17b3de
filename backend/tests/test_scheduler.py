"""Tests for the delayed start of the refresh loop."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

from ikuai_exporter.polling.scheduler import RefreshScheduler


async def test_loop_starts_after_delay_and_stops():
    started = asyncio.Event()

    async def run_forever():
        started.set()
        await asyncio.sleep(3600)

    refresher = MagicMock()
    refresher.run_forever = run_forever
    scheduler = RefreshScheduler(refresher, initial_delay=0)

    scheduler.start()
    await asyncio.wait_for(started.wait(), timeout=5)
    assert scheduler.running

    await scheduler.stop()
    assert not scheduler.running


async def test_stop_before_start_is_safe():
    scheduler = RefreshScheduler(MagicMock(), initial_delay=3600)

    scheduler.start()
    await scheduler.stop()

    assert not scheduler.running
