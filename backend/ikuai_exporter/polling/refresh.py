"""
VLAN Inventory Refresh

Walks every WAN uplink's VLAN list page by page and upserts each record into
the VLAN cache. The perpetual loop survives any failure: an aborted pass is
logged and retried after the refresh interval.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ikuai_exporter.cache import VlanCache
from ikuai_exporter.polling.ikuai import IKuaiClient, IKuaiError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
DEFAULT_INTERVAL = 60.0


class VlanRefresher:
    """Keeps a VlanCache in step with the appliance's VLAN inventory."""

    def __init__(
        self,
        client: IKuaiClient,
        cache: VlanCache,
        page_size: int = DEFAULT_PAGE_SIZE,
        interval: float = DEFAULT_INTERVAL,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._client = client
        self._cache = cache
        self.page_size = page_size
        self.interval = interval
        self.retry_delay = retry_delay
        self._sleep = sleep

    async def load_all(self) -> int:
        """
        Run one refresh pass.

        A failed WAN list aborts the pass; the next pass retries it.

        Returns:
            Number of VLAN records written
        """
        logger.info("Loading VLAN inventory from iKuai")
        try:
            wans = await self._client.get_wan_list()
        except IKuaiError as e:
            logger.error("Failed to fetch WAN list: %s", e)
            return 0

        loaded = 0
        for wan in wans:
            loaded += await self._load_wan(wan.interface)

        logger.info("VLAN inventory loaded: %d records from %d WAN interfaces", loaded, len(wans))
        return loaded

    async def _load_wan(self, interface: str) -> int:
        """Paginate one uplink's VLANs until the reported total is reached."""
        count = 0
        loaded = 0
        while True:
            try:
                page = await self._client.get_vlan_page(interface, count, self.page_size)
            except IKuaiError as e:
                # Same offset again, a page is never skipped
                logger.warning(
                    "Failed to fetch VLANs of %s at offset %d, retrying: %s",
                    interface, count, e,
                )
                await self._sleep(self.retry_delay)
                continue

            for record in page.records:
                self._cache.write(record.vlan_name, record)
            loaded += len(page.records)
            count += page.fetched

            if count >= page.total:
                return loaded
            if not page.fetched:
                logger.warning(
                    "Empty VLAN page for %s at offset %d of %d, stopping early",
                    interface, count, page.total,
                )
                return loaded

    async def run_forever(self) -> None:
        """Refresh, sleep, repeat until cancelled."""
        while True:
            try:
                await self.load_all()
            except Exception:
                logger.exception("VLAN refresh failed, restarting in %.0fs", self.interval)
            await self._sleep(self.interval)
