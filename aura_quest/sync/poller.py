"""
Background task feeding external store changes into the sync bus.
"""

import asyncio
import logging

from aura_quest.sync.bus import SyncBus

logger = logging.getLogger(__name__)


class StorePoller:
    """
    Periodically calls ``SyncBus.pump_external``.

    Runs on the same event loop as the engine, so external updates are
    applied between local mutations, never in the middle of one.
    """

    def __init__(self, bus: SyncBus, poll_interval: float = 1.0):
        """
        Initialize store poller.

        Args:
            bus: Bus whose store is polled
            poll_interval: Seconds between polls
        """
        self.bus = bus
        self.poll_interval = poll_interval
        self._running = False
        self._task = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the background polling task."""
        if self._running:
            logger.warning("Store poller is already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"Store poller started (interval: {self.poll_interval}s)")

    async def stop(self):
        """Stop the background polling task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Store poller stopped")

    async def _poll_loop(self):
        """Main polling loop."""
        while self._running:
            try:
                delivered = self.bus.pump_external()
                if delivered:
                    logger.debug(f"Delivered {delivered} external change(s)")
            except Exception as e:
                logger.error(f"Error polling store changes: {e}", exc_info=True)

            await asyncio.sleep(self.poll_interval)
