"""
Tick schedulers used to defer sync-bus delivery.

Broadcasts are never delivered inside the mutation that produced them; they
are queued and run on the next scheduling tick.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TickScheduler(ABC):
    """Runs callbacks on a later tick of a single-threaded loop"""

    @abstractmethod
    def call_soon(self, callback: Callable, *args) -> None:
        """Queue ``callback(*args)`` for the next tick"""


class AsyncioTickScheduler(TickScheduler):
    """Defers callbacks with ``loop.call_soon``"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Args:
            loop: Fixed event loop; when omitted the loop running at
                scheduling time is used
        """
        self._loop = loop

    def call_soon(self, callback: Callable, *args) -> None:
        loop = self._loop or asyncio.get_running_loop()
        loop.call_soon(callback, *args)


class ManualTickScheduler(TickScheduler):
    """Queues callbacks until ``run_pending`` is called (tests, scripted hosts)"""

    def __init__(self):
        self._queue = deque()

    def call_soon(self, callback: Callable, *args) -> None:
        self._queue.append((callback, args))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self) -> int:
        """
        Run one tick: every callback queued before this call.

        Callbacks queued while the tick runs wait for the next one.

        Returns:
            Number of callbacks run
        """
        batch = len(self._queue)
        for _ in range(batch):
            callback, args = self._queue.popleft()
            callback(*args)
        return batch
