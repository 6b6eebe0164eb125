"""Monotonic id source for suggestions and quests"""
import time
from typing import Callable, Optional


class IdGenerator:
    """
    Hands out strictly increasing integer ids.

    With ``start`` the sequence is deterministic (start, start+1, ...).
    Without it ids are based on the clock in milliseconds, bumped past the
    last issued id whenever the clock has not moved on.
    """

    def __init__(self, start: Optional[int] = None, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._deterministic = start is not None
        self._next = start if start is not None else 0

    def reserve(self, count: int) -> int:
        """
        Reserve ``count`` consecutive ids.

        Returns:
            The first id; the batch is ``base .. base + count - 1``
        """
        if count < 1:
            raise ValueError("count must be at least 1")
        base = self._next
        if not self._deterministic:
            base = max(int(self._clock() * 1000), self._next)
        self._next = base + count
        return base

    def next_id(self) -> int:
        return self.reserve(1)
