"""
Calm Collector mini-game

Players gather calm points (more per click as the combo grows) and relax to
convert every 5 calm into 1 XP. Calm and the lifetime XP collected here are
stored under ``calm`` and ``collected``; the combo lives only in memory.
"""

import logging

from aura_quest.gamification.engine import ProgressionEngine

logger = logging.getLogger(__name__)

MAX_COMBO = 50
COMBO_STEP = 5  # +1 calm per click for every 5 combo
CALM_PER_XP = 5


class CalmCollector:
    """Mini-game state for one context"""

    def __init__(self, engine: ProgressionEngine):
        self.engine = engine
        self.store = engine.store
        self.calm = max(0, self.store.read_int("calm", 0))
        self.collected = max(0, self.store.read_int("collected", 0))
        self.combo = 0

    def gather(self) -> int:
        """One click: add calm, grow the combo. Returns the calm total."""
        self.calm += 1 + self.combo // COMBO_STEP
        self.combo = min(MAX_COMBO, self.combo + 1)
        self.store.write_int("calm", self.calm)
        return self.calm

    def relax(self) -> int:
        """
        Convert calm into XP

        Returns:
            XP gained; 0 (and no state change) when there is not enough calm
        """
        gain = self.calm // CALM_PER_XP
        if gain <= 0:
            logger.debug(f"Relax ignored: only {self.calm} calm")
            return 0

        self.engine.add_bonus_xp(gain)
        self.collected += gain
        self.calm = 0
        self.combo = 0
        self.store.write_int("collected", self.collected)
        self.store.write_int("calm", self.calm)

        logger.info(f"Converted calm into {gain} XP (collected {self.collected} total)")
        return gain

    def reset(self) -> None:
        self.calm = 0
        self.combo = 0
        self.store.write_int("calm", self.calm)

    def to_dict(self) -> dict:
        return {"calm": self.calm, "combo": self.combo, "collected": self.collected}
