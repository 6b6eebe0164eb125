"""
Read-only state snapshot held by a view.

A view (dashboard, quest page, mini-game screen) keeps its own copy of XP and
the quest list. The copy is loaded from the store once and afterwards changes
only through sync-bus events; the snapshot never writes to the store.
"""

import logging
from typing import Callable, List, Optional

from pydantic import ValidationError

from aura_quest.gamification.engine import DEFAULT_XP, QUEST_LIST, seed_quests
from aura_quest.models.quest import Quest
from aura_quest.store.base import StoreAdapter
from aura_quest.sync.bus import (
    QUESTS_CHANGED,
    XP_CHANGED,
    SyncBus,
    decode_quests_payload,
    decode_xp_payload,
)

logger = logging.getLogger(__name__)


class StateSnapshot:
    """Locally cached XP and quests, reconciled through the bus"""

    def __init__(
        self,
        store: StoreAdapter,
        bus: SyncBus,
        name: str = "view",
        on_change: Optional[Callable[["StateSnapshot"], None]] = None,
    ):
        self.name = name
        self.on_change = on_change
        self.xp: int = store.read_int("xp", DEFAULT_XP)
        self.quests: List[Quest] = store.read_json("quests", seed_quests(), QUEST_LIST.validate_python)
        self.updates = 0
        self._unsubscribe = [
            bus.subscribe(XP_CHANGED, self._on_xp),
            bus.subscribe(QUESTS_CHANGED, self._on_quests),
        ]

    @property
    def completed_count(self) -> int:
        return sum(1 for q in self.quests if q.completed)

    def close(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    def _on_xp(self, payload) -> None:
        new_xp = decode_xp_payload(payload)
        if new_xp is None:
            return
        self.xp = new_xp
        self._changed()

    def _on_quests(self, payload) -> None:
        items = decode_quests_payload(payload)
        if items is None:
            return
        try:
            self.quests = QUEST_LIST.validate_python(items)
        except ValidationError:
            logger.debug(f"{self.name}: ignoring quests payload with invalid entries")
            return
        self._changed()

    def _changed(self) -> None:
        self.updates += 1
        if self.on_change:
            self.on_change(self)
