"""Cross-view state synchronization"""
from aura_quest.sync.bus import (
    EVENTS,
    QUESTS_CHANGED,
    XP_CHANGED,
    SyncBus,
    decode_quests_payload,
    decode_xp_payload,
)
from aura_quest.sync.poller import StorePoller
from aura_quest.sync.scheduler import AsyncioTickScheduler, ManualTickScheduler, TickScheduler

__all__ = [
    "EVENTS",
    "QUESTS_CHANGED",
    "XP_CHANGED",
    "SyncBus",
    "StorePoller",
    "TickScheduler",
    "AsyncioTickScheduler",
    "ManualTickScheduler",
    "decode_quests_payload",
    "decode_xp_payload",
]
