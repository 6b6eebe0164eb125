"""Unit tests for the sync bus (aura_quest/sync/bus.py)"""
import asyncio
import json

import pytest

from aura_quest.store.memory import MemoryStore
from aura_quest.sync.bus import (
    QUESTS_CHANGED,
    XP_CHANGED,
    SyncBus,
    decode_quests_payload,
    decode_xp_payload,
)
from aura_quest.sync.scheduler import AsyncioTickScheduler, ManualTickScheduler


# ============================================================================
# Local Delivery
# ============================================================================

def test_publish_is_deferred_to_next_tick(bus, scheduler):
    received = []
    bus.subscribe(XP_CHANGED, received.append)

    bus.publish(XP_CHANGED, 300)

    assert received == []
    scheduler.run_pending()
    assert received == [300]


def test_each_listener_gets_event_exactly_once(bus, scheduler):
    first, second = [], []
    bus.subscribe(XP_CHANGED, first.append)
    bus.subscribe(XP_CHANGED, second.append)

    bus.publish(XP_CHANGED, 10)
    scheduler.run_pending()
    scheduler.run_pending()

    assert first == [10]
    assert second == [10]


def test_events_delivered_in_publish_order(bus, scheduler):
    received = []
    bus.subscribe(XP_CHANGED, received.append)

    bus.publish(XP_CHANGED, 1)
    bus.publish(XP_CHANGED, 2)
    scheduler.run_pending()

    assert received == [1, 2]


def test_listeners_only_get_their_event(bus, scheduler):
    xp_events, quest_events = [], []
    bus.subscribe(XP_CHANGED, xp_events.append)
    bus.subscribe(QUESTS_CHANGED, quest_events.append)

    bus.publish(QUESTS_CHANGED, "[]")
    scheduler.run_pending()

    assert xp_events == []
    assert quest_events == ["[]"]


def test_unsubscribe_stops_delivery(bus, scheduler):
    received = []
    unsubscribe = bus.subscribe(XP_CHANGED, received.append)

    bus.publish(XP_CHANGED, 1)
    unsubscribe()
    unsubscribe()  # idempotent
    scheduler.run_pending()

    assert received == []
    assert bus.listener_count(XP_CHANGED) == 0


def test_publish_from_listener_waits_for_following_tick(bus, scheduler):
    """Test re-entrant publishes are not delivered inside the current delivery"""
    received = []

    def relay(xp):
        received.append(xp)
        if xp < 3:
            bus.publish(XP_CHANGED, xp + 1)

    bus.subscribe(XP_CHANGED, relay)
    bus.publish(XP_CHANGED, 1)

    scheduler.run_pending()
    assert received == [1]
    scheduler.run_pending()
    assert received == [1, 2]


def test_failing_listener_does_not_block_others(bus, scheduler):
    received = []

    def broken(_):
        raise RuntimeError("view crashed")

    bus.subscribe(XP_CHANGED, broken)
    bus.subscribe(XP_CHANGED, received.append)

    bus.publish(XP_CHANGED, 5)
    scheduler.run_pending()

    assert received == [5]


def test_unknown_event_rejected(bus):
    with pytest.raises(ValueError):
        bus.publish("level-changed", 4)
    with pytest.raises(ValueError):
        bus.subscribe("level-changed", print)


@pytest.mark.asyncio
async def test_asyncio_scheduler_delivers_on_next_loop_iteration(store):
    bus = SyncBus(store, scheduler=AsyncioTickScheduler())
    received = []
    bus.subscribe(XP_CHANGED, received.append)

    bus.publish(XP_CHANGED, 42)
    assert received == []

    await asyncio.sleep(0)
    assert received == [42]


# ============================================================================
# External Delivery
# ============================================================================

def test_pump_external_delivers_other_context_writes(bus, other_store):
    """Test a write of xp=300 in another context reaches listeners here"""
    received = []
    bus.subscribe(XP_CHANGED, received.append)

    other_store.set("xp", "300")

    assert bus.pump_external() == 1
    assert received == [300]


def test_pump_external_never_echoes_own_writes(bus, store):
    received = []
    bus.subscribe(XP_CHANGED, received.append)

    store.set("xp", "300")

    assert bus.pump_external() == 0
    assert received == []


def test_pump_external_passes_quest_json_through(bus, other_store):
    received = []
    bus.subscribe(QUESTS_CHANGED, received.append)
    payload = json.dumps([{"id": 1, "title": "Walk", "xp": 10, "completed": False}])

    other_store.set("quests", payload)
    bus.pump_external()

    assert received == [payload]


def test_pump_external_ignores_unmapped_keys_and_bad_xp(bus, other_store):
    received = []
    bus.subscribe(XP_CHANGED, received.append)

    other_store.set("streak", "9")
    other_store.set("xp", "lots")

    assert bus.pump_external() == 0
    assert received == []


def test_pump_external_delivers_immediately(memory_backend, other_store):
    scheduler = ManualTickScheduler()
    bus = SyncBus(MemoryStore(memory_backend), scheduler=scheduler)
    received = []
    bus.subscribe(XP_CHANGED, received.append)

    other_store.set("xp", "77")
    bus.pump_external()

    assert received == [77]
    assert scheduler.pending == 0


# ============================================================================
# Payload Decoding
# ============================================================================

@pytest.mark.parametrize("payload,expected", [
    (300, 300),
    ("300", 300),
    (" 12 ", 12),
    ("abc", None),
    (None, None),
    (True, None),
])
def test_decode_xp_payload(payload, expected):
    assert decode_xp_payload(payload) == expected


@pytest.mark.parametrize("payload", ["not json", "{}", "[1, 2]", None, '{"id": 1}'])
def test_decode_quests_payload_rejects_non_lists(payload):
    assert decode_quests_payload(payload) is None


def test_decode_quests_payload_accepts_list_of_objects():
    assert decode_quests_payload('[{"id": 1}]') == [{"id": 1}]


# ============================================================================
# Publisher Ownership
# ============================================================================

def test_publish_skips_listeners_owned_by_origin(bus, scheduler):
    """Test a publisher does not hear its own broadcast while others do"""
    publisher = object()
    own, other = [], []
    bus.subscribe(XP_CHANGED, own.append, owner=publisher)
    bus.subscribe(XP_CHANGED, other.append)

    bus.publish(XP_CHANGED, 10, origin=publisher)
    scheduler.run_pending()

    assert own == []
    assert other == [10]


def test_owned_listener_gets_other_publishers_events(bus, scheduler):
    publisher = object()
    own = []
    bus.subscribe(XP_CHANGED, own.append, owner=publisher)

    bus.publish(XP_CHANGED, 20)
    bus.publish(XP_CHANGED, 30, origin=object())
    scheduler.run_pending()

    assert own == [20, 30]


def test_owned_listener_gets_external_changes(bus, other_store):
    publisher = object()
    own = []
    bus.subscribe(XP_CHANGED, own.append, owner=publisher)

    other_store.set("xp", "77")
    bus.pump_external()

    assert own == [77]


def test_unsubscribe_owned_listener(bus, scheduler):
    publisher = object()
    own = []
    unsubscribe = bus.subscribe(XP_CHANGED, own.append, owner=publisher)

    unsubscribe()

    assert bus.listener_count(XP_CHANGED) == 0
