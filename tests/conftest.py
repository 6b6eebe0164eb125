"""Global test fixtures and utilities for aura-quest tests"""
import json
import random

import pytest

from aura_quest.gamification.engine import ProgressionEngine
from aura_quest.gamification.suggestions import SuggestionGenerator
from aura_quest.store.memory import MemoryBackend, MemoryStore
from aura_quest.sync.bus import SyncBus
from aura_quest.sync.scheduler import ManualTickScheduler
from aura_quest.utils.ids import IdGenerator


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def memory_backend():
    """Shared in-process storage area (one per test)"""
    return MemoryBackend()


@pytest.fixture
def store(memory_backend):
    """Store context for the 'current tab'"""
    return MemoryStore(memory_backend)


@pytest.fixture
def other_store(memory_backend):
    """Store context for a second tab sharing the same backend"""
    return MemoryStore(memory_backend)


@pytest.fixture
def seed_store(store):
    """Write progression keys into the store before an engine loads"""
    def _seed(xp=None, level=None, streak=None, quests=None, **raw):
        if xp is not None:
            store.set("xp", str(xp))
        if level is not None:
            store.set("level", str(level))
        if streak is not None:
            store.set("streak", str(streak))
        if quests is not None:
            store.set("quests", json.dumps(quests))
        for key, value in raw.items():
            store.set(key, value)
        return store

    return _seed


# ============================================================================
# Sync Fixtures
# ============================================================================

@pytest.fixture
def scheduler():
    """Tick scheduler driven by the test"""
    return ManualTickScheduler()


@pytest.fixture
def bus(store, scheduler):
    """Sync bus for the current tab"""
    return SyncBus(store, scheduler=scheduler)


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def generator():
    """Suggestion generator with fixed seed and ids starting at 100"""
    return SuggestionGenerator(rng=random.Random(42), ids=IdGenerator(start=100))


@pytest.fixture
def engine_factory(store, bus, generator):
    """Build an engine after the test has seeded the store"""
    engines = []

    def _create():
        engine = ProgressionEngine(store, bus, generator=generator)
        engines.append(engine)
        return engine

    yield _create

    for engine in engines:
        engine.close()


@pytest.fixture
def engine(engine_factory):
    """Engine over an empty store (all defaults)"""
    return engine_factory()


@pytest.fixture
def make_quests():
    """Factory for quest dicts"""
    def _make(count, start_id=1, xp=10, completed=False):
        return [
            {"id": start_id + i, "title": f"Quest {start_id + i}", "xp": xp, "completed": completed}
            for i in range(count)
        ]

    return _make
