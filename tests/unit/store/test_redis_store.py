"""Unit tests for the Redis store (aura_quest/store/redis_store.py)"""
import json
from unittest.mock import MagicMock

import pytest
import redis

from aura_quest.store.base import StoreChange
from aura_quest.store.redis_store import RedisStore


@pytest.fixture
def mock_redis():
    """Mock Redis client with a pub/sub handle"""
    client = MagicMock()
    client.get.return_value = None
    client.pubsub.return_value.get_message.return_value = None
    return client


def announcement(origin, key, value):
    return {"type": "message", "channel": "aq_changes", "data": json.dumps({"origin": origin, "key": key, "value": value})}


def test_subscribes_to_change_channel(mock_redis):
    store = RedisStore(client=mock_redis)

    mock_redis.pubsub.return_value.subscribe.assert_called_once_with("aq_changes")
    assert store.channel == "aq_changes"


def test_get_uses_prefixed_key(mock_redis):
    mock_redis.get.return_value = "300"
    store = RedisStore(client=mock_redis)

    assert store.get("xp") == "300"
    mock_redis.get.assert_called_once_with("aq_xp")


def test_set_writes_then_publishes(mock_redis):
    store = RedisStore(client=mock_redis)

    store.set("xp", "300")

    mock_redis.set.assert_called_once_with("aq_xp", "300")
    channel, message = mock_redis.publish.call_args[0]
    assert channel == "aq_changes"
    assert json.loads(message) == {"origin": store.origin_id, "key": "aq_xp", "value": "300"}


def test_get_error_degrades_to_missing(mock_redis):
    mock_redis.get.side_effect = redis.ConnectionError("down")
    store = RedisStore(client=mock_redis)

    assert store.get("xp") is None
    assert store.read_int("xp", 120) == 120


def test_set_error_is_swallowed_and_not_announced(mock_redis):
    mock_redis.set.side_effect = redis.ConnectionError("down")
    store = RedisStore(client=mock_redis)

    store.set("xp", "300")

    mock_redis.publish.assert_not_called()


def test_poll_returns_other_origins_only(mock_redis):
    store = RedisStore(client=mock_redis)
    mock_redis.pubsub.return_value.get_message.side_effect = [
        {"type": "subscribe", "channel": "aq_changes", "data": 1},
        announcement(store.origin_id, "aq_xp", "140"),
        announcement("other-tab", "aq_xp", "300"),
        announcement("other-tab", "zz_xp", "1"),
        {"type": "message", "channel": "aq_changes", "data": "garbage"},
        announcement("other-tab", "aq_quests", "[]"),
        None,
    ]

    assert store.poll_external_changes() == [
        StoreChange("xp", "300"),
        StoreChange("quests", "[]"),
    ]


def test_poll_without_subscription_returns_nothing(mock_redis):
    mock_redis.pubsub.return_value.subscribe.side_effect = redis.ConnectionError("down")
    store = RedisStore(client=mock_redis)

    assert store.poll_external_changes() == []


def test_poll_read_error_returns_collected_changes(mock_redis):
    store = RedisStore(client=mock_redis)
    mock_redis.pubsub.return_value.get_message.side_effect = [
        announcement("other-tab", "aq_xp", "300"),
        redis.ConnectionError("lost"),
    ]

    assert store.poll_external_changes() == [StoreChange("xp", "300")]


def test_two_stores_have_distinct_origins(mock_redis):
    assert RedisStore(client=mock_redis).origin_id != RedisStore(client=mock_redis).origin_id
