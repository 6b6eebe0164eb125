"""
Redis-backed store with pub/sub change notifications.

Provides:
- Plain string values per prefixed key
- A change channel announcing every write with its origin context
- Graceful degradation on Redis failures (logged, never raised)
"""

import json
import logging
from typing import List, Optional
from uuid import uuid4

import redis

from aura_quest.observability.metrics import store_errors_total
from aura_quest.store.base import StoreAdapter, StoreChange

logger = logging.getLogger(__name__)

# Upper bound on messages drained per poll
MAX_MESSAGES_PER_POLL = 1000


class RedisStore(StoreAdapter):
    """
    Redis key-value store.

    Every ``set`` is followed by a PUBLISH on ``<prefix>changes`` carrying
    ``{"origin", "key", "value"}``. Each store instance has its own origin id
    and drops its own announcements when polling.
    """

    backend_name = "redis"

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        key_prefix: str = "aq_",
        client: Optional[redis.Redis] = None,
    ):
        """
        Initialize Redis store.

        Args:
            redis_url: Redis connection URL (ignored when ``client`` is given)
            key_prefix: Prefix for every stored key and the change channel
            client: Pre-built client (tests, shared pools)
        """
        super().__init__(key_prefix=key_prefix)
        self.redis_url = redis_url
        self.origin_id = str(uuid4())
        self.channel = f"{key_prefix}changes"
        self._client = client or redis.Redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        self._pubsub = None
        try:
            self._pubsub = self._client.pubsub()
            self._pubsub.subscribe(self.channel)
            logger.info(f"Redis store subscribed to '{self.channel}' as {self.origin_id}")
        except redis.RedisError as e:
            logger.error(f"Redis subscribe failed for '{self.channel}': {e}")
            logger.warning("External change notifications disabled")
            store_errors_total.labels(backend=self.backend_name, operation="subscribe").inc()
            self._pubsub = None

    def get(self, key: str) -> Optional[str]:
        try:
            return self._client.get(self.storage_key(key))
        except redis.RedisError as e:
            logger.error(f"Redis GET error for key '{key}': {e}")
            store_errors_total.labels(backend=self.backend_name, operation="get").inc()
            return None

    def set(self, key: str, value: str) -> None:
        storage_key = self.storage_key(key)
        try:
            self._client.set(storage_key, value)
        except redis.RedisError as e:
            logger.error(f"Redis SET error for key '{key}': {e}")
            store_errors_total.labels(backend=self.backend_name, operation="set").inc()
            return

        announcement = json.dumps({"origin": self.origin_id, "key": storage_key, "value": value})
        try:
            self._client.publish(self.channel, announcement)
        except redis.RedisError as e:
            # Value is stored; other contexts just miss the notification
            logger.error(f"Redis PUBLISH error for key '{key}': {e}")
            store_errors_total.labels(backend=self.backend_name, operation="publish").inc()

    def poll_external_changes(self) -> List[StoreChange]:
        changes = []
        if self._pubsub is None:
            return changes

        for _ in range(MAX_MESSAGES_PER_POLL):
            try:
                message = self._pubsub.get_message(timeout=0)
            except redis.RedisError as e:
                logger.error(f"Redis pub/sub read error: {e}")
                store_errors_total.labels(backend=self.backend_name, operation="poll").inc()
                break
            if message is None:
                break
            if message.get("type") != "message":
                continue

            try:
                payload = json.loads(message["data"])
                origin = payload["origin"]
                storage_key = payload["key"]
                value = payload["value"]
            except (ValueError, TypeError, KeyError) as e:
                logger.warning(f"Ignoring malformed change announcement: {e}")
                continue

            if origin == self.origin_id:
                continue
            key = self.logical_key(storage_key)
            if key is not None:
                changes.append(StoreChange(key, value))
        return changes

    def close(self) -> None:
        try:
            if self._pubsub is not None:
                self._pubsub.close()
            self._client.close()
            logger.info("Redis store closed")
        except redis.RedisError as e:
            logger.error(f"Error closing Redis store: {e}")
