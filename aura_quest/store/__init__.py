"""
Persistent store adapters.

All durable state goes through a ``StoreAdapter``; pick the backend with
``STORE_BACKEND``.
"""

import logging

from aura_quest import config
from aura_quest.store.base import StoreAdapter, StoreChange
from aura_quest.store.file_store import FileStore
from aura_quest.store.memory import MemoryBackend, MemoryStore
from aura_quest.store.redis_store import RedisStore

logger = logging.getLogger(__name__)

__all__ = [
    "StoreAdapter",
    "StoreChange",
    "FileStore",
    "MemoryBackend",
    "MemoryStore",
    "RedisStore",
    "create_store",
]


def create_store(backend: str = None) -> StoreAdapter:
    """
    Build the configured store backend.

    Args:
        backend: Override for ``config.STORE_BACKEND``

    Returns:
        Ready-to-use StoreAdapter
    """
    backend = (backend or config.STORE_BACKEND).lower()
    logger.info(f"Creating '{backend}' store (prefix '{config.STORE_KEY_PREFIX}')")

    if backend == "memory":
        return MemoryStore(key_prefix=config.STORE_KEY_PREFIX)
    if backend == "redis":
        return RedisStore(redis_url=config.REDIS_URL, key_prefix=config.STORE_KEY_PREFIX)
    return FileStore(config.DATA_PATH, key_prefix=config.STORE_KEY_PREFIX)
