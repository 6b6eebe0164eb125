"""
Key-value store adapter contract.

Every value is a string stored under a logical key (``xp``, ``quests``, ...).
Backends prefix keys with ``STORE_KEY_PREFIX`` so several apps can share one
store. Reads and writes are independent per key; there are no transactions.

Typed read helpers never raise: a missing key or a value that does not decode
falls back to the caller's default.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, NamedTuple, Optional, TypeVar

from aura_quest.observability.metrics import store_decode_failures_total

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreChange(NamedTuple):
    """A write to ``key`` observed from another context"""
    key: str
    value: Optional[str]


class StoreAdapter(ABC):
    """Synchronous, per-key durable storage shared between contexts"""

    backend_name = "base"

    def __init__(self, key_prefix: str = "aq_"):
        self.key_prefix = key_prefix

    def storage_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def logical_key(self, storage_key: str) -> Optional[str]:
        """Strip the prefix; None for keys that belong to someone else"""
        if not storage_key.startswith(self.key_prefix):
            return None
        return storage_key[len(self.key_prefix):]

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None if absent (or unreadable)"""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``; failures are logged, not raised"""

    @abstractmethod
    def poll_external_changes(self) -> List[StoreChange]:
        """
        Return writes made by other contexts since the previous call.

        Writes made through this adapter are never reported back.
        """

    def close(self) -> None:
        """Release backend resources"""

    # ------------------------------------------------------------------
    # Typed helpers
    # ------------------------------------------------------------------

    def read_str(self, key: str, default: str) -> str:
        raw = self.get(key)
        return default if raw is None else raw

    def read_int(self, key: str, default: int) -> int:
        raw = self.get(key)
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Stored value for '{key}' is not an integer: {raw!r}, using default {default}")
            store_decode_failures_total.labels(key=key).inc()
            return default

    def read_json(self, key: str, default: T, parse: Optional[Callable[[Any], T]] = None) -> T:
        """
        Decode a JSON value, optionally validating it with ``parse``.

        Any decode or validation failure returns ``default``.
        """
        raw = self.get(key)
        if raw is None:
            return default
        try:
            value = json.loads(raw)
            return parse(value) if parse else value
        except (ValueError, TypeError) as e:
            # pydantic.ValidationError is a ValueError subclass
            logger.warning(f"Stored value for '{key}' could not be decoded: {e}")
            store_decode_failures_total.labels(key=key).inc()
            return default

    def write_int(self, key: str, value: int) -> None:
        self.set(key, str(value))

    def write_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value))
