"""
In-process store shared by several contexts.

A ``MemoryBackend`` plays the role of the browser's storage area; each
``MemoryStore`` attached to it is one context (tab, view host). A write from
one context lands in the inbox of every other attached context, the same way
a browser fires ``storage`` events only in the other tabs.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional

from aura_quest.store.base import StoreAdapter, StoreChange

logger = logging.getLogger(__name__)


class MemoryBackend:
    """Shared dict of storage keys plus the set of attached contexts"""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self._contexts: List["MemoryStore"] = []

    def attach(self, context: "MemoryStore") -> None:
        self._contexts.append(context)

    def detach(self, context: "MemoryStore") -> None:
        if context in self._contexts:
            self._contexts.remove(context)

    def write(self, storage_key: str, value: str, origin: "MemoryStore") -> None:
        old = self.data.get(storage_key)
        self.data[storage_key] = value
        if old == value:
            # Unchanged values do not notify other contexts
            return
        for context in self._contexts:
            if context is not origin:
                context._inbox.append((storage_key, value))


class MemoryStore(StoreAdapter):
    """One context's view of a ``MemoryBackend``"""

    backend_name = "memory"

    def __init__(self, backend: Optional[MemoryBackend] = None, key_prefix: str = "aq_"):
        super().__init__(key_prefix=key_prefix)
        self.backend = backend or MemoryBackend()
        self._inbox: Deque[tuple] = deque()
        self.backend.attach(self)

    def get(self, key: str) -> Optional[str]:
        return self.backend.data.get(self.storage_key(key))

    def set(self, key: str, value: str) -> None:
        self.backend.write(self.storage_key(key), value, origin=self)
        logger.debug(f"Memory store SET: {key}")

    def poll_external_changes(self) -> List[StoreChange]:
        changes = []
        while self._inbox:
            storage_key, value = self._inbox.popleft()
            key = self.logical_key(storage_key)
            if key is not None:
                changes.append(StoreChange(key, value))
        return changes

    def close(self) -> None:
        self.backend.detach(self)
        self._inbox.clear()
