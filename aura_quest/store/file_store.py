"""
File-backed store: one UTF-8 file per key under a data directory.

Every process pointing at the same directory shares state. Writes go through
a temporary file and ``os.replace`` so readers never see half a value.
External changes are found by re-reading each key file and comparing it with
the last value this context wrote or already reported.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from aura_quest.observability.metrics import store_errors_total
from aura_quest.store.base import StoreAdapter, StoreChange

logger = logging.getLogger(__name__)


class FileStore(StoreAdapter):
    """Durable key-value store on the local filesystem"""

    backend_name = "file"

    def __init__(self, data_path: Path, key_prefix: str = "aq_"):
        super().__init__(key_prefix=key_prefix)
        self.data_path = Path(data_path)
        self.data_path.mkdir(parents=True, exist_ok=True)
        # Last value known to this context, per storage key
        self._seen: Dict[str, Optional[str]] = {}
        for path in self._key_files():
            self._seen[path.name] = self._read(path)
        logger.info(f"File store ready at {self.data_path} ({len(self._seen)} keys)")

    def _path(self, storage_key: str) -> Path:
        return self.data_path / storage_key

    def _key_files(self) -> List[Path]:
        return [
            p for p in self.data_path.iterdir()
            if p.is_file() and p.name.startswith(self.key_prefix)
        ]

    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"File store read error for '{path.name}': {e}")
            store_errors_total.labels(backend=self.backend_name, operation="get").inc()
            return None

    def get(self, key: str) -> Optional[str]:
        return self._read(self._path(self.storage_key(key)))

    def set(self, key: str, value: str) -> None:
        storage_key = self.storage_key(key)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.data_path, prefix=".tmp-")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(storage_key))
            self._seen[storage_key] = value
            logger.debug(f"File store SET: {key}")
        except OSError as e:
            logger.error(f"File store write error for '{key}': {e}")
            store_errors_total.labels(backend=self.backend_name, operation="set").inc()

    def poll_external_changes(self) -> List[StoreChange]:
        changes = []
        try:
            paths = self._key_files()
        except OSError as e:
            logger.error(f"File store scan error: {e}")
            store_errors_total.labels(backend=self.backend_name, operation="poll").inc()
            return changes

        for path in sorted(paths):
            value = self._read(path)
            if value is None or self._seen.get(path.name) == value:
                continue
            self._seen[path.name] = value
            key = self.logical_key(path.name)
            if key is not None:
                changes.append(StoreChange(key, value))
        return changes
