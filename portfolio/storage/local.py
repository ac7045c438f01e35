"""
Local storage implementations.

The JSON file store is what the site runs on; the in-memory store has
the same contract and is used in tests.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from portfolio.errors import StorageError
from portfolio.storage.base import CollectionStore, default_for

logger = logging.getLogger(__name__)


# =============================================================================
# JSON File Store
# =============================================================================


class JsonFileStore(CollectionStore):
    """
    Store each collection as ``{base_path}/{collection}.json``.

    No locking: two requests that read-modify-write the same collection
    concurrently can lose an update.
    """

    def __init__(self, base_path: str | Path = "./data"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, collection: str) -> Path:
        return self.base_path / f"{collection}.json"

    async def read(self, collection: str) -> Any:
        path = self._path(collection)
        if not path.exists():
            return default_for(collection)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Error reading %s: %s", path, e)
            raise StorageError(f"Failed to read {collection}") from e

    async def write(self, collection: str, data: Any) -> None:
        path = self._path(collection)
        try:
            path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error writing %s: %s", path, e)
            raise StorageError(f"Failed to write {collection}") from e

    async def exists(self, collection: str) -> bool:
        return self._path(collection).exists()


# =============================================================================
# In-Memory Store
# =============================================================================


class InMemoryStore(CollectionStore):
    """In-memory collections for tests."""

    def __init__(self):
        self._data: dict[str, Any] = {}

    async def read(self, collection: str) -> Any:
        if collection not in self._data:
            return default_for(collection)
        # Copy so callers can't mutate stored state without a write
        return copy.deepcopy(self._data[collection])

    async def write(self, collection: str, data: Any) -> None:
        self._data[collection] = copy.deepcopy(data)

    async def exists(self, collection: str) -> bool:
        return collection in self._data


# =============================================================================
# Factory
# =============================================================================


def create_local_store(data_dir: str | Path = "./data") -> JsonFileStore:
    """Create the file-backed store used by the running site."""
    return JsonFileStore(data_dir)
