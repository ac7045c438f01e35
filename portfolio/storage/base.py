"""
Storage abstraction layer.

All persistence goes through the collection store interface. A
collection is a single JSON document (an object or an array) that is
always read and written whole. This allows swapping implementations
(JSON files → a document database) without changing application code.

There are no partial updates, indexes or transactions: a write replaces
the collection and the last writer wins.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any

from portfolio.core.models import DEFAULT_CONTENT, DEFAULT_SETTINGS


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection names."""

    USERS = "users"
    PROJECTS = "projects"
    SETTINGS = "settings"
    CONTENT = "content"

    ALL = (USERS, PROJECTS, SETTINGS, CONTENT)


# What a collection holds before anything has been written to it
COLLECTION_DEFAULTS: dict[str, Any] = {
    Collections.USERS: [],
    Collections.PROJECTS: [],
    Collections.SETTINGS: DEFAULT_SETTINGS,
    Collections.CONTENT: DEFAULT_CONTENT,
}


def default_for(collection: str) -> Any:
    """A fresh copy of the collection's empty value."""
    if collection not in COLLECTION_DEFAULTS:
        raise KeyError(f"Unknown collection: {collection}")
    return copy.deepcopy(COLLECTION_DEFAULTS[collection])


# =============================================================================
# Store Interface
# =============================================================================


class CollectionStore(ABC):
    """
    Whole-collection persistence.

    Local Implementation: one JSON file per collection
    Test Implementation: in-memory dict
    """

    @abstractmethod
    async def read(self, collection: str) -> Any:
        """Return the parsed collection, or its default if never written."""
        pass

    @abstractmethod
    async def write(self, collection: str, data: Any) -> None:
        """Replace the collection with ``data``."""
        pass

    @abstractmethod
    async def exists(self, collection: str) -> bool:
        """Whether the collection has ever been written."""
        pass
