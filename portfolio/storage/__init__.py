"""
Storage abstractions.

- CollectionStore → whole-collection JSON persistence (files locally)
- PortfolioDatabase → typed operations on users, projects, settings, content
"""

from portfolio.storage.base import (
    CollectionStore,
    Collections,
    COLLECTION_DEFAULTS,
    default_for,
)
from portfolio.storage.local import JsonFileStore, InMemoryStore, create_local_store
from portfolio.storage.database import PortfolioDatabase

__all__ = [
    "CollectionStore",
    "Collections",
    "COLLECTION_DEFAULTS",
    "default_for",
    "JsonFileStore",
    "InMemoryStore",
    "create_local_store",
    "PortfolioDatabase",
]
