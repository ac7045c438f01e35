"""
Core module - data models and shared utilities.

This module contains:
- models: User, Project, MediaItem and the default site documents
- utils: ID and clock helpers
- log: process logging setup
"""

from portfolio.core.models import (
    User,
    Project,
    ProjectCreate,
    ProjectUpdate,
    MediaItem,
    DEFAULT_SETTINGS,
    DEFAULT_CONTENT,
)
from portfolio.core.utils import generate_id, utc_now, utc_now_iso, now_millis

__all__ = [
    "User",
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "MediaItem",
    "DEFAULT_SETTINGS",
    "DEFAULT_CONTENT",
    "generate_id",
    "utc_now",
    "utc_now_iso",
    "now_millis",
]
