"""
Shared utility functions for the portfolio backend.

This module contains common utilities used across the codebase.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique ID with optional prefix.
    
    Args:
        prefix: Optional prefix (e.g., "proj", "user")
        
    Returns:
        A unique ID like "proj_a1b2c3d4e5f6"
    """
    uid = str(uuid.uuid4())[:12]
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the stored timestamp format)."""
    return utc_now().isoformat()


def now_millis() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)
