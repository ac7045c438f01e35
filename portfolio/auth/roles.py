"""
Roles and the access hierarchy.

This defines WHO outranks whom, not HOW requests are checked.
The actual checking happens in policies.py.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Site-wide role. Each level includes everything below it."""

    VIEWER = "viewer"    # Read-only access to the admin area
    EDITOR = "editor"    # Can create and edit projects and content
    ADMIN = "admin"      # Can delete projects, change settings, upload the CV
    OWNER = "owner"      # Full control, manages users and roles

    @property
    def level(self) -> int:
        return ROLE_LEVELS[self]


ROLE_LEVELS: dict[Role, int] = {
    Role.VIEWER: 1,
    Role.EDITOR: 2,
    Role.ADMIN: 3,
    Role.OWNER: 4,
}


def parse_role(value: Role | str | None) -> Role | None:
    """Return the Role for a string, or None if it is not in the hierarchy."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def role_level(role: Role | str | None) -> int:
    """
    Numeric level of a role.

    Anything outside the hierarchy (unknown strings, None) is level 0,
    which every gate above level 0 denies.
    """
    parsed = parse_role(role)
    return ROLE_LEVELS[parsed] if parsed else 0


def can_access(current: Role | str | None, required: Role | str | None) -> bool:
    """Check if a caller with ``current`` role satisfies ``required``."""
    return role_level(current) >= role_level(required)
