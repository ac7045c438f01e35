"""
Auth context - who is calling, and at what level.

This is the lightweight object passed to route handlers once the
bearer token has been verified.
"""

from __future__ import annotations

from dataclasses import dataclass

from portfolio.auth.roles import Role, can_access, role_level
from portfolio.auth.tokens import TokenClaims


@dataclass(frozen=True)
class AuthContext:
    """
    Identity of an authenticated request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_role("editor"))):
            print(f"{ctx.email} ({ctx.role}) editing")
            if ctx.can(Role.ADMIN):
                # do something
    """

    user_id: str
    email: str
    role: str

    @property
    def level(self) -> int:
        return role_level(self.role)

    def can(self, required: Role | str) -> bool:
        """Check if this caller is at or above a role."""
        return can_access(self.role, required)

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> AuthContext:
        return cls(user_id=claims.id, email=claims.email, role=claims.role)
