"""
Policies - the interface for route authorization.

Use ``ctx: AuthContext = Depends(require_role("editor"))`` in a route.

Design:
- `get_current_user` verifies the bearer token and resolves to AuthContext
- `require_role()` builds a dependency on top of it that compares levels
- Identity failures raise 401/403, role failures raise 403 with the
  required and current role in the body
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portfolio.auth.context import AuthContext
from portfolio.auth.roles import Role
from portfolio.auth.tokens import TokenIssuer
from portfolio.errors import AuthenticationError, AuthorizationError, InvalidTokenError

logger = logging.getLogger(__name__)


# =============================================================================
# Token Handling
# =============================================================================


# Doesn't fail on its own when the header is missing; we raise our own errors
optional_bearer = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthContext:
    """
    Resolve the caller from ``Authorization: Bearer <token>``.

    Raises:
        AuthenticationError: no bearer token (401)
        InvalidTokenError: token expired, malformed or badly signed (403)
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Access token required")

    claims = issuer.verify(credentials.credentials)
    if claims is None:
        raise InvalidTokenError("Invalid or expired token")

    return AuthContext.from_claims(claims)


# =============================================================================
# Main Interface
# =============================================================================


def require_auth() -> Callable:
    """Just require authentication, no specific role."""
    return get_current_user


def require_role(role: Role | str) -> Callable:
    """
    Require a minimum role to access a route.

    Usage:
        @router.delete("/projects/{project_id}")
        async def delete_project(
            project_id: str,
            ctx: AuthContext = Depends(require_role(Role.ADMIN)),
        ):
            ...

    The check is ``level(caller) >= level(required)``. Roles outside the
    hierarchy rank at level 0 and are denied.
    """
    required = Role(role)
    return _create_dependency(required)


def _create_dependency(required: Role) -> Callable:
    """Create a FastAPI dependency for a minimum role."""

    async def dependency(ctx: AuthContext = Depends(get_current_user)) -> AuthContext:
        if not ctx.can(required):
            logger.info(
                "Denied %s: requires %s, has %s",
                ctx.email, required.value, ctx.role,
            )
            raise AuthorizationError(required=required.value, current=ctx.role)
        return ctx

    return dependency
