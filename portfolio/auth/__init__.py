"""
Authentication and access control.

Design principles:
1. One linear role hierarchy: viewer < editor < admin < owner
2. Stateless bearer tokens for identity, checked on every request
3. Stateless signed URLs for downloads of gated files
4. Zero boilerplate in route handlers: Depends(require_role(...))

The HTTP routes live in portfolio.auth.routes and are mounted by the app.
"""

from portfolio.auth.roles import Role, role_level, can_access, parse_role
from portfolio.auth.context import AuthContext
from portfolio.auth.tokens import (
    TokenIssuer,
    TokenClaims,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    hash_password,
    verify_password,
)
from portfolio.auth.signed_urls import SignedUrl, SignedUrlSigner
from portfolio.auth.policies import get_current_user, require_auth, require_role
from portfolio.auth.accounts import AccountService

__all__ = [
    # Roles
    "Role",
    "role_level",
    "can_access",
    "parse_role",
    # Main interface
    "AuthContext",
    "get_current_user",
    "require_auth",
    "require_role",
    # Tokens
    "TokenIssuer",
    "TokenClaims",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "hash_password",
    "verify_password",
    # Signed URLs
    "SignedUrl",
    "SignedUrlSigner",
    # Accounts
    "AccountService",
]
