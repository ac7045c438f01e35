# =============================================================================
# Bearer Token Implementation
# =============================================================================
#
# This module provides JWT bearer authentication:
#   - Token issuing (7-day access tokens carrying id, email and role)
#   - Token validation (fail-closed verify for the request gate)
#   - Password hashing
#
# There are no refresh tokens and no revocation list: a token stays valid
# until it expires or the signing secret is rotated.
#
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable
import hashlib
import logging
import secrets

from pydantic import BaseModel
import jwt

from portfolio.core.models import User
from portfolio.core.utils import utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================

class TokenClaims(BaseModel):
    """Verified bearer token claims."""
    id: str
    email: str
    role: str
    iat: datetime
    exp: datetime


# =============================================================================
# Password Hashing
# =============================================================================

def hash_password(password: str) -> str:
    """
    Hash a password using PBKDF2-SHA256.

    Returns: salt:hash format string
    """
    salt = secrets.token_hex(32)
    hash_bytes = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        iterations=100_000
    )
    return f"{salt}:{hash_bytes.hex()}"


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against its hash."""
    try:
        salt, stored_hash = password_hash.split(':')
        hash_bytes = hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations=100_000
        )
        return secrets.compare_digest(hash_bytes.hex(), stored_hash)
    except (ValueError, AttributeError):
        return False


# =============================================================================
# Token Errors
# =============================================================================

class TokenError(Exception):
    """Base exception for token errors."""
    pass


class TokenExpiredError(TokenError):
    """Token has expired."""
    pass


class TokenInvalidError(TokenError):
    """Token is invalid or malformed."""
    pass


# =============================================================================
# Issuer
# =============================================================================

REQUIRED_CLAIMS = ["id", "email", "role", "exp", "iat"]


class TokenIssuer:
    """
    Issues and verifies bearer tokens under one symmetric secret.

    Built once at startup from the settings object and kept on the
    app state; tests build their own with throwaway secrets.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_days: int = 7,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_days = expire_days
        self._clock = clock

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return self.expire_days * 24 * 60 * 60

    def issue(self, user: User) -> str:
        """Create a signed token for a user."""
        now = self._clock()
        payload = {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": now + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.

        Raises:
            TokenExpiredError: Token has expired
            TokenInvalidError: Token is invalid
        """
        now = self._clock()
        try:
            # Expiry is checked below against our clock so tests can move it
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": REQUIRED_CLAIMS},
            )
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {e}")

        try:
            claims = TokenClaims(
                id=str(payload["id"]),
                email=str(payload["email"]),
                role=str(payload["role"]),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise TokenInvalidError(f"Invalid token claims: {e}")

        if now >= claims.exp:
            raise TokenExpiredError("Token has expired")

        return claims

    def verify(self, token: str | None) -> TokenClaims | None:
        """
        Verify a token, failing closed.

        Returns the claims, or None for anything that is not a valid,
        unexpired token signed with our secret.
        """
        if not token:
            return None
        try:
            return self.decode(token)
        except TokenError as e:
            logger.debug("Rejected bearer token: %s", e)
            return None
