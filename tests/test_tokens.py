"""
Tests for bearer tokens and password hashing.
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from portfolio.auth.tokens import (
    TokenExpiredError,
    TokenInvalidError,
    TokenIssuer,
    hash_password,
    verify_password,
)
from portfolio.core.models import User

SECRET = "token-secret"
ISSUED_AT = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class MovableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock():
    return MovableClock(ISSUED_AT)


@pytest.fixture
def issuer(clock):
    return TokenIssuer(SECRET, expire_days=7, clock=clock)


@pytest.fixture
def user():
    return User(email="editor@example.com", role="editor")


# =============================================================================
# Issue / Verify
# =============================================================================


class TestTokens:
    def test_round_trip_carries_identity(self, issuer, user):
        claims = issuer.verify(issuer.issue(user))

        assert claims is not None
        assert claims.id == user.id
        assert claims.email == "editor@example.com"
        assert claims.role == "editor"
        assert claims.exp - claims.iat == timedelta(days=7)

    def test_expires_in_is_seven_days(self, issuer):
        assert issuer.expires_in == 7 * 24 * 60 * 60

    def test_valid_until_expiry(self, issuer, user, clock):
        token = issuer.issue(user)

        clock.now = ISSUED_AT + timedelta(days=7) - timedelta(seconds=1)
        assert issuer.verify(token) is not None

        clock.now = ISSUED_AT + timedelta(days=7)
        assert issuer.verify(token) is None

    def test_decode_raises_expired(self, issuer, user, clock):
        token = issuer.issue(user)
        clock.now = ISSUED_AT + timedelta(days=8)

        with pytest.raises(TokenExpiredError):
            issuer.decode(token)

    def test_other_secret_rejected(self, issuer, user, clock):
        other = TokenIssuer("different-secret", clock=clock)
        assert other.verify(issuer.issue(user)) is None

    def test_edited_payload_rejected(self, issuer, user):
        header, payload, signature = issuer.issue(user).split(".")
        claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
        claims["role"] = "owner"
        forged = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()

        assert issuer.verify(f"{header}.{forged}.{signature}") is None

    @pytest.mark.parametrize("token", [None, "", "not-a-token", "a.b.c"])
    def test_garbage_rejected(self, issuer, token):
        assert issuer.verify(token) is None

    def test_decode_raises_invalid(self, issuer):
        with pytest.raises(TokenInvalidError):
            issuer.decode("not-a-token")

    def test_missing_claims_rejected(self, issuer):
        token = jwt.encode(
            {"id": "user_1", "exp": ISSUED_AT + timedelta(days=1)},
            SECRET,
            algorithm="HS256",
        )
        assert issuer.verify(token) is None

    def test_other_algorithm_rejected(self, clock, user):
        secret = "x" * 64
        issuer = TokenIssuer(secret, clock=clock)
        token = jwt.encode(
            {
                "id": user.id,
                "email": user.email,
                "role": user.role,
                "iat": ISSUED_AT,
                "exp": ISSUED_AT + timedelta(days=1),
            },
            secret,
            algorithm="HS512",
        )
        assert issuer.verify(token) is None

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenIssuer("")


# =============================================================================
# Passwords
# =============================================================================


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("correct horse")

        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")

    @pytest.mark.parametrize("stored", [None, "", "no-separator", "a:b:c"])
    def test_malformed_hash_fails_closed(self, stored):
        assert not verify_password("anything", stored)
