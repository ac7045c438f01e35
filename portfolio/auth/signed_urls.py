"""
Signed download URLs.

A signed URL is a capability: anyone holding it may fetch the resource
until it expires, with no session on the server. The signature is

    hex(HMAC-SHA256(secret, f"{resource_path}:{expires}"))

where ``expires`` is an epoch timestamp in milliseconds. There is no
revocation; a leaked URL stays valid for its whole window.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Callable
from urllib.parse import quote, urlencode

from portfolio.core.utils import now_millis


@dataclass(frozen=True)
class SignedUrl:
    """The three parts of a signed URL, plus how to render it."""

    resource_path: str
    expires: int
    signature: str
    route_prefix: str = "/api/secure"

    @property
    def url(self) -> str:
        query = urlencode({"expires": self.expires, "signature": self.signature})
        return f"{self.route_prefix}/{quote(self.resource_path)}?{query}"


class SignedUrlSigner:
    """
    Generates and verifies signed URLs under one HMAC secret.

    TTLs are policy: ``ttl_policies`` maps a resource class (the first
    path segment, e.g. "cv" or "media") to minutes. Anything without a
    policy gets ``default_ttl_minutes``.
    """

    def __init__(
        self,
        secret: str,
        default_ttl_minutes: int = 30,
        ttl_policies: dict[str, int] | None = None,
        clock: Callable[[], int] = now_millis,
        route_prefix: str = "/api/secure",
    ):
        if not secret:
            raise ValueError("Signing secret must not be empty")
        self._secret = secret.encode("utf-8")
        self.default_ttl_minutes = default_ttl_minutes
        self.ttl_policies = dict(ttl_policies or {})
        self._clock = clock
        self.route_prefix = route_prefix.rstrip("/")

    # =========================================================================
    # Signing
    # =========================================================================

    def _signature(self, resource_path: str, expires: int | str) -> str:
        payload = f"{resource_path}:{expires}".encode("utf-8")
        return hmac.new(self._secret, payload, hashlib.sha256).hexdigest()

    def ttl_for(self, resource_class: str) -> int:
        """Minutes a URL for this resource class stays valid."""
        return self.ttl_policies.get(resource_class, self.default_ttl_minutes)

    def sign(self, resource_path: str, ttl_minutes: int | None = None) -> SignedUrl:
        """Sign a resource path, valid for ``ttl_minutes`` from now."""
        if ttl_minutes is None:
            ttl_minutes = self.default_ttl_minutes
        if ttl_minutes <= 0:
            raise ValueError("ttl_minutes must be positive")

        expires = self._clock() + ttl_minutes * 60_000
        return SignedUrl(
            resource_path=resource_path,
            expires=expires,
            signature=self._signature(resource_path, expires),
            route_prefix=self.route_prefix,
        )

    def generate(self, resource_path: str, ttl_minutes: int | None = None) -> str:
        """Return the signed URL path for a resource."""
        return self.sign(resource_path, ttl_minutes).url

    def generate_for(self, resource_class: str, filename: str) -> str:
        """Signed URL for ``{resource_class}/{filename}`` under the class TTL."""
        return self.generate(
            f"{resource_class}/{filename}",
            self.ttl_for(resource_class),
        )

    # =========================================================================
    # Verification
    # =========================================================================

    def verify(
        self,
        resource_path: str | None,
        expires: int | str | None,
        signature: str | None,
    ) -> bool:
        """
        Check a presented URL.

        False when any part is missing, the expiry is not an integer, the
        expiry millisecond has been reached, or the signature does not
        match. Callers get no hint which check failed.
        """
        if not resource_path or expires in (None, "") or not signature:
            return False

        try:
            expires_at = int(expires)
        except (TypeError, ValueError):
            return False

        if self._clock() >= expires_at:
            return False

        # Sign the value exactly as presented so "0123" cannot stand in for "123"
        if str(expires) != str(expires_at):
            return False

        expected = self._signature(resource_path, expires_at)
        return hmac.compare_digest(
            signature.encode("utf-8"),
            expected.encode("utf-8"),
        )
