"""
Exception hierarchy for the portfolio backend.

Every error a request can end in is a ``PortfolioError``. The API layer
turns these into ``{"error": message, ...extra}`` JSON responses with the
attached status code.
"""

from __future__ import annotations

from typing import Any


class PortfolioError(Exception):
    """Base exception carrying an HTTP status and extra response fields."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        **extra: Any,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


# --- Auth ---

class AuthenticationError(PortfolioError):
    """No credentials, or credentials that do not identify a user."""
    status_code = 401


class InvalidTokenError(PortfolioError):
    """Bearer token present but expired, malformed or badly signed."""
    status_code = 403


class AuthorizationError(PortfolioError):
    """Identity is valid but its role is below the required level."""
    status_code = 403

    def __init__(self, required: str, current: str | None):
        super().__init__(
            "Insufficient permissions",
            required=required,
            current=current,
        )
        self.required = required
        self.current = current


class SignedUrlError(PortfolioError):
    """Signed download URL missing its parameters, expired or tampered."""
    status_code = 403


# --- Requests ---

class NotFoundError(PortfolioError):
    status_code = 404


class ValidationError(PortfolioError):
    status_code = 400


class UploadRejected(PortfolioError):
    """Upload refused before anything was written to disk."""
    status_code = 400


# --- Storage ---

class StorageError(PortfolioError):
    """A collection file could not be read, parsed or written."""
    status_code = 500
