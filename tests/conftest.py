"""
Shared fixtures.

Every test app gets its own secrets and its own temporary data,
storage and thumbnail directories.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from portfolio.api.app import create_app
from portfolio.config import Settings
from tests.helpers import OWNER_EMAIL


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="test",
        debug=False,
        log_level="WARNING",
        jwt_secret_key="test-jwt-secret",
        hmac_secret="test-hmac-secret",
        owner_email=OWNER_EMAIL,
        allow_self_registration=False,
        data_dir=str(tmp_path / "data"),
        secure_storage_dir=str(tmp_path / "secure"),
        thumbnails_dir=str(tmp_path / "thumbnails"),
        max_upload_size_mb=1,
        max_upload_files=3,
        rate_limit_enabled=False,
        sentry_dsn="",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def token_for(app):
    """Bearer token for a (created on demand) user with the given role."""
    def _token(role: str, email: str | None = None) -> str:
        email = email or f"{role}@example.com"
        db = app.state.db
        user = asyncio.run(db.get_user(email))
        if user is None:
            user = asyncio.run(db.create_user(email, role=role))
        return app.state.token_issuer.issue(user)
    return _token


@pytest.fixture
def headers_for(token_for):
    def _headers(role: str, email: str | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(role, email)}"}
    return _headers
