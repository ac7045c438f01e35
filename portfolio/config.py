"""
Application configuration.

Loads settings from environment variables with sensible defaults.
The settings object is passed explicitly to the components that need
secrets (token issuer, URL signer), so each app instance can run with
its own keys.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "dev-jwt-secret-change-in-production"
DEFAULT_HMAC_SECRET = "dev-hmac-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 5000
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Applied to every route, per client address; "N/period" syntax of the limits package
    rate_limit: str = "100/15minutes"
    rate_limit_enabled: bool = True

    # ==========================================================================
    # Authentication
    # ==========================================================================

    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7

    # The one account that is provisioned automatically and owns the site
    owner_email: str = "owner@example.com"

    # When False, only pre-existing users (and the owner) can log in
    allow_self_registration: bool = False

    # ==========================================================================
    # Signed URLs
    # ==========================================================================

    hmac_secret: str = DEFAULT_HMAC_SECRET
    signed_url_ttl_minutes: int = 30
    cv_signed_url_ttl_minutes: int = 60

    # ==========================================================================
    # Storage
    # ==========================================================================

    data_dir: str = "./data"
    secure_storage_dir: str = "./storage/secure"
    thumbnails_dir: str = "./public/thumbnails"

    max_upload_size_mb: int = 50
    max_upload_files: int = 10
    watermark_text: str = "© Portfolio Preview"

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def signed_url_ttl_policies(self) -> dict[str, int]:
        """Minutes each gated resource class stays downloadable."""
        return {
            "media": self.signed_url_ttl_minutes,
            "cv": self.cv_signed_url_ttl_minutes,
        }

    @property
    def using_default_secrets(self) -> bool:
        return (
            self.jwt_secret_key == DEFAULT_JWT_SECRET
            or self.hmac_secret == DEFAULT_HMAC_SECRET
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
