# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   1. Create a Python project in Sentry
#   2. Copy DSN to .env: SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   init_sentry(settings) is called from the app lifespan
#
# =============================================================================

import logging
from typing import Any

from portfolio.config import Settings

logger = logging.getLogger(__name__)

# Sentry SDK is optional - error tracking is simply off without it
try:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.starlette import StarletteIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration
    SENTRY_AVAILABLE = True
except ImportError:
    SENTRY_AVAILABLE = False
    sentry_sdk = None


# Requests that should never be reported (noise, or carry capabilities)
IGNORED_TRANSACTIONS = ("/health",)


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry error tracking.

    Returns True if initialized, False if skipped.
    """
    if not SENTRY_AVAILABLE:
        logger.info("Sentry SDK not installed - error tracking disabled")
        return False

    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        # Don't send PII by default
        send_default_pii=False,
        before_send=_filter_events,
        before_send_transaction=_filter_transactions,
    )

    logger.info("Sentry initialized for %s", settings.environment)
    return True


def _scrub_query(event: dict[str, Any]) -> None:
    # Signed URL signatures are bearer capabilities; keep them out of reports
    request = event.get("request") or {}
    if request.get("query_string"):
        request["query_string"] = "[Filtered]"


def _filter_events(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Drop or scrub events before they are sent."""
    _scrub_query(event)
    return event


def _filter_transactions(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Skip health checks."""
    url = (event.get("request") or {}).get("url", "")
    if any(url.endswith(path) for path in IGNORED_TRANSACTIONS):
        return None
    _scrub_query(event)
    return event
