"""
FastAPI application for the portfolio backend.

This is the HTTP API the portfolio frontend talks to. ``create_app``
builds every component from one explicit Settings object, so separate
apps (e.g. one per test) never share secrets or data directories.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from portfolio import __version__
from portfolio.api import admin, public
from portfolio.auth import routes as auth_routes
from portfolio.auth.accounts import AccountService
from portfolio.auth.signed_urls import SignedUrlSigner
from portfolio.auth.tokens import TokenIssuer
from portfolio.config import Settings, get_settings
from portfolio.core.log import configure_logging
from portfolio.errors import PortfolioError
from portfolio.integrations.sentry import init_sentry
from portfolio.media.uploads import UploadPipeline
from portfolio.storage import PortfolioDatabase, create_local_store

logger = logging.getLogger(__name__)


# =============================================================================
# Error Handlers
# =============================================================================


async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


def _unhandled_error_handler(debug: bool):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"error": "Internal server error"}
        if debug:
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)
    return handler


# =============================================================================
# App Factory
# =============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API with all components wired from ``settings``."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize and cleanup app resources."""
        if init_sentry(settings):
            logger.info("Sentry error tracking enabled")

        await app.state.db.ensure_defaults(settings.owner_email)

        if settings.using_default_secrets:
            logger.warning("Using default JWT/HMAC secrets - set them in production")
        logger.info("Portfolio API starting in %s mode", settings.environment)

        yield

        logger.info("Portfolio API shutting down")

    app = FastAPI(
        title="Portfolio API",
        description="Content, projects and gated downloads for a portfolio site",
        version=__version__,
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Components
    # -------------------------------------------------------------------------

    token_issuer = TokenIssuer(
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_days=settings.jwt_expire_days,
    )
    db = PortfolioDatabase(create_local_store(settings.data_dir))

    app.state.settings = settings
    app.state.db = db
    app.state.token_issuer = token_issuer
    app.state.signer = SignedUrlSigner(
        secret=settings.hmac_secret,
        default_ttl_minutes=settings.signed_url_ttl_minutes,
        ttl_policies=settings.signed_url_ttl_policies,
    )
    app.state.uploads = UploadPipeline(
        secure_dir=settings.secure_storage_dir,
        thumbnails_dir=settings.thumbnails_dir,
        max_file_size=settings.max_upload_size_bytes,
        max_files=settings.max_upload_files,
        watermark_text=settings.watermark_text,
    )
    app.state.accounts = AccountService(
        db=db,
        issuer=token_issuer,
        owner_email=settings.owner_email,
        allow_self_registration=settings.allow_self_registration,
    )

    # -------------------------------------------------------------------------
    # Middleware
    # -------------------------------------------------------------------------

    app.state.limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PortfolioError, portfolio_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler(settings.debug))

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    app.include_router(public.router)
    app.include_router(auth_routes.router)
    app.include_router(admin.router)

    # Watermarked previews are public; originals never are
    app.mount(
        "/thumbnails",
        StaticFiles(directory=settings.thumbnails_dir),
        name="thumbnails",
    )

    return app
