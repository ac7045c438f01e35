"""
Request dependencies.

Everything is built once per app in ``create_app`` and kept on
``app.state``; routes pull it out through these.
"""

from __future__ import annotations

from fastapi import Request

from portfolio.auth.accounts import AccountService
from portfolio.auth.signed_urls import SignedUrlSigner
from portfolio.media.uploads import UploadPipeline
from portfolio.storage.database import PortfolioDatabase


def get_database(request: Request) -> PortfolioDatabase:
    return request.app.state.db


def get_signer(request: Request) -> SignedUrlSigner:
    return request.app.state.signer


def get_uploads(request: Request) -> UploadPipeline:
    return request.app.state.uploads


def get_accounts(request: Request) -> AccountService:
    return request.app.state.accounts
