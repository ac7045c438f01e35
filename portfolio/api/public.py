"""
Public routes - what the site itself reads, plus signed downloads.

Nothing here needs a bearer token. Project media is reduced to
watermarked previews; originals are only reachable through
``/api/secure/...`` with a valid signature.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from portfolio.api.deps import get_database, get_signer, get_uploads
from portfolio.auth.signed_urls import SignedUrlSigner
from portfolio.core.models import PUBLIC_CONTENT_SECTIONS, PUBLIC_SETTINGS_FIELDS
from portfolio.errors import NotFoundError, SignedUrlError
from portfolio.media.uploads import UploadPipeline
from portfolio.storage.database import PortfolioDatabase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["public"])

# First path segment of a signed resource path
SECURE_RESOURCE_CLASSES = ("media", "cv")


# =============================================================================
# Projects & Content
# =============================================================================


@router.get("/projects")
async def list_projects(db: PortfolioDatabase = Depends(get_database)):
    """Project summaries for the listing page."""
    return [p.summary() for p in await db.list_projects()]


@router.get("/projects/{project_id}")
async def get_project(project_id: str, db: PortfolioDatabase = Depends(get_database)):
    project = await db.get_project(project_id)
    if not project:
        raise NotFoundError("Project not found")
    return project.public_view()


@router.get("/content")
async def get_site_content(db: PortfolioDatabase = Depends(get_database)):
    """Theme, titles and the public content sections."""
    settings = await db.get_settings()
    content = await db.get_content()
    return {
        "settings": {k: settings.get(k) for k in PUBLIC_SETTINGS_FIELDS},
        "content": {k: content.get(k) for k in PUBLIC_CONTENT_SECTIONS},
    }


# =============================================================================
# Signed Downloads
# =============================================================================


def _stored_filename(resource_path: str) -> str | None:
    """Map "media/x.jpg", "cv/x.pdf" or a bare "x.jpg" to the stored filename."""
    parts = resource_path.split("/")
    if len(parts) == 1:
        return parts[0] or None
    if len(parts) == 2 and parts[0] in SECURE_RESOURCE_CLASSES:
        return parts[1] or None
    return None


@router.get("/secure/{resource_path:path}")
async def download_secure_file(
    resource_path: str,
    expires: str | None = None,
    signature: str | None = None,
    signer: SignedUrlSigner = Depends(get_signer),
    uploads: UploadPipeline = Depends(get_uploads),
):
    """
    Stream an original file for a valid signed URL.

    Missing parameters are a 400. Any failed check (expired, tampered
    path or signature) is the same 403, whichever check it was.
    """
    if not expires or not signature:
        raise SignedUrlError("Missing signature or expiry", status_code=400)

    if not signer.verify(resource_path, expires, signature):
        raise SignedUrlError("Invalid or expired URL")

    filename = _stored_filename(resource_path)
    if filename is None:
        raise NotFoundError("File not found")
    try:
        path = uploads.original_path(filename)
    except ValueError:
        raise NotFoundError("File not found")

    if not path.is_file():
        raise NotFoundError("File not found")

    return FileResponse(path)
