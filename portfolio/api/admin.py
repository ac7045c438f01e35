"""
Admin routes - role-gated management of the site.

    editor+  projects (list/create/update), media upload, content,
             download URLs
    admin+   project delete, CV upload, settings
    owner    users and roles
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from portfolio.api.deps import get_accounts, get_database, get_signer, get_uploads
from portfolio.auth.accounts import AccountService
from portfolio.auth.context import AuthContext
from portfolio.auth.policies import require_role
from portfolio.auth.roles import Role
from portfolio.auth.signed_urls import SignedUrlSigner
from portfolio.core.models import ProjectCreate, ProjectUpdate
from portfolio.errors import NotFoundError, UploadRejected, ValidationError
from portfolio.media.uploads import IncomingFile, UploadPipeline
from portfolio.storage.database import PortfolioDatabase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


# =============================================================================
# Request Models
# =============================================================================


class DownloadUrlRequest(BaseModel):
    filename: str = ""
    type: str = "media"  # media | cv


class CreateUserRequest(BaseModel):
    email: str
    role: str = "viewer"


class RoleUpdateRequest(BaseModel):
    role: str = ""


READ_CHUNK_SIZE = 1024 * 1024


async def read_upload(field: str, upload: UploadFile, uploads: UploadPipeline) -> IncomingFile:
    """
    Read a multipart file, giving up as soon as it passes the size cap.

    Raises:
        UploadRejected: the file is larger than the pipeline allows
    """
    filename = upload.filename or ""
    if upload.size is not None and upload.size > uploads.max_file_size:
        raise uploads.too_large(filename)

    chunks = []
    total = 0
    while True:
        chunk = await upload.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > uploads.max_file_size:
            raise uploads.too_large(filename)
        chunks.append(chunk)

    return IncomingFile(
        field=field,
        filename=filename,
        content_type=upload.content_type or "",
        data=b"".join(chunks),
    )


# =============================================================================
# Projects
# =============================================================================


@router.get("/projects")
async def list_projects(
    ctx: AuthContext = Depends(require_role(Role.EDITOR)),
    db: PortfolioDatabase = Depends(get_database),
):
    """All projects with full data, including original media filenames."""
    return [p.to_document() for p in await db.list_projects()]


@router.post("/projects", status_code=201)
async def create_project(
    data: ProjectCreate,
    ctx: AuthContext = Depends(require_role(Role.EDITOR)),
    db: PortfolioDatabase = Depends(get_database),
):
    project = await db.create_project(data)
    logger.info("Project %s created by %s", project.id, ctx.email)
    return project.to_document()


@router.put("/projects/{project_id}")
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    ctx: AuthContext = Depends(require_role(Role.EDITOR)),
    db: PortfolioDatabase = Depends(get_database),
):
    project = await db.update_project(project_id, data)
    if not project:
        raise NotFoundError("Project not found")
    return project.to_document()


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: str,
    ctx: AuthContext = Depends(require_role(Role.ADMIN)),
    db: PortfolioDatabase = Depends(get_database),
    uploads: UploadPipeline = Depends(get_uploads),
):
    """Delete a project and every file attached to it."""
    project = await db.get_project(project_id)
    if not project:
        raise NotFoundError("Project not found")

    for item in project.media:
        try:
            uploads.delete(item.filename)
        except ValueError as e:
            logger.warning("Skipping media of project %s: %s", project_id, e)

    await db.delete_project(project_id)
    logger.info("Project %s deleted by %s", project_id, ctx.email)
    return {"message": "Project deleted successfully"}


# =============================================================================
# Uploads
# =============================================================================


@router.post("/upload")
async def upload_media(
    files: list[UploadFile] | None = File(None),
    ctx: AuthContext = Depends(require_role(Role.EDITOR)),
    uploads: UploadPipeline = Depends(get_uploads),
):
    """Upload images/videos (form field ``files``); returns media entries."""
    files = files or []
    if len(files) > uploads.max_files:
        raise UploadRejected(f"Too many files: at most {uploads.max_files} per upload")

    incoming = [await read_upload("files", f, uploads) for f in files]
    items = await run_in_threadpool(uploads.store_media, incoming)
    return {"files": [item.to_document() for item in items]}


@router.post("/upload-cv")
async def upload_cv(
    cv: UploadFile | None = File(None),
    ctx: AuthContext = Depends(require_role(Role.ADMIN)),
    uploads: UploadPipeline = Depends(get_uploads),
    db: PortfolioDatabase = Depends(get_database),
):
    """Upload the CV (form field ``cv``, one PDF) and record it in content."""
    if cv is None:
        raise UploadRejected("No file uploaded")
    if cv.content_type != "application/pdf":
        raise UploadRejected("Only PDF files allowed for CV")

    info = await run_in_threadpool(uploads.store_cv, await read_upload("cv", cv, uploads))
    await db.update_content({"cv": info})
    return {
        "message": "CV uploaded successfully",
        "filename": info["filename"],
        "originalName": info["originalName"],
    }


@router.post("/generate-download-url")
async def generate_download_url(
    data: DownloadUrlRequest,
    ctx: AuthContext = Depends(require_role(Role.EDITOR)),
    signer: SignedUrlSigner = Depends(get_signer),
    uploads: UploadPipeline = Depends(get_uploads),
):
    """Signed URL for an original file; CVs get the CV TTL policy."""
    if not data.filename:
        raise ValidationError("Filename required")
    if data.type not in ("media", "cv"):
        raise ValidationError("Invalid download type")
    try:
        uploads.original_path(data.filename)
    except ValueError:
        raise ValidationError("Invalid filename")

    return {
        "downloadUrl": signer.generate_for(data.type, data.filename),
        "expiresInMinutes": signer.ttl_for(data.type),
    }


# =============================================================================
# Content & Settings
# =============================================================================


@router.get("/content")
async def get_content(
    ctx: AuthContext = Depends(require_role(Role.EDITOR)),
    db: PortfolioDatabase = Depends(get_database),
):
    return await db.get_content()


@router.put("/content")
async def update_content(
    updates: dict[str, Any],
    ctx: AuthContext = Depends(require_role(Role.EDITOR)),
    db: PortfolioDatabase = Depends(get_database),
):
    """Replace top-level content sections with those sent."""
    return await db.update_content(updates)


@router.get("/settings")
async def get_settings(
    ctx: AuthContext = Depends(require_role(Role.ADMIN)),
    db: PortfolioDatabase = Depends(get_database),
):
    return await db.get_settings()


@router.put("/settings")
async def update_settings(
    updates: dict[str, Any],
    ctx: AuthContext = Depends(require_role(Role.ADMIN)),
    db: PortfolioDatabase = Depends(get_database),
):
    return await db.update_settings(updates)


# =============================================================================
# Users
# =============================================================================


@router.get("/users")
async def list_users(
    ctx: AuthContext = Depends(require_role(Role.OWNER)),
    db: PortfolioDatabase = Depends(get_database),
):
    return [u.public_view() for u in await db.list_users()]


@router.post("/users", status_code=201)
async def create_user(
    data: CreateUserRequest,
    ctx: AuthContext = Depends(require_role(Role.OWNER)),
    accounts: AccountService = Depends(get_accounts),
):
    """Create an account that can then log in."""
    user = await accounts.create_user(data.email, data.role)
    return user.public_view()


@router.put("/users/{email}/role")
async def update_user_role(
    email: str,
    data: RoleUpdateRequest,
    ctx: AuthContext = Depends(require_role(Role.OWNER)),
    accounts: AccountService = Depends(get_accounts),
):
    user = await accounts.change_role(email, data.role)
    return {"message": "User role updated", "user": {"email": user.email, "role": user.role}}
