"""
Upload pipeline.

Accepted files are validated as a batch (count, MIME type, size) before
anything touches the disk. Originals go to the secure directory, which
is never served directly; previews go to the public thumbnails
directory.
"""

from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from portfolio.core.models import MediaItem
from portfolio.core.utils import now_millis, utc_now_iso
from portfolio.errors import UploadRejected
from portfolio.media.processing import generate_thumbnail, generate_video_thumbnail

logger = logging.getLogger(__name__)


IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"})
VIDEO_TYPES = frozenset({"video/mp4", "video/webm", "video/ogg"})
DOCUMENT_TYPES = frozenset({"application/pdf"})

# PDFs are only accepted through the CV upload
MEDIA_TYPES = IMAGE_TYPES | VIDEO_TYPES
CV_TYPES = DOCUMENT_TYPES

_SAFE_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,8}$")


@dataclass
class IncomingFile:
    """A file received from a multipart form, fully read into memory."""

    field: str
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class UploadPipeline:
    """Stores uploaded originals and derives their public previews."""

    def __init__(
        self,
        secure_dir: str | Path,
        thumbnails_dir: str | Path,
        max_file_size: int = 50 * 1024 * 1024,
        max_files: int = 10,
        watermark_text: str = "© Portfolio Preview",
        thumbnail_route: str = "/thumbnails",
    ):
        self.secure_dir = Path(secure_dir)
        self.thumbnails_dir = Path(thumbnails_dir)
        self.max_file_size = max_file_size
        self.max_files = max_files
        self.watermark_text = watermark_text
        self.thumbnail_route = thumbnail_route.rstrip("/")

        self.secure_dir.mkdir(parents=True, exist_ok=True)
        self.thumbnails_dir.mkdir(parents=True, exist_ok=True)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(
        self,
        files: list[IncomingFile],
        allowed_types: Iterable[str],
        max_files: int | None = None,
    ) -> None:
        """Raise UploadRejected unless every file in the batch is acceptable."""
        allowed = frozenset(allowed_types)
        limit = self.max_files if max_files is None else max_files

        if not files:
            raise UploadRejected("No file uploaded")
        if len(files) > limit:
            raise UploadRejected(f"Too many files: at most {limit} per upload")

        for f in files:
            if f.content_type not in allowed:
                raise UploadRejected(f"File type {f.content_type} not allowed")
            if f.size > self.max_file_size:
                raise self.too_large(f.filename)

    def too_large(self, filename: str) -> UploadRejected:
        return UploadRejected(
            f"File {filename} exceeds the {self.max_file_size // (1024 * 1024)}MB limit"
        )

    # =========================================================================
    # Storage
    # =========================================================================

    @staticmethod
    def generate_filename(field: str, original_name: str) -> str:
        """``{field}-{epochMillis}-{random}{ext}``; the extension is kept only if plain."""
        ext = Path(original_name or "").suffix
        if not _SAFE_EXTENSION.match(ext):
            ext = ""
        return f"{field}-{now_millis()}-{secrets.randbelow(10**9):09d}{ext.lower()}"

    @staticmethod
    def _check_name(filename: str) -> str:
        if not filename or filename in (".", "..") or Path(filename).name != filename:
            raise ValueError(f"Invalid stored filename: {filename!r}")
        return filename

    def original_path(self, filename: str) -> Path:
        return self.secure_dir / self._check_name(filename)

    def thumbnail_path(self, filename: str) -> Path:
        return self.thumbnails_dir / f"thumb_{self._check_name(filename)}.jpg"

    def _store_original(self, f: IncomingFile) -> str:
        filename = self.generate_filename(f.field, f.filename)
        self.original_path(filename).write_bytes(f.data)
        return filename

    def _derive_preview(self, filename: str, mimetype: str) -> str | None:
        """Create the preview for a stored original; returns its public path."""
        out = self.thumbnail_path(filename)
        if mimetype in IMAGE_TYPES:
            ok = generate_thumbnail(
                self.original_path(filename), out, watermark_text=self.watermark_text
            )
        elif mimetype in VIDEO_TYPES:
            ok = generate_video_thumbnail(out, watermark_text=self.watermark_text)
        else:
            return None
        return f"{self.thumbnail_route}/{out.name}" if ok else None

    def store_media(self, files: list[IncomingFile]) -> list[MediaItem]:
        """Validate and store a batch of images/videos with their previews."""
        self.validate(files, MEDIA_TYPES)

        items = []
        for f in files:
            filename = self._store_original(f)
            items.append(MediaItem(
                filename=filename,
                original_name=f.filename,
                mimetype=f.content_type,
                size=f.size,
                uploaded_at=utc_now_iso(),
                thumbnail_path=self._derive_preview(filename, f.content_type),
            ))
            logger.info("Stored upload %s as %s", f.filename, filename)
        return items

    def store_cv(self, f: IncomingFile) -> dict[str, str]:
        """Validate and store the CV PDF. No preview is made."""
        self.validate([f], CV_TYPES, max_files=1)
        filename = self._store_original(f)
        logger.info("Stored CV %s as %s", f.filename, filename)
        return {
            "filename": filename,
            "originalName": f.filename,
            "uploadedAt": utc_now_iso(),
        }

    def delete(self, filename: str) -> None:
        """Remove an original and its preview; already-missing files are fine."""
        self.original_path(filename).unlink(missing_ok=True)
        self.thumbnail_path(filename).unlink(missing_ok=True)
