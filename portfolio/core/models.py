"""
Core data models for the portfolio backend.

These are the documents kept in the collection store: users, projects
(with their media), site settings and site content. Field names are
snake_case in Python and camelCase on disk and on the wire, which is
what the frontend reads.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from portfolio.core.utils import generate_id, utc_now_iso


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Dump to the JSON-ready dict stored in a collection."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# Users
# =============================================================================


class User(CamelModel):
    """
    A user account.

    ``role`` is kept as a plain string: documents written by hand or by
    older versions may hold a role outside the hierarchy, which then
    ranks as level 0 rather than failing to load.
    """

    id: str = Field(default_factory=lambda: generate_id("user"))
    email: str
    role: str = "viewer"

    # Stored under "password" for compatibility with existing data files
    password_hash: str | None = Field(default=None, alias="password")
    password_set: bool = False
    require_password_change: bool = False

    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str | None = None
    last_login: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    def public_view(self) -> dict[str, Any]:
        """User data safe to return to clients (no password hash)."""
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "createdAt": self.created_at,
            "lastLogin": self.last_login,
        }


# =============================================================================
# Projects
# =============================================================================


class MediaItem(CamelModel):
    """An uploaded file attached to a project."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    filename: str
    original_name: str = ""
    mimetype: str = ""
    size: int = 0
    uploaded_at: str = Field(default_factory=utc_now_iso)
    thumbnail_path: str | None = None


class Project(CamelModel):
    """A portfolio project."""

    id: str = Field(default_factory=lambda: generate_id("proj"))
    title: str
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    media: list[MediaItem] = Field(default_factory=list)
    project_url: str | None = None
    external_urls: list[str] = Field(default_factory=list)
    thumbnail_path: str | None = None
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        # Tags are a set; keep first-seen order for display
        seen: dict[str, None] = {}
        for tag in v:
            tag = tag.strip()
            if tag:
                seen.setdefault(tag, None)
        return list(seen)

    def summary(self) -> dict[str, Any]:
        """Fields shown in the public project listing."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "tags": self.tags,
            "thumbnailPath": self.thumbnail_path,
            "createdAt": self.created_at,
            "featured": self.featured,
        }

    def public_view(self) -> dict[str, Any]:
        """
        Full project for public pages.

        Media entries point at their watermarked previews only; the
        original files are reachable through signed URLs alone.
        """
        doc = self.to_document()
        doc["media"] = [
            {
                **{k: v for k, v in item.items() if k != "filename"},
                "url": item.get("thumbnailPath"),
                "isWatermarked": True,
            }
            for item in doc["media"]
        ]
        return doc


class ProjectCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    media: list[MediaItem] = Field(default_factory=list)
    project_url: str | None = None
    external_urls: list[str] = Field(default_factory=list)
    thumbnail_path: str | None = None


class ProjectUpdate(CamelModel):
    """Partial project update; only fields sent by the client are applied."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: str | None = None
    tags: list[str] | None = None
    featured: bool | None = None
    media: list[MediaItem] | None = None
    project_url: str | None = None
    external_urls: list[str] | None = None
    thumbnail_path: str | None = None

    @field_validator(
        "title", "description", "category", "tags", "featured", "media", "external_urls"
    )
    @classmethod
    def not_null(cls, v: Any) -> Any:
        # Only projectUrl and thumbnailPath can be cleared with null
        if v is None:
            raise ValueError("may not be null")
        return v


# =============================================================================
# Site settings and content
# =============================================================================


DEFAULT_SETTINGS: dict[str, Any] = {
    "theme": {
        "primaryColor": "#10b981",
        "secondaryColor": "#8b5cf6",
        "backgroundPrimary": "#0f172a",
        "backgroundSecondary": "#1e293b",
        "fontPrimary": "Inter, sans-serif",
        "fontSecondary": "Inter, sans-serif",
    },
    "siteTitle": "Graphics Designer Portfolio",
    "siteDescription": "Professional graphics designer showcasing creative digital media work",
}


DEFAULT_CONTENT: dict[str, Any] = {
    "hero": {
        "title": "Creative Graphics Designer",
        "subtitle": "Bringing ideas to life through innovative digital design",
        "description": (
            "Welcome to my portfolio. I specialize in creating stunning visual "
            "experiences that communicate your brand's story effectively."
        ),
    },
    "about": {
        "title": "About Me",
        "content": (
            "I am a passionate graphics designer with years of experience in "
            "creating compelling visual content. My expertise spans across "
            "branding, digital media, and creative design solutions."
        ),
        "skills": ["Brand Design", "Digital Media", "UI/UX Design", "Print Design"],
    },
    "services": {
        "title": "Services & Pricing",
        "items": [],
    },
    "contact": {
        "title": "Get in Touch",
        "email": None,
        "links": [],
    },
    "cv": {
        "filename": None,
        "originalName": None,
        "uploadedAt": None,
    },
}


# Sections of the content document shown on the public site
PUBLIC_CONTENT_SECTIONS = ("hero", "about", "services", "contact")
PUBLIC_SETTINGS_FIELDS = ("theme", "siteTitle", "siteDescription")
