"""
Portfolio database - typed operations over the collection store.

Every operation reads the whole collection, changes it in memory and
writes it back. Settings and content updates are shallow merges: a
top-level key in the update replaces that key in the stored document.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from portfolio.core.models import Project, ProjectCreate, ProjectUpdate, User
from portfolio.core.utils import utc_now_iso
from portfolio.errors import ValidationError
from portfolio.storage.base import CollectionStore, Collections

logger = logging.getLogger(__name__)


class PortfolioDatabase:
    """Projects, users, settings and content on top of a CollectionStore."""

    def __init__(self, store: CollectionStore):
        self.store = store

    # =========================================================================
    # Bootstrap
    # =========================================================================

    async def ensure_defaults(self, owner_email: str | None = None) -> None:
        """Write default documents for missing collections and the owner user."""
        for collection in Collections.ALL:
            if not await self.store.exists(collection):
                await self.store.write(collection, await self.store.read(collection))

        if owner_email and not await self.get_user(owner_email):
            await self.create_user(
                owner_email,
                role="owner",
                require_password_change=True,
            )
            logger.info("Provisioned owner account %s", owner_email)

    # =========================================================================
    # Projects
    # =========================================================================

    async def _load_projects(self) -> list[Project]:
        docs = await self.store.read(Collections.PROJECTS) or []
        return [Project.model_validate(d) for d in docs]

    async def _save_projects(self, projects: list[Project]) -> None:
        await self.store.write(Collections.PROJECTS, [p.to_document() for p in projects])

    async def list_projects(self) -> list[Project]:
        return await self._load_projects()

    async def get_project(self, project_id: str) -> Project | None:
        for project in await self._load_projects():
            if project.id == project_id:
                return project
        return None

    async def create_project(self, data: ProjectCreate) -> Project:
        projects = await self._load_projects()
        project = Project(**data.model_dump())
        projects.append(project)
        await self._save_projects(projects)
        return project

    async def update_project(self, project_id: str, updates: ProjectUpdate) -> Project | None:
        projects = await self._load_projects()
        for i, project in enumerate(projects):
            if project.id == project_id:
                changes = updates.model_dump(exclude_unset=True)
                merged = {**project.model_dump(), **changes, "updated_at": utc_now_iso()}
                try:
                    projects[i] = Project.model_validate(merged)
                except PydanticValidationError as e:
                    raise ValidationError(f"Invalid project update: {e.error_count()} invalid field(s)") from e
                await self._save_projects(projects)
                return projects[i]
        return None

    async def delete_project(self, project_id: str) -> bool:
        projects = await self._load_projects()
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            return False
        await self._save_projects(remaining)
        return True

    # =========================================================================
    # Users
    # =========================================================================

    async def _load_users(self) -> list[User]:
        docs = await self.store.read(Collections.USERS) or []
        return [User.model_validate(d) for d in docs]

    async def _save_users(self, users: list[User]) -> None:
        await self.store.write(Collections.USERS, [u.to_document() for u in users])

    async def list_users(self) -> list[User]:
        return await self._load_users()

    async def get_user(self, email: str) -> User | None:
        email = email.strip().lower()
        for user in await self._load_users():
            if user.email == email:
                return user
        return None

    async def create_user(
        self,
        email: str,
        role: str = "viewer",
        require_password_change: bool = False,
    ) -> User:
        users = await self._load_users()
        user = User(
            email=email,
            role=role,
            require_password_change=require_password_change,
        )
        if any(u.email == user.email for u in users):
            raise ValueError(f"User already exists: {user.email}")
        users.append(user)
        await self._save_users(users)
        logger.info("Created user %s with role %s", user.email, user.role)
        return user

    async def update_user(self, email: str, **updates: Any) -> User | None:
        """Apply field updates (snake_case names) to a user."""
        email = email.strip().lower()
        users = await self._load_users()
        for i, user in enumerate(users):
            if user.email == email:
                merged = {**user.model_dump(), **updates, "updated_at": utc_now_iso()}
                users[i] = User.model_validate(merged)
                await self._save_users(users)
                return users[i]
        return None

    async def set_user_password(self, email: str, password_hash: str) -> User | None:
        return await self.update_user(
            email,
            password_hash=password_hash,
            password_set=True,
            require_password_change=False,
        )

    # =========================================================================
    # Settings & Content
    # =========================================================================

    async def get_settings(self) -> dict[str, Any]:
        return await self.store.read(Collections.SETTINGS)

    async def update_settings(self, updates: dict[str, Any]) -> dict[str, Any]:
        settings = {**await self.get_settings(), **updates}
        await self.store.write(Collections.SETTINGS, settings)
        return settings

    async def get_content(self) -> dict[str, Any]:
        return await self.store.read(Collections.CONTENT)

    async def update_content(self, updates: dict[str, Any]) -> dict[str, Any]:
        content = {**await self.get_content(), **updates}
        await self.store.write(Collections.CONTENT, content)
        return content
