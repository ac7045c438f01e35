"""
Account operations - login, passwords and role management.

Login policy: the owner email is provisioned on demand; every other
email must already exist (the owner creates accounts) unless
``allow_self_registration`` is on, in which case unknown emails are
created as viewers. Accounts without a password log in with the email
alone until a password is set.
"""

from __future__ import annotations

import logging

from portfolio.auth.roles import Role, parse_role
from portfolio.auth.tokens import TokenIssuer, hash_password, verify_password
from portfolio.core.models import User
from portfolio.core.utils import utc_now_iso
from portfolio.errors import (
    AuthenticationError,
    NotFoundError,
    PortfolioError,
    ValidationError,
)
from portfolio.storage.database import PortfolioDatabase

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AccountService:
    """User-facing account flows on top of the database and token issuer."""

    def __init__(
        self,
        db: PortfolioDatabase,
        issuer: TokenIssuer,
        owner_email: str,
        allow_self_registration: bool = False,
    ):
        self.db = db
        self.issuer = issuer
        self.owner_email = owner_email.strip().lower()
        self.allow_self_registration = allow_self_registration

    def is_owner_email(self, email: str) -> bool:
        return email.strip().lower() == self.owner_email

    # =========================================================================
    # Login
    # =========================================================================

    async def login(self, email: str, password: str = "") -> tuple[User, str]:
        """
        Authenticate and return the user with a fresh bearer token.

        Raises:
            AuthenticationError: unknown email (when registration is closed)
                or wrong/missing password for an account that has one
        """
        email = email.strip().lower()
        if not email:
            raise ValidationError("Email required")

        user = await self.db.get_user(email)
        if user is None:
            if self.is_owner_email(email):
                user = await self.db.create_user(
                    email, role=Role.OWNER.value, require_password_change=True
                )
            elif self.allow_self_registration:
                user = await self.db.create_user(email, role=Role.VIEWER.value)
            else:
                logger.info("Login refused for unknown email %s", email)
                raise AuthenticationError("Invalid email or password")

        if user.password_set and not verify_password(password or "", user.password_hash):
            logger.info("Login refused for %s: bad password", email)
            raise AuthenticationError("Invalid email or password")

        user = await self.db.update_user(email, last_login=utc_now_iso()) or user
        logger.info("User logged in: %s, role: %s", user.email, user.role)
        return user, self.issuer.issue(user)

    # =========================================================================
    # Passwords
    # =========================================================================

    async def change_password(
        self,
        email: str,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> User:
        if new_password != confirm_password:
            raise ValidationError("New passwords do not match")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        user = await self.db.get_user(email)
        if user is None:
            raise NotFoundError("User not found")

        if user.password_set and not verify_password(current_password or "", user.password_hash):
            raise ValidationError("Current password is incorrect")

        updated = await self.db.set_user_password(email, hash_password(new_password))
        logger.info("Password changed for %s", email)
        return updated

    # =========================================================================
    # User management (owner)
    # =========================================================================

    async def create_user(self, email: str, role: str = Role.VIEWER.value) -> User:
        parsed = parse_role(role)
        if parsed is None:
            raise ValidationError("Invalid role")
        if not email or "@" not in email:
            raise ValidationError("A valid email is required")
        try:
            return await self.db.create_user(email, role=parsed.value)
        except ValueError as e:
            raise ValidationError(str(e))

    async def change_role(self, email: str, role: str) -> User:
        """
        Change a user's role.

        The owner account always stays owner; requests to demote it are
        refused with 403.
        """
        parsed = parse_role(role)
        if parsed is None:
            raise ValidationError("Invalid role")

        if self.is_owner_email(email) and parsed is not Role.OWNER:
            raise PortfolioError("Cannot change owner role", status_code=403)

        user = await self.db.update_user(email, role=parsed.value)
        if user is None:
            raise NotFoundError("User not found")
        logger.info("Role of %s set to %s", user.email, user.role)
        return user
