# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /api/auth/login           - Get a bearer token
#   GET  /api/auth/me              - Get current user
#   POST /api/auth/change-password - Set or change own password
#
# =============================================================================

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from portfolio.api.deps import get_accounts, get_database
from portfolio.auth.accounts import AccountService
from portfolio.auth.context import AuthContext
from portfolio.auth.policies import require_auth
from portfolio.core.models import CamelModel
from portfolio.errors import NotFoundError
from portfolio.storage.database import PortfolioDatabase

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Request Models
# =============================================================================

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class ChangePasswordRequest(CamelModel):
    current_password: str = ""
    new_password: str
    confirm_password: str


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/login")
async def login(
    data: LoginRequest,
    accounts: AccountService = Depends(get_accounts),
):
    """
    Authenticate and get a token.

    Accounts that have not set a password yet log in with the email alone.
    """
    user, token = await accounts.login(data.email, data.password)
    return {
        "token": token,
        "expiresIn": accounts.issuer.expires_in,
        "user": {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "requirePasswordChange": user.require_password_change,
        },
    }


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/me")
async def get_me(
    ctx: AuthContext = Depends(require_auth()),
    db: PortfolioDatabase = Depends(get_database),
):
    """Get the current authenticated user."""
    user = await db.get_user(ctx.email)
    if not user:
        raise NotFoundError("User not found")

    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "lastLogin": user.last_login,
        "passwordSet": user.password_set,
        "requirePasswordChange": user.require_password_change,
    }


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    ctx: AuthContext = Depends(require_auth()),
    accounts: AccountService = Depends(get_accounts),
):
    """Change the caller's password. The first call sets it."""
    await accounts.change_password(
        ctx.email,
        data.current_password,
        data.new_password,
        data.confirm_password,
    )
    return {"message": "Password changed successfully"}
