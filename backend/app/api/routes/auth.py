"""Auth Routes — register, login, logout, and current-user lookup.

Invariants:
    - register/login set the session cookie only on success
    - Responses carry {id, name, email}; password material never leaves the service
    - logout and me require a valid session (get_current_user)

Design Decisions:
    - Thin routes: credential rules live in CredentialService, cookie attributes in
      session_cookie.CookiePolicy
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import (
    get_cookie_policy, get_credential_service, get_current_user, get_session_tokens,
)
from app.api.session_cookie import (
    CookiePolicy, clear_session_cookie, set_session_cookie,
)
from app.core.session_tokens import SessionTokenService
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest, UserPublic
from app.services.credential_service import CredentialService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_payload(user) -> dict:
    return UserPublic.from_user(user).model_dump(mode="json")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    response: Response,
    credentials: CredentialService = Depends(get_credential_service),
    tokens: SessionTokenService = Depends(get_session_tokens),
    policy: CookiePolicy = Depends(get_cookie_policy),
):
    """Create an account and start a session."""
    user = await credentials.register(body.name, body.email, body.password)
    set_session_cookie(response, tokens.issue(user.id), policy)
    return {
        "success": True,
        "message": "Account created successfully",
        "user": _user_payload(user),
    }


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    credentials: CredentialService = Depends(get_credential_service),
    tokens: SessionTokenService = Depends(get_session_tokens),
    policy: CookiePolicy = Depends(get_cookie_policy),
):
    """Verify credentials and start a session."""
    user = await credentials.authenticate(body.email, body.password)
    set_session_cookie(response, tokens.issue(user.id), policy)
    logger.info("User logged in", extra={"user_id": str(user.id)})
    return {
        "success": True,
        "message": "Logged in successfully",
        "user": _user_payload(user),
    }


@router.post("/logout")
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
    policy: CookiePolicy = Depends(get_cookie_policy),
):
    """Purge the client's session cookie. Copies elsewhere stay valid until expiry."""
    clear_session_cookie(response, policy)
    logger.info("User logged out", extra={"user_id": str(user.id)})
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"success": True, "user": _user_payload(user)}
