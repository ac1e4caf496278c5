"""API Dependencies — session guard, service wiring, and process-wide security objects.

Invariants:
    - get_current_user is the only way a route obtains an identity
    - Missing cookie, bad token, and vanished user each raise UnauthenticatedError (401)
      before any handler code runs
    - SessionTokenService, EnvelopeCipher, and CookiePolicy are built once at startup
      and read from app.state, never from the environment

Design Decisions:
    - Distinct wording for "no cookie" and "bad cookie" kept as observed; the token
      verifier owns the latter message
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.session_cookie import SESSION_COOKIE_NAME, CookiePolicy
from app.config import get_settings
from app.core.envelope_cipher import EnvelopeCipher
from app.core.errors import UnauthenticatedError
from app.core.session_tokens import SessionTokenService
from app.infrastructure.database import get_db
from app.infrastructure.task_repository import SqlTaskRepository
from app.infrastructure.user_repository import SqlUserRepository
from app.models.user import User
from app.services.credential_service import CredentialService
from app.services.task_service import TaskService

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Not authorized. Please login."
USER_GONE_MESSAGE = "User no longer exists."


def get_session_tokens(request: Request) -> SessionTokenService:
    return request.app.state.session_tokens


def get_envelope_cipher(request: Request) -> EnvelopeCipher:
    return request.app.state.envelope_cipher


def get_cookie_policy(request: Request) -> CookiePolicy:
    return request.app.state.cookie_policy


def get_credential_service(
    db: AsyncSession = Depends(get_db),
) -> CredentialService:
    return CredentialService(
        SqlUserRepository(db), bcrypt_rounds=get_settings().bcrypt_rounds,
    )


async def get_current_user(
    request: Request,
    credentials: CredentialService = Depends(get_credential_service),
    tokens: SessionTokenService = Depends(get_session_tokens),
) -> User:
    """Authenticate the request from its session cookie."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise UnauthenticatedError(MISSING_TOKEN_MESSAGE)

    user_id = tokens.verify(token)
    user = await credentials.resolve(user_id)
    if user is None:
        logger.warning(
            "Valid session for missing user", extra={"user_id": str(user_id)},
        )
        raise UnauthenticatedError(USER_GONE_MESSAGE)

    # read by the error handlers to tag failure logs with the caller
    request.state.user_id = str(user.id)
    return user


def get_task_service(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> TaskService:
    return TaskService(SqlTaskRepository(db), owner_id=user.id)
