"""Session Cookie — binds session tokens to the HTTP exchange.

Invariants:
    - Cookie is HttpOnly, Path=/, and lives exactly as long as the token
    - Secure and SameSite=none in production; SameSite=strict otherwise
    - clear_session_cookie() re-issues the cookie empty with an already-past expiry,
      using the same attributes so the browser replaces it

Design Decisions:
    - No server-side revocation: clearing only purges the client's copy
"""

from datetime import datetime, timezone
from typing import Literal

from fastapi import Response

SESSION_COOKIE_NAME = "token"
_EXPIRED = datetime(1970, 1, 1, tzinfo=timezone.utc)


class CookiePolicy:
    """Cookie attributes for a deployment topology."""

    def __init__(self, production: bool, max_age_seconds: int):
        self.secure = production
        self.samesite: Literal["strict", "none"] = "none" if production else "strict"
        self.max_age_seconds = max_age_seconds


def set_session_cookie(response: Response, token: str, policy: CookiePolicy) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=policy.max_age_seconds,
        expires=policy.max_age_seconds,
        path="/",
        secure=policy.secure,
        httponly=True,
        samesite=policy.samesite,
    )


def clear_session_cookie(response: Response, policy: CookiePolicy) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value="",
        max_age=0,
        expires=_EXPIRED,
        path="/",
        secure=policy.secure,
        httponly=True,
        samesite=policy.samesite,
    )
