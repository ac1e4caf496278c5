"""Session Tokens — mint and verify signed, time-bounded session artifacts.

Invariants:
    - A token carries identity claims only: sub (user id), iat, exp
    - verify() is all-or-nothing: absent, malformed, forged, or expired -> UnauthenticatedError
    - Expiry is checked against the injected clock (now >= exp fails)
    - No IO and no server-side state: a leaked token stays valid until exp

Design Decisions:
    - PyJWT HS256: compact, tamper-evident, standard claim names
    - Signing key and clock are constructor dependencies, never read from the
      environment here (ADR: deterministic tests with injected keys)
"""

from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt

from app.core.domain_types import UserId
from app.core.errors import UnauthenticatedError

ALGORITHM = "HS256"
DEFAULT_LIFETIME = timedelta(days=7)
INVALID_TOKEN_MESSAGE = "Not authorized. Token invalid or expired."

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionTokenService:
    """Issues and verifies session tokens under a process-wide secret."""

    def __init__(
        self,
        secret: str,
        lifetime: timedelta = DEFAULT_LIFETIME,
        clock: Clock = utc_now,
    ):
        self._secret = secret
        self.lifetime = lifetime
        self._clock = clock

    def issue(self, user_id: UserId) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self.lifetime).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str | None) -> UserId:
        """Return the user id embedded in a valid token."""
        if not token:
            raise UnauthenticatedError(INVALID_TOKEN_MESSAGE)
        try:
            # time claims are judged below against the injected clock, never the host clock
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.PyJWTError:
            raise UnauthenticatedError(INVALID_TOKEN_MESSAGE)

        exp = payload["exp"]
        if not isinstance(exp, (int, float)) or self._clock().timestamp() >= exp:
            raise UnauthenticatedError(INVALID_TOKEN_MESSAGE)
        try:
            return UserId(UUID(str(payload["sub"])))
        except ValueError:
            raise UnauthenticatedError(INVALID_TOKEN_MESSAGE)
