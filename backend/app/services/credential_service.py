"""Credential Service — registration and authentication of identities.

Invariants:
    - register() rejects an already-registered normalized email with ConflictError (409)
    - The password is hashed here, before the row is built; plaintext is never stored or logged
    - authenticate() raises the same InvalidCredentialsError for unknown email and wrong password
    - Unknown emails still pay one bcrypt compare (no timing oracle)

Design Decisions:
    - Repository injected, not constructed: routes pass SqlUserRepository, tests may pass fakes
    - bcrypt runs in a worker thread (anyio.to_thread) so a 12-round hash does not
      block the event loop for other requests
"""

import logging

from anyio import to_thread

from app.core.domain_types import UserId
from app.core.errors import (
    DUPLICATE_EMAIL_MESSAGE, ConflictError, InvalidCredentialsError,
)
from app.core.password_hashing import (
    DEFAULT_ROUNDS, hash_password, verify_password, verify_against_dummy,
)
from app.core.repository_protocols import UserLike, UserRepository

logger = logging.getLogger(__name__)


class CredentialService:
    """Credential lifecycle: register and authenticate."""

    def __init__(self, users: UserRepository, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.users = users
        self.bcrypt_rounds = bcrypt_rounds

    async def register(self, name: str, email: str, password: str) -> UserLike:
        if await self.users.find_by_email(email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE, field="email")

        password_hash = await to_thread.run_sync(
            hash_password, password, self.bcrypt_rounds,
        )
        user = await self.users.create(
            name=name, email=email, password_hash=password_hash,
        )
        logger.info("User registered", extra={"user_id": str(user.id)})
        return user

    async def authenticate(self, email: str, password: str) -> UserLike:
        user = await self.users.find_by_email(email)
        if user is None:
            await to_thread.run_sync(verify_against_dummy, password)
            raise InvalidCredentialsError()

        matches = await to_thread.run_sync(
            verify_password, password, user.password_hash,
        )
        if not matches:
            logger.warning(
                "Failed login attempt", extra={"user_id": str(user.id)},
            )
            raise InvalidCredentialsError()
        return user

    async def resolve(self, user_id: UserId) -> UserLike | None:
        """Look up the live record behind a verified session."""
        return await self.users.find_by_id(user_id)
