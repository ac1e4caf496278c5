"""User Repository — SQLAlchemy implementation of the credential store.

Invariants:
    - Lookups by email use the normalized form (callers normalize, this layer lowers again)
    - create() flushes and commits; unique violations surface via DatabaseSessionManager
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId
from app.models.user import User


class SqlUserRepository:
    """Credential store backed by the `users` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower()),
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: UserId) -> User | None:
        return await self.db.get(User, user_id)

    async def create(self, name: str, email: str, password_hash: str) -> User:
        user = User(name=name, email=email, password_hash=password_hash)
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user
