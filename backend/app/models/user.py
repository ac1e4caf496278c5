"""User ORM — identity records with irreversibly hashed secrets.

Invariants:
    - email is stored normalized (trimmed, lower-cased) and unique
    - password_hash holds a bcrypt hash only; it is never serialized to clients
    - Users are never hard-deleted by the API

Design Decisions:
    - Hashing happens in CredentialService before the row is built, not in an ORM
      event hook: cost and failure stay visible at the call site
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Registered identity; owns tasks."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
