"""Boundary Protocols — contracts between core/services and the persistence shell.

Invariants:
    - Every task read/update/delete takes the owner id alongside the task id
    - Implementations live in infrastructure/ and are injected into services
    - Repositories return ORM-independent shapes via the *Like protocols

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Owner is a required positional parameter, not an optional filter: a caller
      cannot forget the ownership constraint (ADR: NotFound, never Forbidden)
"""

from datetime import datetime
from typing import Protocol, Sequence

from app.core.domain_types import TaskId, UserId


class UserLike(Protocol):
    """Structural contract for identity records."""
    id: UserId
    name: str
    email: str
    password_hash: str


class TaskLike(Protocol):
    """Structural contract for task records."""
    id: TaskId
    title: str
    description: str
    status: str
    user_id: UserId
    created_at: datetime
    updated_at: datetime


class UserRepository(Protocol):
    """Credential store, implemented in infrastructure/."""
    async def find_by_email(self, email: str) -> UserLike | None: ...
    async def find_by_id(self, user_id: UserId) -> UserLike | None: ...
    async def create(
        self, name: str, email: str, password_hash: str,
    ) -> UserLike: ...


class TaskRepository(Protocol):
    """Task store. Every operation is scoped by owner."""
    async def find(
        self,
        owner_id: UserId,
        status: str | None,
        search: str | None,
        skip: int,
        limit: int,
    ) -> Sequence[TaskLike]: ...
    async def count(
        self, owner_id: UserId, status: str | None, search: str | None,
    ) -> int: ...
    async def find_one(self, task_id: TaskId, owner_id: UserId) -> TaskLike | None: ...
    async def create(
        self, owner_id: UserId, title: str, description: str, status: str,
    ) -> TaskLike: ...
    async def find_one_and_update(
        self, task_id: TaskId, owner_id: UserId, changes: dict,
    ) -> TaskLike | None: ...
    async def find_one_and_delete(
        self, task_id: TaskId, owner_id: UserId,
    ) -> TaskLike | None: ...
