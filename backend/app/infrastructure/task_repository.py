"""Task Repository — SQLAlchemy implementation of the owner-scoped task store.

Invariants:
    - Every statement carries `Task.user_id == owner_id`; there is no unscoped query
    - A task owned by someone else is indistinguishable from a missing one (None)
    - search is a case-insensitive substring match on title with LIKE wildcards escaped
    - Listing is sorted by created_at descending

Design Decisions:
    - find_one_and_update / find_one_and_delete load-then-mutate inside one session:
      concurrent updates resolve last-write-wins (ADR: no locking discipline)
"""

import logging
from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import TaskId, TaskStatus, UserId
from app.models.task import Task

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"title", "description", "status"})


def escape_like(term: str) -> str:
    return (
        term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )


def _apply_filters(
    query: Select, owner_id: UserId, status: str | None, search: str | None,
) -> Select:
    query = query.where(Task.user_id == owner_id)
    if status and status in TaskStatus.values():
        query = query.where(Task.status == status)
    if search and search.strip():
        pattern = f"%{escape_like(search.strip())}%"
        query = query.where(Task.title.ilike(pattern, escape="\\"))
    return query


class SqlTaskRepository:
    """Task store backed by the `tasks` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(
        self,
        owner_id: UserId,
        status: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Sequence[Task]:
        query = _apply_filters(select(Task), owner_id, status, search)
        query = query.order_by(Task.created_at.desc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def count(
        self, owner_id: UserId, status: str | None = None, search: str | None = None,
    ) -> int:
        query = _apply_filters(
            select(func.count()).select_from(Task), owner_id, status, search,
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def find_one(self, task_id: TaskId, owner_id: UserId) -> Task | None:
        result = await self.db.execute(
            select(Task)
            .where(Task.id == task_id)
            .where(Task.user_id == owner_id),
        )
        return result.scalar_one_or_none()

    async def create(
        self, owner_id: UserId, title: str, description: str, status: str,
    ) -> Task:
        task = Task(
            user_id=owner_id, title=title,
            description=description, status=status,
        )
        self.db.add(task)
        await self.db.commit()
        await self.db.refresh(task)
        return task

    async def find_one_and_update(
        self, task_id: TaskId, owner_id: UserId, changes: dict,
    ) -> Task | None:
        task = await self.find_one(task_id, owner_id)
        if task is None:
            return None
        for key, value in changes.items():
            if key in _UPDATABLE_FIELDS and value is not None:
                setattr(task, key, value)
        await self.db.commit()
        await self.db.refresh(task)
        return task

    async def find_one_and_delete(
        self, task_id: TaskId, owner_id: UserId,
    ) -> Task | None:
        task = await self.find_one(task_id, owner_id)
        if task is None:
            return None
        await self.db.delete(task)
        await self.db.commit()
        logger.info("Task deleted", extra={"task_id": str(task_id)})
        return task
