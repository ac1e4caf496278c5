"""Task Service — owner-scoped CRUD over the task store.

Invariants:
    - Every operation takes the authenticated owner; there is no unscoped path
    - Missing and foreign tasks both raise ResourceNotFoundError("Task") -> 404
    - Malformed ids raise InvalidIdentifierError -> 400 before touching the store
    - Returned records are TaskPublic, never ORM rows
"""

import logging
from uuid import UUID

from app.core.domain_types import TaskId, UserId
from app.core.errors import InvalidIdentifierError, ResourceNotFoundError
from app.core.pagination import build_page_window, pagination_meta
from app.core.repository_protocols import TaskRepository
from app.schemas.task import TaskCreate, TaskPublic, TaskUpdate

logger = logging.getLogger(__name__)


def parse_task_id(raw_id: str) -> TaskId:
    try:
        return TaskId(UUID(raw_id))
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError(str(raw_id))


class TaskService:
    """Task use cases for a single authenticated owner."""

    def __init__(self, tasks: TaskRepository, owner_id: UserId):
        self.tasks = tasks
        self.owner_id = owner_id

    async def list_page(
        self,
        status: str | None = None,
        search: str | None = None,
        page: str | int | None = None,
        limit: str | int | None = None,
    ) -> tuple[list[TaskPublic], dict]:
        window = build_page_window(page, limit)
        rows = await self.tasks.find(
            self.owner_id, status, search, window.skip, window.limit,
        )
        total = await self.tasks.count(self.owner_id, status, search)
        return [TaskPublic.from_task(t) for t in rows], pagination_meta(total, window)

    async def get(self, raw_id: str) -> TaskPublic:
        task_id = parse_task_id(raw_id)
        task = await self.tasks.find_one(task_id, self.owner_id)
        if task is None:
            raise ResourceNotFoundError("Task", str(task_id))
        return TaskPublic.from_task(task)

    async def create(self, body: TaskCreate) -> TaskPublic:
        task = await self.tasks.create(
            self.owner_id, body.title, body.description, body.status,
        )
        logger.info(
            "Task created",
            extra={"user_id": str(self.owner_id), "task_id": str(task.id)},
        )
        return TaskPublic.from_task(task)

    async def update(self, raw_id: str, body: TaskUpdate) -> TaskPublic:
        task_id = parse_task_id(raw_id)
        task = await self.tasks.find_one_and_update(
            task_id, self.owner_id, body.changes(),
        )
        if task is None:
            raise ResourceNotFoundError("Task", str(task_id))
        return TaskPublic.from_task(task)

    async def delete(self, raw_id: str) -> None:
        task_id = parse_task_id(raw_id)
        task = await self.tasks.find_one_and_delete(task_id, self.owner_id)
        if task is None:
            raise ResourceNotFoundError("Task", str(task_id))
