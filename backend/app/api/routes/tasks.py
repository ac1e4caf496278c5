"""Task Routes — owner-scoped CRUD behind the session guard and the envelope stage.

Invariants:
    - Every route depends on get_task_service, hence on get_current_user
    - Bodies are validated after envelope decryption (EnvelopeRoute runs first)
    - Responses carry `encrypted: true` when the client spoke in envelopes or asked
      with ?encrypted=true; EnvelopeRoute then seals `data`

Design Decisions:
    - Task ids arrive as raw strings and are parsed by TaskService, so a malformed
      id is "Invalid ID format" (400) rather than a framework validation error
"""

from fastapi import APIRouter, Depends, Query, Request, status

from app.api.deps import get_task_service
from app.api.envelope_route import EnvelopeRoute, client_wants_encryption
from app.schemas.task import TaskCreate, TaskUpdate
from app.services.task_service import TaskService

router = APIRouter(
    prefix="/api/tasks", tags=["tasks"], route_class=EnvelopeRoute,
)


def _envelope(request: Request, **fields) -> dict:
    body = {"success": True, **fields}
    if client_wants_encryption(request):
        body["encrypted"] = True
    return body


@router.get("")
async def list_tasks(
    request: Request,
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = Query(None),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    service: TaskService = Depends(get_task_service),
):
    """List the caller's tasks with filter, search, and pagination."""
    tasks, pagination = await service.list_page(status_filter, search, page, limit)
    return _envelope(
        request,
        data=[t.to_wire() for t in tasks],
        pagination=pagination,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    request: Request,
    body: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    task = await service.create(body)
    return _envelope(
        request, message="Task created successfully", data=task.to_wire(),
    )


@router.get("/{task_id}")
async def get_task(
    request: Request,
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    task = await service.get(task_id)
    return _envelope(request, data=task.to_wire())


@router.put("/{task_id}")
async def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    """Partial update: only supplied fields change."""
    task = await service.update(task_id, body)
    return _envelope(
        request, message="Task updated successfully", data=task.to_wire(),
    )


@router.delete("/{task_id}")
async def delete_task(
    request: Request,
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    await service.delete(task_id)
    return {"success": True, "message": "Task deleted successfully"}
