"""Task Schemas — create/update validation and the public task shape.

Invariants:
    - title: trimmed, 1-100 chars, HTML-escaped; required on create, optional on update
    - description: trimmed, <= 500 chars, HTML-escaped; defaults to ""
    - status: one of TaskStatus values; defaults to "todo" on create
    - TaskUpdate: fields left out (or null) are not changed

Design Decisions:
    - Length checked before escaping, so the limits apply to what the user typed
    - TaskPublic serializes timestamps as createdAt/updatedAt and the owner as `user`
"""

import html
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import TaskStatus

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
STATUS_MESSAGE = "Status must be todo, in-progress, or done"


def _clean_title(v: str, empty_message: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(empty_message)
    if len(v) > TITLE_MAX_LENGTH:
        raise ValueError("Title cannot exceed 100 characters")
    return html.escape(v)


def _clean_description(v: str) -> str:
    v = v.strip()
    if len(v) > DESCRIPTION_MAX_LENGTH:
        raise ValueError("Description cannot exceed 500 characters")
    return html.escape(v)


def _check_status(v: str) -> str:
    if v not in TaskStatus.values():
        raise ValueError(STATUS_MESSAGE)
    return v


class TaskCreate(BaseModel):
    title: str
    description: str = ""
    status: str = TaskStatus.TODO.value

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str) -> str:
        return _clean_title(v, "Title is required")

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: str) -> str:
        return _clean_description(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v: str) -> str:
        return _check_status(v)


class TaskUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    status: str | None = None

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str | None) -> str | None:
        return None if v is None else _clean_title(v, "Title cannot be empty")

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: str | None) -> str | None:
        return None if v is None else _clean_description(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v: str | None) -> str | None:
        return None if v is None else _check_status(v)

    def changes(self) -> dict:
        """Only the fields the client actually supplied with a value."""
        return {
            k: v for k, v in self.model_dump(exclude_unset=True).items()
            if v is not None
        }


class TaskPublic(BaseModel):
    """Task as returned to clients."""
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    description: str
    status: str
    user: UUID
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    @classmethod
    def from_task(cls, task) -> "TaskPublic":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            user=task.user_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
