"""Request schemas — field cleaning and validation messages."""

import pytest
from pydantic import ValidationError

from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.task import TaskCreate, TaskUpdate


def _messages(exc_info) -> list[str]:
    return [e["msg"].removeprefix("Value error, ") for e in exc_info.value.errors()]


# ─── auth ────────────────────────────────────────────────────────

def test_register_cleans_fields():
    body = RegisterRequest(name="  <Ana>  ", email=" Ana@X.COM ", password=" pass1 ")
    assert body.name == "&lt;Ana&gt;"
    assert body.email == "ana@x.com"
    assert body.password == " pass1 "


@pytest.mark.parametrize(
    "field, value, message",
    [
        ("name", "A", "Name must be 2-50 characters"),
        ("name", "x" * 51, "Name must be 2-50 characters"),
        ("name", "   ", "Name is required"),
        ("email", "", "Email is required"),
        ("email", "ana@nowhere", "Please provide a valid email"),
        ("password", "12345", "Password must be at least 6 characters"),
    ],
)
def test_register_rejections(field, value, message):
    data = {"name": "Ana", "email": "ana@x.com", "password": "secret1"}
    data[field] = value
    with pytest.raises(ValidationError) as exc_info:
        RegisterRequest(**data)
    assert _messages(exc_info) == [message]


def test_login_requires_password():
    with pytest.raises(ValidationError) as exc_info:
        LoginRequest(email="ana@x.com", password="")
    assert _messages(exc_info) == ["Password is required"]


# ─── tasks ───────────────────────────────────────────────────────

def test_task_create_defaults():
    body = TaskCreate(title="  Ship it ")
    assert body.title == "Ship it"
    assert body.description == ""
    assert body.status == "todo"


def test_task_create_length_limits_apply_before_escaping():
    body = TaskCreate(title="&" * 100)
    assert body.title == "&amp;" * 100
    with pytest.raises(ValidationError) as exc_info:
        TaskCreate(title="t", description="d" * 501)
    assert _messages(exc_info) == ["Description cannot exceed 500 characters"]


@pytest.mark.parametrize("status", ["todo", "in-progress", "done"])
def test_task_status_values(status):
    assert TaskCreate(title="t", status=status).status == status


def test_task_create_rejects_unknown_status():
    with pytest.raises(ValidationError) as exc_info:
        TaskCreate(title="t", status="pending")
    assert _messages(exc_info) == ["Status must be todo, in-progress, or done"]


def test_task_update_changes_only_supplied_fields():
    assert TaskUpdate(status="done").changes() == {"status": "done"}
    assert TaskUpdate(title=None, description="x").changes() == {"description": "x"}
    assert TaskUpdate().changes() == {}


def test_task_update_rejects_blank_title():
    with pytest.raises(ValidationError) as exc_info:
        TaskUpdate(title="   ")
    assert _messages(exc_info) == ["Title cannot be empty"]
