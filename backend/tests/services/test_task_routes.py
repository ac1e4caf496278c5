"""Task Routes — owner-scoped CRUD, pagination, and encrypted envelopes.

Invariants:
    - Every task route rejects requests without a session (401)
    - Another owner's task is 404 "Task not found" for GET, PUT, and DELETE
    - Malformed ids are 400 "Invalid ID format"
    - Sealed request bodies are opened before validation; replies to sealed requests
      come back sealed
"""

import logging
from uuid import uuid4

import pytest

from app.infrastructure.task_repository import SqlTaskRepository


@pytest.fixture
def make_task(test_db):
    async def _make(owner, title="Task", description="", status="todo"):
        return await SqlTaskRepository(test_db).create(
            owner.id, title, description, status,
        )
    return _make


# ─── auth guard ──────────────────────────────────────────────────

async def test_tasks_require_session(client):
    res = await client.get("/api/tasks")
    assert res.status_code == 401
    assert res.json() == {"success": False, "message": "Not authorized. Please login."}


async def test_tasks_reject_forged_token(client):
    res = await client.get("/api/tasks", headers={"Cookie": "token=not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["message"] == "Not authorized. Token invalid or expired."


# ─── create ──────────────────────────────────────────────────────

async def test_create_plain_task(client, alice, session_headers):
    res = await client.post(
        "/api/tasks",
        json={"title": "Write report", "description": "Q3"},
        headers=session_headers(alice.id),
    )
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Task created successfully"
    assert "encrypted" not in body
    data = body["data"]
    assert data["title"] == "Write report"
    assert data["description"] == "Q3"
    assert data["status"] == "todo"
    assert data["user"] == str(alice.id)
    assert "createdAt" in data and "updatedAt" in data


async def test_create_escapes_markup(client, alice, session_headers):
    res = await client.post(
        "/api/tasks",
        json={"title": "<b>bold</b>"},
        headers=session_headers(alice.id),
    )
    assert res.status_code == 201
    assert res.json()["data"]["title"] == "&lt;b&gt;bold&lt;/b&gt;"


async def test_create_validation_errors(client, alice, session_headers):
    res = await client.post(
        "/api/tasks",
        json={"title": "   ", "status": "blocked"},
        headers=session_headers(alice.id),
    )
    assert res.status_code == 400
    assert res.json()["message"] == (
        "Title is required. Status must be todo, in-progress, or done"
    )


async def test_create_title_too_long(client, alice, session_headers):
    res = await client.post(
        "/api/tasks", json={"title": "x" * 101}, headers=session_headers(alice.id),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Title cannot exceed 100 characters"


async def test_create_sealed_task_round_trip(client, alice, cipher, session_headers):
    sealed = cipher.seal({"title": "Secret", "description": "d", "status": "todo"})
    res = await client.post(
        "/api/tasks",
        json={"encrypted": True, "data": sealed},
        headers=session_headers(alice.id),
    )
    assert res.status_code == 201
    body = res.json()
    assert body["encrypted"] is True
    assert isinstance(body["data"], str)
    task = cipher.open(body["data"])
    assert task["title"] == "Secret"
    assert task["user"] == str(alice.id)

    listing = await client.get("/api/tasks", headers=session_headers(alice.id))
    assert [t["title"] for t in listing.json()["data"]] == ["Secret"]


async def test_create_with_garbage_envelope_is_rejected(client, alice, session_headers):
    res = await client.post(
        "/api/tasks",
        json={"encrypted": True, "data": "definitely-not-ciphertext"},
        headers=session_headers(alice.id),
    )
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Invalid encrypted payload"}

    listing = await client.get("/api/tasks", headers=session_headers(alice.id))
    assert listing.json()["pagination"]["total"] == 0


async def test_unflagged_envelope_is_treated_as_plain_body(client, alice, session_headers):
    res = await client.post(
        "/api/tasks",
        json={"encrypted": False, "data": "ignored", "title": "Plain"},
        headers=session_headers(alice.id),
    )
    assert res.status_code == 201
    assert res.json()["data"]["title"] == "Plain"


# ─── read ────────────────────────────────────────────────────────

async def test_get_own_task(client, alice, make_task, session_headers):
    task = await make_task(alice, "Mine")
    res = await client.get(f"/api/tasks/{task.id}", headers=session_headers(alice.id))
    assert res.status_code == 200
    assert res.json()["data"]["id"] == str(task.id)


async def test_get_with_encrypted_query_seals_reply(
    client, alice, make_task, cipher, session_headers,
):
    task = await make_task(alice, "Mine")
    res = await client.get(
        f"/api/tasks/{task.id}?encrypted=true", headers=session_headers(alice.id),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["encrypted"] is True
    assert cipher.open(body["data"])["title"] == "Mine"


async def test_get_unknown_task_is_not_found(client, alice, session_headers):
    res = await client.get(f"/api/tasks/{uuid4()}", headers=session_headers(alice.id))
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Task not found"}


async def test_malformed_id_is_bad_request(client, alice, session_headers):
    res = await client.get("/api/tasks/not-a-uuid", headers=session_headers(alice.id))
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid ID format"


# ─── ownership ───────────────────────────────────────────────────

async def test_foreign_task_is_invisible(client, alice, bob, make_task, session_headers):
    task = await make_task(bob, "Bob's")
    headers = session_headers(alice.id)

    got = await client.get(f"/api/tasks/{task.id}", headers=headers)
    updated = await client.put(
        f"/api/tasks/{task.id}", json={"title": "hijacked"}, headers=headers,
    )
    deleted = await client.delete(f"/api/tasks/{task.id}", headers=headers)

    for res in (got, updated, deleted):
        assert res.status_code == 404
        assert res.json()["message"] == "Task not found"

    still_there = await client.get(
        f"/api/tasks/{task.id}", headers=session_headers(bob.id),
    )
    assert still_there.status_code == 200
    assert still_there.json()["data"]["title"] == "Bob's"


async def test_listing_only_shows_own_tasks(client, alice, bob, make_task, session_headers):
    await make_task(alice, "A1")
    await make_task(bob, "B1")
    res = await client.get("/api/tasks", headers=session_headers(alice.id))
    assert [t["title"] for t in res.json()["data"]] == ["A1"]
    assert res.json()["pagination"]["total"] == 1


# ─── update / delete ─────────────────────────────────────────────

async def test_partial_update_keeps_other_fields(client, alice, make_task, session_headers):
    task = await make_task(alice, "Draft", description="keep me")
    res = await client.put(
        f"/api/tasks/{task.id}",
        json={"status": "in-progress"},
        headers=session_headers(alice.id),
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert res.json()["message"] == "Task updated successfully"
    assert data["status"] == "in-progress"
    assert data["title"] == "Draft"
    assert data["description"] == "keep me"


async def test_update_rejects_empty_title(client, alice, make_task, session_headers):
    task = await make_task(alice, "Draft")
    res = await client.put(
        f"/api/tasks/{task.id}", json={"title": "  "}, headers=session_headers(alice.id),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Title cannot be empty"


async def test_delete_task(client, alice, make_task, session_headers):
    task = await make_task(alice, "Done with it")
    headers = session_headers(alice.id)
    res = await client.delete(f"/api/tasks/{task.id}", headers=headers)
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Task deleted successfully"}

    again = await client.get(f"/api/tasks/{task.id}", headers=headers)
    assert again.status_code == 404


# ─── listing ─────────────────────────────────────────────────────

async def test_second_page_of_fifteen(client, alice, make_task, session_headers):
    for i in range(15):
        await make_task(alice, f"Task {i}")
    res = await client.get(
        "/api/tasks?page=2&limit=10", headers=session_headers(alice.id),
    )
    body = res.json()
    assert len(body["data"]) == 5
    assert body["pagination"] == {
        "total": 15,
        "page": 2,
        "limit": 10,
        "totalPages": 2,
        "hasNextPage": False,
        "hasPrevPage": True,
    }


async def test_limit_is_clamped_and_junk_defaults(client, alice, session_headers):
    headers = session_headers(alice.id)
    capped = await client.get("/api/tasks?limit=500", headers=headers)
    junk = await client.get("/api/tasks?page=abc&limit=xyz", headers=headers)
    assert capped.json()["pagination"]["limit"] == 50
    assert junk.json()["pagination"]["page"] == 1
    assert junk.json()["pagination"]["limit"] == 10


async def test_status_filter_and_search(client, alice, make_task, session_headers):
    await make_task(alice, "Buy milk", status="todo")
    await make_task(alice, "Buy bread", status="done")
    await make_task(alice, "Walk dog", status="todo")
    headers = session_headers(alice.id)

    todo = await client.get("/api/tasks?status=todo", headers=headers)
    assert {t["title"] for t in todo.json()["data"]} == {"Buy milk", "Walk dog"}

    search = await client.get("/api/tasks?search=BUY", headers=headers)
    assert {t["title"] for t in search.json()["data"]} == {"Buy milk", "Buy bread"}

    both = await client.get("/api/tasks?status=done&search=buy", headers=headers)
    assert [t["title"] for t in both.json()["data"]] == ["Buy bread"]


async def test_search_treats_wildcards_literally(client, alice, make_task, session_headers):
    await make_task(alice, "100% done")
    await make_task(alice, "1000 things")
    res = await client.get("/api/tasks?search=0%25", headers=session_headers(alice.id))
    assert [t["title"] for t in res.json()["data"]] == ["100% done"]


async def test_unknown_status_filter_is_ignored(client, alice, make_task, session_headers):
    await make_task(alice, "One")
    res = await client.get("/api/tasks?status=bogus", headers=session_headers(alice.id))
    assert res.json()["pagination"]["total"] == 1


async def test_encrypted_listing(client, alice, make_task, cipher, session_headers):
    await make_task(alice, "Hidden")
    res = await client.get("/api/tasks?encrypted=true", headers=session_headers(alice.id))
    body = res.json()
    assert body["encrypted"] is True
    assert body["pagination"]["total"] == 1
    assert [t["title"] for t in cipher.open(body["data"])] == ["Hidden"]


# ─── logging ─────────────────────────────────────────────────────

async def test_failure_log_carries_caller_id(client, alice, session_headers, caplog):
    with caplog.at_level(logging.WARNING, logger="app.api.error_handlers"):
        res = await client.get(f"/api/tasks/{uuid4()}", headers=session_headers(alice.id))
    assert res.status_code == 404
    records = [r for r in caplog.records if r.name == "app.api.error_handlers"]
    assert records
    assert records[-1].user_id == str(alice.id)


async def test_unauthenticated_failure_log_has_no_caller(client, caplog):
    with caplog.at_level(logging.WARNING, logger="app.api.error_handlers"):
        await client.get("/api/tasks")
    records = [r for r in caplog.records if r.name == "app.api.error_handlers"]
    assert records
    assert records[-1].user_id is None
