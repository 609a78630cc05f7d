# tests/test_http_client.py

from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from tasknest.api.client import HttpTaskTransport
from tasknest.api.codec import fields_to_json, query_params, task_from_json
from tasknest.tasks.errors import TaskNotFoundError, TaskTransportError, TaskValidationError
from tasknest.tasks.task_models import FilterSpec, SortSpec, TaskPriority, TaskQuery, TaskStatus
from tasknest.tasks.task_store import TaskStore

BASE_URL = "https://tasks.example.test/api"

RAW_TASK = {
    "id": "abc",
    "title": "Write report",
    "status": "in-progress",
    "priority": "high",
    "dueDate": "2024-03-15T22:00:00.000Z",
    "tags": ["work"],
    "teamId": "team-1",
    "assignedTo": {"id": "u1", "name": "Dana", "photoURL": None},
    "createdAt": {"_seconds": 1709287200, "_nanoseconds": 0},
}


def _client(handler) -> HttpTaskTransport:
    return HttpTaskTransport(BASE_URL, token="secret", transport=httpx.MockTransport(handler))


def test_task_from_json_decodes_the_wire_shape() -> None:
    task = task_from_json(RAW_TASK)

    assert task.status is TaskStatus.IN_PROGRESS
    assert task.priority is TaskPriority.HIGH
    # The calendar day is taken as written, without a timezone shift.
    assert task.due_date == date(2024, 3, 15)
    assert task.assigned_to is not None and task.assigned_to.name == "Dana"
    assert task.team_id == "team-1"
    assert task.created_at is not None


def test_task_from_json_keeps_unknown_status_and_requires_core_fields() -> None:
    task = task_from_json({"id": "x", "title": "Old", "status": "archived", "priority": "urgent"})
    assert task.status == "archived"
    assert not task.has_known_status
    assert task.priority is TaskPriority.MEDIUM

    with pytest.raises(TaskValidationError) as exc:
        task_from_json({"id": "x", "title": ""})
    assert set(exc.value.errors) == {"title", "status"}


def test_fields_and_query_use_wire_names() -> None:
    body = fields_to_json({"title": "x", "due_date": date(2024, 3, 18), "tags": frozenset({"b", "a"})})
    assert body == {"title": "x", "dueDate": "2024-03-18", "tags": ["a", "b"]}

    query = TaskQuery(
        filter=FilterSpec(status=TaskStatus.PENDING, search=" milk ", team_id="team-1"),
        sort=SortSpec.by("due_date", "asc"),
        page=3,
        limit=10,
    )
    assert query_params(query) == {
        "sortBy": "dueDate",
        "sortOrder": "asc",
        "page": 3,
        "limit": 10,
        "offset": 20,
        "status": "pending",
        "search": "milk",
        "teamId": "team-1",
    }


def test_missing_api_url_is_a_configuration_error() -> None:
    with pytest.raises(RuntimeError):
        HttpTaskTransport("  ")


@pytest.mark.asyncio
async def test_list_tasks_sends_query_and_reads_paging() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"tasks": [RAW_TASK], "total": 7, "hasMore": True})

    async with _client(handler) as client:
        store = TaskStore(client, limit=1)
        page = await store.fetch(FilterSpec(status=TaskStatus.IN_PROGRESS))

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/api/tasks"
    assert request.url.params["status"] == "in-progress"
    assert request.url.params["limit"] == "1"
    assert request.headers["Authorization"] == "Bearer secret"
    assert page.total == 7 and page.has_more
    assert [t.id for t in store.tasks] == ["abc"]


@pytest.mark.asyncio
async def test_list_tasks_accepts_a_data_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "data": [RAW_TASK]})

    async with _client(handler) as client:
        page = await client.list_tasks(TaskQuery(filter=FilterSpec.match_all(), sort=SortSpec.by("title")))

    assert page.total == 1
    assert not page.has_more


@pytest.mark.asyncio
async def test_create_and_update_send_camel_case_payloads() -> None:
    seen: list[tuple[str, str, dict]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append((request.method, request.url.path, body))
        task = dict(RAW_TASK, **body)
        return httpx.Response(200, json={"success": True, "data": task})

    async with _client(handler) as client:
        store = TaskStore(client)
        created = await store.create({"title": "Plan trip", "due_date": "2024-04-02"})
        updated = await store.update("abc", {"status": "completed"})

    assert seen[0] == ("POST", "/api/tasks", {"title": "Plan trip", "dueDate": "2024-04-02"})
    assert seen[1] == ("PUT", "/api/tasks/abc", {"status": "completed"})
    assert created.title == "Plan trip"
    assert updated.status is TaskStatus.COMPLETED


@pytest.mark.asyncio
async def test_http_errors_map_to_task_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            return httpx.Response(404, json={"message": "Task not found"})
        if request.method == "POST":
            return httpx.Response(422, json={"message": "Invalid", "errors": {"title": "required"}})
        return httpx.Response(500, text="boom")

    async with _client(handler) as client:
        with pytest.raises(TaskNotFoundError) as not_found:
            await client.delete_task("missing")
        with pytest.raises(TaskValidationError) as invalid:
            await client.create_task({"title": "x"})
        with pytest.raises(TaskTransportError) as server:
            await client.update_task("abc", {"title": "y"})

    assert not_found.value.task_id == "missing"
    assert invalid.value.errors == {"title": "required"}
    assert server.value.status_code == 500


@pytest.mark.asyncio
async def test_network_failure_is_a_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        store = TaskStore(client)
        with pytest.raises(TaskTransportError):
            await store.fetch()

    assert store.error == "Server unavailable. Please try again later."
