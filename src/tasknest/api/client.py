# src/tasknest/api/client.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..tasks.errors import TaskNotFoundError, TaskTransportError, TaskValidationError
from ..tasks.task_models import Task, TaskPage, TaskQuery
from .codec import fields_to_json, query_params, task_from_json

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def make_timeout(seconds: float) -> httpx.Timeout:
    """
    Request timeout for the task API.

    Connect is capped at 5s so a dead server is reported quickly;
    read uses the full budget.
    """
    total = max(1.0, float(seconds))
    connect = min(5.0, total)
    return httpx.Timeout(connect=connect, read=total, write=total, pool=connect)


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, Mapping):
        msg = body.get("message") or body.get("error")
        if msg:
            return str(msg)
    return fallback


def raise_for_task_response(response: httpx.Response, *, task_id: str | None = None) -> None:
    """Map an HTTP error status onto the task error taxonomy."""
    code = response.status_code
    if code < 400:
        return

    if code in (400, 422):
        errors: dict[str, str] = {}
        try:
            body = response.json()
            if isinstance(body, Mapping) and isinstance(body.get("errors"), Mapping):
                errors = {str(k): str(v) for k, v in body["errors"].items()}
        except ValueError:
            pass
        raise TaskValidationError(_error_message(response, "The server rejected the task."), errors=errors)

    if code == 404:
        raise TaskNotFoundError(task_id or "", _error_message(response, f"Task not found: {task_id}"))

    if code in (401, 403):
        raise TaskTransportError(_error_message(response, "Not authorized."), status_code=code)

    if code >= 500:
        raise TaskTransportError("Server error. Please try again later.", status_code=code)

    raise TaskTransportError(_error_message(response, f"Unexpected response ({code})."), status_code=code)


def _unwrap(body: Any) -> Any:
    """Accept both bare payloads and {"success": ..., "data": ...} envelopes."""
    if isinstance(body, Mapping) and "data" in body and "id" not in body:
        return body["data"]
    return body


class HttpTaskTransport:
    """
    TaskTransport over the REST task API.

    Endpoints:
      GET    /tasks          list (filter/sort/page query params)
      POST   /tasks          create
      PUT    /tasks/{id}     partial update (server applies only the sent fields)
      DELETE /tasks/{id}     delete

    The caller owns the lifecycle: use `async with` or call aclose().
    """

    def __init__(
            self,
            base_url: str,
            *,
            token: str | None = None,
            timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
            transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise RuntimeError("Task API URL is not set. Set TASKNEST_API_URL in your .env.")

        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=make_timeout(timeout_seconds),
            transport=transport,
        )

    async def __aenter__(self) -> HttpTaskTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, *, task_id: str | None = None, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.info("Task API timeout %s %s", method, url)
            raise TaskTransportError("The server did not respond in time.") from e
        except httpx.HTTPError as e:
            logger.info("Task API network error %s %s (%s)", method, url, e.__class__.__name__)
            raise TaskTransportError("Server unavailable. Please try again later.") from e

        logger.debug("Task API %s %s -> %s", method, url, response.status_code)
        raise_for_task_response(response, task_id=task_id)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TaskTransportError("The server sent an invalid response.") from e

    async def list_tasks(self, query: TaskQuery) -> TaskPage:
        response = await self._request("GET", "/tasks", params=query_params(query))
        body = self._json(response)

        if isinstance(body, Mapping) and "tasks" in body:
            raw_tasks = body.get("tasks") or []
        else:
            raw_tasks = _unwrap(body) or []
        if not isinstance(raw_tasks, list):
            raise TaskTransportError("The server sent an invalid task list.")

        tasks = tuple(task_from_json(t) for t in raw_tasks)

        meta = body if isinstance(body, Mapping) else {}
        total = int(meta.get("total", meta.get("count", query.offset + len(tasks))))
        if "hasMore" in meta:
            has_more = bool(meta["hasMore"])
        else:
            has_more = query.offset + len(tasks) < total

        return TaskPage(tasks=tasks, total=total, has_more=has_more, page=query.page, limit=query.limit)

    async def create_task(self, fields: dict[str, Any]) -> Task:
        response = await self._request("POST", "/tasks", json=fields_to_json(fields))
        return task_from_json(_unwrap(self._json(response)))

    async def update_task(self, task_id: str, patch: dict[str, Any]) -> Task:
        response = await self._request("PUT", f"/tasks/{task_id}", task_id=task_id, json=fields_to_json(patch))
        return task_from_json(_unwrap(self._json(response)))

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}", task_id=task_id)
