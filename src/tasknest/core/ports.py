# src/tasknest/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on a Protocol instead of a concrete HTTP client.
This keeps the backend swappable (HTTP API, in-memory demo backend, test fakes).
"""

from typing import Any, Protocol

from ..tasks.task_models import Task, TaskPage, TaskQuery


class TaskTransport(Protocol):
    """
    Request/response access to the remote task collection.

    Implementations raise the errors from tasks.errors:
    - TaskValidationError for rejected payloads,
    - TaskNotFoundError for unknown ids,
    - TaskTransportError for everything else.
    """

    async def list_tasks(self, query: TaskQuery) -> TaskPage: ...

    async def create_task(self, fields: dict[str, Any]) -> Task: ...

    async def update_task(self, task_id: str, patch: dict[str, Any]) -> Task: ...

    async def delete_task(self, task_id: str) -> None: ...

    async def aclose(self) -> None: ...
