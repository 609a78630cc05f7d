# src/tasknest/api/offline.py

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, date, datetime
from typing import Any

from ..tasks.errors import TaskNotFoundError, TaskValidationError
from ..tasks.task_filters import apply_view
from ..tasks.task_models import Task, TaskPage, TaskPriority, TaskQuery, TaskStatus

logger = logging.getLogger(__name__)


class InMemoryTaskTransport:
    """
    Offline deterministic backend used for demos when no task API is configured.

    Behaves like the real server:
    - assigns ids and createdAt/updatedAt,
    - requires a title on create,
    - answers 404-style errors for unknown ids,
    - filters, sorts and paginates list calls.
    """

    def __init__(
            self,
            tasks: Iterable[Task] = (),
            *,
            clock=None,
            today: date | None = None,
    ) -> None:
        self._tasks: dict[str, Task] = {t.id: t for t in tasks}
        self._ids = itertools.count(len(self._tasks) + 1)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._today = today
        self.calls: list[tuple[str, Any]] = []

    def snapshot(self) -> list[Task]:
        return list(self._tasks.values())

    def _next_id(self) -> str:
        while True:
            candidate = f"t{next(self._ids)}"
            if candidate not in self._tasks:
                return candidate

    async def list_tasks(self, query: TaskQuery) -> TaskPage:
        self.calls.append(("list", query))
        ordered = apply_view(self._tasks.values(), query.filter, query.sort, today=self._today)
        start = query.offset
        page = tuple(ordered[start:start + query.limit])
        return TaskPage(
            tasks=page,
            total=len(ordered),
            has_more=start + len(page) < len(ordered),
            page=query.page,
            limit=query.limit,
        )

    async def create_task(self, fields: dict[str, Any]) -> Task:
        self.calls.append(("create", dict(fields)))
        title = str(fields.get("title") or "").strip()
        if not title:
            raise TaskValidationError("Title is required", errors={"title": "title is required"})

        now = self._clock()
        values = dict(fields)
        values.setdefault("priority", TaskPriority.MEDIUM)
        values.setdefault("status", TaskStatus.PENDING)
        values["title"] = title

        task = Task(id=self._next_id(), created_at=now, updated_at=now, **values)
        self._tasks[task.id] = task
        logger.debug("Offline backend created task id=%s", task.id)
        return task

    async def update_task(self, task_id: str, patch: dict[str, Any]) -> Task:
        self.calls.append(("update", (task_id, dict(patch))))
        current = self._tasks.get(task_id)
        if current is None:
            raise TaskNotFoundError(task_id)
        updated = replace(current, updated_at=self._clock(), **patch)
        self._tasks[task_id] = updated
        return updated

    async def delete_task(self, task_id: str) -> None:
        self.calls.append(("delete", task_id))
        if self._tasks.pop(task_id, None) is None:
            raise TaskNotFoundError(task_id)

    async def aclose(self) -> None:
        return
