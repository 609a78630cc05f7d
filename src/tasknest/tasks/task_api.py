# src/tasknest/tasks/task_api.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import date
from typing import Any

from .errors import TaskNotFoundError
from .task_models import Task, TaskPriority, TaskStatus
from .task_store import TaskStore

logger = logging.getLogger(__name__)

Confirm = Callable[[Task], bool | Awaitable[bool]]


async def create_task(
        store: TaskStore,
        title: str,
        *,
        description: str | None = None,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        due_date: date | str | None = None,
        tags: Iterable[str] = (),
        team_id: str | None = None,
        is_public: bool = False,
) -> Task:
    """
    Convenience helper: build a create payload the way the task form does.
    New tasks start as pending with medium priority unless told otherwise.
    """
    fields: dict[str, Any] = {
        "title": title,
        "priority": priority,
        "status": TaskStatus.PENDING,
        "tags": list(tags),
        "is_public": is_public,
    }
    if description:
        fields["description"] = description
    if due_date is not None:
        fields["due_date"] = due_date
    if team_id:
        fields["team_id"] = team_id
    return await store.create(fields)


async def delete_with_confirmation(store: TaskStore, task_id: str, confirm: Confirm) -> bool:
    """
    Ask `confirm` before deleting. Returns True if the task was deleted.

    A declined confirmation is not an error: the store is never called.
    """
    task = store.get(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)

    answer = confirm(task)
    if inspect.isawaitable(answer):
        answer = await answer

    if not answer:
        logger.info("Delete of task %s declined by user", task_id)
        return False

    await store.remove(task_id)
    return True
