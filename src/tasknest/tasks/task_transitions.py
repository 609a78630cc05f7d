# src/tasknest/tasks/task_transitions.py

from __future__ import annotations

"""
Status transitions triggered by UI actions.

  toggle         completed <-> pending (checkbox; skips in-progress)
  move_forward   pending -> in-progress -> completed
  move_back      completed -> in-progress -> pending
  mark_complete  any -> completed

A transition that is disabled in the current state returns None (no-op).
Applying a transition is a plain store.update() with the new status.
"""

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from .errors import TaskValidationError
from .task_models import Task, TaskStatus

if TYPE_CHECKING:
    from .task_store import TaskStore

logger = logging.getLogger(__name__)


class Transition(StrEnum):
    TOGGLE = "toggle"
    FORWARD = "forward"
    BACK = "back"
    COMPLETE = "complete"


def toggle(status: TaskStatus) -> TaskStatus:
    return TaskStatus.PENDING if status == TaskStatus.COMPLETED else TaskStatus.COMPLETED


def move_forward(status: TaskStatus) -> TaskStatus | None:
    if status == TaskStatus.PENDING:
        return TaskStatus.IN_PROGRESS
    if status == TaskStatus.IN_PROGRESS:
        return TaskStatus.COMPLETED
    return None


def move_back(status: TaskStatus) -> TaskStatus | None:
    if status == TaskStatus.COMPLETED:
        return TaskStatus.IN_PROGRESS
    if status == TaskStatus.IN_PROGRESS:
        return TaskStatus.PENDING
    return None


def mark_complete(status: TaskStatus) -> TaskStatus | None:
    return None if status == TaskStatus.COMPLETED else TaskStatus.COMPLETED


def can_move_forward(status: TaskStatus) -> bool:
    return move_forward(status) is not None


def can_move_back(status: TaskStatus) -> bool:
    return move_back(status) is not None


_RULES = {
    Transition.TOGGLE: toggle,
    Transition.FORWARD: move_forward,
    Transition.BACK: move_back,
    Transition.COMPLETE: mark_complete,
}


def next_status(status: TaskStatus | str, transition: Transition | str) -> TaskStatus | None:
    """
    Target status for a transition, or None when it is disabled.

    Raises TaskValidationError for a status outside the state machine.
    """
    current = status if isinstance(status, TaskStatus) else TaskStatus.parse(status)
    if current is None:
        raise TaskValidationError(
            f"Cannot change status {status!r}: not a known status",
            errors={"status": str(status)},
        )
    return _RULES[Transition(transition)](current)


async def apply_transition(store: TaskStore, task: Task, transition: Transition | str) -> Task:
    """
    Run a transition through the store.

    Disabled transitions return the task unchanged and never touch the store.
    """
    target = next_status(task.status, transition)
    if target is None:
        logger.debug("Transition %s is a no-op for task %s (status=%s)", transition, task.id, task.status)
        return task
    return await store.update(task.id, {"status": target})
