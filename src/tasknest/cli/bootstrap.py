# src/tasknest/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- picks the task backend (HTTP API if configured, in-memory demo otherwise),
- wires the store into AppState.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from ..api.client import HttpTaskTransport
from ..api.offline import InMemoryTaskTransport
from ..config import get_settings
from ..core.ports import TaskTransport
from ..core.state import AppState
from ..tasks.task_models import Task, TaskPriority, TaskStatus
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def demo_tasks(today: date) -> list[Task]:
    """A handful of tasks so the offline demo has something to show."""
    return [
        Task(
            id="t1",
            title="להכין מצגת רבעונית",
            priority=TaskPriority.HIGH,
            status=TaskStatus.IN_PROGRESS,
            description="Quarterly review deck",
            due_date=today + timedelta(days=2),
            tags=frozenset({"work"}),
        ),
        Task(
            id="t2",
            title="Renew passport",
            priority=TaskPriority.MEDIUM,
            status=TaskStatus.PENDING,
            due_date=today,
        ),
        Task(
            id="t3",
            title="לשלם חשבון חשמל",
            priority=TaskPriority.LOW,
            status=TaskStatus.COMPLETED,
            due_date=today - timedelta(days=3),
            tags=frozenset({"home"}),
        ),
    ]


def create_transport(settings) -> TaskTransport:
    if getattr(settings, "api_url", None):
        logger.info("Using task API at %s", settings.api_url)
        return HttpTaskTransport(
            settings.api_url,
            token=getattr(settings, "api_token", None),
            timeout_seconds=float(getattr(settings, "request_timeout_seconds", 10.0)),
        )
    logger.info("No TASKNEST_API_URL configured; using the in-memory demo backend.")
    return InMemoryTaskTransport(demo_tasks(date.today()))


def create_initial_state(*, settings=None, transport: TaskTransport | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    if transport is None:
        transport = create_transport(settings)

    store = TaskStore(transport, limit=int(getattr(settings, "page_limit", 20)))
    return AppState(settings=settings, transport=transport, store=store)
