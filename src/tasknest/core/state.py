# src/tasknest/core/state.py

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any, TypeVar

from ..tasks.task_board import Board, build_board
from ..tasks.task_calendar import CalendarMonth, MonthCursor, build_for_cursor
from ..tasks.task_filters import apply_view, filter_tasks
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from .ports import TaskTransport

T = TypeVar("T")


class ViewMode(StrEnum):
    LIST = "list"
    BOARD = "board"
    CALENDAR = "calendar"


@dataclass
class AppState:
    """
    What a UI needs: the store plus the view parameters it projects with.

    Projections are recomputed from the store snapshot on every call;
    nothing here caches derived data.
    """

    settings: Any
    transport: TaskTransport
    store: TaskStore

    view: ViewMode = ViewMode.LIST
    cursor: MonthCursor = field(default_factory=lambda: MonthCursor.containing(date.today()))
    clock: Callable[[], date] = date.today

    # Set by the composition root; runs coroutines on the app's event loop.
    runner: asyncio.Runner | None = None

    @property
    def locale(self) -> str:
        return str(getattr(self.settings, "locale", "he"))

    @property
    def first_weekday(self) -> int:
        return int(getattr(self.settings, "first_weekday", 6))

    def run(self, coro: Coroutine[Any, Any, T]) -> T:
        if self.runner is None:
            return asyncio.run(coro)
        return self.runner.run(coro)

    # ---- projections ----

    def visible_tasks(self) -> list[Task]:
        return apply_view(
            self.store.tasks,
            self.store.filter,
            self.store.sort,
            today=self.clock(),
            locale=self.locale,
            first_weekday=self.first_weekday,
        )

    def filtered_tasks(self) -> list[Task]:
        """Store order, filter applied. The board and calendar are never re-sorted."""
        return filter_tasks(
            self.store.tasks,
            self.store.filter,
            today=self.clock(),
            first_weekday=self.first_weekday,
        )

    def board(self) -> Board:
        return build_board(self.filtered_tasks())

    def calendar(self) -> CalendarMonth:
        return build_for_cursor(
            self.cursor,
            self.filtered_tasks(),
            first_weekday=self.first_weekday,
            pad_weeks=bool(getattr(self.settings, "calendar_pad_weeks", False)),
        )
