# src/tasknest/tasks/task_calendar.py

from __future__ import annotations

"""
Month grid projection.

The grid is a flat list of cells:
- first_weekday_index blank cells (day=None) so day 1 sits under its weekday,
- one cell per day of the month,
- optionally trailing blanks to complete the last week (pad_weeks=True).

Weekdays use the calendar module numbering (MONDAY=0 .. SUNDAY=6); the
first_weekday argument says which of them opens a week in the grid.
"""

import calendar
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .task_models import Task

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_weekday_index(year: int, month: int, first_weekday: int = SUNDAY) -> int:
    """Column (0..6) of day 1, counted from the locale's first weekday."""
    return (date(year, month, 1).weekday() - first_weekday) % 7


@dataclass(frozen=True, slots=True)
class CalendarDay:
    day: int | None
    date: date | None
    tasks: tuple[Task, ...] = ()

    @property
    def is_blank(self) -> bool:
        return self.day is None


@dataclass(frozen=True, slots=True)
class CalendarMonth:
    year: int
    month: int
    first_weekday: int
    leading_blanks: int
    days_in_month: int
    cells: tuple[CalendarDay, ...]

    def day(self, n: int) -> CalendarDay:
        if not 1 <= n <= self.days_in_month:
            raise IndexError(f"day {n} is outside {self.year}-{self.month:02d}")
        return self.cells[self.leading_blanks + n - 1]

    def weeks(self) -> list[tuple[CalendarDay, ...]]:
        """Rows of seven cells; the last row may be short when not padded."""
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]

    def task_count(self) -> int:
        return sum(len(c.tasks) for c in self.cells)


@dataclass(frozen=True, slots=True)
class MonthCursor:
    """The visible (year, month) pair; month is 1..12."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @classmethod
    def containing(cls, day: date) -> MonthCursor:
        return cls(day.year, day.month)

    def next(self) -> MonthCursor:
        if self.month == 12:
            return MonthCursor(self.year + 1, 1)
        return MonthCursor(self.year, self.month + 1)

    def previous(self) -> MonthCursor:
        if self.month == 1:
            return MonthCursor(self.year - 1, 12)
        return MonthCursor(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def tasks_by_due_date(tasks: Iterable[Task]) -> dict[date, list[Task]]:
    out: dict[date, list[Task]] = defaultdict(list)
    for task in tasks:
        if task.due_date is not None:
            out[task.due_date].append(task)
    return out


def build_month(
        year: int,
        month: int,
        tasks: Iterable[Task],
        *,
        first_weekday: int = SUNDAY,
        pad_weeks: bool = False,
) -> CalendarMonth:
    """Build the grid for (year, month) and bucket tasks by exact due date."""
    n_days = days_in_month(year, month)
    lead = first_weekday_index(year, month, first_weekday)
    by_day = tasks_by_due_date(tasks)

    cells: list[CalendarDay] = [CalendarDay(day=None, date=None) for _ in range(lead)]
    for d in range(1, n_days + 1):
        current = date(year, month, d)
        cells.append(CalendarDay(day=d, date=current, tasks=tuple(by_day.get(current, ()))))

    if pad_weeks:
        tail = (-len(cells)) % 7
        cells.extend(CalendarDay(day=None, date=None) for _ in range(tail))

    return CalendarMonth(
        year=year,
        month=month,
        first_weekday=first_weekday,
        leading_blanks=lead,
        days_in_month=n_days,
        cells=tuple(cells),
    )


def build_for_cursor(
        cursor: MonthCursor,
        tasks: Iterable[Task],
        *,
        first_weekday: int = SUNDAY,
        pad_weeks: bool = False,
) -> CalendarMonth:
    return build_month(cursor.year, cursor.month, tasks, first_weekday=first_weekday, pad_weeks=pad_weeks)
