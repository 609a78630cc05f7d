# src/tasknest/tasks/task_filters.py

from __future__ import annotations

"""
Filter & sort engine.

Pure functions over task sequences:
- filter_tasks(): conjunction of the active predicates of a FilterSpec,
- sort_tasks(): stable ordering by a primary (and optional secondary) key,
- apply_view(): filter, then sort.

None of them mutates its input; each returns a new list.
"""

import calendar
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from functools import cmp_to_key

from .collation import DEFAULT_LOCALE, compare_strings
from .task_models import (
    ALL,
    BOARD_ORDER,
    FilterSpec,
    QuickFilter,
    SortDirection,
    SortField,
    SortKey,
    SortSpec,
    Task,
    TaskStatus,
)

Comparator = Callable[[Task, Task], int]

# ---- filtering ----


def week_bounds(day: date, first_weekday: int = calendar.SUNDAY) -> tuple[date, date]:
    """
    First and last day of the calendar week containing `day`.

    first_weekday uses the calendar module numbering (MONDAY=0 .. SUNDAY=6).
    """
    offset = (day.weekday() - first_weekday) % 7
    start = day - timedelta(days=offset)
    return start, start + timedelta(days=6)


def in_window(
        due: date | None,
        window: QuickFilter,
        today: date,
        first_weekday: int = calendar.SUNDAY,
) -> bool:
    if window == QuickFilter.ALL:
        return True
    if due is None:
        return False
    if window == QuickFilter.TODAY:
        return due == today
    if window == QuickFilter.WEEK:
        start, end = week_bounds(today, first_weekday)
        return start <= due <= end
    if window == QuickFilter.MONTH:
        return (due.year, due.month) == (today.year, today.month)
    return True


def is_overdue(task: Task, today: date) -> bool:
    return task.due_date is not None and task.due_date < today and not task.is_completed


def matches_search(task: Task, term: str) -> bool:
    needle = term.strip().casefold()
    if not needle:
        return True
    if needle in task.title.casefold():
        return True
    return task.description is not None and needle in task.description.casefold()


def matches(
        task: Task,
        spec: FilterSpec,
        *,
        today: date,
        first_weekday: int = calendar.SUNDAY,
) -> bool:
    """True if the task satisfies every active predicate of the spec."""
    if spec.status != ALL and task.status != spec.status:
        return False
    if spec.priority != ALL and task.priority != spec.priority:
        return False
    if not matches_search(task, spec.search):
        return False
    if not in_window(task.due_date, spec.window, today, first_weekday):
        return False
    if spec.tags and not spec.tags <= task.tags:
        return False
    if spec.assigned_to and (task.assigned_to is None or task.assigned_to.id != spec.assigned_to):
        return False
    if spec.team_id and task.team_id != spec.team_id:
        return False
    if spec.hide_overdue and is_overdue(task, today):
        return False
    return True


def filter_tasks(
        tasks: Iterable[Task],
        spec: FilterSpec,
        *,
        today: date | None = None,
        first_weekday: int = calendar.SUNDAY,
) -> list[Task]:
    if today is None:
        today = date.today()
    return [t for t in tasks if matches(t, spec, today=today, first_weekday=first_weekday)]


# ---- sorting ----


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _string_comparator(getter: Callable[[Task], str | None], locale: str) -> Comparator:
    def compare(a: Task, b: Task) -> int:
        return compare_strings(getter(a) or "", getter(b) or "", locale)

    return compare


def _status_rank(task: Task) -> int:
    # Unrecognized statuses order after every known one.
    if isinstance(task.status, TaskStatus):
        return task.status.rank
    return len(BOARD_ORDER)


def _comparator_for(field: SortField, locale: str) -> Comparator:
    if field == SortField.TITLE:
        return _string_comparator(lambda t: t.title, locale)
    if field == SortField.DESCRIPTION:
        return _string_comparator(lambda t: t.description, locale)
    if field == SortField.PRIORITY:
        return lambda a, b: _cmp(a.priority.rank, b.priority.rank)
    if field == SortField.STATUS:
        def compare_status(a: Task, b: Task) -> int:
            c = _cmp(_status_rank(a), _status_rank(b))
            if c == 0 and not a.has_known_status and not b.has_known_status:
                return compare_strings(str(a.status), str(b.status), locale)
            return c

        return compare_status
    raise ValueError(f"{field} is not a plain comparator field")


_DATE_GETTERS: dict[SortField, Callable[[Task], date | datetime | None]] = {
    SortField.DUE_DATE: lambda t: t.due_date,
    SortField.CREATED_AT: lambda t: t.created_at,
    SortField.UPDATED_AT: lambda t: t.updated_at,
}


def _instant(value: date | datetime) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    return datetime(value.year, value.month, value.day).timestamp()


def _key_comparator(key: SortKey, locale: str) -> Comparator:
    """
    Comparator for one sort key with its direction applied.

    Date fields keep missing values last in both directions.
    """
    descending = key.direction == SortDirection.DESC
    getter = _DATE_GETTERS.get(key.field)

    if getter is not None:
        def compare_dates(a: Task, b: Task) -> int:
            va, vb = getter(a), getter(b)
            if va is None and vb is None:
                return 0
            if va is None:
                return 1
            if vb is None:
                return -1
            c = _cmp(_instant(va), _instant(vb))
            return -c if descending else c

        return compare_dates

    base = _comparator_for(key.field, locale)
    if descending:
        return lambda a, b: -base(a, b)
    return base


def build_comparator(spec: SortSpec, *, locale: str = DEFAULT_LOCALE) -> Comparator:
    comparators = [_key_comparator(k, locale) for k in spec.keys()]

    def compare(a: Task, b: Task) -> int:
        for c in comparators:
            result = c(a, b)
            if result:
                return result
        return 0

    return compare


def sort_tasks(
        tasks: Iterable[Task],
        spec: SortSpec,
        *,
        locale: str = DEFAULT_LOCALE,
) -> list[Task]:
    """Stable sort: tasks equal under every key keep their input order."""
    return sorted(tasks, key=cmp_to_key(build_comparator(spec, locale=locale)))


def apply_view(
        tasks: Iterable[Task],
        filter_spec: FilterSpec,
        sort_spec: SortSpec | None = None,
        *,
        today: date | None = None,
        locale: str = DEFAULT_LOCALE,
        first_weekday: int = calendar.SUNDAY,
) -> list[Task]:
    out = filter_tasks(tasks, filter_spec, today=today, first_weekday=first_weekday)
    if sort_spec is None:
        return out
    return sort_tasks(out, sort_spec, locale=locale)
