# tests/test_task_filters.py

from __future__ import annotations

import calendar
from datetime import UTC, date, datetime

import pytest

from tasknest.tasks.task_filters import apply_view, filter_tasks, in_window, sort_tasks, week_bounds
from tasknest.tasks.task_models import (
    ALL,
    FilterSpec,
    QuickFilter,
    SortDirection,
    SortField,
    SortSpec,
    TaskPriority,
    TaskStatus,
    UserRef,
)

from .fakes import TODAY, make_task, seed_tasks


def _ids(tasks) -> list[str]:
    return [t.id for t in tasks]


def test_filter_spec_requires_an_explicit_status() -> None:
    with pytest.raises(TypeError):
        FilterSpec()  # type: ignore[call-arg]

    with pytest.raises(ValueError):
        FilterSpec(status="bogus")  # type: ignore[arg-type]

    assert FilterSpec(status="in_progress").status is TaskStatus.IN_PROGRESS  # type: ignore[arg-type]
    assert FilterSpec.match_all().status == ALL
    assert FilterSpec.match_all().is_empty


def test_status_and_priority_are_conjunctive() -> None:
    tasks = [
        make_task("a", status=TaskStatus.PENDING, priority=TaskPriority.HIGH),
        make_task("b", status=TaskStatus.PENDING, priority=TaskPriority.LOW),
        make_task("c", status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH),
    ]
    spec = FilterSpec(status=TaskStatus.PENDING, priority=TaskPriority.HIGH)
    assert _ids(filter_tasks(tasks, spec, today=TODAY)) == ["a"]

    spec = FilterSpec(status=ALL, priority=TaskPriority.HIGH)
    assert _ids(filter_tasks(tasks, spec, today=TODAY)) == ["a", "c"]


def test_search_is_case_insensitive_over_title_and_description() -> None:
    tasks = [
        make_task("a", "Quarterly REPORT"),
        make_task("b", "Groceries", description="milk, eggs, report card"),
        make_task("c", "Dentist"),
    ]
    spec = FilterSpec(status=ALL, search="  report ")
    assert _ids(filter_tasks(tasks, spec, today=TODAY)) == ["a", "b"]

    spec = FilterSpec(status=ALL, search="")
    assert _ids(filter_tasks(tasks, spec, today=TODAY)) == ["a", "b", "c"]


def test_week_bounds_follow_the_first_weekday() -> None:
    # 2024-03-15 is a Friday.
    assert week_bounds(TODAY, calendar.SUNDAY) == (date(2024, 3, 10), date(2024, 3, 16))
    assert week_bounds(TODAY, calendar.MONDAY) == (date(2024, 3, 11), date(2024, 3, 17))


def test_quick_windows() -> None:
    assert in_window(TODAY, QuickFilter.TODAY, TODAY)
    assert not in_window(date(2024, 3, 16), QuickFilter.TODAY, TODAY)

    assert in_window(date(2024, 3, 16), QuickFilter.WEEK, TODAY)
    assert not in_window(date(2024, 3, 17), QuickFilter.WEEK, TODAY)
    assert in_window(date(2024, 3, 17), QuickFilter.WEEK, TODAY, calendar.MONDAY)

    assert in_window(date(2024, 3, 31), QuickFilter.MONTH, TODAY)
    assert not in_window(date(2024, 4, 1), QuickFilter.MONTH, TODAY)
    assert not in_window(date(2023, 3, 15), QuickFilter.MONTH, TODAY)

    # A task without a due date is outside every window except "all".
    assert not in_window(None, QuickFilter.TODAY, TODAY)
    assert not in_window(None, QuickFilter.MONTH, TODAY)
    assert in_window(None, QuickFilter.ALL, TODAY)


def test_tags_team_assignee_and_overdue() -> None:
    alice = UserRef(id="u1", name="Alice")
    tasks = [
        make_task("a", tags=frozenset({"work", "q1"}), team_id="team-1", assigned_to=alice),
        make_task("b", tags=frozenset({"work"}), team_id="team-2"),
        make_task("c", due=date(2024, 3, 1)),
        make_task("d", due=date(2024, 3, 1), status=TaskStatus.COMPLETED),
    ]

    assert _ids(filter_tasks(tasks, FilterSpec(status=ALL, tags={"work", "q1"}), today=TODAY)) == ["a"]
    assert _ids(filter_tasks(tasks, FilterSpec(status=ALL, team_id="team-2"), today=TODAY)) == ["b"]
    assert _ids(filter_tasks(tasks, FilterSpec(status=ALL, assigned_to="u1"), today=TODAY)) == ["a"]
    # Completed tasks are never overdue.
    assert _ids(filter_tasks(tasks, FilterSpec(status=ALL, hide_overdue=True), today=TODAY)) == ["a", "b", "d"]


def test_due_date_sort_keeps_missing_dates_last_in_both_directions() -> None:
    tasks = [
        make_task("none1"),
        make_task("late", due=date(2024, 4, 1)),
        make_task("early", due=date(2024, 3, 1)),
        make_task("none2"),
    ]
    asc = sort_tasks(tasks, SortSpec.by(SortField.DUE_DATE, SortDirection.ASC))
    desc = sort_tasks(tasks, SortSpec.by(SortField.DUE_DATE, SortDirection.DESC))

    assert _ids(asc) == ["early", "late", "none1", "none2"]
    assert _ids(desc) == ["late", "early", "none1", "none2"]


def test_priority_and_status_sort_by_rank_not_by_name() -> None:
    tasks = [
        make_task("m", priority=TaskPriority.MEDIUM, status=TaskStatus.COMPLETED),
        make_task("h", priority=TaskPriority.HIGH, status=TaskStatus.PENDING),
        make_task("l", priority=TaskPriority.LOW, status=TaskStatus.IN_PROGRESS),
    ]
    by_priority = sort_tasks(tasks, SortSpec.by("priority", "desc"))
    assert _ids(by_priority) == ["h", "m", "l"]

    by_status = sort_tasks(tasks, SortSpec.by("status"))
    assert _ids(by_status) == ["h", "l", "m"]


def test_sort_is_stable_and_uses_the_secondary_key() -> None:
    tasks = [
        make_task("a", priority=TaskPriority.HIGH, due=date(2024, 3, 20)),
        make_task("b", priority=TaskPriority.LOW),
        make_task("c", priority=TaskPriority.HIGH, due=date(2024, 3, 18)),
        make_task("d", priority=TaskPriority.LOW),
    ]
    primary_only = sort_tasks(tasks, SortSpec.by("priority", "desc"))
    assert _ids(primary_only) == ["a", "c", "b", "d"]

    with_secondary = sort_tasks(tasks, SortSpec.by("priority", "desc", then=("due_date", "asc")))
    assert _ids(with_secondary) == ["c", "a", "b", "d"]


def test_title_sort_uses_collation_not_code_points() -> None:
    tasks = [
        make_task("b", "Banana"),
        make_task("c", "cherry"),
        make_task("a", "apple"),
    ]
    assert _ids(sort_tasks(tasks, SortSpec.by(SortField.TITLE))) == ["a", "b", "c"]

    hebrew = [make_task("2", "בננה"), make_task("1", "אבטיח"), make_task("3", "גזר")]
    assert _ids(sort_tasks(hebrew, SortSpec.by(SortField.TITLE), locale="he")) == ["1", "2", "3"]

    # Code-point order would put "éclair" after "zebra".
    accented = [make_task("z", "zebra"), make_task("e", "éclair"), make_task("a", "apple")]
    assert _ids(sort_tasks(accented, SortSpec.by(SortField.TITLE), locale="en")) == ["a", "e", "z"]
    assert _ids(sort_tasks(accented, SortSpec.by(SortField.TITLE), locale="he")) == ["a", "e", "z"]


def test_created_at_sort_and_inputs_are_not_mutated() -> None:
    tasks = seed_tasks()
    before = list(tasks)

    out = apply_view(
        tasks,
        FilterSpec.match_all(),
        SortSpec.by(SortField.CREATED_AT, SortDirection.DESC),
        today=TODAY,
    )

    assert _ids(out) == ["t3", "t2", "t1"]
    assert tasks == before
    assert out is not tasks


def test_apply_view_without_sort_keeps_input_order() -> None:
    tasks = [
        make_task("x", created=datetime(2024, 1, 2, tzinfo=UTC)),
        make_task("y", created=datetime(2024, 1, 1, tzinfo=UTC)),
    ]
    assert _ids(apply_view(tasks, FilterSpec.match_all(), today=TODAY)) == ["x", "y"]
