# tests/test_task_transitions.py

from __future__ import annotations

from datetime import date

import pytest

from tasknest.tasks.errors import TaskValidationError
from tasknest.tasks.task_models import TaskPriority, TaskStatus
from tasknest.tasks.task_store import TaskStore
from tasknest.tasks.task_transitions import (
    Transition,
    apply_transition,
    can_move_back,
    can_move_forward,
    mark_complete,
    move_back,
    move_forward,
    next_status,
    toggle,
)

from .fakes import FakeTransport, make_task

P, IP, C = TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED


def test_toggle_skips_in_progress() -> None:
    assert toggle(P) is C
    assert toggle(C) is P
    assert toggle(IP) is C


def test_forward_and_back_walk_the_board() -> None:
    assert [move_forward(s) for s in (P, IP, C)] == [IP, C, None]
    assert [move_back(s) for s in (P, IP, C)] == [None, P, IP]

    assert can_move_forward(P) and not can_move_forward(C)
    assert can_move_back(C) and not can_move_back(P)


def test_mark_complete_is_a_noop_when_already_completed() -> None:
    assert mark_complete(P) is C
    assert mark_complete(IP) is C
    assert mark_complete(C) is None


def test_next_status_rejects_unknown_status() -> None:
    assert next_status("in_progress", "forward") is C
    with pytest.raises(TaskValidationError):
        next_status("archived", Transition.TOGGLE)


@pytest.mark.asyncio
async def test_disabled_transition_never_calls_the_store() -> None:
    transport = FakeTransport([make_task("t1", status=C)])
    store = TaskStore(transport)
    await store.fetch()
    task = store.get("t1")

    result = await apply_transition(store, task, Transition.FORWARD)

    assert result is task
    assert transport.call_names() == ["list"]


@pytest.mark.asyncio
async def test_enabled_transition_is_a_status_update() -> None:
    transport = FakeTransport([make_task("t1", status=P)])
    store = TaskStore(transport)
    await store.fetch()

    updated = await apply_transition(store, store.get("t1"), Transition.TOGGLE)

    assert updated.status is C
    assert store.get("t1").status is C
    assert transport.calls[-1] == ("update:t1", {"status": C})


@pytest.mark.asyncio
async def test_double_toggle_restores_the_task() -> None:
    original = make_task(
        "t1",
        "Water the plants",
        status=P,
        priority=TaskPriority.HIGH,
        due=date(2024, 3, 18),
        description="balcony first",
        tags=frozenset({"home"}),
    )
    store = TaskStore(FakeTransport([original]))
    await store.fetch()

    once = await apply_transition(store, store.get("t1"), Transition.TOGGLE)
    twice = await apply_transition(store, once, Transition.TOGGLE)

    assert once.status is C
    assert twice.status is P
    for name in ("status", "title", "priority", "due_date", "tags", "description"):
        assert getattr(twice, name) == getattr(original, name), name
