# tests/test_bootstrap.py

from __future__ import annotations

import asyncio
from datetime import date

from tasknest.api.client import HttpTaskTransport
from tasknest.api.offline import InMemoryTaskTransport
from tasknest.cli.bootstrap import create_initial_state, create_transport, demo_tasks
from tasknest.tasks.task_models import FilterSpec, TaskStatus

from .fakes import TODAY


def test_offline_state_is_wired_with_the_demo_backend(settings) -> None:
    state = create_initial_state(settings=settings)

    assert isinstance(state.transport, InMemoryTaskTransport)
    assert settings.data_dir.is_dir()
    assert state.store.limit == settings.page_limit

    page = state.run(state.store.fetch())
    assert page.total == len(demo_tasks(date.today()))


def test_api_url_selects_the_http_backend(settings) -> None:
    settings.api_url = "https://tasks.example.test"
    transport = create_transport(settings)
    try:
        assert isinstance(transport, HttpTaskTransport)
    finally:
        asyncio.run(transport.aclose())


def test_projections_follow_the_store_filter(state) -> None:
    assert [t.id for t in state.visible_tasks()] == ["t3", "t2", "t1"]

    state.store.set_filter(FilterSpec(status=TaskStatus.COMPLETED))

    assert [t.id for t in state.visible_tasks()] == ["t3"]
    assert state.board().count() == 1
    month = state.calendar()
    assert (month.year, month.month) == (TODAY.year, TODAY.month)
    assert [t.id for t in month.day(1).tasks] == ["t3"]
