# tests/conftest.py

from __future__ import annotations

import calendar
from pathlib import Path
from types import SimpleNamespace

import pytest

from tasknest.core.state import AppState
from tasknest.tasks.task_calendar import MonthCursor
from tasknest.tasks.task_store import TaskStore

from .fakes import TODAY, FakeTransport


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment and .env.
    """
    return SimpleNamespace(
        app_name="tasknest-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        api_url=None,
        api_token=None,
        request_timeout_seconds=5.0,
        page_limit=20,
        locale="he",
        first_weekday=calendar.SUNDAY,
        calendar_pad_weeks=False,
        console_enabled=False,
    )


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def store(transport: FakeTransport) -> TaskStore:
    return TaskStore(transport, limit=20)


@pytest.fixture()
def state(settings: SimpleNamespace, transport: FakeTransport, store: TaskStore) -> AppState:
    """
    AppState wired with the fake transport and a frozen clock.

    The store starts loaded with the seed tasks.
    """
    app = AppState(
        settings=settings,
        transport=transport,
        store=store,
        cursor=MonthCursor.containing(TODAY),
        clock=lambda: TODAY,
    )
    app.run(store.fetch())
    return app
