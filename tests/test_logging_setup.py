# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tasknest.logging_setup import _ConsoleNoiseFilter, level_from_name, setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_level_from_name() -> None:
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("WARNING") == logging.WARNING
    assert level_from_name("15") == 15
    assert level_from_name("loud") == logging.INFO
    assert level_from_name(None, logging.ERROR) == logging.ERROR


def test_console_filter_keeps_the_prompt_readable() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("tasknest.tasks.task_store", logging.DEBUG))
    assert not f.filter(_record("tasknest.api.client", logging.INFO))
    assert f.filter(_record("tasknest.api.client", logging.WARNING))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("httpx", logging.ERROR))


def test_setup_logging_writes_the_file(tmp_path: Path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)
    setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)

    logging.getLogger("tasknest.test").debug("hello file")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "tasknest.log"
    assert len(logging.getLogger().handlers) == 2
    assert "hello file" in log_file.read_text(encoding="utf-8")
