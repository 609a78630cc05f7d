# tests/test_console_connector.py

from __future__ import annotations

import builtins

from tasknest.connectors.console_connector import run_console_loop


def test_console_loop_runs_commands_until_exit(state, monkeypatch, capsys) -> None:
    lines = iter(["", "board", "/rm t1", "yes", "/rm t2", "n", "/exit", "/list"])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(lines))

    run_console_loop(state)

    out = capsys.readouterr().out
    assert "Loaded 3 task(s)." in out
    assert "== ממתין (1)" in out
    assert "Deleted task t1." in out
    assert "Cancelled." in out
    assert state.store.get("t1") is None
    assert state.store.get("t2") is not None
    # Input after /exit is never read.
    assert next(lines) == "/list"


def test_console_loop_stops_on_eof(state, monkeypatch, capsys) -> None:
    def eof(prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr(builtins, "input", eof)

    run_console_loop(state)

    assert "Use /help for commands" in capsys.readouterr().out
