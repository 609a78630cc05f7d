# src/tasknest/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import date
from typing import Any, cast

from ..core.state import AppState, ViewMode
from ..tasks.errors import TaskError, friendly_error_message
from ..tasks.task_api import create_task, delete_with_confirmation
from ..tasks.task_calendar import MonthCursor
from ..tasks.task_models import (
    ALL,
    FilterSpec,
    QuickFilter,
    SortField,
    SortKey,
    SortSpec,
    Task,
)
from ..tasks.task_store import OperationStatus
from ..tasks.task_transitions import Transition, apply_transition
from .render import render_board, render_calendar, render_list, render_task_details

CommandEmitter = Callable[[str], None]
CommandConfirm = Callable[[str], bool]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler4 = Callable[[AppState, list[str], CommandEmitter | None, CommandConfirm | None], str]
CommandHandler = CommandHandler2 | CommandHandler4

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
        confirm: CommandConfirm | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Task errors are turned into a readable reply; the console stays usable.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 4

        try:
            if nparams >= 4:
                h4 = cast(CommandHandler4, handler)
                return h4(state, args, emit, confirm)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskError as e:
            logger.info("/%s failed: %s", name, e.message)
            return friendly_error_message(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate free words from key=value options."""
    words: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        if "=" in a and not a.startswith("="):
            k, v = a.split("=", 1)
            opts[k.strip().lower()] = v.strip()
        else:
            words.append(a)
    return words, opts


def _require_task(state: AppState, args: list[str], usage: str) -> Task | str:
    if not args:
        return usage
    task = state.store.get(args[0])
    if task is None:
        return f"No task with id {args[0]} in the current list. Use /reload or /list."
    return task


def _today(state: AppState) -> date:
    return state.clock()


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    store = state.store
    backend = getattr(s, "api_url", None) or "in-memory demo"
    lines = [
        "Status:",
        f"  Backend: {backend}",
        f"  Tasks loaded: {len(store)} of {store.total} (page {store.page}, more: {'yes' if store.has_more else 'no'})",
        f"  Filter: {store.filter}",
        f"  Sort: {store.sort}",
        f"  Loading: {'yes' if store.loading else 'no'}",
    ]
    failed = {k: v for k, v in store.operations.items() if v.status == OperationStatus.FAILED and v.error}
    for key, op in failed.items():
        lines.append(f"  Last error [{key}]: {op.error}")
    return "\n".join(lines)


def cmd_reload(state: AppState, args: list[str]) -> str:
    page = state.run(state.store.fetch())
    return f"Loaded {len(page.tasks)} task(s), {page.total} in total."


def cmd_more(state: AppState, args: list[str]) -> str:
    page = state.run(state.store.load_more())
    if page is None:
        return "No more tasks."
    return f"Loaded {len(page.tasks)} more task(s)."


def cmd_list(state: AppState, args: list[str]) -> str:
    state.view = ViewMode.LIST
    return render_list(state.visible_tasks(), today=_today(state), lang=state.locale)


def cmd_board(state: AppState, args: list[str]) -> str:
    state.view = ViewMode.BOARD
    return render_board(state.board(), lang=state.locale)


def cmd_cal(state: AppState, args: list[str]) -> str:
    """
    /cal            -> current visible month
    /cal next|prev  -> move one month
    /cal today      -> jump to the month containing today
    /cal 2024-03    -> jump to a month
    """
    state.view = ViewMode.CALENDAR
    if args:
        arg = args[0].lower()
        if arg in ("next", "n", ">"):
            state.cursor = state.cursor.next()
        elif arg in ("prev", "p", "<"):
            state.cursor = state.cursor.previous()
        elif arg == "today":
            state.cursor = MonthCursor.containing(_today(state))
        else:
            try:
                y, m = arg.split("-", 1)
                state.cursor = MonthCursor(int(y), int(m))
            except ValueError:
                return "Usage: /cal [next|prev|today|YYYY-MM]"
    return render_calendar(state.calendar(), today=_today(state), lang=state.locale)


def cmd_new(state: AppState, args: list[str]) -> str:
    """/new <title words> [p=low|medium|high] [due=YYYY-MM-DD] [tags=a,b] [notes=...]"""
    words, opts = split_options(args)
    kwargs: dict[str, Any] = {}
    if "p" in opts or "priority" in opts:
        kwargs["priority"] = opts.get("p") or opts.get("priority")
    if "due" in opts:
        kwargs["due_date"] = opts["due"]
    if "tags" in opts:
        kwargs["tags"] = [t for t in opts["tags"].split(",") if t]
    if "notes" in opts:
        kwargs["description"] = opts["notes"]

    task = state.run(create_task(state.store, " ".join(words), **kwargs))
    return f"Created task {task.id}: {task.title}"


def cmd_show(state: AppState, args: list[str]) -> str:
    task = _require_task(state, args, "Usage: /show <id>")
    if isinstance(task, str):
        return task
    state.store.set_current(task)
    return render_task_details(task, today=_today(state), lang=state.locale)


_EDIT_KEYS = {
    "title": "title",
    "notes": "description",
    "description": "description",
    "p": "priority",
    "priority": "priority",
    "status": "status",
    "due": "due_date",
    "tags": "tags",
    "team": "team_id",
}


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> key=value ...  (title, notes, p, status, due, tags, team; use _ for spaces)"""
    task = _require_task(state, args, "Usage: /edit <id> key=value ...")
    if isinstance(task, str):
        return task
    _, opts = split_options(args[1:])
    patch: dict[str, Any] = {}
    for key, value in opts.items():
        field = _EDIT_KEYS.get(key)
        if field is None:
            return f"Unknown field: {key}"
        if field == "tags":
            patch[field] = [t for t in value.split(",") if t]
        elif field == "due_date" and value in ("", "none", "-"):
            patch[field] = None
        else:
            patch[field] = value.replace("_", " ")
    if not patch:
        return "Nothing to change. Usage: /edit <id> key=value ..."
    updated = state.run(state.store.update(task.id, patch))
    return f"Updated task {updated.id}."


def _transition_command(transition: Transition, name: str) -> CommandHandler2:
    def handler(state: AppState, args: list[str]) -> str:
        task = _require_task(state, args, f"Usage: /{name} <id>")
        if isinstance(task, str):
            return task
        updated = state.run(apply_transition(state.store, task, transition))
        if updated is task:
            return f"Task {task.id} is already {task.status}; nothing to do."
        return f"Task {updated.id} -> {updated.status}"

    return handler


def cmd_rm(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
    confirm: CommandConfirm | None = None,
) -> str:
    task = _require_task(state, args, "Usage: /rm <id>")
    if isinstance(task, str):
        return task
    if confirm is None:
        return "Deleting needs an interactive confirmation."

    def ask(t: Task) -> bool:
        ok = confirm(f"Delete task {t.id} '{t.title}'? [y/N] ")
        if ok and emit is not None:
            emit(f"Deleting task {t.id}...")
        return ok

    deleted = state.run(delete_with_confirmation(state.store, task.id, ask))
    return f"Deleted task {task.id}." if deleted else "Cancelled."


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                -> show current filter
    /filter clear          -> all tasks
    /filter status=pending priority=high q=word window=week tags=a,b team=x user=u overdue=hide
    """
    store = state.store
    if not args:
        return f"Filter: {store.filter}"
    if args[0].lower() == "clear":
        store.set_filter(FilterSpec.match_all())
        return "Filter cleared."

    _, opts = split_options(args)
    current = store.filter
    try:
        spec = FilterSpec(
            status=opts.get("status", str(current.status)) or ALL,
            priority=opts.get("priority", opts.get("p", str(current.priority))) or ALL,
            search=opts.get("q", opts.get("search", current.search)).replace("_", " "),
            window=QuickFilter(opts.get("window", str(current.window))),
            tags=frozenset(t for t in opts["tags"].split(",") if t) if "tags" in opts else current.tags,
            assigned_to=opts.get("user", current.assigned_to) or None,
            team_id=opts.get("team", current.team_id) or None,
            hide_overdue=(opts["overdue"] == "hide") if "overdue" in opts else current.hide_overdue,
        )
    except ValueError as e:
        return f"Invalid filter: {e}"
    store.set_filter(spec)
    return f"Filter: {spec}"


def cmd_sort(state: AppState, args: list[str]) -> str:
    """/sort <field> [asc|desc] [<field> [asc|desc]]"""
    if not args:
        return f"Sort: {state.store.sort}"

    keys: list[SortKey] = []
    i = 0
    try:
        while i < len(args) and len(keys) < 2:
            field = SortField(args[i].lower())
            direction = "asc"
            if i + 1 < len(args) and args[i + 1].lower() in ("asc", "desc"):
                direction = args[i + 1].lower()
                i += 1
            keys.append(SortKey(field, direction))  # type: ignore[arg-type]
            i += 1
    except ValueError:
        fields = ", ".join(f.value for f in SortField)
        return f"Unknown sort field. Choose from: {fields}"

    spec = SortSpec(primary=keys[0], secondary=keys[1] if len(keys) > 1 else None)
    state.store.set_sort(spec)
    return f"Sort: {spec}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend, paging and last errors.")
registry.register("reload", cmd_reload, help_text="Fetch tasks from the backend (first page).", aliases=["r"])
registry.register("more", cmd_more, help_text="Fetch the next page and append it.")
registry.register("list", cmd_list, help_text="List view (filtered and sorted).", aliases=["ls"])
registry.register("board", cmd_board, help_text="Board view grouped by status.")
registry.register("cal", cmd_cal, help_text="Calendar view: /cal [next|prev|today|YYYY-MM].")
registry.register("new", cmd_new, help_text="Create: /new <title> [p=high] [due=YYYY-MM-DD] [tags=a,b].")
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit: /edit <id> title=... due=... p=...")
registry.register("done", _transition_command(Transition.TOGGLE, "done"), help_text="Toggle completed/pending.")
registry.register("fwd", _transition_command(Transition.FORWARD, "fwd"), help_text="Move a task one status forward.")
registry.register("back", _transition_command(Transition.BACK, "back"), help_text="Move a task one status back.")
registry.register("complete", _transition_command(Transition.COMPLETE, "complete"), help_text="Mark a task completed.")
registry.register("rm", cmd_rm, help_text="Delete a task (asks for confirmation).", aliases=["del"])
registry.register("filter", cmd_filter, help_text="Filter: /filter status=... priority=... q=... window=...")
registry.register("sort", cmd_sort, help_text="Sort: /sort due_date asc [title desc].")
