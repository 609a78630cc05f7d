# src/tasknest/cli/render.py

"""Plain-text renderings of the three task views for the console."""

from __future__ import annotations

from datetime import date

from ..formatting import month_name, priority_label, relative_date_label, status_label, weekday_names
from ..tasks.task_board import Board
from ..tasks.task_calendar import CalendarMonth
from ..tasks.task_models import Task

CELL_WIDTH = 10


def _mark(task: Task) -> str:
    return "[x]" if task.is_completed else "[ ]"


def render_task_line(task: Task, *, today: date, lang: str) -> str:
    due = relative_date_label(task.due_date, today, lang) if task.due_date else "-"
    who = task.assigned_to.name if task.assigned_to else "-"
    return (
        f"{_mark(task)} {task.id:<6} {task.title}  "
        f"({priority_label(task.priority, lang)}, {status_label(task.status, lang)}, due: {due}, to: {who})"
    )


def render_list(tasks: list[Task], *, today: date, lang: str) -> str:
    if not tasks:
        return "No tasks."
    return "\n".join(render_task_line(t, today=today, lang=lang) for t in tasks)


def render_task_details(task: Task, *, today: date, lang: str) -> str:
    lines = [
        f"{task.title}  (id={task.id})",
        f"  status:   {status_label(task.status, lang)}",
        f"  priority: {priority_label(task.priority, lang)}",
        f"  due:      {relative_date_label(task.due_date, today, lang) if task.due_date else '-'}",
    ]
    if task.description:
        lines.append(f"  notes:    {task.description}")
    if task.assigned_to:
        lines.append(f"  assigned: {task.assigned_to.name}")
    if task.tags:
        lines.append(f"  tags:     {', '.join(sorted(task.tags))}")
    return "\n".join(lines)


def render_board(board: Board, *, lang: str) -> str:
    lines: list[str] = []
    for col in board.columns:
        lines.append(f"== {status_label(col.status, lang)} ({len(col)})")
        lines.extend(f"   {t.id:<6} {t.title}" for t in col.tasks)
    if board.unrecognized:
        lines.append(f"== ?? unrecognized status ({len(board.unrecognized)})")
        lines.extend(f"   {t.id:<6} {t.title} [{t.status}]" for t in board.unrecognized)
    return "\n".join(lines)


def _cell(text: str) -> str:
    return text[:CELL_WIDTH].ljust(CELL_WIDTH)


def render_calendar(month: CalendarMonth, *, today: date, lang: str) -> str:
    header = f"{month_name(month.month, lang)} {month.year}"
    names = " ".join(_cell(n) for n in weekday_names(lang, month.first_weekday))
    rows = [header, names]
    for week in month.weeks():
        cells = []
        for c in week:
            if c.day is None:
                cells.append(_cell(""))
                continue
            marker = "*" if c.date == today else ""
            count = f"({len(c.tasks)})" if c.tasks else ""
            cells.append(_cell(f"{c.day}{marker}{count}"))
        rows.append(" ".join(cells))
    return "\n".join(rows)
