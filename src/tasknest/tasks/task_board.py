# src/tasknest/tasks/task_board.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import TaskValidationError
from .task_models import BOARD_ORDER, Task, TaskStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BoardColumn:
    status: TaskStatus
    tasks: tuple[Task, ...]

    def __len__(self) -> int:
        return len(self.tasks)


@dataclass(frozen=True, slots=True)
class Board:
    """
    Status-grouped view of a task sequence.

    columns always holds one column per status in BOARD_ORDER.
    unrecognized holds tasks whose status is not a known TaskStatus; it is
    part of the partition (count() includes it) so nothing disappears.
    """

    columns: tuple[BoardColumn, ...]
    unrecognized: tuple[Task, ...] = ()

    def column(self, status: TaskStatus | str) -> BoardColumn:
        wanted = TaskStatus.parse(str(status))
        for col in self.columns:
            if col.status == wanted:
                return col
        raise KeyError(status)

    def count(self) -> int:
        return sum(len(c) for c in self.columns) + len(self.unrecognized)

    def as_dict(self) -> dict[str, list[str]]:
        """Status value -> task ids (handy for logs and tests)."""
        out = {c.status.value: [t.id for t in c.tasks] for c in self.columns}
        if self.unrecognized:
            out["unrecognized"] = [t.id for t in self.unrecognized]
        return out


def build_board(tasks: Iterable[Task], *, strict: bool = False) -> Board:
    """
    Partition tasks into the fixed status columns, keeping input order.

    With strict=True an unrecognized status raises TaskValidationError instead
    of landing in Board.unrecognized.
    """
    buckets: dict[TaskStatus, list[Task]] = {s: [] for s in BOARD_ORDER}
    unknown: list[Task] = []

    for task in tasks:
        status = task.status if isinstance(task.status, TaskStatus) else None
        if status is None:
            if strict:
                raise TaskValidationError(
                    f"Task {task.id} has unrecognized status {task.status!r}",
                    errors={"status": str(task.status)},
                )
            logger.warning("Task %s has unrecognized status %r; shown as unrecognized", task.id, task.status)
            unknown.append(task)
            continue
        buckets[status].append(task)

    return Board(
        columns=tuple(BoardColumn(status=s, tasks=tuple(buckets[s])) for s in BOARD_ORDER),
        unrecognized=tuple(unknown),
    )
