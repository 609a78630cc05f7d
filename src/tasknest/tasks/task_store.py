# src/tasknest/tasks/task_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from ..core.ports import TaskTransport
from .errors import TaskError, TaskTransportError, TaskValidationError
from .task_models import (
    DEFAULT_SORT,
    PATCHABLE_FIELDS,
    FilterSpec,
    SortSpec,
    Task,
    TaskPage,
    TaskPriority,
    TaskQuery,
    TaskStatus,
    UserRef,
)

logger = logging.getLogger(__name__)


class OperationStatus(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class OperationState:
    status: OperationStatus = OperationStatus.IDLE
    error: str | None = None
    started_at: float | None = None
    finished_at: float | None = None

    @property
    def pending(self) -> bool:
        return self.status == OperationStatus.PENDING


IDLE = OperationState()

OP_FETCH = "fetch"
OP_CREATE = "create"


def op_update(task_id: str) -> str:
    return f"update:{task_id}"


def op_delete(task_id: str) -> str:
    return f"delete:{task_id}"


def _to_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _to_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def clean_fields(fields: Mapping[str, Any], *, require_title: bool) -> dict[str, Any]:
    """
    Validate and coerce a create/update payload (python field names).

    Raises TaskValidationError listing every offending field.
    """
    errors: dict[str, str] = {}
    out: dict[str, Any] = {}

    for name, value in fields.items():
        if name not in PATCHABLE_FIELDS:
            errors[name] = "not an editable field"
            continue
        try:
            if name == "title":
                title = "" if value is None else str(value).strip()
                if not title:
                    errors[name] = "title is required"
                    continue
                out[name] = title
            elif name == "priority":
                out[name] = TaskPriority(str(value))
            elif name == "status":
                status = TaskStatus.parse(None if value is None else str(value))
                if status is None:
                    errors[name] = f"unknown status {value!r}"
                    continue
                out[name] = status
            elif name == "due_date":
                out[name] = _to_date(value)
            elif name == "reminder_date":
                out[name] = _to_datetime(value)
            elif name == "tags":
                out[name] = frozenset(str(t).strip() for t in (value or ()) if str(t).strip())
            elif name == "assigned_to":
                if value is not None and not isinstance(value, UserRef):
                    errors[name] = "expected a UserRef"
                    continue
                out[name] = value
            elif name in ("is_public", "reminder_set"):
                out[name] = bool(value)
            else:
                out[name] = value
        except ValueError as e:
            errors[name] = str(e) or "invalid value"

    if require_title and "title" not in out and "title" not in errors:
        errors["title"] = "title is required"

    if errors:
        first = next(iter(errors.values()))
        raise TaskValidationError(first, errors=errors)
    return out


class TaskStore:
    """
    Client-side task collection (single source of truth for the views).

    Every public operation awaits the transport and only then mutates the
    collection, so a failed call leaves the last-known-good state intact.

    Operation state:
    - each logical operation ("fetch", "create", "update:<id>", "delete:<id>")
      has its own OperationState: idle -> pending -> succeeded | failed
    - concurrent operations therefore never overwrite each other's state
    - loading/error are aggregate views kept for simple UIs

    Ordering:
    - responses are applied in arrival order
    - mutations of the same task id are serialized (issue order == apply order)
    """

    def __init__(
            self,
            transport: TaskTransport,
            *,
            limit: int = 20,
            sort: SortSpec = DEFAULT_SORT,
            filter: FilterSpec | None = None,
    ) -> None:
        self._transport = transport
        self._tasks: list[Task] = []
        self.total = 0
        self.has_more = False
        self.page = 1
        self.limit = max(1, int(limit))
        self.filter = filter if filter is not None else FilterSpec.match_all()
        self.sort = sort
        self.current_task: Task | None = None

        self._ops: dict[str, OperationState] = {}
        self._last_finished: str | None = None
        # task id -> (lock, callers holding or waiting on it)
        self._id_locks: dict[str, tuple[asyncio.Lock, int]] = {}

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def operation(self, key: str) -> OperationState:
        return self._ops.get(key, IDLE)

    @property
    def operations(self) -> dict[str, OperationState]:
        return dict(self._ops)

    @property
    def loading(self) -> bool:
        return any(s.pending for s in self._ops.values())

    @property
    def error(self) -> str | None:
        if self._last_finished is None:
            return None
        return self._ops.get(self._last_finished, IDLE).error

    def clear_error(self) -> None:
        for key, state in list(self._ops.items()):
            if state.status == OperationStatus.FAILED:
                self._ops[key] = replace(state, error=None)

    # ---- local state (no transport) ----

    def set_current(self, task: Task | str | None) -> Task | None:
        if isinstance(task, str):
            task = self.get(task)
        self.current_task = task
        return task

    def set_filter(self, spec: FilterSpec) -> None:
        self.filter = spec
        self.page = 1

    def set_sort(self, spec: SortSpec) -> None:
        self.sort = spec
        self.page = 1

    def set_limit(self, limit: int) -> None:
        self.limit = max(1, int(limit))
        self.page = 1

    def clear(self) -> None:
        self._tasks = []
        self.total = 0
        self.current_task = None
        self.page = 1
        self.has_more = False
        self._prune_ops(keep_ids=set())

    # ---- operation bookkeeping ----

    @contextlib.asynccontextmanager
    async def _operation(self, key: str) -> AsyncIterator[None]:
        self._ops[key] = OperationState(status=OperationStatus.PENDING, started_at=time.time())
        logger.debug("Task op started key=%s", key)
        try:
            yield
        except TaskError as e:
            self._finish(key, OperationStatus.FAILED, e.message)
            logger.warning("Task op failed key=%s: %s", key, e.message)
            raise
        except asyncio.CancelledError:
            self._finish(key, OperationStatus.FAILED, "Request cancelled.")
            raise
        except Exception as e:
            logger.exception("Task op crashed key=%s", key)
            err = TaskTransportError(str(e).strip() or e.__class__.__name__)
            self._finish(key, OperationStatus.FAILED, err.message)
            raise err from e
        else:
            self._finish(key, OperationStatus.SUCCEEDED, None)
            logger.debug("Task op succeeded key=%s", key)

    def _finish(self, key: str, status: OperationStatus, error: str | None) -> None:
        started = self._ops.get(key, IDLE).started_at
        self._ops[key] = OperationState(status=status, error=error, started_at=started, finished_at=time.time())
        self._last_finished = key

    @contextlib.asynccontextmanager
    async def _task_lock(self, task_id: str) -> AsyncIterator[None]:
        """
        Serialize mutations of one task id.

        The lock is shared by everyone holding or waiting on it and dropped
        when the last of them leaves, so a later caller can never get a
        second lock for the same id while the first is still in use.
        """
        lock, users = self._id_locks.get(task_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._id_locks[task_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._id_locks[task_id]
            if users <= 1:
                del self._id_locks[task_id]
            else:
                self._id_locks[task_id] = (lock, users - 1)

    def _prune_ops(self, *, keep_ids: set[str] | None = None, drop_ids: set[str] | None = None) -> None:
        """Forget finished per-task op states (pending ones and the last finished op stay)."""
        for key, state in list(self._ops.items()):
            if state.pending or key == self._last_finished or ":" not in key:
                continue
            task_id = key.split(":", 1)[1]
            if (drop_ids is not None and task_id in drop_ids) or (keep_ids is not None and task_id not in keep_ids):
                del self._ops[key]

    # ---- CRUD ----

    async def fetch(
            self,
            filter: FilterSpec | None = None,
            sort: SortSpec | None = None,
            *,
            page: int = 1,
            limit: int | None = None,
            append: bool = False,
    ) -> TaskPage:
        """
        Load a page of tasks.

        append=False replaces the held collection (fresh query);
        append=True adds the page after the held tasks (incremental load).
        """
        if filter is not None:
            self.filter = filter
        if sort is not None:
            self.sort = sort
        if limit is not None:
            self.limit = max(1, int(limit))

        query = TaskQuery(filter=self.filter, sort=self.sort, page=max(1, int(page)), limit=self.limit)

        async with self._operation(OP_FETCH):
            result = await self._transport.list_tasks(query)

            if append:
                known = {t.id for t in self._tasks}
                self._tasks.extend(t for t in result.tasks if t.id not in known)
            else:
                self._tasks = list(result.tasks)
            self.total = int(result.total)
            self.has_more = bool(result.has_more)
            self.page = query.page

        if not append:
            self._prune_ops(keep_ids={t.id for t in self._tasks})

        logger.info(
            "Fetched tasks page=%s got=%s total=%s append=%s",
            query.page,
            len(result.tasks),
            self.total,
            append,
        )
        return result

    async def load_more(self) -> TaskPage | None:
        if not self.has_more:
            return None
        return await self.fetch(page=self.page + 1, append=True)

    async def create(self, fields: Mapping[str, Any]) -> Task:
        async with self._operation(OP_CREATE):
            clean = clean_fields(fields, require_title=True)
            task = await self._transport.create_task(clean)
            self._tasks.insert(0, task)
            self.total += 1

        logger.info("Task created id=%s title=%r", task.id, task.title)
        return task

    async def update(self, task_id: str, patch: Mapping[str, Any]) -> Task:
        async with self._task_lock(task_id), self._operation(op_update(task_id)):
            clean = clean_fields(patch, require_title=False)
            if not clean:
                raise TaskValidationError("Nothing to update.")
            task = await self._transport.update_task(task_id, clean)

            self._tasks = [task if t.id == task.id else t for t in self._tasks]
            if self.current_task is not None and self.current_task.id == task.id:
                self.current_task = task

        logger.info("Task updated id=%s fields=%s", task_id, sorted(clean))
        return task

    async def remove(self, task_id: str) -> None:
        async with self._task_lock(task_id), self._operation(op_delete(task_id)):
            await self._transport.delete_task(task_id)

            self._tasks = [t for t in self._tasks if t.id != task_id]
            self.total = max(0, self.total - 1)
            if self.current_task is not None and self.current_task.id == task_id:
                self.current_task = None

        self._prune_ops(drop_ids={task_id})
        logger.info("Task deleted id=%s", task_id)
