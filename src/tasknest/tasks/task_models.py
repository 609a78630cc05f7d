# src/tasknest/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any, Literal


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - "in_progress" (underscore) is what the backend writes in some places;
      it is accepted as a spelling of IN_PROGRESS.
    - Any other unknown value is NOT coerced to PENDING. parse() returns None
      and callers keep the raw string so the board can show it explicitly.
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskStatus | None:
        if raw is None:
            return None
        value = str(raw).strip().lower()
        if value == "in_progress":
            return cls.IN_PROGRESS
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def rank(self) -> int:
        return BOARD_ORDER.index(self)


class QuickFilter(StrEnum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class SortField(StrEnum):
    TITLE = "title"
    DESCRIPTION = "description"
    PRIORITY = "priority"
    STATUS = "status"
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


_PRIORITY_ORDER: tuple[TaskPriority, ...] = (TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH)

# Fixed column order of the board (and the ordinal order used when sorting by status).
BOARD_ORDER: tuple[TaskStatus, ...] = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED)

ALL: Literal["all"] = "all"

# Fields an update may carry. id/created_at/updated_at are owned by the server.
PATCHABLE_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "description",
        "priority",
        "status",
        "due_date",
        "assigned_to",
        "team_id",
        "tags",
        "is_public",
        "reminder_set",
        "reminder_date",
    }
)


@dataclass(frozen=True, slots=True)
class UserRef:
    """Weak reference to a user (the task does not own it)."""

    id: str
    name: str
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    priority: TaskPriority
    # TaskStatus for well-formed tasks; the raw string when the backend sent
    # something unrecognized (see TaskStatus.parse).
    status: TaskStatus | str

    description: str | None = None
    due_date: date | None = None
    assigned_to: UserRef | None = None
    team_id: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)

    created_at: datetime | None = None
    updated_at: datetime | None = None

    is_public: bool = False
    reminder_set: bool = False
    reminder_date: datetime | None = None

    @property
    def has_known_status(self) -> bool:
        return isinstance(self.status, TaskStatus)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


StatusFilter = TaskStatus | Literal["all"]
PriorityFilter = TaskPriority | Literal["all"]


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """
    Conjunctive filter over tasks.

    status has no default on purpose: a caller must say either a concrete
    status or "all". Use FilterSpec.match_all() for the all-pass spec.
    """

    status: StatusFilter
    priority: PriorityFilter = ALL
    search: str = ""
    window: QuickFilter = QuickFilter.ALL

    tags: frozenset[str] = field(default_factory=frozenset)
    assigned_to: str | None = None
    team_id: str | None = None
    hide_overdue: bool = False

    def __post_init__(self) -> None:
        if self.status != ALL and not isinstance(self.status, TaskStatus):
            parsed = TaskStatus.parse(str(self.status)) if self.status is not None else None
            if parsed is None:
                raise ValueError(f"status filter must be a TaskStatus or 'all', got {self.status!r}")
            object.__setattr__(self, "status", parsed)
        if self.priority != ALL and not isinstance(self.priority, TaskPriority):
            object.__setattr__(self, "priority", TaskPriority(str(self.priority)))
        if not isinstance(self.window, QuickFilter):
            object.__setattr__(self, "window", QuickFilter(str(self.window)))
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))

    @classmethod
    def match_all(cls) -> FilterSpec:
        return cls(status=ALL)

    @property
    def is_empty(self) -> bool:
        return self == FilterSpec.match_all()


@dataclass(frozen=True, slots=True)
class SortKey:
    field: SortField
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        if not isinstance(self.field, SortField):
            object.__setattr__(self, "field", SortField(str(self.field)))
        if not isinstance(self.direction, SortDirection):
            object.__setattr__(self, "direction", SortDirection(str(self.direction)))


@dataclass(frozen=True, slots=True)
class SortSpec:
    primary: SortKey
    secondary: SortKey | None = None

    @classmethod
    def by(
            cls,
            field: SortField | str,
            direction: SortDirection | str = SortDirection.ASC,
            *,
            then: tuple[SortField | str, SortDirection | str] | None = None,
    ) -> SortSpec:
        secondary = SortKey(*then) if then is not None else None  # type: ignore[arg-type]
        return cls(primary=SortKey(field, direction), secondary=secondary)  # type: ignore[arg-type]

    def keys(self) -> tuple[SortKey, ...]:
        if self.secondary is None:
            return (self.primary,)
        return (self.primary, self.secondary)


DEFAULT_SORT = SortSpec(primary=SortKey(SortField.CREATED_AT, SortDirection.DESC))


@dataclass(frozen=True, slots=True)
class TaskQuery:
    """Parameters of a list call sent to the backend."""

    filter: FilterSpec
    sort: SortSpec
    page: int = 1
    limit: int = 20

    @property
    def offset(self) -> int:
        return max(0, (self.page - 1) * self.limit)


@dataclass(frozen=True, slots=True)
class TaskPage:
    tasks: tuple[Task, ...]
    total: int
    has_more: bool
    page: int = 1
    limit: int = 20


TaskFields = dict[str, Any]
# Plain mapping of Task attribute names (python spelling) to new values.
