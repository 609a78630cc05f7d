# src/tasknest/api/codec.py

from __future__ import annotations

"""
JSON wire shape of a task (camelCase, ISO dates) <-> Task.

The backend is lenient about what it sends (missing optional fields, dates as
"2024-03-15" or full timestamps); decoding is lenient the same way, except for
the fields every task must have: id, title and status.
"""

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from ..tasks.errors import TaskValidationError
from ..tasks.task_models import (
    ALL,
    FilterSpec,
    SortField,
    Task,
    TaskPriority,
    TaskQuery,
    TaskStatus,
    UserRef,
)

logger = logging.getLogger(__name__)

# python field name -> wire name
WIRE_NAMES: dict[str, str] = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "status": "status",
    "due_date": "dueDate",
    "assigned_to": "assignedTo",
    "team_id": "teamId",
    "tags": "tags",
    "is_public": "isPublic",
    "reminder_set": "reminderSet",
    "reminder_date": "reminderDate",
}

SORT_WIRE_NAMES: dict[SortField, str] = {
    SortField.TITLE: "title",
    SortField.DESCRIPTION: "description",
    SortField.PRIORITY: "priority",
    SortField.STATUS: "status",
    SortField.DUE_DATE: "dueDate",
    SortField.CREATED_AT: "createdAt",
    SortField.UPDATED_AT: "updatedAt",
}


def _parse_datetime(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, Mapping) and "_seconds" in raw:
        # Firestore timestamp serialized as {"_seconds": ..., "_nanoseconds": ...}
        return datetime.fromtimestamp(float(raw["_seconds"]))
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        logger.debug("Unparseable timestamp %r", raw)
        return None


def _parse_day(raw: Any) -> date | None:
    """Calendar day of a due date; the date part is taken as written (no tz shift)."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, Mapping) and "_seconds" in raw:
        return datetime.fromtimestamp(float(raw["_seconds"])).date()
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        logger.debug("Unparseable due date %r", raw)
        return None


def _parse_user(raw: Any) -> UserRef | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        # Some endpoints send only the user id.
        return UserRef(id=raw, name=raw)
    if isinstance(raw, Mapping):
        uid = raw.get("id") or raw.get("uid")
        if not uid:
            return None
        name = raw.get("name") or raw.get("displayName") or str(uid)
        return UserRef(id=str(uid), name=str(name), avatar_url=raw.get("photoURL") or raw.get("avatarUrl"))
    return None


def task_from_json(data: Mapping[str, Any]) -> Task:
    errors: dict[str, str] = {}
    task_id = data.get("id")
    if task_id is None or str(task_id) == "":
        errors["id"] = "id is required"
    title = data.get("title")
    if not title or not str(title).strip():
        errors["title"] = "title is required"
    raw_status = data.get("status")
    if raw_status is None or str(raw_status).strip() == "":
        errors["status"] = "status is required"
    if errors:
        raise TaskValidationError("Malformed task payload", errors=errors)

    status: TaskStatus | str = TaskStatus.parse(str(raw_status)) or str(raw_status)

    try:
        priority = TaskPriority(str(data.get("priority") or TaskPriority.MEDIUM))
    except ValueError:
        logger.warning("Task %s has unknown priority %r; using medium", task_id, data.get("priority"))
        priority = TaskPriority.MEDIUM

    description = data.get("description")
    tags = data.get("tags") or ()

    return Task(
        id=str(task_id),
        title=str(title),
        priority=priority,
        status=status,
        description=str(description) if description else None,
        due_date=_parse_day(data.get("dueDate")),
        assigned_to=_parse_user(data.get("assignedTo")),
        team_id=data.get("teamId") or None,
        tags=frozenset(str(t) for t in tags),
        created_at=_parse_datetime(data.get("createdAt")),
        updated_at=_parse_datetime(data.get("updatedAt")),
        is_public=bool(data.get("isPublic", False)),
        reminder_set=bool(data.get("reminderSet", False)),
        reminder_date=_parse_datetime(data.get("reminderDate")),
    )


def _encode_value(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name == "due_date":
        return value.isoformat()
    if name == "reminder_date":
        return value.isoformat()
    if name == "assigned_to":
        return value.id
    if name == "tags":
        return sorted(value)
    if name in ("priority", "status"):
        return str(value)
    return value


def fields_to_json(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Encode a (validated) create/update payload into the wire shape."""
    return {WIRE_NAMES[name]: _encode_value(name, value) for name, value in fields.items()}


def task_to_json(task: Task) -> dict[str, Any]:
    out: dict[str, Any] = {"id": task.id}
    for name in WIRE_NAMES:
        out[WIRE_NAMES[name]] = _encode_value(name, getattr(task, name))
    if task.assigned_to is not None:
        out["assignedTo"] = {
            "id": task.assigned_to.id,
            "name": task.assigned_to.name,
            "photoURL": task.assigned_to.avatar_url,
        }
    out["createdAt"] = task.created_at.isoformat() if task.created_at else None
    out["updatedAt"] = task.updated_at.isoformat() if task.updated_at else None
    return out


def query_params(query: TaskQuery) -> dict[str, str | int]:
    """Query string of a list call."""
    spec: FilterSpec = query.filter
    params: dict[str, str | int] = {
        "sortBy": SORT_WIRE_NAMES[query.sort.primary.field],
        "sortOrder": str(query.sort.primary.direction),
        "page": query.page,
        "limit": query.limit,
        "offset": query.offset,
    }
    if spec.status != ALL:
        params["status"] = str(spec.status)
    if spec.priority != ALL:
        params["priority"] = str(spec.priority)
    if spec.search.strip():
        params["search"] = spec.search.strip()
    if spec.team_id:
        params["teamId"] = spec.team_id
    if spec.assigned_to:
        params["assignTo"] = spec.assigned_to
    return params
