# src/tasknest/tasks/errors.py

from __future__ import annotations

"""
Task error taxonomy.

Every failure the engine can report is one of three kinds:
- validation: a required field is missing or a value is invalid,
- not found: the operation targets an id the backend does not know,
- transport: the backend (or the network in front of it) failed.

All of them carry a display message; the store records it and re-raises.
"""


class TaskError(Exception):
    """Base class for all task engine failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class TaskValidationError(TaskError, ValueError):
    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.errors: dict[str, str] = dict(errors or {})


class TaskNotFoundError(TaskError, LookupError):
    def __init__(self, task_id: str, message: str | None = None) -> None:
        super().__init__(message or f"Task not found: {task_id}")
        self.task_id = task_id


class TaskTransportError(TaskError, RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def friendly_error_message(err: BaseException) -> str:
    """Turn any exception into a short line suitable for the UI."""
    if isinstance(err, TaskValidationError):
        if err.errors:
            details = "; ".join(f"{k}: {v}" for k, v in sorted(err.errors.items()))
            return f"Invalid task: {err.message} ({details})"
        return f"Invalid task: {err.message}"
    if isinstance(err, TaskNotFoundError):
        return err.message
    if isinstance(err, TaskTransportError):
        return f"Server unavailable: {err.message}"
    msg = str(err).strip()
    return msg or err.__class__.__name__
