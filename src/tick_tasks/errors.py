"""Error hierarchy shared by the task core."""

from __future__ import annotations


class TaskError(Exception):
    """Base error for task operations."""


class TaskFormatError(TaskError):
    """Raised when input does not match the grammar of its command."""


class TaskDomainError(TaskError):
    """Raised when well-formed input violates a task rule."""


class TaskIndexError(TaskDomainError):
    """Raised when a task number falls outside the list."""

    def __init__(self, message: str, size: int) -> None:
        super().__init__(message)
        self.size = size


class TaskEmptyError(TaskDomainError):
    """Raised when an operation needs a task but the list is empty."""
