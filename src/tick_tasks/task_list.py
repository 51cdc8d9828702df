"""Ordered, index-addressed collection of tasks."""

from __future__ import annotations

from typing import Iterable, Iterator

from .clock import DEFAULT_FORMATS, DateTimeFormats, Moment
from .errors import TaskEmptyError, TaskIndexError
from .models import Task, task_from_record


def count_phrase(size: int) -> str:
    return f"{size} task" if size == 1 else f"{size} tasks"


class TaskList:
    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = list(tasks or [])

    @classmethod
    def from_records(
        cls,
        records: Iterable[str],
        formats: DateTimeFormats = DEFAULT_FORMATS,
    ) -> TaskList:
        return cls(task_from_record(record, formats) for record in records if record.strip())

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def size(self) -> int:
        return len(self._tasks)

    def is_empty(self) -> bool:
        return not self._tasks

    def _check_index(self, index: int) -> None:
        if not self._tasks:
            raise TaskEmptyError("There are no tasks in your list yet.")
        size = len(self._tasks)
        if index < 0 or index >= size:
            raise TaskIndexError(
                f"Pick a task number from 1 to {size}. You only have {count_phrase(size)}.",
                size,
            )

    def add(self, task: Task) -> None:
        self._tasks.append(task)

    def get(self, index: int) -> Task:
        self._check_index(index)
        return self._tasks[index]

    def remove(self, index: int) -> Task:
        self._check_index(index)
        return self._tasks.pop(index)

    def mark(self, index: int) -> Task:
        task = self.get(index)
        task.mark()
        return task

    def unmark(self, index: int) -> Task:
        task = self.get(index)
        task.unmark()
        return task

    def clear(self) -> int:
        removed = len(self._tasks)
        self._tasks.clear()
        return removed

    def find_tasks_occurring_on(self, instant: Moment) -> TaskList:
        matches: list[Task] = []
        for task in self._tasks:
            if task.kind == "deadline" and task.due.is_equal(instant):
                matches.append(task)
            elif task.kind == "event" and task.start <= instant <= task.end:
                matches.append(task)
        return TaskList(matches)

    def find_tasks_with_keyword(self, keyword: str) -> TaskList:
        # The empty keyword is a substring of every rendered task, so it matches all.
        return TaskList(task for task in self._tasks if keyword in task.render())

    def to_records(self) -> list[str]:
        return [task.to_record() for task in self._tasks]
