"""Command dispatch: validate input, apply it to the task list, persist."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .clock import Moment, describe_now
from .errors import (
    TaskEmptyError,
    TaskError,
    TaskFormatError,
    TaskIndexError,
)
from .models import Task, make_deadline, make_event, make_todo
from .parser import (
    CommandData,
    parse_add,
    parse_command,
    parse_snooze,
    parse_task_number,
    payload_after_command,
)
from .render import render_task_list_plain
from .storage import Settings, TaskStore
from .task_list import TaskList, count_phrase

HELP_TEXT = """Here is what I understand:
  todo <description>
  deadline <description> /by <d/M/yyyy> <HHmm>
  event <description> /from <d/M/yyyy> <HHmm> /to <d/M/yyyy> <HHmm>
  list                      show all tasks
  mark <n> | unmark <n>     mark task n as done / not done
  delete <n>                remove task n
  clear                     remove every task
  find <keyword>            tasks containing the keyword
  occurring <d/M/yyyy> <HHmm>
                            deadlines due and events running at that moment
  snooze <n>                push task n back by the default amount
  snooze <n> /by <amount> <day|hour|minute>
  now                       current date and time
  help                      this message
  bye                       quit"""

NOT_A_NUMBER = "Task numbers are whole numbers, e.g. '{command} 2'."


@dataclass(slots=True)
class Response:
    message: str
    ok: bool = True
    error: str | None = None
    warning: str | None = None
    tasks: TaskList | None = None
    exit: bool = False


def _error_kind(exc: TaskError) -> str:
    if isinstance(exc, TaskEmptyError):
        return "empty"
    if isinstance(exc, TaskIndexError):
        return "index"
    if isinstance(exc, TaskFormatError):
        return "format"
    return "domain"


class TaskService:
    """Owns the task list for one session and answers one command line at a time."""

    def __init__(
        self,
        store: TaskStore,
        settings: Settings | None = None,
        *,
        warn: Callable[[str], None] | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.formats = self.settings.formats
        self.warn = warn
        self.tasks = self._load()
        self._handlers: dict[str, Callable[[CommandData], Response]] = {
            "add": self._cmd_add,
            "help": self._cmd_help,
            "now": self._cmd_now,
            "clear": self._cmd_clear,
            "list": self._cmd_list,
            "bye": self._cmd_bye,
            "occurring": self._cmd_occurring,
            "find": self._cmd_find,
            "mark": self._cmd_mark,
            "unmark": self._cmd_unmark,
            "delete": self._cmd_delete,
            "snooze": self._cmd_snooze,
        }

    def _warn(self, message: str) -> None:
        if self.warn is not None:
            self.warn(message)

    def _load(self) -> TaskList:
        try:
            records = self.store.load()
        except UnicodeDecodeError as exc:
            return self._recover_corrupt(exc)
        except OSError as exc:
            self._warn(f"Unable to read saved tasks at {self.store.path} ({exc}). Starting empty.")
            return TaskList()
        if records is None:
            return TaskList()
        try:
            return TaskList.from_records(records, self.formats)
        except TaskError as exc:
            return self._recover_corrupt(exc)

    def _recover_corrupt(self, exc: Exception) -> TaskList:
        try:
            backup = self.store.quarantine()
        except OSError as copy_exc:
            self._warn(
                f"Saved tasks at {self.store.path} are corrupt ({exc}). "
                f"Starting empty; the old file could not be copied ({copy_exc})."
            )
        else:
            self._warn(
                f"Saved tasks at {self.store.path} are corrupt ({exc}). "
                f"Starting empty; the old file was copied to {backup}."
            )
        return TaskList()

    def _save(self) -> str | None:
        try:
            self.store.save(self.tasks.to_records())
        except OSError as exc:
            message = f"Unable to save tasks to {self.store.path} ({exc}). Changes are kept in memory only."
            self._warn(message)
            return message
        return None

    def _mutated(self, message: str) -> Response:
        return Response(message, warning=self._save())

    def execute(self, line: str) -> Response:
        command = parse_command(line)
        handler = self._handlers[command.kind]
        try:
            return handler(command)
        except TaskError as exc:
            return Response(str(exc), ok=False, error=_error_kind(exc))

    # Task operations, usable directly as well as through execute().

    def add_task(self, task: Task) -> Response:
        self.tasks.add(task)
        return self._mutated(
            f"Got it. I've added this task:\n  {task.render()}\n"
            f"Now you have {count_phrase(self.tasks.size())} in the list."
        )

    def mark_task(self, index: int) -> Response:
        task = self.tasks.mark(index)
        return self._mutated(f"Nice! I've marked this task as done:\n  {task.render()}")

    def unmark_task(self, index: int) -> Response:
        task = self.tasks.unmark(index)
        return self._mutated(f"OK, I've marked this task as not done yet:\n  {task.render()}")

    def delete_task(self, index: int) -> Response:
        if self.tasks.is_empty():
            raise TaskEmptyError("No more tasks to delete.")
        task = self.tasks.remove(index)
        return self._mutated(
            f"Noted. I've removed this task:\n  {task.render()}\n"
            f"Now you have {count_phrase(self.tasks.size())} in the list."
        )

    def snooze_task(self, index: int, unit: str, amount: int) -> Response:
        task = self.tasks.get(index)
        message = task.snooze(unit, amount)
        if task.kind == "todo":
            return Response(message)
        return self._mutated(message)

    def clear_tasks(self) -> Response:
        if self.tasks.is_empty():
            return Response("Nothing left to clear.")
        removed = self.tasks.clear()
        return self._mutated(f"Cleared all {count_phrase(removed)}.")

    # Command handlers.

    def _cmd_add(self, command: CommandData) -> Response:
        request = parse_add(command.raw, implicit_todo=self.settings.implicit_todo)
        if request.kind == "todo":
            task = make_todo(request.description)
        elif request.kind == "deadline":
            task = make_deadline(request.description, request.due, self.formats)
        else:
            task = make_event(request.description, request.start, request.end, self.formats)
        return self.add_task(task)

    def _cmd_help(self, command: CommandData) -> Response:
        return Response(HELP_TEXT)

    def _cmd_now(self, command: CommandData) -> Response:
        return Response(describe_now(self.formats))

    def _cmd_clear(self, command: CommandData) -> Response:
        return self.clear_tasks()

    def _cmd_bye(self, command: CommandData) -> Response:
        return Response("Bye. Hope to see you again soon!", exit=True)

    def _cmd_list(self, command: CommandData) -> Response:
        if self.tasks.is_empty():
            raise TaskEmptyError("No tasks for now!")
        return Response(render_task_list_plain(self.tasks), tasks=TaskList(self.tasks))

    def _cmd_occurring(self, command: CommandData) -> Response:
        instant = Moment.parse(payload_after_command(command.raw), self.formats)
        matches = self.tasks.find_tasks_occurring_on(instant)
        if matches.is_empty():
            return Response(f"Nothing is happening on {instant.render()}.", tasks=matches)
        return Response(
            f"Here is what is happening on {instant.render()}:\n{render_task_list_plain(matches)}",
            tasks=matches,
        )

    def _cmd_find(self, command: CommandData) -> Response:
        keyword = payload_after_command(command.raw)
        if not keyword:
            raise TaskFormatError("What should I look for? Use 'find <keyword>'.")
        matches = self.tasks.find_tasks_with_keyword(keyword)
        if matches.is_empty():
            return Response(f"No tasks contain '{keyword}'.", tasks=matches)
        return Response(
            f"Here are the matching tasks in your list:\n{render_task_list_plain(matches)}",
            tasks=matches,
        )

    def _task_index(self, command: CommandData, number: int | None) -> int:
        if number is None:
            raise TaskFormatError(NOT_A_NUMBER.format(command=command.kind))
        return number - 1

    def _cmd_mark(self, command: CommandData) -> Response:
        return self.mark_task(self._task_index(command, parse_task_number(command.raw)))

    def _cmd_unmark(self, command: CommandData) -> Response:
        return self.unmark_task(self._task_index(command, parse_task_number(command.raw)))

    def _cmd_delete(self, command: CommandData) -> Response:
        return self.delete_task(self._task_index(command, parse_task_number(command.raw)))

    def _cmd_snooze(self, command: CommandData) -> Response:
        request = parse_snooze(command.raw, self.settings.default_snooze_minutes)
        index = self._task_index(command, request.number)
        return self.snooze_task(index, request.unit, request.amount)
