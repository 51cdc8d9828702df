"""Core task models and constants."""

from __future__ import annotations

from dataclasses import dataclass

from .clock import DEFAULT_FORMATS, DateTimeFormats, Moment
from .errors import TaskDomainError, TaskFormatError

VALID_SNOOZE_UNITS = ("day", "hour", "minute")

KIND_TO_TAG = {
    "todo": "T",
    "deadline": "D",
    "event": "E",
}
TAG_TO_KIND = {value: key for key, value in KIND_TO_TAG.items()}

DONE_MARK = "X"
RECORD_SEPARATOR = " | "


@dataclass(slots=True)
class Task:
    kind: str
    description: str
    done: bool = False
    due: Moment | None = None
    start: Moment | None = None
    end: Moment | None = None

    @property
    def tag(self) -> str:
        return KIND_TO_TAG[self.kind]

    def mark(self) -> None:
        self.done = True

    def unmark(self) -> None:
        self.done = False

    def moments(self) -> list[Moment]:
        if self.kind == "deadline":
            return [self.due]
        if self.kind == "event":
            return [self.start, self.end]
        return []

    def snooze(self, unit: str, amount: int) -> str:
        """Push the task's dated fields forward and describe the result.

        Events move start and end together so the duration is unchanged. A todo
        has nothing to move, which is reported rather than treated as an error.
        """
        if unit not in VALID_SNOOZE_UNITS:
            raise TaskDomainError(
                f"Unknown snooze unit '{unit}'. Use: {', '.join(VALID_SNOOZE_UNITS)}."
            )
        if amount <= 0:
            raise TaskDomainError("Snooze amount must be a positive whole number.")

        moments = self.moments()
        if not moments:
            return f"This todo has no date to push back, so it stays as it is:\n  {self.render()}"

        moved = [moment.copy() for moment in moments]
        try:
            for moment in moved:
                if unit == "day":
                    moment.push_back_date(amount)
                elif unit == "hour":
                    moment.push_back_time(amount * 60)
                else:
                    moment.push_back_time(amount)
        except OverflowError:
            raise TaskDomainError(
                f"Cannot snooze '{self.description}' past year 9999."
            ) from None

        if self.kind == "deadline":
            (self.due,) = moved
        else:
            self.start, self.end = moved
        plural = "" if amount == 1 else "s"
        return f"Snoozed by {amount} {unit}{plural}:\n  {self.render()}"

    def _suffix(self) -> str:
        if self.kind == "deadline":
            return f" (by: {self.due.render()})"
        if self.kind == "event":
            return f" (from: {self.start.render()} to: {self.end.render()})"
        return ""

    def render(self) -> str:
        done_mark = DONE_MARK if self.done else " "
        return f"[{self.tag}][{done_mark}] {self.description}{self._suffix()}"

    def __str__(self) -> str:
        return self.render()

    def to_record(self) -> str:
        fields = [self.tag, "1" if self.done else "0", self.description]
        fields.extend(moment.to_saved() for moment in self.moments())
        return RECORD_SEPARATOR.join(fields)


def _clean_description(description: str, kind: str) -> str:
    cleaned = description.strip()
    if not cleaned:
        raise TaskDomainError(f"The description of a {kind} cannot be empty.")
    return cleaned


def make_todo(description: str) -> Task:
    return Task(kind="todo", description=_clean_description(description, "todo"))


def make_deadline(
    description: str,
    due_text: str,
    formats: DateTimeFormats = DEFAULT_FORMATS,
) -> Task:
    cleaned = _clean_description(description, "deadline")
    if not due_text.strip():
        raise TaskDomainError(
            "When is the deadline for this task? Add it as /by <d/M/yyyy> <HHmm>, e.g. /by 1/10/2024 1700."
        )
    return Task(kind="deadline", description=cleaned, due=Moment.parse(due_text, formats))


def make_event(
    description: str,
    start_text: str,
    end_text: str,
    formats: DateTimeFormats = DEFAULT_FORMATS,
) -> Task:
    cleaned = _clean_description(description, "event")
    if not start_text.strip() or not end_text.strip():
        raise TaskDomainError("Neither the start time nor the end time of an event can be blank.")
    start = Moment.parse(start_text, formats)
    end = Moment.parse(end_text, formats)
    if end.is_before(start):
        raise TaskDomainError("An event cannot end before it starts.")
    return Task(kind="event", description=cleaned, start=start, end=end)


def task_from_record(line: str, formats: DateTimeFormats = DEFAULT_FORMATS) -> Task:
    """Rebuild a task from one persisted record line."""
    head = line.rstrip("\n").split(RECORD_SEPARATOR, 2)
    if len(head) != 3:
        raise TaskFormatError(f"Malformed task record: {line!r}")
    tag, done_flag, rest = head
    kind = TAG_TO_KIND.get(tag.strip())
    if kind is None:
        raise TaskFormatError(f"Unknown task type '{tag}' in record: {line!r}")
    if done_flag.strip() not in {"0", "1"}:
        raise TaskFormatError(f"Invalid done flag '{done_flag}' in record: {line!r}")

    moment_count = {"todo": 0, "deadline": 1, "event": 2}[kind]
    parts = rest.rsplit(RECORD_SEPARATOR, moment_count) if moment_count else [rest]
    if len(parts) != moment_count + 1:
        raise TaskFormatError(f"Malformed {kind} record: {line!r}")

    try:
        if kind == "todo":
            task = make_todo(parts[0])
        elif kind == "deadline":
            task = make_deadline(parts[0], parts[1], formats)
        else:
            task = make_event(parts[0], parts[1], parts[2], formats)
    except TaskDomainError as exc:
        raise TaskFormatError(f"Invalid {kind} record ({exc}): {line!r}") from exc
    task.done = done_flag.strip() == "1"
    return task
