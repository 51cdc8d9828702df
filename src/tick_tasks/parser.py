"""Command classification and per-command argument extraction."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import TaskDomainError, TaskFormatError

EXACT_COMMANDS = ("help", "now", "clear", "list", "bye")
PREFIX_COMMANDS = ("occurring", "unmark", "mark", "delete", "find", "snooze")
ADD_COMMAND = "add"

DEFAULT_SNOOZE_MINUTES = 30
SNOOZE_UNIT_ALIASES = {
    "day": "day",
    "days": "day",
    "hour": "hour",
    "hours": "hour",
    "minute": "minute",
    "minutes": "minute",
    "min": "minute",
}


@dataclass(frozen=True, slots=True)
class CommandData:
    kind: str
    raw: str


@dataclass(frozen=True, slots=True)
class AddRequest:
    kind: str
    description: str
    due: str | None = None
    start: str | None = None
    end: str | None = None


@dataclass(frozen=True, slots=True)
class SnoozeRequest:
    number: int | None
    unit: str
    amount: int


def parse_command(line: str) -> CommandData:
    tokens = line.split()
    if not tokens:
        return CommandData(ADD_COMMAND, line)
    head = tokens[0].lower()
    if head in EXACT_COMMANDS:
        return CommandData(head, line)
    for command in PREFIX_COMMANDS:
        if head.startswith(command):
            return CommandData(command, line)
    return CommandData(ADD_COMMAND, line)


def payload_after_command(line: str) -> str:
    parts = line.strip().split(maxsplit=1)
    if len(parts) < 2:
        return ""
    return parts[1].strip()


def _parse_int(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        return None


def parse_task_number(line: str) -> int | None:
    """Return the task number given to mark/unmark/delete.

    ``None`` means the single argument was not a number; the caller chooses
    how to report that.
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise TaskDomainError("Which task are you referring to? Add its number, e.g. 'mark 2'.")
    if len(tokens) > 2:
        raise TaskFormatError("Follow the proper format please, e.g. 'mark 2'. Type 'help' for reference.")
    return _parse_int(tokens[1])


def parse_snooze(line: str, default_minutes: int = DEFAULT_SNOOZE_MINUTES) -> SnoozeRequest:
    tokens = line.split()
    if len(tokens) == 2:
        return SnoozeRequest(_parse_int(tokens[1]), "minute", default_minutes)
    if len(tokens) != 5:
        raise TaskFormatError(
            "Use 'snooze <n>' or 'snooze <n> /by <amount> <day|hour|minute>'."
        )

    _, number_token, by_token, amount_token, unit_token = tokens
    if by_token.lower() != "/by":
        raise TaskFormatError("Use '/by' to say how long to snooze, e.g. 'snooze 2 /by 3 hours'.")
    amount = _parse_int(amount_token)
    if amount is None or amount <= 0:
        raise TaskDomainError(f"Snooze amount must be a positive whole number, not '{amount_token}'.")
    unit = SNOOZE_UNIT_ALIASES.get(unit_token.lower())
    if unit is None:
        raise TaskDomainError(f"Unknown snooze unit '{unit_token}'. Use day, hour or minute.")
    return SnoozeRequest(_parse_int(number_token), unit, amount)


def _parse_event_payload(payload: str) -> AddRequest:
    segments = f" {payload}".split(" /")
    if len(segments) != 3:
        raise TaskDomainError(
            "You need to add BOTH the start time AND the end time, "
            "e.g. 'event meetup /from 1/10/2024 1800 /to 1/10/2024 2000'."
        )
    description, start_segment, end_segment = (segment.strip() for segment in segments)
    if not (start_segment.startswith("from") and end_segment.startswith("to")):
        raise TaskFormatError("Use the format '/from <start> /to <end>'. Type 'help' for reference.")
    start = start_segment[len("from"):].strip()
    end = end_segment[len("to"):].strip()
    if not start or not end:
        raise TaskDomainError("Neither the start time nor the end time of an event can be blank.")
    if not description:
        raise TaskDomainError("The description of an event cannot be empty.")
    return AddRequest("event", description, start=start, end=end)


def parse_add(line: str, *, implicit_todo: bool = False) -> AddRequest:
    stripped = line.strip()
    parts = stripped.split(maxsplit=1)
    task_type = parts[0].lower() if parts else ""
    payload = parts[1].strip() if len(parts) > 1 else ""

    if task_type == "todo":
        if not payload:
            raise TaskDomainError("Add a description for your todo, e.g. 'todo buy milk'.")
        return AddRequest("todo", payload)

    if task_type == "deadline":
        if not payload:
            raise TaskDomainError("Add a description for your deadline.")
        pieces = f" {payload}".split(" /by ", 1)
        if len(pieces) < 2 or not pieces[1].strip():
            raise TaskDomainError(
                "When is the deadline for this task? Add it as '/by 1/10/2024 1700'."
            )
        description, due = pieces[0].strip(), pieces[1].strip()
        if not description:
            raise TaskDomainError("The description of a deadline cannot be empty.")
        return AddRequest("deadline", description, due=due)

    if task_type == "event":
        if not payload:
            raise TaskDomainError("Add a description for your event.")
        return _parse_event_payload(payload)

    if implicit_todo and stripped:
        return AddRequest("todo", stripped)
    raise TaskDomainError("Unknown task type. Use: todo, deadline, or event.")
