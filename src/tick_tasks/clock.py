"""Date and time values used by dated tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt
import re
from typing import Literal

from .errors import TaskFormatError

Ordering = Literal["before", "equal", "after"]

DATE_TOKEN_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
TIME_TOKEN_RE = re.compile(r"^(\d{2})(\d{2})$")
MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True, slots=True)
class DateTimeFormats:
    display_date: str = "%b %d %Y"
    clock_24h: bool = False

    def render_date(self, value: dt.date) -> str:
        return value.strftime(self.display_date)

    def render_time(self, value: dt.time) -> str:
        if self.clock_24h:
            return f"{value.hour:02d}:{value.minute:02d}"
        hour = value.hour % 12 or 12
        meridiem = "AM" if value.hour < 12 else "PM"
        return f"{hour}.{value.minute:02d} {meridiem}"


DEFAULT_FORMATS = DateTimeFormats()


def _parse_date_token(token: str) -> dt.date:
    match = DATE_TOKEN_RE.fullmatch(token)
    if match is None:
        raise TaskFormatError(f"Invalid date '{token}'. Use d/M/yyyy, e.g. 1/10/2024.")
    day, month, year = (int(part) for part in match.groups())
    try:
        return dt.date(year, month, day)
    except ValueError as exc:
        raise TaskFormatError(f"Invalid date '{token}': {exc}.") from exc


def _parse_time_token(token: str) -> dt.time:
    match = TIME_TOKEN_RE.fullmatch(token)
    if match is None:
        raise TaskFormatError(f"Invalid time '{token}'. Use 24-hour HHmm, e.g. 1700.")
    hour, minute = (int(part) for part in match.groups())
    try:
        return dt.time(hour, minute)
    except ValueError as exc:
        raise TaskFormatError(f"Invalid time '{token}': {exc}.") from exc


@dataclass(slots=True)
class Moment:
    """A calendar date paired with a time of day.

    Moments are mutable: snoozing a task pushes its moments forward in place.
    The persisted form is always rebuilt from ``date`` and ``time``.
    """

    date: dt.date
    time: dt.time
    formats: DateTimeFormats = field(default=DEFAULT_FORMATS, compare=False, repr=False)

    @classmethod
    def parse(cls, text: str, formats: DateTimeFormats = DEFAULT_FORMATS) -> Moment:
        tokens = text.split()
        if len(tokens) != 2:
            raise TaskFormatError(
                "Write BOTH the date and the time, e.g. 1/10/2024 1700."
            )
        date_token, time_token = tokens
        return cls(_parse_date_token(date_token), _parse_time_token(time_token), formats)

    @classmethod
    def now(cls, formats: DateTimeFormats = DEFAULT_FORMATS) -> Moment:
        current = dt.datetime.now()
        return cls(current.date(), current.time().replace(second=0, microsecond=0), formats)

    def copy(self) -> Moment:
        return Moment(self.date, self.time, self.formats)

    def _key(self) -> tuple[dt.date, dt.time]:
        return (self.date, self.time)

    def compare(self, other: Moment) -> Ordering:
        if self._key() < other._key():
            return "before"
        if self._key() > other._key():
            return "after"
        return "equal"

    def is_before(self, other: Moment) -> bool:
        return self.compare(other) == "before"

    def is_after(self, other: Moment) -> bool:
        return self.compare(other) == "after"

    def is_equal(self, other: Moment) -> bool:
        return self.compare(other) == "equal"

    def __lt__(self, other: Moment) -> bool:
        return self.is_before(other)

    def __le__(self, other: Moment) -> bool:
        return not self.is_after(other)

    def __gt__(self, other: Moment) -> bool:
        return self.is_after(other)

    def __ge__(self, other: Moment) -> bool:
        return not self.is_before(other)

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0) -> None:
        total_minutes = self.time.hour * 60 + self.time.minute + hours * 60 + minutes
        carry_days, remainder = divmod(total_minutes, MINUTES_PER_DAY)
        self.time = dt.time(remainder // 60, remainder % 60)
        self.date = self.date + dt.timedelta(days=days + carry_days)

    def push_back_time(self, minutes: int) -> None:
        self.advance(minutes=minutes)

    def push_back_date(self, days: int) -> None:
        self.advance(days=days)

    def to_saved(self) -> str:
        return f"{self.date.day}/{self.date.month}/{self.date.year} {self.time:%H%M}"

    def render(self) -> str:
        return f"{self.formats.render_date(self.date)}, {self.formats.render_time(self.time)}"

    def __str__(self) -> str:
        return self.render()


def describe_now(formats: DateTimeFormats = DEFAULT_FORMATS) -> str:
    current = Moment.now(formats)
    weekday = current.date.strftime("%A").upper()
    return (
        f"Today is {weekday}, {formats.render_date(current.date)}, "
        f"and the time is currently {formats.render_time(current.time)}"
    )
