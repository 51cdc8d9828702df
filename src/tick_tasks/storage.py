"""Filesystem operations and config IO for tick-tasks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

import yaml

from .clock import DateTimeFormats
from .parser import DEFAULT_SNOOZE_MINUTES

DATA_DIR_NAME = ".tick-tasks"
TASKS_FILE_NAME = "tasks.txt"
CORRUPT_SUFFIX = ".corrupt"

DEFAULT_IMPLICIT_TODO = False
DEFAULT_DISPLAY_DATE_FORMAT = "%b %d %Y"
DEFAULT_CLOCK_24H = False


@dataclass(frozen=True, slots=True)
class Settings:
    implicit_todo: bool = DEFAULT_IMPLICIT_TODO
    default_snooze_minutes: int = DEFAULT_SNOOZE_MINUTES
    display_date_format: str = DEFAULT_DISPLAY_DATE_FORMAT
    clock_24h: bool = DEFAULT_CLOCK_24H

    @property
    def formats(self) -> DateTimeFormats:
        return DateTimeFormats(display_date=self.display_date_format, clock_24h=self.clock_24h)


def find_repo_root(start: Path) -> Path | None:
    start = start.resolve()
    for candidate in [start, *start.parents]:
        if (candidate / ".git").exists():
            return candidate
    return None


def discover_data_roots(start: Path) -> list[Path]:
    start = start.resolve()
    roots: list[Path] = []
    for candidate in [start, *start.parents]:
        data_dir = candidate / DATA_DIR_NAME
        if data_dir.is_dir():
            roots.append(data_dir)
    return roots


def choose_data_root(start: Path) -> tuple[Path | None, bool]:
    roots = discover_data_roots(start)
    if not roots:
        return None, False
    return roots[0], len(roots) > 1


def default_init_root(start: Path) -> Path:
    repo_root = find_repo_root(start)
    base = repo_root if repo_root is not None else start.resolve()
    return base / DATA_DIR_NAME


def ensure_layout(data_root: Path) -> None:
    data_root.mkdir(parents=True, exist_ok=True)


def config_path(data_root: Path) -> Path:
    return data_root / "config.yaml"


def tasks_path(data_root: Path) -> Path:
    return data_root / TASKS_FILE_NAME


def default_config() -> dict[str, Any]:
    return {
        "settings": {
            "implicit_todo": DEFAULT_IMPLICIT_TODO,
            "default_snooze_minutes": DEFAULT_SNOOZE_MINUTES,
            "display_date_format": DEFAULT_DISPLAY_DATE_FORMAT,
            "clock_24h": DEFAULT_CLOCK_24H,
        }
    }


def write_default_config_if_missing(data_root: Path) -> bool:
    path = config_path(data_root)
    if path.exists():
        return False
    payload = yaml.safe_dump(default_config(), sort_keys=False, default_flow_style=False)
    path.write_text(payload, encoding="utf-8")
    return True


def read_config(data_root: Path, warn: Callable[[str], None] | None = None) -> dict[str, Any]:
    path = config_path(data_root)
    if not path.exists():
        return {}
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        if warn is not None:
            warn(f"Unable to parse config at {path}. Falling back to defaults.")
        return {}
    if not isinstance(payload, dict):
        if warn is not None:
            warn(f"Invalid config format at {path}. Falling back to defaults.")
        return {}
    return payload


def _setting(
    settings: dict[str, Any],
    key: str,
    expected: type,
    default: Any,
    path: Path,
    warn: Callable[[str], None] | None,
) -> Any:
    value = settings.get(key)
    if value is None:
        return default
    # bool is an int subclass; a boolean is never a valid number of minutes.
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        if warn is not None:
            warn(f"Invalid settings.{key} in {path}. Using default '{default}'.")
        return default
    return value


def resolve_settings(
    data_root: Path,
    warn: Callable[[str], None] | None = None,
) -> Settings:
    path = config_path(data_root)
    data = read_config(data_root, warn=warn)
    for key in data.keys():
        if key != "settings" and warn is not None:
            warn(f"Unsupported config key '{key}' in {path}. Ignoring.")

    settings = data.get("settings", {})
    if not isinstance(settings, dict):
        if warn is not None:
            warn(f"Invalid settings section in {path}. Using defaults.")
        return Settings()

    supported = set(default_config()["settings"])
    for key in settings.keys():
        if key not in supported and warn is not None:
            warn(f"Unsupported settings key '{key}' in {path}. Ignoring.")

    snooze_minutes = _setting(
        settings, "default_snooze_minutes", int, DEFAULT_SNOOZE_MINUTES, path, warn
    )
    if snooze_minutes <= 0:
        if warn is not None:
            warn(
                f"settings.default_snooze_minutes must be positive in {path}. "
                f"Using default '{DEFAULT_SNOOZE_MINUTES}'."
            )
        snooze_minutes = DEFAULT_SNOOZE_MINUTES

    return Settings(
        implicit_todo=_setting(settings, "implicit_todo", bool, DEFAULT_IMPLICIT_TODO, path, warn),
        default_snooze_minutes=snooze_minutes,
        display_date_format=_setting(
            settings, "display_date_format", str, DEFAULT_DISPLAY_DATE_FORMAT, path, warn
        ),
        clock_24h=_setting(settings, "clock_24h", bool, DEFAULT_CLOCK_24H, path, warn),
    )


class TaskStore:
    """Reads and writes the task file; one record per line."""

    def __init__(self, data_root: Path) -> None:
        self.data_root = data_root

    @property
    def path(self) -> Path:
        return tasks_path(self.data_root)

    def load(self) -> list[str] | None:
        if not self.path.exists():
            return None
        text = self.path.read_text(encoding="utf-8")
        return [line for line in text.splitlines() if line.strip()]

    def save(self, records: Iterable[str]) -> None:
        self.data_root.mkdir(parents=True, exist_ok=True)
        lines = list(records)
        payload = "\n".join(lines) + "\n" if lines else ""
        self.path.write_text(payload, encoding="utf-8")

    def quarantine(self) -> Path | None:
        """Keep a copy of an unreadable task file before it gets overwritten."""
        if not self.path.exists():
            return None
        target = self.path.with_name(self.path.name + CORRUPT_SUFFIX)
        target.write_bytes(self.path.read_bytes())
        return target
