"""Renderers for task list output."""

from __future__ import annotations

from typing import Iterable

from .models import Task

KIND_LABELS = {
    "todo": "todo",
    "deadline": "deadline",
    "event": "event",
}


def _kind_style(kind: str) -> str:
    return {
        "todo": "cyan",
        "deadline": "magenta",
        "event": "yellow",
    }.get(kind, "white")


def _when_label(task: Task) -> str:
    if task.kind == "deadline":
        return f"by {task.due.render()}"
    if task.kind == "event":
        return f"{task.start.render()} - {task.end.render()}"
    return ""


def render_task_list_plain(tasks: Iterable[Task]) -> str:
    lines = [f"{idx}.{task.render()}" for idx, task in enumerate(tasks, start=1)]
    if not lines:
        return "No tasks found."
    return "\n".join(lines)


def render_task_list_rich(tasks: Iterable[Task], title: str | None = None):
    from rich import box
    from rich.table import Table
    from rich.text import Text

    task_list = list(tasks)
    if not task_list:
        return "No tasks found."

    table = Table(
        title=title,
        box=box.SIMPLE_HEAVY,
        show_header=True,
        header_style="bold white",
        pad_edge=False,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("type")
    table.add_column("done", justify="center")
    table.add_column("description", style="bold")
    table.add_column("when", style="dim")

    for idx, task in enumerate(task_list, start=1):
        done_cell = Text("✓", style="green") if task.done else Text("·", style="bright_black")
        table.add_row(
            str(idx),
            Text(KIND_LABELS.get(task.kind, task.kind), style=_kind_style(task.kind)),
            done_cell,
            task.description,
            _when_label(task),
        )
    return table
