"""CLI entrypoint for tick-tasks."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Annotated

import typer

from . import render, storage
from .errors import TaskError
from .service import Response, TaskService

GREETING = "Hello! What can I do for you? Type 'help' to see the commands."

DataRootOption = Annotated[
    Path | None,
    typer.Option("--data-root", help="Explicit .tick-tasks path"),
]

app = typer.Typer(help="Personal task tracker driven by short text commands")


def _can_render_rich_list_output() -> bool:
    return sys.stdout.isatty()


def _print_rich(renderable) -> None:
    from rich.console import Console

    Console().print(renderable)


def _warn(message: str) -> None:
    typer.echo(f"Warning: {message}", err=True)


def _echo_root_notice(root: Path, multiple_found: bool) -> None:
    typer.echo(f"Using data root: {root}", err=True)
    if multiple_found:
        typer.echo("Warning: multiple .tick-tasks roots found; using nearest ancestor.", err=True)


def _resolve_root(data_root: Path | None) -> Path:
    if data_root is not None:
        return data_root.resolve()

    root, multiple = storage.choose_data_root(Path.cwd())
    if root is not None:
        _echo_root_notice(root, multiple)
        return root

    default_root = storage.default_init_root(Path.cwd())
    typer.echo(f"No .tick-tasks found. Using: {default_root}", err=True)
    return default_root


def _service(data_root: Path | None) -> TaskService:
    root = _resolve_root(data_root)
    settings = storage.resolve_settings(root, warn=_warn)
    return TaskService(storage.TaskStore(root), settings, warn=_warn)


def _echo_response(response: Response) -> None:
    if not response.ok:
        typer.echo(f"Error: {response.message}", err=True)
        return
    if response.tasks is not None and len(response.tasks) and _can_render_rich_list_output():
        _print_rich(render.render_task_list_rich(response.tasks))
    else:
        typer.echo(response.message)


def _run_and_handle(fn) -> None:
    try:
        fn()
    except TaskError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _read_line() -> str | None:
    try:
        return typer.prompt("", prompt_suffix="> ", default="", show_default=False)
    except (typer.Abort, EOFError, KeyboardInterrupt):
        return None


@app.callback(invoke_without_command=True)
def root_callback(
    ctx: typer.Context,
    data_root: DataRootOption = None,
) -> None:
    """Start an interactive session when no command is provided."""
    if ctx.invoked_subcommand is not None:
        ctx.obj = data_root
        return

    svc = _service(data_root)
    typer.echo(GREETING)
    while True:
        line = _read_line()
        if line is None:
            break
        if not line.strip():
            continue
        response = svc.execute(line)
        _echo_response(response)
        if response.exit:
            break


@app.command("init")
def init_cmd(ctx: typer.Context, data_root: DataRootOption = None) -> None:
    """Create the data directory and a default config.yaml."""

    def _inner() -> None:
        root = _resolve_root(data_root or ctx.obj)
        storage.ensure_layout(root)
        typer.echo(f"Initialized data root: {root}")
        if storage.write_default_config_if_missing(root):
            typer.echo(f"Created config: {storage.config_path(root)}")
        else:
            typer.echo(f"Using existing config: {storage.config_path(root)}")

    _run_and_handle(_inner)


@app.command("run")
def run_cmd(
    ctx: typer.Context,
    lines: Annotated[list[str], typer.Argument(help="Command lines to execute in order")],
    data_root: DataRootOption = None,
) -> None:
    """Execute one or more command lines and print each response."""
    svc = _service(data_root or ctx.obj)
    failed = False
    for line in lines:
        response = svc.execute(line)
        _echo_response(response)
        failed = failed or not response.ok
        if response.exit:
            break
    if failed:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
