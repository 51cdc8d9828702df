from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner
import yaml

from tick_tasks.cli import app


runner = CliRunner()


def _read_tasks(root: Path) -> list[str]:
    return (root / "tasks.txt").read_text(encoding="utf-8").splitlines()


def test_init_creates_default_config(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    r1 = runner.invoke(app, ["init", "--data-root", str(root)])
    assert r1.exit_code == 0
    assert "Created config" in r1.output
    r2 = runner.invoke(app, ["init", "--data-root", str(root)])
    assert r2.exit_code == 0
    assert "Using existing config" in r2.output
    cfg = yaml.safe_load((root / "config.yaml").read_text(encoding="utf-8"))
    assert cfg["settings"]["default_snooze_minutes"] == 30


def test_run_executes_lines_in_order(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    result = runner.invoke(
        app,
        ["run", "todo buy milk", "deadline submit report /by 1/10/2024 1700", "list", "--data-root", str(root)],
    )
    assert result.exit_code == 0
    assert "1.[T][ ] buy milk" in result.output
    assert "2.[D][ ] submit report (by: Oct 01 2024, 5.00 PM)" in result.output
    assert _read_tasks(root) == ["T | 0 | buy milk", "D | 0 | submit report | 1/10/2024 1700"]


def test_run_accepts_root_option_before_command(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    result = runner.invoke(app, ["--data-root", str(root), "run", "todo read"])
    assert result.exit_code == 0
    assert _read_tasks(root) == ["T | 0 | read"]


def test_run_reports_errors_with_exit_code(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    result = runner.invoke(app, ["run", "mark 1", "--data-root", str(root)])
    assert result.exit_code == 1
    assert "Error: There are no tasks in your list yet." in result.output


def test_state_persists_between_invocations(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    runner.invoke(app, ["run", "deadline submit report /by 1/10/2024 1700", "--data-root", str(root)])
    snoozed = runner.invoke(app, ["run", "snooze 1 /by 2 days", "--data-root", str(root)])
    assert snoozed.exit_code == 0
    assert _read_tasks(root) == ["D | 0 | submit report | 3/10/2024 1700"]


def test_shell_reads_until_bye(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    result = runner.invoke(
        app,
        ["--data-root", str(root)],
        input="todo buy milk\n\nlist\nbye\ntodo never added\n",
    )
    assert result.exit_code == 0
    assert "Hello!" in result.output
    assert "1.[T][ ] buy milk" in result.output
    assert "Bye." in result.output
    assert _read_tasks(root) == ["T | 0 | buy milk"]


def test_shell_stops_at_end_of_input(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    result = runner.invoke(app, ["--data-root", str(root)], input="todo a\nlist\n")
    assert result.exit_code == 0
    assert "1.[T][ ] a" in result.output


def test_shell_keeps_going_after_errors(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    result = runner.invoke(
        app,
        ["--data-root", str(root)],
        input="delete 1\nevent x /from 1/10/2024 0900\ntodo ok\nbye\n",
    )
    assert result.exit_code == 0
    assert "Error: No more tasks to delete." in result.output
    assert "Error: You need to add BOTH" in result.output
    assert _read_tasks(root) == ["T | 0 | ok"]


def test_config_settings_apply_to_commands(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    root.mkdir()
    (root / "config.yaml").write_text("settings:\n  implicit_todo: true\n", encoding="utf-8")
    result = runner.invoke(app, ["run", "water the plants", "--data-root", str(root)])
    assert result.exit_code == 0
    assert _read_tasks(root) == ["T | 0 | water the plants"]


def test_invalid_config_warns(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    root.mkdir()
    (root / "config.yaml").write_text("settings:\n  clock_24h: sometimes\n", encoding="utf-8")
    result = runner.invoke(app, ["run", "help", "--data-root", str(root)])
    assert result.exit_code == 0
    assert "Warning: Invalid settings.clock_24h" in result.output


def test_discovers_data_root_from_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    root.mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    result = runner.invoke(app, ["run", "todo found it"])
    assert result.exit_code == 0
    assert "Using data root" in result.output
    assert _read_tasks(root) == ["T | 0 | found it"]
