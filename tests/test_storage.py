from __future__ import annotations

from pathlib import Path

import yaml

from tick_tasks import storage


def _write_config(data_root: Path, content: str) -> None:
    data_root.mkdir(parents=True, exist_ok=True)
    (data_root / "config.yaml").write_text(content, encoding="utf-8")


def test_resolve_settings_uses_defaults_when_missing(tmp_path: Path) -> None:
    warnings: list[str] = []
    settings = storage.resolve_settings(tmp_path / ".tick-tasks", warn=warnings.append)
    assert settings == storage.Settings()
    assert settings.default_snooze_minutes == 30
    assert settings.implicit_todo is False
    assert warnings == []


def test_resolve_settings_reads_valid_values(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    _write_config(
        root,
        (
            "settings:\n"
            "  implicit_todo: true\n"
            "  default_snooze_minutes: 45\n"
            "  display_date_format: '%d %b %Y'\n"
            "  clock_24h: true\n"
        ),
    )

    warnings: list[str] = []
    settings = storage.resolve_settings(root, warn=warnings.append)
    assert settings == storage.Settings(
        implicit_todo=True,
        default_snooze_minutes=45,
        display_date_format="%d %b %Y",
        clock_24h=True,
    )
    assert settings.formats.clock_24h is True
    assert warnings == []


def test_resolve_settings_invalid_values_warn_and_fallback(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    _write_config(
        root,
        (
            "extra: 1\n"
            "settings:\n"
            "  implicit_todo: maybe\n"
            "  default_snooze_minutes: true\n"
            "  colour: blue\n"
        ),
    )

    warnings: list[str] = []
    settings = storage.resolve_settings(root, warn=warnings.append)
    assert settings == storage.Settings()
    assert any("Unsupported config key 'extra'" in message for message in warnings)
    assert any("Unsupported settings key 'colour'" in message for message in warnings)
    assert any("Invalid settings.implicit_todo" in message for message in warnings)
    assert any("Invalid settings.default_snooze_minutes" in message for message in warnings)


def test_resolve_settings_rejects_non_positive_snooze(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    _write_config(root, "settings:\n  default_snooze_minutes: 0\n")
    warnings: list[str] = []
    settings = storage.resolve_settings(root, warn=warnings.append)
    assert settings.default_snooze_minutes == 30
    assert any("must be positive" in message for message in warnings)


def test_resolve_settings_unparsable_config_warns(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    _write_config(root, "settings: [unclosed\n")
    warnings: list[str] = []
    assert storage.resolve_settings(root, warn=warnings.append) == storage.Settings()
    assert any("Unable to parse config" in message for message in warnings)


def test_resolve_settings_non_mapping_config_warns(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    _write_config(root, "- just\n- a list\n")
    warnings: list[str] = []
    assert storage.resolve_settings(root, warn=warnings.append) == storage.Settings()
    assert any("Invalid config format" in message for message in warnings)


def test_write_default_config_if_missing_is_idempotent(tmp_path: Path) -> None:
    root = tmp_path / ".tick-tasks"
    storage.ensure_layout(root)
    assert storage.write_default_config_if_missing(root) is True
    assert storage.write_default_config_if_missing(root) is False
    payload = yaml.safe_load((root / "config.yaml").read_text(encoding="utf-8"))
    assert payload == storage.default_config()


def test_task_store_load_missing_file_returns_none(tmp_path: Path) -> None:
    store = storage.TaskStore(tmp_path / ".tick-tasks")
    assert store.load() is None


def test_task_store_save_then_load(tmp_path: Path) -> None:
    store = storage.TaskStore(tmp_path / ".tick-tasks")
    records = ["T | 0 | buy milk", "D | 1 | submit report | 1/10/2024 1700"]
    store.save(records)
    assert store.path.read_text(encoding="utf-8") == "\n".join(records) + "\n"
    assert store.load() == records

    store.save([])
    assert store.path.read_text(encoding="utf-8") == ""
    assert store.load() == []


def test_task_store_quarantine_copies_file(tmp_path: Path) -> None:
    store = storage.TaskStore(tmp_path / ".tick-tasks")
    assert store.quarantine() is None
    store.save(["garbage"])
    backup = store.quarantine()
    assert backup == store.path.with_name("tasks.txt.corrupt")
    assert backup.read_text(encoding="utf-8") == "garbage\n"
    assert store.path.exists()


def test_choose_data_root_prefers_nearest(tmp_path: Path) -> None:
    outer = tmp_path / ".tick-tasks"
    inner_project = tmp_path / "project"
    inner = inner_project / ".tick-tasks"
    nested = inner_project / "src" / "pkg"
    outer.mkdir()
    inner.mkdir(parents=True)
    nested.mkdir(parents=True)

    root, multiple = storage.choose_data_root(nested)
    assert root == inner.resolve()
    assert multiple is True


def test_default_init_root_uses_repo_root(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    nested = repo / "docs"
    nested.mkdir()
    assert storage.default_init_root(nested) == repo.resolve() / ".tick-tasks"
    assert storage.default_init_root(tmp_path) == tmp_path.resolve() / ".tick-tasks"
