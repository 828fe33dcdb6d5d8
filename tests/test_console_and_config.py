# tests/test_console_and_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from task_organizer.cli.bootstrap import create_initial_state
from task_organizer.config import Settings
from task_organizer.connectors.console_connector import run_console_loop
from task_organizer.logging_setup import _ConsoleNoiseFilter


def _scripted(lines: list[str]):
    it = iter(lines)

    def read_line(_prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read_line


def test_console_loop_runs_commands_until_exit(state) -> None:
    out: list[str] = []
    run_console_loop(
        state,
        read_line=_scripted(
            [
                "",
                "/add Work | Report | high | 2024-05-01",
                "hello",
                "/all",
                "/exit",
                "/add Work | Never | low | 2024-05-01",
            ]
        ),
        write=out.append,
    )
    assert [t.name for t in state.registry.list_all_tasks()] == ["Report"]
    assert any("Commands start with '/'" in line for line in out)
    assert any("All tasks:" in line for line in out)


def test_console_loop_survives_crashing_handler(state) -> None:
    from task_organizer.cli.commands import CommandRegistry

    reg = CommandRegistry()

    def boom(state, args):
        raise RuntimeError("boom")

    reg.register("boom", boom, "crash")
    out: list[str] = []
    run_console_loop(state, commands=reg, read_line=_scripted(["/boom"]), write=out.append)
    assert "Internal error while handling a command." in out


def test_bootstrap_loads_existing_data_once(settings) -> None:
    first = create_initial_state(settings=settings)
    first.registry.add_section("Work")

    second = create_initial_state(settings=settings)
    assert second.registry.list_section_names() == ["Work"]
    assert second.store.db_path == settings.db_path


def test_console_filter_passes_app_records_and_only_foreign_errors() -> None:
    flt = _ConsoleNoiseFilter()

    def rec(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert flt.filter(rec("task_organizer.tasks.task_store", logging.DEBUG))
    assert not flt.filter(rec("py.warnings", logging.WARNING))
    assert not flt.filter(rec("urllib3", logging.INFO))
    assert flt.filter(rec("urllib3", logging.ERROR))


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKORG_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKORG_DB_PATH", raising=False)
    monkeypatch.setenv("TASKORG_CONSOLE_ENABLED", "no")
    monkeypatch.setenv("TASKORG_DB_TIMEOUT_SECONDS", "oops")

    s = Settings.from_env()
    assert s.data_dir == tmp_path
    assert s.db_path == tmp_path / "tasks.sqlite3"
    assert s.console_enabled is False
    assert s.db_timeout_seconds == 30.0


def test_settings_explicit_db_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKORG_DB_PATH", str(tmp_path / "other.db"))
    assert Settings.from_env().db_path == tmp_path / "other.db"
