# src/task_organizer/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "task_organizer.log"
APP_LOGGER_PREFIX = "task_organizer."


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console output shares the terminal with the REPL prompt, so only the
    organizer's own records pass at the handler level; anything else
    (captured warnings included) needs ERROR+ to be shown there.
    The log file is unfiltered.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(APP_LOGGER_PREFIX):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/task_organizer",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all records to stderr (filtered, `console_level`) and to
    `<log_dir>/task_organizer.log` (`file_level`).

    Replaces any handlers already on the root logger; main() calls it once
    before building the registry. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    log_file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    log_file_handler.setLevel(file_level)
    log_file_handler.setFormatter(fmt)
    root.addHandler(log_file_handler)

    # warnings.warn(...) arrives as 'py.warnings' records.
    logging.captureWarnings(True)
    return log_file
