# src/event_planner/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

APP_LOGGER = "event_planner"
LOG_FILE_NAME = "event_planner.log"

# Loggers that fire on every mutation (persistence writes, store bookkeeping).
QUIET_LOGGERS = ("event_planner.storage.",)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable while commands print their own replies:
    - app logs pass, except the per-mutation chatter in `quiet` (WARNING+ only)
    - Python warnings and third-party loggers only at ERROR+
    """

    def __init__(self, quiet: Iterable[str] = QUIET_LOGGERS) -> None:
        super().__init__()
        self._quiet = tuple(quiet)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == APP_LOGGER or name.startswith(APP_LOGGER + "."):
            if name.startswith(self._quiet):
                return record.levelno >= logging.WARNING
            return True

        return record.levelno >= logging.ERROR


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """'debug' / 'WARNING' / '20' -> logging level; unknown names fall back to default."""
    raw = str(name or "").strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/event_planner",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console handler (stderr, filtered) plus a full-detail file handler.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output. Returns the log file path.
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

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # warnings.warn(...) -> 'py.warnings' logger (ERROR+ on console via the filter)
    logging.captureWarnings(True)
    return log_file
