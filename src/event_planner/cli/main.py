# src/event_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort final flush (no exceptions should escape)."""
    persistence = getattr(state, "persistence", None)
    if persistence is None:
        return
    try:
        persistence.save(state.tasks.tasks)
    except Exception:
        logger.exception("Final task save failed.")


def main() -> None:
    settings = get_settings()

    console_level = level_from_name(settings.log_level)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (log file: %s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to run.")
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
