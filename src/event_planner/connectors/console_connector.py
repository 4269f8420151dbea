# src/event_planner/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState, *, prompt: str = ">>> ") -> None:
    logger.info("Console connector started.")
    event = state.events.active
    _print_ts(f"[CONSOLE] Planning: {event.name if event else '-'}. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(prompt).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list available commands."

        print(reply + "\n")

    logger.info("Console connector finished.")
