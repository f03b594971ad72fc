# src/taskpad/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import add_from_text
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_codec import TaskDecodeError

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, line: str) -> str:
    """Route one line of input: slash commands, otherwise a new task title."""

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        reply = command_registry.handle(state, line, emit=emit)
        if reply is None:
            reply = add_from_text(state, line)
    except TaskDecodeError as e:
        logger.error("Stored tasks could not be decoded: %s", e)
        reply = "Stored tasks are corrupt and could not be loaded. Nothing was changed."
    except Exception:
        logger.exception("Command handler crashed.")
        reply = "Internal error while handling a command."
    return reply


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (key=%s).", state.task_store.key)
    _print_ts("Type a task title to add it. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input("> ").strip()
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

        _print_ts(handle_line(state, user_input))

    logger.info("Console finished.")
