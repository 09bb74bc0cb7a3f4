# src/mstodo_sync/cli/console.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..core.state import AppState
from .commands import registry as command_registry
from .render import LOADING_TEXT

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


async def run_command(state: AppState, line: str) -> str:
    """Run one slash command (a leading '/' is optional) and return its reply."""
    line = line.strip()
    if not line.startswith("/"):
        line = "/" + line
    if line.split()[0].lower() in ("/show", "/ls"):
        _print_ts(LOADING_TEXT)
    reply = await command_registry.handle(state, line)
    return reply if reply is not None else ""


async def run_console_loop(state: AppState) -> None:
    logger.info("Console started.")
    _print_ts("[CONSOLE] Use /show to load tasks, /help for commands, /exit to quit.\n")

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
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
            reply = await run_command(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            print(reply)
            print()

    logger.info("Console finished.")
