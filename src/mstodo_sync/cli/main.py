# src/mstodo_sync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either runs a single command
given on the command line (`mstodo show`, `mstodo done 3`) or starts the
interactive console.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from ..cli.bootstrap import close_state, create_initial_state
from ..config import get_settings
from ..logging_setup import setup_logging
from .console import run_command, run_console_loop

logger = logging.getLogger(__name__)


async def _run(argv: list[str]) -> int:
    settings = get_settings()
    state = create_initial_state(settings=settings)
    try:
        if argv:
            print(await run_command(state, " ".join(argv)))
        else:
            await run_console_loop(state)
    finally:
        await close_state(state)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    # one-shot commands print their own output; keep the console quieter
    if argv:
        console_level = max(console_level, logging.WARNING)

    setup_logging(
        log_dir=settings.data_dir,
        console_level=console_level,
        log_to_file=settings.log_to_file,
    )

    logger.debug("Starting %s...", settings.app_name)

    try:
        return asyncio.run(_run(argv))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
