# src/taskdesk/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, restores the session and theme, then runs:
- the deadline watcher as a background task,
- the console REPL (optional) until the user exits.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..auth.session import load_theme, restore_session
from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..notifications.deadline_watcher import run_deadline_watcher

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    load_theme(state)

    try:
        await restore_session(state)
    except Exception:
        logger.exception("Failed to restore session.")

    watcher = asyncio.create_task(
        run_deadline_watcher(state, interval_seconds=settings.deadline_check_interval_seconds)
    )

    try:
        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Running the deadline watcher only. Press Ctrl+C to stop.")
            await watcher
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_file = setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s... (log file: %s)", settings.app_name, log_file)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
