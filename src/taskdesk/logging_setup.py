# src/taskdesk/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskdesk.log"

# Loggers whose INFO chatter would interleave with the REPL prompt and replies.
# Their records still reach the file handler.
_QUIET_PREFIXES = (
    "taskdesk.storage.",
    "taskdesk.connectors.",
    "taskdesk.cli.",
    "taskdesk.tasks.task_api",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while someone is typing commands:
    - task/notification events and the [EMAIL MOCK] line are shown
    - storage reads/writes, REPL plumbing and task loads only at WARNING+
    - everything outside taskdesk (py.warnings included) only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if not name.startswith("taskdesk."):
            return record.levelno >= logging.ERROR

        if name.startswith(_QUIET_PREFIXES):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdesk",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console gets a short, filtered format; the file under log_dir gets everything.

    Call once from the entrypoint. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
