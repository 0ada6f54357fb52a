# src/taskdesk/notifications/deadline_watcher.py

from __future__ import annotations

"""
Deadline watcher.

A small polling loop that re-runs the deadline evaluator while a user is logged
in, so a task crossing its deadline gets notified even when nothing edits the
task list. Evaluation is idempotent, so overlapping with the on-change checks
never produces duplicates.
"""

import asyncio
import logging

from ..core.state import AppState
from .deadline_checker import check_deadlines

logger = logging.getLogger(__name__)


async def run_deadline_watcher(
        state: AppState,
        *,
        interval_seconds: float = 60.0,
) -> None:
    """
    Every interval_seconds:
    - skip if nobody is logged in
    - run check_deadlines(state)

    To stop the watcher, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        if state.user is not None:
            try:
                created = await check_deadlines(state)
                if created:
                    logger.info("Deadline watcher created %d notification(s)", len(created))
            except Exception:
                logger.exception("check_deadlines failed")

        await asyncio.sleep(sleep_s)
