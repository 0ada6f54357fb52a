# src/taskdesk/notifications/deadline_checker.py

from __future__ import annotations

"""
Deadline notification evaluator.

Runs after every change to the task list:
- classifies each pending task as overdue / upcoming / nothing,
- creates at most one notification per (task, kind),
- records a (simulated) email for every new notification,
- reloads the notification list from storage when something was created.
"""

import logging
import uuid
from datetime import datetime, timedelta

from ..auth.auth_models import User
from ..core.state import AppState
from ..tasks.task_models import Task
from .notification_models import Notification, NotificationKind

logger = logging.getLogger(__name__)

DEFAULT_UPCOMING_WINDOW = timedelta(hours=24)


def upcoming_window(state: AppState) -> timedelta:
    hours = getattr(state.settings, "upcoming_window_hours", None)
    if not hours:
        return DEFAULT_UPCOMING_WINDOW
    return timedelta(hours=int(hours))


def classify_deadline(
    task: Task,
    now: datetime,
    window: timedelta = DEFAULT_UPCOMING_WINDOW,
) -> NotificationKind | None:
    if task.is_done:
        return None
    remaining = task.deadline - now
    if remaining < timedelta(0):
        return NotificationKind.OVERDUE
    if remaining < window:
        return NotificationKind.UPCOMING
    return None


def notification_message(
    task: Task,
    kind: NotificationKind,
    window: timedelta = DEFAULT_UPCOMING_WINDOW,
) -> str:
    if kind == NotificationKind.OVERDUE:
        return f'Task "{task.title}" is overdue!'
    hours = int(window.total_seconds() // 3600)
    return f'Task "{task.title}" is due soon (less than {hours}h left).'


def build_notification(
    user: User,
    task: Task,
    kind: NotificationKind,
    now: datetime,
    window: timedelta = DEFAULT_UPCOMING_WINDOW,
) -> Notification:
    return Notification(
        id=str(uuid.uuid4()),
        user_id=user.id,
        task_id=task.id,
        message=notification_message(task, kind, window),
        kind=kind,
        created_at=now,
        is_read=False,
        email_sent=True,
    )


async def check_deadlines(state: AppState, now: datetime | None = None) -> list[Notification]:
    """
    Evaluate the current user's tasks against their deadlines.

    Returns the notifications created by this run (empty when nothing changed).
    Safe to call repeatedly: a (task, kind) pair already present in
    state.notifications is never notified again.
    """
    user = state.user
    if user is None or not state.tasks:
        return []

    if now is None:
        now = state.clock()
    window = upcoming_window(state)

    known = {n.dedupe_key() for n in state.notifications}
    created: list[Notification] = []

    for task in list(state.tasks):
        kind = classify_deadline(task, now, window)
        if kind is None or (user.id, task.id, kind) in known:
            continue

        notification = build_notification(user, task, kind, now, window)
        await state.storage.add_notification(notification)

        try:
            state.email_sender.send(
                to=user.email,
                subject=f"[{kind.value}] {task.title}",
                body=notification.message,
            )
        except Exception:
            logger.exception("Email send failed user=%s task=%s", user.id, task.id)

        known.add(notification.dedupe_key())
        created.append(notification)
        logger.info("Notification created task=%s kind=%s", task.id, kind.value)

    if created:
        state.notifications = await state.storage.get_notifications(user.id)

    return created
