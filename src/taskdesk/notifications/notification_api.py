# src/taskdesk/notifications/notification_api.py

from __future__ import annotations

import logging
from dataclasses import replace

from ..core.state import AppState

logger = logging.getLogger(__name__)


async def mark_read(state: AppState, notification_id: str) -> None:
    state.require_user()
    await state.storage.mark_notification_read(notification_id)
    state.notifications = [
        replace(n, is_read=True) if n.id == notification_id else n for n in state.notifications
    ]


async def mark_all_read(state: AppState) -> None:
    user = state.require_user()
    await state.storage.mark_all_notifications_read(user.id)
    state.notifications = [replace(n, is_read=True) for n in state.notifications]
    logger.debug("All notifications marked read user=%s", user.id)


def unread_count(state: AppState) -> int:
    return sum(1 for n in state.notifications if not n.is_read)
