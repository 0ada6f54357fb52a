# src/taskdesk/tasks/task_api.py

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import replace
from datetime import datetime

from ..core.state import AppState
from ..notifications.deadline_checker import check_deadlines
from .task_models import Task, TaskStatus
from .task_view import derive_view

logger = logging.getLogger(__name__)


def _upsert_local(state: AppState, task: Task) -> None:
    for i, existing in enumerate(state.tasks):
        if existing.id == task.id:
            state.tasks = [*state.tasks[:i], task, *state.tasks[i + 1 :]]
            return
    state.tasks = [*state.tasks, task]


def find_task(state: AppState, task_id: str) -> Task | None:
    return next((t for t in state.tasks if t.id == task_id), None)


async def load_data(state: AppState) -> None:
    """Replace in-memory tasks and notifications with the stored ones."""
    user = state.require_user()
    tasks, notifications = await asyncio.gather(
        state.storage.get_tasks(user.id),
        state.storage.get_notifications(user.id),
    )
    state.tasks = tasks
    state.notifications = notifications
    logger.info("Loaded %d tasks, %d notifications for user=%s", len(tasks), len(notifications), user.id)


async def save_task(
    state: AppState,
    *,
    title: str,
    description: str | None,
    deadline: datetime,
    task_id: str | None = None,
) -> Task:
    """
    Create a task, or edit the one with task_id.

    Edits keep status, finished_at and created_at of the existing task.
    The in-memory list is updated before the storage write.
    """
    user = state.require_user()
    now = state.clock()
    existing = find_task(state, task_id) if task_id else None

    task = Task(
        id=task_id or str(uuid.uuid4()),
        user_id=user.id,
        title=title,
        description=description,
        deadline=deadline,
        status=existing.status if existing else TaskStatus.PENDING,
        finished_at=existing.finished_at if existing else None,
        created_at=existing.created_at if existing else now,
    )

    _upsert_local(state, task)
    await state.storage.save_task(task)
    await check_deadlines(state)
    return task


async def toggle_status(state: AppState, task_id: str) -> Task | None:
    state.require_user()
    task = find_task(state, task_id)
    if task is None:
        return None

    if task.status == TaskStatus.PENDING:
        updated = replace(task, status=TaskStatus.DONE, finished_at=state.clock())
    else:
        updated = replace(task, status=TaskStatus.PENDING, finished_at=None)

    _upsert_local(state, updated)
    await state.storage.save_task(updated)
    await check_deadlines(state)
    return updated


async def delete_task(state: AppState, task_id: str) -> None:
    state.require_user()
    state.tasks = [t for t in state.tasks if t.id != task_id]
    await state.storage.delete_task(task_id)


async def delete_all_tasks(state: AppState) -> None:
    user = state.require_user()
    state.tasks = []
    try:
        await state.storage.delete_all_tasks(user.id)
    except Exception:
        logger.exception("delete_all_tasks failed user=%s; reloading", user.id)
        await load_data(state)


def visible_tasks(state: AppState) -> list[Task]:
    return derive_view(state.tasks, state.search_query, state.status_filter, state.sort_by)
