# src/taskdesk/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the controller.

The controller depends on Protocols instead of concrete implementations.
This keeps the key-value backend, the storage façade and the mail transport
swappable and makes testing easier.
"""

from typing import Protocol

from ..auth.auth_models import AuthResult, Provider
from ..notifications.notification_models import Notification
from ..tasks.task_models import Task


class KeyValueStore(Protocol):
    """String-to-string store with browser-storage semantics (missing key -> None)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class EmailSender(Protocol):
    """Outbound mail. Implementations may only record the intent."""

    def send(self, *, to: str, subject: str, body: str) -> None: ...


class StorageRepo(Protocol):
    # Tasks
    async def get_tasks(self, user_id: str) -> list[Task]: ...
    async def save_task(self, task: Task) -> Task: ...
    async def delete_task(self, task_id: str) -> None: ...
    async def delete_all_tasks(self, user_id: str) -> None: ...

    # Notifications
    async def get_notifications(self, user_id: str) -> list[Notification]: ...
    async def add_notification(self, notification: Notification) -> None: ...
    async def mark_notification_read(self, notification_id: str) -> None: ...
    async def mark_all_notifications_read(self, user_id: str) -> None: ...

    # Auth
    async def register(self, username: str, password: str) -> AuthResult: ...
    async def login(
            self,
            provider: Provider | str,
            username: str | None = None,
            password: str | None = None,
    ) -> AuthResult: ...
