# src/taskdesk/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..auth.auth_models import User
from ..notifications.notification_models import Notification
from ..tasks.task_models import FilterOption, SortOption, Task
from .clock import Clock, utc_now
from .ports import EmailSender, KeyValueStore, StorageRepo


class NotLoggedInError(RuntimeError):
    """A task/notification operation was issued without an authenticated user."""


@dataclass
class AppState:
    """
    Everything the controller needs, passed explicitly to each operation.

    - storage: the façade (the only path to durable data)
    - session_kv: per-session slot holding the active user
    - prefs_kv: durable preference slot (theme)
    """

    settings: object

    storage: StorageRepo
    session_kv: KeyValueStore
    prefs_kv: KeyValueStore
    email_sender: EmailSender
    clock: Clock = utc_now

    user: User | None = None
    tasks: list[Task] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)

    search_query: str = ""
    status_filter: FilterOption = FilterOption.ALL
    sort_by: SortOption = SortOption.DEADLINE_ASC
    theme: str = "light"

    def require_user(self) -> User:
        if self.user is None:
            raise NotLoggedInError("no user is logged in")
        return self.user

    def clear_user_data(self) -> None:
        self.user = None
        self.tasks = []
        self.notifications = []
