# src/taskdesk/storage/storage_service.py

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any
from urllib.parse import quote

from ..auth.auth_models import (
    FEDERATED_USERS,
    AuthError,
    AuthFailure,
    AuthResult,
    AuthSuccess,
    Provider,
    User,
)
from ..core.ports import KeyValueStore
from ..notifications.notification_models import Notification
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

# Stable storage keys: renaming any of these orphans existing data.
TASKS_STORAGE_KEY = "tm_tasks_db_v1"
USERS_STORAGE_KEY = "tm_users_db_v1"
NOTIFICATIONS_STORAGE_KEY = "tm_notifications_db_v1"

# Simulated round-trip per operation, in seconds (scaled by latency_scale).
_LATENCY = {
    "get_tasks": 0.2,
    "save_task": 0.15,
    "delete_task": 0.1,
    "delete_all_tasks": 0.3,
    "register": 0.6,
    "login": 0.6,
}


class StorageService:
    """
    Backend simulation over a key-value store.

    Each collection (tasks, notifications, credential records) is one JSON array
    under its own key. Every operation reads the whole array, mutates it in memory
    and writes it back.

    Failure policy:
    - unreadable / non-JSON / non-array payloads read as an empty collection
    - malformed records inside an array are skipped on read but kept on write
    - write failures are logged and swallowed (no retry, no rollback)

    Concurrency:
    - safe within one event loop (no await between read and write)
    - NOT safe for several processes sharing the same store
    """

    def __init__(self, kv: KeyValueStore, *, latency_scale: float = 1.0) -> None:
        self._kv = kv
        self._latency_scale = max(0.0, float(latency_scale))

    # ---- low-level helpers ----

    async def _delay(self, op: str) -> None:
        seconds = _LATENCY.get(op, 0.0) * self._latency_scale
        if seconds > 0:
            await asyncio.sleep(seconds)

    def _read_collection(self, key: str) -> list[Any]:
        try:
            raw = self._kv.get_item(key)
        except Exception:
            logger.warning("Storage read failed key=%s; treating as empty.", key, exc_info=True)
            return []
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Storage data corrupted key=%s; treating as empty.", key)
            return []
        if not isinstance(parsed, list):
            logger.warning("Storage data is not an array key=%s; treating as empty.", key)
            return []
        return parsed

    def _write_collection(self, key: str, items: list[Any]) -> bool:
        try:
            self._kv.set_item(key, json.dumps(items, ensure_ascii=False))
            return True
        except Exception:
            logger.exception("Storage write failed key=%s items=%d", key, len(items))
            return False

    @staticmethod
    def _field(rec: Any, name: str) -> Any:
        return rec.get(name) if isinstance(rec, dict) else None

    @staticmethod
    def _parse_tasks(records: list[Any]) -> list[Task]:
        out: list[Task] = []
        for rec in records:
            try:
                out.append(Task.from_record(rec))
            except (KeyError, ValueError, TypeError, AttributeError):
                logger.warning("Skipping malformed task record: %r", rec)
        return out

    @staticmethod
    def _parse_notifications(records: list[Any]) -> list[Notification]:
        out: list[Notification] = []
        for rec in records:
            try:
                out.append(Notification.from_record(rec))
            except (KeyError, ValueError, TypeError, AttributeError):
                logger.warning("Skipping malformed notification record: %r", rec)
        return out

    # ---- tasks ----

    async def get_tasks(self, user_id: str) -> list[Task]:
        await self._delay("get_tasks")
        records = self._read_collection(TASKS_STORAGE_KEY)
        return self._parse_tasks([r for r in records if self._field(r, "userId") == user_id])

    async def save_task(self, task: Task) -> Task:
        """Upsert by id. No validation: the caller is trusted."""
        await self._delay("save_task")
        records = self._read_collection(TASKS_STORAGE_KEY)
        rec = task.to_record()

        for i, existing in enumerate(records):
            if self._field(existing, "id") == task.id:
                records[i] = rec
                break
        else:
            records.append(rec)

        if self._write_collection(TASKS_STORAGE_KEY, records):
            logger.debug("Task saved id=%s user=%s status=%s", task.id, task.user_id, task.status.value)
        return task

    async def delete_task(self, task_id: str) -> None:
        await self._delay("delete_task")
        records = self._read_collection(TASKS_STORAGE_KEY)
        kept = [r for r in records if self._field(r, "id") != task_id]
        if len(kept) == len(records):
            return
        if self._write_collection(TASKS_STORAGE_KEY, kept):
            logger.debug("Task deleted id=%s", task_id)

    async def delete_all_tasks(self, user_id: str) -> None:
        await self._delay("delete_all_tasks")
        records = self._read_collection(TASKS_STORAGE_KEY)
        kept = [r for r in records if self._field(r, "userId") != user_id]
        if self._write_collection(TASKS_STORAGE_KEY, kept):
            logger.info("Deleted %d tasks for user=%s", len(records) - len(kept), user_id)

    # ---- notifications ----

    async def get_notifications(self, user_id: str) -> list[Notification]:
        """Owner's notifications, most recent first."""
        records = self._read_collection(NOTIFICATIONS_STORAGE_KEY)
        items = self._parse_notifications(
            [r for r in records if self._field(r, "userId") == user_id]
        )
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items

    async def add_notification(self, notification: Notification) -> None:
        """Insert unless one already exists for the same (user, task, kind)."""
        records = self._read_collection(NOTIFICATIONS_STORAGE_KEY)
        key = notification.dedupe_key()
        for r in records:
            if (self._field(r, "userId"), self._field(r, "taskId"), self._field(r, "type")) == key:
                logger.debug(
                    "Notification exists user=%s task=%s kind=%s; skipping",
                    notification.user_id,
                    notification.task_id,
                    notification.kind.value,
                )
                return

        records.append(notification.to_record())
        self._write_collection(NOTIFICATIONS_STORAGE_KEY, records)

    async def mark_notification_read(self, notification_id: str) -> None:
        records = self._read_collection(NOTIFICATIONS_STORAGE_KEY)
        for r in records:
            if self._field(r, "id") == notification_id:
                r["isRead"] = True
                self._write_collection(NOTIFICATIONS_STORAGE_KEY, records)
                return

    async def mark_all_notifications_read(self, user_id: str) -> None:
        records = self._read_collection(NOTIFICATIONS_STORAGE_KEY)
        if not records:
            return
        for r in records:
            if self._field(r, "userId") == user_id:
                r["isRead"] = True
        self._write_collection(NOTIFICATIONS_STORAGE_KEY, records)

    # ---- auth ----

    async def register(self, username: str, password: str) -> AuthResult:
        """
        Create a credential record.

        The secret is stored in plain text: this is a simulation and must not be
        reused where real accounts are involved.
        """
        await self._delay("register")
        users = self._read_collection(USERS_STORAGE_KEY)

        if any(self._field(u, "username") == username for u in users):
            return AuthFailure(AuthError.USERNAME_TAKEN, f"Username {username!r} is already taken.")

        user = User(
            id=f"user_cred_{uuid.uuid4().hex}",
            name=username,
            email=f"{username}@example.com",
            avatar=(
                f"https://ui-avatars.com/api/?name={quote(username)}"
                "&color=fff&background=6366f1"
            ),
            provider=Provider.CREDENTIALS,
        )
        record = user.to_record()
        record["username"] = username
        record["password"] = password
        users.append(record)

        self._write_collection(USERS_STORAGE_KEY, users)
        logger.info("Registered user id=%s username=%s", user.id, username)
        return AuthSuccess(user)

    async def login(
            self,
            provider: Provider | str,
            username: str | None = None,
            password: str | None = None,
    ) -> AuthResult:
        await self._delay("login")

        try:
            prov = Provider(provider)
        except ValueError:
            return AuthFailure(AuthError.UNKNOWN_PROVIDER, f"Unknown login provider: {provider}")

        if prov in FEDERATED_USERS:
            # Simulation stub: no external identity provider is contacted.
            user = FEDERATED_USERS[prov]
            logger.info("Federated login provider=%s user=%s", prov.value, user.id)
            return AuthSuccess(user)

        if username is not None and password is not None:
            for rec in self._read_collection(USERS_STORAGE_KEY):
                if self._field(rec, "username") == username and self._field(rec, "password") == password:
                    try:
                        user = User.from_record({**rec, "provider": Provider.CREDENTIALS.value})
                    except (KeyError, ValueError):
                        logger.warning("Malformed credential record for username=%s", username)
                        break
                    logger.info("Credentials login user=%s", user.id)
                    return AuthSuccess(user)

        return AuthFailure(AuthError.INVALID_CREDENTIALS, "Invalid username or password.")
