# src/taskdesk/notifications/notification_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.clock import format_ts, parse_ts


class NotificationKind(StrEnum):
    UPCOMING = "upcoming"
    OVERDUE = "overdue"


@dataclass(slots=True)
class Notification:
    id: str
    user_id: str
    task_id: str
    message: str
    kind: NotificationKind
    created_at: datetime
    is_read: bool = False
    email_sent: bool = False

    def dedupe_key(self) -> tuple[str, str, NotificationKind]:
        return (self.user_id, self.task_id, self.kind)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "taskId": self.task_id,
            "message": self.message,
            "type": self.kind.value,
            "isRead": self.is_read,
            "createdAt": format_ts(self.created_at),
            "emailSent": self.email_sent,
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> Notification:
        return cls(
            id=str(rec["id"]),
            user_id=str(rec["userId"]),
            task_id=str(rec["taskId"]),
            message=str(rec.get("message") or ""),
            kind=NotificationKind(rec["type"]),
            created_at=parse_ts(rec["createdAt"]),
            is_read=bool(rec.get("isRead", False)),
            email_sent=bool(rec.get("emailSent", False)),
        )
