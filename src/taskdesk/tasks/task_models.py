# src/taskdesk/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.clock import format_ts, parse_ts


class TaskStatus(StrEnum):
    PENDING = "pending"
    DONE = "done"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class FilterOption(StrEnum):
    ALL = "all"
    PENDING = "pending"
    DONE = "done"


class SortOption(StrEnum):
    DEADLINE_ASC = "deadline-asc"
    DEADLINE_DESC = "deadline-desc"
    CREATED_ASC = "created-asc"
    CREATED_DESC = "created-desc"


@dataclass(slots=True)
class Task:
    id: str
    user_id: str
    title: str
    deadline: datetime
    created_at: datetime
    status: TaskStatus = TaskStatus.PENDING
    description: str | None = None
    finished_at: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    def to_record(self) -> dict[str, Any]:
        """Serialize using the stored (camelCase) field names."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "text": self.title,
            "description": self.description,
            "deadline": format_ts(self.deadline),
            "status": self.status.value,
            "finishedTime": format_ts(self.finished_at) if self.finished_at else None,
            "createdAt": format_ts(self.created_at),
        }

    @classmethod
    def from_record(cls, rec: dict[str, Any]) -> Task:
        """
        Build a Task from a stored record.

        Raises KeyError/ValueError/TypeError on records missing required fields or
        carrying unparseable timestamps; callers decide whether to skip them.
        """
        finished = rec.get("finishedTime")
        description = rec.get("description")
        return cls(
            id=str(rec["id"]),
            user_id=str(rec["userId"]),
            title=str(rec.get("text") or ""),
            description=str(description) if description is not None else None,
            deadline=parse_ts(rec["deadline"]),
            status=TaskStatus.from_db(rec.get("status")),
            finished_at=parse_ts(finished) if finished else None,
            created_at=parse_ts(rec["createdAt"]),
        )
