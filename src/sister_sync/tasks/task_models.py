# src/sister_sync/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

ALL_ASSIGNEES = "All"

# Wire keys of a persisted / exported task (kept camelCase for compatibility
# with codes produced by the browser app).
WIRE_KEYS = ("id", "title", "description", "assignee", "priority", "isCompleted", "createdAt")


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, raw: Any) -> Priority | None:
        """Return the matching member, or None when raw names no priority."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except ValueError:
            return None


class SaveStatus(StrEnum):
    SAVED = "saved"
    SAVING = "saving"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single shared task.

    Only is_completed ever changes after creation (see TaskStore.toggle),
    which is done by building a new Task with dataclasses.replace.

    `extra` holds keys from imported/legacy records that this version does
    not know about, so exporting them again is lossless.
    """

    id: str
    title: str
    assignee: str
    priority: Priority
    is_completed: bool = False
    created_at: int = 0
    description: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out["id"] = self.id
        out["title"] = self.title
        if self.description is not None:
            out["description"] = self.description
        out["assignee"] = self.assignee
        out["isCompleted"] = self.is_completed
        out["priority"] = self.priority
        out["createdAt"] = self.created_at
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """Build a Task from an already-normalized wire record."""
        priority = data.get("priority")
        return cls(
            id=data["id"],
            title=data.get("title"),  # type: ignore[arg-type]
            assignee=data.get("assignee"),  # type: ignore[arg-type]
            priority=Priority.parse(priority) or priority,  # type: ignore[arg-type]
            is_completed=bool(data.get("isCompleted")),
            created_at=data.get("createdAt"),  # type: ignore[arg-type]
            description=data.get("description"),
            extra={k: v for k, v in data.items() if k not in WIRE_KEYS},
        )


@dataclass(frozen=True, slots=True)
class ParsedTask:
    """One task as understood by the smart-input parser."""

    title: str
    assignee: str
    priority: Priority
    description: str | None = None


@dataclass(frozen=True, slots=True)
class SmartTaskResponse:
    tasks: list[ParsedTask]


@dataclass(frozen=True, slots=True)
class DashboardStats:
    name: str
    completed: int
    pending: int
    total: int
