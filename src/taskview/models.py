"""Data models for taskview."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from taskview.settings import Settings


class SortOrder(Enum):
    """Direction of a single sort criterion."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> SortOrder:
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() == "desc":
            return cls.DESC
        return cls.ASC


class GroupByDimension(Enum):
    """Available grouping dimensions for tasks."""

    NONE = "none"
    FILE_PATH = "filePath"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    PROJECT = "project"
    TAGS = "tags"
    STATUS = "status"

    @classmethod
    def parse(cls, value: Any) -> GroupByDimension:
        """Resolve a dimension name, falling back to NONE for unknown input."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.NONE


def to_local_date(timestamp_ms: int | float) -> date:
    """Local calendar date of an epoch-millisecond timestamp.

    Timestamps outside the range ``datetime`` can represent clamp to
    ``date.max`` (future) or ``date.min`` (past).
    """
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000).date()
    except (OverflowError, OSError, ValueError):
        return date.max if timestamp_ms > 0 else date.min


def locale_key(value: str) -> tuple[str, str]:
    """Sort key approximating a locale string compare.

    Case-insensitive first, lowercase before uppercase on ties.
    """
    return (value.casefold(), value.swapcase())


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _timestamp(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None


@dataclass(frozen=True)
class TaskMetadata:
    """Structured fields attached to a task line."""

    due_date: int | None = None
    start_date: int | None = None
    scheduled_date: int | None = None
    completed_date: int | None = None
    project: str | None = None
    context: str | None = None
    tags: list[str] = field(default_factory=list)
    priority: int | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> TaskMetadata:
        if not isinstance(data, dict):
            return cls()
        tags = data.get("tags")
        priority = data.get("priority")
        project = data.get("project")
        context = data.get("context")
        return cls(
            due_date=_timestamp(_pick(data, "due_date", "dueDate")),
            start_date=_timestamp(_pick(data, "start_date", "startDate")),
            scheduled_date=_timestamp(_pick(data, "scheduled_date", "scheduledDate")),
            completed_date=_timestamp(_pick(data, "completed_date", "completedDate")),
            project=project if isinstance(project, str) and project else None,
            context=context if isinstance(context, str) and context else None,
            tags=[t for t in tags if isinstance(t, str)] if isinstance(tags, list) else [],
            priority=priority if isinstance(priority, int) and not isinstance(priority, bool) else None,
        )

    def to_dict(self) -> dict:
        return {
            "dueDate": self.due_date,
            "startDate": self.start_date,
            "scheduledDate": self.scheduled_date,
            "completedDate": self.completed_date,
            "project": self.project,
            "context": self.context,
            "tags": list(self.tags),
            "priority": self.priority,
        }


@dataclass(frozen=True)
class Task:
    """Immutable task record: one markdown checkbox item."""

    id: str
    status: str
    completed: bool
    content: str
    file_path: str = ""
    metadata: TaskMetadata = field(default_factory=TaskMetadata)

    @classmethod
    def from_dict(cls, data: dict, settings: Settings | None = None) -> Task:
        """Build a task from a JSON object.

        When ``completed`` is missing it is derived from the status mark so
        the record stays consistent with the configured status groups.
        """
        from taskview.statuses import is_completed_mark

        status = data.get("status")
        status = status if isinstance(status, str) else ""
        completed = data.get("completed")
        if not isinstance(completed, bool):
            completed = is_completed_mark(status, settings)
        content = data.get("content")
        return cls(
            id=str(data["id"]),
            status=status,
            completed=completed,
            content=content if isinstance(content, str) else "",
            file_path=str(_pick(data, "file_path", "filePath", default="")),
            metadata=TaskMetadata.from_dict(data.get("metadata")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status,
            "completed": self.completed,
            "content": self.content,
            "filePath": self.file_path,
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class TaskGroup:
    """A bucket of tasks produced by the grouping engine.

    ``is_expanded`` is only a default; the display layer owns it.
    When ``children`` is set, ``tasks`` is the union of the children's tasks.
    """

    title: str
    key: str
    sort_order: int
    tasks: list[Task]
    is_expanded: bool = True
    children: list[TaskGroup] | None = None
    level: int = 0
    parent_key: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "title": self.title,
            "key": self.key,
            "sortOrder": self.sort_order,
            "tasks": [t.id for t in self.tasks],
            "isExpanded": self.is_expanded,
            "level": self.level,
        }
        if self.parent_key is not None:
            d["parentKey"] = self.parent_key
        if self.children is not None:
            d["children"] = [c.to_dict() for c in self.children]
        return d


@dataclass(frozen=True)
class SortCriterion:
    """One entry of an ordered list of sort keys."""

    field: str
    order: SortOrder = SortOrder.ASC

    @classmethod
    def parse(cls, value: str) -> SortCriterion:
        """Parse ``field[:order]``, e.g. ``dueDate:desc``."""
        name, _, order = value.partition(":")
        return cls(field=name.strip(), order=SortOrder.parse(order))

    @classmethod
    def from_dict(cls, data: Any) -> SortCriterion | None:
        if not isinstance(data, dict) or not isinstance(data.get("field"), str):
            return None
        return cls(field=data["field"], order=SortOrder.parse(data.get("order")))

    def to_dict(self) -> dict:
        return {"field": self.field, "order": self.order.value}
