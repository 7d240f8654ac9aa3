"""Data shaping for the task list and kanban widgets.

Widgets carry their own lightweight filter and grouping modes, separate from
the per-view rules in :mod:`taskview.filtering` and the dimensions in
:mod:`taskview.grouping`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date, timedelta

from taskview.models import Task, locale_key, to_local_date
from taskview.settings import Settings
from taskview.sorting import DUE_BUCKET_ORDER, due_date_bucket
from taskview.statuses import (
    ABANDONED,
    COMPLETED,
    IN_PROGRESS,
    NOT_STARTED,
    PLANNED,
    split_marks,
)

WIDGET_GROUP_MODES = ("none", "tag", "project", "priority", "due", "status", "date")

PRIORITY_NAMES = {5: "Highest", 4: "High", 3: "Medium", 2: "Low", 1: "Lowest"}
PRIORITY_ORDER = ["Highest", "High", "Medium", "Low", "Lowest", "No Priority"]

STATUS_LABELS = {
    IN_PROGRESS: "In Progress",
    NOT_STARTED: "Todo",
    COMPLETED: "Completed",
    ABANDONED: "Cancelled",
    PLANNED: "Planned",
}
STATUS_LABEL_ORDER = ["In Progress", "Todo", "Planned", "Completed", "Cancelled", "Other"]
# Checked in this order; the first group listing the mark wins.
_STATUS_LOOKUP_ORDER = [IN_PROGRESS, NOT_STARTED, COMPLETED, ABANDONED, PLANNED]

SPECIAL_GROUPS = ["Uncategorized", "No Tag", "No Project", "No Priority", "No Due Date"]


@dataclass
class WidgetFilter:
    """Filter state stored with a widget."""

    tags: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)
    statuses: list[str] = field(default_factory=list)
    query: str = ""
    overdue: bool = False
    due_within_days: int | None = None


@dataclass
class GlobalFilterState:
    """Filter shared by every widget in a workspace."""

    tags: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)
    query: str = ""


def merge_global_filter(widget_filter: WidgetFilter, state: GlobalFilterState) -> WidgetFilter:
    """Overlay the global filter; empty global values keep the widget's own."""
    return replace(
        widget_filter,
        tags=list(state.tags) if state.tags else widget_filter.tags,
        projects=list(state.projects) if state.projects else widget_filter.projects,
        contexts=list(state.contexts) if state.contexts else widget_filter.contexts,
        query=state.query or widget_filter.query,
    )


def apply_widget_filter(
    tasks: Sequence[Task], widget_filter: WidgetFilter | None = None, today: date | None = None
) -> list[Task]:
    widget_filter = widget_filter or WidgetFilter()
    today = today or date.today()
    result = list(tasks)

    # Completed tasks stay hidden unless explicitly requested.
    if "completed" not in widget_filter.statuses:
        result = [t for t in result if not t.completed]

    if widget_filter.tags:
        result = [t for t in result if any(tag in t.metadata.tags for tag in widget_filter.tags)]

    if widget_filter.projects:
        result = [t for t in result if (t.metadata.project or "") in widget_filter.projects]

    if widget_filter.contexts:
        result = [t for t in result if (t.metadata.context or "") in widget_filter.contexts]

    if widget_filter.query.strip():
        query = widget_filter.query.lower()
        result = [t for t in result if query in t.content.lower()]

    if widget_filter.overdue:
        result = [
            t for t in result if t.metadata.due_date and to_local_date(t.metadata.due_date) < today
        ]

    if widget_filter.due_within_days is not None and widget_filter.due_within_days > 0:
        end = today + timedelta(days=widget_filter.due_within_days)
        result = [
            t
            for t in result
            if t.metadata.due_date and today <= to_local_date(t.metadata.due_date) <= end
        ]

    return result


def priority_group_name(priority: int | None) -> str:
    return PRIORITY_NAMES.get(priority or 0, "No Priority")


def status_group_label(task: Task, settings: Settings | None = None) -> str:
    """Widget label of a task's status, honouring countOtherStatusesAs."""
    settings = settings or Settings()
    mark = task.status or ("x" if task.completed else " ")
    statuses = settings.task_statuses
    for group in _STATUS_LOOKUP_ORDER:
        raw = statuses.get(group)
        if isinstance(raw, str) and mark in split_marks(raw):
            return STATUS_LABELS[group]
    return STATUS_LABELS.get(settings.count_other_statuses_as, "Other")


def _keys_for(task: Task, mode: str, settings: Settings | None, today: date) -> list[str]:
    if mode == "tag":
        return [tag for tag in task.metadata.tags if tag.lstrip("#")] or ["No Tag"]
    if mode == "project":
        return [task.metadata.project or "No Project"]
    if mode == "priority":
        return [priority_group_name(task.metadata.priority)]
    if mode == "due":
        return [due_date_bucket(task.metadata.due_date, today)]
    if mode == "status":
        return [status_group_label(task, settings)]
    if mode == "date":
        due = task.metadata.due_date
        return [to_local_date(due).isoformat() if due else "No Due Date"]
    return ["Other"]


def _fixed_order(order: list[str]):
    def key(name: str):
        if name in order:
            return (0, order.index(name), ("", ""))
        return (1, 0, locale_key(name))

    return key


def sort_group_names(names: list[str], mode: str) -> list[str]:
    if mode == "priority":
        return sorted(names, key=_fixed_order(PRIORITY_ORDER))
    if mode == "due":
        return sorted(names, key=_fixed_order(DUE_BUCKET_ORDER))
    if mode == "status":
        return sorted(names, key=_fixed_order(STATUS_LABEL_ORDER))
    if mode == "date":
        # ISO dates, newest first; undated last.
        dated = sorted((n for n in names if n != "No Due Date"), reverse=True)
        return dated + (["No Due Date"] if "No Due Date" in names else [])
    return sorted(names, key=lambda n: (n in SPECIAL_GROUPS, locale_key(n)))


def group_for_widget(
    tasks: Sequence[Task],
    mode: str,
    settings: Settings | None = None,
    today: date | None = None,
) -> list[tuple[str, list[Task]]]:
    """Group tasks for a list widget, returning ordered (name, tasks) pairs."""
    if mode == "none":
        return [("All Tasks", list(tasks))] if tasks else []

    today = today or date.today()
    groups: dict[str, list[Task]] = {}
    for task in tasks:
        for key in _keys_for(task, mode, settings, today):
            bucket = groups.setdefault(key, [])
            if all(t.id != task.id for t in bucket):
                bucket.append(task)

    return [(name, groups[name]) for name in sort_group_names(list(groups), mode)]


@dataclass(frozen=True)
class KanbanColumn:
    id: str
    label: str
    status_chars: tuple[str, ...]


DEFAULT_COLUMNS: tuple[KanbanColumn, ...] = (
    KanbanColumn("todo", "To Do", (" ",)),
    KanbanColumn("doing", "In Progress", ("/",)),
    KanbanColumn("done", "Done", ("x", "X")),
)


def tasks_for_column(tasks: Sequence[Task], column: KanbanColumn) -> list[Task]:
    """Tasks shown in a board column; the done column goes by completion."""
    if column.id == "done":
        return [t for t in tasks if t.completed]
    return [t for t in tasks if t.status in column.status_chars]
