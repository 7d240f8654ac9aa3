"""Status groups: mapping raw checkbox marks to semantic groups, and cycling."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from taskview.settings import Settings

COMPLETED = "completed"
IN_PROGRESS = "inProgress"
ABANDONED = "abandoned"
PLANNED = "planned"
NOT_STARTED = "notStarted"

DEFAULT_TASK_STATUSES: dict[str, str] = {
    COMPLETED: "x|X",
    IN_PROGRESS: ">|/",
    ABANDONED: "-",
    PLANNED: "?",
    NOT_STARTED: " ",
}

# Ordinal used when sorting by status: lower sorts first.
STATUS_SORT_ORDER: list[str] = [IN_PROGRESS, NOT_STARTED, PLANNED, COMPLETED, ABANDONED]

DEFAULT_STATUS_CYCLE: list[str] = [
    "Not Started",
    "In Progress",
    "Completed",
    "Abandoned",
    "Planned",
]

DEFAULT_STATUS_MARKS: dict[str, str] = {
    "Not Started": " ",
    "In Progress": "/",
    "Completed": "x",
    "Abandoned": "-",
    "Planned": "?",
}


def split_marks(raw: str) -> list[str]:
    """Split a ``|``-delimited mark list.

    A lone space is a mark of its own, so entries are not stripped.
    """
    return [m for m in raw.split("|") if m != ""]


def _statuses(settings: Settings | None) -> dict[str, str]:
    statuses = getattr(settings, "task_statuses", None)
    if isinstance(statuses, dict) and statuses:
        return statuses
    return DEFAULT_TASK_STATUSES


def _fallback_group(settings: Settings | None) -> str:
    other = getattr(settings, "count_other_statuses_as", None)
    return other if isinstance(other, str) and other else NOT_STARTED


def status_group_for_mark(mark: str | None, settings: Settings | None = None) -> str:
    """Return the status group a raw mark belongs to.

    Exact matches win over case-insensitive ones; unmatched marks fall into
    ``settings.count_other_statuses_as``.
    """
    mark = mark or ""
    statuses = _statuses(settings)
    for group, raw in statuses.items():
        if isinstance(raw, str) and mark in split_marks(raw):
            return group
    lowered = mark.lower()
    for group, raw in statuses.items():
        if isinstance(raw, str) and lowered in (m.lower() for m in split_marks(raw)):
            return group
    return _fallback_group(settings)


def is_completed_mark(mark: str | None, settings: Settings | None = None) -> bool:
    return status_group_for_mark(mark, settings) == COMPLETED


def is_abandoned_mark(mark: str | None, settings: Settings | None = None) -> bool:
    return status_group_for_mark(mark, settings) == ABANDONED


def status_ordinal(group: str) -> int:
    """Sort position of a status group; unknown groups go last."""
    try:
        return STATUS_SORT_ORDER.index(group)
    except ValueError:
        return len(STATUS_SORT_ORDER)


def _normalize(value: str) -> str:
    return value.strip().lower()


def next_status_mark(current_mark: str | None, settings: Settings | None = None) -> str | None:
    """Mark that follows ``current_mark`` in the configured status cycle.

    Returns None when every status is excluded from the cycle.
    """
    marks = getattr(settings, "task_status_marks", None) or DEFAULT_STATUS_MARKS
    cycle = getattr(settings, "task_status_cycle", None) or list(marks)
    excluded = {_normalize(s) for s in getattr(settings, "exclude_marks_from_cycle", None) or []}

    active = [name for name in cycle if _normalize(name) not in excluded]
    if not active:
        return None

    current_index = -1
    if current_mark is not None:
        for i, name in enumerate(active):
            mapped = marks.get(name)
            if mapped is None:
                continue
            if mapped == current_mark or mapped.lower() == current_mark.lower():
                current_index = i
                break

    next_name = active[(current_index + 1) % len(active)]
    return marks.get(next_name, next_name)
