"""Sort engine: order tasks by a chain of criteria."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date
from functools import cmp_to_key

from taskview.models import SortCriterion, SortOrder, Task, locale_key, to_local_date
from taskview.settings import Settings
from taskview.statuses import status_group_for_mark, status_ordinal

logger = logging.getLogger("taskview.sort")

DATE_FIELDS = {
    "dueDate": "due_date",
    "startDate": "start_date",
    "scheduledDate": "scheduled_date",
    "completedDate": "completed_date",
}
# Optional text metadata: absent values sort last, like dates.
OPTIONAL_TEXT_FIELDS = {"project": "project", "context": "context"}

Comparator = Callable[[Task, Task], int]


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _absent_last(a, b, sign: int) -> int:
    """Compare optional values; absent ones go last whatever the direction."""
    if not a and not b:
        return 0
    if not a:
        return 1
    if not b:
        return -1
    return sign * _cmp(a, b)


def _comparator(field: str, sign: int, settings: Settings | None) -> Comparator | None:
    if field in DATE_FIELDS:
        attr = DATE_FIELDS[field]
        return lambda a, b: _absent_last(
            getattr(a.metadata, attr), getattr(b.metadata, attr), sign
        )
    if field in OPTIONAL_TEXT_FIELDS:
        attr = OPTIONAL_TEXT_FIELDS[field]

        def compare_text(a: Task, b: Task) -> int:
            va, vb = getattr(a.metadata, attr), getattr(b.metadata, attr)
            return _absent_last(va and locale_key(va), vb and locale_key(vb), sign)

        return compare_text
    if field == "priority":
        return lambda a, b: sign * _cmp(a.metadata.priority or 0, b.metadata.priority or 0)
    if field == "content":
        return lambda a, b: sign * _cmp(locale_key(a.content), locale_key(b.content))
    if field == "filePath":
        return lambda a, b: sign * _cmp(locale_key(a.file_path), locale_key(b.file_path))
    if field == "status":

        def rank(task: Task) -> int:
            return status_ordinal(status_group_for_mark(task.status, settings))

        return lambda a, b: sign * _cmp(rank(a), rank(b))
    return None


def build_comparator(
    criteria: Sequence[SortCriterion | dict], settings: Settings | None = None
) -> Comparator:
    """Chain criteria into one comparator; later criteria only break ties.

    Criteria naming unknown fields are skipped.
    """
    chain: list[Comparator] = []
    for criterion in criteria:
        if isinstance(criterion, dict):
            criterion = SortCriterion.from_dict(criterion)
        if not isinstance(criterion, SortCriterion):
            logger.debug("Ignoring malformed sort criterion %r", criterion)
            continue
        sign = -1 if SortOrder.parse(criterion.order) is SortOrder.DESC else 1
        compare = _comparator(criterion.field, sign, settings)
        if compare is None:
            logger.debug("Ignoring sort criterion on unknown field %r", criterion.field)
            continue
        chain.append(compare)

    def compare_tasks(a: Task, b: Task) -> int:
        for compare in chain:
            result = compare(a, b)
            if result:
                return result
        return 0

    return compare_tasks


def sort_tasks(
    tasks: Sequence[Task],
    criteria: Sequence[SortCriterion | dict],
    settings: Settings | None = None,
) -> list[Task]:
    """Return a new, stably sorted list; fully tied tasks keep input order."""
    if not criteria:
        return list(tasks)
    return sorted(tasks, key=cmp_to_key(build_comparator(criteria, settings)))


DUE_BUCKET_ORDER = [
    "Overdue",
    "Today",
    "Tomorrow",
    "This Week",
    "Next Week",
    "Later",
    "No Due Date",
]


def due_date_bucket(due_ms: int | None, today: date | None = None) -> str:
    """Relative due bucket used by list widgets.

    Unlike the due-date grouping dimension this one has a "Next Week"
    bucket (8-14 days out).
    """
    if not due_ms:
        return "No Due Date"
    today = today or date.today()
    diff = (to_local_date(due_ms) - today).days
    if diff < 0:
        return "Overdue"
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if diff <= 7:
        return "This Week"
    if diff <= 14:
        return "Next Week"
    return "Later"
