"""Filter engine: reduce a task snapshot to what a view should show."""

from __future__ import annotations

import logging
import operator
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from taskview.models import Task, to_local_date
from taskview.settings import (
    FilterRules,
    Settings,
    ViewConfig,
    get_view_setting_or_default,
    resolve_settings,
)
from taskview.statuses import is_abandoned_mark, status_group_for_mark

logger = logging.getLogger("taskview.filter")

_COMPARE = re.compile(r"^\s*(<=|>=|<|>|=)?\s*(.*?)\s*$")
_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "=": operator.eq,
}

DatePredicate = Callable[[date | None], bool]


@dataclass
class FilterOptions:
    """Ad hoc options layered on top of a view's configured rules."""

    text_query: str | None = None

    @classmethod
    def coerce(cls, value: Any) -> FilterOptions:
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            query = value.get("text_query", value.get("textQuery"))
            return cls(text_query=query if isinstance(query, str) else None)
        return cls()


def _normalize_tag(tag: str) -> str:
    return tag.lstrip("#").strip().lower()


def _resolve_day(word: str, today: date) -> date | None:
    word = word.strip().lower()
    if word == "today":
        return today
    if word == "tomorrow":
        return today + timedelta(days=1)
    if word == "yesterday":
        return today - timedelta(days=1)
    try:
        return date.fromisoformat(word)
    except ValueError:
        return None


def parse_date_rule(expr: str, today: date) -> DatePredicate | None:
    """Compile a date expression into a predicate over a local date.

    Supports ``overdue``, ``next week``, ``none`` and an optional comparison
    operator followed by ``today``/``tomorrow``/``yesterday``/``YYYY-MM-DD``.
    Returns None when the expression cannot be parsed.
    """
    text = expr.strip().lower()
    if text == "overdue":
        return lambda d: d is not None and d < today
    if text == "next week":
        end = today + timedelta(days=7)
        return lambda d: d is not None and today <= d <= end
    if text in ("none", "no date"):
        return lambda d: d is None

    match = _COMPARE.match(text)
    if not match:
        return None
    op = _OPERATORS[match.group(1) or "="]
    target = _resolve_day(match.group(2), today)
    if target is None:
        return None
    return lambda d: d is not None and op(d, target)


def parse_priority_rule(expr: str) -> Callable[[int], bool] | None:
    match = _COMPARE.match(expr)
    if not match or not match.group(2).isdigit():
        return None
    op = _OPERATORS[match.group(1) or "="]
    target = int(match.group(2))
    return lambda p: op(p, target)


def _any_tag(task: Task, wanted: Iterable[str]) -> bool:
    tags = {_normalize_tag(t) for t in task.metadata.tags}
    return any(_normalize_tag(w) in tags for w in wanted)


def _in_list(value: str | None, wanted: Iterable[str]) -> bool:
    if not value:
        return False
    lowered = value.lower()
    return any(lowered == w.lower() for w in wanted)


def _path_matches(path: str, fragments: Iterable[str]) -> bool:
    lowered = path.lower()
    return any(f.lower() in lowered for f in fragments)


def _build_rule_checks(
    rules: FilterRules, settings: Settings | None, today: date
) -> list[Callable[[Task], bool]]:
    checks: list[Callable[[Task], bool]] = []

    if rules.text_contains.strip():
        needle = rules.text_contains.strip().lower()
        checks.append(lambda t: needle in t.content.lower())

    if rules.tags_include:
        checks.append(lambda t: _any_tag(t, rules.tags_include))
    if rules.tags_exclude:
        checks.append(lambda t: not _any_tag(t, rules.tags_exclude))
    if rules.projects_include:
        checks.append(lambda t: _in_list(t.metadata.project, rules.projects_include))
    if rules.projects_exclude:
        checks.append(lambda t: not _in_list(t.metadata.project, rules.projects_exclude))
    if rules.contexts_include:
        checks.append(lambda t: _in_list(t.metadata.context, rules.contexts_include))
    if rules.contexts_exclude:
        checks.append(lambda t: not _in_list(t.metadata.context, rules.contexts_exclude))
    if rules.path_includes:
        checks.append(lambda t: _path_matches(t.file_path, rules.path_includes))
    if rules.path_excludes:
        checks.append(lambda t: not _path_matches(t.file_path, rules.path_excludes))
    if rules.status_include:
        checks.append(
            lambda t: _in_list(status_group_for_mark(t.status, settings), rules.status_include)
        )
    if rules.status_exclude:
        checks.append(
            lambda t: not _in_list(status_group_for_mark(t.status, settings), rules.status_exclude)
        )

    if rules.priority:
        priority_check = parse_priority_rule(rules.priority)
        if priority_check is None:
            logger.debug("Ignoring unparseable priority rule %r", rules.priority)
        else:
            checks.append(lambda t: priority_check(t.metadata.priority or 0))

    for attr in ("due_date", "start_date", "scheduled_date"):
        expr = getattr(rules, attr)
        if not expr:
            continue
        predicate = parse_date_rule(expr, today)
        if predicate is None:
            logger.debug("Ignoring unparseable %s rule %r", attr, expr)
            continue
        checks.append(_date_check(attr, predicate))

    return checks


def _date_check(attr: str, predicate: DatePredicate) -> Callable[[Task], bool]:
    def check(task: Task) -> bool:
        value = getattr(task.metadata, attr)
        return predicate(to_local_date(value) if value is not None else None)

    return check


def build_view_predicate(
    view: ViewConfig,
    settings: Settings,
    options: FilterOptions | None = None,
    today: date | None = None,
) -> Callable[[Task], bool]:
    """Combine every visibility rule of a view into one predicate."""
    today = today or date.today()
    options = options or FilterOptions()
    checks: list[Callable[[Task], bool]] = []

    if view.hide_completed_and_abandoned_tasks:
        checks.append(lambda t: not t.completed and not is_abandoned_mark(t.status, settings))
    if view.filter_blanks:
        checks.append(lambda t: bool(t.content.strip()))

    checks.extend(_build_rule_checks(view.filter_rules, settings, today))

    if options.text_query and options.text_query.strip():
        query = options.text_query.strip().lower()
        checks.append(lambda t: query in t.content.lower())

    return lambda task: all(check(task) for check in checks)


def filter_tasks(
    tasks: Sequence[Task],
    view_id: str,
    settings_provider: Any,
    extra_options: FilterOptions | dict | None = None,
    *,
    today: date | None = None,
) -> list[Task]:
    """Return the tasks visible in ``view_id``, in input order.

    Missing or malformed configuration degrades to the default view rules.
    """
    settings = resolve_settings(settings_provider)
    view = get_view_setting_or_default(settings, view_id)
    predicate = build_view_predicate(view, settings, FilterOptions.coerce(extra_options), today)
    return [task for task in tasks if predicate(task)]
