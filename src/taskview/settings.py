"""Per-view configuration and status settings consumed by the engines."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from taskview.models import SortCriterion, SortOrder
from taskview.statuses import (
    DEFAULT_STATUS_CYCLE,
    DEFAULT_STATUS_MARKS,
    DEFAULT_TASK_STATUSES,
    NOT_STARTED,
)

logger = logging.getLogger("taskview.settings")


def _get(data: dict, snake: str, camel: str, expected: type, default: Any) -> Any:
    """Read a key in either spelling, keeping the default on a type mismatch."""
    value = data.get(snake, data.get(camel))
    if value is None:
        return default
    if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
        logger.debug("Ignoring %s: expected %s, got %s", camel, expected, type(value).__name__)
        return default
    return value


def _str_list(value: Any) -> list[str]:
    """Accept a list of strings or a comma-separated string."""
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if isinstance(value, list):
        return [v.strip() for v in value if isinstance(v, str) and v.strip()]
    return []


@dataclass
class FilterRules:
    """Include/exclude predicates for a view.

    Empty lists and None expressions mean "no constraint".
    """

    text_contains: str = ""
    tags_include: list[str] = field(default_factory=list)
    tags_exclude: list[str] = field(default_factory=list)
    projects_include: list[str] = field(default_factory=list)
    projects_exclude: list[str] = field(default_factory=list)
    contexts_include: list[str] = field(default_factory=list)
    contexts_exclude: list[str] = field(default_factory=list)
    path_includes: list[str] = field(default_factory=list)
    path_excludes: list[str] = field(default_factory=list)
    status_include: list[str] = field(default_factory=list)
    status_exclude: list[str] = field(default_factory=list)
    priority: str | None = None
    due_date: str | None = None
    start_date: str | None = None
    scheduled_date: str | None = None

    _LIST_FIELDS = {
        "tags_include": "tagsInclude",
        "tags_exclude": "tagsExclude",
        "projects_include": "projectsInclude",
        "projects_exclude": "projectsExclude",
        "contexts_include": "contextsInclude",
        "contexts_exclude": "contextsExclude",
        "path_includes": "pathIncludes",
        "path_excludes": "pathExcludes",
        "status_include": "statusInclude",
        "status_exclude": "statusExclude",
    }
    _EXPR_FIELDS = {
        "due_date": "dueDate",
        "start_date": "startDate",
        "scheduled_date": "scheduledDate",
    }

    @classmethod
    def from_dict(cls, data: Any) -> FilterRules:
        if not isinstance(data, dict):
            return cls()
        kwargs: dict[str, Any] = {
            "text_contains": _get(data, "text_contains", "textContains", str, ""),
        }
        for snake, camel in cls._LIST_FIELDS.items():
            kwargs[snake] = _str_list(data.get(snake, data.get(camel)))
        # The host stores a single project filter under "project".
        if not kwargs["projects_include"]:
            kwargs["projects_include"] = _str_list(data.get("project"))
        priority = data.get("priority")
        if isinstance(priority, int) and not isinstance(priority, bool):
            priority = str(priority)
        kwargs["priority"] = priority if isinstance(priority, str) and priority.strip() else None
        for snake, camel in cls._EXPR_FIELDS.items():
            value = _get(data, snake, camel, str, None)
            kwargs[snake] = value if value and value.strip() else None
        return cls(**kwargs)


DEFAULT_SORT_CRITERIA: list[SortCriterion] = [
    SortCriterion("status", SortOrder.ASC),
    SortCriterion("priority", SortOrder.DESC),
    SortCriterion("dueDate", SortOrder.ASC),
]


@dataclass
class ViewConfig:
    """Display configuration of one named view."""

    id: str
    name: str = ""
    hide_completed_and_abandoned_tasks: bool = False
    filter_blanks: bool = False
    filter_rules: FilterRules = field(default_factory=FilterRules)
    sort_criteria: list[SortCriterion] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ViewConfig | None:
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            logger.debug("Skipping view configuration without an id: %r", data)
            return None
        criteria = data.get("sort_criteria", data.get("sortCriteria"))
        parsed = [SortCriterion.from_dict(c) for c in criteria] if isinstance(criteria, list) else []
        return cls(
            id=data["id"],
            name=_get(data, "name", "name", str, ""),
            hide_completed_and_abandoned_tasks=_get(
                data,
                "hide_completed_and_abandoned_tasks",
                "hideCompletedAndAbandonedTasks",
                bool,
                False,
            ),
            filter_blanks=_get(data, "filter_blanks", "filterBlanks", bool, False),
            filter_rules=FilterRules.from_dict(data.get("filter_rules", data.get("filterRules"))),
            sort_criteria=[c for c in parsed if c is not None],
        )


def default_view_config(view_id: str) -> ViewConfig:
    """Configuration used for a view with no explicit settings."""
    return ViewConfig(
        id=view_id,
        name=view_id,
        hide_completed_and_abandoned_tasks=True,
        filter_blanks=False,
        sort_criteria=list(DEFAULT_SORT_CRITERIA),
    )


@dataclass
class Settings:
    """Settings snapshot handed to the filter, group and sort engines."""

    view_configuration: list[ViewConfig] = field(default_factory=list)
    task_statuses: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TASK_STATUSES))
    count_other_statuses_as: str = NOT_STARTED
    task_status_cycle: list[str] = field(default_factory=lambda: list(DEFAULT_STATUS_CYCLE))
    task_status_marks: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STATUS_MARKS))
    exclude_marks_from_cycle: list[str] = field(default_factory=list)
    nested_file_groups: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> Settings:
        """Build settings from the plugin's JSON; bad fields keep their defaults."""
        if not isinstance(data, dict):
            logger.debug("Settings payload is not an object, using defaults")
            return cls()
        defaults = cls()

        views_raw = _get(data, "view_configuration", "viewConfiguration", list, [])
        views = [v for v in (ViewConfig.from_dict(raw) for raw in views_raw) if v is not None]

        statuses = _get(data, "task_statuses", "taskStatuses", dict, None)
        if statuses is not None:
            statuses = {k: v for k, v in statuses.items() if isinstance(v, str)}

        marks = _get(data, "task_status_marks", "taskStatusMarks", dict, None)
        if marks is not None:
            marks = {k: v for k, v in marks.items() if isinstance(v, str)}

        cycle = _get(data, "task_status_cycle", "taskStatusCycle", list, None)
        excluded = _get(data, "exclude_marks_from_cycle", "excludeMarksFromCycle", list, [])

        return cls(
            view_configuration=views,
            task_statuses=statuses or defaults.task_statuses,
            count_other_statuses_as=_get(
                data, "count_other_statuses_as", "countOtherStatusesAs", str, NOT_STARTED
            ),
            task_status_cycle=[c for c in cycle if isinstance(c, str)] if cycle else defaults.task_status_cycle,
            task_status_marks=marks or defaults.task_status_marks,
            exclude_marks_from_cycle=[e for e in excluded if isinstance(e, str)],
            nested_file_groups=_get(data, "nested_file_groups", "nestedFileGroups", bool, False),
        )


@runtime_checkable
class SettingsProvider(Protocol):
    """Anything exposing a ``settings`` attribute (plugin object, Config, ...)."""

    settings: Settings


def resolve_settings(settings_provider: Any) -> Settings:
    """Settings held by a provider, given as an attribute or a ``"settings"`` key.

    Providers without usable settings degrade to the defaults.
    """
    if isinstance(settings_provider, Mapping):
        settings = settings_provider.get("settings")
    else:
        settings = getattr(settings_provider, "settings", None)
    if isinstance(settings, Settings):
        return settings
    logger.debug("Settings provider has no usable settings, using defaults")
    return Settings()


def get_view_setting_or_default(settings: Settings | None, view_id: str) -> ViewConfig:
    """Resolve a view's configuration, falling back to the default view."""
    views = getattr(settings, "view_configuration", None) or []
    for view in views:
        if isinstance(view, ViewConfig) and view.id == view_id:
            return view
    logger.debug("No configuration for view %r, using defaults", view_id)
    return default_view_config(view_id)
