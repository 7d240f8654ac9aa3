"""Core view service: filter, group and sort a task snapshot."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from taskview.filtering import FilterOptions, filter_tasks
from taskview.grouping import group_tasks_by
from taskview.models import GroupByDimension, SortCriterion, Task, TaskGroup
from taskview.settings import Settings, get_view_setting_or_default, resolve_settings
from taskview.sorting import sort_tasks
from taskview.source import TaskSource


def sort_groups(
    groups: list[TaskGroup], criteria: Sequence[SortCriterion], settings: Settings | None
) -> list[TaskGroup]:
    """Sort tasks inside each group, in place; group order is untouched.

    Parents of nested groups get their task list rebuilt from the sorted
    children.
    """
    for group in groups:
        if group.children is not None:
            sort_groups(group.children, criteria, settings)
            group.tasks = [task for child in group.children for task in child.tasks]
        else:
            group.tasks = sort_tasks(group.tasks, criteria, settings)
    return groups


class ViewService:
    """Main service - runs the filter -> group -> sort pipeline for a view."""

    def __init__(self, source: TaskSource, settings_provider: Any):
        self._source = source
        self._provider = settings_provider

    @property
    def settings(self) -> Settings:
        return resolve_settings(self._provider)

    def _criteria(self, view_id: str, criteria: Sequence[SortCriterion] | None) -> list:
        if criteria:
            return list(criteria)
        return list(get_view_setting_or_default(self.settings, view_id).sort_criteria)

    def tasks(
        self,
        view_id: str,
        text_query: str | None = None,
        criteria: Sequence[SortCriterion] | None = None,
    ) -> list[Task]:
        """Visible tasks of a view, sorted by its criteria (or the given ones)."""
        visible = filter_tasks(
            self._source.get_all_tasks(),
            view_id,
            self._provider,
            FilterOptions(text_query=text_query),
        )
        return sort_tasks(visible, self._criteria(view_id, criteria), self.settings)

    def groups(
        self,
        view_id: str,
        dimension: GroupByDimension | str = GroupByDimension.NONE,
        text_query: str | None = None,
        criteria: Sequence[SortCriterion] | None = None,
    ) -> list[TaskGroup]:
        """Visible tasks of a view, grouped, then sorted within each group."""
        visible = filter_tasks(
            self._source.get_all_tasks(),
            view_id,
            self._provider,
            FilterOptions(text_query=text_query),
        )
        groups = group_tasks_by(visible, dimension, self.settings)
        return sort_groups(groups, self._criteria(view_id, criteria), self.settings)
