"""taskview - filter, group and sort task snapshots for task views."""

from taskview.filtering import FilterOptions, filter_tasks
from taskview.grouping import get_group_by_dimension_label, group_tasks_by
from taskview.models import GroupByDimension, SortCriterion, SortOrder, Task, TaskGroup, TaskMetadata
from taskview.settings import Settings, ViewConfig
from taskview.sorting import sort_tasks

__version__ = "0.1.0"

__all__ = [
    "FilterOptions",
    "GroupByDimension",
    "Settings",
    "SortCriterion",
    "SortOrder",
    "Task",
    "TaskGroup",
    "TaskMetadata",
    "ViewConfig",
    "filter_tasks",
    "get_group_by_dimension_label",
    "group_tasks_by",
    "sort_tasks",
]
