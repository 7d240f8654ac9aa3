"""Grouping engine: partition tasks into ordered, titled buckets."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, timedelta

from taskview.models import GroupByDimension, Task, TaskGroup, locale_key, to_local_date
from taskview.settings import Settings

UNKNOWN_FILE = "Unknown File"
NO_PROJECT = "No Project"
DEFAULT_STATUS = "TODO"
ROOT_FOLDER_KEY = "folder-root"

# Recognised raw statuses, in display order.
STATUS_ORDER = ["TODO", "IN_PROGRESS", "WAITING", "DONE", "CANCELLED"]

DIMENSION_LABELS: dict[GroupByDimension, str] = {
    GroupByDimension.NONE: "None",
    GroupByDimension.FILE_PATH: "File Path",
    GroupByDimension.DUE_DATE: "Due Date",
    GroupByDimension.PRIORITY: "Priority",
    GroupByDimension.PROJECT: "Project",
    GroupByDimension.TAGS: "Tags",
    GroupByDimension.STATUS: "Status",
}


def _split_path(path: str) -> tuple[str, str]:
    """Split into (folder, filename); folder is empty at the root."""
    cut = max(path.rfind("/"), path.rfind("\\"))
    if cut < 0:
        return "", path
    return path[:cut], path[cut + 1 :]


def _strip_extension(filename: str) -> str:
    # A leading dot is part of the name, not an extension.
    dot = filename.rfind(".")
    return filename[:dot] if dot > 0 else filename


def file_base_name(path: str) -> str:
    """File name without folder and without its last extension."""
    return _strip_extension(_split_path(path)[1])


def _task_path(task: Task) -> str:
    return task.file_path or UNKNOWN_FILE


def group_tasks_none(tasks: Sequence[Task]) -> list[TaskGroup]:
    if not tasks:
        return []
    return [TaskGroup(title="All Tasks", key="all", sort_order=0, tasks=list(tasks))]


def group_tasks_by_file_path(tasks: Sequence[Task]) -> list[TaskGroup]:
    """One group per file, ordered by full path so folders stay together."""
    buckets: dict[str, list[Task]] = {}
    for task in tasks:
        buckets.setdefault(_task_path(task), []).append(task)

    groups = []
    for index, path in enumerate(sorted(buckets, key=locale_key)):
        folder, filename = _split_path(path)
        base = _strip_extension(filename)
        title = f"{base} ({folder})" if folder else base
        groups.append(
            TaskGroup(title=title, key=f"file-{path}", sort_order=index, tasks=buckets[path])
        )
    return groups


def _file_children(files: dict[str, list[Task]], parent_key: str) -> list[TaskGroup]:
    return [
        TaskGroup(
            title=file_base_name(path),
            key=f"file-{path}",
            sort_order=index,
            tasks=files[path],
            is_expanded=False,
            level=1,
            parent_key=parent_key,
        )
        for index, path in enumerate(sorted(files, key=locale_key))
    ]


def _flatten(children: list[TaskGroup]) -> list[Task]:
    return [task for child in children for task in child.tasks]


def group_tasks_by_file_path_nested(tasks: Sequence[Task]) -> list[TaskGroup]:
    """Two-level hierarchy: folder groups holding one child group per file.

    Files without a folder go into a synthetic "Root Files" group placed first.
    Everything starts collapsed.
    """
    folders: dict[str, dict[str, list[Task]]] = {}
    root_files: dict[str, list[Task]] = {}

    for task in tasks:
        path = _task_path(task)
        folder, _ = _split_path(path)
        files = folders.setdefault(folder, {}) if folder else root_files
        files.setdefault(path, []).append(task)

    groups: list[TaskGroup] = []
    if root_files:
        children = _file_children(root_files, ROOT_FOLDER_KEY)
        groups.append(
            TaskGroup(
                title="Root Files",
                key=ROOT_FOLDER_KEY,
                sort_order=-1,
                tasks=_flatten(children),
                is_expanded=False,
                children=children,
                level=0,
            )
        )

    for index, folder in enumerate(sorted(folders, key=locale_key)):
        key = f"folder-{folder}"
        children = _file_children(folders[folder], key)
        segments = folder.replace("\\", "/").split("/")
        groups.append(
            TaskGroup(
                title=segments[-1] or folder,
                key=key,
                sort_order=index,
                tasks=_flatten(children),
                is_expanded=False,
                children=children,
                level=0,
            )
        )
    return groups


def _emit(buckets: list[tuple[str, str, list[Task]]]) -> list[TaskGroup]:
    """Turn fixed-order buckets into groups, dropping empty ones."""
    groups = []
    for title, key, bucket in buckets:
        if bucket:
            groups.append(TaskGroup(title=title, key=key, sort_order=len(groups), tasks=bucket))
    return groups


def group_tasks_by_due_date(tasks: Sequence[Task], today: date | None = None) -> list[TaskGroup]:
    """Chronological buckets relative to local-midnight today."""
    today = today or date.today()
    tomorrow = today + timedelta(days=1)
    week_end = today + timedelta(days=7)

    past: list[Task] = []
    due_today: list[Task] = []
    due_tomorrow: list[Task] = []
    this_week: list[Task] = []
    later: list[Task] = []
    undated: list[Task] = []

    for task in tasks:
        due = task.metadata.due_date
        if not due:
            undated.append(task)
            continue
        day = to_local_date(due)
        if day < today:
            past.append(task)
        elif day == today:
            due_today.append(task)
        elif day == tomorrow:
            due_tomorrow.append(task)
        elif day <= week_end:
            this_week.append(task)
        else:
            later.append(task)

    return _emit(
        [
            ("Past Due", "due-past", past),
            ("Today", "due-today", due_today),
            ("Tomorrow", "due-tomorrow", due_tomorrow),
            ("This Week", "due-week", this_week),
            ("Later", "due-later", later),
            ("No Due Date", "due-none", undated),
        ]
    )


def group_tasks_by_priority(tasks: Sequence[Task]) -> list[TaskGroup]:
    """High/Medium/Low/None on a 0-3 scale; anything >= 3 counts as High."""
    high: list[Task] = []
    medium: list[Task] = []
    low: list[Task] = []
    none: list[Task] = []

    for task in tasks:
        priority = task.metadata.priority or 0
        if priority >= 3:
            high.append(task)
        elif priority == 2:
            medium.append(task)
        elif priority == 1:
            low.append(task)
        else:
            none.append(task)

    return _emit(
        [
            ("High", "priority-high", high),
            ("Medium", "priority-medium", medium),
            ("Low", "priority-low", low),
            ("No Priority", "priority-none", none),
        ]
    )


def group_tasks_by_project(tasks: Sequence[Task]) -> list[TaskGroup]:
    buckets: dict[str, list[Task]] = {}
    for task in tasks:
        buckets.setdefault(task.metadata.project or NO_PROJECT, []).append(task)

    names = sorted((n for n in buckets if n != NO_PROJECT), key=locale_key)
    if NO_PROJECT in buckets:
        names.append(NO_PROJECT)
    return [
        TaskGroup(title=name, key=f"project-{name}", sort_order=index, tasks=buckets[name])
        for index, name in enumerate(names)
    ]


def group_tasks_by_tags(tasks: Sequence[Task]) -> list[TaskGroup]:
    """One group per tag; a task with N tags lands in N groups.

    Untagged tasks are collected in a trailing "No Tags" group.
    """
    buckets: dict[str, list[Task]] = {}
    untagged: list[Task] = []

    for task in tasks:
        # A bare "#" names no tag.
        names = [tag[1:] if tag.startswith("#") else tag for tag in task.metadata.tags]
        names = [name for name in names if name]
        if not names:
            untagged.append(task)
            continue
        for name in names:
            bucket = buckets.setdefault(name, [])
            # "#a" and "a" share a bucket; keep one entry per task.
            if not bucket or bucket[-1] is not task:
                bucket.append(task)

    groups = [
        TaskGroup(title=f"#{tag}", key=f"tag-{tag}", sort_order=index, tasks=buckets[tag])
        for index, tag in enumerate(sorted(buckets))
    ]
    if untagged:
        groups.append(
            TaskGroup(title="No Tags", key="tag-none", sort_order=len(groups), tasks=untagged)
        )
    return groups


def format_status_title(status: str) -> str:
    """``IN_PROGRESS`` -> ``In Progress``."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in status.split("_"))


def _status_sort_key(status: str) -> tuple[int, int, tuple[str, str]]:
    if status in STATUS_ORDER:
        return (0, STATUS_ORDER.index(status), ("", ""))
    return (1, 0, locale_key(status))


def group_tasks_by_status(tasks: Sequence[Task]) -> list[TaskGroup]:
    buckets: dict[str, list[Task]] = {}
    for task in tasks:
        buckets.setdefault(task.status or DEFAULT_STATUS, []).append(task)

    return [
        TaskGroup(
            title=format_status_title(status),
            key=f"status-{status}",
            sort_order=index,
            tasks=buckets[status],
        )
        for index, status in enumerate(sorted(buckets, key=_status_sort_key))
    ]


GroupHandler = Callable[[Sequence[Task], Settings | None], list[TaskGroup]]


def _by_file_path(tasks: Sequence[Task], settings: Settings | None) -> list[TaskGroup]:
    if settings is not None and settings.nested_file_groups:
        return group_tasks_by_file_path_nested(tasks)
    return group_tasks_by_file_path(tasks)


_HANDLERS: dict[GroupByDimension, GroupHandler] = {
    GroupByDimension.NONE: lambda tasks, _: group_tasks_none(tasks),
    GroupByDimension.FILE_PATH: _by_file_path,
    GroupByDimension.DUE_DATE: lambda tasks, _: group_tasks_by_due_date(tasks),
    GroupByDimension.PRIORITY: lambda tasks, _: group_tasks_by_priority(tasks),
    GroupByDimension.PROJECT: lambda tasks, _: group_tasks_by_project(tasks),
    GroupByDimension.TAGS: lambda tasks, _: group_tasks_by_tags(tasks),
    GroupByDimension.STATUS: lambda tasks, _: group_tasks_by_status(tasks),
}


def group_tasks_by(
    tasks: Sequence[Task],
    dimension: GroupByDimension | str,
    settings: Settings | None = None,
) -> list[TaskGroup]:
    """Group tasks along ``dimension``; unknown dimensions behave like NONE."""
    return _HANDLERS[GroupByDimension.parse(dimension)](tasks, settings)


def get_group_by_dimension_label(dimension: GroupByDimension | str) -> str:
    return DIMENSION_LABELS[GroupByDimension.parse(dimension)]
