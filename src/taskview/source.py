"""Task sources: where task snapshots come from."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from taskview.models import Task

if TYPE_CHECKING:
    from taskview.settings import Settings


@runtime_checkable
class TaskSource(Protocol):
    """Protocol for task snapshot providers.

    Implement this to feed tasks from an index, a cache, a query API, etc.
    """

    def get_all_tasks(self) -> list[Task]:
        """Return a fresh, duplicate-free snapshot."""
        ...


def _parse_records(text: str, path: Path) -> list:
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        try:
            records = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
        return records

    records = []
    for lineno, line in enumerate(stripped.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON on line {lineno} of {path}: {e}") from e
    return records


def load_snapshot(path: Path, settings: Settings | None = None) -> list[Task]:
    """Load tasks from a JSON array or JSON-lines file.

    Raises:
        ValueError: unreadable JSON, a non-object record, a record without
            an id, or two records sharing an id.
    """
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise ValueError(f"Cannot read snapshot {path}: {e}") from e

    tasks: list[Task] = []
    seen: set[str] = set()
    for index, record in enumerate(_parse_records(text, path)):
        if not isinstance(record, dict) or "id" not in record:
            raise ValueError(f"Record {index} in {path} is not a task object with an id")
        task = Task.from_dict(record, settings)
        if task.id in seen:
            raise ValueError(f"Duplicate task id in {path}: {task.id}")
        seen.add(task.id)
        tasks.append(task)
    return tasks


class FileTaskSource:
    """Snapshot file source; re-reads the file on every call."""

    def __init__(self, path: Path, settings: Settings | None = None):
        self._path = Path(path)
        self._settings = settings

    @property
    def path(self) -> Path:
        return self._path

    def get_all_tasks(self) -> list[Task]:
        return load_snapshot(self._path, self._settings)


class StaticTaskSource:
    """In-memory snapshot, mostly useful for embedding and tests."""

    def __init__(self, tasks: list[Task]):
        self._tasks = list(tasks)

    def get_all_tasks(self) -> list[Task]:
        return list(self._tasks)
