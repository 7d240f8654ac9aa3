"""Pytest fixtures for taskview tests."""

from datetime import date, datetime, time, timedelta

import pytest

from taskview.models import Task, TaskMetadata


@pytest.fixture(autouse=True)
def clear_caches():
    """Clear module-level caches before each test."""
    from taskview.config import clear_config_cache

    clear_config_cache()

    yield

    # Also clear after test (cleanup)
    clear_config_cache()


def _days_from_today(days: int) -> int:
    # Noon keeps the local date stable across DST shifts.
    moment = datetime.combine(date.today() + timedelta(days=days), time(12, 0))
    return int(moment.timestamp() * 1000)


@pytest.fixture
def days_from_today():
    """Epoch-ms timestamp N days from today (negative for the past)."""
    return _days_from_today


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults."""

    def factory(
        id: str,
        content: str | None = None,
        status: str = " ",
        completed: bool | None = None,
        file_path: str = "notes.md",
        **metadata,
    ) -> Task:
        return Task(
            id=id,
            status=status,
            completed=status in ("x", "X") if completed is None else completed,
            content=id.upper() if content is None else content,
            file_path=file_path,
            metadata=TaskMetadata(**metadata),
        )

    return factory
