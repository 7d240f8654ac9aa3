"""Base formatter protocol."""

from typing import Any, Protocol, runtime_checkable

from taskview.models import TaskGroup


@runtime_checkable
class FormatterProtocol(Protocol):
    """Protocol for output formatters.

    Implement this to add new output formats.
    Returns a Rich-printable object (Table, Tree, str, etc.)
    """

    def format(self, groups: list[TaskGroup]) -> Any:
        """Format task groups for output."""
        ...
