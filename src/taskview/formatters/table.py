"""Rich table formatter."""

from __future__ import annotations

from datetime import date
from typing import Any

from rich.console import Group
from rich.markup import escape
from rich.table import Table

from taskview.models import Task, TaskGroup, to_local_date

MAX_DISPLAY_TAGS = 3  # Maximum tags to display in any formatter

# Priority indicators (Rich markup), keyed by the 0-5 task priority
PRIORITY_INDICATORS: dict[int, str] = {
    5: "[red bold]!!![/red bold]",
    4: "[red]!![/red]",
    3: "[yellow]![/yellow]",
    2: "[dim]↓[/dim]",
    1: "[dim]○[/dim]",
}


def format_priority(priority: int | None) -> str:
    """Format priority as a Rich markup indicator."""
    if not priority:
        return ""
    return PRIORITY_INDICATORS.get(min(priority, 5), "")


def format_tags(tags: list[str], max_tags: int = MAX_DISPLAY_TAGS) -> str:
    if not tags:
        return ""
    return " ".join(f"[cyan]#{escape(t.lstrip('#'))}[/cyan]" for t in tags[:max_tags])


def format_status(task: Task) -> str:
    # Colorblind-safe: blue checkmark for done
    if task.completed:
        return "[blue]✓[/blue]"
    return f"[dim]\\[{task.status or ' '}][/dim]"


class TableFormatter:
    """Format groups as Rich tables, one table per group."""

    NAME = "table"

    def __init__(self, date_fmt: str = "%Y-%m-%d", show_id: bool = False):
        self.date_fmt = date_fmt
        self.show_id = show_id

    def _format_date(self, day: date) -> str:
        try:
            return day.strftime(self.date_fmt)
        except ValueError:
            return day.isoformat()

    def _format_due(self, task: Task, today: date) -> str:
        if not task.metadata.due_date:
            return ""
        day = to_local_date(task.metadata.due_date)
        date_str = self._format_date(day)
        if task.completed:
            return f"[dim]{date_str}[/dim]"
        if day < today:
            return f"[red bold]{date_str}[/red bold]"
        return date_str

    def _format_group(self, group: TaskGroup, today: date) -> Table:
        tasks = group.tasks
        has_priority = any(t.metadata.priority for t in tasks)
        has_due = any(t.metadata.due_date for t in tasks)
        has_tags = any(t.metadata.tags for t in tasks)

        table = Table(
            title=f"{escape(group.title)} [dim]({len(tasks)})[/dim]",
            title_justify="left",
            show_header=True,
            header_style="bold",
        )
        if self.show_id:
            table.add_column("ID", style="dim")
        table.add_column("", width=3)
        if has_priority:
            table.add_column("Pri", width=4)
        table.add_column("Task")
        if has_due:
            table.add_column("Due", width=12)
        if has_tags:
            table.add_column("Tags")
        table.add_column("File", style="dim")

        for task in tasks:
            row = []
            if self.show_id:
                row.append(task.id)
            row.append(format_status(task))
            if has_priority:
                row.append(format_priority(task.metadata.priority))
            row.append(escape(task.content))
            if has_due:
                row.append(self._format_due(task, today))
            if has_tags:
                row.append(format_tags(task.metadata.tags))
            row.append(escape(task.file_path))
            table.add_row(*row)

        return table

    def format(self, groups: list[TaskGroup]) -> Any:
        if not groups:
            return "[dim]No tasks[/dim]"
        today = date.today()
        return Group(*(self._format_group(group, today) for group in groups))
