"""CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console

if TYPE_CHECKING:
    from taskview.config import Config
    from taskview.settings import Settings

app = typer.Typer(
    name="taskview",
    help="Filter, group and sort task snapshots the way task views do.",
    no_args_is_help=True,
)
console = Console()


def _get_config() -> Config:
    """Lazy import and load config."""
    from taskview.config import Config

    return Config.load()


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {message}")
    return typer.Exit(1)


class _StaticProvider:
    """Settings provider wrapping an explicit settings file."""

    def __init__(self, settings: Settings):
        self.settings = settings


def _get_provider(settings_file: Path | None):
    if settings_file is None:
        return _get_config()

    import json

    from taskview.settings import Settings

    try:
        data = json.loads(settings_file.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise _fail(f"Cannot load settings from {settings_file}: {e}") from e
    return _StaticProvider(Settings.from_dict(data))


def _load_tasks(snapshot: Path, settings: Settings):
    from taskview.source import load_snapshot

    try:
        return load_snapshot(snapshot, settings)
    except ValueError as e:
        raise _fail(str(e)) from e


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log degraded configuration and skipped rules")
    ] = False,
):
    """Configure logging for all commands."""
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@app.command("list")
def list_tasks(
    snapshot: Annotated[Path, typer.Argument(help="Task snapshot (JSON array or JSON lines)")],
    view: Annotated[str | None, typer.Option("--view", "-v", help="View id")] = None,
    group_by: Annotated[
        str | None,
        typer.Option("--group-by", "-g", help="none/filePath/dueDate/priority/project/tags/status"),
    ] = None,
    nested: Annotated[
        bool, typer.Option("--nested", help="Folder -> file hierarchy for filePath grouping")
    ] = False,
    sort: Annotated[
        list[str] | None,
        typer.Option("--sort", "-s", help="Sort criterion field[:asc|desc], repeatable"),
    ] = None,
    query: Annotated[str | None, typer.Option("--query", "-q", help="Text filter")] = None,
    format_: Annotated[str | None, typer.Option("--format", "-f", help="table/jsonl/tree")] = None,
    settings_file: Annotated[
        Path | None, typer.Option("--settings", help="Plugin settings JSON file")
    ] = None,
):
    """Show the tasks of a view, grouped and sorted."""
    from dataclasses import replace

    from taskview.core import ViewService
    from taskview.formatters import get_formatter
    from taskview.models import GroupByDimension, SortCriterion
    from taskview.source import StaticTaskSource

    cfg = _get_config()
    provider = _get_provider(settings_file)
    settings = provider.settings
    if nested:
        provider = _StaticProvider(replace(settings, nested_file_groups=True))

    try:
        formatter = get_formatter(format_ or cfg.default_format)
    except ValueError as e:
        raise _fail(str(e)) from e

    dimension = GroupByDimension.parse(group_by or cfg.default_group_by)
    criteria = [SortCriterion.parse(s) for s in sort or []]

    service = ViewService(StaticTaskSource(_load_tasks(snapshot, settings)), provider)
    groups = service.groups(view or cfg.default_view, dimension, query, criteria)
    output = formatter.format(groups)
    if getattr(formatter, "NAME", None) == "jsonl":
        # Machine-readable: no wrapping, no markup
        console.print(output, markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(output)


@app.command()
def widget(
    snapshot: Annotated[Path, typer.Argument(help="Task snapshot (JSON array or JSON lines)")],
    mode: Annotated[
        str, typer.Option("--mode", "-m", help="none/tag/project/priority/due/status/date")
    ] = "tag",
    tag: Annotated[list[str] | None, typer.Option("--tag", "-t", help="Only these tags")] = None,
    project: Annotated[
        list[str] | None, typer.Option("--project", "-p", help="Only these projects")
    ] = None,
    context: Annotated[
        list[str] | None, typer.Option("--context", "-c", help="Only these contexts")
    ] = None,
    query: Annotated[str, typer.Option("--query", "-q", help="Text filter")] = "",
    include_completed: Annotated[
        bool, typer.Option("--include-completed", help="Show completed tasks")
    ] = False,
    overdue: Annotated[bool, typer.Option("--overdue", help="Only overdue tasks")] = False,
    due_within: Annotated[
        int | None, typer.Option("--due-within", help="Only tasks due within N days")
    ] = None,
    settings_file: Annotated[
        Path | None, typer.Option("--settings", help="Plugin settings JSON file")
    ] = None,
):
    """Show tasks the way the task list widget groups them."""
    from rich.markup import escape

    from taskview.widgets import (
        WIDGET_GROUP_MODES,
        WidgetFilter,
        apply_widget_filter,
        group_for_widget,
    )

    if mode not in WIDGET_GROUP_MODES:
        raise _fail(f"Unknown mode: {mode}. Available: {', '.join(WIDGET_GROUP_MODES)}")

    settings = _get_provider(settings_file).settings
    widget_filter = WidgetFilter(
        tags=tag or [],
        projects=project or [],
        contexts=context or [],
        statuses=["completed"] if include_completed else [],
        query=query,
        overdue=overdue,
        due_within_days=due_within,
    )
    tasks = apply_widget_filter(_load_tasks(snapshot, settings), widget_filter)
    groups = group_for_widget(tasks, mode, settings)

    if not groups:
        console.print("[dim]No tasks[/dim]")
        return
    for name, group_tasks in groups:
        console.print(f"[bold]{escape(name)}[/bold] [dim]({len(group_tasks)})[/dim]")
        for task in group_tasks:
            console.print(f"  [dim]•[/dim] {escape(task.content)}")


@app.command()
def board(
    snapshot: Annotated[Path, typer.Argument(help="Task snapshot (JSON array or JSON lines)")],
    settings_file: Annotated[
        Path | None, typer.Option("--settings", help="Plugin settings JSON file")
    ] = None,
):
    """Show tasks in kanban columns."""
    from rich.columns import Columns
    from rich.markup import escape
    from rich.panel import Panel

    from taskview.widgets import DEFAULT_COLUMNS, tasks_for_column

    tasks = _load_tasks(snapshot, _get_provider(settings_file).settings)
    panels = []
    for column in DEFAULT_COLUMNS:
        column_tasks = tasks_for_column(tasks, column)
        body = "\n".join(f"• {escape(t.content)}" for t in column_tasks) or "[dim]empty[/dim]"
        panels.append(Panel(body, title=f"{column.label} ({len(column_tasks)})", width=32))
    console.print(Columns(panels))


@app.command()
def dimensions():
    """List grouping dimensions."""
    from taskview.grouping import get_group_by_dimension_label
    from taskview.models import GroupByDimension

    for dimension in GroupByDimension:
        console.print(f"{dimension.value:<10} {get_group_by_dimension_label(dimension)}")


@app.command("next-status")
def next_status(
    mark: Annotated[str, typer.Argument(help="Current status mark, e.g. ' ' or 'x'")],
    settings_file: Annotated[
        Path | None, typer.Option("--settings", help="Plugin settings JSON file")
    ] = None,
):
    """Print the mark that follows MARK in the status cycle."""
    from taskview.statuses import next_status_mark

    result = next_status_mark(mark, _get_provider(settings_file).settings)
    if result is None:
        raise _fail("Status cycle is empty")
    # Quoted so a space mark stays visible
    console.print(repr(result), markup=False, highlight=False)
