"""Tree formatter for grouped output."""

from __future__ import annotations

import shutil
import textwrap
from typing import Any

from rich.console import Group
from rich.markup import escape
from rich.tree import Tree

from taskview.formatters.table import format_priority, format_status, format_tags
from taskview.models import Task, TaskGroup


class TreeFormatter:
    """Format groups as a Rich tree; nested groups become sub-branches."""

    NAME = "tree"

    MAX_WIDTH = 120  # Maximum width even on wide terminals
    MAX_LINES = 3  # Maximum lines per task before truncation

    def __init__(self, max_width: int | None = None):
        term_width = shutil.get_terminal_size().columns
        self.max_width = min(max_width or term_width, self.MAX_WIDTH)

    def _format_task(self, task: Task, depth: int) -> str:
        prio = format_priority(task.metadata.priority)
        prefix = f"{format_status(task)} {prio} " if prio else f"{format_status(task)} "
        tags = format_tags(task.metadata.tags)

        # Tree indent is roughly 4 chars per level
        width = max(1, self.max_width - depth * 4 - 8)
        lines = textwrap.wrap(task.content, width=width, break_long_words=False) or [
            task.content
        ]
        if len(lines) > self.MAX_LINES:
            lines = lines[: self.MAX_LINES - 1] + ["…"]

        text = escape("\n".join(lines))
        if task.completed:
            text = f"[dim strike]{text}[/dim strike]"
        return f"{prefix}{text} {tags}".rstrip()

    def _add_group(self, parent: Tree, group: TaskGroup, depth: int) -> None:
        node = parent.add(f"[bold]{escape(group.title)}[/bold] [dim]({len(group.tasks)})[/dim]")
        if group.children is not None:
            for child in group.children:
                self._add_group(node, child, depth + 1)
            return
        for task in group.tasks:
            node.add(self._format_task(task, depth + 1))

    def format(self, groups: list[TaskGroup]) -> Any:
        if not groups:
            return "[dim]No tasks[/dim]"
        trees = []
        for group in groups:
            tree = Tree(
                f"[bold]{escape(group.title)}[/bold] [dim]({len(group.tasks)})[/dim]", guide_style="dim"
            )
            if group.children is not None:
                for child in group.children:
                    self._add_group(tree, child, depth=1)
            else:
                for task in group.tasks:
                    tree.add(self._format_task(task, depth=1))
            trees.append(tree)
        return Group(*trees)
