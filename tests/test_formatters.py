"""Tests for output formatters."""

import json

import pytest
from rich.console import Console, Group
from rich.tree import Tree

from taskview.formatters import (
    FORMATTERS,
    FormatterProtocol,
    JsonlFormatter,
    TableFormatter,
    TreeFormatter,
    get_formatter,
)
from taskview.formatters.table import format_priority, format_status, format_tags
from taskview.grouping import group_tasks_by_file_path_nested, group_tasks_by_project


def render(renderable) -> str:
    console = Console(record=True, width=120)
    console.print(renderable)
    return console.export_text()


class TestGetFormatter:
    def test_registry(self):
        assert set(FORMATTERS) == {"table", "jsonl", "tree"}
        for name in FORMATTERS:
            assert isinstance(get_formatter(name), FormatterProtocol)

    def test_table_date_format(self):
        formatter = get_formatter("table:%d/%m")
        assert isinstance(formatter, TableFormatter)
        assert formatter.date_fmt == "%d/%m"

    def test_unknown_format_raises(self):
        with pytest.raises(ValueError, match="Unknown format: xml"):
            get_formatter("xml")


class TestDisplayHelpers:
    def test_format_priority(self):
        assert format_priority(None) == ""
        assert format_priority(0) == ""
        assert "!!!" in format_priority(5)
        assert format_priority(9) == format_priority(5)

    def test_format_tags_limits_count(self):
        assert format_tags([]) == ""
        rendered = format_tags(["#a", "b", "#c", "#d"])
        assert rendered.count("[cyan]") == 3
        assert "#b" in rendered

    def test_format_status(self, make_task):
        assert "✓" in format_status(make_task("a", status="x"))
        assert "/" in format_status(make_task("a", status="/"))


class TestJsonlFormatter:
    def test_empty(self):
        assert JsonlFormatter().format([]) == ""

    def test_one_line_per_group(self, make_task):
        groups = group_tasks_by_project([make_task("a", project="p"), make_task("b")])

        lines = JsonlFormatter().format(groups).splitlines()

        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["title"] == "p"
        assert [t["id"] for t in first["tasks"]] == ["a"]
        assert first["tasks"][0]["metadata"]["project"] == "p"

    def test_nested_children(self, make_task):
        groups = group_tasks_by_file_path_nested([make_task("a", file_path="proj/a.md")])
        obj = json.loads(JsonlFormatter().format(groups))
        assert obj["key"] == "folder-proj"
        assert [t["id"] for t in obj["children"][0]["tasks"]] == ["a"]


class TestTableFormatter:
    def test_empty(self):
        assert TableFormatter().format([]) == "[dim]No tasks[/dim]"

    def test_renders_groups(self, make_task):
        groups = group_tasks_by_project(
            [make_task("a", content="Write [draft]", project="p", tags=["#t"], priority=4)]
        )

        result = TableFormatter().format(groups)

        assert isinstance(result, Group)
        text = render(result)
        assert "Write [draft]" in text
        assert "notes.md" in text


class TestTreeFormatter:
    def test_empty(self):
        assert TreeFormatter().format([]) == "[dim]No tasks[/dim]"

    def test_nested_groups_become_branches(self, make_task):
        groups = group_tasks_by_file_path_nested(
            [make_task("a", content="First", file_path="proj/a.md")]
        )

        result = TreeFormatter(max_width=80).format(groups)

        text = render(result)
        assert "proj" in text
        assert "First" in text

    def test_returns_tree_per_group(self, make_task):
        groups = group_tasks_by_project([make_task("a", project="p"), make_task("b")])
        result = TreeFormatter(max_width=80).format(groups)
        assert isinstance(result, Group)
        assert all(isinstance(r, Tree) for r in result.renderables)
