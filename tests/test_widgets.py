"""Tests for widget filtering, grouping and kanban columns."""

from datetime import date, datetime, time, timedelta

from taskview.settings import Settings
from taskview.widgets import (
    DEFAULT_COLUMNS,
    GlobalFilterState,
    KanbanColumn,
    WidgetFilter,
    apply_widget_filter,
    group_for_widget,
    merge_global_filter,
    priority_group_name,
    status_group_label,
    tasks_for_column,
)

TODAY = date(2024, 5, 15)


def at(days: int) -> int:
    return int(datetime.combine(TODAY + timedelta(days=days), time(10)).timestamp() * 1000)


def ids(tasks):
    return [t.id for t in tasks]


class TestApplyWidgetFilter:
    def test_hides_completed_by_default(self, make_task):
        tasks = [make_task("a"), make_task("b", status="x")]
        assert ids(apply_widget_filter(tasks, today=TODAY)) == ["a"]

    def test_completed_requested(self, make_task):
        tasks = [make_task("a"), make_task("b", status="x")]
        widget_filter = WidgetFilter(statuses=["completed"])
        assert ids(apply_widget_filter(tasks, widget_filter, TODAY)) == ["a", "b"]

    def test_tags_and_projects_any_of(self, make_task):
        tasks = [
            make_task("a", tags=["#x"], project="p"),
            make_task("b", tags=["#y"], project="p"),
            make_task("c", tags=["#x"], project="q"),
        ]
        widget_filter = WidgetFilter(tags=["#x", "#z"], projects=["p"])
        assert ids(apply_widget_filter(tasks, widget_filter, TODAY)) == ["a"]

    def test_contexts_any_of(self, make_task):
        tasks = [
            make_task("a", context="home"),
            make_task("b", context="office"),
            make_task("c"),
        ]
        widget_filter = WidgetFilter(contexts=["home", "phone"])
        assert ids(apply_widget_filter(tasks, widget_filter, TODAY)) == ["a"]

    def test_query(self, make_task):
        tasks = [make_task("a", content="Fix BUG"), make_task("b", content="Write docs")]
        assert ids(apply_widget_filter(tasks, WidgetFilter(query="bug"), TODAY)) == ["a"]

    def test_overdue(self, make_task):
        tasks = [make_task("a", due_date=at(-1)), make_task("b", due_date=at(0)), make_task("c")]
        assert ids(apply_widget_filter(tasks, WidgetFilter(overdue=True), TODAY)) == ["a"]

    def test_due_within_days(self, make_task):
        tasks = [
            make_task("past", due_date=at(-1)),
            make_task("today", due_date=at(0)),
            make_task("edge", due_date=at(3)),
            make_task("far", due_date=at(4)),
            make_task("none"),
        ]
        result = apply_widget_filter(tasks, WidgetFilter(due_within_days=3), TODAY)
        assert ids(result) == ["today", "edge"]


class TestMergeGlobalFilter:
    def test_global_values_win_when_set(self):
        own = WidgetFilter(tags=["#a"], projects=["p"], query="own", overdue=True)
        merged = merge_global_filter(own, GlobalFilterState(tags=["#g"], query="global"))
        assert merged.contexts == []
        assert merged.tags == ["#g"]
        assert merged.projects == ["p"]
        assert merged.query == "global"
        assert merged.overdue is True

    def test_global_contexts(self, make_task):
        own = WidgetFilter(contexts=["office"])
        merged = merge_global_filter(own, GlobalFilterState(contexts=["home"]))
        assert merged.contexts == ["home"]

        tasks = [make_task("a", context="home"), make_task("b", context="office")]
        assert ids(apply_widget_filter(tasks, merged, TODAY)) == ["a"]

    def test_empty_global_keeps_widget(self):
        own = WidgetFilter(tags=["#a"], query="own")
        assert merge_global_filter(own, GlobalFilterState()) == own


class TestGroupForWidget:
    def test_none_mode(self, make_task):
        assert group_for_widget([make_task("a")], "none") == [("All Tasks", [make_task("a")])]
        assert group_for_widget([], "none") == []

    def test_tag_mode_special_group_last(self, make_task):
        tasks = [make_task("a"), make_task("b", tags=["#b", "#a"]), make_task("c", tags=["#a"])]
        groups = group_for_widget(tasks, "tag")
        assert [(name, ids(ts)) for name, ts in groups] == [
            ("#a", ["b", "c"]),
            ("#b", ["b"]),
            ("No Tag", ["a"]),
        ]

    def test_duplicate_tags_do_not_duplicate_task(self, make_task):
        groups = group_for_widget([make_task("a", tags=["#a", "#a"])], "tag")
        assert [(name, ids(ts)) for name, ts in groups] == [("#a", ["a"])]

    def test_priority_mode_uses_five_levels(self, make_task):
        tasks = [make_task("n"), make_task("l", priority=1), make_task("h", priority=5), make_task("m", priority=3)]
        groups = group_for_widget(tasks, "priority")
        assert [name for name, _ in groups] == ["Highest", "Medium", "Lowest", "No Priority"]

    def test_due_mode_has_next_week(self, make_task):
        tasks = [make_task("nw", due_date=at(10)), make_task("od", due_date=at(-3)), make_task("nd")]
        groups = group_for_widget(tasks, "due", today=TODAY)
        assert [name for name, _ in groups] == ["Overdue", "Next Week", "No Due Date"]

    def test_status_mode_without_settings(self, make_task):
        tasks = [make_task("doing", status="/"), make_task("todo")]
        groups = group_for_widget(tasks, "status")
        assert [(name, ids(ts)) for name, ts in groups] == [
            ("In Progress", ["doing"]),
            ("Todo", ["todo"]),
        ]

    def test_bare_hash_tag_counts_as_untagged(self, make_task):
        groups = group_for_widget([make_task("a", tags=["#"])], "tag")
        assert [(name, ids(ts)) for name, ts in groups] == [("No Tag", ["a"])]

    def test_due_beyond_datetime_range(self, make_task):
        far = make_task("far", due_date=8_640_000_000_000_000)
        groups = group_for_widget([far], "due", today=TODAY)
        assert [name for name, _ in groups] == ["Later"]

    def test_status_mode(self, make_task):
        tasks = [make_task("done", status="x"), make_task("todo"), make_task("doing", status="/")]
        groups = group_for_widget(tasks, "status", Settings())
        assert [name for name, _ in groups] == ["In Progress", "Todo", "Completed"]

    def test_date_mode_newest_first(self, make_task):
        tasks = [make_task("a", due_date=at(1)), make_task("b"), make_task("c", due_date=at(5))]
        groups = group_for_widget(tasks, "date", today=TODAY)
        assert [name for name, _ in groups] == ["2024-05-20", "2024-05-16", "No Due Date"]

    def test_project_mode(self, make_task):
        tasks = [make_task("a"), make_task("b", project="beta"), make_task("c", project="Alpha")]
        groups = group_for_widget(tasks, "project")
        assert [name for name, _ in groups] == ["Alpha", "beta", "No Project"]


class TestLabels:
    def test_priority_group_name(self):
        assert priority_group_name(4) == "High"
        assert priority_group_name(None) == "No Priority"
        assert priority_group_name(9) == "No Priority"

    def test_status_label_fallback(self, make_task):
        settings = Settings(count_other_statuses_as="planned")
        assert status_group_label(make_task("a", status="!"), settings) == "Planned"

    def test_status_label_without_settings(self, make_task):
        assert status_group_label(make_task("a", status="/")) == "In Progress"
        assert status_group_label(make_task("a", status="!")) == "Todo"

    def test_empty_status_uses_completion(self, make_task):
        assert status_group_label(make_task("a", status="", completed=True), Settings()) == "Completed"


class TestKanban:
    def test_default_columns(self, make_task):
        tasks = [
            make_task("todo"),
            make_task("doing", status="/"),
            make_task("done", status="X"),
            make_task("odd", status=" ", completed=True),
        ]
        todo, doing, done = DEFAULT_COLUMNS
        assert ids(tasks_for_column(tasks, todo)) == ["todo", "odd"]
        assert ids(tasks_for_column(tasks, doing)) == ["doing"]
        assert ids(tasks_for_column(tasks, done)) == ["done", "odd"]

    def test_custom_column(self, make_task):
        column = KanbanColumn("waiting", "Waiting", ("w",))
        assert ids(tasks_for_column([make_task("a", status="w"), make_task("b")], column)) == ["a"]
