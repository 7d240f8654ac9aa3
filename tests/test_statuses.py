"""Tests for status groups and status cycling."""

from taskview.settings import Settings
from taskview.statuses import (
    ABANDONED,
    COMPLETED,
    IN_PROGRESS,
    NOT_STARTED,
    PLANNED,
    is_abandoned_mark,
    is_completed_mark,
    next_status_mark,
    split_marks,
    status_group_for_mark,
    status_ordinal,
)


class TestSplitMarks:
    def test_keeps_space_mark(self):
        assert split_marks(" ") == [" "]

    def test_splits_pipes(self):
        assert split_marks("x|X") == ["x", "X"]


class TestStatusGroupForMark:
    def test_default_groups(self):
        assert status_group_for_mark("x") == COMPLETED
        assert status_group_for_mark("X") == COMPLETED
        assert status_group_for_mark("/") == IN_PROGRESS
        assert status_group_for_mark(">") == IN_PROGRESS
        assert status_group_for_mark("-") == ABANDONED
        assert status_group_for_mark("?") == PLANNED
        assert status_group_for_mark(" ") == NOT_STARTED

    def test_unknown_mark_uses_fallback(self):
        assert status_group_for_mark("!") == NOT_STARTED
        settings = Settings(count_other_statuses_as=IN_PROGRESS)
        assert status_group_for_mark("!", settings) == IN_PROGRESS

    def test_case_insensitive_fallback_match(self):
        settings = Settings(task_statuses={"completed": "d", "notStarted": " "})
        assert status_group_for_mark("D", settings) == COMPLETED

    def test_helpers(self):
        assert is_completed_mark("x")
        assert not is_completed_mark("-")
        assert is_abandoned_mark("-")


class TestStatusOrdinal:
    def test_in_progress_before_todo_before_completed(self):
        assert status_ordinal(IN_PROGRESS) < status_ordinal(NOT_STARTED) < status_ordinal(COMPLETED)

    def test_unknown_group_sorts_last(self):
        assert status_ordinal("mystery") > status_ordinal(ABANDONED)


class TestNextStatusMark:
    def test_default_cycle(self):
        assert next_status_mark(" ") == "/"
        assert next_status_mark("/") == "x"
        assert next_status_mark("x") == "-"

    def test_wraps_around(self):
        assert next_status_mark("?") == " "

    def test_unknown_mark_starts_cycle(self):
        assert next_status_mark("!") == " "

    def test_case_insensitive_mark(self):
        assert next_status_mark("X") == "-"

    def test_excluded_statuses_are_skipped(self):
        settings = Settings(exclude_marks_from_cycle=["in progress", "Abandoned"])
        assert next_status_mark(" ", settings) == "x"
        assert next_status_mark("x", settings) == "?"

    def test_empty_cycle_returns_none(self):
        settings = Settings(task_status_cycle=["Todo"], exclude_marks_from_cycle=["todo"])
        assert next_status_mark(" ", settings) is None
