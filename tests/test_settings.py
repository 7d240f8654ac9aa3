"""Tests for settings parsing and view resolution."""

from taskview.models import SortCriterion, SortOrder
from taskview.settings import (
    DEFAULT_SORT_CRITERIA,
    FilterRules,
    Settings,
    SettingsProvider,
    ViewConfig,
    default_view_config,
    get_view_setting_or_default,
)


class TestSettingsFromDict:
    def test_camel_case_plugin_payload(self):
        settings = Settings.from_dict(
            {
                "viewConfiguration": [
                    {
                        "id": "table",
                        "name": "Table",
                        "hideCompletedAndAbandonedTasks": True,
                        "filterBlanks": True,
                        "filterRules": {"tagsInclude": ["#work"], "pathExcludes": "archive, old"},
                        "sortCriteria": [{"field": "dueDate", "order": "asc"}],
                    }
                ],
                "taskStatuses": {"completed": "x|X|v", "abandoned": "-"},
                "countOtherStatusesAs": "inProgress",
            }
        )
        view = settings.view_configuration[0]
        assert view.id == "table"
        assert view.hide_completed_and_abandoned_tasks is True
        assert view.filter_blanks is True
        assert view.filter_rules.tags_include == ["#work"]
        assert view.filter_rules.path_excludes == ["archive", "old"]
        assert view.sort_criteria == [SortCriterion("dueDate", SortOrder.ASC)]
        assert settings.task_statuses["completed"] == "x|X|v"
        assert settings.count_other_statuses_as == "inProgress"

    def test_not_a_dict_gives_defaults(self):
        assert Settings.from_dict(None) == Settings()
        assert Settings.from_dict(["nope"]) == Settings()

    def test_wrong_types_fall_back(self):
        settings = Settings.from_dict(
            {
                "viewConfiguration": "table",
                "taskStatuses": 42,
                "countOtherStatusesAs": 3,
                "nestedFileGroups": "yes",
            }
        )
        defaults = Settings()
        assert settings.view_configuration == []
        assert settings.task_statuses == defaults.task_statuses
        assert settings.count_other_statuses_as == "notStarted"
        assert settings.nested_file_groups is False

    def test_views_without_id_are_skipped(self):
        settings = Settings.from_dict({"viewConfiguration": [{"name": "anon"}, {"id": "ok"}]})
        assert [v.id for v in settings.view_configuration] == ["ok"]

    def test_bool_field_with_wrong_type_uses_default(self):
        view = ViewConfig.from_dict({"id": "v", "hideCompletedAndAbandonedTasks": "true"})
        assert view.hide_completed_and_abandoned_tasks is False

    def test_malformed_sort_criteria_are_dropped(self):
        view = ViewConfig.from_dict({"id": "v", "sortCriteria": [{"order": "asc"}, "x", {"field": "priority"}]})
        assert view.sort_criteria == [SortCriterion("priority", SortOrder.ASC)]


class TestFilterRules:
    def test_missing_fields_mean_no_constraint(self):
        rules = FilterRules.from_dict({})
        assert rules == FilterRules()

    def test_single_project_key(self):
        rules = FilterRules.from_dict({"project": "alpha"})
        assert rules.projects_include == ["alpha"]

    def test_numeric_priority_becomes_expression(self):
        assert FilterRules.from_dict({"priority": 3}).priority == "3"

    def test_blank_expressions_are_none(self):
        rules = FilterRules.from_dict({"dueDate": "  ", "priority": ""})
        assert rules.due_date is None
        assert rules.priority is None


class TestViewResolution:
    def test_configured_view(self):
        view = ViewConfig(id="table", hide_completed_and_abandoned_tasks=False)
        settings = Settings(view_configuration=[view])
        assert get_view_setting_or_default(settings, "table") is view

    def test_missing_view_uses_default(self):
        view = get_view_setting_or_default(Settings(), "inbox")
        assert view == default_view_config("inbox")
        assert view.hide_completed_and_abandoned_tasks is True
        assert view.sort_criteria == DEFAULT_SORT_CRITERIA

    def test_none_settings_uses_default(self):
        assert get_view_setting_or_default(None, "x").id == "x"


class TestSettingsProvider:
    def test_any_object_with_settings_is_a_provider(self):
        class Plugin:
            settings = Settings()

        assert isinstance(Plugin(), SettingsProvider)
