"""JSON lines formatter."""

import json

from taskview.models import TaskGroup


class JsonlFormatter:
    """Format groups as JSON lines (one JSON object per group).

    Tasks are embedded in full so the output can be consumed without the
    input snapshot.
    """

    NAME = "jsonl"

    def _group_to_dict(self, group: TaskGroup) -> dict:
        obj = group.to_dict()
        obj["tasks"] = [task.to_dict() for task in group.tasks]
        if group.children is not None:
            obj["children"] = [self._group_to_dict(child) for child in group.children]
        return obj

    def format(self, groups: list[TaskGroup]) -> str:
        if not groups:
            return ""
        return "\n".join(json.dumps(self._group_to_dict(group)) for group in groups)
