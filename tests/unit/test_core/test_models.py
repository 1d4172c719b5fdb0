"""Tests for typed records and request options."""

import pytest

from omnifocus_mcp.core.errors import ValidationError
from omnifocus_mcp.core.omnifocus.models import (
    CreateTaskOptions,
    Folder,
    Project,
    TagListOptions,
    Task,
    UpdateTaskOptions,
    build_options,
)


class TestRecords:
    def test_task_round_trips_camel_case(self, make_task):
        record = make_task(estimatedMinutes=15, effectivelyActive=False, tags=["Home"])
        task = Task.model_validate(record)
        assert task.estimated_minutes == 15
        assert task.effectively_active is False
        assert task.to_dict() == record

    def test_project_defaults(self):
        project = Project.model_validate({"id": "p1", "name": "Home"})
        assert project.status == "active"
        assert project.to_dict()["remainingCount"] == 0

    def test_nested_folders(self):
        folder = Folder.model_validate(
            {"id": "f1", "name": "Work", "children": [{"id": "f2", "name": "Clients", "status": "dropped"}]}
        )
        assert folder.children[0].status == "dropped"
        assert folder.to_dict()["children"][0]["projectCount"] == 0


class TestBuildOptions:
    def test_none_values_dropped(self):
        options = build_options(CreateTaskOptions, name="x", note=None, flagged=None)
        assert options.flagged is False
        assert options.model_fields_set == {"name"}

    def test_update_keeps_none_dates(self):
        options = build_options(UpdateTaskOptions, due=None, note=None)
        assert options.model_fields_set == {"due"}

    def test_invalid_value_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            build_options(CreateTaskOptions, name="x", estimated_minutes=-5)
        assert exc_info.value.field == "estimated_minutes"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            build_options(CreateTaskOptions, name="")

    def test_unknown_sort_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            build_options(TagListOptions, sort_by="color")
        assert exc_info.value.field == "sort_by"
