"""Tests for the OmniFocus facade with a faked script runner."""

from unittest.mock import MagicMock, patch

import pytest

from omnifocus_mcp.core.errors import NotFoundError, ValidationError
from omnifocus_mcp.core.omnifocus import OmniFocus
from omnifocus_mcp.core.omnifocus.nodes import render_nodes


def _executed_body(runner, call=-1):
    script = runner.execute.call_args_list[call].args[0]
    return render_nodes(script.body)


class TestFromConfig:
    def test_builds_runner_from_config(self):
        config = MagicMock(
            interpreter="/usr/bin/osascript",
            application="OmniFocus 4",
            script_timeout=12.0,
            perspective_timeout=90.0,
            max_output_bytes=1024,
        )
        client = OmniFocus.from_config(config)
        assert client.runner.interpreter == "/usr/bin/osascript"
        assert client.runner.application == "OmniFocus 4"
        assert client.runner.timeout == 12.0
        assert client.runner.max_output_bytes == 1024
        assert client.perspective_timeout == 90.0


class TestTasks:
    def test_list_tasks_parses_records(self, client, runner, make_task):
        runner.execute.return_value = [make_task(id="a"), make_task(id="b", flagged=True)]
        tasks = client.list_tasks(flagged=True, project=None)
        assert [t.id for t in tasks] == ["a", "b"]
        assert "task.taskStatus !== Task.Status.Available" in _executed_body(runner)

    def test_get_task_propagates_not_found(self, client, runner):
        runner.execute.side_effect = NotFoundError("Task not found: nope")
        with pytest.raises(NotFoundError):
            client.get_task("nope")

    def test_create_task_normalizes_dates(self, client, runner, make_task):
        runner.execute.return_value = make_task(name="Pay rent")
        client.create_task("Pay rent", due="2024-07-01T09:00:00+02:00")
        assert 'task.dueDate = new Date("2024-07-01T07:00:00.000Z");' in _executed_body(runner)

    def test_create_task_rejects_bad_date_before_running(self, client, runner):
        with pytest.raises(ValidationError):
            client.create_task("Pay rent", due="someday")
        runner.execute.assert_not_called()

    def test_update_task_clears_due(self, client, runner, make_task):
        runner.execute.return_value = make_task()
        client.update_task("t1", due=None)
        body = _executed_body(runner)
        assert "task.dueDate = null;" in body
        assert "deferDate" not in body

    def test_writes_are_audited(self, client, runner, make_task):
        runner.execute.return_value = make_task(id="t9", name="Audit me")
        with patch.object(client, "_audit") as audit:
            client.create_task("Audit me")
        audit.resource_change.assert_called_once_with("task", "t9", "create", name="Audit me")

    def test_delete_task_returns_identity(self, client, runner):
        runner.execute.return_value = {"id": "t1", "name": "Gone"}
        assert client.delete_task("t1") == {"id": "t1", "name": "Gone"}

    def test_task_stats_use_all_tasks(self, client, runner, make_task, now):
        runner.execute.return_value = [make_task(), make_task(id="t2", completed=True, effectivelyActive=False)]
        stats = client.get_task_stats(now=now)
        assert stats.completion_rate == 50
        assert "continue;" not in _executed_body(runner)


class TestPerspectivesAndInbox:
    def test_perspective_uses_long_timeout(self, client, runner, make_task):
        runner.execute.return_value = [make_task()]
        client.get_perspective_tasks("Flagged")
        assert runner.execute.call_args.kwargs["timeout"] == 60.0

    def test_inbox_count(self, client, runner, make_task):
        runner.execute.return_value = [make_task(id="a"), make_task(id="b")]
        assert client.get_inbox_count() == 2
        assert 'showPerspective("Inbox")' in _executed_body(runner)

    def test_list_perspectives(self, client, runner):
        runner.execute.return_value = [{"id": "Inbox", "name": "Inbox"}]
        assert [p.name for p in client.list_perspectives()] == ["Inbox"]


class TestProjectsTagsFolders:
    def test_project_stats(self, client, runner):
        runner.execute.return_value = [
            {"id": "p1", "name": "A", "status": "active", "taskCount": 2, "remainingCount": 1, "folderActive": True}
        ]
        assert client.get_project_stats().avg_completion_rate == 50

    def test_invalid_project_status(self, client, runner):
        with pytest.raises(ValidationError):
            client.list_projects(status="paused")
        runner.execute.assert_not_called()

    def test_list_tags_sorts_locally(self, client, runner):
        runner.execute.return_value = [
            {"id": "2", "name": "b", "taskCount": 1},
            {"id": "1", "name": "a", "taskCount": 9},
        ]
        assert [t.name for t in client.list_tags(sort_by="usage")] == ["a", "b"]
        assert [t.name for t in client.list_tags()] == ["a", "b"]

    def test_list_tags_active_only(self, client, runner):
        runner.execute.return_value = []
        client.list_tags(active_only=True)
        assert "serializeTag(tag, true)" in _executed_body(runner)

    def test_get_folder(self, client, runner):
        runner.execute.return_value = {"id": "f1", "name": "Work", "children": []}
        assert client.get_folder("Work").name == "Work"
        assert "serializeFolder(folder, false)" in _executed_body(runner)
