"""Tests for ``of tasks`` and ``of search``."""

import pytest

from omnifocus_mcp.core.errors import NotFoundError
from omnifocus_mcp.core.omnifocus import Task, TaskStats


def _task(**overrides):
    return Task.model_validate({"id": "t1", "name": "Buy milk", **overrides})


class TestTasksList:
    def test_defaults(self, invoke, of_client):
        of_client.list_tasks.return_value = [_task(), _task(id="t2", name="Call mom", flagged=True)]
        result, envelope = invoke("tasks", "list")
        assert result.exit_code == 0
        assert envelope["success"] is True
        assert envelope["data"]["count"] == 2
        assert envelope["data"]["tasks"][1]["flagged"] is True
        assert "estimatedMinutes" in envelope["data"]["tasks"][0]
        of_client.list_tasks.assert_called_once_with(
            flagged=None, project=None, tag=None, include_completed=False, include_dropped=False
        )

    def test_filters_and_alias(self, invoke, of_client):
        of_client.list_tasks.return_value = []
        result, _ = invoke("tasks", "ls", "-f", "-p", "Home", "-t", "Errands", "--completed")
        assert result.exit_code == 0
        of_client.list_tasks.assert_called_once_with(
            flagged=True, project="Home", tag="Errands", include_completed=True, include_dropped=False
        )


class TestTasksGet:
    def test_found(self, invoke, of_client):
        of_client.get_task.return_value = _task(note="2%")
        result, envelope = invoke("tasks", "view", "Buy milk")
        assert result.exit_code == 0
        assert envelope["data"]["task"]["note"] == "2%"
        of_client.get_task.assert_called_once_with("Buy milk")

    def test_not_found_exits_1(self, invoke, of_client):
        of_client.get_task.side_effect = NotFoundError("Task not found: nope", kind="Task", identifier="nope")
        result, envelope = invoke("tasks", "get", "nope")
        assert result.exit_code == 1
        assert envelope["success"] is False
        assert envelope["data"]["error_code"] == "NOT_FOUND"
        assert envelope["data"]["details"]["identifier"] == "nope"


class TestTasksCreate:
    def test_all_options(self, invoke, of_client):
        of_client.create_task.return_value = _task(id="n1", name="Pay rent")
        result, envelope = invoke(
            "tasks", "create", "Pay rent",
            "-p", "Home", "-n", "by the 1st", "-t", "Money", "-t", "Home",
            "-d", "2024-07-01", "-f", "-e", "5",
        )
        assert result.exit_code == 0
        assert envelope["data"]["task"]["id"] == "n1"
        of_client.create_task.assert_called_once_with(
            "Pay rent",
            project="Home",
            note="by the 1st",
            tags=["Money", "Home"],
            defer=None,
            due="2024-07-01",
            flagged=True,
            estimated_minutes=5,
        )

    def test_negative_estimate_rejected_by_click(self, invoke, of_client):
        result, _ = invoke("tasks", "create", "X", "-e", "-5")
        assert result.exit_code == 2
        of_client.create_task.assert_not_called()


class TestTasksUpdate:
    def test_changes(self, invoke, of_client):
        of_client.update_task.return_value = _task(flagged=False)
        result, envelope = invoke("tasks", "update", "t1", "--unflag", "--clear-due", "-n", "Buy oat milk")
        assert result.exit_code == 0
        of_client.update_task.assert_called_once_with("t1", name="Buy oat milk", flagged=False, due=None)
        assert envelope["data"]["updated_fields"] == ["due", "flagged", "name"]

    @pytest.mark.parametrize(
        "args, expected",
        [
            (["-f"], {"flagged": True}),
            (["-F"], {"flagged": False}),
            (["-c"], {"completed": True}),
            (["-C"], {"completed": False}),
            (["-F", "-c"], {"flagged": False, "completed": True}),
        ],
    )
    def test_short_flag_and_completion_switches(self, invoke, of_client, args, expected):
        of_client.update_task.return_value = _task()
        result, envelope = invoke("tasks", "update", "t1", *args)
        assert result.exit_code == 0
        of_client.update_task.assert_called_once_with("t1", **expected)
        assert envelope["data"]["updated_fields"] == sorted(expected)

    def test_date_and_clear_conflict(self, invoke, of_client):
        result, envelope = invoke("tasks", "update", "t1", "-d", "2024-07-01", "--clear-due")
        assert result.exit_code == 1
        assert envelope["data"]["error_code"] == "VALIDATION_ERROR"
        assert envelope["data"]["details"] == {"field": "due"}
        of_client.update_task.assert_not_called()

    def test_nothing_to_update(self, invoke, of_client):
        result, envelope = invoke("tasks", "update", "t1")
        assert result.exit_code == 1
        assert envelope["error"] == "No fields to update"
        assert envelope["data"]["error_code"] == "MISSING_REQUIRED"


def test_delete_alias(invoke, of_client):
    of_client.delete_task.return_value = {"id": "t1", "name": "Buy milk"}
    result, envelope = invoke("tasks", "rm", "t1")
    assert result.exit_code == 0
    assert envelope["data"] == {"deleted": {"id": "t1", "name": "Buy milk"}}


def test_stats(invoke, of_client):
    of_client.get_task_stats.return_value = TaskStats(
        total_tasks=4,
        active_tasks=3,
        completed_tasks=1,
        flagged_tasks=1,
        overdue_active_tasks=0,
        avg_estimated_minutes=None,
        tasks_with_estimates=0,
        completion_rate=25,
        tasks_by_project=[],
        tasks_by_tag=[],
    )
    result, envelope = invoke("tasks", "stats")
    assert result.exit_code == 0
    assert envelope["data"]["stats"]["completionRate"] == 25


def test_search(invoke, of_client):
    of_client.search_tasks.return_value = [_task()]
    result, envelope = invoke("search", "milk")
    assert result.exit_code == 0
    assert envelope["data"]["query"] == "milk"
    assert envelope["data"]["count"] == 1
    of_client.search_tasks.assert_called_once_with("milk")
