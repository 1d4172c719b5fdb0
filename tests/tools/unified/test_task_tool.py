"""Tests for the unified task tool handlers."""

from omnifocus_mcp.core.omnifocus import TaskStats
from omnifocus_mcp.tools.unified.task import _dispatch_task_action


def _call(action, config, **payload):
    return _dispatch_task_action(action=action, payload=payload, config=config)


class TestTaskList:
    def test_list_returns_camel_case_records(self, mock_config, mock_client, task_model):
        mock_client.list_tasks.return_value = [task_model(estimated_minutes=10)]
        result = _call("list", mock_config, flagged=True)

        assert result["success"] is True
        assert result["data"]["count"] == 1
        assert result["data"]["tasks"][0]["estimatedMinutes"] == 10
        mock_client.list_tasks.assert_called_once_with(
            include_completed=False, include_dropped=False, flagged=True, project=None, tag=None
        )

    def test_list_rejects_non_boolean_flag(self, mock_config, mock_client):
        result = _call("list", mock_config, flagged="yes")
        assert result["success"] is False
        assert result["data"]["error_code"] == "INVALID_FORMAT"
        assert result["data"]["details"]["field"] == "flagged"
        mock_client.list_tasks.assert_not_called()


class TestTaskCreate:
    def test_create_normalizes_due_date(self, mock_config, mock_client, task_model):
        mock_client.create_task.return_value = task_model(name="Pay rent")
        result = _call("create", mock_config, name="  Pay rent ", due="2024-07-01T09:00:00Z", tags=["Home", " "])

        assert result["data"]["task"]["name"] == "Pay rent"
        args, kwargs = mock_client.create_task.call_args
        assert args == ("Pay rent",)
        assert kwargs["due"] == "2024-07-01T09:00:00.000Z"
        assert kwargs["tags"] == ["Home"]
        assert kwargs["flagged"] is False

    def test_add_alias(self, mock_config, mock_client, task_model):
        mock_client.create_task.return_value = task_model()
        assert _call("add", mock_config, name="x")["success"] is True

    def test_missing_name(self, mock_config, mock_client):
        result = _call("create", mock_config, name="   ")
        assert result["data"]["error_code"] == "MISSING_REQUIRED"
        assert "task.create" in result["error"]

    def test_invalid_date(self, mock_config, mock_client):
        result = _call("create", mock_config, name="x", due="someday")
        assert result["data"]["error_code"] == "INVALID_FORMAT"
        assert result["data"]["details"]["field"] == "due"

    def test_negative_estimate(self, mock_config, mock_client):
        result = _call("create", mock_config, name="x", estimated_minutes=-1)
        assert result["success"] is False
        assert result["data"]["details"]["field"] == "estimated_minutes"


class TestTaskUpdate:
    def test_clear_due_passes_none(self, mock_config, mock_client, task_model):
        mock_client.update_task.return_value = task_model()
        result = _call("update", mock_config, task_id="t1", clear_due=True, flagged=False)

        mock_client.update_task.assert_called_once_with("t1", flagged=False, due=None)
        assert result["data"]["updated_fields"] == ["due", "flagged"]

    def test_value_and_clear_conflict(self, mock_config, mock_client):
        result = _call("update", mock_config, task_id="t1", due="2024-01-01", clear_due=True)
        assert result["data"]["error_code"] == "VALIDATION_ERROR"
        assert result["data"]["details"]["field"] == "due"
        mock_client.update_task.assert_not_called()

    def test_nothing_to_update(self, mock_config, mock_client):
        result = _call("update", mock_config, task_id="t1")
        assert result["error"] == "No fields to update"
        assert result["data"]["error_code"] == "MISSING_REQUIRED"


class TestTaskOtherActions:
    def test_delete(self, mock_config, mock_client):
        mock_client.delete_task.return_value = {"id": "t1", "name": "Gone"}
        assert _call("remove", mock_config, task_id="t1")["data"]["deleted"] == {"id": "t1", "name": "Gone"}

    def test_search(self, mock_config, mock_client, task_model):
        mock_client.search_tasks.return_value = [task_model()]
        result = _call("search", mock_config, query=" milk ")
        mock_client.search_tasks.assert_called_once_with("milk")
        assert result["data"]["query"] == "milk"
        assert result["data"]["count"] == 1

    def test_stats(self, mock_config, mock_client):
        mock_client.get_task_stats.return_value = TaskStats(
            total_tasks=0,
            active_tasks=0,
            completed_tasks=0,
            flagged_tasks=0,
            overdue_active_tasks=0,
            avg_estimated_minutes=None,
            tasks_with_estimates=0,
            completion_rate=0,
            tasks_by_project=[],
            tasks_by_tag=[],
        )
        result = _call("stats", mock_config)
        assert result["data"]["stats"]["completionRate"] == 0
        assert result["data"]["stats"]["avgEstimatedMinutes"] is None
