"""Tests for the project, tag, folder, inbox and perspective commands."""

from omnifocus_mcp.core.errors import AmbiguousMatchError, PreconditionError
from omnifocus_mcp.core.omnifocus import Folder, Perspective, Project, Tag, Task


class TestProjects:
    def test_list(self, invoke, of_client):
        of_client.list_projects.return_value = [Project(id="p1", name="Home", status="on hold")]
        result, envelope = invoke("projects", "ls", "-s", "on hold", "-f", "Personal")
        assert result.exit_code == 0
        assert envelope["data"]["projects"][0]["status"] == "on hold"
        of_client.list_projects.assert_called_once_with(folder="Personal", status="on hold", include_dropped=False)

    def test_invalid_status_is_usage_error(self, invoke, of_client):
        result, _ = invoke("projects", "list", "-s", "paused")
        assert result.exit_code == 2
        of_client.list_projects.assert_not_called()

    def test_create(self, invoke, of_client):
        of_client.create_project.return_value = Project(id="p2", name="Garden", sequential=True)
        result, envelope = invoke("projects", "create", "Garden", "-s", "-t", "Outdoors")
        assert result.exit_code == 0
        assert envelope["data"]["project"]["sequential"] is True
        of_client.create_project.assert_called_once_with(
            "Garden", folder=None, note=None, tags=["Outdoors"], sequential=True, status=None
        )

    def test_update_nothing(self, invoke, of_client):
        result, envelope = invoke("projects", "update", "p1")
        assert result.exit_code == 1
        assert envelope["data"]["error_code"] == "MISSING_REQUIRED"


class TestTags:
    def test_list(self, invoke, of_client):
        of_client.list_tags.return_value = [Tag(id="g1", name="Errands", task_count=3)]
        result, envelope = invoke("tags", "list", "-u", "30", "-s", "usage")
        assert result.exit_code == 0
        assert envelope["data"]["tags"][0]["taskCount"] == 3
        of_client.list_tags.assert_called_once_with(unused_days=30, sort_by="usage", active_only=False)

    def test_ambiguous_name(self, invoke, of_client):
        of_client.get_tag.side_effect = AmbiguousMatchError(
            "Multiple tags named 'Office'", candidates=["Work/Office (g1)", "Home/Office (g2)"]
        )
        result, envelope = invoke("tags", "get", "Office")
        assert result.exit_code == 1
        assert envelope["data"]["error_code"] == "AMBIGUOUS_MATCH"
        assert envelope["data"]["details"]["candidates"] == ["Work/Office (g1)", "Home/Office (g2)"]

    def test_update(self, invoke, of_client):
        of_client.update_tag.return_value = Tag(id="g1", name="Errands", status="on hold")
        result, envelope = invoke("tags", "update", "g1", "-s", "on hold")
        assert result.exit_code == 0
        assert envelope["data"]["updated_fields"] == ["status"]
        of_client.update_tag.assert_called_once_with("g1", status="on hold")


class TestFoldersAndInbox:
    def test_folder_get(self, invoke, of_client):
        of_client.get_folder.return_value = Folder(id="f1", name="Work", children=[Folder(id="f2", name="Clients")])
        result, envelope = invoke("folders", "view", "Work", "--dropped")
        assert result.exit_code == 0
        assert envelope["data"]["folder"]["children"][0]["name"] == "Clients"
        of_client.get_folder.assert_called_once_with("Work", include_dropped=True)

    def test_inbox_count(self, invoke, of_client):
        of_client.get_inbox_count.return_value = 4
        result, envelope = invoke("inbox", "count")
        assert result.exit_code == 0
        assert envelope["data"] == {"count": 4}

    def test_inbox_list(self, invoke, of_client):
        of_client.list_inbox_tasks.return_value = [Task(id="t1", name="Loose end")]
        _, envelope = invoke("inbox", "ls")
        assert envelope["data"]["count"] == 1


class TestPerspectives:
    def test_list(self, invoke, of_client):
        of_client.list_perspectives.return_value = [Perspective(id="Inbox", name="Inbox")]
        _, envelope = invoke("perspectives", "list")
        assert envelope["data"]["perspectives"] == [{"id": "Inbox", "name": "Inbox"}]

    def test_tasks_without_window(self, invoke, of_client):
        of_client.get_perspective_tasks.side_effect = PreconditionError("No OmniFocus window is open")
        result, envelope = invoke("perspectives", "view", "Forecast")
        assert result.exit_code == 1
        assert envelope["data"]["error_code"] == "PRECONDITION_FAILED"
        of_client.get_perspective_tasks.assert_called_once_with("Forecast")
