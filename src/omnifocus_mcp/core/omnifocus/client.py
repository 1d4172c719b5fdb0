"""The ``OmniFocus`` facade.

One method per store operation. Each method validates caller input, builds
a script, runs it through the :class:`ScriptRunner` and returns typed
records. Statistics are computed locally from the records the bridge
returns. Writes are recorded through the audit logger.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from omnifocus_mcp.core.observability import get_audit_logger, get_metrics
from omnifocus_mcp.core.omnifocus import builders, stats
from omnifocus_mcp.core.omnifocus.dates import parse_datetime
from omnifocus_mcp.core.omnifocus.executor import PERSPECTIVE_TIMEOUT, ScriptRunner
from omnifocus_mcp.core.omnifocus.models import (
    CreateProjectOptions,
    CreateTagOptions,
    CreateTaskOptions,
    Folder,
    FolderFilters,
    Perspective,
    Project,
    ProjectFacts,
    ProjectFilters,
    ProjectStats,
    Tag,
    TagListOptions,
    TagStats,
    Task,
    TaskFilters,
    TaskStats,
    UpdateProjectOptions,
    UpdateTagOptions,
    UpdateTaskOptions,
    build_options,
)
from omnifocus_mcp.core.omnifocus.nodes import Script
from omnifocus_mcp.core.omnifocus.store import OMNIFOCUS_STORE, Store

if TYPE_CHECKING:
    from omnifocus_mcp.config import ServerConfig

logger = logging.getLogger(__name__)

_DATE_FIELDS = ("defer", "due")


def _normalize_dates(values: Dict[str, Any]) -> Dict[str, Any]:
    for name in _DATE_FIELDS:
        if values.get(name) is not None:
            values[name] = parse_datetime(values[name], field=name)
    return values


class OmniFocus:
    """Typed access to the OmniFocus task store.

    Args:
        runner: Gateway used to execute generated scripts.
        store: Names of the bridge's global collections.
        perspective_timeout: Timeout for scripts that drive a window.
    """

    def __init__(
        self,
        runner: Optional[ScriptRunner] = None,
        store: Store = OMNIFOCUS_STORE,
        perspective_timeout: float = PERSPECTIVE_TIMEOUT,
    ) -> None:
        self.runner = runner or ScriptRunner()
        self.store = store
        self.perspective_timeout = perspective_timeout
        self._audit = get_audit_logger()
        self._metrics = get_metrics()

    @classmethod
    def from_config(cls, config: "ServerConfig") -> "OmniFocus":
        runner = ScriptRunner(
            interpreter=config.interpreter,
            application=config.application,
            timeout=config.script_timeout,
            max_output_bytes=config.max_output_bytes,
        )
        return cls(runner=runner, perspective_timeout=config.perspective_timeout)

    def _run(self, script: Script, timeout: Optional[float] = None) -> Any:
        with self._metrics.timed("bridge.script"):
            return self.runner.execute(script, timeout=timeout)

    def _changed(self, resource_type: str, record: Dict[str, Any], action: str) -> None:
        self._audit.resource_change(resource_type, record.get("id", ""), action, name=record.get("name"))

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def list_tasks(self, **filters: Any) -> List[Task]:
        options = build_options(TaskFilters, **filters)
        return [Task.model_validate(item) for item in self._run(builders.list_tasks(options, self.store))]

    def get_task(self, identifier: str) -> Task:
        return Task.model_validate(self._run(builders.get_task(identifier, self.store)))

    def create_task(self, name: str, **fields: Any) -> Task:
        """Create a task in the inbox, or in ``project`` when given."""
        options = build_options(CreateTaskOptions, name=name, **_normalize_dates(fields))
        task = Task.model_validate(self._run(builders.create_task(options, self.store)))
        self._changed("task", task.to_dict(), "create")
        return task

    def update_task(self, identifier: str, **changes: Any) -> Task:
        """Apply *changes* to a task.

        Only keys present in *changes* are touched. ``defer=None`` or
        ``due=None`` clears that date.
        """
        options = build_options(UpdateTaskOptions, **_normalize_dates(changes))
        task = Task.model_validate(self._run(builders.update_task(identifier, options, self.store)))
        self._changed("task", task.to_dict(), "update")
        return task

    def delete_task(self, identifier: str) -> Dict[str, Any]:
        deleted = self._run(builders.delete_task(identifier, self.store))
        self._changed("task", deleted, "delete")
        return deleted

    def search_tasks(self, query: str) -> List[Task]:
        return [Task.model_validate(item) for item in self._run(builders.search_tasks(query, self.store))]

    def get_task_stats(self, now: Optional[datetime] = None) -> TaskStats:
        tasks = [Task.model_validate(item) for item in self._run(builders.all_tasks(self.store))]
        return stats.compute_task_stats(tasks, now)

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------

    def list_inbox_tasks(self) -> List[Task]:
        return self.get_perspective_tasks("Inbox")

    def get_inbox_count(self) -> int:
        return len(self.list_inbox_tasks())

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def list_projects(self, **filters: Any) -> List[Project]:
        options = build_options(ProjectFilters, **filters)
        return [Project.model_validate(item) for item in self._run(builders.list_projects(options, self.store))]

    def get_project(self, identifier: str) -> Project:
        return Project.model_validate(self._run(builders.get_project(identifier, self.store)))

    def create_project(self, name: str, **fields: Any) -> Project:
        options = build_options(CreateProjectOptions, name=name, **fields)
        project = Project.model_validate(self._run(builders.create_project(options, self.store)))
        self._changed("project", project.to_dict(), "create")
        return project

    def update_project(self, identifier: str, **changes: Any) -> Project:
        options = build_options(UpdateProjectOptions, **changes)
        project = Project.model_validate(self._run(builders.update_project(identifier, options, self.store)))
        self._changed("project", project.to_dict(), "update")
        return project

    def delete_project(self, identifier: str) -> Dict[str, Any]:
        deleted = self._run(builders.delete_project(identifier, self.store))
        self._changed("project", deleted, "delete")
        return deleted

    def get_project_stats(self) -> ProjectStats:
        facts = [ProjectFacts.model_validate(item) for item in self._run(builders.project_facts(self.store))]
        return stats.compute_project_stats(facts)

    # ------------------------------------------------------------------
    # Perspectives
    # ------------------------------------------------------------------

    def list_perspectives(self) -> List[Perspective]:
        return [Perspective.model_validate(item) for item in self._run(builders.list_perspectives(self.store))]

    def get_perspective_tasks(self, name: str) -> List[Task]:
        """Show perspective *name* in the front window and return its tasks."""
        items = self._run(builders.perspective_tasks(name, self.store), timeout=self.perspective_timeout)
        return [Task.model_validate(item) for item in items]

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def list_tags(self, now: Optional[datetime] = None, **options: Any) -> List[Tag]:
        selection = build_options(TagListOptions, **options)
        tags = [Tag.model_validate(item) for item in self._run(builders.list_tags(selection.active_only, self.store))]
        return stats.select_tags(tags, selection, now)

    def get_tag(self, identifier: str) -> Tag:
        return Tag.model_validate(self._run(builders.get_tag(identifier, self.store)))

    def create_tag(self, name: str, **fields: Any) -> Tag:
        options = build_options(CreateTagOptions, name=name, **fields)
        tag = Tag.model_validate(self._run(builders.create_tag(options, self.store)))
        self._changed("tag", tag.to_dict(), "create")
        return tag

    def update_tag(self, identifier: str, **changes: Any) -> Tag:
        options = build_options(UpdateTagOptions, **changes)
        tag = Tag.model_validate(self._run(builders.update_tag(identifier, options, self.store)))
        self._changed("tag", tag.to_dict(), "update")
        return tag

    def delete_tag(self, identifier: str) -> Dict[str, Any]:
        deleted = self._run(builders.delete_tag(identifier, self.store))
        self._changed("tag", deleted, "delete")
        return deleted

    def get_tag_stats(self, now: Optional[datetime] = None) -> TagStats:
        tags = [Tag.model_validate(item) for item in self._run(builders.list_tags(False, self.store))]
        return stats.compute_tag_stats(tags, now)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def list_folders(self, **filters: Any) -> List[Folder]:
        options = build_options(FolderFilters, **filters)
        return [Folder.model_validate(item) for item in self._run(builders.list_folders(options, self.store))]

    def get_folder(self, identifier: str, include_dropped: bool = False) -> Folder:
        return Folder.model_validate(self._run(builders.get_folder(identifier, include_dropped, self.store)))
