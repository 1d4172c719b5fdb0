"""Typed records and request options for the task store.

Records mirror what the generated scripts serialize (camelCase on the wire,
snake_case in Python). Options are transient request objects: every field is
optional, and for update requests "not supplied" is distinct from "supplied
as null" (see :meth:`UpdateTaskOptions.date_patch`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from omnifocus_mcp.core.errors import ValidationError

ProjectStatus = Literal["active", "on hold", "dropped"]
TagStatus = Literal["active", "on hold", "dropped"]
FolderStatus = Literal["active", "dropped"]
TagSort = Literal["name", "usage", "activity"]

PROJECT_STATUSES = ("active", "on hold", "dropped")
TAG_STATUSES = ("active", "on hold", "dropped")
TAG_SORTS = ("name", "usage", "activity")

BUILTIN_PERSPECTIVES = ("Inbox", "Flagged", "Forecast", "Projects", "Tags", "Nearby", "Review")


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """Dump using the camelCase wire names."""
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Task(_Model):
    id: str
    name: str
    note: Optional[str] = None
    completed: bool = False
    dropped: bool = False
    effectively_active: bool = True
    flagged: bool = False
    project: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    defer: Optional[str] = None
    due: Optional[str] = None
    estimated_minutes: Optional[int] = None
    completion_date: Optional[str] = None
    added: Optional[str] = None
    modified: Optional[str] = None


class Project(_Model):
    id: str
    name: str
    note: Optional[str] = None
    status: ProjectStatus = "active"
    folder: Optional[str] = None
    sequential: bool = False
    task_count: int = 0
    remaining_count: int = 0
    tags: List[str] = Field(default_factory=list)


class ProjectFacts(Project):
    """A project plus its parent folder's active state, used for statistics."""

    folder_active: bool = True


class Tag(_Model):
    id: str
    name: str
    task_count: int = 0
    remaining_task_count: int = 0
    added: Optional[str] = None
    modified: Optional[str] = None
    last_activity: Optional[str] = None
    active: bool = True
    status: TagStatus = "active"
    parent: Optional[str] = None
    children: List[str] = Field(default_factory=list)
    allows_next_action: bool = True


class Folder(_Model):
    id: str
    name: str
    status: FolderStatus = "active"
    effectively_active: bool = True
    parent: Optional[str] = None
    project_count: int = 0
    remaining_project_count: int = 0
    folder_count: int = 0
    children: List["Folder"] = Field(default_factory=list)


class Perspective(_Model):
    id: str
    name: str


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class NameCount(_Model):
    name: str
    task_count: int


class NameRemaining(_Model):
    name: str
    remaining_count: int


class StaleTag(_Model):
    name: str
    days_since_activity: int


class TaskStats(_Model):
    total_tasks: int
    active_tasks: int
    completed_tasks: int
    flagged_tasks: int
    overdue_active_tasks: int
    avg_estimated_minutes: Optional[int]
    tasks_with_estimates: int
    completion_rate: int
    tasks_by_project: List[NameCount]
    tasks_by_tag: List[NameCount]


class ProjectStats(_Model):
    total_projects: int
    active_projects: int
    on_hold_projects: int
    dropped_projects: int
    sequential_projects: int
    parallel_projects: int
    avg_tasks_per_project: float
    avg_remaining_per_project: float
    avg_completion_rate: int
    projects_with_most_tasks: List[NameCount]
    projects_with_most_remaining: List[NameRemaining]


class TagStats(_Model):
    total_tags: int
    active_tags: int
    tags_with_tasks: int
    unused_tags: int
    avg_tasks_per_tag: float
    most_used_tags: List[NameCount]
    least_used_tags: List[NameCount]
    stale_tags: List[StaleTag]


# ---------------------------------------------------------------------------
# Request options
# ---------------------------------------------------------------------------


class TaskFilters(_Model):
    include_completed: bool = False
    include_dropped: bool = False
    flagged: Optional[bool] = None
    project: Optional[str] = None
    tag: Optional[str] = None


class ProjectFilters(_Model):
    include_dropped: bool = False
    status: Optional[ProjectStatus] = None
    folder: Optional[str] = None


class FolderFilters(_Model):
    include_dropped: bool = False


class TagListOptions(_Model):
    unused_days: Optional[int] = Field(default=None, ge=0)
    sort_by: TagSort = "name"
    active_only: bool = False


class CreateTaskOptions(_Model):
    name: str = Field(min_length=1)
    note: Optional[str] = None
    project: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    defer: Optional[str] = None
    due: Optional[str] = None
    flagged: bool = False
    estimated_minutes: Optional[int] = Field(default=None, ge=0)


@dataclass(frozen=True)
class DatePatch:
    """Tri-state date update: leave the date alone, clear it, or set it."""

    mode: Literal["keep", "clear", "set"]
    value: Optional[str] = None

    @classmethod
    def keep(cls) -> "DatePatch":
        return cls("keep")

    @classmethod
    def clear(cls) -> "DatePatch":
        return cls("clear")

    @classmethod
    def set_to(cls, value: str) -> "DatePatch":
        return cls("set", value)


class UpdateTaskOptions(_Model):
    """Fields to change on a task.

    Only supplied fields produce a mutation. ``defer`` and ``due`` supplied as
    ``None`` clear the date; leaving them out keeps it.
    """

    name: Optional[str] = Field(default=None, min_length=1)
    note: Optional[str] = None
    project: Optional[str] = None
    tags: Optional[List[str]] = None
    defer: Optional[str] = None
    due: Optional[str] = None
    flagged: Optional[bool] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=0)
    completed: Optional[bool] = None

    def date_patch(self, name: Literal["defer", "due"]) -> DatePatch:
        if name not in self.model_fields_set:
            return DatePatch.keep()
        value = getattr(self, name)
        if value is None:
            return DatePatch.clear()
        return DatePatch.set_to(value)


class CreateProjectOptions(_Model):
    name: str = Field(min_length=1)
    note: Optional[str] = None
    folder: Optional[str] = None
    sequential: Optional[bool] = None
    tags: List[str] = Field(default_factory=list)
    status: Optional[ProjectStatus] = None


class UpdateProjectOptions(_Model):
    name: Optional[str] = Field(default=None, min_length=1)
    note: Optional[str] = None
    folder: Optional[str] = None
    sequential: Optional[bool] = None
    tags: Optional[List[str]] = None
    status: Optional[ProjectStatus] = None


class CreateTagOptions(_Model):
    name: str = Field(min_length=1)
    parent: Optional[str] = None
    status: Optional[TagStatus] = None


class UpdateTagOptions(_Model):
    name: Optional[str] = Field(default=None, min_length=1)
    status: Optional[TagStatus] = None


ModelT = TypeVar("ModelT", bound=BaseModel)


def build_options(model: Type[ModelT], **values: Any) -> ModelT:
    """Construct *model* from caller values, raising :class:`ValidationError` on bad input.

    Keys whose value is ``None`` are dropped, except the tri-state date keys of
    an update: callers omit those to keep the date and pass ``None`` to clear it.
    """
    tri_state = {"defer", "due"} if model is UpdateTaskOptions else set()
    supplied = {key: value for key, value in values.items() if value is not None or key in tri_state}
    try:
        return model(**supplied)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        names = {info.alias or name: name for name, info in model.model_fields.items()}
        field = ".".join(names.get(str(part), str(part)) for part in first.get("loc", ())) or None
        raise ValidationError(f"Invalid {field or 'value'}: {first.get('msg')}", field=field) from exc
