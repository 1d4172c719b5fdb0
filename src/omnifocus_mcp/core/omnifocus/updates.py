"""Update compilers.

Translate an update request into nodes: first the lookups (move target,
requested tags, status values), then one mutation per supplied field in a
fixed order. A lookup that fails with ``not_found`` or ``ambiguous`` stops
the script before anything is written.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from omnifocus_mcp.core.omnifocus.literals import literal, literal_list, scalar
from omnifocus_mcp.core.omnifocus.models import (
    DatePatch,
    UpdateProjectOptions,
    UpdateTagOptions,
    UpdateTaskOptions,
)
from omnifocus_mcp.core.omnifocus.nodes import Assign, Bind, Code, HelperCall, Invoke, Node
from omnifocus_mcp.core.omnifocus.store import OMNIFOCUS_STORE, Store


def _supplied(options, field: str) -> bool:
    return field in options.model_fields_set and getattr(options, field) is not None


def date_assignment(target: str, attribute: str, patch: DatePatch) -> Optional[Assign]:
    """Render a tri-state date patch as an assignment, or ``None`` to keep the date."""
    if patch.mode == "keep":
        return None
    if patch.mode == "clear":
        return Assign(target, attribute, Code("null"))
    return Assign(target, attribute, Code.fill("new Date({d})", d=literal(patch.value)))


def find_by_name(collection: str, name: str, kind: str) -> Code:
    """Expression resolving *name* in *collection* by exact name."""
    return HelperCall("findByName", (Code(collection), literal(name), literal(kind))).expression()


def resolve_tags(identifiers: List[str]) -> Code:
    """Expression resolving every tag id, path or name, failing on the first miss."""
    return HelperCall("resolveTags", (Code(literal_list(identifiers)),)).expression()


def compile_task_updates(
    options: UpdateTaskOptions,
    target: str = "task",
    store: Store = OMNIFOCUS_STORE,
) -> Tuple[Node, ...]:
    """Lookups, then mutations, for a task update.

    Mutation order: name, note, flagged, completion, estimate, defer, due,
    project move, tag replacement. Completion goes through
    markComplete/markIncomplete so the application's own completion rules run.
    """
    lookups: List[Node] = []
    nodes: List[Node] = []

    if _supplied(options, "name"):
        nodes.append(Assign(target, "name", literal(options.name)))
    if _supplied(options, "note"):
        nodes.append(Assign(target, "note", literal(options.note)))
    if _supplied(options, "flagged"):
        nodes.append(Assign(target, "flagged", Code(scalar(options.flagged))))
    if _supplied(options, "completed"):
        nodes.append(Invoke(target, "markComplete" if options.completed else "markIncomplete"))
    if _supplied(options, "estimated_minutes"):
        nodes.append(Assign(target, "estimatedMinutes", Code(scalar(options.estimated_minutes))))

    for field, attribute in (("defer", "deferDate"), ("due", "dueDate")):
        assignment = date_assignment(target, attribute, options.date_patch(field))
        if assignment is not None:
            nodes.append(assignment)

    if _supplied(options, "project") and options.project:
        lookups.append(Bind("targetProject", find_by_name(store.projects, options.project, "Project")))
        nodes.append(HelperCall("moveTasks", (Code(f"[{target}]"), Code("targetProject"))))
    if _supplied(options, "tags"):
        lookups.append(Bind("targetTags", resolve_tags(options.tags)))
        nodes.append(HelperCall("replaceTagsOn", (Code(target), Code("targetTags"))))

    return (*lookups, *nodes)


def compile_project_updates(
    options: UpdateProjectOptions,
    target: str = "project",
    store: Store = OMNIFOCUS_STORE,
) -> Tuple[Node, ...]:
    """Lookups, then mutations: name, note, sequential, status, folder move, tags."""
    lookups: List[Node] = []
    nodes: List[Node] = []

    if _supplied(options, "name"):
        nodes.append(Assign(target, "name", literal(options.name)))
    if _supplied(options, "note"):
        nodes.append(Assign(target, "note", literal(options.note)))
    if _supplied(options, "sequential"):
        nodes.append(Assign(target, "sequential", Code(scalar(options.sequential))))
    if _supplied(options, "status"):
        lookups.append(
            Bind("targetStatus", HelperCall("stringToProjectStatus", (literal(options.status),)).expression())
        )
        nodes.append(Assign(target, "status", Code("targetStatus")))
    if _supplied(options, "folder") and options.folder:
        lookups.append(Bind("targetFolder", find_by_name(store.folders, options.folder, "Folder")))
        nodes.append(HelperCall("moveSections", (Code(f"[{target}]"), Code("targetFolder"))))
    if _supplied(options, "tags"):
        lookups.append(Bind("targetTags", resolve_tags(options.tags)))
        nodes.append(HelperCall("replaceTagsOn", (Code(target), Code("targetTags"))))

    return (*lookups, *nodes)


def compile_tag_updates(options: UpdateTagOptions, target: str = "tag") -> Tuple[Node, ...]:
    """Status lookup, then mutations: name, then status."""
    lookups: List[Node] = []
    nodes: List[Node] = []

    if _supplied(options, "name"):
        nodes.append(Assign(target, "name", literal(options.name)))
    if _supplied(options, "status"):
        lookups.append(Bind("targetStatus", HelperCall("stringToTagStatus", (literal(options.status),)).expression()))
        nodes.append(Assign(target, "status", Code("targetStatus")))

    return (*lookups, *nodes)
