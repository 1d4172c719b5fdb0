"""Script builders, one per store operation.

Each builder returns a :class:`Script` whose body is assembled from the
filter and update compilers plus helper calls. Builders never touch user
text directly; it reaches the IR only as :func:`literal` values.
"""

from __future__ import annotations

from typing import List

from omnifocus_mcp.core.omnifocus.filters import (
    compile_project_filters,
    compile_search,
    compile_task_filters,
)
from omnifocus_mcp.core.omnifocus.literals import literal, scalar
from omnifocus_mcp.core.omnifocus.models import (
    BUILTIN_PERSPECTIVES,
    CreateProjectOptions,
    CreateTagOptions,
    CreateTaskOptions,
    FolderFilters,
    ProjectFilters,
    TaskFilters,
    UpdateProjectOptions,
    UpdateTagOptions,
    UpdateTaskOptions,
)
from omnifocus_mcp.core.omnifocus.nodes import (
    Assign,
    Bind,
    Code,
    Collect,
    HelperCall,
    Node,
    Return,
    Script,
    Skip,
)
from omnifocus_mcp.core.omnifocus.store import OMNIFOCUS_STORE, Store
from omnifocus_mcp.core.omnifocus.updates import (
    compile_project_updates,
    compile_tag_updates,
    compile_task_updates,
    find_by_name,
    resolve_tags,
)

_RESULTS = Code("results")


def _find(helper: str, identifier: str, bind: str) -> HelperCall:
    return HelperCall(helper, (literal(identifier),), bind=bind)


def _delete(helper: str, identifier: str, store: Store) -> Script:
    return Script(
        (
            _find(helper, identifier, bind="target"),
            Bind("deleted", Code("{ id: target.id.primaryKey, name: target.name }")),
            HelperCall("deleteObject", (Code("target"),)),
            Return(Code("deleted")),
        ),
        store=store,
    )


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def list_tasks(filters: TaskFilters, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script(
        (
            Collect("task", store.tasks, Code("serializeTask(task)"), skips=compile_task_filters(filters)),
            Return(_RESULTS),
        ),
        store=store,
    )


def all_tasks(store: Store = OMNIFOCUS_STORE) -> Script:
    """Every task, completed and dropped included (input for task statistics)."""
    return list_tasks(TaskFilters(include_completed=True, include_dropped=True), store)


def get_task(identifier: str, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script((_find("findTask", identifier, bind="task"), Return(Code("serializeTask(task)"))), store=store)


def create_task(options: CreateTaskOptions, store: Store = OMNIFOCUS_STORE) -> Script:
    body: List[Node] = []
    if options.tags:
        body.append(Bind("targetTags", resolve_tags(options.tags)))
    if options.project:
        body.append(Bind("targetProject", find_by_name(store.projects, options.project, "Project")))
        body.append(Bind("task", Code.fill("new Task({name}, targetProject)", name=literal(options.name))))
    else:
        body.append(
            Bind("task", Code.fill("new Task({name}, {inbox})", name=literal(options.name), inbox=Code(store.inbox)))
        )

    if options.note:
        body.append(Assign("task", "note", literal(options.note)))
    if options.flagged:
        body.append(Assign("task", "flagged", Code("true")))
    if options.estimated_minutes:
        body.append(Assign("task", "estimatedMinutes", Code(scalar(options.estimated_minutes))))
    if options.defer:
        body.append(Assign("task", "deferDate", Code.fill("new Date({d})", d=literal(options.defer))))
    if options.due:
        body.append(Assign("task", "dueDate", Code.fill("new Date({d})", d=literal(options.due))))
    if options.tags:
        body.append(HelperCall("assignTags", (Code("task"), Code("targetTags"))))

    body.append(Return(Code("serializeTask(task)")))
    return Script(tuple(body), store=store)


def update_task(identifier: str, options: UpdateTaskOptions, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script(
        (
            _find("findTask", identifier, bind="task"),
            *compile_task_updates(options, store=store),
            Return(Code("serializeTask(task)")),
        ),
        store=store,
    )


def delete_task(identifier: str, store: Store = OMNIFOCUS_STORE) -> Script:
    return _delete("findTask", identifier, store)


def search_tasks(query: str, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script(
        (Collect("task", store.tasks, Code("serializeTask(task)"), skips=compile_search(query)), Return(_RESULTS)),
        store=store,
    )


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def list_projects(filters: ProjectFilters, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script(
        (
            Collect("project", store.projects, Code("serializeProject(project)"), skips=compile_project_filters(filters)),
            Return(_RESULTS),
        ),
        store=store,
    )


def project_facts(store: Store = OMNIFOCUS_STORE) -> Script:
    """Every project with its folder's active state (input for project statistics)."""
    return Script(
        (Collect("project", store.projects, Code("serializeProjectFacts(project)")), Return(_RESULTS)),
        store=store,
    )


def get_project(identifier: str, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script(
        (_find("findProject", identifier, bind="project"), Return(Code("serializeProject(project)"))),
        store=store,
    )


def create_project(options: CreateProjectOptions, store: Store = OMNIFOCUS_STORE) -> Script:
    body: List[Node] = []
    if options.tags:
        body.append(Bind("targetTags", resolve_tags(options.tags)))
    if options.folder:
        body.append(Bind("targetFolder", find_by_name(store.folders, options.folder, "Folder")))
        body.append(Bind("project", Code.fill("new Project({name}, targetFolder)", name=literal(options.name))))
    else:
        body.append(Bind("project", Code.fill("new Project({name})", name=literal(options.name))))

    if options.note:
        body.append(Assign("project", "note", literal(options.note)))
    if options.sequential is not None:
        body.append(Assign("project", "sequential", Code(scalar(options.sequential))))
    if options.status:
        body.append(
            Assign("project", "status", HelperCall("stringToProjectStatus", (literal(options.status),)).expression())
        )
    if options.tags:
        body.append(HelperCall("assignTags", (Code("project"), Code("targetTags"))))

    body.append(Return(Code("serializeProject(project)")))
    return Script(tuple(body), store=store)


def update_project(identifier: str, options: UpdateProjectOptions, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script(
        (
            _find("findProject", identifier, bind="project"),
            *compile_project_updates(options, store=store),
            Return(Code("serializeProject(project)")),
        ),
        store=store,
    )


def delete_project(identifier: str, store: Store = OMNIFOCUS_STORE) -> Script:
    return _delete("findProject", identifier, store)


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


def list_tags(active_only: bool = False, store: Store = OMNIFOCUS_STORE) -> Script:
    emit = Code.fill("serializeTag(tag, {active})", active=Code(scalar(active_only)))
    return Script((Collect("tag", store.tags, emit), Return(_RESULTS)), store=store)


def get_tag(identifier: str, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script((_find("findTag", identifier, bind="tag"), Return(Code("serializeTag(tag, false)"))), store=store)


def create_tag(options: CreateTagOptions, store: Store = OMNIFOCUS_STORE) -> Script:
    body: List[Node] = []
    if options.parent:
        body.append(_find("findTag", options.parent, bind="parentTag"))
        body.append(Bind("tag", Code.fill("new Tag({name}, parentTag)", name=literal(options.name))))
    else:
        body.append(Bind("tag", Code.fill("new Tag({name})", name=literal(options.name))))
    if options.status:
        body.append(Assign("tag", "status", HelperCall("stringToTagStatus", (literal(options.status),)).expression()))
    body.append(Return(Code("serializeTag(tag, false)")))
    return Script(tuple(body), store=store)


def update_tag(identifier: str, options: UpdateTagOptions, store: Store = OMNIFOCUS_STORE) -> Script:
    return Script(
        (
            _find("findTag", identifier, bind="tag"),
            *compile_tag_updates(options),
            Return(Code("serializeTag(tag, false)")),
        ),
        store=store,
    )


def delete_tag(identifier: str, store: Store = OMNIFOCUS_STORE) -> Script:
    return _delete("findTag", identifier, store)


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------


def list_folders(filters: FolderFilters, store: Store = OMNIFOCUS_STORE) -> Script:
    include = Code(scalar(filters.include_dropped))
    skips = () if filters.include_dropped else (Skip(Code("!folder.effectiveActive")),)
    return Script(
        (
            Collect(
                "folder",
                store.top_level_folders,
                Code.fill("serializeFolder(folder, {include})", include=include),
                skips=skips,
            ),
            Return(_RESULTS),
        ),
        store=store,
    )


def get_folder(identifier: str, include_dropped: bool = False, store: Store = OMNIFOCUS_STORE) -> Script:
    include = Code(scalar(include_dropped))
    return Script(
        (
            _find("findFolder", identifier, bind="folder"),
            Return(Code.fill("serializeFolder(folder, {include})", include=include)),
        ),
        store=store,
    )


# ---------------------------------------------------------------------------
# Perspectives
# ---------------------------------------------------------------------------


def list_perspectives(store: Store = OMNIFOCUS_STORE) -> Script:
    built_ins = ", ".join(
        Code.fill("{{ id: {name}, name: {name} }}", name=literal(name)).source for name in BUILTIN_PERSPECTIVES
    )
    return Script(
        (
            Bind("builtIns", Code(f"[{built_ins}]")),
            Collect(
                "perspective",
                "Perspective.Custom.all",
                Code("{ id: perspective.name, name: perspective.name }"),
                into="custom",
            ),
            Return(Code("builtIns.concat(custom)")),
        ),
        store=store,
        include_helpers=False,
    )


def perspective_tasks(name: str, store: Store = OMNIFOCUS_STORE) -> Script:
    """Show *name* in the front window and collect the tasks it displays."""
    return Script(
        (_find("showPerspective", name, bind="win"), Return(Code("collectWindowTasks(win)"))),
        store=store,
    )
