"""Filter compilers.

Each filter field becomes one independent :class:`Skip` node evaluated
against the loop variable while iterating a flattened collection. Skips are
order-insensitive; all comparisons are exact and case-sensitive.
"""

from __future__ import annotations

from typing import List, Tuple

from omnifocus_mcp.core.omnifocus.literals import literal
from omnifocus_mcp.core.omnifocus.models import ProjectFilters, TaskFilters
from omnifocus_mcp.core.omnifocus.nodes import Code, Skip

_PROJECT_STATUS_ENUM = {
    "active": "Project.Status.Active",
    "on hold": "Project.Status.OnHold",
    "dropped": "Project.Status.Dropped",
}


def compile_task_filters(filters: TaskFilters, variable: str = "task") -> Tuple[Skip, ...]:
    """Compile task filters into skip conditions on *variable*."""
    skips: List[Skip] = []
    v = Code(variable)

    if not filters.include_completed:
        skips.append(Skip(Code.fill("{v}.completed", v=v)))
    if not filters.include_dropped:
        skips.append(Skip(Code.fill("!{v}.effectiveActive", v=v)))
    if filters.flagged:
        skips.append(Skip(Code.fill("!{v}.flagged || {v}.taskStatus !== Task.Status.Available", v=v)))
    if filters.project:
        skips.append(
            Skip(
                Code.fill(
                    "!{v}.containingProject || {v}.containingProject.name !== {name}",
                    v=v,
                    name=literal(filters.project),
                )
            )
        )
    if filters.tag:
        skips.append(Skip(Code.fill("!{v}.tags.some(t => t.name === {name})", v=v, name=literal(filters.tag))))

    return tuple(skips)


def compile_project_filters(filters: ProjectFilters, variable: str = "project") -> Tuple[Skip, ...]:
    """Compile project filters into skip conditions on *variable*.

    Without ``include_dropped``, dropped and done projects are skipped along
    with projects whose parent folder is not effectively active.
    """
    skips: List[Skip] = []
    v = Code(variable)

    if not filters.include_dropped:
        skips.append(
            Skip(Code.fill("{v}.status === Project.Status.Dropped || {v}.status === Project.Status.Done", v=v))
        )
        skips.append(Skip(Code.fill("{v}.parentFolder && !{v}.parentFolder.effectiveActive", v=v)))
    if filters.status:
        skips.append(Skip(Code.fill("{v}.status !== " + _PROJECT_STATUS_ENUM[filters.status], v=v)))
    if filters.folder:
        skips.append(
            Skip(
                Code.fill(
                    "!{v}.parentFolder || {v}.parentFolder.name !== {name}",
                    v=v,
                    name=literal(filters.folder),
                )
            )
        )

    return tuple(skips)


def compile_search(query: str, variable: str = "task") -> Tuple[Skip, ...]:
    """Skip conditions for the case-insensitive substring search over name and note."""
    v = Code(variable)
    needle = Code.fill("{q}.toLowerCase()", q=literal(query))
    return (
        Skip(Code.fill("{v}.completed", v=v)),
        Skip(Code.fill("!{v}.effectiveActive", v=v)),
        Skip(
            Code.fill(
                "!{v}.name.toLowerCase().includes({n}) && !({v}.note || \"\").toLowerCase().includes({n})",
                v=v,
                n=needle,
            )
        ),
    )
