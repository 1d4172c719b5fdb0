"""Task commands."""

from __future__ import annotations

from typing import Optional, Tuple

import click

from omnifocus_mcp.cli.logging import cli_command, get_cli_logger
from omnifocus_mcp.cli.output import emit_error, emit_success
from omnifocus_mcp.cli.registry import AliasedGroup, get_context

logger = get_cli_logger()


@click.group("tasks", cls=AliasedGroup, aliases={"ls": "list", "rm": "delete", "view": "get"})
def tasks() -> None:
    """List, view, create, update and delete tasks."""


@tasks.command("list")
@click.option("-f", "--flagged", is_flag=True, help="Only flagged tasks.")
@click.option("-p", "--project", help="Only tasks in this project.")
@click.option("-t", "--tag", help="Only tasks with this tag.")
@click.option("-c", "--include-completed", "--completed", is_flag=True, help="Include completed tasks.")
@click.option("--include-dropped", is_flag=True, help="Include dropped tasks.")
@click.pass_context
@cli_command("tasks-list")
def list_cmd(
    ctx: click.Context,
    flagged: bool,
    project: Optional[str],
    tag: Optional[str],
    include_completed: bool,
    include_dropped: bool,
) -> None:
    """List tasks."""
    client = get_context(ctx).client
    items = client.list_tasks(
        flagged=flagged or None,
        project=project,
        tag=tag,
        include_completed=include_completed,
        include_dropped=include_dropped,
    )
    emit_success({"tasks": [task.to_dict() for task in items], "count": len(items)})


@tasks.command("get")
@click.argument("task_id")
@click.pass_context
@cli_command("tasks-get")
def get_cmd(ctx: click.Context, task_id: str) -> None:
    """Show the task with id or exact name TASK_ID."""
    task = get_context(ctx).client.get_task(task_id)
    emit_success({"task": task.to_dict()})


@tasks.command("create")
@click.argument("name")
@click.option("-p", "--project", help="Create in this project instead of the inbox.")
@click.option("-n", "--note", help="Note text.")
@click.option("-t", "--tag", "tags", multiple=True, help="Tag to add (repeatable).")
@click.option("-D", "--defer", help="Defer date (ISO-8601).")
@click.option("-d", "--due", help="Due date (ISO-8601).")
@click.option("-f", "--flagged", is_flag=True, help="Flag the task.")
@click.option("-e", "--estimate", type=click.IntRange(min=0), help="Estimated minutes.")
@click.pass_context
@cli_command("tasks-create")
def create_cmd(
    ctx: click.Context,
    name: str,
    project: Optional[str],
    note: Optional[str],
    tags: Tuple[str, ...],
    defer: Optional[str],
    due: Optional[str],
    flagged: bool,
    estimate: Optional[int],
) -> None:
    """Create a task called NAME."""
    task = get_context(ctx).client.create_task(
        name,
        project=project,
        note=note,
        tags=list(tags),
        defer=defer,
        due=due,
        flagged=flagged,
        estimated_minutes=estimate,
    )
    emit_success({"task": task.to_dict()})


@tasks.command("update")
@click.argument("task_id")
@click.option("-n", "--name", help="New name.")
@click.option("--note", help="New note.")
@click.option("-p", "--project", help="Move to this project.")
@click.option("-t", "--tag", "tags", multiple=True, help="Replace tags (repeatable).")
@click.option("-D", "--defer", help="New defer date (ISO-8601).")
@click.option("-d", "--due", help="New due date (ISO-8601).")
@click.option("--clear-defer", is_flag=True, help="Remove the defer date.")
@click.option("--clear-due", is_flag=True, help="Remove the due date.")
@click.option("-f/-F", "--flag/--unflag", "flagged", default=None, help="Flag or unflag the task.")
@click.option("-c/-C", "--complete/--incomplete", "completed", default=None, help="Mark completed or incomplete.")
@click.option("-e", "--estimate", type=click.IntRange(min=0), help="Estimated minutes.")
@click.pass_context
@cli_command("tasks-update")
def update_cmd(
    ctx: click.Context,
    task_id: str,
    name: Optional[str],
    note: Optional[str],
    project: Optional[str],
    tags: Tuple[str, ...],
    defer: Optional[str],
    due: Optional[str],
    clear_defer: bool,
    clear_due: bool,
    flagged: Optional[bool],
    completed: Optional[bool],
    estimate: Optional[int],
) -> None:
    """Update the task with id or exact name TASK_ID."""
    changes = {
        "name": name,
        "note": note,
        "project": project,
        "tags": list(tags) if tags else None,
        "flagged": flagged,
        "completed": completed,
        "estimated_minutes": estimate,
    }
    changes = {key: value for key, value in changes.items() if value is not None}

    for field, value, clear in (("defer", defer, clear_defer), ("due", due, clear_due)):
        if clear and value is not None:
            emit_error(
                f"Pass either --{field} or --clear-{field}, not both",
                code="VALIDATION_ERROR",
                error_type="validation",
                remediation=f"Drop --clear-{field} to set a new date, or drop --{field} to clear it",
                details={"field": field},
            )
        if clear:
            changes[field] = None
        elif value is not None:
            changes[field] = value

    if not changes:
        emit_error(
            "No fields to update",
            code="MISSING_REQUIRED",
            error_type="validation",
            remediation="Pass at least one option; see 'of tasks update --help'",
        )

    task = get_context(ctx).client.update_task(task_id, **changes)
    emit_success({"task": task.to_dict(), "updated_fields": sorted(changes)})


@tasks.command("delete")
@click.argument("task_id")
@click.pass_context
@cli_command("tasks-delete")
def delete_cmd(ctx: click.Context, task_id: str) -> None:
    """Delete the task with id or exact name TASK_ID."""
    deleted = get_context(ctx).client.delete_task(task_id)
    emit_success({"deleted": deleted})


@tasks.command("stats")
@click.pass_context
@cli_command("tasks-stats")
def stats_cmd(ctx: click.Context) -> None:
    """Task counts, completion rate and top projects and tags."""
    stats = get_context(ctx).client.get_task_stats()
    emit_success({"stats": stats.to_dict()})
