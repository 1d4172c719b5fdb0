"""Project commands."""

from __future__ import annotations

from typing import Optional, Tuple

import click

from omnifocus_mcp.cli.logging import cli_command, get_cli_logger
from omnifocus_mcp.cli.output import emit_error, emit_success
from omnifocus_mcp.cli.registry import AliasedGroup, get_context
from omnifocus_mcp.core.omnifocus.models import PROJECT_STATUSES

logger = get_cli_logger()

_STATUS = click.Choice(PROJECT_STATUSES)


@click.group("projects", cls=AliasedGroup, aliases={"ls": "list", "rm": "delete", "view": "get"})
def projects() -> None:
    """List, view, create, update and delete projects."""


@projects.command("list")
@click.option("-f", "--folder", help="Only projects in this folder.")
@click.option("-s", "--status", type=_STATUS, help="Only projects with this status.")
@click.option("-d", "--include-dropped", "--dropped", is_flag=True, help="Include dropped and done projects.")
@click.pass_context
@cli_command("projects-list")
def list_cmd(ctx: click.Context, folder: Optional[str], status: Optional[str], include_dropped: bool) -> None:
    """List projects."""
    items = get_context(ctx).client.list_projects(folder=folder, status=status, include_dropped=include_dropped)
    emit_success({"projects": [project.to_dict() for project in items], "count": len(items)})


@projects.command("get")
@click.argument("project_id")
@click.pass_context
@cli_command("projects-get")
def get_cmd(ctx: click.Context, project_id: str) -> None:
    """Show the project with id or exact name PROJECT_ID."""
    project = get_context(ctx).client.get_project(project_id)
    emit_success({"project": project.to_dict()})


@projects.command("create")
@click.argument("name")
@click.option("-f", "--folder", help="Create inside this folder.")
@click.option("-n", "--note", help="Note text.")
@click.option("-t", "--tag", "tags", multiple=True, help="Tag to add (repeatable).")
@click.option("-s", "--sequential", is_flag=True, help="Make it a sequential project.")
@click.option("--status", type=_STATUS, help="Initial status.")
@click.pass_context
@cli_command("projects-create")
def create_cmd(
    ctx: click.Context,
    name: str,
    folder: Optional[str],
    note: Optional[str],
    tags: Tuple[str, ...],
    sequential: bool,
    status: Optional[str],
) -> None:
    """Create a project called NAME."""
    project = get_context(ctx).client.create_project(
        name,
        folder=folder,
        note=note,
        tags=list(tags),
        sequential=sequential or None,
        status=status,
    )
    emit_success({"project": project.to_dict()})


@projects.command("update")
@click.argument("project_id")
@click.option("-n", "--name", help="New name.")
@click.option("--note", help="New note.")
@click.option("-f", "--folder", help="Move into this folder.")
@click.option("-t", "--tag", "tags", multiple=True, help="Replace tags (repeatable).")
@click.option("--sequential/--parallel", default=None, help="Change the ordering of contained tasks.")
@click.option("-s", "--status", type=_STATUS, help="New status.")
@click.pass_context
@cli_command("projects-update")
def update_cmd(
    ctx: click.Context,
    project_id: str,
    name: Optional[str],
    note: Optional[str],
    folder: Optional[str],
    tags: Tuple[str, ...],
    sequential: Optional[bool],
    status: Optional[str],
) -> None:
    """Update the project with id or exact name PROJECT_ID."""
    changes = {
        "name": name,
        "note": note,
        "folder": folder,
        "tags": list(tags) if tags else None,
        "sequential": sequential,
        "status": status,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        emit_error(
            "No fields to update",
            code="MISSING_REQUIRED",
            error_type="validation",
            remediation="Pass at least one option; see 'of projects update --help'",
        )

    project = get_context(ctx).client.update_project(project_id, **changes)
    emit_success({"project": project.to_dict(), "updated_fields": sorted(changes)})


@projects.command("delete")
@click.argument("project_id")
@click.pass_context
@cli_command("projects-delete")
def delete_cmd(ctx: click.Context, project_id: str) -> None:
    """Delete the project with id or exact name PROJECT_ID."""
    deleted = get_context(ctx).client.delete_project(project_id)
    emit_success({"deleted": deleted})


@projects.command("stats")
@click.pass_context
@cli_command("projects-stats")
def stats_cmd(ctx: click.Context) -> None:
    """Project counts by status and the busiest projects."""
    stats = get_context(ctx).client.get_project_stats()
    emit_success({"stats": stats.to_dict()})
