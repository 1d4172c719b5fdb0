"""Tag commands."""

from __future__ import annotations

from typing import Optional

import click

from omnifocus_mcp.cli.logging import cli_command, get_cli_logger
from omnifocus_mcp.cli.output import emit_error, emit_success
from omnifocus_mcp.cli.registry import AliasedGroup, get_context
from omnifocus_mcp.core.omnifocus.models import TAG_SORTS, TAG_STATUSES

logger = get_cli_logger()

_STATUS = click.Choice(TAG_STATUSES)


@click.group("tags", cls=AliasedGroup, aliases={"ls": "list", "rm": "delete", "view": "get"})
def tags() -> None:
    """List, view, create, update and delete tags."""


@tags.command("list")
@click.option("-u", "--unused-days", type=click.IntRange(min=0), help="Only tags without activity for N days.")
@click.option("-s", "--sort", "sort_by", type=click.Choice(TAG_SORTS), default="name", show_default=True)
@click.option("-a", "--active-only", is_flag=True, help="Count only remaining tasks.")
@click.pass_context
@cli_command("tags-list")
def list_cmd(ctx: click.Context, unused_days: Optional[int], sort_by: str, active_only: bool) -> None:
    """List tags with usage counts."""
    items = get_context(ctx).client.list_tags(unused_days=unused_days, sort_by=sort_by, active_only=active_only)
    emit_success({"tags": [tag.to_dict() for tag in items], "count": len(items)})


@tags.command("get")
@click.argument("tag_id")
@click.pass_context
@cli_command("tags-get")
def get_cmd(ctx: click.Context, tag_id: str) -> None:
    """Show the tag with id, path (Parent/Child) or name TAG_ID."""
    tag = get_context(ctx).client.get_tag(tag_id)
    emit_success({"tag": tag.to_dict()})


@tags.command("create")
@click.argument("name")
@click.option("-p", "--parent", help="Create as a child of this tag.")
@click.option("-s", "--status", type=_STATUS, help="Initial status.")
@click.pass_context
@cli_command("tags-create")
def create_cmd(ctx: click.Context, name: str, parent: Optional[str], status: Optional[str]) -> None:
    """Create a tag called NAME."""
    tag = get_context(ctx).client.create_tag(name, parent=parent, status=status)
    emit_success({"tag": tag.to_dict()})


@tags.command("update")
@click.argument("tag_id")
@click.option("-n", "--name", help="New name.")
@click.option("-s", "--status", type=_STATUS, help="New status.")
@click.pass_context
@cli_command("tags-update")
def update_cmd(ctx: click.Context, tag_id: str, name: Optional[str], status: Optional[str]) -> None:
    """Rename TAG_ID or change its status."""
    changes = {key: value for key, value in (("name", name), ("status", status)) if value is not None}
    if not changes:
        emit_error(
            "No fields to update",
            code="MISSING_REQUIRED",
            error_type="validation",
            remediation="Pass --name or --status",
        )

    tag = get_context(ctx).client.update_tag(tag_id, **changes)
    emit_success({"tag": tag.to_dict(), "updated_fields": sorted(changes)})


@tags.command("delete")
@click.argument("tag_id")
@click.pass_context
@cli_command("tags-delete")
def delete_cmd(ctx: click.Context, tag_id: str) -> None:
    """Delete TAG_ID."""
    deleted = get_context(ctx).client.delete_tag(tag_id)
    emit_success({"deleted": deleted})


@tags.command("stats")
@click.pass_context
@cli_command("tags-stats")
def stats_cmd(ctx: click.Context) -> None:
    """Tag usage statistics, including stale tags."""
    stats = get_context(ctx).client.get_tag_stats()
    emit_success({"stats": stats.to_dict()})
