"""Inbox commands."""

import click

from omnifocus_mcp.cli.logging import cli_command
from omnifocus_mcp.cli.output import emit_success
from omnifocus_mcp.cli.registry import AliasedGroup, get_context


@click.group("inbox", cls=AliasedGroup, aliases={"ls": "list"})
def inbox() -> None:
    """Inbox tasks, as shown by the Inbox perspective."""


@inbox.command("list")
@click.pass_context
@cli_command("inbox-list")
def list_cmd(ctx: click.Context) -> None:
    """List inbox tasks."""
    items = get_context(ctx).client.list_inbox_tasks()
    emit_success({"tasks": [task.to_dict() for task in items], "count": len(items)})


@inbox.command("count")
@click.pass_context
@cli_command("inbox-count")
def count_cmd(ctx: click.Context) -> None:
    """Number of inbox tasks."""
    emit_success({"count": get_context(ctx).client.get_inbox_count()})
