"""Perspective commands."""

import click

from omnifocus_mcp.cli.logging import cli_command
from omnifocus_mcp.cli.output import emit_success
from omnifocus_mcp.cli.registry import AliasedGroup, get_context


@click.group("perspectives", cls=AliasedGroup, aliases={"ls": "list", "view": "tasks"})
def perspectives() -> None:
    """Built-in and custom perspectives."""


@perspectives.command("list")
@click.pass_context
@cli_command("perspectives-list")
def list_cmd(ctx: click.Context) -> None:
    """List built-in perspectives followed by custom ones."""
    items = get_context(ctx).client.list_perspectives()
    emit_success({"perspectives": [item.to_dict() for item in items], "count": len(items)})


@perspectives.command("tasks")
@click.argument("name")
@click.pass_context
@cli_command("perspectives-tasks")
def tasks_cmd(ctx: click.Context, name: str) -> None:
    """Tasks shown by perspective NAME. Needs an open OmniFocus window."""
    items = get_context(ctx).client.get_perspective_tasks(name)
    emit_success({"perspective": name, "tasks": [task.to_dict() for task in items], "count": len(items)})
