"""Folder commands."""

import click

from omnifocus_mcp.cli.logging import cli_command
from omnifocus_mcp.cli.output import emit_success
from omnifocus_mcp.cli.registry import AliasedGroup, get_context


@click.group("folders", cls=AliasedGroup, aliases={"ls": "list", "view": "get"})
def folders() -> None:
    """Browse the folder hierarchy."""


@folders.command("list")
@click.option("-d", "--include-dropped", "--dropped", is_flag=True, help="Include dropped folders.")
@click.pass_context
@cli_command("folders-list")
def list_cmd(ctx: click.Context, include_dropped: bool) -> None:
    """List top-level folders with their subfolders."""
    items = get_context(ctx).client.list_folders(include_dropped=include_dropped)
    emit_success({"folders": [folder.to_dict() for folder in items], "count": len(items)})


@folders.command("get")
@click.argument("folder_id")
@click.option("-d", "--include-dropped", "--dropped", is_flag=True, help="Include dropped subfolders.")
@click.pass_context
@cli_command("folders-get")
def get_cmd(ctx: click.Context, folder_id: str, include_dropped: bool) -> None:
    """Show the folder with id or name FOLDER_ID."""
    folder = get_context(ctx).client.get_folder(folder_id, include_dropped=include_dropped)
    emit_success({"folder": folder.to_dict()})
