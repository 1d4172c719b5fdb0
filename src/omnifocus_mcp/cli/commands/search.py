"""Top-level ``search`` command."""

import click

from omnifocus_mcp.cli.logging import cli_command
from omnifocus_mcp.cli.output import emit_success
from omnifocus_mcp.cli.registry import get_context


@click.command("search")
@click.argument("query")
@click.pass_context
@cli_command("search")
def search_cmd(ctx: click.Context, query: str) -> None:
    """Search remaining tasks whose name or note contains QUERY (case-insensitive)."""
    items = get_context(ctx).client.search_tasks(query)
    emit_success({"query": query, "tasks": [task.to_dict() for task in items], "count": len(items)})
