"""MCP server commands."""

import click

from omnifocus_mcp.cli.registry import get_context


@click.group("mcp")
def mcp_group() -> None:
    """Run omnifocus-mcp as an MCP server."""


@mcp_group.command("serve")
@click.pass_context
def serve_cmd(ctx: click.Context) -> None:
    """Serve the unified OmniFocus tools over stdio.

    Configuration is loaded again from --config and the environment; the
    CLI --log-level does not apply to the server.
    """
    from omnifocus_mcp.server import main as serve

    serve(get_context(ctx).config_file)
