"""Entry point for the ``of`` command."""

from __future__ import annotations

from typing import Optional

import click

from omnifocus_mcp import __version__
from omnifocus_mcp.cli.commands import (
    folders,
    inbox,
    mcp_group,
    perspectives,
    projects,
    search_cmd,
    tags,
    tasks,
)
from omnifocus_mcp.cli.output import configure_output
from omnifocus_mcp.cli.registry import CLIContext
from omnifocus_mcp.config import ServerConfig

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "-c",
    "--compact/--pretty",
    default=None,
    help="Single-line JSON output (defaults to the [output] compact setting).",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to an omnifocus-mcp TOML config file.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Diagnostics written to stderr.",
)
@click.version_option(__version__, prog_name="of")
@click.pass_context
def cli(ctx: click.Context, compact: Optional[bool], config_file: Optional[str], log_level: str) -> None:
    """Command line interface for OmniFocus.

    Every command prints a JSON response envelope.
    """
    config = ServerConfig.from_env(config_file)
    config.log_level = log_level.upper()
    config.setup_logging()

    effective_compact = config.compact_output if compact is None else compact
    configure_output(effective_compact)
    ctx.obj = CLIContext(config=config, compact=effective_compact, config_file=config_file)


cli.add_command(tasks)
cli.add_command(projects)
cli.add_command(tags)
cli.add_command(folders)
cli.add_command(inbox)
cli.add_command(perspectives)
cli.add_command(search_cmd)
cli.add_command(mcp_group)


def main() -> None:
    cli(prog_name="of")


if __name__ == "__main__":
    main()
