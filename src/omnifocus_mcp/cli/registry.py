"""Shared state for one CLI invocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

import click

from omnifocus_mcp.config import ServerConfig
from omnifocus_mcp.core.omnifocus import OmniFocus


@dataclass
class CLIContext:
    """Resolved configuration handed to every subcommand via ``ctx.obj``."""

    config: ServerConfig
    compact: bool = False
    config_file: Optional[str] = None

    @property
    def client(self) -> OmniFocus:
        return OmniFocus.from_config(self.config)


def get_context(ctx: click.Context) -> CLIContext:
    """Return the :class:`CLIContext` stored on the root command."""
    obj = ctx.find_object(CLIContext)
    if obj is None:
        obj = CLIContext(config=ServerConfig.from_env())
        ctx.obj = obj
    return obj


class AliasedGroup(click.Group):
    """Command group that also accepts short aliases such as ``ls`` for ``list``."""

    def __init__(self, *args, aliases: Optional[Mapping[str, str]] = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.aliases = dict(aliases or {})

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: List[str]
    ) -> Tuple[Optional[str], Optional[click.Command], List[str]]:
        _, cmd, remaining = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, remaining
