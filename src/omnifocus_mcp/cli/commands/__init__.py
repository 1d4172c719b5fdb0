"""CLI command groups.

One group per record kind plus the top-level ``search`` command and the
``mcp`` group that starts the server.
"""

from omnifocus_mcp.cli.commands.folders import folders
from omnifocus_mcp.cli.commands.inbox import inbox
from omnifocus_mcp.cli.commands.mcp import mcp_group
from omnifocus_mcp.cli.commands.perspectives import perspectives
from omnifocus_mcp.cli.commands.projects import projects
from omnifocus_mcp.cli.commands.search import search_cmd
from omnifocus_mcp.cli.commands.tags import tags
from omnifocus_mcp.cli.commands.tasks import tasks

__all__ = [
    "folders",
    "inbox",
    "mcp_group",
    "perspectives",
    "projects",
    "search_cmd",
    "tags",
    "tasks",
]
