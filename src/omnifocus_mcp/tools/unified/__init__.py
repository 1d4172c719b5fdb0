"""Unified MCP tools: one tool per entity kind, each taking an ``action``."""

from __future__ import annotations

import logging
from typing import Callable, Dict

from mcp.server.fastmcp import FastMCP

from omnifocus_mcp.config import ServerConfig
from omnifocus_mcp.tools.unified.discovery import register_unified_discovery_tool
from omnifocus_mcp.tools.unified.folder import register_unified_folder_tool
from omnifocus_mcp.tools.unified.inbox import register_unified_inbox_tool
from omnifocus_mcp.tools.unified.perspective import register_unified_perspective_tool
from omnifocus_mcp.tools.unified.project import register_unified_project_tool
from omnifocus_mcp.tools.unified.tag import register_unified_tag_tool
from omnifocus_mcp.tools.unified.task import register_unified_task_tool

logger = logging.getLogger(__name__)

_REGISTRARS: Dict[str, Callable[[FastMCP, ServerConfig], None]] = {
    "task": register_unified_task_tool,
    "inbox": register_unified_inbox_tool,
    "project": register_unified_project_tool,
    "tag": register_unified_tag_tool,
    "folder": register_unified_folder_tool,
    "perspective": register_unified_perspective_tool,
    "discover": register_unified_discovery_tool,
}


def register_unified_tools(mcp: FastMCP, config: ServerConfig) -> None:
    """Register every unified tool not listed in ``config.disabled_tools``."""
    for name, register in _REGISTRARS.items():
        if not config.is_tool_enabled(name):
            logger.info("Skipping disabled tool: %s", name)
            continue
        register(mcp, config)


__all__ = ["register_unified_tools"]
