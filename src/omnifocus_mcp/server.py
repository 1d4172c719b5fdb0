"""MCP server for OmniFocus.

Builds a FastMCP server exposing the unified tools and runs it over stdio.
"""

from __future__ import annotations

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from omnifocus_mcp.config import ServerConfig, get_config, set_config
from omnifocus_mcp.tools.unified import register_unified_tools

logger = logging.getLogger(__name__)


def create_server(config: Optional[ServerConfig] = None) -> FastMCP:
    """Create the FastMCP server with every enabled unified tool registered.

    Args:
        config: Server configuration; the global one is used when omitted.
    """
    config = config or get_config()
    mcp = FastMCP(config.server_name)
    register_unified_tools(mcp, config)
    logger.info(
        "Created %s server",
        config.server_name,
        extra={"version": config.server_version, "disabled_tools": config.disabled_tools},
    )
    return mcp


def main(config_file: Optional[str] = None) -> None:
    """Run the MCP server over stdio."""
    config = ServerConfig.from_env(config_file)
    config.setup_logging()
    set_config(config)
    create_server(config).run()


if __name__ == "__main__":
    main()
