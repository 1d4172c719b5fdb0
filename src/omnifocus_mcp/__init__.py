"""OmniFocus command-line and MCP server bridge."""

__version__ = "0.3.0"
