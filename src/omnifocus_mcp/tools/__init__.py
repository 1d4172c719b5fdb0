"""MCP tools for omnifocus-mcp."""
