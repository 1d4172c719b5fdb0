"""Command line interface for OmniFocus (``of``).

Every command prints one JSON response envelope on stdout, the same
envelope the MCP tools return.
"""
