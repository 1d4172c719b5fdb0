"""Registration of unified tools under their short entity names."""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def canonical_tool(mcp: FastMCP, *, canonical_name: str, **tool_kwargs: Any) -> Callable[[F], F]:
    """Expose the decorated function as MCP tool *canonical_name*.

    Clients see ``task``, ``tag``, ``discover`` and so on regardless of the
    Python function name. Extra keyword arguments go to ``FastMCP.tool``.
    """

    def decorator(func: F) -> F:
        mcp.tool(name=canonical_name, **tool_kwargs)(func)
        logger.debug("Registered MCP tool %s", canonical_name)
        return func

    return decorator
