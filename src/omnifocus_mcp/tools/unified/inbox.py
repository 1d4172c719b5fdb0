"""Unified inbox tool.

The inbox is read through the built-in Inbox perspective, so both actions
need an open OmniFocus window and use the longer perspective timeout.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from omnifocus_mcp.config import ServerConfig
from omnifocus_mcp.core.naming import canonical_tool
from omnifocus_mcp.core.observability import get_metrics, mcp_tool
from omnifocus_mcp.tools.unified.common import (
    build_request_id,
    dispatch_with_standard_errors,
    get_client,
    make_metric_name,
    ok,
    records,
)
from omnifocus_mcp.tools.unified.router import ActionDefinition, ActionRouter

logger = logging.getLogger(__name__)
_metrics = get_metrics()


def _metric(action: str) -> str:
    return make_metric_name("unified_tools.inbox", action)


def _handle_list(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = build_request_id("inbox")
    tasks = get_client(config).list_inbox_tasks()
    _metrics.counter(_metric("list"), labels={"status": "success"})
    return ok(request_id, tasks=records(tasks), count=len(tasks))


def _handle_count(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = build_request_id("inbox")
    count = get_client(config).get_inbox_count()
    _metrics.counter(_metric("count"), labels={"status": "success"})
    return ok(request_id, count=count)


_INBOX_ROUTER = ActionRouter(
    tool_name="inbox",
    actions=[
        ActionDefinition(name="list", handler=_handle_list, summary="List the tasks shown in the Inbox perspective"),
        ActionDefinition(name="count", handler=_handle_count, summary="Count the tasks shown in the Inbox perspective"),
    ],
)


def _dispatch_inbox_action(*, action: str, payload: Dict[str, Any], config: ServerConfig) -> dict:
    return dispatch_with_standard_errors(_INBOX_ROUTER, "inbox", action, config=config, **payload)


def register_unified_inbox_tool(mcp: FastMCP, config: ServerConfig) -> None:
    """Register the consolidated inbox tool."""

    @canonical_tool(mcp, canonical_name="inbox")
    @mcp_tool(tool_name="inbox", emit_metrics=True, audit=True)
    def inbox(action: str) -> dict:
        """Read the OmniFocus inbox. Actions: list, count."""
        return _dispatch_inbox_action(action=action, payload={}, config=config)

    logger.debug("Registered unified inbox tool")
