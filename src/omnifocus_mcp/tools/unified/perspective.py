"""Unified perspective tool.

``tasks`` switches the front OmniFocus window to the named perspective and
reads back what it shows, so it fails with ``PRECONDITION_FAILED`` when no
window is open.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

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
    payload_of,
    records,
)
from omnifocus_mcp.tools.unified.param_schema import Str, validate_payload
from omnifocus_mcp.tools.unified.router import ActionDefinition, ActionRouter

logger = logging.getLogger(__name__)
_metrics = get_metrics()


def _metric(action: str) -> str:
    return make_metric_name("unified_tools.perspective", action)


_TASKS_SCHEMA = {
    "name": Str(required=True, remediation='Pass a built-in name such as "Flagged" or a custom perspective name'),
}


def _handle_list(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = build_request_id("perspective")
    perspectives = get_client(config).list_perspectives()
    _metrics.counter(_metric("list"), labels={"status": "success"})
    return ok(request_id, perspectives=records(perspectives), count=len(perspectives))


def _handle_tasks(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = build_request_id("perspective")
    err = validate_payload(payload, _TASKS_SCHEMA, tool_name="perspective", action="tasks", request_id=request_id)
    if err:
        return err

    tasks = get_client(config).get_perspective_tasks(payload["name"])
    _metrics.counter(_metric("tasks"), labels={"status": "success"})
    return ok(request_id, perspective=payload["name"], tasks=records(tasks), count=len(tasks))


_PERSPECTIVE_ROUTER = ActionRouter(
    tool_name="perspective",
    actions=[
        ActionDefinition(name="list", handler=_handle_list, summary="List built-in and custom perspectives"),
        ActionDefinition(
            name="tasks",
            handler=_handle_tasks,
            summary="Show a perspective in the front window and list its tasks",
            aliases=("view",),
        ),
    ],
)


def _dispatch_perspective_action(*, action: str, payload: Dict[str, Any], config: ServerConfig) -> dict:
    return dispatch_with_standard_errors(_PERSPECTIVE_ROUTER, "perspective", action, config=config, **payload)


def register_unified_perspective_tool(mcp: FastMCP, config: ServerConfig) -> None:
    """Register the consolidated perspective tool."""

    @canonical_tool(mcp, canonical_name="perspective")
    @mcp_tool(tool_name="perspective", emit_metrics=True, audit=True)
    def perspective(action: str, name: Optional[str] = None) -> dict:
        """Work with OmniFocus perspectives. Actions: list, tasks."""
        payload = payload_of(locals())
        return _dispatch_perspective_action(action=action, payload=payload, config=config)

    logger.debug("Registered unified perspective tool")
