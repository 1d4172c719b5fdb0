"""Unified discovery tool: search and describe the other unified tools."""

from __future__ import annotations

import logging
import re
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from omnifocus_mcp.config import ServerConfig
from omnifocus_mcp.core.naming import canonical_tool
from omnifocus_mcp.core.observability import get_metrics, mcp_tool
from omnifocus_mcp.core.responses import ErrorCode, not_found_error, validation_error
from omnifocus_mcp.tools.unified.common import (
    build_request_id,
    dispatch_with_standard_errors,
    make_metric_name,
    ok,
    payload_of,
)
from omnifocus_mcp.tools.unified.folder import _FOLDER_ROUTER
from omnifocus_mcp.tools.unified.inbox import _INBOX_ROUTER
from omnifocus_mcp.tools.unified.param_schema import Str, validate_payload
from omnifocus_mcp.tools.unified.perspective import _PERSPECTIVE_ROUTER
from omnifocus_mcp.tools.unified.project import _PROJECT_ROUTER
from omnifocus_mcp.tools.unified.router import ActionDefinition, ActionRouter
from omnifocus_mcp.tools.unified.tag import _TAG_ROUTER
from omnifocus_mcp.tools.unified.task import _TASK_ROUTER

logger = logging.getLogger(__name__)
_metrics = get_metrics()

TOOL_ROUTERS: Dict[str, ActionRouter] = {
    router.tool_name: router
    for router in (_TASK_ROUTER, _INBOX_ROUTER, _PROJECT_ROUTER, _TAG_ROUTER, _FOLDER_ROUTER, _PERSPECTIVE_ROUTER)
}


def _metric(action: str) -> str:
    return make_metric_name("unified_tools.discover", action)


def _enabled_routers(config: ServerConfig) -> Dict[str, ActionRouter]:
    disabled = set(getattr(config, "disabled_tools", None) or ())
    return {name: router for name, router in TOOL_ROUTERS.items() if name not in disabled}


_SEARCH_SCHEMA = {"pattern": Str(required=True, remediation="Pass a regular expression such as 'stat' or 'tag|folder'")}
_DESCRIBE_SCHEMA = {"tool_name": Str(required=True)}


def _handle_search(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = build_request_id("discover")
    err = validate_payload(payload, _SEARCH_SCHEMA, tool_name="discover", action="search", request_id=request_id)
    if err:
        return err

    try:
        matcher = re.compile(payload["pattern"], re.IGNORECASE)
    except re.error as exc:
        return asdict(
            validation_error(
                f"Invalid regex pattern: {exc}",
                field="pattern",
                code=ErrorCode.INVALID_REGEX_PATTERN,
                remediation="Escape special characters or use a plain word",
                request_id=request_id,
            )
        )

    matches: List[Dict[str, str]] = []
    for tool_name, router in _enabled_routers(config).items():
        for action, summary in router.describe().items():
            if matcher.search(tool_name) or matcher.search(action) or matcher.search(summary):
                matches.append({"tool": tool_name, "action": action, "summary": summary})

    _metrics.counter(_metric("search"), labels={"status": "success"})
    return ok(request_id, pattern=payload["pattern"], matches=matches, count=len(matches))


def _handle_describe(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = build_request_id("discover")
    routers = _enabled_routers(config)

    if payload.get("tool_name") is None:
        tools = {name: router.describe() for name, router in routers.items()}
        return ok(request_id, tools=tools, count=len(tools))

    err = validate_payload(payload, _DESCRIBE_SCHEMA, tool_name="discover", action="describe", request_id=request_id)
    if err:
        return err

    router = routers.get(payload["tool_name"])
    if router is None:
        return asdict(
            not_found_error(
                "Tool",
                payload["tool_name"],
                remediation="Available tools: " + ", ".join(routers),
                request_id=request_id,
            )
        )
    return ok(request_id, tool=router.tool_name, actions=router.describe())


_DISCOVER_ROUTER = ActionRouter(
    tool_name="discover",
    actions=[
        ActionDefinition(
            name="search",
            handler=_handle_search,
            summary="Find tool actions whose name or summary matches a case-insensitive regex",
        ),
        ActionDefinition(name="describe", handler=_handle_describe, summary="List the actions of one tool or all tools"),
    ],
)


def _dispatch_discover_action(*, action: str, payload: Dict[str, Any], config: ServerConfig) -> dict:
    return dispatch_with_standard_errors(_DISCOVER_ROUTER, "discover", action, config=config, **payload)


def register_unified_discovery_tool(mcp: FastMCP, config: ServerConfig) -> None:
    """Register the discovery tool."""

    @canonical_tool(mcp, canonical_name="discover")
    @mcp_tool(tool_name="discover", emit_metrics=True, audit=False)
    def discover(action: str, pattern: Optional[str] = None, tool_name: Optional[str] = None) -> dict:
        """Discover available tools. Actions: search (regex over tools/actions), describe."""
        payload = payload_of(locals())
        return _dispatch_discover_action(action=action, payload=payload, config=config)

    logger.debug("Registered unified discovery tool")
