"""Unified folder tool: read-only access to the folder tree."""

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
from omnifocus_mcp.tools.unified.param_schema import Bool, Str, validate_payload
from omnifocus_mcp.tools.unified.router import ActionDefinition, ActionRouter

logger = logging.getLogger(__name__)
_metrics = get_metrics()


def _metric(action: str) -> str:
    return make_metric_name("unified_tools.folder", action)


_LIST_SCHEMA = {"include_dropped": Bool(default=False)}

_GET_SCHEMA = {
    "folder_id": Str(required=True, remediation='Pass a folder id or exact name; folder(action="list") shows both'),
    "include_dropped": Bool(default=False),
}


def _handle_list(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = build_request_id("folder")
    err = validate_payload(payload, _LIST_SCHEMA, tool_name="folder", action="list", request_id=request_id)
    if err:
        return err

    folders = get_client(config).list_folders(include_dropped=payload["include_dropped"])
    _metrics.counter(_metric("list"), labels={"status": "success"})
    return ok(request_id, folders=records(folders), count=len(folders))


def _handle_get(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = build_request_id("folder")
    err = validate_payload(payload, _GET_SCHEMA, tool_name="folder", action="get", request_id=request_id)
    if err:
        return err

    folder = get_client(config).get_folder(payload["folder_id"], include_dropped=payload["include_dropped"])
    _metrics.counter(_metric("get"), labels={"status": "success"})
    return ok(request_id, folder=folder.to_dict())


_FOLDER_ROUTER = ActionRouter(
    tool_name="folder",
    actions=[
        ActionDefinition(
            name="list",
            handler=_handle_list,
            summary="List top-level folders with their subfolders, nested",
        ),
        ActionDefinition(name="get", handler=_handle_get, summary="Get one folder and its subfolders by id or name"),
    ],
)


def _dispatch_folder_action(*, action: str, payload: Dict[str, Any], config: ServerConfig) -> dict:
    return dispatch_with_standard_errors(_FOLDER_ROUTER, "folder", action, config=config, **payload)


def register_unified_folder_tool(mcp: FastMCP, config: ServerConfig) -> None:
    """Register the consolidated folder tool."""

    @canonical_tool(mcp, canonical_name="folder")
    @mcp_tool(tool_name="folder", emit_metrics=True, audit=True)
    def folder(action: str, folder_id: Optional[str] = None, include_dropped: bool = False) -> dict:
        """Browse OmniFocus folders. Actions: list, get."""
        payload = payload_of(locals())
        return _dispatch_folder_action(action=action, payload=payload, config=config)

    logger.debug("Registered unified folder tool")
