"""Unified tag tool backed by ActionRouter and the OmniFocus facade.

Tags resolve by id, by full path (``Parent/Child``) or by bare name; a bare
name shared by several tags is an ``AMBIGUOUS_MATCH`` error listing every
candidate path.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from omnifocus_mcp.config import ServerConfig
from omnifocus_mcp.core.naming import canonical_tool
from omnifocus_mcp.core.observability import get_metrics, mcp_tool
from omnifocus_mcp.core.omnifocus.models import TAG_SORTS, TAG_STATUSES
from omnifocus_mcp.core.responses import ErrorCode, validation_error
from omnifocus_mcp.tools.unified.common import (
    build_request_id,
    dispatch_with_standard_errors,
    get_client,
    make_metric_name,
    ok,
    payload_of,
    records,
)
from omnifocus_mcp.tools.unified.param_schema import Bool, Num, Str, validate_payload
from omnifocus_mcp.tools.unified.router import ActionDefinition, ActionRouter

logger = logging.getLogger(__name__)
_metrics = get_metrics()

_ACTION_SUMMARY = {
    "list": "List tags with usage counts; filter by unused_days, sort by name, usage or activity",
    "get": "Get one tag by id, full path or unique name",
    "create": "Create a tag, optionally under a parent tag",
    "update": "Rename a tag or change its status",
    "delete": "Delete a tag",
    "stats": "Usage counts, most/least used and stale tags",
}


def _metric(action: str) -> str:
    return make_metric_name("unified_tools.tag", action)


def _request_id() -> str:
    return build_request_id("tag")


_STATUS = Str(choices=frozenset(TAG_STATUSES), remediation="Use one of: active, on hold, dropped")
_TAG_ID = Str(required=True, remediation="Pass a tag id, a full path such as Work/Errand, or a unique name")

_LIST_SCHEMA = {
    "unused_days": Num(integer_only=True, min_val=0),
    "sort_by": Str(choices=frozenset(TAG_SORTS), remediation="Use one of: name, usage, activity"),
    "active_only": Bool(default=False),
}

_GET_SCHEMA = {"tag_id": _TAG_ID}

_CREATE_SCHEMA = {
    "name": Str(required=True),
    "parent": Str(),
    "status": _STATUS,
}

_UPDATE_SCHEMA = {
    "tag_id": _TAG_ID,
    "name": Str(),
    "status": _STATUS,
}


def _handle_list(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _LIST_SCHEMA, tool_name="tag", action="list", request_id=request_id)
    if err:
        return err

    tags = get_client(config).list_tags(**{key: payload.get(key) for key in _LIST_SCHEMA})
    _metrics.counter(_metric("list"), labels={"status": "success"})
    return ok(request_id, tags=records(tags), count=len(tags))


def _handle_get(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _GET_SCHEMA, tool_name="tag", action="get", request_id=request_id)
    if err:
        return err

    tag = get_client(config).get_tag(payload["tag_id"])
    _metrics.counter(_metric("get"), labels={"status": "success"})
    return ok(request_id, tag=tag.to_dict())


def _handle_create(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _CREATE_SCHEMA, tool_name="tag", action="create", request_id=request_id)
    if err:
        return err

    tag = get_client(config).create_tag(payload["name"], parent=payload.get("parent"), status=payload.get("status"))
    _metrics.counter(_metric("create"), labels={"status": "success"})
    return ok(request_id, tag=tag.to_dict())


def _handle_update(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _UPDATE_SCHEMA, tool_name="tag", action="update", request_id=request_id)
    if err:
        return err

    changes = {key: payload[key] for key in ("name", "status") if payload.get(key) is not None}
    if not changes:
        return asdict(
            validation_error(
                "No fields to update",
                code=ErrorCode.MISSING_REQUIRED,
                remediation="Pass name and/or status",
                request_id=request_id,
            )
        )

    tag = get_client(config).update_tag(payload["tag_id"], **changes)
    _metrics.counter(_metric("update"), labels={"status": "success"})
    return ok(request_id, tag=tag.to_dict(), updated_fields=sorted(changes))


def _handle_delete(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _GET_SCHEMA, tool_name="tag", action="delete", request_id=request_id)
    if err:
        return err

    deleted = get_client(config).delete_tag(payload["tag_id"])
    _metrics.counter(_metric("delete"), labels={"status": "success"})
    return ok(request_id, deleted=deleted)


def _handle_stats(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    stats = get_client(config).get_tag_stats()
    _metrics.counter(_metric("stats"), labels={"status": "success"})
    return ok(request_id, stats=stats.to_dict())


_TAG_ROUTER = ActionRouter(
    tool_name="tag",
    actions=[
        ActionDefinition(name="list", handler=_handle_list, summary=_ACTION_SUMMARY["list"]),
        ActionDefinition(name="get", handler=_handle_get, summary=_ACTION_SUMMARY["get"]),
        ActionDefinition(name="create", handler=_handle_create, summary=_ACTION_SUMMARY["create"], aliases=("add",)),
        ActionDefinition(name="update", handler=_handle_update, summary=_ACTION_SUMMARY["update"]),
        ActionDefinition(name="delete", handler=_handle_delete, summary=_ACTION_SUMMARY["delete"], aliases=("remove",)),
        ActionDefinition(name="stats", handler=_handle_stats, summary=_ACTION_SUMMARY["stats"]),
    ],
)


def _dispatch_tag_action(*, action: str, payload: Dict[str, Any], config: ServerConfig) -> dict:
    return dispatch_with_standard_errors(_TAG_ROUTER, "tag", action, config=config, **payload)


def register_unified_tag_tool(mcp: FastMCP, config: ServerConfig) -> None:
    """Register the consolidated tag tool."""

    @canonical_tool(mcp, canonical_name="tag")
    @mcp_tool(tool_name="tag", emit_metrics=True, audit=True)
    def tag(
        action: str,
        tag_id: Optional[str] = None,
        name: Optional[str] = None,
        parent: Optional[str] = None,
        status: Optional[str] = None,
        unused_days: Optional[int] = None,
        sort_by: Optional[str] = None,
        active_only: bool = False,
    ) -> dict:
        """Manage OmniFocus tags.

        Actions: list, get, create, update, delete, stats.
        """
        payload = payload_of(locals())
        return _dispatch_tag_action(action=action, payload=payload, config=config)

    logger.debug("Registered unified tag tool")
