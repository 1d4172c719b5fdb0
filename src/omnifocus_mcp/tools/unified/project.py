"""Unified project tool backed by ActionRouter and the OmniFocus facade."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from omnifocus_mcp.config import ServerConfig
from omnifocus_mcp.core.naming import canonical_tool
from omnifocus_mcp.core.observability import get_metrics, mcp_tool
from omnifocus_mcp.core.omnifocus.models import PROJECT_STATUSES
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
from omnifocus_mcp.tools.unified.param_schema import Bool, List_, Str, validate_payload
from omnifocus_mcp.tools.unified.router import ActionDefinition, ActionRouter

logger = logging.getLogger(__name__)
_metrics = get_metrics()

_ACTION_SUMMARY = {
    "list": "List projects; dropped/done projects and projects in dropped folders are hidden by default",
    "get": "Get one project by id or exact name",
    "create": "Create a project at the top level or in a folder",
    "update": "Change name, note, ordering, status, folder or tags of a project",
    "delete": "Delete a project",
    "stats": "Status counts, averages and largest projects",
}


def _metric(action: str) -> str:
    return make_metric_name("unified_tools.project", action)


def _request_id() -> str:
    return build_request_id("project")


_STATUS = Str(choices=frozenset(PROJECT_STATUSES), remediation="Use one of: active, on hold, dropped")
_PROJECT_ID = Str(required=True, remediation='Pass a project id or exact name; project(action="list") shows both')

_LIST_SCHEMA = {
    "include_dropped": Bool(default=False),
    "status": _STATUS,
    "folder": Str(),
}

_GET_SCHEMA = {"project_id": _PROJECT_ID}

_CREATE_SCHEMA = {
    "name": Str(required=True),
    "note": Str(strip=False),
    "folder": Str(),
    "sequential": Bool(),
    "tags": List_(),
    "status": _STATUS,
}

_UPDATE_SCHEMA = {
    "project_id": _PROJECT_ID,
    "name": Str(),
    "note": Str(strip=False),
    "folder": Str(),
    "sequential": Bool(),
    "tags": List_(),
    "status": _STATUS,
}

_UPDATE_FIELDS = ("name", "note", "folder", "sequential", "tags", "status")


def _handle_list(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _LIST_SCHEMA, tool_name="project", action="list", request_id=request_id)
    if err:
        return err

    projects = get_client(config).list_projects(**{key: payload.get(key) for key in _LIST_SCHEMA})
    _metrics.counter(_metric("list"), labels={"status": "success"})
    return ok(request_id, projects=records(projects), count=len(projects))


def _handle_get(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _GET_SCHEMA, tool_name="project", action="get", request_id=request_id)
    if err:
        return err

    project = get_client(config).get_project(payload["project_id"])
    _metrics.counter(_metric("get"), labels={"status": "success"})
    return ok(request_id, project=project.to_dict())


def _handle_create(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _CREATE_SCHEMA, tool_name="project", action="create", request_id=request_id)
    if err:
        return err

    fields = {key: payload.get(key) for key in _CREATE_SCHEMA if key != "name"}
    project = get_client(config).create_project(payload["name"], **fields)
    _metrics.counter(_metric("create"), labels={"status": "success"})
    return ok(request_id, project=project.to_dict())


def _handle_update(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _UPDATE_SCHEMA, tool_name="project", action="update", request_id=request_id)
    if err:
        return err

    changes = {key: payload[key] for key in _UPDATE_FIELDS if payload.get(key) is not None}
    if not changes:
        return asdict(
            validation_error(
                "No fields to update",
                code=ErrorCode.MISSING_REQUIRED,
                remediation="Pass at least one of: " + ", ".join(_UPDATE_FIELDS),
                request_id=request_id,
            )
        )

    project = get_client(config).update_project(payload["project_id"], **changes)
    _metrics.counter(_metric("update"), labels={"status": "success"})
    return ok(request_id, project=project.to_dict(), updated_fields=sorted(changes))


def _handle_delete(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _GET_SCHEMA, tool_name="project", action="delete", request_id=request_id)
    if err:
        return err

    deleted = get_client(config).delete_project(payload["project_id"])
    _metrics.counter(_metric("delete"), labels={"status": "success"})
    return ok(request_id, deleted=deleted)


def _handle_stats(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    stats = get_client(config).get_project_stats()
    _metrics.counter(_metric("stats"), labels={"status": "success"})
    return ok(request_id, stats=stats.to_dict())


_PROJECT_ROUTER = ActionRouter(
    tool_name="project",
    actions=[
        ActionDefinition(name="list", handler=_handle_list, summary=_ACTION_SUMMARY["list"]),
        ActionDefinition(name="get", handler=_handle_get, summary=_ACTION_SUMMARY["get"]),
        ActionDefinition(name="create", handler=_handle_create, summary=_ACTION_SUMMARY["create"], aliases=("add",)),
        ActionDefinition(name="update", handler=_handle_update, summary=_ACTION_SUMMARY["update"]),
        ActionDefinition(name="delete", handler=_handle_delete, summary=_ACTION_SUMMARY["delete"], aliases=("remove",)),
        ActionDefinition(name="stats", handler=_handle_stats, summary=_ACTION_SUMMARY["stats"]),
    ],
)


def _dispatch_project_action(*, action: str, payload: Dict[str, Any], config: ServerConfig) -> dict:
    return dispatch_with_standard_errors(_PROJECT_ROUTER, "project", action, config=config, **payload)


def register_unified_project_tool(mcp: FastMCP, config: ServerConfig) -> None:
    """Register the consolidated project tool."""

    @canonical_tool(mcp, canonical_name="project")
    @mcp_tool(tool_name="project", emit_metrics=True, audit=True)
    def project(
        action: str,
        project_id: Optional[str] = None,
        name: Optional[str] = None,
        note: Optional[str] = None,
        folder: Optional[str] = None,
        sequential: Optional[bool] = None,
        tags: Optional[List[str]] = None,
        status: Optional[str] = None,
        include_dropped: bool = False,
    ) -> dict:
        """Manage OmniFocus projects.

        Actions: list, get, create, update, delete, stats.
        Status is one of "active", "on hold", "dropped".
        """
        payload = payload_of(locals())
        return _dispatch_project_action(action=action, payload=payload, config=config)

    logger.debug("Registered unified project tool")
