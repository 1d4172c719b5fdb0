"""Unified task tool backed by ActionRouter and the OmniFocus facade."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from omnifocus_mcp.config import ServerConfig
from omnifocus_mcp.core.naming import canonical_tool
from omnifocus_mcp.core.observability import get_metrics, mcp_tool
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
from omnifocus_mcp.tools.unified.param_schema import Bool, DateStr, List_, Num, Str, validate_payload
from omnifocus_mcp.tools.unified.router import ActionDefinition, ActionRouter

logger = logging.getLogger(__name__)
_metrics = get_metrics()

_ACTION_SUMMARY = {
    "list": "List tasks, optionally filtered by flag, project or tag",
    "get": "Get one task by id or exact name",
    "create": "Create a task in the inbox or in a project",
    "update": "Change fields of a task; clear_defer/clear_due remove dates",
    "delete": "Delete a task",
    "search": "Case-insensitive search over names and notes of remaining tasks",
    "stats": "Counts, completion rate and top projects/tags across all tasks",
}


def _metric(action: str) -> str:
    return make_metric_name("unified_tools.task", action)


def _request_id() -> str:
    return build_request_id("task")


# ---------------------------------------------------------------------------
# Declarative parameter schemas
# ---------------------------------------------------------------------------

_TASK_ID = Str(required=True, remediation='Pass a task id or exact name; task(action="search") can find one')

_LIST_SCHEMA = {
    "include_completed": Bool(default=False),
    "include_dropped": Bool(default=False),
    "flagged": Bool(),
    "project": Str(),
    "tag": Str(),
}

_GET_SCHEMA = {"task_id": _TASK_ID}

_CREATE_SCHEMA = {
    "name": Str(required=True),
    "note": Str(strip=False),
    "project": Str(),
    "tags": List_(),
    "defer": DateStr(),
    "due": DateStr(),
    "flagged": Bool(default=False),
    "estimated_minutes": Num(integer_only=True, min_val=0),
}

_UPDATE_SCHEMA = {
    "task_id": _TASK_ID,
    "name": Str(),
    "note": Str(strip=False),
    "project": Str(),
    "tags": List_(),
    "defer": DateStr(),
    "due": DateStr(),
    "flagged": Bool(),
    "estimated_minutes": Num(integer_only=True, min_val=0),
    "completed": Bool(),
    "clear_defer": Bool(),
    "clear_due": Bool(),
}

_UPDATE_FIELDS = ("name", "note", "project", "tags", "flagged", "estimated_minutes", "completed")

_SEARCH_SCHEMA = {"query": Str(required=True)}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_list(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _LIST_SCHEMA, tool_name="task", action="list", request_id=request_id)
    if err:
        return err

    with _metrics.timed(_metric("list") + ".duration"):
        tasks = get_client(config).list_tasks(**{key: payload.get(key) for key in _LIST_SCHEMA})
    _metrics.counter(_metric("list"), labels={"status": "success"})
    return ok(request_id, tasks=records(tasks), count=len(tasks))


def _handle_get(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _GET_SCHEMA, tool_name="task", action="get", request_id=request_id)
    if err:
        return err

    task = get_client(config).get_task(payload["task_id"])
    _metrics.counter(_metric("get"), labels={"status": "success"})
    return ok(request_id, task=task.to_dict())


def _handle_create(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _CREATE_SCHEMA, tool_name="task", action="create", request_id=request_id)
    if err:
        return err

    fields = {key: payload.get(key) for key in _CREATE_SCHEMA if key != "name"}
    task = get_client(config).create_task(payload["name"], **fields)
    _metrics.counter(_metric("create"), labels={"status": "success"})
    return ok(request_id, task=task.to_dict())


def _date_changes(payload: Dict[str, Any], request_id: str) -> tuple[Dict[str, Any], Optional[dict]]:
    changes: Dict[str, Any] = {}
    for name in ("defer", "due"):
        clear = bool(payload.get(f"clear_{name}"))
        value = payload.get(name)
        if clear and value is not None:
            return {}, asdict(
                validation_error(
                    f"Pass either {name} or clear_{name}, not both",
                    field=name,
                    remediation=f"Drop clear_{name} to set a new date, or drop {name} to clear it",
                    request_id=request_id,
                )
            )
        if clear:
            changes[name] = None
        elif value is not None:
            changes[name] = value
    return changes, None


def _handle_update(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _UPDATE_SCHEMA, tool_name="task", action="update", request_id=request_id)
    if err:
        return err

    changes = {key: payload[key] for key in _UPDATE_FIELDS if payload.get(key) is not None}
    date_changes, err = _date_changes(payload, request_id)
    if err:
        return err
    changes.update(date_changes)

    if not changes:
        return asdict(
            validation_error(
                "No fields to update",
                code=ErrorCode.MISSING_REQUIRED,
                remediation="Pass at least one of: " + ", ".join((*_UPDATE_FIELDS, "defer", "due")),
                request_id=request_id,
            )
        )

    task = get_client(config).update_task(payload["task_id"], **changes)
    _metrics.counter(_metric("update"), labels={"status": "success"})
    return ok(request_id, task=task.to_dict(), updated_fields=sorted(changes))


def _handle_delete(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _GET_SCHEMA, tool_name="task", action="delete", request_id=request_id)
    if err:
        return err

    deleted = get_client(config).delete_task(payload["task_id"])
    _metrics.counter(_metric("delete"), labels={"status": "success"})
    return ok(request_id, deleted=deleted)


def _handle_search(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    err = validate_payload(payload, _SEARCH_SCHEMA, tool_name="task", action="search", request_id=request_id)
    if err:
        return err

    tasks = get_client(config).search_tasks(payload["query"])
    _metrics.counter(_metric("search"), labels={"status": "success"})
    return ok(request_id, query=payload["query"], tasks=records(tasks), count=len(tasks))


def _handle_stats(*, config: ServerConfig, **payload: Any) -> dict:
    request_id = _request_id()
    stats = get_client(config).get_task_stats()
    _metrics.counter(_metric("stats"), labels={"status": "success"})
    return ok(request_id, stats=stats.to_dict())


_TASK_ROUTER = ActionRouter(
    tool_name="task",
    actions=[
        ActionDefinition(name="list", handler=_handle_list, summary=_ACTION_SUMMARY["list"]),
        ActionDefinition(name="get", handler=_handle_get, summary=_ACTION_SUMMARY["get"]),
        ActionDefinition(name="create", handler=_handle_create, summary=_ACTION_SUMMARY["create"], aliases=("add",)),
        ActionDefinition(name="update", handler=_handle_update, summary=_ACTION_SUMMARY["update"]),
        ActionDefinition(name="delete", handler=_handle_delete, summary=_ACTION_SUMMARY["delete"], aliases=("remove",)),
        ActionDefinition(name="search", handler=_handle_search, summary=_ACTION_SUMMARY["search"]),
        ActionDefinition(name="stats", handler=_handle_stats, summary=_ACTION_SUMMARY["stats"]),
    ],
)


def _dispatch_task_action(*, action: str, payload: Dict[str, Any], config: ServerConfig) -> dict:
    return dispatch_with_standard_errors(_TASK_ROUTER, "task", action, config=config, **payload)


def register_unified_task_tool(mcp: FastMCP, config: ServerConfig) -> None:
    """Register the consolidated task tool."""

    @canonical_tool(mcp, canonical_name="task")
    @mcp_tool(tool_name="task", emit_metrics=True, audit=True)
    def task(
        action: str,
        task_id: Optional[str] = None,
        name: Optional[str] = None,
        note: Optional[str] = None,
        project: Optional[str] = None,
        tag: Optional[str] = None,
        tags: Optional[List[str]] = None,
        defer: Optional[str] = None,
        due: Optional[str] = None,
        clear_defer: Optional[bool] = None,
        clear_due: Optional[bool] = None,
        flagged: Optional[bool] = None,
        estimated_minutes: Optional[int] = None,
        completed: Optional[bool] = None,
        include_completed: bool = False,
        include_dropped: bool = False,
        query: Optional[str] = None,
    ) -> dict:
        """Manage OmniFocus tasks.

        Actions: list, get, create, update, delete, search, stats.
        """
        payload = payload_of(locals())
        return _dispatch_task_action(action=action, payload=payload, config=config)

    logger.debug("Registered unified task tool")


__all__ = [
    "register_unified_task_tool",
]
