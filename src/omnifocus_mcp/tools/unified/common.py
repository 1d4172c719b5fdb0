"""Shared helpers for unified tool routers.

Request ids, metric names, the OmniFocus client for a config, record
serialization, and dispatch with the standard error envelopes.

Imports only from ``omnifocus_mcp.core`` and the standard library.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Iterable, Optional

from omnifocus_mcp.core.context import generate_correlation_id, get_correlation_id
from omnifocus_mcp.core.errors import ActionRouterError, error_to_response
from omnifocus_mcp.core.omnifocus import OmniFocus
from omnifocus_mcp.core.responses.builders import error_response, success_response
from omnifocus_mcp.core.responses.types import ErrorCode, ErrorType
from omnifocus_mcp.tools.unified.router import ActionRouter

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# 1. Request ID
# ---------------------------------------------------------------------------


def build_request_id(tool_name: str) -> str:
    """Return an existing correlation ID or generate one with *tool_name* prefix."""
    return get_correlation_id() or generate_correlation_id(prefix=tool_name)


# ---------------------------------------------------------------------------
# 2. Metric name
# ---------------------------------------------------------------------------


def make_metric_name(prefix: str, action: str) -> str:
    """Build a dot-separated metric key, normalising hyphens to underscores.

    Examples::

        make_metric_name("unified_tools.task", "list")  -> "unified_tools.task.list"
        make_metric_name("unified_tools.inbox", "count") -> "unified_tools.inbox.count"
    """
    return f"{prefix}.{action.replace('-', '_')}"


# ---------------------------------------------------------------------------
# 3. Client and serialization
# ---------------------------------------------------------------------------


def get_client(config: Any) -> OmniFocus:
    """Build the OmniFocus facade for *config*."""
    return OmniFocus.from_config(config)


def records(items: Iterable[Any]) -> list:
    """Dump typed records with their camelCase wire names."""
    return [item.to_dict() for item in items]


def ok(request_id: str, **fields: Any) -> dict:
    return asdict(success_response(request_id=request_id, **fields))


# ---------------------------------------------------------------------------
# 4. Dispatch with standard errors
# ---------------------------------------------------------------------------


def _unsupported(router: ActionRouter, tool_name: str, action: str, request_id: str) -> dict:
    allowed = router.allowed_actions()
    allowed_str = ", ".join(sorted(allowed))
    return asdict(
        error_response(
            f"Unsupported {tool_name} action '{action}'. Allowed actions: {allowed_str}",
            error_code=ErrorCode.VALIDATION_ERROR,
            error_type=ErrorType.VALIDATION,
            remediation=f"Use one of: {allowed_str}",
            request_id=request_id,
            details={"action": action, "allowed_actions": list(allowed)},
        )
    )


def dispatch_with_standard_errors(
    router: ActionRouter,
    tool_name: str,
    action: str,
    /,
    *,
    request_id: Optional[str] = None,
    **kwargs: Any,
) -> dict:
    """Dispatch *action* through *router*, converting exceptions to envelopes.

    Known domain errors (not found, ambiguous, validation, bridge failures)
    map through ``ERROR_MAPPINGS``. Anything else becomes ``INTERNAL_ERROR``
    and is logged with its traceback.
    """
    rid = request_id or build_request_id(tool_name)

    try:
        router.resolve(action)
    except ActionRouterError:
        return _unsupported(router, tool_name, action, rid)

    try:
        return router.dispatch(action=action, **kwargs)
    except Exception as exc:
        mapped = error_to_response(exc, request_id=rid)
        if mapped is not None:
            logger.info("%s.%s failed: %s", tool_name, action, exc)
            return mapped
        logger.exception(
            "%s action '%s' failed with unexpected error: %s",
            tool_name.capitalize(),
            action,
            exc,
        )
        error_msg = str(exc) if str(exc) else exc.__class__.__name__
        return asdict(
            error_response(
                f"{tool_name.capitalize()} action '{action}' failed: {error_msg}",
                error_code=ErrorCode.INTERNAL_ERROR,
                error_type=ErrorType.INTERNAL,
                remediation="Retry with OMNIFOCUS_MCP_LOG_LEVEL=DEBUG and check the server log on stderr.",
                details={"action": action, "error_type": exc.__class__.__name__},
                request_id=rid,
            )
        )


def payload_of(values: Dict[str, Any], *exclude: str) -> Dict[str, Any]:
    """Copy tool arguments into a handler payload, dropping routing keys."""
    return {key: value for key, value in values.items() if key not in ("action", "config", *exclude)}
