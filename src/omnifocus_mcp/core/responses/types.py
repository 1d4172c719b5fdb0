"""Envelope types shared by the MCP tools and the ``of`` CLI.

Every operation answers with one :class:`ToolResponse`::

    {"success": true,  "data": {...}, "error": null,  "meta": {"version": "response-v2", "request_id": "..."}}
    {"success": false, "data": {"error_code": ..., "error_type": ..., "status_code": ...}, "error": "...", "meta": {...}}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from omnifocus_mcp.core.context import get_correlation_id

RESPONSE_VERSION = "response-v2"


class ErrorCode(str, Enum):
    """Machine-readable ``data.error_code`` values."""

    # Caller input
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_REQUIRED = "MISSING_REQUIRED"
    INVALID_REGEX_PATTERN = "INVALID_REGEX_PATTERN"

    # Lookups
    NOT_FOUND = "NOT_FOUND"
    AMBIGUOUS_MATCH = "AMBIGUOUS_MATCH"

    # OmniFocus and its automation bridge
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    BRIDGE_ERROR = "BRIDGE_ERROR"
    BRIDGE_TIMEOUT = "BRIDGE_TIMEOUT"
    INVALID_BRIDGE_OUTPUT = "INVALID_BRIDGE_OUTPUT"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorType(str, Enum):
    """Broad failure category; decides ``data.status_code``."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"
    # OmniFocus not running, not responding, or no window open: retry later
    UNAVAILABLE = "unavailable"


HTTP_STATUS: Dict[str, int] = {
    ErrorType.VALIDATION.value: 400,
    ErrorType.NOT_FOUND.value: 404,
    ErrorType.INTERNAL.value: 500,
    ErrorType.UNAVAILABLE.value: 503,
}


@dataclass
class ToolResponse:
    """One operation result. Serialize with :func:`dataclasses.asdict`."""

    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=lambda: {"version": RESPONSE_VERSION})


def response_meta(request_id: Optional[str] = None) -> Dict[str, Any]:
    """Build ``meta``, falling back to the active correlation id."""
    meta: Dict[str, Any] = {"version": RESPONSE_VERSION}
    request_id = request_id or get_correlation_id()
    if request_id:
        meta["request_id"] = request_id
    return meta
