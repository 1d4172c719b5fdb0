"""Error-to-ErrorCode mapping registry.

Provides a centralized mapping from exception types to (ErrorCode, ErrorType,
remediation) entries, so every tool and CLI command reports the same failure
the same way.

Usage:
    from omnifocus_mcp.core.errors.base import error_to_response

    try:
        do_something()
    except Exception as e:
        result = error_to_response(e)
        if result is not None:
            return result
        raise  # Unknown error, re-raise
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Type

from omnifocus_mcp.core.errors.bridge import (
    BridgeError,
    BridgeOutputError,
    BridgeTimeoutError,
    PreconditionError,
)
from omnifocus_mcp.core.errors.execution import ActionRouterError
from omnifocus_mcp.core.errors.lookup import AmbiguousMatchError, NotFoundError
from omnifocus_mcp.core.errors.validation import ValidationError
from omnifocus_mcp.core.responses.types import (
    ErrorCode,
    ErrorType,
)

ERROR_MAPPINGS: Dict[Type[Exception], Tuple[ErrorCode, ErrorType, Optional[str]]] = {
    # --- Lookup errors ---
    NotFoundError: (
        ErrorCode.NOT_FOUND,
        ErrorType.NOT_FOUND,
        "Check the id or the exact, case-sensitive name.",
    ),
    AmbiguousMatchError: (
        ErrorCode.AMBIGUOUS_MATCH,
        ErrorType.VALIDATION,
        "Pass the full tag path (Parent/Child) or the tag id.",
    ),
    # --- Input errors ---
    ValidationError: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION, None),
    ActionRouterError: (ErrorCode.VALIDATION_ERROR, ErrorType.VALIDATION, None),
    # --- Bridge errors ---
    PreconditionError: (
        ErrorCode.PRECONDITION_FAILED,
        ErrorType.UNAVAILABLE,
        "Open an OmniFocus window and try again.",
    ),
    BridgeTimeoutError: (
        ErrorCode.BRIDGE_TIMEOUT,
        ErrorType.UNAVAILABLE,
        "Make sure OmniFocus is running and responsive, then retry.",
    ),
    BridgeOutputError: (ErrorCode.INVALID_BRIDGE_OUTPUT, ErrorType.INTERNAL, None),
    BridgeError: (
        ErrorCode.BRIDGE_ERROR,
        ErrorType.INTERNAL,
        "Check that OmniFocus is installed and automation access is allowed.",
    ),
}


def _error_details(exc: Exception) -> Dict[str, Any]:
    details: Dict[str, Any] = {}
    for attribute in ("field", "kind", "identifier", "timeout", "returncode"):
        value = getattr(exc, attribute, None)
        if value is not None:
            details[attribute] = value
    candidates = getattr(exc, "candidates", None)
    if candidates:
        details["candidates"] = list(candidates)
    allowed = getattr(exc, "allowed_actions", None)
    if allowed:
        details["allowed_actions"] = list(allowed)
    return details


def error_to_response(exc: Exception, *, request_id: Optional[str] = None) -> Optional[dict]:
    """Convert a known exception to a standard error_response dict, or None if unknown.

    Looks up the exception's *exact* type in ERROR_MAPPINGS and, if found,
    generates a standardized error response using the mapped ErrorCode and ErrorType.

    Args:
        exc: The exception to convert.
        request_id: Correlation identifier to attach to the response.

    Returns:
        A dict suitable for a tool response, or None if the exception type
        is not registered in ERROR_MAPPINGS.
    """
    mapping = ERROR_MAPPINGS.get(type(exc))
    if mapping is None:
        return None

    from dataclasses import asdict

    from omnifocus_mcp.core.responses.builders import error_response

    code, error_type, remediation = mapping
    return asdict(
        error_response(
            str(exc),
            error_code=code,
            error_type=error_type,
            remediation=remediation,
            details=_error_details(exc) or None,
            request_id=request_id,
        )
    )
