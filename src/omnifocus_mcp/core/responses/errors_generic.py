"""Error envelopes built directly by handlers rather than mapped from an exception."""

from typing import Any, Mapping, Optional

from omnifocus_mcp.core.responses.builders import error_response
from omnifocus_mcp.core.responses.types import ErrorCode, ErrorType, ToolResponse


def validation_error(
    message: str,
    *,
    field: Optional[str] = None,
    code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    details: Optional[Mapping[str, Any]] = None,
    remediation: Optional[str] = None,
    request_id: Optional[str] = None,
) -> ToolResponse:
    """Reject caller input. *field* is copied into ``details``.

    Example:
        >>> validation_error("Pass either due or clear_due, not both", field="due")
    """
    merged = {**(details or {})}
    if field:
        merged.setdefault("field", field)
    return error_response(
        message,
        error_code=code,
        error_type=ErrorType.VALIDATION,
        remediation=remediation,
        details=merged,
        request_id=request_id,
    )


def not_found_error(
    kind: str,
    identifier: str,
    *,
    remediation: Optional[str] = None,
    request_id: Optional[str] = None,
) -> ToolResponse:
    """Report that *identifier* names no *kind* (``"Tool"``, ``"Perspective"``, ...).

    ``details`` uses the same keys as a mapped :class:`NotFoundError`.
    """
    return error_response(
        f"{kind} '{identifier}' not found",
        error_code=ErrorCode.NOT_FOUND,
        error_type=ErrorType.NOT_FOUND,
        remediation=remediation or f"Check the {kind.lower()} name.",
        details={"kind": kind, "identifier": identifier},
        request_id=request_id,
    )
