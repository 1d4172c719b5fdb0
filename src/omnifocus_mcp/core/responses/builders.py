"""Constructors for success and error envelopes."""

from typing import Any, Dict, Mapping, Optional, Union

from omnifocus_mcp.core.responses.types import (
    HTTP_STATUS,
    ErrorCode,
    ErrorType,
    ToolResponse,
    response_meta,
)


def _text(value: Union[ErrorCode, ErrorType, str]) -> str:
    return value.value if isinstance(value, (ErrorCode, ErrorType)) else value


def success_response(
    data: Optional[Mapping[str, Any]] = None,
    *,
    request_id: Optional[str] = None,
    **fields: Any,
) -> ToolResponse:
    """Wrap an operation result.

    ``data`` and keyword fields are merged, so both of these work::

        success_response({"task": task.to_dict()})
        success_response(tasks=records, count=len(records))
    """
    payload: Dict[str, Any] = dict(data or {})
    payload.update(fields)
    return ToolResponse(success=True, data=payload, meta=response_meta(request_id))


def error_response(
    message: str,
    *,
    error_code: Union[ErrorCode, str] = ErrorCode.INTERNAL_ERROR,
    error_type: Union[ErrorType, str] = ErrorType.INTERNAL,
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    request_id: Optional[str] = None,
) -> ToolResponse:
    """Wrap a failure.

    ``data`` always carries ``error_code``, ``error_type`` and the HTTP-style
    ``status_code`` derived from the type; ``remediation`` and ``details``
    only when given.

    Example:
        >>> error_response(
        ...     "Task not found: Buy milk",
        ...     error_code=ErrorCode.NOT_FOUND,
        ...     error_type=ErrorType.NOT_FOUND,
        ...     remediation="Check the id or the exact, case-sensitive name.",
        ... )
    """
    kind = _text(error_type)
    payload: Dict[str, Any] = {
        "error_code": _text(error_code),
        "error_type": kind,
        "status_code": HTTP_STATUS.get(kind, 500),
    }
    if remediation is not None:
        payload["remediation"] = remediation
    if details:
        payload["details"] = dict(details)
    return ToolResponse(success=False, data=payload, error=message, meta=response_meta(request_id))
