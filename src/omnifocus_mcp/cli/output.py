"""JSON output for CLI commands.

Commands never print free text: results go through :func:`emit_success`,
failures through :func:`emit_error` or :func:`emit_exception`, which exit
with status 1 after printing the error envelope.
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, NoReturn, Optional

import click

from omnifocus_mcp.core.context import get_correlation_id
from omnifocus_mcp.core.errors import error_to_response
from omnifocus_mcp.core.responses import ErrorCode, ErrorType, error_response, success_response

_compact = False


def configure_output(compact: bool) -> None:
    """Choose compact (single line) or indented JSON for the rest of the process."""
    global _compact
    _compact = bool(compact)


def emit(envelope: Dict[str, Any]) -> None:
    if _compact:
        text = json.dumps(envelope, separators=(",", ":"), default=str)
    else:
        text = json.dumps(envelope, indent=2, default=str)
    click.echo(text)


def emit_success(data: Dict[str, Any]) -> None:
    emit(asdict(success_response(data=data, request_id=get_correlation_id() or None)))


def emit_error(
    message: str,
    *,
    code: str = ErrorCode.INTERNAL_ERROR.value,
    error_type: str = ErrorType.INTERNAL.value,
    remediation: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> NoReturn:
    emit(
        asdict(
            error_response(
                message,
                error_code=code,
                error_type=error_type,
                remediation=remediation,
                details=details,
                request_id=get_correlation_id() or None,
            )
        )
    )
    sys.exit(1)


def emit_exception(exc: Exception) -> NoReturn:
    """Print the envelope for *exc* and exit 1.

    Known domain errors keep their mapped code; anything else is reported as
    an internal error carrying the exception class name.
    """
    envelope = error_to_response(exc, request_id=get_correlation_id() or None)
    if envelope is not None:
        emit(envelope)
        sys.exit(1)
    emit_error(
        f"Unexpected error: {exc}",
        code=ErrorCode.INTERNAL_ERROR.value,
        error_type=ErrorType.INTERNAL.value,
        remediation="Run again with --log-level DEBUG for details",
        details={"error_type": type(exc).__name__},
    )
