"""Response envelope shared by MCP tools and CLI commands.

Sub-modules:
    types           - ErrorCode, ErrorType, HTTP_STATUS, ToolResponse, response_meta
    builders        - success_response, error_response
    errors_generic  - validation_error, not_found_error
"""

from omnifocus_mcp.core.responses.builders import error_response, success_response
from omnifocus_mcp.core.responses.errors_generic import not_found_error, validation_error
from omnifocus_mcp.core.responses.types import (
    HTTP_STATUS,
    RESPONSE_VERSION,
    ErrorCode,
    ErrorType,
    ToolResponse,
    response_meta,
)

__all__ = [
    "HTTP_STATUS",
    "RESPONSE_VERSION",
    "ErrorCode",
    "ErrorType",
    "ToolResponse",
    "response_meta",
    "success_response",
    "error_response",
    "validation_error",
    "not_found_error",
]
