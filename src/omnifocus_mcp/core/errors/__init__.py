"""Unified error hierarchy for omnifocus-mcp.

All custom exception classes are defined in domain-specific modules within
this package. This __init__.py re-exports everything for convenient access.

Usage:
    # Import from domain modules for specificity
    from omnifocus_mcp.core.errors.lookup import NotFoundError

    # Or import from the package
    from omnifocus_mcp.core.errors import BridgeTimeoutError, error_to_response
"""

# --- Bridge errors ---
from omnifocus_mcp.core.errors.bridge import (
    BridgeError,
    BridgeOutputError,
    BridgeTimeoutError,
    PreconditionError,
)

# --- Execution errors ---
from omnifocus_mcp.core.errors.execution import ActionRouterError

# --- Lookup errors ---
from omnifocus_mcp.core.errors.lookup import AmbiguousMatchError, NotFoundError

# --- Validation errors ---
from omnifocus_mcp.core.errors.validation import ValidationError

# --- Base / Registry ---
from omnifocus_mcp.core.errors.base import ERROR_MAPPINGS, error_to_response  # noqa: E402

__all__ = [
    "ERROR_MAPPINGS",
    "error_to_response",
    "ActionRouterError",
    "AmbiguousMatchError",
    "BridgeError",
    "BridgeOutputError",
    "BridgeTimeoutError",
    "NotFoundError",
    "PreconditionError",
    "ValidationError",
]
