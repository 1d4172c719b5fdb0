"""Metrics, audit entries and the ``@mcp_tool`` decorator that emits both.

    @canonical_tool(mcp, canonical_name="task")
    @mcp_tool(tool_name="task", emit_metrics=True, audit=True)
    def task(action: str, ...) -> dict:
        ...
"""

from omnifocus_mcp.core.observability.audit import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    get_audit_logger,
)
from omnifocus_mcp.core.observability.decorators import mcp_tool
from omnifocus_mcp.core.observability.metrics import Metric, MetricsCollector, get_metrics

__all__ = [
    "Metric",
    "MetricsCollector",
    "get_metrics",
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "get_audit_logger",
    "mcp_tool",
]
