"""Audit trail: which tool ran, and what it changed in OmniFocus.

Entries go to the ``omnifocus_mcp.core.observability.audit`` logger with the
entry attached as ``record.audit``. The correlation id of the active request
is filled in automatically.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from omnifocus_mcp.core.context import get_correlation_id

logger = logging.getLogger(__name__)


class AuditEventType(Enum):
    TOOL_INVOCATION = "tool_invocation"
    RESOURCE_CHANGE = "resource_change"


@dataclass
class AuditEvent:
    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    correlation_id: Optional[str] = field(default_factory=lambda: get_correlation_id() or None)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": {key: value for key, value in self.details.items() if value is not None},
        }
        if self.correlation_id:
            entry["correlation_id"] = self.correlation_id
        return entry


class AuditLogger:
    def log(self, event: AuditEvent) -> None:
        logger.info("AUDIT: %s", event.event_type.value, extra={"audit": event.to_dict()})

    def resource_change(self, resource_type: str, resource_id: str, action: str, **details: Any) -> None:
        """Record a create, update or delete of a task, project or tag."""
        self.log(
            AuditEvent(
                AuditEventType.RESOURCE_CHANGE,
                {"resource_type": resource_type, "resource_id": resource_id, "action": action, **details},
            )
        )

    def tool_invocation(
        self,
        tool_name: str,
        *,
        success: bool,
        duration_ms: float,
        correlation_id: Optional[str] = None,
        **details: Any,
    ) -> None:
        event = AuditEvent(
            AuditEventType.TOOL_INVOCATION,
            {"tool": tool_name, "success": success, "duration_ms": round(duration_ms, 2), **details},
        )
        if correlation_id:
            event.correlation_id = correlation_id
        self.log(event)


_audit = AuditLogger()


def get_audit_logger() -> AuditLogger:
    """Return the process-wide audit logger."""
    return _audit
