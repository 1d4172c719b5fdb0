"""``@mcp_tool``: correlation id, metrics and audit entry around a tool call."""

import functools
import logging
import time
from typing import Any, Callable, Optional, TypeVar

from omnifocus_mcp.core.context import (
    generate_correlation_id,
    get_correlation_id,
    sync_request_context,
)
from omnifocus_mcp.core.observability.audit import _audit
from omnifocus_mcp.core.observability.metrics import _metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _failure_message(result: Any) -> Optional[str]:
    """Error text of a failed envelope, ``None`` for anything else."""
    if isinstance(result, dict) and result.get("success") is False:
        return result.get("error") or "error"
    return None


def mcp_tool(tool_name: Optional[str] = None, emit_metrics: bool = True, audit: bool = True) -> Callable[[F], F]:
    """Wrap a unified tool function.

    The call runs under a ``tool_<ulid>`` correlation id (an outer one is
    reused), so every envelope it returns carries that id as
    ``meta.request_id``. An error envelope counts as a failed call, same as a
    raised exception.

    Args:
        tool_name: Name used in metrics and audit entries (defaults to the function name).
        emit_metrics: Emit ``tool.invocations`` and ``tool.latency``.
        audit: Write a ``tool_invocation`` audit entry.
    """

    def decorator(func: F) -> F:
        name = tool_name or func.__name__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            action = kwargs.get("action") if isinstance(kwargs.get("action"), str) else None
            with sync_request_context(get_correlation_id() or generate_correlation_id("tool")) as corr_id:
                start = time.perf_counter()
                error: Optional[str] = None
                try:
                    result = func(*args, **kwargs)
                    error = _failure_message(result)
                    return result
                except Exception as exc:
                    error = str(exc) or type(exc).__name__
                    raise
                finally:
                    duration_ms = (time.perf_counter() - start) * 1000
                    status = "error" if error else "success"
                    if emit_metrics:
                        labels = {"tool": name, "status": status}
                        if action:
                            labels["action"] = action
                        _metrics.counter("tool.invocations", labels=labels)
                        _metrics.timer("tool.latency", duration_ms, labels={"tool": name})
                    if audit:
                        _audit.tool_invocation(
                            name,
                            success=error is None,
                            duration_ms=duration_ms,
                            correlation_id=corr_id,
                            action=action,
                            error=error,
                        )
                    logger.debug("%s(%s) finished in %.1f ms", name, action or "", duration_ms)

        return wrapper  # type: ignore[return-value]

    return decorator
