"""Log-emitted metrics.

Nothing is aggregated in process: every sample becomes one INFO record on the
``omnifocus_mcp.core.observability.metrics`` logger with the sample attached
as ``record.metric``, so log shippers can pick them out.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Literal, Mapping, Optional, Union

logger = logging.getLogger(__name__)

MetricKind = Literal["counter", "timer"]


@dataclass(frozen=True)
class Metric:
    name: str
    value: Union[int, float]
    kind: MetricKind
    labels: Mapping[str, str] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "type": self.kind,
            "labels": dict(self.labels),
            "timestamp": self.timestamp,
        }


class MetricsCollector:
    """Emit counters and timers under a common name prefix."""

    def __init__(self, prefix: str = "omnifocus_mcp") -> None:
        self.prefix = prefix

    def emit(self, metric: Metric) -> None:
        logger.info("METRIC: %s.%s", self.prefix, metric.name, extra={"metric": metric.to_dict()})

    def counter(self, name: str, value: int = 1, labels: Optional[Mapping[str, str]] = None) -> None:
        self.emit(Metric(name, value, "counter", dict(labels or {})))

    def timer(self, name: str, duration_ms: float, labels: Optional[Mapping[str, str]] = None) -> None:
        self.emit(Metric(name, round(duration_ms, 2), "timer", dict(labels or {})))

    @contextmanager
    def timed(self, name: str, labels: Optional[Mapping[str, str]] = None) -> Iterator[None]:
        """Time the block; the ``status`` label records whether it raised."""
        start = time.perf_counter()
        status = "success"
        try:
            yield
        except Exception:
            status = "error"
            raise
        finally:
            self.timer(name, (time.perf_counter() - start) * 1000, {**(labels or {}), "status": status})


_metrics = MetricsCollector()


def get_metrics() -> MetricsCollector:
    """Return the process-wide collector."""
    return _metrics
