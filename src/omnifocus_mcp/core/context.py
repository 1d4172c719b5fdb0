"""Request context propagation.

Holds the correlation id of the tool call or CLI command being served in a
context variable so responses, metrics and audit entries can share it
without threading it through every signature.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import Iterator, Optional

from ulid import ULID

_correlation_id: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="")


def generate_correlation_id(prefix: str = "req") -> str:
    """Return a new sortable correlation id such as ``tool_01J9...``."""
    return f"{prefix}_{ULID()}"


def get_correlation_id() -> str:
    """Return the active correlation id, or an empty string outside a request."""
    return _correlation_id.get()


@contextmanager
def sync_request_context(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind *correlation_id* (or a fresh one) for the duration of the block."""
    corr_id = correlation_id or generate_correlation_id()
    token = _correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        _correlation_id.reset(token)
