"""Parsing helpers for configuration values.

TOML values arrive typed; environment values arrive as strings. Both go
through these helpers so a bad value is logged and ignored instead of
aborting startup.
"""

import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_positive_float(value: Any, *, setting: str) -> Optional[float]:
    """Return *value* as a positive float, or ``None`` (with a warning) when invalid."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r (keeping default)", setting, value)
        return None
    if parsed <= 0:
        logger.warning("Invalid value for %s: %r must be positive (keeping default)", setting, value)
        return None
    return parsed


def _parse_positive_int(value: Any, *, setting: str) -> Optional[int]:
    if isinstance(value, bool):
        logger.warning("Invalid value for %s: %r (keeping default)", setting, value)
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r (keeping default)", setting, value)
        return None
    if parsed <= 0:
        logger.warning("Invalid value for %s: %r must be positive (keeping default)", setting, value)
        return None
    return parsed


def _parse_name_list(value: Any) -> List[str]:
    """Accept a TOML list or a comma-separated string."""
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(item) for item in value]
    return [item.strip() for item in items if item.strip()]
