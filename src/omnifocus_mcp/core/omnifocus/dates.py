"""Date parsing for caller-supplied timestamps.

Scripts only ever receive normalized UTC ISO-8601 strings; anything a user
types goes through :func:`parse_datetime` first.
"""

from __future__ import annotations

from datetime import datetime, timezone

from omnifocus_mcp.core.errors import ValidationError


def format_iso(moment: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SS.sssZ`` in UTC."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp as produced by the bridge into an aware datetime."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment


def parse_datetime(value: str, *, field: str = "date") -> str:
    """Validate a user-supplied date or datetime and normalize it to UTC.

    Accepts ``YYYY-MM-DD``, ``YYYY-MM-DD HH:MM[:SS]`` and full ISO-8601 with
    an optional ``Z`` or offset. Values without an offset are local time.

    Raises:
        ValidationError: If *value* is not a recognizable date.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid date: {value!r}", field=field)
    try:
        moment = parse_iso(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {value}", field=field) from exc
    return format_iso(moment)
