"""Script literal safety.

Every piece of free-form text (names, notes, queries, identifiers, dates)
that ends up inside a generated script passes through :func:`literal`.
The resulting :class:`SafeLiteral` is the only value the script IR accepts
for user-supplied text; it cannot be constructed any other way.

Usage:
    from omnifocus_mcp.core.omnifocus.literals import literal

    name = literal('Buy "oat" milk')
    str(name)  # '"Buy \\"oat\\" milk"'
"""

from __future__ import annotations

import json
from typing import Iterable, Union

# Order matters: backslash first so later escapes are not doubled.
_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)

_CONSTRUCTION_TOKEN = object()


def escape_string(text: str) -> str:
    """Escape *text* for embedding between double quotes in a script."""
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text


class SafeLiteral:
    """A double-quoted script string literal produced by :func:`literal`."""

    __slots__ = ("_source", "_value")

    def __init__(self, source: str, value: str, _token: object = None) -> None:
        if _token is not _CONSTRUCTION_TOKEN:
            raise TypeError("SafeLiteral instances can only be created with literal()")
        self._source = source
        self._value = value

    @property
    def value(self) -> str:
        """The original, unescaped text."""
        return self._value

    def __str__(self) -> str:
        return self._source

    def __repr__(self) -> str:
        return f"SafeLiteral({self._source})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SafeLiteral) and other._source == self._source

    def __hash__(self) -> int:
        return hash(self._source)


def literal(text: str) -> SafeLiteral:
    """Return *text* as an escaped, double-quoted script literal."""
    if not isinstance(text, str):
        raise TypeError(f"literal() expects str, got {type(text).__name__}")
    return SafeLiteral(f'"{escape_string(text)}"', text, _CONSTRUCTION_TOKEN)


def literal_list(values: Iterable[str]) -> str:
    """Render an array literal of escaped strings."""
    return "[" + ", ".join(str(literal(value)) for value in values) + "]"


ScalarValue = Union[bool, int, float, None]


def scalar(value: ScalarValue) -> str:
    """Render a boolean, number or null as script source."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    raise TypeError(f"scalar() expects bool, number or None, got {type(value).__name__}")
