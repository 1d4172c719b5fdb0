"""Caller input validation errors."""

from typing import Optional


class ValidationError(ValueError):
    """Malformed caller input, rejected before or inside a generated script.

    Attributes:
        field: Name of the offending request field, when known.
    """

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
