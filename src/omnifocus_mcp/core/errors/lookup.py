"""Identifier resolution error classes.

Raised when an id, name or tag path given by a caller does not resolve to
exactly one object in the task store.
"""

from typing import Optional, Sequence


class NotFoundError(LookupError):
    """Raised when an identifier resolves to no object.

    Attributes:
        kind: Entity label ("Task", "Project", "Tag", ...) when known.
        identifier: The identifier that failed to resolve, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: Optional[str] = None,
        identifier: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.identifier = identifier


class AmbiguousMatchError(LookupError):
    """Raised when a bare tag name matches more than one tag.

    The message lists every candidate's full path and id.
    """

    def __init__(self, message: str, *, candidates: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.candidates = tuple(candidates)
