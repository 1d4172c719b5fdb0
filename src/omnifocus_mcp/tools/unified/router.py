"""Action routing for unified tools.

Each unified tool takes an ``action`` parameter; an :class:`ActionRouter`
maps that name (or one of its aliases, case-insensitively) to a handler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from omnifocus_mcp.core.errors import ActionRouterError


@dataclass(frozen=True)
class ActionDefinition:
    """One routable action of a unified tool."""

    name: str
    handler: Callable[..., dict]
    summary: str = ""
    aliases: Tuple[str, ...] = field(default_factory=tuple)


class ActionRouter:
    """Dispatch table from action names to handlers."""

    def __init__(self, tool_name: str, actions: Sequence[ActionDefinition]) -> None:
        self.tool_name = tool_name
        self._actions: Dict[str, ActionDefinition] = {}
        self._lookup: Dict[str, ActionDefinition] = {}
        for definition in actions:
            if definition.name in self._actions:
                raise ValueError(f"Duplicate action '{definition.name}' for tool '{tool_name}'")
            self._actions[definition.name] = definition
            for key in (definition.name, *definition.aliases):
                self._lookup[key.lower()] = definition

    def allowed_actions(self) -> List[str]:
        return list(self._actions)

    def resolve(self, action: Optional[str]) -> ActionDefinition:
        definition = self._lookup.get((action or "").strip().lower())
        if definition is None:
            raise ActionRouterError(
                f"Unsupported {self.tool_name} action '{action}'",
                allowed_actions=self.allowed_actions(),
            )
        return definition

    def describe(self) -> Dict[str, str]:
        """Action name to summary, in registration order."""
        return {name: definition.summary for name, definition in self._actions.items()}

    def dispatch(self, action: Optional[str], **kwargs: Any) -> dict:
        return self.resolve(action).handler(**kwargs)
