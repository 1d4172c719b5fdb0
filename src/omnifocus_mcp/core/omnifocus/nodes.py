"""Typed intermediate representation for generated bridge scripts.

Scripts are assembled from small nodes (skip conditions, mutations, helper
calls, collection loops) and rendered to source text in one place.
User-supplied text enters only as :class:`SafeLiteral`; everything else is
:class:`Code` written by the compilers themselves.
"""

from __future__ import annotations

import json
import string
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

from omnifocus_mcp.core.omnifocus.literals import SafeLiteral
from omnifocus_mcp.core.omnifocus.store import OMNIFOCUS_STORE, Store

_INDENT = "  "


@dataclass(frozen=True)
class Code:
    """A trusted script fragment."""

    source: str

    def __str__(self) -> str:
        return self.source

    @classmethod
    def fill(cls, template: str, **parts: Union["Code", SafeLiteral]) -> "Code":
        """Substitute ``{name}`` placeholders with code or safe literals only."""
        for key, part in parts.items():
            if not isinstance(part, (Code, SafeLiteral)):
                raise TypeError(f"Placeholder '{key}' must be Code or SafeLiteral, got {type(part).__name__}")
        return cls(template.format(**{key: str(part) for key, part in parts.items()}))


Expr = Union[Code, SafeLiteral]


def _args(args: Sequence[Expr]) -> str:
    return ", ".join(str(arg) for arg in args)


@dataclass(frozen=True)
class Bind:
    """``const name = expression;``"""

    name: str
    expression: Expr

    def render(self) -> str:
        return f"const {self.name} = {self.expression};"


@dataclass(frozen=True)
class Skip:
    """Skip the current loop item when *condition* holds."""

    condition: Code

    def render(self) -> str:
        return f"if ({self.condition}) continue;"


@dataclass(frozen=True)
class Assign:
    """``target.attribute = value;``"""

    target: str
    attribute: str
    value: Expr

    def render(self) -> str:
        return f"{self.target}.{self.attribute} = {self.value};"


@dataclass(frozen=True)
class Invoke:
    """``target.method(args);``"""

    target: str
    method: str
    args: Tuple[Expr, ...] = ()

    def render(self) -> str:
        return f"{self.target}.{self.method}({_args(self.args)});"


@dataclass(frozen=True)
class HelperCall:
    """Call a helper or bridge function, optionally binding the result."""

    helper: str
    args: Tuple[Expr, ...] = ()
    bind: Optional[str] = None

    def expression(self) -> Code:
        return Code(f"{self.helper}({_args(self.args)})")

    def render(self) -> str:
        if self.bind:
            return f"const {self.bind} = {self.expression()};"
        return f"{self.expression()};"


@dataclass(frozen=True)
class Collect:
    """Iterate *collection*, apply skip conditions and gather *emit* per item."""

    variable: str
    collection: str
    emit: Code
    skips: Tuple[Skip, ...] = ()
    into: str = "results"

    def render(self) -> str:
        lines = [f"const {self.into} = [];", f"for (const {self.variable} of {self.collection}) {{"]
        lines.extend(_INDENT + skip.render() for skip in self.skips)
        lines.append(f"{_INDENT}{self.into}.push({self.emit});")
        lines.append("}")
        return "\n".join(lines)


@dataclass(frozen=True)
class Return:
    """Return *expression* as the script payload."""

    expression: Expr

    def render(self) -> str:
        return f"return {self.expression};"


Node = Union[Bind, Skip, Assign, Invoke, HelperCall, Collect, Return]


def render_nodes(nodes: Sequence[Node], depth: int = 0) -> str:
    """Render *nodes* one statement per line at the given indent depth."""
    prefix = _INDENT * depth
    rendered = []
    for node in nodes:
        for line in node.render().splitlines():
            rendered.append(prefix + line)
    return "\n".join(rendered)


# Every script reports through the same envelope so failures keep their kind.
_ENVELOPE = string.Template(
    """$helpers
(() => {
  try {
    const payload = (() => {
$body
    })();
    return JSON.stringify({ ok: true, data: payload === undefined ? null : payload });
  } catch (error) {
    const kind = error && error.kind ? error.kind : "bridge";
    const message = error && error.message ? error.message : String(error);
    const failure = { kind: kind, message: message };
    if (error && error.details) {
      failure.details = error.details;
    }
    return JSON.stringify({ ok: false, error: failure });
  }
})();"""
)

_BRIDGE_WRAPPER = string.Template(
    """const app = Application($application);
app.includeStandardAdditions = true;
const result = app.evaluateJavascript($source);
result;"""
)


@dataclass(frozen=True)
class Script:
    """A complete script: helper library plus a body of nodes."""

    body: Tuple[Node, ...]
    store: Store = field(default=OMNIFOCUS_STORE)
    include_helpers: bool = True

    def render(self) -> str:
        from omnifocus_mcp.core.omnifocus.helpers import render_helpers

        helpers = render_helpers(self.store) if self.include_helpers else ""
        return _ENVELOPE.substitute(helpers=helpers, body=render_nodes(self.body, depth=3))


def wrap_for_bridge(script: Script, application: str = "OmniFocus") -> str:
    """Render *script* as an interpreter program that evaluates it inside the application."""
    return _BRIDGE_WRAPPER.substitute(
        application=json.dumps(application),
        source=json.dumps(script.render().strip()),
    )
