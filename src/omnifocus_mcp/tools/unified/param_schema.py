"""Declarative parameter validation for unified tool handlers.

A handler declares one schema per action and calls :func:`validate_payload`
before it touches OmniFocus, so malformed input never reaches a generated
script::

    _CREATE_SCHEMA = {
        "name": Str(required=True),
        "estimated_minutes": Num(integer_only=True, min_val=0),
        "due": DateStr(),
        "flagged": Bool(default=False),
    }

    def _handle_create(*, config, **payload):
        err = validate_payload(payload, _CREATE_SCHEMA, tool_name="task", action="create", request_id=rid)
        if err:
            return err
        # payload is now checked and normalised in place

Each field type checks a value with ``problem()`` (``None`` when fine) and
converts it with ``normalise()``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Union

from omnifocus_mcp.core.errors import ValidationError
from omnifocus_mcp.core.omnifocus.dates import parse_datetime
from omnifocus_mcp.core.responses import ErrorCode, ErrorType, error_response


@dataclass(frozen=True)
class _Field:
    required: bool = False
    error_code: ErrorCode = ErrorCode.INVALID_FORMAT
    remediation: Optional[str] = None

    def problem(self, name: str, value: Any) -> Optional[str]:
        return None

    def normalise(self, name: str, value: Any) -> Any:
        return value


@dataclass(frozen=True)
class Str(_Field):
    """Text; stripped unless ``strip=False``, optionally limited to *choices*."""

    strip: bool = True
    choices: Optional[FrozenSet[str]] = None

    def problem(self, name: str, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return f"{name} must be a string"
        if self.choices is not None and self.normalise(name, value) not in self.choices:
            return "Must be one of: " + ", ".join(sorted(self.choices))
        return None

    def normalise(self, name: str, value: Any) -> Any:
        return value.strip() if self.strip else value


@dataclass(frozen=True)
class Num(_Field):
    integer_only: bool = False
    min_val: Optional[Union[int, float]] = None
    max_val: Optional[Union[int, float]] = None

    def problem(self, name: str, value: Any) -> Optional[str]:
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "Provide an integer value" if self.integer_only else "Provide a numeric value"
        if self.integer_only and not isinstance(value, int):
            return f"{name} must be an integer"
        if self.min_val is not None and value < self.min_val:
            return f"Value must be >= {self.min_val}"
        if self.max_val is not None and value > self.max_val:
            return f"Value must be <= {self.max_val}"
        return None


@dataclass(frozen=True)
class Bool(_Field):
    """Flag; *default* fills in a missing value before the required check."""

    default: Optional[bool] = None

    def problem(self, name: str, value: Any) -> Optional[str]:
        return None if isinstance(value, bool) else "Expected a boolean value"


@dataclass(frozen=True)
class List_(_Field):
    """Tag names or ids. Blank entries are dropped."""

    def problem(self, name: str, value: Any) -> Optional[str]:
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return None
        return f"{name} must be a list of strings"

    def normalise(self, name: str, value: Any) -> Any:
        return [item.strip() for item in value if item.strip()]


@dataclass(frozen=True)
class DateStr(_Field):
    """``YYYY-MM-DD`` or ISO-8601 datetime, normalised to UTC ``...Z``."""

    remediation: Optional[str] = "Use YYYY-MM-DD or an ISO-8601 datetime such as 2024-01-01T09:00:00Z"

    def problem(self, name: str, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return f"{name} must be a string"
        try:
            parse_datetime(value, field=name)
        except ValidationError as exc:
            return str(exc)
        return None

    def normalise(self, name: str, value: Any) -> Any:
        return parse_datetime(value, field=name)


@dataclass(frozen=True)
class AtLeastOne:
    """Cross-field rule: at least one of *fields* must be non-None."""

    fields: Tuple[str, ...]
    error_code: ErrorCode = ErrorCode.VALIDATION_ERROR
    remediation: Optional[str] = None


FieldSchema = Union[Str, Num, Bool, List_, DateStr]


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_payload(
    payload: Dict[str, Any],
    schema: Mapping[str, FieldSchema],
    *,
    tool_name: str,
    action: str,
    request_id: Optional[str] = None,
    cross_field_rules: Optional[Sequence[AtLeastOne]] = None,
) -> Optional[dict]:
    """Check *payload* against *schema*; return an error envelope or ``None``.

    Fields are checked in schema order and the first failure wins. On
    success the payload holds normalised values and applied defaults.
    """
    where = f"{tool_name}.{action}"

    def reject(field: str, message: str, code: ErrorCode, remediation: Optional[str]) -> dict:
        return asdict(
            error_response(
                f"Invalid field '{field}' for {where}: {message}",
                error_code=code,
                error_type=ErrorType.VALIDATION,
                remediation=remediation or f"Provide a valid '{field}' value",
                details={"field": field, "action": where},
                request_id=request_id,
            )
        )

    for name, spec in schema.items():
        if isinstance(spec, Bool) and spec.default is not None and payload.get(name) is None:
            payload[name] = spec.default
        value = payload.get(name)

        if spec.required and _missing(value):
            return reject(name, f"Provide a non-empty {name} parameter", ErrorCode.MISSING_REQUIRED, spec.remediation)
        if value is None:
            continue

        message = spec.problem(name, value)
        if message is not None:
            return reject(name, message, spec.error_code, spec.remediation)
        payload[name] = spec.normalise(name, value)

    for rule in cross_field_rules or ():
        if all(payload.get(field) is None for field in rule.fields):
            names: List[str] = [f"'{field}'" for field in rule.fields]
            return reject(
                rule.fields[0],
                f"At least one of {', '.join(names)} must be provided",
                rule.error_code,
                rule.remediation,
            )

    return None
