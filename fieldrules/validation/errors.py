"""Validation Failure Model

Structured failures with field paths, stable identifiers, numeric codes and
templated re-rendering. Supports both fail-fast and collect-all accumulation.

Failure Format:
{
    "record": "Order",
    "field": "Items[2].Quantity",
    "identifier": "min-integer",
    "code": "E2200_INTEGER_MIN",
    "message": "integer must be greater than 0",
    "value": "0",
    "parameter": "0",
    "metadata": {"min": 0}
}
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Sequence

from fieldrules.config import ValidationMode
from fieldrules.errors import Err, ErrorCode, Ok, Result
from .schema import FieldDescriptor, Kind, render_value

_TEMPLATE_TOKEN = re.compile(r"\$\{(\w*)\}")


class RuleIdentifier(str, Enum):
    """Stable identifiers reported by the built-in rules."""
    REQUIRED = "required"
    INVALID_TYPE = "invalid-type"
    MIN_INTEGER = "min-integer"
    MAX_INTEGER = "max-integer"
    MIN_FLOAT = "min-float"
    MAX_FLOAT = "max-float"
    MIN_LENGTH = "min-length"
    MAX_LENGTH = "max-length"
    CONTAINS = "contains"
    MUST_BE_TRUE = "must-be-true"
    MUST_BE_FALSE = "must-be-false"
    MIN_ITEMS = "min-items"
    MAX_ITEMS = "max-items"


@dataclass(frozen=True, slots=True)
class FieldContext:
    """What a check sees: the record type, the field and its current value."""
    record_type: type
    field: FieldDescriptor
    value: Any
    path: tuple[str | int, ...]


Check = Callable[[FieldContext], "Result[None, FailureEntry]"]
RuleConstructor = Callable[[str], Check]


def format_path(path: Sequence[str | int]) -> str:
    """Format a path tuple as ``Orders[2].Total``."""
    if not path: return "$"
    parts = []
    for segment in path:
        if isinstance(segment, int): parts.append(f"[{segment}]")
        elif parts: parts.append(f".{segment}")
        else: parts.append(str(segment))
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class FailureEntry:
    """A single violated rule.

    Carries enough context to re-render or remediate programmatically:
    - path: field names and element indices from the validation root
    - identifier: stable string id of the rule (e.g. "min-length")
    - code: numeric ErrorCode
    - parameter: raw directive parameter (e.g. "3" for ``min=3``)
    - metadata: named values for templates (e.g. {"min": 3})
    """
    record_name: str
    field_name: str
    path: tuple[str | int, ...]
    kind: Kind
    type_name: str
    value: str
    identifier: str
    code: ErrorCode
    message: str
    parameter: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_context(cls, ctx: FieldContext, message: str, identifier: str, *,
                     code: ErrorCode = ErrorCode.E2900_CUSTOM_RULE, parameter: str = "", **metadata) -> FailureEntry:
        return cls(record_name=ctx.record_type.__name__, field_name=ctx.field.name, path=ctx.path,
            kind=ctx.field.kind, type_name=ctx.field.type.type_name, value=render_value(ctx.value),
            identifier=str(identifier.value if isinstance(identifier, Enum) else identifier), code=code,
            message=message, parameter=parameter, metadata=metadata)

    @property
    def path_string(self) -> str: return format_path(self.path)

    def format(self, template: str) -> str:
        """Render a caller template.

        ``${}`` is replaced by the rule parameter, ``${name}`` by the metadata
        value of that name. Unknown tokens are left untouched.
        """
        def substitute(match: re.Match) -> str:
            key = match.group(1)
            if not key: return self.parameter
            if key in self.metadata: return str(self.metadata[key])
            return match.group(0)
        return _TEMPLATE_TOKEN.sub(substitute, template)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured output."""
        result = {"record": self.record_name, "field": self.path_string, "identifier": self.identifier,
            "code": self.code.name, "message": self.message, "value": self.value}
        if self.parameter: result["parameter"] = self.parameter
        if self.metadata: result["metadata"] = dict(self.metadata)
        return result

    def __str__(self) -> str:
        return (f"Validation error on record '{self.record_name}', field '{self.path_string}' "
            f"({self.type_name}) with value '{self.value}': {self.message}")


def failure(ctx: FieldContext, message: str, identifier: str, *,
            code: ErrorCode = ErrorCode.E2900_CUSTOM_RULE, parameter: str = "", **metadata) -> Err[FailureEntry]:
    """Build the Err a check returns when its rule is violated."""
    return Err(FailureEntry.from_context(ctx, message, identifier, code=code, parameter=parameter, **metadata))


def passed() -> Ok[None]:
    return Ok(None)


@dataclass
class ValidationError(Exception):
    """Raised by ``Engine.validate_or_raise`` with every failure found."""
    message: str
    details: list[FailureEntry]
    mode: ValidationMode = ValidationMode.COLLECT_ALL

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.details: return self.message
        if len(self.details) == 1: return f"{(d := self.details[0]).path_string}: {d.message}"
        return f"{self.message} ({len(self.details)} errors)"

    @property
    def field_errors(self) -> dict[str, list[FailureEntry]]:
        """Group errors by field path."""
        result: dict[str, list[FailureEntry]] = {}
        for detail in self.details: result.setdefault(detail.path_string, []).append(detail)
        return result

    @property
    def first_error(self) -> FailureEntry | None: return self.details[0] if self.details else None

    def get_errors_for_field(self, path: str) -> list[FailureEntry]:
        return [d for d in self.details if d.path_string == path]

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"type": "validation_error", "message": self.message, "mode": self.mode.value,
            "error_count": len(self.details), "errors": [d.to_dict() for d in self.details]}}


class FailureAccumulator(ABC):
    """Abstract base for failure accumulation strategies."""

    @abstractmethod
    def add(self, entry: FailureEntry) -> bool:
        """Add a failure. Returns True if the walk should continue."""

    @abstractmethod
    def get_errors(self) -> list[FailureEntry]:
        """Get accumulated failures."""

    @property
    @abstractmethod
    def mode(self) -> ValidationMode:
        """Get the accumulation mode."""

    def has_errors(self) -> bool: return bool(self.get_errors())

    def to_validation_error(self, message: str = "Validation failed") -> ValidationError | None:
        """Convert to ValidationError if failures exist."""
        if not self.has_errors(): return None
        return ValidationError(message=message, details=self.get_errors(), mode=self.mode)


@dataclass
class FailFastAccumulator(FailureAccumulator):
    """Fail-fast accumulator: stops on first failure."""
    _error: FailureEntry | None = None

    @property
    def mode(self) -> ValidationMode: return ValidationMode.FAIL_FAST

    def add(self, entry: FailureEntry) -> bool:
        if self._error is None: self._error = entry
        return False

    def get_errors(self) -> list[FailureEntry]: return [self._error] if self._error else []


@dataclass
class CollectAllAccumulator(FailureAccumulator):
    """Collect-all accumulator: gathers every failure, up to max_errors when positive."""
    _errors: list[FailureEntry] = field(default_factory=list)
    max_errors: int | None = None

    @property
    def mode(self) -> ValidationMode: return ValidationMode.COLLECT_ALL

    def add(self, entry: FailureEntry) -> bool:
        if not self.max_errors:
            self._errors.append(entry)
            return True
        if len(self._errors) < self.max_errors: self._errors.append(entry)
        return len(self._errors) < self.max_errors

    def get_errors(self) -> list[FailureEntry]: return self._errors.copy()


def create_accumulator(mode: ValidationMode, max_errors: int | None = None) -> FailureAccumulator:
    """Factory for creating accumulators based on mode."""
    return FailFastAccumulator() if mode == ValidationMode.FAIL_FAST else CollectAllAccumulator(max_errors=max_errors)
