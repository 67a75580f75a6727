"""Error Builders

Ergonomic constructors for configuration and usage errors. Each builder
returns the exception ready to raise:

    raise unknown_rule(Kind.TEXT, "lenght")
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from .types import AppError, ConfigurationError, ErrorCode, UsageError


# =============================================================================
# Configuration Errors (E8xxx)
# =============================================================================

def configuration_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E8000_CONFIGURATION_GENERIC,
    cause: Exception | None = None,
    **metadata,
) -> ConfigurationError:
    """Create configuration error."""
    return ConfigurationError(AppError(
        code=code,
        message=message,
        metadata={k: v for k, v in metadata.items() if v is not None},
        cause=cause,
    ))


def _label(kind: Any) -> str: return str(kind.value if isinstance(kind, Enum) else kind)


def unknown_kind(kind: Any, rule: str | None = None) -> ConfigurationError:
    return configuration_error(
        f"there are no rules for kind '{_label(kind)}'",
        code=ErrorCode.E8001_UNKNOWN_KIND,
        kind=_label(kind),
        rule=rule,
    )


def unknown_rule(kind: Any, rule: str, available: Iterable[str] = ()) -> ConfigurationError:
    names = ", ".join(sorted(available)) or "none"
    return configuration_error(
        f"rule '{rule}' not found for kind '{_label(kind)}' (available: {names})",
        code=ErrorCode.E8002_UNKNOWN_RULE,
        kind=_label(kind),
        rule=rule,
    )


def invalid_parameter(
    rule: str, parameter: str, expected: str, cause: Exception | None = None
) -> ConfigurationError:
    return configuration_error(
        f"invalid parameter '{parameter}' for rule '{rule}': expected {expected}",
        code=ErrorCode.E8003_INVALID_PARAMETER,
        cause=cause,
        rule=rule,
        parameter=parameter,
        expected=expected,
    )


def missing_parameter(rule: str, description: str) -> ConfigurationError:
    return configuration_error(
        f"rule '{rule}' requires a parameter: {description}",
        code=ErrorCode.E8004_MISSING_PARAMETER,
        rule=rule,
    )


def cyclic_schema(chain: Iterable[type]) -> ConfigurationError:
    names = [t.__name__ for t in chain]
    return configuration_error(
        f"cyclic record graph: {' -> '.join(names)}",
        code=ErrorCode.E8005_CYCLIC_SCHEMA,
        chain=names,
    )


def unresolved_annotation(record_type: type, cause: Exception) -> ConfigurationError:
    return configuration_error(
        f"cannot resolve field annotations of '{record_type.__name__}': {cause}",
        code=ErrorCode.E8006_UNRESOLVED_ANNOTATION,
        cause=cause,
        record=record_type.__name__,
    )


# =============================================================================
# Usage Errors (E9xxx)
# =============================================================================

def not_a_record(value: Any) -> UsageError:
    type_name = value.__name__ if isinstance(value, type) else type(value).__name__
    return UsageError(AppError(
        code=ErrorCode.E9001_NOT_A_RECORD,
        message=f"only records can be validated, got '{type_name}'",
        metadata={"type": type_name},
    ))
