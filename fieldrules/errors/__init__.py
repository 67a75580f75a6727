"""Error Handling System

Key components:
- ErrorCode: Hierarchical error code taxonomy
- Result[T, E]: Ok/Err container returned by compiled checks
- AppError / AppErrorException: structured errors for programmer mistakes
- Builder functions: Ergonomic error construction

Usage:
    from fieldrules.errors import ConfigurationError, ErrorCode

    try:
        engine.validate(order)
    except ConfigurationError as exc:
        log.error("bad_directive", code=exc.code.name, message=str(exc))
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    AppErrorException,
    ConfigurationError,
    UsageError,
    ErrorCode,
)

from .builders import (
    configuration_error,
    unknown_kind,
    unknown_rule,
    invalid_parameter,
    missing_parameter,
    cyclic_schema,
    unresolved_annotation,
    not_a_record,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "AppErrorException",
    "ConfigurationError",
    "UsageError",
    "ErrorCode",
    # Builders
    "configuration_error",
    "unknown_kind",
    "unknown_rule",
    "invalid_parameter",
    "missing_parameter",
    "cyclic_schema",
    "unresolved_annotation",
    "not_a_record",
]
