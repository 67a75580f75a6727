"""fieldrules - declarative, tag-driven validation for Python records.

Usage:
    from dataclasses import dataclass
    from fieldrules import field, new_engine

    @dataclass
    class User:
        name: str = field(default="", rules="required, min=3, max=10")
        accept_terms: bool = field(default=False, rules="mustBeTrue")

    engine = new_engine()
    for failure in engine.validate(User(name="ab")):
        print(failure.path_string, failure.identifier, failure.message)
"""
from fieldrules.config import Settings, ValidationMode, get_settings
from fieldrules.errors import (
    AppError,
    AppErrorException,
    ConfigurationError,
    Err,
    ErrorCode,
    Ok,
    Result,
    UsageError,
)
from fieldrules.logging import configure_logging, get_logger
from fieldrules.validation import (
    Engine,
    FailureEntry,
    Field,
    FieldContext,
    FieldDescriptor,
    Kind,
    RuleIdentifier,
    Rules,
    TypeRef,
    ValidationError,
    failure,
    field,
    new_engine,
    passed,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "ValidationMode",
    "get_settings",
    "AppError",
    "AppErrorException",
    "ConfigurationError",
    "Err",
    "ErrorCode",
    "Ok",
    "Result",
    "UsageError",
    "configure_logging",
    "get_logger",
    "Engine",
    "FailureEntry",
    "Field",
    "FieldContext",
    "FieldDescriptor",
    "Kind",
    "RuleIdentifier",
    "Rules",
    "TypeRef",
    "ValidationError",
    "failure",
    "field",
    "new_engine",
    "passed",
]
