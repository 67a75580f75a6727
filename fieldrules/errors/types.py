"""Error Codes and Result Types

Result/Either types for check outcomes, a hierarchical error code taxonomy
shared by validation failures and configuration errors, and the exception
types raised for programmer mistakes (bad directives, non-record input).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, NoReturn, TypeVar, Union, final

T = TypeVar("T")
E = TypeVar("E")


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E20xx: Field rules common to every kind
    E21xx: Text rules
    E22xx: Integer rules
    E23xx: Float rules
    E24xx: Boolean rules
    E25xx: Collection rules
    E29xx: Caller-registered rules
    E8xxx: Configuration errors (directive authoring, schema shape)
    E9xxx: Usage errors
    """
    # Common (E20xx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED = 2001
    E2004_INVALID_TYPE = 2004

    # Text (E21xx)
    E2100_TEXT_MIN_LENGTH = 2100
    E2101_TEXT_MAX_LENGTH = 2101
    E2102_TEXT_CONTAINS = 2102

    # Integer (E22xx)
    E2200_INTEGER_MIN = 2200
    E2201_INTEGER_MAX = 2201

    # Float (E23xx)
    E2300_FLOAT_MIN = 2300
    E2301_FLOAT_MAX = 2301

    # Boolean (E24xx)
    E2400_BOOL_MUST_BE_TRUE = 2400
    E2401_BOOL_MUST_BE_FALSE = 2401

    # Collection (E25xx)
    E2500_COLLECTION_MIN_LENGTH = 2500
    E2501_COLLECTION_MAX_LENGTH = 2501

    # Custom (E29xx)
    E2900_CUSTOM_RULE = 2900

    # Configuration (E8xxx)
    E8000_CONFIGURATION_GENERIC = 8000
    E8001_UNKNOWN_KIND = 8001
    E8002_UNKNOWN_RULE = 8002
    E8003_INVALID_PARAMETER = 8003
    E8004_MISSING_PARAMETER = 8004
    E8005_CYCLIC_SCHEMA = 8005
    E8006_UNRESOLVED_ANNOTATION = 8006

    # Usage (E9xxx)
    E9000_USAGE_GENERIC = 9000
    E9001_NOT_A_RECORD = 9001

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 2100:
            return "common"
        if 2100 <= code < 2200:
            return "text"
        if 2200 <= code < 2300:
            return "integer"
        if 2300 <= code < 2400:
            return "float"
        if 2400 <= code < 2500:
            return "boolean"
        if 2500 <= code < 2600:
            return "collection"
        if 2900 <= code < 3000:
            return "custom"
        if 8000 <= code < 9000:
            return "configuration"
        return "usage"

    @property
    def is_failure(self) -> bool:
        """True for data failures, False for programmer errors."""
        return self.value < 8000


@dataclass(frozen=True, slots=True)
class AppError:
    """Structured error with code, message and metadata.

    Raised (wrapped in AppErrorException) for configuration and usage
    mistakes. Data failures use FailureEntry instead.
    """
    code: ErrorCode
    message: str
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    def with_metadata(self, **kwargs) -> AppError:
        """Create new error with additional metadata."""
        return AppError(
            code=self.code,
            message=self.message,
            metadata={**self.metadata, **kwargs},
            cause=self.cause,
        )

    def with_message(self, message: str) -> AppError:
        return AppError(code=self.code, message=message, metadata=self.metadata, cause=self.cause)

    def to_dict(self) -> dict:
        """Serialize error for structured output."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


class AppErrorException(Exception):
    """Exception wrapper for AppError."""

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))

    @property
    def code(self) -> ErrorCode: return self.error.code

    @property
    def metadata(self) -> dict: return self.error.metadata

    def with_context(self, prefix: str, **metadata) -> AppErrorException:
        """Same exception type, message prefixed with its location."""
        return type(self)(self.error.with_message(f"{prefix}: {self.error.message}").with_metadata(**metadata))


class ConfigurationError(AppErrorException):
    """Programmer mistake in directive authoring or schema shape.

    Raised at compile time, never while validating data.
    """


class UsageError(AppErrorException):
    """The engine was called with something outside its contract."""


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raises because Err has no value to unwrap."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        """Extract the error."""
        return self.error


# Type alias for Result
Result = Union[Ok[T], Err[E]]
