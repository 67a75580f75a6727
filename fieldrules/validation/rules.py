"""Built-in Rule Constructors

Every constructor takes the raw directive parameter, validates it once
(raising ConfigurationError for bad parameters) and returns a bound Check.
Checks never raise on unexpected data: a value of the wrong type yields an
``invalid-type`` failure.

Numeric ``min``/``max`` are strict (the boundary value fails); length rules
are inclusive.
"""
from __future__ import annotations

from collections.abc import Sized
from typing import Any

from fieldrules.errors import Err, ErrorCode, invalid_parameter, missing_parameter
from .errors import Check, FieldContext, RuleConstructor, RuleIdentifier, failure, passed
from .schema import Kind

_SCALARS = (bool, int, float, str)


# ============================================================================
# Parameter parsing
# ============================================================================

def _parse_int(rule: str, parameter: str) -> int:
    try: return int(parameter)
    except ValueError as e: raise invalid_parameter(rule, parameter, "an integer literal", cause=e) from e


def _parse_float(rule: str, parameter: str) -> float:
    try: return float(parameter)
    except ValueError as e: raise invalid_parameter(rule, parameter, "a number literal", cause=e) from e


def _parse_length(rule: str, parameter: str) -> int:
    length = _parse_int(rule, parameter)
    if length < 0: raise invalid_parameter(rule, parameter, "a non-negative length")
    return length


def _type_mismatch(ctx: FieldContext, expected: str) -> Err:
    return failure(ctx, f"expected {expected}, got {type(ctx.value).__name__}", RuleIdentifier.INVALID_TYPE,
        code=ErrorCode.E2004_INVALID_TYPE, expected=expected, actual=type(ctx.value).__name__)


def _is_integer(value: Any) -> bool: return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool: return isinstance(value, (int, float)) and not isinstance(value, bool)


# ============================================================================
# Common
# ============================================================================

def is_zero(value: Any) -> bool:
    """None, or the zero value of a scalar (0, 0.0, "", False)."""
    return value is None or (isinstance(value, _SCALARS) and not value)


def required(_: str) -> Check:
    """Fails on absent or zero values."""
    def check(ctx: FieldContext):
        if is_zero(ctx.value):
            return failure(ctx, "the field is required", RuleIdentifier.REQUIRED, code=ErrorCode.E2001_REQUIRED)
        return passed()
    return check


def required_collection(_: str) -> Check:
    """Fails only when the collection is absent; an empty collection is present."""
    def check(ctx: FieldContext):
        if ctx.value is None:
            return failure(ctx, "the field is required", RuleIdentifier.REQUIRED, code=ErrorCode.E2001_REQUIRED)
        return passed()
    return check


# ============================================================================
# Integer
# ============================================================================

def min_integer(parameter: str) -> Check:
    minimum = _parse_int("min", parameter)

    def check(ctx: FieldContext):
        if not _is_integer(ctx.value): return _type_mismatch(ctx, "integer")
        if ctx.value <= minimum:
            return failure(ctx, f"integer must be greater than {minimum}", RuleIdentifier.MIN_INTEGER,
                code=ErrorCode.E2200_INTEGER_MIN, parameter=parameter, min=minimum)
        return passed()
    return check


def max_integer(parameter: str) -> Check:
    maximum = _parse_int("max", parameter)

    def check(ctx: FieldContext):
        if not _is_integer(ctx.value): return _type_mismatch(ctx, "integer")
        if ctx.value >= maximum:
            return failure(ctx, f"integer must be less than {maximum}", RuleIdentifier.MAX_INTEGER,
                code=ErrorCode.E2201_INTEGER_MAX, parameter=parameter, max=maximum)
        return passed()
    return check


# ============================================================================
# Float
# ============================================================================

def min_float(parameter: str) -> Check:
    minimum = _parse_float("min", parameter)

    def check(ctx: FieldContext):
        if not _is_number(ctx.value): return _type_mismatch(ctx, "float")
        if ctx.value <= minimum:
            return failure(ctx, f"float must be greater than {minimum:g}", RuleIdentifier.MIN_FLOAT,
                code=ErrorCode.E2300_FLOAT_MIN, parameter=parameter, min=minimum)
        return passed()
    return check


def max_float(parameter: str) -> Check:
    maximum = _parse_float("max", parameter)

    def check(ctx: FieldContext):
        if not _is_number(ctx.value): return _type_mismatch(ctx, "float")
        if ctx.value >= maximum:
            return failure(ctx, f"float must be less than {maximum:g}", RuleIdentifier.MAX_FLOAT,
                code=ErrorCode.E2301_FLOAT_MAX, parameter=parameter, max=maximum)
        return passed()
    return check


# ============================================================================
# Text
# ============================================================================

def min_length(parameter: str) -> Check:
    minimum = _parse_length("min", parameter)

    def check(ctx: FieldContext):
        if not isinstance(ctx.value, str): return _type_mismatch(ctx, "text")
        if len(ctx.value) < minimum:
            return failure(ctx, f"the field requires a minimum length of {minimum}", RuleIdentifier.MIN_LENGTH,
                code=ErrorCode.E2100_TEXT_MIN_LENGTH, parameter=parameter, min=minimum, length=len(ctx.value))
        return passed()
    return check


def max_length(parameter: str) -> Check:
    maximum = _parse_length("max", parameter)

    def check(ctx: FieldContext):
        if not isinstance(ctx.value, str): return _type_mismatch(ctx, "text")
        if len(ctx.value) > maximum:
            return failure(ctx, f"the field requires a maximum length of {maximum}", RuleIdentifier.MAX_LENGTH,
                code=ErrorCode.E2101_TEXT_MAX_LENGTH, parameter=parameter, max=maximum, length=len(ctx.value))
        return passed()
    return check


def contains(parameter: str) -> Check:
    if not parameter: raise missing_parameter("contains", "the substring the value must contain")

    def check(ctx: FieldContext):
        if not isinstance(ctx.value, str): return _type_mismatch(ctx, "text")
        if parameter not in ctx.value:
            return failure(ctx, f"the field must contain substring {parameter}", RuleIdentifier.CONTAINS,
                code=ErrorCode.E2102_TEXT_CONTAINS, parameter=parameter, substring=parameter)
        return passed()
    return check


# ============================================================================
# Boolean
# ============================================================================

def must_be_true(_: str) -> Check:
    def check(ctx: FieldContext):
        if not isinstance(ctx.value, bool): return _type_mismatch(ctx, "boolean")
        if not ctx.value:
            return failure(ctx, "bool must be true", RuleIdentifier.MUST_BE_TRUE, code=ErrorCode.E2400_BOOL_MUST_BE_TRUE)
        return passed()
    return check


def must_be_false(_: str) -> Check:
    def check(ctx: FieldContext):
        if not isinstance(ctx.value, bool): return _type_mismatch(ctx, "boolean")
        if ctx.value:
            return failure(ctx, "bool must be false", RuleIdentifier.MUST_BE_FALSE, code=ErrorCode.E2401_BOOL_MUST_BE_FALSE)
        return passed()
    return check


# ============================================================================
# Collection
# ============================================================================

def min_items(parameter: str) -> Check:
    minimum = _parse_length("min", parameter)

    def check(ctx: FieldContext):
        if not isinstance(ctx.value, Sized) or isinstance(ctx.value, str): return _type_mismatch(ctx, "collection")
        if len(ctx.value) < minimum:
            return failure(ctx, f"the collection requires a minimum length of {minimum}", RuleIdentifier.MIN_ITEMS,
                code=ErrorCode.E2500_COLLECTION_MIN_LENGTH, parameter=parameter, min=minimum, length=len(ctx.value))
        return passed()
    return check


def max_items(parameter: str) -> Check:
    maximum = _parse_length("max", parameter)

    def check(ctx: FieldContext):
        if not isinstance(ctx.value, Sized) or isinstance(ctx.value, str): return _type_mismatch(ctx, "collection")
        if len(ctx.value) > maximum:
            return failure(ctx, f"the collection requires a maximum length of {maximum}", RuleIdentifier.MAX_ITEMS,
                code=ErrorCode.E2501_COLLECTION_MAX_LENGTH, parameter=parameter, max=maximum, length=len(ctx.value))
        return passed()
    return check


BUILTIN_RULES: dict[Kind, dict[str, RuleConstructor]] = {
    Kind.INTEGER: {"required": required, "min": min_integer, "max": max_integer},
    Kind.FLOAT: {"required": required, "min": min_float, "max": max_float},
    Kind.TEXT: {"required": required, "min": min_length, "max": max_length, "contains": contains},
    Kind.BOOLEAN: {"required": required, "mustBeTrue": must_be_true, "mustBeFalse": must_be_false},
    Kind.RECORD: {"required": required},
    Kind.COLLECTION: {"required": required_collection, "min": min_items, "max": max_items},
}
