"""Tests for the failure model, error codes and Result types."""

from dataclasses import dataclass

import pytest

from fieldrules import ConfigurationError, ErrorCode, Kind, ValidationMode
from fieldrules.errors import AppError, Err, Ok, cyclic_schema, not_a_record, unknown_rule
from fieldrules.validation import (
    CollectAllAccumulator,
    FailFastAccumulator,
    FailureEntry,
    FieldContext,
    FieldDescriptor,
    TypeRef,
    create_accumulator,
    failure,
    format_path,
    passed,
    render_value,
)


@dataclass
class Order:
    total: int = 0


def make_entry(**overrides):
    values = dict(
        record_name="Order",
        field_name="total",
        path=("items", 2, "total"),
        kind=Kind.INTEGER,
        type_name="int",
        value="0",
        identifier="min-integer",
        code=ErrorCode.E2200_INTEGER_MIN,
        message="integer must be greater than 0",
        parameter="0",
        metadata={"min": 0},
    )
    values.update(overrides)
    return FailureEntry(**values)


class TestFormatPath:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ((), "$"),
            (("name",), "name"),
            (("lead", "age"), "lead.age"),
            (("items", 2, "total"), "items[2].total"),
            (("matrix", 0, 1), "matrix[0][1]"),
        ],
    )
    def test_format_path(self, path, expected):
        assert format_path(path) == expected


class TestFailureEntry:
    def test_format_parameter_placeholder(self):
        entry = make_entry(parameter="pepo kawai")
        assert entry.format("must contain '${}'") == "must contain 'pepo kawai'"

    def test_format_leaves_other_placeholders(self):
        entry = make_entry()
        assert entry.format("field %s must exceed ${}") == "field %s must exceed 0"

    def test_format_metadata_placeholders(self):
        entry = make_entry(metadata={"min": 3, "length": 1})
        assert entry.format("${length} is below ${min}") == "1 is below 3"

    def test_format_unknown_placeholder_is_kept(self):
        assert make_entry().format("${unknown} ${}") == "${unknown} 0"

    def test_format_without_parameter(self):
        assert make_entry(parameter="").format("value: '${}'") == "value: ''"

    def test_path_string(self):
        assert make_entry().path_string == "items[2].total"

    def test_to_dict(self):
        assert make_entry().to_dict() == {
            "record": "Order",
            "field": "items[2].total",
            "identifier": "min-integer",
            "code": "E2200_INTEGER_MIN",
            "message": "integer must be greater than 0",
            "value": "0",
            "parameter": "0",
            "metadata": {"min": 0},
        }

    def test_to_dict_omits_empty_parameter_and_metadata(self):
        data = make_entry(parameter="", metadata={}).to_dict()
        assert "parameter" not in data
        assert "metadata" not in data

    def test_from_context(self):
        descriptor = FieldDescriptor("total", TypeRef.scalar(Kind.INTEGER, "int"), "min=0")
        ctx = FieldContext(Order, descriptor, -1, ("total",))
        result = failure(ctx, "too small", "custom-min", parameter="0", min=0)
        assert result.is_err()
        entry = result.unwrap_err()
        assert entry.record_name == "Order"
        assert entry.value == "-1"
        assert entry.identifier == "custom-min"
        assert entry.code == ErrorCode.E2900_CUSTOM_RULE
        assert entry.metadata == {"min": 0}

    def test_passed(self):
        assert passed() == Ok(None)


class TestRenderValue:
    @pytest.mark.parametrize(
        "value, expected",
        [(True, "true"), (False, "false"), (None, "None"), (12, "12"), ("text", "text"), ([1, 2], "[1, 2]")],
    )
    def test_render(self, value, expected):
        assert render_value(value) == expected

    def test_long_values_are_truncated(self):
        assert render_value("x" * 100, limit=10) == "x" * 10 + "..."


class TestAccumulators:
    def test_collect_all(self):
        acc = CollectAllAccumulator()
        assert acc.add(make_entry())
        assert acc.add(make_entry(field_name="other"))
        assert len(acc.get_errors()) == 2
        assert acc.mode is ValidationMode.COLLECT_ALL

    def test_collect_all_with_limit(self):
        acc = CollectAllAccumulator(max_errors=2)
        assert acc.add(make_entry())
        assert not acc.add(make_entry())
        assert len(acc.get_errors()) == 2

    def test_collect_all_zero_limit_is_unlimited(self):
        acc = CollectAllAccumulator(max_errors=0)
        assert all(acc.add(make_entry()) for _ in range(3))
        assert len(acc.get_errors()) == 3

    def test_fail_fast(self):
        acc = FailFastAccumulator()
        first = make_entry()
        assert not acc.add(first)
        acc.add(make_entry(field_name="other"))
        assert acc.get_errors() == [first]

    def test_to_validation_error(self):
        acc = create_accumulator(ValidationMode.FAIL_FAST)
        assert acc.to_validation_error() is None
        acc.add(make_entry())
        error = acc.to_validation_error("Order is invalid")
        assert error.mode is ValidationMode.FAIL_FAST
        assert str(error) == "items[2].total: integer must be greater than 0"

    def test_create_accumulator(self):
        assert isinstance(create_accumulator(ValidationMode.COLLECT_ALL, 5), CollectAllAccumulator)
        assert isinstance(create_accumulator(ValidationMode.FAIL_FAST), FailFastAccumulator)


class TestErrorCode:
    @pytest.mark.parametrize(
        "code, category",
        [
            (ErrorCode.E2001_REQUIRED, "common"),
            (ErrorCode.E2102_TEXT_CONTAINS, "text"),
            (ErrorCode.E2201_INTEGER_MAX, "integer"),
            (ErrorCode.E2300_FLOAT_MIN, "float"),
            (ErrorCode.E2400_BOOL_MUST_BE_TRUE, "boolean"),
            (ErrorCode.E2500_COLLECTION_MIN_LENGTH, "collection"),
            (ErrorCode.E2900_CUSTOM_RULE, "custom"),
            (ErrorCode.E8005_CYCLIC_SCHEMA, "configuration"),
            (ErrorCode.E9001_NOT_A_RECORD, "usage"),
        ],
    )
    def test_category(self, code, category):
        assert code.category == category

    def test_is_failure(self):
        assert ErrorCode.E2001_REQUIRED.is_failure
        assert not ErrorCode.E8002_UNKNOWN_RULE.is_failure


class TestAppError:
    def test_str_and_dict(self):
        error = AppError(ErrorCode.E8002_UNKNOWN_RULE, "rule 'x' not found", {"rule": "x"})
        assert str(error) == "[E8002_UNKNOWN_RULE] rule 'x' not found"
        assert error.to_dict()["error"] == {
            "code": "E8002_UNKNOWN_RULE",
            "code_num": 8002,
            "message": "rule 'x' not found",
            "category": "configuration",
            "metadata": {"rule": "x"},
        }

    def test_with_metadata_is_non_destructive(self):
        error = AppError(ErrorCode.E8000_CONFIGURATION_GENERIC, "bad")
        extended = error.with_metadata(field="name")
        assert error.metadata == {}
        assert extended.metadata == {"field": "name"}

    def test_with_context_keeps_exception_type(self):
        exc = unknown_rule(Kind.TEXT, "lenght", ["min", "max"])
        located = exc.with_context("User.name", field="name")
        assert isinstance(located, ConfigurationError)
        assert located.code == ErrorCode.E8002_UNKNOWN_RULE
        assert located.metadata == {"kind": "text", "rule": "lenght", "field": "name"}
        assert str(located) == (
            "[E8002_UNKNOWN_RULE] User.name: rule 'lenght' not found for kind 'text' (available: max, min)"
        )

    def test_cyclic_schema_builder(self):
        exc = cyclic_schema([Order, Order])
        assert exc.metadata == {"chain": ["Order", "Order"]}

    def test_not_a_record_builder(self):
        assert str(not_a_record(3)) == "[E9001_NOT_A_RECORD] only records can be validated, got 'int'"
        assert not_a_record(Order).metadata == {"type": "Order"}


class TestResult:
    def test_ok(self):
        result = Ok(3)
        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == 3
        assert result.unwrap_or(7) == 3
        with pytest.raises(ValueError):
            result.unwrap_err()

    def test_err(self):
        result = Err("boom")
        assert result.is_err()
        assert not result.is_ok()
        assert result.unwrap_or(7) == 7
        assert result.unwrap_err() == "boom"
        with pytest.raises(ValueError):
            result.unwrap()
