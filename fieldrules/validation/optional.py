"""Optional-field adapter.

Rules never see None for ``X | None`` fields: the adapter answers for absent
values and hands present values through unchanged.
"""
from __future__ import annotations

from fieldrules.errors import ErrorCode
from .errors import Check, FieldContext, RuleIdentifier, failure, passed


def wrap_optional(inner: Check, required: bool) -> Check:
    """Add nullable semantics to ``inner``.

    Absent + required directive -> "required" failure; absent otherwise ->
    pass; present -> ``inner`` on the unwrapped value.
    """
    def check(ctx: FieldContext):
        if ctx.value is None:
            if required:
                return failure(ctx, "the field is absent and is required", RuleIdentifier.REQUIRED,
                    code=ErrorCode.E2001_REQUIRED)
            return passed()
        return inner(ctx)
    return check
