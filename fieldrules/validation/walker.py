"""Validation walker: runs compiled chains over an instance graph."""
from __future__ import annotations

from typing import Any

from fieldrules.config import ValidationMode
from fieldrules.logging import walker_logger
from .compiler import Compiler
from .errors import FailureAccumulator, FailureEntry, FieldContext, create_accumulator
from .schema import Kind, TypeRef

log = walker_logger()


class ValidationWalker:
    """Walks a record instance depth-first, in field declaration order.

    Paths grow by field name for fields and nested records, and by element
    index for collection items. Absent nested values are skipped; whether
    they may be absent is the business of the field's own directives.
    """

    def __init__(self, compiler: Compiler, mode: ValidationMode = ValidationMode.COLLECT_ALL,
                 max_errors: int | None = None):
        self.compiler, self.mode, self.max_errors = compiler, mode, max_errors

    def walk(self, instance: Any) -> list[FailureEntry]:
        record_type = type(instance)
        self.compiler.compile(record_type)
        accumulator = create_accumulator(self.mode, self.max_errors)
        self._walk_record(instance, record_type, (), accumulator)
        failures = accumulator.get_errors()
        log.debug("record_validated", record=record_type.__name__, failures=len(failures), mode=self.mode.value)
        return failures

    def _walk_record(self, instance: Any, record_type: type, path: tuple, accumulator: FailureAccumulator) -> bool:
        compiled = self.compiler.compile(record_type)
        for descriptor in compiled.fields:
            value = getattr(instance, descriptor.name, None)
            field_path = (*path, descriptor.name)
            if (chain := compiled.chain_for(descriptor.name)) is not None:
                for entry in chain.run(FieldContext(record_type, descriptor, value, field_path)):
                    if not accumulator.add(entry): return False
            if not self._walk_value(value, descriptor.type, field_path, accumulator): return False
        return True

    def _walk_value(self, value: Any, type_ref: TypeRef, path: tuple, accumulator: FailureAccumulator) -> bool:
        if value is None: return True
        if type_ref.kind is Kind.OPTIONAL and type_ref.element is not None:
            return self._walk_value(value, type_ref.element, path, accumulator)
        if type_ref.kind is Kind.RECORD:
            # the runtime class may be a subclass with fields of its own
            if not self.compiler.provider.supports(record_type := type(value)): return True
            return self._walk_record(value, record_type, path, accumulator)
        if type_ref.kind is Kind.COLLECTION and any(type_ref.nested_records()):
            if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"): return True
            for index, item in enumerate(value):
                if (item_ref := type_ref.element_at(index)) is None: break
                if not self._walk_value(item, item_ref, (*path, index), accumulator): return False
        return True
