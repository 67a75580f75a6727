"""Compiler

Turns a record type into per-field chains of bound checks. The whole
reachable type graph is compiled depth-first on first use and cached, so
directive parsing and rule lookup never happen while validating data and bad
directives surface as ConfigurationError before any instance is inspected.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from fieldrules.errors import ConfigurationError, cyclic_schema, invalid_parameter, not_a_record
from fieldrules.logging import compiler_logger
from .cache import CompiledTypeCache
from .errors import Check, FailureEntry, FieldContext
from .optional import wrap_optional
from .parser import RuleDirective, parse_directives
from .providers import MetadataProvider
from .registry import RuleRegistry
from .schema import FieldDescriptor

log = compiler_logger()


@dataclass(frozen=True, slots=True)
class CompiledRule:
    directive: RuleDirective
    check: Check


@dataclass(frozen=True, slots=True)
class CompiledChain:
    """Ordered checks for one field.

    Every check runs and every failure is reported, except that a failing
    ``required`` check is reported alone.
    """
    field: FieldDescriptor
    rules: tuple[CompiledRule, ...]

    def run(self, ctx: FieldContext) -> list[FailureEntry]:
        failures = []
        for rule in self.rules:
            result = rule.check(ctx)
            if result.is_err():
                if rule.directive.is_required: return [result.unwrap_err()]
                failures.append(result.unwrap_err())
        return failures

    def __len__(self) -> int: return len(self.rules)


@dataclass(frozen=True, slots=True)
class CompiledType:
    """All fields of a record type, with chains for the annotated ones."""
    record_type: type
    fields: tuple[FieldDescriptor, ...]
    chains: Mapping[str, CompiledChain]

    def chain_for(self, field_name: str) -> CompiledChain | None: return self.chains.get(field_name)


class Compiler:
    """Compiles record types against a registry, storing results in a cache."""

    def __init__(self, provider: MetadataProvider, registry: RuleRegistry, cache: CompiledTypeCache | None = None):
        self.provider, self.registry = provider, registry
        self.cache = cache if cache is not None else CompiledTypeCache()

    def compile(self, record_type: type) -> CompiledType:
        """Compiled form of ``record_type``, compiling its type graph on first use."""
        if (cached := self.cache.get(record_type)) is not None: return cached
        if not self.provider.supports(record_type): raise not_a_record(record_type)
        return self._compile(record_type, ())

    def _compile(self, record_type: type, stack: tuple[type, ...]) -> CompiledType:
        if (cached := self.cache.get(record_type)) is not None: return cached
        if record_type in stack: raise cyclic_schema((*stack, record_type))

        stack = (*stack, record_type)
        fields = tuple(self.provider.fields(record_type))
        chains: dict[str, CompiledChain] = {}
        for descriptor in fields:
            for nested in descriptor.type.nested_records(): self._compile(nested, stack)
            if descriptor.has_directive: chains[descriptor.name] = self._compile_chain(record_type, descriptor)

        compiled = self.cache.put_if_absent(record_type, CompiledType(record_type, fields, MappingProxyType(chains)))
        log.debug("record_compiled", record=record_type.__name__, fields=len(fields), chains=len(chains))
        return compiled

    def _compile_chain(self, record_type: type, descriptor: FieldDescriptor) -> CompiledChain:
        kind = descriptor.effective_kind
        rules = []
        for directive in parse_directives(descriptor.directive):
            location = f"{record_type.__name__}.{descriptor.name}"
            try:
                constructor = self.registry.resolve(kind, directive.name)
                check = constructor(directive.parameter)
            except ConfigurationError as e:
                log.warning("compile_failed", field=location, directive=str(directive), code=e.code.name)
                raise e.with_context(location, record=record_type.__name__, field=descriptor.name,
                    directive=str(directive)) from e
            except (ValueError, TypeError) as e:
                log.warning("compile_failed", field=location, directive=str(directive), error=str(e))
                raise invalid_parameter(directive.name, directive.parameter, str(e), cause=e).with_context(
                    location, record=record_type.__name__, field=descriptor.name, directive=str(directive)) from e
            if descriptor.is_optional: check = wrap_optional(check, directive.is_required)
            rules.append(CompiledRule(directive, check))
        return CompiledChain(descriptor, tuple(rules))
