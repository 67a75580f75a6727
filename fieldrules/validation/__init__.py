"""Declarative Field Validation

Fields carry rule directives ("required, min=3, contains=@"); the engine
compiles them once per record type into bound checks and applies them to
instances, returning every violation with a stable identifier and path.

Key Features:
- Directive parsing with ``name=value`` parameters (values may contain ``=``)
- Per-engine rule registry, extensible per value kind
- Recursive compilation of nested records, collections and optionals
- Per-type compiled cache, safe to share across threads
- Structured failures with identifiers, codes, paths and templates
- Fail-fast or collect-all accumulation

Usage:
    from fieldrules.validation import new_engine

    engine = new_engine()
    failures = engine.validate(order)
    for f in failures:
        print(f.path_string, f.identifier, f.format("must be at least ${}"))
"""

from .schema import (
    Kind,
    TypeRef,
    FieldDescriptor,
    Rules,
    render_value,
)

from .errors import (
    RuleIdentifier,
    FieldContext,
    Check,
    RuleConstructor,
    FailureEntry,
    ValidationError,
    FailureAccumulator,
    FailFastAccumulator,
    CollectAllAccumulator,
    create_accumulator,
    failure,
    passed,
    format_path,
)

from .parser import RuleDirective, parse_directives

from .rules import BUILTIN_RULES, is_zero

from .registry import RuleRegistry

from .optional import wrap_optional

from .providers import (
    TypeResolver,
    MetadataProvider,
    DataclassProvider,
    PydanticProvider,
    StaticProvider,
    ChainProvider,
    default_provider,
    field,
    Field,
)

from .cache import CompiledTypeCache

from .compiler import CompiledRule, CompiledChain, CompiledType, Compiler

from .walker import ValidationWalker

from .engine import Engine, new_engine

__all__ = [
    # Schema
    "Kind",
    "TypeRef",
    "FieldDescriptor",
    "Rules",
    "render_value",
    # Failures
    "RuleIdentifier",
    "FieldContext",
    "Check",
    "RuleConstructor",
    "FailureEntry",
    "ValidationError",
    "FailureAccumulator",
    "FailFastAccumulator",
    "CollectAllAccumulator",
    "create_accumulator",
    "failure",
    "passed",
    "format_path",
    # Directives and rules
    "RuleDirective",
    "parse_directives",
    "BUILTIN_RULES",
    "is_zero",
    "RuleRegistry",
    "wrap_optional",
    # Providers
    "TypeResolver",
    "MetadataProvider",
    "DataclassProvider",
    "PydanticProvider",
    "StaticProvider",
    "ChainProvider",
    "default_provider",
    "field",
    "Field",
    # Compilation and walking
    "CompiledTypeCache",
    "CompiledRule",
    "CompiledChain",
    "CompiledType",
    "Compiler",
    "ValidationWalker",
    # Engine
    "Engine",
    "new_engine",
]
