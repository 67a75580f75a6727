"""Engine facade: registry + provider + compiled cache + walker."""
from __future__ import annotations

from typing import Any, Iterable

from fieldrules.config import Settings, ValidationMode, get_settings
from fieldrules.errors import configuration_error
from .cache import CompiledTypeCache
from .compiler import CompiledType, Compiler
from .errors import FailureEntry, RuleConstructor, ValidationError
from .providers import ChainProvider, MetadataProvider, default_provider
from .registry import RuleRegistry
from .schema import FieldDescriptor, Kind
from .walker import ValidationWalker


def _as_mode(mode: ValidationMode | str) -> ValidationMode:
    try: return ValidationMode(mode)
    except ValueError as e:
        choices = ", ".join(m.value for m in ValidationMode)
        raise configuration_error(f"unknown validation mode '{mode}' (available: {choices})", cause=e) from e


def _as_limit(max_errors: int) -> int | None:
    """0 means unlimited, as in Settings.MAX_ERRORS."""
    if max_errors < 0: raise configuration_error(f"max_errors must be 0 (unlimited) or positive, got {max_errors}")
    return max_errors or None


class Engine:
    """Declarative validation engine.

    One engine is meant to be shared: compiled types are cached per engine
    and reused by every later call. Register custom rules before first use;
    registration never alters types that were already compiled.

    Usage:
        engine = new_engine()
        engine.register_rule(Kind.TEXT, "reverse", reverse)
        for failure in engine.validate(user):
            print(failure.path_string, failure.identifier, failure.message)
    """

    def __init__(
        self,
        *,
        provider: MetadataProvider | None = None,
        registry: RuleRegistry | None = None,
        settings: Settings | None = None,
        mode: ValidationMode | str | None = None,
        max_errors: int | None = None,
    ):
        self.settings = settings or get_settings()
        self.provider = provider or default_provider(self.settings)
        self.registry = registry if registry is not None else RuleRegistry()
        self.cache = CompiledTypeCache()
        self.compiler = Compiler(self.provider, self.registry, self.cache)
        self.walker = ValidationWalker(self.compiler, _as_mode(mode or self.settings.VALIDATION_MODE),
            _as_limit(self.settings.MAX_ERRORS if max_errors is None else max_errors))

    @property
    def mode(self) -> ValidationMode: return self.walker.mode

    def register_rule(self, kind: Kind | str, name: str, constructor: RuleConstructor) -> None:
        """Add or replace a rule; only compilations after this call see it."""
        self.registry.register(kind, name, constructor)

    def register_schema(self, record_type: type, fields: Iterable[FieldDescriptor | tuple[str, Any, str | None]]) -> None:
        """Describe a class no built-in provider understands."""
        static = self.provider.static if isinstance(self.provider, ChainProvider) else None
        if static is None: raise configuration_error("the engine's provider does not accept explicit schemas")
        static.register(record_type, fields)
        self.cache.clear(record_type)

    def compile(self, record_type: type) -> CompiledType:
        return self.compiler.compile(record_type)

    def clear_cache(self, record_type: type | None = None) -> None:
        """Forget compiled forms so the next validation recompiles with the current registry."""
        self.cache.clear(record_type)

    def validate(self, instance: Any) -> list[FailureEntry]:
        """Every violated rule across the instance graph; empty when valid."""
        return self.walker.walk(instance)

    def is_valid(self, instance: Any) -> bool: return not self.validate(instance)

    def validate_or_raise(self, instance: Any) -> None:
        """Raise ValidationError carrying every failure, if any."""
        if failures := self.validate(instance):
            raise ValidationError(message=f"Validation of '{type(instance).__name__}' failed",
                details=failures, mode=self.mode)


def new_engine(**options) -> Engine:
    """Engine pre-loaded with the built-in rules."""
    return Engine(**options)
