"""Metadata Providers

The engine never inspects classes itself: a provider enumerates a record
type's fields as FieldDescriptors. Built-in providers cover dataclasses,
pydantic models and explicitly registered schemas.

Usage:
    from dataclasses import dataclass
    from typing import Annotated
    from fieldrules import Rules, field

    @dataclass
    class User:
        name: str = field(default="", rules="required, min=3, max=10")
        email: Annotated[str | None, Rules("contains=@")] = None

    class Order(BaseModel):
        total: float = Field(0.0, rules="min=0")
        items: list[Item] = Field(default_factory=list, rules="min=1")
"""
from __future__ import annotations

import dataclasses
import threading
import types
from abc import ABC, abstractmethod
from collections import abc
from typing import Annotated, Any, Callable, Iterable, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel
from pydantic import Field as PydanticField

from fieldrules.config import Settings, get_settings
from fieldrules.errors import configuration_error, not_a_record, unresolved_annotation
from .schema import FieldDescriptor, Kind, Rules, TypeRef

_COLLECTION_ORIGINS = (list, tuple, set, frozenset, abc.Sequence, abc.MutableSequence, abc.Set, abc.Collection)
_SCALAR_KINDS = ((bool, Kind.BOOLEAN), (int, Kind.INTEGER), (float, Kind.FLOAT), (str, Kind.TEXT))


def _name(annotation: Any) -> str:
    if annotation is type(None): return "None"
    if get_origin(annotation) is None and isinstance(annotation, type): return annotation.__name__
    return str(annotation).replace("typing.", "")


def _marker_directive(annotation: Any) -> str | None:
    """Directive from an ``Annotated[..., Rules(...)]`` marker, if any."""
    if get_origin(annotation) is not Annotated: return None
    return next((m.directive for m in get_args(annotation)[1:] if isinstance(m, Rules)), None)


class TypeResolver:
    """Turns a type annotation into a TypeRef.

    ``is_record`` decides which classes are records; it is normally the
    supports() of the provider chain so nested types of any flavor resolve.
    """

    def __init__(self, is_record: Callable[[type], bool]):
        self.is_record = is_record

    def resolve(self, annotation: Any) -> TypeRef:
        origin = get_origin(annotation)
        if origin is Annotated: return self.resolve(get_args(annotation)[0])

        if origin is Union or origin is types.UnionType:
            args = get_args(annotation)
            members = [a for a in args if a is not type(None)]
            if len(members) == 1 and len(members) < len(args): return TypeRef.optional(self.resolve(members[0]))
            return TypeRef.scalar(Kind.UNKNOWN, " | ".join(_name(a) for a in args))

        if origin in _COLLECTION_ORIGINS:
            args = get_args(annotation)
            if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
                # fixed length: one type per position
                items = tuple(self.resolve(a) for a in args)
                element = items[0] if all(i == items[0] for i in items) else TypeRef.scalar(Kind.UNKNOWN, "Any")
                return TypeRef.collection(element, f"tuple[{', '.join(i.type_name for i in items)}]", items)
            element = self.resolve(args[0]) if args else TypeRef.scalar(Kind.UNKNOWN, "Any")
            suffix = ", ..." if origin is tuple else ""
            return TypeRef.collection(element, f"{origin.__name__}[{element.type_name}{suffix}]")

        if origin is None and isinstance(annotation, type):
            for scalar, kind in _SCALAR_KINDS:
                if issubclass(annotation, scalar): return TypeRef.scalar(kind, annotation.__name__)
            if annotation in (list, tuple, set, frozenset):
                return TypeRef.collection(TypeRef.scalar(Kind.UNKNOWN, "Any"), annotation.__name__)
            if self.is_record(annotation): return TypeRef.record(annotation)

        return TypeRef.scalar(Kind.UNKNOWN, _name(annotation))


class MetadataProvider(ABC):
    """Enumerates the fields of record types it supports."""

    @abstractmethod
    def supports(self, record_type: type) -> bool:
        """True when this provider can describe ``record_type``."""

    @abstractmethod
    def fields(self, record_type: type) -> list[FieldDescriptor]:
        """Fields in declaration order."""


class AnnotationProvider(MetadataProvider):
    """Base for providers that resolve Python annotations."""

    def __init__(self, is_record: Callable[[type], bool] | None = None):
        self.resolver = TypeResolver(is_record or self.supports)


class DataclassProvider(AnnotationProvider):
    """Dataclass fields; directives from ``metadata[tag_key]`` or a Rules marker."""

    def __init__(self, tag_key: str = "rules", is_record: Callable[[type], bool] | None = None):
        super().__init__(is_record)
        self.tag_key = tag_key

    def supports(self, record_type: type) -> bool:
        return isinstance(record_type, type) and dataclasses.is_dataclass(record_type)

    def fields(self, record_type: type) -> list[FieldDescriptor]:
        try: hints = get_type_hints(record_type, include_extras=True)
        except (NameError, TypeError) as e: raise unresolved_annotation(record_type, e) from e
        result = []
        for f in dataclasses.fields(record_type):
            annotation = hints.get(f.name, f.type)
            directive = f.metadata.get(self.tag_key) or _marker_directive(annotation)
            result.append(FieldDescriptor(f.name, self.resolver.resolve(annotation), directive))
        return result


class PydanticProvider(AnnotationProvider):
    """Pydantic v2 model fields; directives from ``json_schema_extra[schema_key]`` or a Rules marker."""

    def __init__(self, schema_key: str = "x-rules", is_record: Callable[[type], bool] | None = None):
        super().__init__(is_record)
        self.schema_key = schema_key

    def supports(self, record_type: type) -> bool:
        return isinstance(record_type, type) and issubclass(record_type, BaseModel) and record_type is not BaseModel

    def fields(self, record_type: type) -> list[FieldDescriptor]:
        result = []
        for name, info in record_type.model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            directive = extra.get(self.schema_key) or next(
                (m.directive for m in info.metadata if isinstance(m, Rules)), None)
            result.append(FieldDescriptor(name, self.resolver.resolve(info.annotation), directive))
        return result


class StaticProvider(AnnotationProvider):
    """Explicitly registered schemas for classes no other provider understands.

    Usage:
        provider.register(Point, [("x", int, "min=0"), ("y", int, "min=0")])
    """

    def __init__(self, is_record: Callable[[type], bool] | None = None):
        super().__init__(is_record)
        self._lock = threading.Lock()
        self._schemas: dict[type, tuple[FieldDescriptor, ...]] = {}

    def register(self, record_type: type, fields: Iterable[FieldDescriptor | tuple[str, Any, str | None]]) -> None:
        """Register ``record_type`` with descriptors or ``(name, annotation, directive)`` triples."""
        # the type being registered resolves as a record before it is visible to readers
        resolver = TypeResolver(lambda t: t is record_type or self.resolver.is_record(t))
        descriptors = tuple(self._descriptor(record_type, f, resolver) for f in fields)
        with self._lock:
            self._schemas[record_type] = descriptors

    @staticmethod
    def _descriptor(record_type: type, entry: Any, resolver: TypeResolver) -> FieldDescriptor:
        if isinstance(entry, FieldDescriptor): return entry
        try: name, annotation, directive = entry
        except (TypeError, ValueError) as e:
            raise configuration_error(f"invalid schema entry {entry!r} for '{record_type.__name__}': "
                "expected (name, annotation, directive)", cause=e, record=record_type.__name__) from e
        return FieldDescriptor(name, resolver.resolve(annotation), directive)

    def supports(self, record_type: type) -> bool: return record_type in self._schemas

    def fields(self, record_type: type) -> list[FieldDescriptor]: return list(self._schemas[record_type])


class ChainProvider(MetadataProvider):
    """First provider that supports a type describes it."""

    def __init__(self, providers: Iterable[MetadataProvider] = ()):
        self.providers: list[MetadataProvider] = list(providers)

    def add(self, provider: MetadataProvider) -> None: self.providers.append(provider)

    @property
    def static(self) -> StaticProvider | None:
        return next((p for p in self.providers if isinstance(p, StaticProvider)), None)

    def supports(self, record_type: type) -> bool:
        return isinstance(record_type, type) and any(p.supports(record_type) for p in self.providers)

    def fields(self, record_type: type) -> list[FieldDescriptor]:
        for provider in self.providers:
            if provider.supports(record_type): return provider.fields(record_type)
        raise not_a_record(record_type)


def default_provider(settings: Settings | None = None) -> ChainProvider:
    """Explicit schemas first, then dataclasses, then pydantic models."""
    settings = settings or get_settings()
    chain = ChainProvider()
    chain.add(StaticProvider(is_record=chain.supports))
    chain.add(DataclassProvider(settings.TAG_KEY, is_record=chain.supports))
    chain.add(PydanticProvider(settings.SCHEMA_EXTRA_KEY, is_record=chain.supports))
    return chain


# ============================================================================
# Field helpers
# ============================================================================

def field(*, rules: str | None = None, tag_key: str | None = None, metadata: dict | None = None, **kwargs) -> Any:
    """``dataclasses.field`` with a directive string.

    Args:
        rules: Directive string, e.g. "required, min=3"
        tag_key: Metadata key the DataclassProvider reads. Defaults to Settings.TAG_KEY
        metadata: Extra dataclass field metadata
    """
    merged = dict(metadata or {})
    if rules is not None: merged[tag_key or get_settings().TAG_KEY] = rules
    return dataclasses.field(metadata=merged, **kwargs)


def Field(default: Any = ..., *, rules: str | None = None, schema_key: str | None = None, **kwargs) -> Any:
    """Pydantic ``Field`` with a directive string stored in ``json_schema_extra``.

    Args:
        default: Default value or ... for required
        rules: Directive string, e.g. "required, min=3"
        schema_key: json_schema_extra key the PydanticProvider reads. Defaults to Settings.SCHEMA_EXTRA_KEY
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    if rules is not None: extra[schema_key or get_settings().SCHEMA_EXTRA_KEY] = rules
    if extra: kwargs["json_schema_extra"] = extra
    if "default_factory" in kwargs: return PydanticField(**kwargs)
    return PydanticField(default, **kwargs)
