"""Field Metadata Model

Immutable descriptions of record fields as seen by the engine: each field
has a name, a declared type reference (value kind plus nested structure) and
an optional raw directive string. Descriptors are produced by a metadata
provider and never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


class Kind(str, Enum):
    """Value category of a field."""
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TEXT = "text"
    RECORD = "record"
    COLLECTION = "collection"
    OPTIONAL = "optional"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class TypeRef:
    """Declared type of a field.

    - RECORD: ``record_type`` is the nested record class
    - COLLECTION: ``element`` describes the items; fixed-length tuples also
      carry one TypeRef per position in ``items``
    - OPTIONAL: ``element`` describes the wrapped type
    """
    kind: Kind
    type_name: str
    record_type: type | None = None
    element: TypeRef | None = None
    items: tuple[TypeRef, ...] | None = None

    @classmethod
    def scalar(cls, kind: Kind, type_name: str | None = None) -> TypeRef:
        return cls(kind, type_name or kind.value)

    @classmethod
    def record(cls, record_type: type) -> TypeRef:
        return cls(Kind.RECORD, record_type.__name__, record_type=record_type)

    @classmethod
    def collection(cls, element: TypeRef, type_name: str | None = None,
                   items: tuple[TypeRef, ...] | None = None) -> TypeRef:
        return cls(Kind.COLLECTION, type_name or f"list[{element.type_name}]", element=element, items=items)

    @classmethod
    def optional(cls, element: TypeRef, type_name: str | None = None) -> TypeRef:
        return cls(Kind.OPTIONAL, type_name or f"{element.type_name} | None", element=element)

    def element_at(self, index: int) -> TypeRef | None:
        """Type of the collection item at ``index``."""
        if self.items is not None: return self.items[index] if index < len(self.items) else None
        return self.element

    @property
    def effective(self) -> TypeRef:
        """The type rules resolve against (optional unwrapped one level)."""
        if self.kind is Kind.OPTIONAL and self.element is not None:
            return self.element
        return self

    def nested_records(self) -> Iterator[type]:
        """Record classes reachable through this type (directly, as elements, inside optionals)."""
        if self.kind is Kind.RECORD and self.record_type is not None:
            yield self.record_type
        elif self.items is not None:
            for item in self.items: yield from item.nested_records()
        elif self.element is not None:
            yield from self.element.nested_records()


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One record field: name, declared type and raw directive string."""
    name: str
    type: TypeRef
    directive: str | None = None

    @property
    def kind(self) -> Kind: return self.type.kind

    @property
    def is_optional(self) -> bool: return self.type.kind is Kind.OPTIONAL

    @property
    def effective_kind(self) -> Kind: return self.type.effective.kind

    @property
    def has_directive(self) -> bool: return bool(self.directive and self.directive.strip())


@dataclass(frozen=True, slots=True)
class Rules:
    """Directive marker for ``Annotated`` field types.

    Usage:
        @dataclass
        class User:
            name: Annotated[str, Rules("required, min=3, max=10")]
    """
    directive: str


def render_value(value: Any, limit: int = 80) -> str:
    """Diagnostic rendering of a field value."""
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif value is None:
        text = "None"
    else:
        text = str(value)
    return text[:limit] + ("..." if len(text) > limit else "")
