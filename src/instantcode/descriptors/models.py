"""Type descriptors: the normalized, recursive shape of a parameter type.

Descriptors form a closed set of frozen dataclasses. Resolution produces them
from annotation nodes and synthesis consumes them; both sides dispatch over
exactly these variants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias, Union as _Union


class PrimitiveKind(str, Enum):
    """Scalar kinds a primitive descriptor can take."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class NoneValue:
    """The ``None`` type."""


@dataclass(frozen=True)
class Constant:
    """A choice among literal values, as written in ``Literal[...]``."""

    values: tuple[str | int | float | bool | None, ...]


@dataclass(frozen=True)
class Array:
    element: TypeDescriptor


@dataclass(frozen=True)
class FixedTuple:
    """A tuple with one descriptor per position."""

    elements: tuple[TypeDescriptor, ...]


@dataclass(frozen=True)
class Dictionary:
    """A homogeneous mapping such as ``dict[str, int]``."""

    key: TypeDescriptor
    value: TypeDescriptor


@dataclass(frozen=True)
class Object:
    """A record shape with named fields in declaration order."""

    fields: tuple[tuple[str, TypeDescriptor], ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)


@dataclass(frozen=True)
class Union:
    alternatives: tuple[TypeDescriptor, ...]

    def __post_init__(self) -> None:
        if not self.alternatives:
            raise ValueError("a union needs at least one alternative")


@dataclass(frozen=True)
class Reference:
    """A name awaiting resolution. Resolved descriptors never contain one."""

    name: str


@dataclass(frozen=True)
class Unknown:
    """No usable type information."""


TypeDescriptor: TypeAlias = _Union[
    Primitive,
    NoneValue,
    Constant,
    Array,
    FixedTuple,
    Dictionary,
    Object,
    Union,
    Reference,
    Unknown,
]

STRING = Primitive(PrimitiveKind.STRING)
NUMBER = Primitive(PrimitiveKind.NUMBER)
BOOLEAN = Primitive(PrimitiveKind.BOOLEAN)
NONE = NoneValue()
UNKNOWN = Unknown()


def make_union(alternatives: list[TypeDescriptor] | tuple[TypeDescriptor, ...]) -> TypeDescriptor:
    """Build a union, flattening nested unions and collapsing singletons."""
    flat: list[TypeDescriptor] = []
    for alternative in alternatives:
        if isinstance(alternative, Union):
            flat.extend(alternative.alternatives)
        else:
            flat.append(alternative)
    if not flat:
        return UNKNOWN
    if len(flat) == 1:
        return flat[0]
    return Union(tuple(flat))


def contains_reference(descriptor: TypeDescriptor) -> bool:
    """Return True if any node of ``descriptor`` is an unresolved reference."""
    if isinstance(descriptor, Reference):
        return True
    if isinstance(descriptor, Array):
        return contains_reference(descriptor.element)
    if isinstance(descriptor, FixedTuple):
        return any(contains_reference(e) for e in descriptor.elements)
    if isinstance(descriptor, Dictionary):
        return contains_reference(descriptor.key) or contains_reference(descriptor.value)
    if isinstance(descriptor, Object):
        return any(contains_reference(d) for _, d in descriptor.fields)
    if isinstance(descriptor, Union):
        return any(contains_reference(a) for a in descriptor.alternatives)
    return False


def format_descriptor(descriptor: TypeDescriptor) -> str:
    """Compact human-readable form, e.g. ``list[number]`` or ``{x: number}``."""
    if isinstance(descriptor, Primitive):
        return descriptor.kind.value
    if isinstance(descriptor, NoneValue):
        return "None"
    if isinstance(descriptor, Constant):
        return "Literal[" + ", ".join(repr(value) for value in descriptor.values) + "]"
    if isinstance(descriptor, Array):
        return f"list[{format_descriptor(descriptor.element)}]"
    if isinstance(descriptor, FixedTuple):
        return "tuple[" + ", ".join(format_descriptor(e) for e in descriptor.elements) + "]"
    if isinstance(descriptor, Dictionary):
        return f"dict[{format_descriptor(descriptor.key)}, {format_descriptor(descriptor.value)}]"
    if isinstance(descriptor, Object):
        return "{" + ", ".join(f"{name}: {format_descriptor(d)}" for name, d in descriptor.fields) + "}"
    if isinstance(descriptor, Union):
        return " | ".join(format_descriptor(a) for a in descriptor.alternatives)
    if isinstance(descriptor, Reference):
        return f"<ref {descriptor.name}>"
    return "unknown"
