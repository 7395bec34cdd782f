"""Synthesized values: literal expression trees built from descriptors.

Values are immutable and printed through ``ast.unparse`` so quoting, escaping
and nesting always follow Python's own grammar.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import TypeAlias, Union


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class NumberLiteral:
    value: int | float


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool


@dataclass(frozen=True)
class NoneLiteral:
    """The "no value" token."""


@dataclass(frozen=True)
class ArrayLiteral:
    items: tuple[SynthesizedValue, ...]


@dataclass(frozen=True)
class TupleLiteral:
    items: tuple[SynthesizedValue, ...]


@dataclass(frozen=True)
class DictLiteral:
    entries: tuple[tuple[SynthesizedValue, SynthesizedValue], ...]


@dataclass(frozen=True)
class ObjectLiteral:
    """A record literal; printed as a dict with string keys in field order."""

    fields: tuple[tuple[str, SynthesizedValue], ...]


SynthesizedValue: TypeAlias = Union[
    StringLiteral,
    NumberLiteral,
    BooleanLiteral,
    NoneLiteral,
    ArrayLiteral,
    TupleLiteral,
    DictLiteral,
    ObjectLiteral,
]


def to_ast(value: SynthesizedValue) -> ast.expr:
    """Build the expression node for a synthesized value."""
    if isinstance(value, (StringLiteral, NumberLiteral, BooleanLiteral)):
        return ast.Constant(value.value)
    if isinstance(value, ArrayLiteral):
        return ast.List(elts=[to_ast(item) for item in value.items], ctx=ast.Load())
    if isinstance(value, TupleLiteral):
        return ast.Tuple(elts=[to_ast(item) for item in value.items], ctx=ast.Load())
    if isinstance(value, DictLiteral):
        return ast.Dict(
            keys=[to_ast(key) for key, _ in value.entries],
            values=[to_ast(item) for _, item in value.entries],
        )
    if isinstance(value, ObjectLiteral):
        return ast.Dict(
            keys=[ast.Constant(name) for name, _ in value.fields],
            values=[to_ast(item) for _, item in value.fields],
        )
    return ast.Constant(None)


def render(value: SynthesizedValue) -> str:
    """Print a synthesized value as Python source."""
    return ast.unparse(to_ast(value))


def to_python(value: SynthesizedValue) -> object:
    """The runtime value a synthesized literal evaluates to."""
    if isinstance(value, (StringLiteral, NumberLiteral, BooleanLiteral)):
        return value.value
    if isinstance(value, ArrayLiteral):
        return [to_python(item) for item in value.items]
    if isinstance(value, TupleLiteral):
        return tuple(to_python(item) for item in value.items)
    if isinstance(value, DictLiteral):
        return {to_python(key): to_python(item) for key, item in value.entries}
    if isinstance(value, ObjectLiteral):
        return {name: to_python(item) for name, item in value.fields}
    return None
