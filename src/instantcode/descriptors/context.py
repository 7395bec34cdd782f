"""Per-file table of alias and interface declarations.

The table is built once per file from the top-level statements and then only
read. Later bindings of a name replace earlier ones, as they would when the
module runs.
"""

from __future__ import annotations

import ast
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

_TYPED_DICT = "TypedDict"
_TYPE_ALIAS = "TypeAlias"


@dataclass(frozen=True)
class AliasDeclaration:
    """``Name = <type>``, ``Name: TypeAlias = <type>`` or ``type Name = <type>``."""

    name: str
    value: ast.expr


@dataclass(frozen=True)
class InterfaceDeclaration:
    """A ``TypedDict`` and its directly declared fields, in order."""

    name: str
    fields: tuple[tuple[str, ast.expr], ...]


@dataclass(frozen=True)
class OpaqueDeclaration:
    """A class that is neither an alias nor an interface."""

    name: str


Declaration = AliasDeclaration | InterfaceDeclaration | OpaqueDeclaration


def _tail_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _is_typed_dict_class(node: ast.ClassDef) -> bool:
    return any(_tail_name(base) == _TYPED_DICT for base in node.bases)


def _class_fields(node: ast.ClassDef) -> tuple[tuple[str, ast.expr], ...]:
    return tuple(
        (stmt.target.id, stmt.annotation)
        for stmt in node.body
        if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name)
    )


def _functional_typed_dict(value: ast.expr) -> tuple[tuple[str, ast.expr], ...] | None:
    """Fields of ``TypedDict("Name", {"field": type, ...})``, else None."""
    if not (isinstance(value, ast.Call) and _tail_name(value.func) == _TYPED_DICT):
        return None
    if len(value.args) < 2 or not isinstance(value.args[1], ast.Dict):
        return None
    spec = value.args[1]
    fields: list[tuple[str, ast.expr]] = []
    for key, annotation in zip(spec.keys, spec.values, strict=True):
        if isinstance(key, ast.Constant) and isinstance(key.value, str):
            fields.append((key.value, annotation))
    return tuple(fields)


def _declarations_from(stmt: ast.stmt) -> list[Declaration]:
    if isinstance(stmt, ast.ClassDef):
        if _is_typed_dict_class(stmt):
            return [InterfaceDeclaration(stmt.name, _class_fields(stmt))]
        return [OpaqueDeclaration(stmt.name)]

    if isinstance(stmt, ast.Assign):
        if len(stmt.targets) != 1 or not isinstance(stmt.targets[0], ast.Name):
            return []
        name = stmt.targets[0].id
        fields = _functional_typed_dict(stmt.value)
        if fields is not None:
            return [InterfaceDeclaration(name, fields)]
        return [AliasDeclaration(name, stmt.value)]

    if isinstance(stmt, ast.AnnAssign):
        if (
            isinstance(stmt.target, ast.Name)
            and stmt.value is not None
            and _tail_name(stmt.annotation) == _TYPE_ALIAS
        ):
            return [AliasDeclaration(stmt.target.id, stmt.value)]
        return []

    type_alias = getattr(ast, "TypeAlias", None)
    if type_alias is not None and isinstance(stmt, type_alias):
        return [AliasDeclaration(stmt.name.id, stmt.value)]

    return []


@dataclass(frozen=True)
class ResolutionContext:
    """Read-only name to declaration mapping for one file."""

    declarations: Mapping[str, Declaration] = field(default_factory=lambda: MappingProxyType({}))

    def lookup(self, name: str) -> Declaration | None:
        return self.declarations.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.declarations

    def __len__(self) -> int:
        return len(self.declarations)


def build_context(tree: ast.Module) -> ResolutionContext:
    """Collect the alias and interface declarations of a module."""
    table: dict[str, Declaration] = {}
    for stmt in tree.body:
        for declaration in _declarations_from(stmt):
            table[declaration.name] = declaration
    return ResolutionContext(MappingProxyType(table))
