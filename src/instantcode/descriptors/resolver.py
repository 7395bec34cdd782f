"""Type descriptor resolution.

Annotation nodes are normalized into descriptors, and named references are
resolved straight away against the file's ``ResolutionContext``. Anything that
cannot be modeled degrades to ``Unknown``; nothing here raises.
"""

from __future__ import annotations

import ast
import logging

from instantcode.descriptors.context import (
    AliasDeclaration,
    InterfaceDeclaration,
    ResolutionContext,
)
from instantcode.descriptors.models import (
    BOOLEAN,
    NONE,
    NUMBER,
    STRING,
    UNKNOWN,
    Array,
    Constant,
    Dictionary,
    FixedTuple,
    Object,
    TypeDescriptor,
    Unknown,
    make_union,
)

logger = logging.getLogger(__name__)

_SCALARS: dict[str, TypeDescriptor] = {
    "str": STRING,
    "Text": STRING,
    "LiteralString": STRING,
    "int": NUMBER,
    "float": NUMBER,
    "complex": NUMBER,
    "bool": BOOLEAN,
    "NoneType": NONE,
    "Any": UNKNOWN,
    "object": UNKNOWN,
}

_SEQUENCES = frozenset({
    "list", "List", "Sequence", "MutableSequence", "Iterable", "Iterator",
    "Collection", "set", "Set", "frozenset", "FrozenSet", "AbstractSet",
    "MutableSet", "deque", "Deque",
})

_MAPPINGS = frozenset({
    "dict", "Dict", "Mapping", "MutableMapping", "defaultdict", "DefaultDict",
    "OrderedDict",
})

_TUPLES = frozenset({"tuple", "Tuple"})

_WRAPPERS = frozenset({
    "Annotated", "Final", "ClassVar", "Required", "NotRequired", "ReadOnly",
})


def _tail_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _subscript_args(node: ast.Subscript) -> list[ast.expr]:
    if isinstance(node.slice, ast.Tuple):
        return list(node.slice.elts)
    return [node.slice]


def _literal_value(node: ast.expr) -> tuple[bool, object]:
    if isinstance(node, ast.Constant) and isinstance(node.value, (str, int, float, bool, type(None))):
        return True, node.value
    if (
        isinstance(node, ast.UnaryOp)
        and isinstance(node.op, ast.USub)
        and isinstance(node.operand, ast.Constant)
        and isinstance(node.operand.value, (int, float))
        and not isinstance(node.operand.value, bool)
    ):
        return True, -node.operand.value
    return False, None


class TypeResolver:
    """Normalizes annotation nodes against one file's declarations.

    The resolver holds no mutable state, so one instance can serve every
    call-site of a file.
    """

    def __init__(self, context: ResolutionContext | None = None) -> None:
        self.context = context or ResolutionContext()

    def resolve(self, annotation: ast.expr | None, doc_type: ast.expr | None = None) -> TypeDescriptor:
        """Descriptor for a parameter.

        An explicit annotation wins unless it carries no information (absent,
        ``Any``, ``object``), in which case the documented type is used.
        """
        if annotation is not None:
            descriptor = self.normalize(annotation)
            if not isinstance(descriptor, Unknown):
                return descriptor
        if doc_type is not None:
            return self.normalize(doc_type)
        return UNKNOWN

    def normalize(self, node: ast.expr) -> TypeDescriptor:
        return self._normalize(node, frozenset())

    def resolve_reference(self, name: str) -> TypeDescriptor:
        return self._resolve_reference(name, frozenset())

    def _normalize(self, node: ast.expr, active: frozenset[str]) -> TypeDescriptor:
        if isinstance(node, ast.Constant):
            return self._normalize_constant(node, active)
        if isinstance(node, ast.Name):
            return self._normalize_name(node.id, active)
        if isinstance(node, ast.Attribute):
            # module-qualified names only resolve to well-known typing names
            return _SCALARS.get(node.attr) or self._bare_generic(node.attr) or UNKNOWN
        if isinstance(node, ast.Subscript):
            return self._normalize_subscript(node, active)
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return make_union([self._normalize(node.left, active), self._normalize(node.right, active)])
        return UNKNOWN

    def _normalize_constant(self, node: ast.Constant, active: frozenset[str]) -> TypeDescriptor:
        if node.value is None:
            return NONE
        if isinstance(node.value, str):
            try:
                forward = ast.parse(node.value.strip(), mode="eval").body
            except SyntaxError:
                return UNKNOWN
            return self._normalize(forward, active)
        return UNKNOWN

    def _normalize_name(self, name: str, active: frozenset[str]) -> TypeDescriptor:
        if name in self.context:
            return self._resolve_reference(name, active)
        if name in _SCALARS:
            return _SCALARS[name]
        return self._bare_generic(name) or UNKNOWN

    @staticmethod
    def _bare_generic(name: str) -> TypeDescriptor | None:
        if name in _SEQUENCES or name in _TUPLES:
            return Array(UNKNOWN)
        if name in _MAPPINGS:
            return Dictionary(UNKNOWN, UNKNOWN)
        return None

    def _normalize_subscript(self, node: ast.Subscript, active: frozenset[str]) -> TypeDescriptor:
        head = _tail_name(node.value)
        args = _subscript_args(node)

        if head is None:
            return UNKNOWN
        if isinstance(node.value, ast.Name) and head in self.context:
            # user generic such as Box[int]: parameters are ignored
            return self._resolve_reference(head, active)
        if not args:
            # empty subscript such as list[()]; tuple[()] is the empty tuple
            return FixedTuple(()) if head in _TUPLES else UNKNOWN
        if head == "Optional":
            return make_union([self._normalize(args[0], active), NONE])
        if head == "Union":
            return make_union([self._normalize(arg, active) for arg in args])
        if head == "Literal":
            return self._normalize_literal(args)
        if head in _WRAPPERS:
            return self._normalize(args[0], active)
        if head in _SEQUENCES:
            return Array(self._normalize(args[0], active))
        if head in _TUPLES:
            return self._normalize_tuple(args, active)
        if head in _MAPPINGS:
            if len(args) != 2:
                return Dictionary(UNKNOWN, UNKNOWN)
            return Dictionary(self._normalize(args[0], active), self._normalize(args[1], active))
        return UNKNOWN

    @staticmethod
    def _normalize_literal(args: list[ast.expr]) -> TypeDescriptor:
        values = []
        for arg in args:
            ok, value = _literal_value(arg)
            if ok:
                values.append(value)
        if not values:
            return UNKNOWN
        return Constant(tuple(values))

    def _normalize_tuple(self, args: list[ast.expr], active: frozenset[str]) -> TypeDescriptor:
        if len(args) == 2 and isinstance(args[1], ast.Constant) and args[1].value is Ellipsis:
            return Array(self._normalize(args[0], active))
        if len(args) == 1 and isinstance(args[0], ast.Tuple) and not args[0].elts:
            return FixedTuple(())
        return FixedTuple(tuple(self._normalize(arg, active) for arg in args))

    def _resolve_reference(self, name: str, active: frozenset[str]) -> TypeDescriptor:
        if name in active:
            logger.debug("Recursive reference to %s resolved as unknown", name)
            return UNKNOWN
        declaration = self.context.lookup(name)
        inner = active | {name}
        if isinstance(declaration, AliasDeclaration):
            return self._normalize(declaration.value, inner)
        if isinstance(declaration, InterfaceDeclaration):
            return Object(tuple((field, self._normalize(annotation, inner)) for field, annotation in declaration.fields))
        return UNKNOWN
