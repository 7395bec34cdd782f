"""Call-site extraction from a module's top-level declarations."""

from __future__ import annotations

import ast
from dataclasses import dataclass

from instantcode.descriptors.docstrings import function_doc_types
from instantcode.descriptors.models import UNKNOWN, TypeDescriptor
from instantcode.descriptors.resolver import TypeResolver
from instantcode.frontend.positions import LineIndex
from instantcode.utils.logging_utils import get_logger

logger = get_logger()


@dataclass(frozen=True)
class Parameter:
    """One formal parameter and its resolved descriptor."""

    name: str
    descriptor: TypeDescriptor
    keyword_only: bool = False


@dataclass(frozen=True)
class CallSite:
    """A callable top-level declaration.

    Attributes:
        name: Name the callable is bound to
        parameters: Formal parameters in declaration order, variadics excluded
        anchor_position: Character offset where the declaration starts
        end_position: Character offset where the declaration ends
        is_async: Whether calling it produces a coroutine
    """

    name: str
    parameters: tuple[Parameter, ...]
    anchor_position: int
    end_position: int
    is_async: bool = False

    @property
    def descriptors(self) -> tuple[TypeDescriptor, ...]:
        return tuple(parameter.descriptor for parameter in self.parameters)


def _callable_argument_types(annotation: ast.expr | None) -> list[ast.expr]:
    """Parameter annotations from ``Callable[[A, B], R]``, else empty."""
    if not isinstance(annotation, ast.Subscript):
        return []
    head = annotation.value
    name = head.id if isinstance(head, ast.Name) else getattr(head, "attr", None)
    if name != "Callable" or not isinstance(annotation.slice, ast.Tuple):
        return []
    elts = annotation.slice.elts
    if not elts or not isinstance(elts[0], ast.List):
        return []
    return list(elts[0].elts)


class CallSiteExtractor:
    """Finds named functions and name-bound lambdas at module level."""

    def __init__(self, resolver: TypeResolver, lines: LineIndex) -> None:
        self.resolver = resolver
        self.lines = lines

    def extract(self, tree: ast.Module) -> list[CallSite]:
        call_sites: list[CallSite] = []
        for stmt in tree.body:
            call_site = self._from_statement(stmt)
            if call_site is not None:
                call_sites.append(call_site)
        return call_sites

    def _resolve(self, annotation: ast.expr | None, doc_type: ast.expr | None = None) -> TypeDescriptor:
        try:
            return self.resolver.resolve(annotation, doc_type)
        except Exception as exc:
            # a parameter the resolver chokes on is a parameter of unknown type
            logger.warning(
                "Type resolution failed",
                annotation=ast.unparse(annotation) if annotation is not None else None,
                error=f"{type(exc).__name__}: {exc}",
            )
            return UNKNOWN

    def _span(self, node: ast.stmt) -> tuple[int, int]:
        start = self.lines.offset(node.lineno, node.col_offset)
        end_lineno = node.end_lineno or node.lineno
        end_col = node.end_col_offset if node.end_col_offset is not None else node.col_offset
        return start, self.lines.offset(end_lineno, end_col)

    def _from_statement(self, stmt: ast.stmt) -> CallSite | None:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            return self._from_function(stmt)
        if isinstance(stmt, ast.Assign):
            if len(stmt.targets) == 1 and isinstance(stmt.targets[0], ast.Name) and isinstance(stmt.value, ast.Lambda):
                return self._from_lambda(stmt, stmt.targets[0].id, stmt.value, None)
        if isinstance(stmt, ast.AnnAssign):
            if isinstance(stmt.target, ast.Name) and isinstance(stmt.value, ast.Lambda):
                return self._from_lambda(stmt, stmt.target.id, stmt.value, stmt.annotation)
        return None

    def _from_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> CallSite:
        doc_types = function_doc_types(node)
        arguments = node.args
        parameters = [
            Parameter(arg.arg, self._resolve(arg.annotation, doc_types.get(arg.arg)))
            for arg in [*arguments.posonlyargs, *arguments.args]
        ]
        parameters.extend(
            Parameter(arg.arg, self._resolve(arg.annotation, doc_types.get(arg.arg)), keyword_only=True)
            for arg in arguments.kwonlyargs
        )
        start, end = self._span(node)
        return CallSite(
            name=node.name,
            parameters=tuple(parameters),
            anchor_position=start,
            end_position=end,
            is_async=isinstance(node, ast.AsyncFunctionDef),
        )

    def _from_lambda(self, stmt: ast.stmt, name: str, node: ast.Lambda, annotation: ast.expr | None) -> CallSite:
        hinted = _callable_argument_types(annotation)
        positional = [*node.args.posonlyargs, *node.args.args]
        parameters = [
            Parameter(arg.arg, self._resolve(hinted[index] if index < len(hinted) else None))
            for index, arg in enumerate(positional)
        ]
        parameters.extend(
            Parameter(arg.arg, self._resolve(None), keyword_only=True)
            for arg in node.args.kwonlyargs
        )
        start, end = self._span(stmt)
        return CallSite(name=name, parameters=tuple(parameters), anchor_position=start, end_position=end)
