"""Parsing and compilation front end.

The engine works on an ``ast`` tree plus the compiled module code object for
the same text. Producing both is the only place where source problems are
raised; everything downstream assumes a well-formed pair.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from pathlib import Path
from types import CodeType

from instantcode.frontend.positions import LineIndex
from instantcode.utils.exceptions import (
    SourceFileNotFoundError,
    SourceParseError,
    UnsupportedFileError,
)


@dataclass(frozen=True)
class ParsedModule:
    """A source file parsed and compiled in one step.

    Attributes:
        source: The file text
        filename: Name used in tracebacks raised by compiled code
        tree: Top-level declaration tree
        code: Compiled module code object
        lines: Offset index over ``source``
    """

    source: str
    filename: str
    tree: ast.Module
    code: CodeType
    lines: LineIndex = field(repr=False, compare=False)


def parse_source(source: str, filename: str = "<instantcode>") -> ParsedModule:
    """Parse and compile ``source``.

    Raises:
        SourceParseError: If the text is not valid Python
    """
    try:
        tree = ast.parse(source, filename=filename, type_comments=False)
        code = compile(tree, filename, "exec", dont_inherit=True)
    except SyntaxError as exc:
        raise SourceParseError(filename, exc.msg or "invalid syntax", line=exc.lineno, original_error=exc) from exc
    except ValueError as exc:
        # null bytes in the source
        raise SourceParseError(filename, str(exc), original_error=exc) from exc
    return ParsedModule(source=source, filename=filename, tree=tree, code=code, lines=LineIndex(source))


class PythonFrontend:
    """Default front end backed by the standard library parser and compiler."""

    def parse(self, source: str, filename: str) -> ParsedModule:
        return parse_source(source, filename)


SOURCE_SUFFIXES = frozenset({".py", ".pyw"})


def read_source_file(path: str | Path) -> str:
    """Read a Python source file as text.

    Raises:
        SourceFileNotFoundError: If the path does not exist
        UnsupportedFileError: If the path is not a Python source file
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceFileNotFoundError(file_path)
    if file_path.suffix not in SOURCE_SUFFIXES:
        raise UnsupportedFileError(file_path, file_path.suffix or None)
    return file_path.read_text(encoding="utf-8")
