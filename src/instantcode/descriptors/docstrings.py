"""Parameter types embedded in docstrings.

Three conventions are understood: Sphinx field lists, Google ``Args:``
sections and NumPy ``Parameters`` sections. When several mention the same
parameter the first convention in that order wins.
"""

from __future__ import annotations

import ast
import inspect
import re

_ROLE = re.compile(r":\w+:`([^`]*)`")
_OPTIONAL_SUFFIX = re.compile(r",\s*optional\s*$", re.IGNORECASE)
_DEFAULT_SUFFIX = re.compile(r",\s*default[:=]?\s*.*$", re.IGNORECASE)
_OR = re.compile(r"\s+or\s+")

_SPHINX_TYPE = re.compile(r"^\s*:type\s+(\*{0,2}\w+)\s*:\s*(.+?)\s*$")
_SPHINX_PARAM = re.compile(r"^\s*:param\s+([^:]+?)\s+(\*{0,2}\w+)\s*:")

_GOOGLE_HEADER = re.compile(r"^(\s*)(Args|Arguments|Parameters|Params|Keyword Args|Keyword Arguments):\s*$")
_GOOGLE_ENTRY = re.compile(r"^\s*(\*{0,2}\w+)\s*\(([^)]*)\)\s*:")

_NUMPY_HEADER = re.compile(r"^(\s*)(Parameters|Other Parameters)\s*$")
_NUMPY_RULE = re.compile(r"^\s*-{3,}\s*$")
_NUMPY_ENTRY = re.compile(r"^(\s*)(\*{0,2}\w+)\s*:\s*(.+?)\s*$")


def parse_type_text(text: str) -> ast.expr | None:
    """Parse documentation type text into an annotation-like expression.

    Sphinx roles and backticks are stripped, a trailing ``optional`` or
    ``default`` note is dropped and ``A or B`` is read as ``A | B``.
    """
    cleaned = _ROLE.sub(r"\1", text).replace("`", "").strip()
    cleaned = _OPTIONAL_SUFFIX.sub("", cleaned)
    cleaned = _DEFAULT_SUFFIX.sub("", cleaned)
    cleaned = _OR.sub(" | ", cleaned).strip()
    if not cleaned:
        return None
    try:
        return ast.parse(cleaned, mode="eval").body
    except SyntaxError:
        return None


def _sphinx(lines: list[str]) -> dict[str, str]:
    found: dict[str, str] = {}
    for line in lines:
        match = _SPHINX_TYPE.match(line)
        if match:
            found.setdefault(match.group(1).lstrip("*"), match.group(2))
            continue
        match = _SPHINX_PARAM.match(line)
        if match:
            found.setdefault(match.group(2).lstrip("*"), match.group(1))
    return found


def _google(lines: list[str]) -> dict[str, str]:
    found: dict[str, str] = {}
    section_indent: int | None = None
    for line in lines:
        header = _GOOGLE_HEADER.match(line)
        if header:
            section_indent = len(header.group(1))
            continue
        if section_indent is None or not line.strip():
            continue
        indent = len(line) - len(line.lstrip())
        if indent <= section_indent:
            section_indent = None
            continue
        entry = _GOOGLE_ENTRY.match(line)
        if entry:
            found.setdefault(entry.group(1).lstrip("*"), entry.group(2))
    return found


def _numpy(lines: list[str]) -> dict[str, str]:
    found: dict[str, str] = {}
    entry_indent: int | None = None
    index = 0
    while index < len(lines):
        line = lines[index]
        following = lines[index + 1] if index + 1 < len(lines) else ""
        if _NUMPY_RULE.match(following) and line.strip():
            header = _NUMPY_HEADER.match(line)
            entry_indent = len(header.group(1)) if header else None
            index += 2
            continue
        if entry_indent is not None:
            entry = _NUMPY_ENTRY.match(line)
            if entry and len(entry.group(1)) == entry_indent:
                found.setdefault(entry.group(2).lstrip("*"), entry.group(3))
        index += 1
    return found


def extract_doc_types(docstring: str | None) -> dict[str, ast.expr]:
    """Map parameter names to the type expressions their docstring declares."""
    if not docstring:
        return {}
    lines = inspect.cleandoc(docstring).splitlines()
    texts: dict[str, str] = {}
    for convention in (_sphinx, _google, _numpy):
        for name, text in convention(lines).items():
            texts.setdefault(name, text)

    types: dict[str, ast.expr] = {}
    for name, text in texts.items():
        node = parse_type_text(text)
        if node is not None:
            types[name] = node
    return types


def function_doc_types(node: ast.FunctionDef | ast.AsyncFunctionDef) -> dict[str, ast.expr]:
    return extract_doc_types(ast.get_docstring(node, clean=False))
