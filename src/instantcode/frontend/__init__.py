"""Parsing and compilation front end for Python source files."""

from .parser import ParsedModule, PythonFrontend, parse_source, read_source_file
from .positions import LineIndex
from .protocols import FrontendProtocol

__all__ = [
    "FrontendProtocol",
    "LineIndex",
    "ParsedModule",
    "PythonFrontend",
    "parse_source",
    "read_source_file",
]
