"""Protocols for the parsing and compilation service."""

from typing import Protocol

from instantcode.frontend.parser import ParsedModule


class FrontendProtocol(Protocol):
    """Contract for turning file text into a tree and compiled code."""

    def parse(self, source: str, filename: str) -> ParsedModule:
        """Parse and compile one file.

        Args:
            source: File text
            filename: Name reported in diagnostics and tracebacks

        Returns:
            The parsed tree and compiled code for the same text

        Raises:
            SourceParseError: If the text cannot be parsed or compiled
        """
        ...
