"""Conversion between ``ast`` locations and character offsets.

``ast`` reports columns as UTF-8 byte offsets within a line, while annotation
anchors are character offsets into the whole text.
"""

from __future__ import annotations

import bisect
import io


class LineIndex:
    """Maps (line, byte column) pairs to character offsets and back."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._lines = io.StringIO(text, newline="").readlines()
        self._starts: list[int] = []
        offset = 0
        for line in self._lines:
            self._starts.append(offset)
            offset += len(line)
        if not self._starts:
            self._starts.append(0)

    def offset(self, lineno: int, col_offset: int) -> int:
        """Return the character offset for a 1-based line and a byte column."""
        if lineno < 1 or lineno > len(self._lines):
            return len(self._text)
        line = self._lines[lineno - 1]
        prefix = line.encode("utf-8")[:col_offset].decode("utf-8", errors="ignore")
        return self._starts[lineno - 1] + len(prefix)

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-based (line, column) of a character offset."""
        offset = min(max(offset, 0), len(self._text))
        index = bisect.bisect_right(self._starts, offset) - 1
        return index + 1, offset - self._starts[index] + 1
