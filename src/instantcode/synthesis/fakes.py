"""Scripted randomness provider for deterministic tests."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable


class ScriptedRandomness:
    """Randomness provider that replays queued answers.

    Each kind of decision has its own queue. When a queue runs dry the
    provider falls back to a fixed default: ``"foo"`` for words, the value
    closest to zero for integers, ``True`` for booleans, the first
    alternative for choices and the lower bound for counts.
    """

    def __init__(
        self,
        *,
        words: Iterable[str] = (),
        integers: Iterable[int] = (),
        booleans: Iterable[bool] = (),
        choices: Iterable[int] = (),
        counts: Iterable[int] = (),
    ) -> None:
        self._words = deque(words)
        self._integers = deque(integers)
        self._booleans = deque(booleans)
        self._choices = deque(choices)
        self._counts = deque(counts)
        self.calls: list[str] = []

    def words(self) -> str:
        self.calls.append("words")
        return self._words.popleft() if self._words else "foo"

    def integer(self, low: int = -5, high: int = 5) -> int:
        self.calls.append("integer")
        if self._integers:
            return self._integers.popleft()
        return min(max(0, low), high)

    def boolean(self) -> bool:
        self.calls.append("boolean")
        return self._booleans.popleft() if self._booleans else True

    def choice(self, count: int) -> int:
        self.calls.append("choice")
        if self._choices:
            return self._choices.popleft() % count
        return 0

    def count(self, low: int = 0, high: int = 5) -> int:
        self.calls.append("count")
        return self._counts.popleft() if self._counts else low
