"""Randomness provider abstraction.

Synthesis draws every random decision from an injected provider so tests can
substitute a scripted one without monkey patching.
"""

import random
from typing import Protocol

WORDS: tuple[str, ...] = (
    "apple", "amber", "anchor", "bamboo", "banana", "beacon", "breeze",
    "canyon", "cedar", "cherry", "comet", "coral", "delta", "ember",
    "falcon", "fern", "garnet", "glacier", "harbor", "hazel", "indigo",
    "island", "jasper", "juniper", "kettle", "lagoon", "lantern", "lemon",
    "maple", "meadow", "nectar", "nimbus", "oasis", "olive", "orbit",
    "pebble", "pepper", "quartz", "quill", "raven", "river", "saffron",
    "sparrow", "summit", "thistle", "tulip", "umber", "velvet", "violet",
    "willow", "winter", "yarrow", "zephyr", "foo", "bar", "baz", "hello",
    "world",
)


class RandomnessProvider(Protocol):
    """Source of random decisions for value synthesis."""

    def words(self) -> str:
        """A short lowercase word or two-word phrase."""
        ...

    def integer(self, low: int = -5, high: int = 5) -> int:
        """An integer in ``[low, high]``."""
        ...

    def boolean(self) -> bool:
        ...

    def choice(self, count: int) -> int:
        """An index in ``[0, count)``."""
        ...

    def count(self, low: int = 0, high: int = 5) -> int:
        """A collection length in ``[low, high]``."""
        ...


class SystemRandomness:
    """Randomness provider backed by ``random.Random``."""

    def __init__(self, seed: int | None = None, words: tuple[str, ...] = WORDS) -> None:
        """Initialize the provider.

        Args:
            seed: Optional seed; without one every run differs
            words: Vocabulary for string literals
        """
        self._random = random.Random(seed)
        self._words = words

    def words(self) -> str:
        size = self._random.randint(1, 2)
        return " ".join(self._random.choice(self._words) for _ in range(size))

    def integer(self, low: int = -5, high: int = 5) -> int:
        return self._random.randint(low, high)

    def boolean(self) -> bool:
        return self._random.random() < 0.5

    def choice(self, count: int) -> int:
        return self._random.randrange(count)

    def count(self, low: int = 0, high: int = 5) -> int:
        return self._random.randint(low, high)
