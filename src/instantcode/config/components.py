"""Component-specific configuration dataclasses.

Each component of the pipeline takes its own small, immutable configuration
object so it can be built and tested in isolation.
"""

import sys
from dataclasses import dataclass

from instantcode.utils.exceptions import InvalidConfigurationError


def _check_range(key: str, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if low > high:
        raise InvalidConfigurationError(key, bounds, "a (low, high) pair with low <= high")


@dataclass(frozen=True)
class SynthesisConfig:
    """Configuration for value synthesis.

    Attributes:
        integer_range: Inclusive bounds for synthesized numbers
        count_range: Inclusive bounds for the length of synthesized
            lists and dicts
        max_depth: Container nesting depth past which containers are
            synthesized empty
    """

    integer_range: tuple[int, int] = (-5, 5)
    count_range: tuple[int, int] = (0, 5)
    max_depth: int = 6

    def __post_init__(self) -> None:
        """Validate ranges."""
        _check_range("integer_range", self.integer_range)
        _check_range("count_range", self.count_range)
        if self.count_range[0] < 0:
            raise InvalidConfigurationError("count_range", self.count_range, "non-negative bounds")
        if self.max_depth < 0:
            raise InvalidConfigurationError("max_depth", self.max_depth, "a non-negative integer")


@dataclass(frozen=True)
class SandboxConfig:
    """Configuration for the sandboxed evaluator.

    Attributes:
        timeout_seconds: Wall-clock limit for one evaluation, ``None`` for no limit
        memory_limit_mb: Address-space limit applied inside the child
            interpreter where the platform supports it, ``None`` for no limit
        allowed_imports: Top-level module names user code may really import;
            every other import yields an inert stub
        python_executable: Interpreter used for the child process
        max_output_chars: Captured stdout/stderr beyond this is truncated
    """

    timeout_seconds: float | None = 5.0
    memory_limit_mb: int | None = 512
    allowed_imports: tuple[str, ...] = ()
    python_executable: str = sys.executable
    max_output_chars: int = 4_096

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise InvalidConfigurationError("timeout_seconds", self.timeout_seconds, "a positive number or None")
        if self.memory_limit_mb is not None and self.memory_limit_mb <= 0:
            raise InvalidConfigurationError("memory_limit_mb", self.memory_limit_mb, "a positive integer or None")
        if self.max_output_chars < 0:
            raise InvalidConfigurationError("max_output_chars", self.max_output_chars, "a non-negative integer")
