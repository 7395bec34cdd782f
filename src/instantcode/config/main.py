"""Top-level configuration for InstantCode.

``InstantCodeConfig`` aggregates the component configurations and applies
environment overrides once, at construction time.
"""

import os
from dataclasses import dataclass, field, replace

from instantcode.config.components import SandboxConfig, SynthesisConfig
from instantcode.utils.exceptions import InvalidConfigurationError

ENV_TIMEOUT = "INSTANTCODE_TIMEOUT"
ENV_MEMORY_LIMIT = "INSTANTCODE_MEMORY_LIMIT_MB"
ENV_SEED = "INSTANTCODE_SEED"


def _env_number(name: str, cast: type) -> float | int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise InvalidConfigurationError(name, raw, f"a value parseable as {cast.__name__}") from exc


@dataclass(frozen=True)
class InstantCodeConfig:
    """Configuration for an InstantCode engine.

    Attributes:
        synthesis: Value synthesis settings
        sandbox: Sandboxed evaluation settings
        seed: Optional seed for the default randomness provider. Runs are
            not reproducible unless a seed is given.
    """

    synthesis: SynthesisConfig = field(default_factory=SynthesisConfig)
    sandbox: SandboxConfig = field(default_factory=SandboxConfig)
    seed: int | None = None

    def __post_init__(self) -> None:
        """Apply environment overrides to settings left at their defaults."""
        timeout = _env_number(ENV_TIMEOUT, float)
        if timeout is not None and self.sandbox.timeout_seconds == SandboxConfig.timeout_seconds:
            object.__setattr__(self, "sandbox", replace(self.sandbox, timeout_seconds=timeout))
        memory = _env_number(ENV_MEMORY_LIMIT, int)
        if memory is not None and self.sandbox.memory_limit_mb == SandboxConfig.memory_limit_mb:
            object.__setattr__(self, "sandbox", replace(self.sandbox, memory_limit_mb=memory))
        if self.seed is None:
            object.__setattr__(self, "seed", _env_number(ENV_SEED, int))
