"""Configuration package for InstantCode."""

from .components import SandboxConfig, SynthesisConfig

# Imported after components to avoid a circular import
from .main import InstantCodeConfig

__all__ = [
    "InstantCodeConfig",
    "SandboxConfig",
    "SynthesisConfig",
]
