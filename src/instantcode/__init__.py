"""InstantCode

Runs each top-level function of a Python file with arguments synthesized from
its parameter types, inside an isolated interpreter, and reports the call next
to what it returned or raised.
"""

from .config import InstantCodeConfig, SandboxConfig, SynthesisConfig
from .engine import Annotation, InstantCodeEngine
from .sandbox import EvaluationResult, FailureKind

__all__ = [
    "Annotation",
    "EvaluationResult",
    "FailureKind",
    "InstantCodeConfig",
    "InstantCodeEngine",
    "SandboxConfig",
    "SynthesisConfig",
]
