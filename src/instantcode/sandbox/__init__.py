"""Isolated evaluation of synthesized calls."""

from .evaluator import EvaluationResult, FailureKind, SandboxEvaluator, child_source
from .protocol import SandboxRequest, SandboxResponse
from .protocols import EvaluatorProtocol

__all__ = [
    "EvaluationResult",
    "EvaluatorProtocol",
    "FailureKind",
    "SandboxEvaluator",
    "SandboxRequest",
    "SandboxResponse",
    "child_source",
]
