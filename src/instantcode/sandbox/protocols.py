"""Protocols for call evaluation."""

from types import CodeType
from typing import Protocol

from instantcode.sandbox.evaluator import EvaluationResult


class EvaluatorProtocol(Protocol):
    """Contract for evaluating one call against compiled module code."""

    def evaluate(self, code: CodeType, call_source: str) -> EvaluationResult:
        """Evaluate a call.

        Args:
            code: Compiled code of the whole module
            call_source: A call expression naming one of the module's callables

        Returns:
            The value or the failure; never raises for failures of user code
        """
        ...
