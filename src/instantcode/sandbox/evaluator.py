"""Sandboxed evaluation of one call against a compiled module.

Every evaluation runs in a new isolated interpreter process, so no state
survives between calls. Failures of any kind come back as a failed
``EvaluationResult``; nothing raised by user code reaches the caller.
"""

from __future__ import annotations

import base64
import marshal
import math
import os
import subprocess
import tempfile
import time
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from importlib import resources
from types import CodeType

from pydantic import ValidationError

from instantcode.config.components import SandboxConfig
from instantcode.sandbox.protocol import SandboxRequest, SandboxResponse
from instantcode.utils.logging_utils import get_logger

logger = get_logger("SANDBOX")

_STDERR_TAIL_LINES = 3


class FailureKind(str, Enum):
    """Why an evaluation failed."""

    COMPILE_TIME_UNREACHABLE = "CompileTimeUnreachable"
    RUNTIME_THROW = "RuntimeThrow"


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of one sandboxed call; exactly one of ``value``/``error`` is set.

    Attributes:
        value: JSON text of the returned value (``repr`` text if JSON could not
            express it)
        error: ``ExceptionType: message`` for a failed call
        kind: Failure classification, ``None`` on success
        output: Text the call wrote to stdout/stderr
        duration: Wall-clock seconds spent, including interpreter start-up
    """

    value: str | None = None
    error: str | None = None
    kind: FailureKind | None = None
    output: str = ""
    duration: float = 0.0

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("an evaluation result carries either a value or an error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: str, *, output: str = "", duration: float = 0.0) -> EvaluationResult:
        return cls(value=value, output=output, duration=duration)

    @classmethod
    def failure(
        cls,
        error: str,
        kind: FailureKind = FailureKind.RUNTIME_THROW,
        *,
        output: str = "",
        duration: float = 0.0,
    ) -> EvaluationResult:
        return cls(error=error, kind=kind, output=output, duration=duration)

    def render(self) -> str:
        """Text shown after the call expression."""
        if self.ok:
            return str(self.value)
        return f"raises {self.error}"


@lru_cache(maxsize=1)
def child_source() -> str:
    """Source of the child runner script."""
    return resources.files("instantcode.sandbox").joinpath("child.py").read_text(encoding="utf-8")


def _child_environment() -> dict[str, str]:
    env = {"PYTHONIOENCODING": "utf-8", "PYTHONDONTWRITEBYTECODE": "1"}
    # Windows interpreters cannot start without SYSTEMROOT
    if os.name == "nt" and "SYSTEMROOT" in os.environ:
        env["SYSTEMROOT"] = os.environ["SYSTEMROOT"]
    return env


def _stderr_tail(stderr: str) -> str:
    lines = [line for line in stderr.strip().splitlines() if line.strip()]
    return " | ".join(lines[-_STDERR_TAIL_LINES:])


class SandboxEvaluator:
    """Evaluates call expressions in fresh, isolated child interpreters."""

    def __init__(self, config: SandboxConfig | None = None) -> None:
        self.config = config or SandboxConfig()

    def build_request(self, code: CodeType, call_source: str) -> SandboxRequest:
        timeout = self.config.timeout_seconds
        return SandboxRequest(
            code=base64.b64encode(marshal.dumps(code)).decode("ascii"),
            call=call_source,
            allowed_imports=list(self.config.allowed_imports),
            memory_limit_mb=self.config.memory_limit_mb,
            # CPU limit backs up the wall-clock timeout if the parent is stalled
            cpu_seconds=math.ceil(timeout) + 1 if timeout is not None else None,
            max_output_chars=self.config.max_output_chars,
        )

    def evaluate(self, code: CodeType, call_source: str) -> EvaluationResult:
        """Run ``call_source`` after executing ``code`` in a new sandbox."""
        started = time.perf_counter()
        try:
            request = self.build_request(code, call_source)
        except ValueError as exc:
            # marshal refuses code objects holding unmarshallable constants
            return EvaluationResult.failure(f"SandboxError: {exc}")

        timeout = self.config.timeout_seconds
        with tempfile.TemporaryDirectory(prefix="instantcode-") as workdir:
            try:
                completed = subprocess.run(
                    [self.config.python_executable, "-I", "-c", child_source()],
                    input=request.model_dump_json(),
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=timeout,
                    cwd=workdir,
                    env=_child_environment(),
                )
            except subprocess.TimeoutExpired:
                duration = time.perf_counter() - started
                logger.warning("Sandbox evaluation timed out", call=call_source, timeout=timeout)
                return EvaluationResult.failure(f"TimeoutError: evaluation exceeded {timeout:g}s", duration=duration)
            except OSError as exc:
                logger.error("Could not start sandbox interpreter", error=str(exc))
                return EvaluationResult.failure(
                    f"SandboxError: could not start {self.config.python_executable}: {exc}",
                    duration=time.perf_counter() - started,
                )

        duration = time.perf_counter() - started
        try:
            response = SandboxResponse.model_validate_json(completed.stdout)
        except ValidationError:
            tail = _stderr_tail(completed.stderr)
            logger.warning(
                "Sandbox interpreter exited without a response",
                returncode=completed.returncode,
                stderr=tail,
            )
            message = f"SandboxError: interpreter exited with code {completed.returncode}"
            if tail:
                message += f": {tail}"
            return EvaluationResult.failure(message, duration=duration)

        logger.debug("Sandbox evaluation finished", call=call_source, ok=response.ok, duration=round(duration, 3))
        return self._to_result(response, duration)

    @staticmethod
    def _to_result(response: SandboxResponse, duration: float) -> EvaluationResult:
        if response.ok:
            return EvaluationResult.success(response.value or "null", output=response.output, duration=duration)
        kind = FailureKind.COMPILE_TIME_UNREACHABLE if response.kind == "compile" else FailureKind.RUNTIME_THROW
        return EvaluationResult.failure(response.error or "unknown error", kind, output=response.output, duration=duration)
