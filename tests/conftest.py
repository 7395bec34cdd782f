"""Pytest configuration for the InstantCode tests.

This module provides common fixtures and configuration for the InstantCode tests.
"""

import os
import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from pytest_socket import disable_socket, enable_socket

from instantcode.config import InstantCodeConfig, SandboxConfig, SynthesisConfig
from instantcode.sandbox.evaluator import EvaluationResult
from instantcode.synthesis.fakes import ScriptedRandomness

ENV_VARS = ("INSTANTCODE_TIMEOUT", "INSTANTCODE_MEMORY_LIMIT_MB", "INSTANTCODE_SEED")


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (spawns sandbox interpreters)"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end test"
    )
    config.addinivalue_line(
        "markers", "check: mark test as part of the quick checks (unit + integration)"
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Reorder test collection and add markers based on test type.

    Fast unit tests run first, then integration tests, then end-to-end tests.
    """
    unit_tests = []
    integration_tests = []
    e2e_tests = []
    other_tests = []

    for item in items:
        test_path = str(item.path)
        if "/unit/" in test_path:
            unit_tests.append(item)
            item.add_marker(pytest.mark.unit)
            item.add_marker(pytest.mark.check)
        elif "/integration/" in test_path:
            integration_tests.append(item)
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.check)
        elif "/e2e/" in test_path:
            e2e_tests.append(item)
            item.add_marker(pytest.mark.e2e)
        else:
            other_tests.append(item)

    items[:] = unit_tests + integration_tests + e2e_tests + other_tests


def pytest_runtest_setup(item: pytest.Item) -> None:
    """Set marker-based timeouts for tests.

    Sets default timeouts based on test location:
    - unit: 1s per test
    - integration: 20s per test (each call starts an interpreter)
    - e2e: 60s per test

    In CI environments, timeouts are multiplied by CI_TIMEOUT_MULTIPLIER for slower resources.
    Individual @pytest.mark.timeout() decorators override these defaults.
    """
    if item.get_closest_marker("timeout"):
        return

    is_ci = any(
        os.environ.get(var)
        for var in [
            "CI",
            "GITHUB_ACTIONS",
            "TRAVIS",
            "CIRCLECI",
            "JENKINS_URL",
            "BUILDKITE",
            "TF_BUILD",
        ]
    )
    ci_multiplier = (
        float(os.environ.get("CI_TIMEOUT_MULTIPLIER", "5.0")) if is_ci else 1.0
    )

    test_path = str(item.path)
    if "/unit/" in test_path:
        item.add_marker(pytest.mark.timeout(1.0 * ci_multiplier))
    elif "/integration/" in test_path:
        item.add_marker(pytest.mark.timeout(20 * ci_multiplier))
    elif "/e2e/" in test_path:
        item.add_marker(pytest.mark.timeout(60 * ci_multiplier))


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep INSTANTCODE_* variables from the developer's shell out of tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def disable_network(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Disable network access for tests unless marked as integration or e2e."""
    if "integration" not in request.keywords and "e2e" not in request.keywords:
        disable_socket(allow_unix_socket=True)
        yield
        enable_socket()
    else:
        yield


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to the temporary directory

    """
    temp_dir = Path(tempfile.mkdtemp())
    try:
        yield temp_dir
    finally:
        shutil.rmtree(temp_dir)


@pytest.fixture
def write_source(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write Python source into the temporary directory and return its path."""

    def _write(text: str, name: str = "sample.py") -> Path:
        path = temp_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def scripted_randomness() -> ScriptedRandomness:
    """Randomness that answers with defaults until a test scripts it."""
    return ScriptedRandomness()


@pytest.fixture
def default_config() -> InstantCodeConfig:
    """Create a default configuration for testing.

    Returns:
        Default InstantCodeConfig with a fixed seed

    """
    return InstantCodeConfig(
        synthesis=SynthesisConfig(),
        sandbox=SandboxConfig(timeout_seconds=10.0),
        seed=1234,
    )


class RecordingEvaluator:
    """Evaluator that records calls and answers from a script instead of a sandbox."""

    def __init__(self, results: dict[str, EvaluationResult] | None = None) -> None:
        self.results = results or {}
        self.calls: list[str] = []

    def evaluate(self, code: object, call_source: str) -> EvaluationResult:
        self.calls.append(call_source)
        name = call_source.split("(", 1)[0]
        return self.results.get(name, EvaluationResult.success("null"))


@pytest.fixture
def recording_evaluator() -> RecordingEvaluator:
    return RecordingEvaluator()
