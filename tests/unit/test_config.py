"""Tests for the configuration classes."""

import os
import sys
from unittest.mock import patch

import pytest

from instantcode.config import InstantCodeConfig, SandboxConfig, SynthesisConfig
from instantcode.utils.exceptions import InvalidConfigurationError


@patch.dict(os.environ, {}, clear=True)
def test_defaults() -> None:
    """Verify the default limits and ranges."""
    config = InstantCodeConfig()

    assert config.synthesis.integer_range == (-5, 5)
    assert config.synthesis.count_range == (0, 5)
    assert config.synthesis.max_depth == 6
    assert config.sandbox.timeout_seconds == 5.0
    assert config.sandbox.memory_limit_mb == 512
    assert config.sandbox.allowed_imports == ()
    assert config.sandbox.python_executable == sys.executable
    assert config.seed is None


@patch.dict(
    os.environ,
    {"INSTANTCODE_TIMEOUT": "1.5", "INSTANTCODE_MEMORY_LIMIT_MB": "256", "INSTANTCODE_SEED": "99"},
    clear=True,
)
def test_environment_overrides_defaults() -> None:
    config = InstantCodeConfig()
    assert config.sandbox.timeout_seconds == 1.5
    assert config.sandbox.memory_limit_mb == 256
    assert config.seed == 99


@patch.dict(os.environ, {"INSTANTCODE_TIMEOUT": "1.5", "INSTANTCODE_SEED": "99"}, clear=True)
def test_explicit_values_beat_environment() -> None:
    config = InstantCodeConfig(sandbox=SandboxConfig(timeout_seconds=9.0), seed=1)
    assert config.sandbox.timeout_seconds == 9.0
    assert config.seed == 1


@patch.dict(os.environ, {"INSTANTCODE_TIMEOUT": "soon"}, clear=True)
def test_bad_environment_value() -> None:
    with pytest.raises(InvalidConfigurationError) as exc_info:
        InstantCodeConfig()
    assert exc_info.value.config_key == "INSTANTCODE_TIMEOUT"


@patch.dict(os.environ, {"INSTANTCODE_SEED": ""}, clear=True)
def test_blank_environment_value_is_ignored() -> None:
    assert InstantCodeConfig().seed is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"integer_range": (3, 1)},
        {"count_range": (-1, 2)},
        {"max_depth": -1},
    ],
)
def test_invalid_synthesis_config(kwargs: dict) -> None:
    with pytest.raises(InvalidConfigurationError):
        SynthesisConfig(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeout_seconds": 0},
        {"memory_limit_mb": -5},
        {"max_output_chars": -1},
    ],
)
def test_invalid_sandbox_config(kwargs: dict) -> None:
    with pytest.raises(InvalidConfigurationError):
        SandboxConfig(**kwargs)


def test_limits_can_be_disabled() -> None:
    config = SandboxConfig(timeout_seconds=None, memory_limit_mb=None)
    assert config.timeout_seconds is None
    assert config.memory_limit_mb is None


def test_configs_are_immutable() -> None:
    config = SynthesisConfig()
    with pytest.raises(AttributeError):
        config.max_depth = 2  # type: ignore[misc]
