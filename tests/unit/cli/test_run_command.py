"""Tests for the ``run`` and ``signatures`` commands with a fake engine."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from instantcode.cli import cli as cli_module
from instantcode.cli.cli import app, build_config, set_engine_factory
from instantcode.config import InstantCodeConfig
from instantcode.engine import InstantCodeEngine
from instantcode.sandbox import EvaluationResult
from instantcode.synthesis import ScriptedRandomness

SOURCE = "def add(a: int, b: int) -> int:\n    return a + b\n\ndef k():\n    raise Exception('boom')\n"


class ScriptedEvaluator:
    def evaluate(self, code, call_source: str) -> EvaluationResult:
        if call_source.startswith("k("):
            return EvaluationResult.failure("Exception: boom", output="about to fail\n")
        return EvaluationResult.success("1")


@contextmanager
def fake_engine() -> Iterator[list[InstantCodeConfig]]:
    """Build engines with scripted randomness and evaluation, recording configs."""
    configs: list[InstantCodeConfig] = []

    def factory(config: InstantCodeConfig) -> InstantCodeEngine:
        configs.append(config)
        return InstantCodeEngine(config, randomness=ScriptedRandomness(integers=[-3, 4]), evaluator=ScriptedEvaluator())

    set_engine_factory(factory)
    try:
        yield configs
    finally:
        set_engine_factory(InstantCodeEngine)


@pytest.fixture
def source_file(write_source) -> Path:
    return write_source(SOURCE)


def test_run_json(source_file: Path) -> None:
    runner = CliRunner()
    with fake_engine():
        result = runner.invoke(app, ["--json", "run", str(source_file)])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["file"] == str(source_file)
    first, second = payload["annotations"]
    assert first["display_text"] == "add(-3, 4) => 1"
    assert (first["line"], first["column"]) == (1, 1)
    assert first["ok"] is True
    assert second["name"] == "k"
    assert second["line"] == 4
    assert second["error"] == "Exception: boom"
    assert second["failure_kind"] == "RuntimeThrow"
    assert second["output"] is None


def test_run_json_with_output(source_file: Path) -> None:
    runner = CliRunner()
    with fake_engine():
        result = runner.invoke(app, ["--json", "run", str(source_file), "--show-output"])
    payload = json.loads(result.stdout)
    assert payload["annotations"][1]["output"] == "about to fail\n"


def test_run_options_reach_the_config(source_file: Path) -> None:
    runner = CliRunner()
    with fake_engine() as configs:
        result = runner.invoke(
            app,
            [
                "--json",
                "run",
                str(source_file),
                "--seed",
                "7",
                "--timeout",
                "2",
                "--memory-limit",
                "64",
                "--allow-import",
                "math",
                "--allow-import",
                "json",
            ],
        )
    assert result.exit_code == 0, result.output
    config = configs[0]
    assert config.seed == 7
    assert config.sandbox.timeout_seconds == 2.0
    assert config.sandbox.memory_limit_mb == 64
    assert config.sandbox.allowed_imports == ("math", "json")


def test_run_table(source_file: Path) -> None:
    runner = CliRunner()
    with (
        fake_engine(),
        patch("instantcode.cli.cli.is_json_mode", return_value=False),
        patch("instantcode.cli.output.is_json_mode", return_value=False),
    ):
        result = runner.invoke(app, ["--no-json", "run", str(source_file)])
    assert result.exit_code == 0, result.output
    assert "4:1" in result.stdout
    assert "raises Exception: boom" in result.stdout


def test_missing_file_exits_with_error(temp_dir: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--json", "run", str(temp_dir / "missing.py")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_syntax_error_exits_with_error(write_source) -> None:
    path = write_source("def broken(:\n")
    runner = CliRunner()
    result = runner.invoke(app, ["--json", "run", str(path)])
    assert result.exit_code == 1
    assert "Failed to parse" in result.output


def test_invalid_option_exits_with_error(source_file: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--json", "run", str(source_file), "--timeout", "-1"])
    assert result.exit_code == 1
    assert "timeout_seconds" in result.output


def test_signatures(write_source) -> None:
    path = write_source(
        "from typing import TypedDict\n"
        "class Shape(TypedDict):\n"
        "    x: int\n"
        "def h(shape: Shape, *, tags: list[str]): ...\n"
    )
    runner = CliRunner()
    result = runner.invoke(app, ["--json", "signatures", str(path)])
    assert result.exit_code == 0, result.output
    table = json.loads(result.stdout)["table"]
    assert table["rows"] == [["4:1", "h", "shape: {x: number}, *, tags: list[string]"]]


def test_build_config_keeps_defaults() -> None:
    config = build_config(None, None, None, None)
    assert config.sandbox.timeout_seconds == 5.0
    assert config.sandbox.allowed_imports == ()
    assert config.seed is None


def test_engine_factory_default() -> None:
    assert cli_module._engine_factory is InstantCodeEngine
