#!/usr/bin/env python3
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from pydantic import BaseModel

from instantcode.callsites.extractor import CallSiteExtractor, Parameter
from instantcode.cli.output import Error, TableData, is_json_mode, set_json_mode, write
from instantcode.config import InstantCodeConfig, SandboxConfig, SynthesisConfig
from instantcode.descriptors.context import build_context
from instantcode.descriptors.models import format_descriptor
from instantcode.descriptors.resolver import TypeResolver
from instantcode.engine import Annotation, InstantCodeEngine
from instantcode.frontend.parser import parse_source, read_source_file
from instantcode.frontend.positions import LineIndex
from instantcode.utils import exceptions
from instantcode.utils.logging_utils import get_logger, setup_logging

logger = get_logger("CLI")


class LogLevel(str, Enum):
    """Log levels for the CLI."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


app = typer.Typer(
    name="instantcode",
    help="Run every function in a Python file with synthesized arguments",
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)


class GlobalState:
    """Global state for the CLI."""

    json_mode: bool = False
    log_file: str | None = None


state = GlobalState()


LOG_LEVEL_OPTION = typer.Option(
    LogLevel.WARNING,
    "--log-level",
    "-l",
    help="Set the logging level",
)

JSON_OUTPUT_OPTION = typer.Option(
    None,
    "--json/--no-json",
    help="Output in JSON format",
)

LOG_FILE_OPTION = typer.Option(
    None,
    "--log-file",
    help="Write logs to the specified file instead of stderr",
)

DEBUG_OPTION = typer.Option(
    False,
    "--debug",
    help="Enable debug logging for the instantcode package",
    is_flag=True,
)

SOURCE_ARG = typer.Argument(
    ...,
    help="Python source file to run",
    dir_okay=False,
    file_okay=True,
)

SEED_OPTION = typer.Option(
    None,
    "--seed",
    help="Seed for argument synthesis; runs differ without one",
)

TIMEOUT_OPTION = typer.Option(
    None,
    "--timeout",
    "-t",
    help="Seconds each call may run before it is stopped (default 5)",
)

MEMORY_LIMIT_OPTION = typer.Option(
    None,
    "--memory-limit",
    help="Address-space limit for each call in MiB (default 512)",
)

ALLOW_IMPORT_OPTION = typer.Option(
    None,
    "--allow-import",
    "-a",
    help="Module the analysed code may really import; repeatable",
)

SHOW_OUTPUT_OPTION = typer.Option(
    False,
    "--show-output",
    help="Include what each call printed",
    is_flag=True,
)


class AnnotationPayload(BaseModel):
    """JSON form of one annotation."""

    name: str
    line: int
    column: int
    anchor_position: int
    display_text: str
    call: str
    ok: bool
    value: str | None = None
    error: str | None = None
    failure_kind: str | None = None
    output: str | None = None


class RunPayload(BaseModel):
    file: str
    annotations: list[AnnotationPayload]


def configure_logging(log_level: LogLevel, log_file: str | None, debug: bool) -> None:
    """Configure logging based on CLI options."""
    level = logging.DEBUG if debug else getattr(logging, log_level.value)
    setup_logging(log_file=log_file, log_level=level, json_logs=False)


@app.callback(rich_help_panel="Global Options")
def main(
    log_level: LogLevel = LOG_LEVEL_OPTION,
    log_file: str | None = LOG_FILE_OPTION,
    debug: bool = DEBUG_OPTION,
    json_output: bool = JSON_OUTPUT_OPTION,
) -> None:
    """InstantCode CLI.

    Calls each top-level function of a Python file with arguments built from
    its type hints and shows what came back.
    """
    load_dotenv()

    json_mode = json_output if json_output is not None else not sys.stdout.isatty()
    set_json_mode(json_mode)
    state.json_mode = json_mode
    state.log_file = log_file

    configure_logging(log_level, log_file, debug)


def build_config(
    seed: int | None,
    timeout: float | None,
    memory_limit: int | None,
    allow_import: list[str] | None,
) -> InstantCodeConfig:
    """Engine configuration from CLI options; unset options keep defaults."""
    defaults = SandboxConfig()
    sandbox = SandboxConfig(
        timeout_seconds=timeout if timeout is not None else defaults.timeout_seconds,
        memory_limit_mb=memory_limit if memory_limit is not None else defaults.memory_limit_mb,
        allowed_imports=tuple(allow_import or ()),
    )
    return InstantCodeConfig(synthesis=SynthesisConfig(), sandbox=sandbox, seed=seed)


_engine_factory: Any = InstantCodeEngine


def set_engine_factory(factory: Any) -> None:
    """Set the callable that builds engines from a config (used for testing)."""
    global _engine_factory  # noqa: PLW0603
    _engine_factory = factory


def create_engine(config: InstantCodeConfig) -> InstantCodeEngine:
    """Create an engine using the configured factory."""
    return _engine_factory(config)


def _payload(annotation: Annotation, lines: LineIndex, show_output: bool) -> AnnotationPayload:
    line, column = lines.position(annotation.anchor_position)
    result = annotation.result
    return AnnotationPayload(
        name=annotation.name,
        line=line,
        column=column,
        anchor_position=annotation.anchor_position,
        display_text=annotation.display_text,
        call=annotation.call_source,
        ok=result.ok,
        value=result.value,
        error=result.error,
        failure_kind=result.kind.value if result.kind else None,
        output=result.output if show_output else None,
    )


def _format_parameters(parameters: tuple[Parameter, ...]) -> str:
    parts = []
    for index, parameter in enumerate(parameters):
        if parameter.keyword_only and (index == 0 or not parameters[index - 1].keyword_only):
            parts.append("*")
        parts.append(f"{parameter.name}: {format_descriptor(parameter.descriptor)}")
    return ", ".join(parts)


def _fail(error: exceptions.InstantCodeError) -> None:
    write(Error(str(error)))
    raise typer.Exit(1)


@app.command()
def run(
    source: Path = SOURCE_ARG,
    seed: int | None = SEED_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
    memory_limit: int | None = MEMORY_LIMIT_OPTION,
    allow_import: list[str] | None = ALLOW_IMPORT_OPTION,
    show_output: bool = SHOW_OUTPUT_OPTION,
) -> None:
    """Call every top-level function in SOURCE and show the results."""
    try:
        config = build_config(seed, timeout, memory_limit, allow_import)
        text = read_source_file(source)
        module = parse_source(text, str(source))
    except exceptions.InstantCodeError as exc:
        _fail(exc)
        return

    engine = create_engine(config)
    annotations = engine.run(module)
    logger.info("Ran file", file=str(source), annotations=len(annotations))
    payloads = [_payload(annotation, module.lines, show_output) for annotation in annotations]

    if is_json_mode():
        write(RunPayload(file=str(source), annotations=payloads).model_dump())
        return

    if not payloads:
        write(f"No callable top-level functions in {source}")
        return

    rows = []
    for payload in payloads:
        row = [f"{payload.line}:{payload.column}", payload.display_text]
        if show_output:
            row.append((payload.output or "").rstrip())
        rows.append(row)
    columns = ["Location", "Result"] + (["Output"] if show_output else [])
    write(TableData(title=str(source), columns=columns, rows=rows))


@app.command()
def signatures(source: Path = SOURCE_ARG) -> None:
    """Show the parameter types InstantCode resolves for SOURCE."""
    try:
        module = parse_source(read_source_file(source), str(source))
    except exceptions.InstantCodeError as exc:
        _fail(exc)
        return

    resolver = TypeResolver(build_context(module.tree))
    call_sites = CallSiteExtractor(resolver, module.lines).extract(module.tree)
    rows = []
    for call_site in call_sites:
        line, column = module.lines.position(call_site.anchor_position)
        rows.append([f"{line}:{column}", call_site.name, _format_parameters(call_site.parameters)])
    write(TableData(title=str(source), columns=["Location", "Name", "Parameters"], rows=rows))


def run_cli() -> None:
    app()


if __name__ == "__main__":
    run_cli()
