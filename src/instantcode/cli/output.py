"""CLI output in two modes.

People get Rich tables and plain messages; tools get one JSON document per
write. JSON mode is on when requested or whenever stdout is not a terminal.
"""

import json
import sys
from dataclasses import dataclass
from typing import Any, TypedDict

import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from instantcode.utils.logging_utils import get_logger

stdout_console = Console()
stderr_console = Console(stderr=True)

logger = get_logger("CLI")


def set_json_mode(value: bool) -> None:
    """Select JSON (True) or Rich (False) output."""
    set_json_mode.mode = value  # type: ignore


set_json_mode.mode = False  # type: ignore


def is_json_mode() -> bool:
    return getattr(set_json_mode, "mode", False) or not sys.stdout.isatty()


@dataclass
class Error:
    """A failure to report instead of a result."""

    message: str


class TableData(TypedDict):
    title: str
    columns: list[str]
    rows: list[list[str]]


Payload = str | Error | TableData | dict[str, Any]

_TABLE_KEYS = frozenset(TableData.__annotations__)


def _looks_like_table(data: dict[str, Any]) -> bool:
    return _TABLE_KEYS <= data.keys()


def _as_json(payload: Payload) -> dict[str, Any]:
    if isinstance(payload, str):
        return {"message": payload}
    if isinstance(payload, Error):
        return {"error": payload.message}
    if _looks_like_table(payload):
        return {"table": payload}
    return dict(payload)


def _rich_table(data: TableData) -> Table:
    table = Table(title=data["title"])
    for column in data["columns"]:
        table.add_column(column)
    for row in data["rows"]:
        # results are user data, never markup
        table.add_row(*(escape(cell) for cell in row))
    return table


def write(payload: Payload) -> None:
    """Print a message, an error, a table or a mapping in the current mode.

    Errors go to stderr in Rich mode. In JSON mode every payload is a single
    JSON line on stdout, and errors are also logged.
    """
    if is_json_mode():
        print(json.dumps(_as_json(payload)))
        if isinstance(payload, Error) and structlog.is_configured():
            logger.error(payload.message)
        return

    console = stdout_console
    if isinstance(payload, Error):
        stderr_console.print(f"[bold red]Error:[/bold red] {escape(payload.message)}", highlight=False)
    elif isinstance(payload, str):
        console.print(payload)
    elif _looks_like_table(payload):
        console.print(_rich_table(payload))  # type: ignore[arg-type]
    else:
        for key, value in payload.items():
            shown = json.dumps(value) if isinstance(value, (dict, list)) else value
            console.print(f"[bold]{key}:[/bold] {shown}")
