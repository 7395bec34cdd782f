"""Command line front end: the ``run`` and ``signatures`` commands and their output."""

from instantcode.cli.cli import app, run_cli
from instantcode.cli.output import Error, TableData, set_json_mode, write

__all__ = ["Error", "TableData", "app", "run_cli", "set_json_mode", "write"]
