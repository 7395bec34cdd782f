"""Structured logging for InstantCode.

Records go through structlog into the standard ``logging`` machinery. A
console handler prints aligned columns (time, level, subsystem, event,
source location, extra keys); a file handler, or JSON mode, prints one JSON
object per record. Every record carries a subsystem tag such as ``ENGINE``,
``SANDBOX`` or ``CLI``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import structlog
from structlog.dev import Column
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

logging.getLogger().addHandler(logging.NullHandler())

# Standard library loggers that get chatty while asyncio callees run
QUIET_LOGGERS = ("asyncio", "concurrent")

DEFAULT_SUBSYSTEM = "ENGINE"

_INTERNAL_KEYS = ("stacklevel", "extra")

_RESET = "\033[0m"
_DIM = "\033[90m"
_BLUE = "\033[94m"
_LEVEL_COLORS: dict[str, str] = {
    "CRITICAL": "\033[1;31m",
    "ERROR": "\033[31m",
    "WARNING": "\033[33m",
    "INFO": "\033[36m",
    "DEBUG": "\033[32m",
}


class InstantCodeLogger:
    """Adapter over a structlog logger that adds a ``subsystem`` key.

    Keyword arguments other than ``subsystem`` become structured fields of
    the record.
    """

    def __init__(self, base_logger: Any, subsystem: str = DEFAULT_SUBSYSTEM) -> None:
        self._base_logger = base_logger
        self._subsystem = subsystem

    def for_subsystem(self, subsystem: str) -> InstantCodeLogger:
        """Adapter sharing the same base logger with another default tag."""
        return InstantCodeLogger(self._base_logger, subsystem)

    def log(self, level: int, msg: str, *args: Any, subsystem: str | None = None, **fields: Any) -> None:
        depth = fields.pop("stacklevel", 1)
        self._base_logger.log(
            level,
            msg,
            *args,
            subsystem=subsystem or self._subsystem,
            stacklevel=depth + 1,
            **fields,
        )

    def debug(self, msg: str, *args: Any, **fields: Any) -> None:
        self.log(logging.DEBUG, msg, *args, stacklevel=2, **fields)

    def info(self, msg: str, *args: Any, **fields: Any) -> None:
        self.log(logging.INFO, msg, *args, stacklevel=2, **fields)

    def warning(self, msg: str, *args: Any, **fields: Any) -> None:
        self.log(logging.WARNING, msg, *args, stacklevel=2, **fields)

    def error(self, msg: str, *args: Any, **fields: Any) -> None:
        self.log(logging.ERROR, msg, *args, stacklevel=2, **fields)

    def exception(self, msg: str, *args: Any, **fields: Any) -> None:
        """Log at ``ERROR`` with the active exception attached."""
        fields.setdefault("exc_info", True)
        self.log(logging.ERROR, msg, *args, stacklevel=2, **fields)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._base_logger, name)


logger = InstantCodeLogger(structlog.get_logger("instantcode"))


def tidy_event(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Shape a record for rendering.

    Upper-cases the level, drops bookkeeping keys, shows the subsystem in
    place of the dotted logger name and folds filename and line number into
    one ``location`` field.
    """
    if event_dict.get("level") is not None:
        event_dict["level"] = str(event_dict["level"]).upper()
    for key in _INTERNAL_KEYS:
        event_dict.pop(key, None)

    subsystem = event_dict.pop("subsystem", None)
    dotted = event_dict.pop("logger", None)
    if subsystem or dotted:
        event_dict["logger_name"] = subsystem or dotted

    filename = event_dict.pop("filename", None)
    lineno = event_dict.pop("lineno", None)
    if filename and lineno:
        event_dict["location"] = f"({filename}:{lineno})"
    return event_dict


def _painted(color: str) -> Callable[[str, Any], str]:
    def render(_key: str, value: Any) -> str:
        return f"{color}{value}{_RESET}" if value else ""

    return render


def _level_column(_key: str, value: Any) -> str:
    if not value:
        return ""
    color = _LEVEL_COLORS.get(str(value))
    return f"[{color}{value}{_RESET}]" if color else f"[{value}]"


def _console_columns() -> list[Column]:
    return [
        Column("timestamp", _painted(_DIM)),
        Column("level", _level_column),
        Column("logger_name", lambda _key, value: f"[{_BLUE}{value}{_RESET}]" if value else ""),
        Column("event", lambda _key, value: "" if value is None else str(value)),
        Column("location", _painted(_DIM)),
        Column(
            "",
            structlog.dev.KeyValueColumnFormatter(key_style=None, value_style="", reset_style="", value_repr=str),
        ),
    ]


def _handler(log_file: str | None, renderer: Any, pre_chain: list[Any]) -> logging.Handler:
    handler: logging.Handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    return handler


def setup_logging(
    log_file: str | None = None,
    log_level: int = logging.INFO,
    json_logs: bool = False,
) -> None:
    """Route structlog and standard logging to one handler.

    Args:
        log_file: Write records to this file instead of ``stderr``
        log_level: Minimum level that is emitted
        json_logs: Render JSON instead of console columns
    """
    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = []
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    shared: list[Any] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        CallsiteParameterAdder(
            [CallsiteParameter.FILENAME, CallsiteParameter.LINENO],
            additional_ignores=[__name__],
        ),
        tidy_event,
    ]

    if json_logs or log_file:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, sort_keys=False, columns=_console_columns())
    root.addHandler(_handler(log_file, renderer, shared))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )


def get_logger(subsystem: str | None = None) -> InstantCodeLogger:
    """The package logger, optionally with a different default subsystem."""
    return logger.for_subsystem(subsystem) if subsystem else logger
