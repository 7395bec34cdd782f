"""Tests for logging setup and the subsystem-tagging logger."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import structlog

from instantcode.utils import logging_utils
from instantcode.utils.logging_utils import InstantCodeLogger, get_logger, setup_logging


def test_logger_tags_subsystem() -> None:
    base = MagicMock()
    adapter = InstantCodeLogger(base)
    adapter.info("hello", subsystem="SANDBOX", call="f()")

    level, message = base.log.call_args.args
    kwargs = base.log.call_args.kwargs
    assert (level, message) == (logging.INFO, "hello")
    assert kwargs["subsystem"] == "SANDBOX"
    assert kwargs["call"] == "f()"


def test_default_subsystem_is_engine() -> None:
    base = MagicMock()
    InstantCodeLogger(base).warning("careful")
    assert base.log.call_args.kwargs["subsystem"] == "ENGINE"


def test_exception_adds_exc_info() -> None:
    base = MagicMock()
    InstantCodeLogger(base).exception("failed")
    assert base.log.call_args.args[0] == logging.ERROR
    assert base.log.call_args.kwargs["exc_info"] is True


def test_get_logger_is_shared() -> None:
    assert get_logger() is logging_utils.logger


def test_tidy_event() -> None:
    event = {"level": "info", "subsystem": "CLI", "logger": "instantcode", "filename": "a.py", "lineno": 3, "stacklevel": 2}
    assert logging_utils.tidy_event(None, "", event) == {"level": "INFO", "logger_name": "CLI", "location": "(a.py:3)"}


def test_tidy_event_falls_back_to_logger_name() -> None:
    event = {"event": "x", "logger": "instantcode.sandbox"}
    assert logging_utils.tidy_event(None, "", event) == {"event": "x", "logger_name": "instantcode.sandbox"}


def test_get_logger_with_subsystem() -> None:
    named = get_logger("SANDBOX")
    assert named is not logging_utils.logger
    assert named._subsystem == "SANDBOX"
    assert named._base_logger is logging_utils.logger._base_logger


def test_setup_logging_to_file(temp_dir: Path) -> None:
    log_file = temp_dir / "instantcode.log"
    try:
        setup_logging(log_file=str(log_file), log_level=logging.DEBUG, json_logs=True)
        structlog.get_logger("instantcode.test").info("written", subsystem="TEST")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "written" in log_file.read_text()
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers = []
        structlog.reset_defaults()
