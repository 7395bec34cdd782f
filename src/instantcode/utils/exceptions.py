"""Errors raised by InstantCode.

Two things can stop a run before any function is called: bad configuration
and a source file that cannot be read or compiled. Everything after that
point (type resolution, value synthesis, evaluation) reports problems inside
the annotation text instead of raising.
"""

from pathlib import Path
from typing import Any


class InstantCodeError(Exception):
    """Root of the package's exceptions.

    ``error_code`` is a stable machine-readable tag and ``context`` holds the
    values that produced the error, both suitable for JSON output.
    """

    def __init__(self, message: str, *, error_code: str | None = None, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}


class ConfigurationError(InstantCodeError):
    pass


class InvalidConfigurationError(ConfigurationError):
    """A config field (or its environment override) is out of range."""

    def __init__(self, config_key: str, value: Any, expected: str):
        self.config_key = config_key
        self.value = value
        self.expected = expected
        details = {"config_key": config_key, "value": value, "expected": expected}
        super().__init__(
            f"Invalid configuration for '{config_key}': got {value}, expected {expected}",
            error_code="INVALID_CONFIG",
            context=details,
        )


class SourceError(InstantCodeError):
    """The file handed to the engine is unusable."""


class SourceParseError(SourceError):
    """Source text that ``ast.parse`` or ``compile`` rejects.

    Args:
        filename: Name shown in the message
        message: Compiler message, if any
        line: 1-based line of the problem, if known
        original_error: Exception raised by the compiler
    """

    def __init__(
        self,
        filename: str,
        message: str = "",
        *,
        line: int | None = None,
        original_error: Exception | None = None,
    ):
        self.filename = filename
        self.line = line
        self.original_error = original_error

        where = f" at line {line}" if line is not None else ""
        why = f": {message}" if message else ""
        super().__init__(
            f"Failed to parse {filename}{where}{why}",
            error_code="SOURCE_PARSE_ERROR",
            context={
                "filename": filename,
                "line": line,
                "original_error": None if original_error is None else str(original_error),
            },
        )


class UnsupportedFileError(SourceError):
    """A path that is not a Python source file."""

    def __init__(self, file_path: str | Path, file_type: str | None = None):
        self.file_path = Path(file_path)
        self.file_type = file_type
        suffix = f" (type: {file_type})" if file_type else ""
        super().__init__(
            f"Unsupported file: {self.file_path}{suffix}",
            error_code="UNSUPPORTED_FILE",
            context={"file_path": str(self.file_path), "file_type": file_type},
        )


class SourceFileNotFoundError(SourceError):
    def __init__(self, file_path: str | Path):
        self.file_path = Path(file_path)
        super().__init__(
            f"File not found: {self.file_path}",
            error_code="FILE_NOT_FOUND",
            context={"file_path": str(self.file_path)},
        )
