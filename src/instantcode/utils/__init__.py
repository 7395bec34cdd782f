"""Utilities module for the InstantCode system.

This module contains shared utility components for logging and errors.
"""

from instantcode.utils import exceptions, logging_utils

__all__ = [
    "exceptions",
    "logging_utils",
]
