"""Core module exports."""

from bevyrly.core.errors import (
    BevyrlyError,
    ConfigError,
    ErrorCode,
    InternalError,
    ParseError,
)
from bevyrly.core.logging import configure_logging, get_log_file_path, get_logger
from bevyrly.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "BevyrlyError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "ParseError",
    # Logging
    "configure_logging",
    "get_log_file_path",
    "get_logger",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
