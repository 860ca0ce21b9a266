"""Config module exports."""

from bevyrly.config.loader import BevyrlySettings, load_config
from bevyrly.config.models import (
    BevyrlyConfig,
    DisplayConfig,
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "BevyrlyConfig",
    "BevyrlySettings",
    "DisplayConfig",
    "IndexConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
