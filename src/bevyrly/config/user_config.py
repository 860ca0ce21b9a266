"""Minimal user-facing configuration.

This module defines only the config fields that users should care about.
Everything else uses opinionated defaults.

User config is stored in .bevyrly/config.yaml
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from bevyrly.core.errors import ConfigError

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_SOURCE_FOLDER = "src"
DEFAULT_MAX_FILE_SIZE_MB = 10
DEFAULT_LOG_LEVEL: LogLevel = "WARNING"


class UserConfig(BaseModel):
    """User-facing configuration options."""

    source_folder: str = Field(
        default=DEFAULT_SOURCE_FOLDER,
        description="Folder cataloged by bevyrly, relative to the repository root.",
    )
    max_file_size_mb: int = Field(
        default=DEFAULT_MAX_FILE_SIZE_MB,
        description="Skip files larger than this (MB) during indexing.",
    )
    log_level: LogLevel = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Log level. DEBUG is very verbose.",
    )


def write_user_config(path: Path, config: UserConfig | None = None) -> None:
    """Write user config file with helpful comments.

    Args:
        path: Path to write config.yaml
        config: Config values (uses defaults if None)
    """
    cfg = config or UserConfig()

    lines = [
        "# bevyrly configuration",
        "",
        "# Folder that is cataloged for systems, relative to the repository root.",
        f"source_folder: {cfg.source_folder}",
        "",
    ]

    # Non-default values are written active, defaults as comments
    lines.append("# Maximum file size to index (MB). Larger files are skipped.")
    if cfg.max_file_size_mb != DEFAULT_MAX_FILE_SIZE_MB:
        lines.append(f"max_file_size_mb: {cfg.max_file_size_mb}")
    else:
        lines.append(f"# max_file_size_mb: {cfg.max_file_size_mb}")
    lines.append("")

    lines.append("# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL")
    if cfg.log_level != DEFAULT_LOG_LEVEL:
        lines.append(f"log_level: {cfg.log_level}")
    else:
        lines.append(f"# log_level: {cfg.log_level}")
    lines.append("")

    path.write_text("\n".join(lines))


def load_user_config(path: Path) -> UserConfig:
    """Load user config from YAML file.

    Raises:
        ConfigError: On invalid YAML or invalid values.
    """
    if not path.exists():
        return UserConfig()
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "expected a mapping at top level")
    try:
        return UserConfig(**data)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
