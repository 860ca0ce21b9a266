"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (BEVYRLY__SECTION__KEY)
3. Repo YAML (.bevyrly/config.yaml)
4. Global YAML (~/.config/bevyrly/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    BEVYRLY__<SECTION>__<KEY>=<VALUE>

Examples:
    BEVYRLY__LOGGING__LEVEL=DEBUG
    BEVYRLY__INDEX__SOURCE_FOLDER=crates/game/src
    BEVYRLY__DISPLAY__THEME=ansi_dark
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        BEVYRLY__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO reports every rebuild, DEBUG every skipped type.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Index configuration.

    Env vars:
        BEVYRLY__INDEX__SOURCE_FOLDER: Folder under each root that is cataloged
        BEVYRLY__INDEX__RECURSIVE: Descend into sub-folders of the source folder
        BEVYRLY__INDEX__MAX_FILE_SIZE_MB: Skip files larger than this
    """

    source_folder: str = Field(
        default="src",
        description="Folder, relative to each source root, that is cataloged.",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".rs"],
        description="File extensions handed to the Rust parser.",
    )
    recursive: bool = Field(
        default=True,
        description="Descend into sub-folders of the source folder. "
        "When false only files directly inside it are read.",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Skip files larger than this (MB).",
    )
    excluded_dirs: list[str] = Field(
        default_factory=lambda: ["target", ".git", ".bevyrly", "node_modules"],
        description="Directory names never descended into.",
    )

    @field_validator("source_folder")
    @classmethod
    def validate_source_folder(cls, v: str) -> str:
        if Path(v).is_absolute():
            raise ValueError(f"Source folder must be relative to the source root: {v}")
        return v

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {v}")
        return v


class DisplayConfig(BaseModel):
    """Result rendering configuration.

    Env vars:
        BEVYRLY__DISPLAY__THEME: Pygments theme for long-mode output
        BEVYRLY__DISPLAY__ELIDE_BODIES: Print signatures only in long mode
    """

    theme: str = Field(
        default="monokai",
        description="Syntax highlighting theme used for long-mode declarations.",
    )
    elide_bodies: bool = Field(
        default=False,
        description="Replace function bodies with '{ /* ... */ }' in long mode.",
    )


class BevyrlyConfig(BaseModel):
    """Root configuration for bevyrly.

    All settings can be configured via:
    1. Environment variables: BEVYRLY__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
