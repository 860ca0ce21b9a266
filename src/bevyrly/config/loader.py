"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (BEVYRLY__SECTION__KEY)
3. User config (.bevyrly/config.yaml) - minimal user-facing options
4. Global config (~/.config/bevyrly/config.yaml) - full structure
5. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from bevyrly.config.models import (
    BevyrlyConfig,
    DisplayConfig,
    IndexConfig,
    LoggingConfig,
)
from bevyrly.config.user_config import load_user_config
from bevyrly.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/bevyrly/config.yaml").expanduser()

# User config key -> (section, field) in the full config
_USER_FIELD_TARGETS: dict[str, tuple[str, str]] = {
    "source_folder": ("index", "source_folder"),
    "max_file_size_mb": ("index", "max_file_size_mb"),
    "log_level": ("logging", "level"),
}


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with an instance-based YAML source."""

    class BevyrlySettings(BaseSettings):
        """Root config. Env vars: BEVYRLY__LOGGING__LEVEL, BEVYRLY__INDEX__SOURCE_FOLDER, etc."""

        model_config = SettingsConfigDict(
            env_prefix="BEVYRLY__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        index: IndexConfig = IndexConfig()
        display: DisplayConfig = DisplayConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return BevyrlySettings


BevyrlySettings = _make_settings_class({})


def load_config(repo_root: Path | None = None, **kwargs: Any) -> BevyrlyConfig:
    """Load config: defaults < global config < user config < env vars < kwargs.

    Args:
        repo_root: Repository root to load config from.
                   Defaults to current working directory.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    repo_root = repo_root or Path.cwd()
    config_path = repo_root / ".bevyrly" / "config.yaml"

    yaml_config: dict[str, Any] = {}
    if config_path.exists():
        # Only keys present in the file; commented defaults leave global values alone
        user_values = load_user_config(config_path).model_dump(exclude_unset=True)
        for key, (section, field) in _USER_FIELD_TARGETS.items():
            if key in user_values:
                yaml_config.setdefault(section, {})[field] = user_values[key]

    global_config = _load_yaml(GLOBAL_CONFIG_PATH)
    if global_config:
        yaml_config = _deep_merge(global_config, yaml_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return BevyrlyConfig.model_validate(settings.model_dump())
