"""
Configuration loader: YAML file plus environment variable overrides.

Priority (highest first): environment, YAML file, model defaults.

Environment variables use the pattern PLATFORM_EXTRACT__{SECTION}__{KEY},
for example PLATFORM_EXTRACT__XIAOHONGSHU__RATE_LIMIT_DELAY_SECONDS=3.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from platform_extract.config.settings import Settings
from platform_extract.core.exceptions import ConfigurationError

ENV_PREFIX = "PLATFORM_EXTRACT"

_settings_instance: Settings | None = None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into dicts."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_env_value(value: str) -> Any:
    """Parse an environment string into bool, None, int, float or str."""
    lowered = value.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    if lowered in ("none", "null", ""):
        return None

    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def _load_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Collect ``{prefix}__SECTION__KEY`` variables into a nested dict."""
    overrides: dict[str, Any] = {}
    marker = f"{prefix}__"

    for key, value in os.environ.items():
        if not key.startswith(marker):
            continue

        key_path = key[len(marker):].lower().split("__")
        if len(key_path) < 2:
            continue

        current = overrides
        for part in key_path[:-1]:
            current = current.setdefault(part, {})
        current[key_path[-1]] = _parse_env_value(value)

    return overrides


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML mapping from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file holds invalid YAML or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in configuration file: {e}",
            details={"path": str(path)},
        ) from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping",
            details={"path": str(path), "type": type(content).__name__},
        )
    return content


def load_config(
    config_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """
    Load and validate settings.

    Args:
        config_path: Optional YAML file
        env_prefix: Prefix for environment overrides

    Raises:
        FileNotFoundError: If config_path is given but missing
        ConfigurationError: If the file or the merged values are invalid
    """
    # Start from the defaults so a partial platform section keeps that
    # platform's own defaults
    config_data: dict[str, Any] = Settings().model_dump()

    if config_path is not None:
        config_data = _deep_merge(config_data, _load_yaml_file(Path(config_path)))

    config_data = _deep_merge(config_data, _load_env_overrides(env_prefix))

    try:
        return Settings(**config_data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} validation error(s)",
            details={"errors": [err["loc"] for err in e.errors()]},
        ) from e


def get_settings(
    config_path: Path | str | None = None,
    reload: bool = False,
) -> Settings:
    """Get the process-wide Settings, loading them on first use."""
    global _settings_instance

    if _settings_instance is None or reload:
        _settings_instance = load_config(config_path)
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings (tests, reconfiguration)."""
    global _settings_instance
    _settings_instance = None


def get_default_config_path() -> Path | None:
    """
    Find a configuration file in the usual places.

    Searches ./config.yaml, ./config/config.yaml and
    ~/.platform_extract/config.yaml.
    """
    search_paths = [
        Path.cwd() / "config.yaml",
        Path.cwd() / "config" / "config.yaml",
        Path.home() / ".platform_extract" / "config.yaml",
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None
