"""
YAML configuration loader for SLA Insights.

A config file is optional. When one is found, its ``${VAR}`` references are
expanded and relative data paths are anchored at the file's own directory.
Command-line overrides are layered on top before validation.
"""

import os
import re
from pathlib import Path
from typing import Any

import structlog
import yaml

from sla_insights.config.models import AnalyticsConfig
from sla_insights.config.validation import ConfigurationError

logger = structlog.get_logger()

DEFAULT_CONFIG_PATHS = [
    Path("config/sla_insights.yaml"),
    Path("sla_insights.yaml"),
    Path.home() / ".sla_insights" / "config.yaml",
]

# ${NAME} or ${NAME:-fallback}
ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<fallback>[^}]*))?\}")

DATA_PATH_KEYS = ("state_path", "insights_path")


def _expand_env(value: Any) -> Any:
    """Expand environment references in every string of a parsed document."""
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if not isinstance(value, str):
        return value
    return ENV_REFERENCE.sub(
        lambda m: os.environ.get(m.group("name"), m.group("fallback") or ""),
        value,
    )


def _anchor_data_paths(data: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    anchored = dict(data)
    for key in DATA_PATH_KEYS:
        if not anchored.get(key):
            continue
        candidate = Path(str(anchored[key])).expanduser()
        anchored[key] = candidate if candidate.is_absolute() else base_dir / candidate
    return anchored


def find_config_file() -> Path | None:
    """First existing file among DEFAULT_CONFIG_PATHS, or None."""
    return next((path for path in DEFAULT_CONFIG_PATHS if path.is_file()), None)


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Parse a YAML config file into a settings dict.

    An empty file is an empty config. Relative ``data`` paths are resolved
    against the directory holding the file, so a config can sit next to its
    CSV extracts.

    Args:
        path: Path to the YAML file

    Returns:
        Settings dict ready for AnalyticsConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the document is not a mapping
        yaml.YAMLError: If the YAML is invalid
    """
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        document = yaml.safe_load(f) or {}

    if not isinstance(document, dict):
        raise ConfigurationError(
            f"{path}: expected a mapping at the top level, got {type(document).__name__}"
        )

    settings = _expand_env(document)
    if isinstance(settings.get("data"), dict):
        settings["data"] = _anchor_data_paths(settings["data"], path.parent)
    return settings


def _layer(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Apply overrides on top of base, section by section."""
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _layer(current, value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_path: str | Path | None = None,
    override_values: dict[str, Any] | None = None,
) -> AnalyticsConfig:
    """
    Build the analytics configuration.

    Args:
        config_path: Path to a YAML file. If None, DEFAULT_CONFIG_PATHS are
                    searched and built-in defaults are used when none exists.
        override_values: Nested values applied after the file is read;
                    paths given here are taken as-is

    Returns:
        Validated AnalyticsConfig object

    Raises:
        FileNotFoundError: If an explicit configuration file is not found
        ConfigurationError: If the file is not a YAML mapping
        ValidationError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        logger.debug("config_defaults_used", searched=[str(p) for p in DEFAULT_CONFIG_PATHS])
        settings: dict[str, Any] = {}
    else:
        settings = read_config_file(Path(config_path))
        logger.debug("config_loaded", path=str(config_path))

    if override_values:
        settings = _layer(settings, override_values)

    return AnalyticsConfig(**settings)
