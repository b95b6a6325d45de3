"""Configuration helpers for flowmodel-io."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Optional

import yaml

from . import settings
from .core.errors import ConfigError


LOCAL_CONFIG_PATH = Path("config.local.yaml")
USER_CONFIG_PATH = settings.config_dir / "config.yaml"

OUTPUT_MODES = ("quiet", "normal", "debug")

DEFAULT_CONFIG = {
    "output_mode": settings.output_mode,
    "validate_command": settings.validate_command,
    "plugins": [],
    "stdin": {
        "max_bytes": settings.stdin_max_bytes,
    },
}


def config_defaults() -> dict:
    """Return default configuration values."""
    return copy.deepcopy(DEFAULT_CONFIG)


def config_schema() -> dict:
    """Return JSON Schema for configuration."""
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": {
            "output_mode": {"type": "string", "enum": list(OUTPUT_MODES)},
            "validate_command": {"type": "string"},
            "plugins": {"type": "array", "items": {"type": "string"}},
            "stdin": {
                "type": "object",
                "properties": {
                    "max_bytes": {"type": ["integer", "null"], "minimum": 1},
                },
                "additionalProperties": False,
            },
        },
        "additionalProperties": False,
    }


def _deep_merge(base: dict, update: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_config_file(path: Path) -> Any:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    return {} if data is None else data


def _default_path() -> Path:
    if LOCAL_CONFIG_PATH.exists():
        return LOCAL_CONFIG_PATH
    return USER_CONFIG_PATH


def load_config(config_path: Optional[Path] = None) -> dict:
    """
    Load resolved configuration (defaults merged with config file).

    Without an explicit path, ``config.local.yaml`` in the working directory
    is used, then the user config directory.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation
    """
    path = Path(config_path) if config_path else _default_path()
    data = _load_config_file(path)
    errors = validate_config_dict(data)
    if errors:
        raise ConfigError(f"Invalid config file {path}", errors=errors)
    return _deep_merge(config_defaults(), data)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config_dict(data: Any) -> list[str]:
    """Validate a config dict against the schema."""
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Config must be a mapping/object"]

    allowed_top = {"output_mode", "validate_command", "plugins", "stdin"}
    for key in data:
        if key not in allowed_top:
            errors.append(f"Unknown config key: {key}")

    if "output_mode" in data and data["output_mode"] not in OUTPUT_MODES:
        errors.append(f"output_mode must be one of {', '.join(OUTPUT_MODES)}")

    if "validate_command" in data and not isinstance(data["validate_command"], str):
        errors.append("validate_command must be a string")

    if "plugins" in data:
        plugins = data["plugins"]
        if not isinstance(plugins, list) or not all(isinstance(p, str) for p in plugins):
            errors.append("plugins must be a list of module names")

    if "stdin" in data and isinstance(data["stdin"], dict):
        for key in data["stdin"]:
            if key not in {"max_bytes"}:
                errors.append(f"Unknown stdin key: {key}")
        max_bytes = data["stdin"].get("max_bytes")
        if max_bytes is not None and not (_is_int(max_bytes) and max_bytes >= 1):
            errors.append("stdin.max_bytes must be a positive integer or null")
    elif "stdin" in data:
        errors.append("stdin must be an object")

    return errors


def validate_config_file(config_path: Optional[Path] = None) -> list[str]:
    """Validate the config file. Returns list of errors (empty = valid)."""
    path = Path(config_path) if config_path else _default_path()
    if not path.exists():
        return []
    try:
        data = _load_config_file(path)
    except ConfigError as e:
        return [str(e)]
    return validate_config_dict(data)
