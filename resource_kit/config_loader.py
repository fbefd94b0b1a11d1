"""Config Loader - Loads connection configuration.

Connection settings live in a YAML mapping. String values may reference
environment variables as ${ENV_VAR}, which keeps tokens out of the file.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from resource_kit.models import ConnectionConfig


class ConfigError(Exception):
    """Raised when configuration loading fails."""


_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def load_connection_config(config_path: Path) -> ConnectionConfig:
    """Load connection configuration from YAML with ${ENV_VAR} substitution."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Config file must be a YAML mapping")

    raw_config = _substitute_env_vars(raw_config)

    try:
        return ConnectionConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid config structure: {e}") from e


def _substitute_env_vars(value: Any) -> Any:
    """Recursively replace ${VAR} references in strings."""
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(_lookup_env_var, value)
    if isinstance(value, dict):
        return {key: _substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def _lookup_env_var(match: re.Match[str]) -> str:
    name = match.group(1)
    env_value = os.environ.get(name)
    if env_value is None:
        raise ConfigError(f"Environment variable not set: {name}")
    return env_value
