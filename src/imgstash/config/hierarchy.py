"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.imgstash/config.yaml)
  3. Project config   (./imgstash.yaml, searched upward from cwd)
  4. Environment variables (IMGSTASH_<KEY>)
  5. Runtime arguments

Every layer may hold strings; values are parsed once, after merging.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from imgstash.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".imgstash" / "config.yaml"
_PROJECT_CONFIG_NAME = "imgstash.yaml"
_ENV_PREFIX = "IMGSTASH_"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_number(kind: type) -> Callable[[Any], Any]:
    def parse(value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError(f"not a number: {value!r}")
        return kind(value)

    return parse


# Parsers for typed keys; anything else stays as loaded
_TYPE_MAP: dict[str, Callable[[Any], Any]] = {
    "ttl_seconds": _parse_number(float),
    "key_length": _parse_number(int),
    "cache_max_mb": _parse_number(float),
    "jpeg_quality": _parse_number(int),
    "repopulate_on_read": _parse_bool,
    "db_path": str,
    "log_level": lambda v: str(v).upper(),
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load, merge, and type-check configuration from all sources."""
    defaults = get_defaults()
    layers = [
        _load_yaml_config(_GLOBAL_CONFIG_PATH),
        _load_project_config(),
        _load_env_vars(defaults),
        {k: v for k, v in runtime_overrides.items() if v is not None},
    ]

    merged = dict(defaults)
    for layer in layers:
        if layer:
            merged.update(layer)
    return _coerce(merged, defaults)


def _coerce(config: dict[str, Any], defaults: dict[str, Any]) -> dict[str, Any]:
    """Parse typed keys; an unparseable value falls back to its default."""
    result = dict(config)
    for key, parse in _TYPE_MAP.items():
        if key not in result:
            continue
        try:
            result[key] = parse(result[key])
        except (TypeError, ValueError):
            logger.warning(
                "Invalid value for '%s': %r, using default %r",
                key,
                result[key],
                defaults.get(key),
            )
            result[key] = defaults.get(key)
    return result


def _load_yaml_config(path: Path | None) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if path is None or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    return data


def _load_project_config() -> dict[str, Any] | None:
    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return _load_yaml_config(candidate)
    return None


def _load_env_vars(defaults: dict[str, Any]) -> dict[str, str]:
    """Read IMGSTASH_<KEY> for every known config key."""
    return {
        key: os.environ[_ENV_PREFIX + key.upper()]
        for key in defaults
        if _ENV_PREFIX + key.upper() in os.environ
    }
