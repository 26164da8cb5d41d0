"""Configuration loading for tolerantdiff."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional

import yaml

from .differ import JSONDiffer
from .exceptions import ConfigError
from .jsonpath_utils import JSONPathMatcher
from .models import ComparatorConfig
from .utils import parse_duration

logger = logging.getLogger(__name__)


# Accepted types per key; bool is checked separately since it is an int
_KEY_TYPES = {
    "float_tolerance": (int, float),
    "int_tolerance": (int,),
    "time_layout": (str,),
    "time_tolerance": (str,),
    "strip_pattern": (str,),
    "ignore_paths": (list,),
    "color": (bool,),
}

_NULLABLE_KEYS = {"time_tolerance", "strip_pattern"}


def config_from_dict(data: Optional[dict]) -> ComparatorConfig:
    """
    Build a ComparatorConfig from a mapping, validating every key.

    Raises:
        ConfigError: on unknown keys, wrong types, a negative tolerance, an
            invalid duration, regex or JSONPath
    """
    if data is None:
        return ComparatorConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping, got {type(data).__name__}")

    for key, value in data.items():
        if key not in _KEY_TYPES:
            raise ConfigError("unknown key", str(key))
        if value is None and key in _NULLABLE_KEYS:
            continue
        expected = _KEY_TYPES[key]
        if isinstance(value, bool) and bool not in expected:
            raise ConfigError(f"expected {expected[0].__name__}, got bool", key)
        if not isinstance(value, expected):
            raise ConfigError(f"expected {expected[0].__name__}, got {type(value).__name__}", key)

    config = ComparatorConfig(
        float_tolerance=float(data.get("float_tolerance", 0.0)),
        int_tolerance=data.get("int_tolerance", 0),
        time_layout=data.get("time_layout", "ISO8601"),
        time_tolerance=data.get("time_tolerance"),
        strip_pattern=data.get("strip_pattern"),
        ignore_paths=list(data.get("ignore_paths", [])),
        color=data.get("color", False),
    )
    validate_config(config)
    return config


def validate_config(config: ComparatorConfig):
    """
    Check the values of a configuration.

    Raises:
        ConfigError: if a value is out of range or doesn't parse
    """
    if config.float_tolerance < 0:
        raise ConfigError("must not be negative", "float_tolerance")
    if config.int_tolerance < 0:
        raise ConfigError("must not be negative", "int_tolerance")

    if config.time_tolerance:
        try:
            parse_duration(config.time_tolerance)
        except ValueError as e:
            raise ConfigError(str(e), "time_tolerance") from e

    if config.strip_pattern:
        try:
            re.compile(config.strip_pattern)
        except re.error as e:
            raise ConfigError(f"invalid regular expression: {e}", "strip_pattern") from e

    for path in config.ignore_paths:
        if not isinstance(path, str):
            raise ConfigError(f"expected JSONPath strings, got {type(path).__name__}", "ignore_paths")
        try:
            JSONPathMatcher.compile(path)
        except ValueError as e:
            raise ConfigError(str(e), "ignore_paths") from e


def load_config(path: str | Path) -> ComparatorConfig:
    """
    Load a configuration from a YAML (or JSON) file.

    Raises:
        ConfigError: if the file is missing, unparseable or invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        content = f.read()

    # JSON is valid YAML
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {e}") from e

    config = config_from_dict(data)
    logger.debug("Loaded config from %s: %s", config_path, config.to_dict())
    return config


def build_differ(config: Optional[ComparatorConfig] = None) -> JSONDiffer:
    """Create a JSONDiffer configured with the leaf comparator and ignored paths."""
    config = config or ComparatorConfig()
    validate_config(config)
    return JSONDiffer(config.build_equaler(), config.ignore_paths)


def merge_overrides(config: ComparatorConfig, overrides: dict[str, Any]) -> ComparatorConfig:
    """
    Return a copy of a configuration with the non-None overrides applied.

    ``ignore_paths`` overrides extend the configured paths instead of
    replacing them.
    """
    data = config.to_dict()
    for key, value in overrides.items():
        if value is None:
            continue
        if key == "ignore_paths":
            data[key] = data[key] + list(value)
        else:
            data[key] = value
    return config_from_dict(data)
