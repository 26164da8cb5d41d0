"""Utility functions for tolerantdiff."""

from __future__ import annotations

import math
import re
from datetime import timedelta
from decimal import Decimal
from typing import Any

from .exceptions import ParseError


_DURATION_UNITS = {
    'us': 'microseconds',
    'ms': 'milliseconds',
    's': 'seconds',
    'm': 'minutes',
    'h': 'hours',
    'd': 'days',
}


def parse_duration(duration_str: str) -> timedelta:
    """
    Parse a duration string like '500ms', '5s', '1m', '1h', '1d' into a timedelta.

    Args:
        duration_str: Duration string (e.g., '250ms', '5s', '1m', '2h', '1d')

    Returns:
        timedelta object
    """
    if not duration_str:
        return timedelta(0)

    pattern = r'^(\d+(?:\.\d+)?)\s*(us|ms|s|m|h|d)$'
    match = re.match(pattern, duration_str.strip().lower())

    if not match:
        raise ValueError(f"Invalid duration format: {duration_str}")

    value = float(match.group(1))
    unit = match.group(2)

    return timedelta(**{_DURATION_UNITS[unit]: value})


def build_path(parent_path: str, key: str | int) -> str:
    """Build a JSONPath from parent path and key."""
    if isinstance(key, int):
        return f"{parent_path}[{key}]"
    else:
        # Handle special characters in key names
        if re.match(r'^[a-zA-Z_][a-zA-Z0-9_]*$', str(key)):
            return f"{parent_path}.{key}"
        else:
            return f"{parent_path}['{key}']"


def sorted_keys(obj: dict) -> list[str]:
    """Return the keys of a JSON object in a stable order."""
    return sorted(obj.keys())


def to_json_value(value: Any, path: str = "$") -> Any:
    """
    Normalize a parsed Python value into a JSON value.

    Integers become floats, tuples become lists. Anything that has no JSON
    counterpart raises ParseError.
    """
    if value is None or isinstance(value, (bool, str, float)):
        return value
    if isinstance(value, int):
        return float(value)
    if isinstance(value, (list, tuple)):
        return [to_json_value(item, build_path(path, i)) for i, item in enumerate(value)]
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ParseError(f"Object key {key!r} at {path} is not a string")
            result[key] = to_json_value(item, build_path(path, key))
        return result
    raise ParseError(f"Value of type {type(value).__name__} at {path} is not a JSON value")


def format_number(value: float) -> str:
    """
    Render a number the way Go's %v verb renders a float64.

    Shortest round-trip digits; exponent notation when the decimal exponent
    is below -4 or at least 6 (1e+06, 1.5e-05), plain notation otherwise.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign = "-" if value < 0 else ""
    _, digits_tuple, exponent = Decimal(repr(abs(float(value)))).normalize().as_tuple()
    digits = "".join(str(d) for d in digits_tuple)
    point = len(digits) + exponent
    exp10 = point - 1

    if exp10 < -4 or exp10 >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if exp10 < 0 else "+"
        return f"{sign}{mantissa}e{exp_sign}{abs(exp10):02d}"

    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{sign}{digits}{'0' * (point - len(digits))}"
    return f"{sign}{digits[:point]}.{digits[point:]}"
