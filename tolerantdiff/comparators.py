"""Leaf comparators for values of basic types."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class BasicEqualer(Protocol):
    """
    Determines if two values of the same basic type are equal.

    Implementations may also provide ``equal_uint`` and ``equal_complex``;
    callers fall back to ``equal_int`` and ``equal_float`` when they don't.
    """

    def equal_bool(self, a: bool, b: bool) -> bool: ...

    def equal_int(self, a: int, b: int) -> bool: ...

    def equal_float(self, a: float, b: float) -> bool: ...

    def equal_str(self, a: str, b: str) -> bool: ...


@runtime_checkable
class StringTransformer(Protocol):
    """Transforms a string into another string."""

    def transform(self, s: str) -> str: ...


# Cache for compiled regex patterns
@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern:
    """Compile and cache a regex pattern."""
    return re.compile(pattern)


class SubstringDeleter:
    """Deletes all substrings matching a regular expression."""

    def __init__(self, pattern: re.Pattern):
        self.pattern = pattern

    def transform(self, s: str) -> str:
        return self.pattern.sub("", s)

    def __repr__(self) -> str:
        return f"SubstringDeleter({self.pattern.pattern!r})"


def make_substring_deleter(expr: str) -> SubstringDeleter:
    """
    Create a SubstringDeleter from a regular expression.

    Raises:
        re.error: if the expression doesn't compile
    """
    return SubstringDeleter(_compile_pattern(expr))


def parse_datetime(value: str, fmt: Optional[str] = None) -> datetime:
    """
    Parse a datetime string using the specified format.

    Args:
        value: The datetime string
        fmt: Format string (or 'ISO8601' for ISO format)

    Returns:
        Parsed datetime object
    """
    if fmt is None or fmt.upper() == 'ISO8601':
        formats = [
            '%Y-%m-%dT%H:%M:%S.%f%z',
            '%Y-%m-%dT%H:%M:%S%z',
            '%Y-%m-%dT%H:%M:%S.%f',
            '%Y-%m-%dT%H:%M:%S',
            '%Y-%m-%d %H:%M:%S.%f',
            '%Y-%m-%d %H:%M:%S',
        ]
        # %z accepts 'Z' since Python 3.7
        for f in formats:
            try:
                return datetime.strptime(value, f)
            except ValueError:
                continue

        # Try fromisoformat as fallback
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            pass

        raise ValueError(f"Cannot parse datetime '{value}' as ISO8601")
    else:
        return datetime.strptime(value, fmt)


def times_within(a: str, b: str, layout: Optional[str], tolerance: timedelta) -> Optional[bool]:
    """
    Compare two strings as times.

    Returns None if at least one of the strings can't be parsed with the
    layout, otherwise whether the times differ by at most the tolerance.
    """
    try:
        ta = parse_datetime(a, layout)
        tb = parse_datetime(b, layout)
        diff = abs((ta - tb).total_seconds())
    except (ValueError, TypeError):
        # unparseable, or naive vs aware
        return None
    return diff <= tolerance.total_seconds()


class ExactEqualer:
    """Compares values exactly."""

    def equal_bool(self, a: bool, b: bool) -> bool:
        return a == b

    def equal_int(self, a: int, b: int) -> bool:
        return a == b

    def equal_uint(self, a: int, b: int) -> bool:
        return a == b

    def equal_float(self, a: float, b: float) -> bool:
        return a == b

    def equal_complex(self, a: complex, b: complex) -> bool:
        return a == b

    def equal_str(self, a: str, b: str) -> bool:
        return a == b


class TolerantEqualer(ExactEqualer):
    """
    Allows some tolerance when comparing numeric values.

    For example, if the tolerance is 3.7, then 8 and 11 are considered equal,
    but 8 and 12 are not. Booleans and strings are compared exactly.
    """

    def __init__(self, tolerance: float = 0.0):
        self.tolerance = tolerance

    def equal_int(self, a: int, b: int) -> bool:
        return abs(a - b) <= self.tolerance

    def equal_uint(self, a: int, b: int) -> bool:
        return abs(a - b) <= self.tolerance

    def equal_float(self, a: float, b: float) -> bool:
        return abs(a - b) <= self.tolerance


class TimeEqualer(ExactEqualer):
    """
    Allows some tolerance when comparing strings that represent times.

    If the tolerance is a second, then "2018-03-30T14:36:09.778Z" and
    "2018-03-30T14:36:10.778Z" are considered equal, but
    "2018-03-30T14:36:09.778Z" and "2018-03-30T14:36:10.779Z" are not.
    If at least one of the strings can't be parsed as a time, the strings are
    compared exactly.
    """

    def __init__(self, layout: str = "ISO8601", tolerance: timedelta = timedelta(0)):
        self.layout = layout
        self.tolerance = tolerance

    def equal_str(self, a: str, b: str) -> bool:
        same = times_within(a, b, self.layout, self.tolerance)
        if same is None:
            return a == b
        return same


class TolerantBasicEqualer:
    """
    Leaf comparator that allows some leeway.

    - Booleans and complex numbers are compared exactly.
    - Integers may differ by ``int_tolerance``, floats by ``float_tolerance``.
    - Strings: if a positive ``time_tolerance`` is set and both strings parse
      as times with ``time_layout``, the times must be within the tolerance.
      Otherwise, if a ``string_transformer`` is set, both strings are
      transformed before comparing them. Otherwise they are compared exactly.

    With no arguments, every value is compared exactly.
    """

    def __init__(
        self,
        float_tolerance: float = 0.0,
        int_tolerance: int = 0,
        string_transformer: Optional[StringTransformer] = None,
        time_layout: str = "ISO8601",
        time_tolerance: Optional[timedelta] = None
    ):
        self.float_tolerance = float_tolerance
        self.int_tolerance = int_tolerance
        self.string_transformer = string_transformer
        self.time_layout = time_layout
        self.time_tolerance = time_tolerance

    def equal_bool(self, a: bool, b: bool) -> bool:
        return a == b

    def equal_int(self, a: int, b: int) -> bool:
        return abs(a - b) <= self.int_tolerance

    def equal_uint(self, a: int, b: int) -> bool:
        return abs(a - b) <= self.int_tolerance

    def equal_float(self, a: float, b: float) -> bool:
        # NaN fails both checks
        return a == b or abs(a - b) <= self.float_tolerance

    def equal_complex(self, a: complex, b: complex) -> bool:
        return a == b

    def equal_str(self, a: str, b: str) -> bool:
        if self.time_tolerance is not None and self.time_tolerance > timedelta(0):
            same = times_within(a, b, self.time_layout, self.time_tolerance)
            if same is not None:
                return same

        if self.string_transformer is not None:
            return self.string_transformer.transform(a) == self.string_transformer.transform(b)

        return a == b

    def __repr__(self) -> str:
        return (
            f"TolerantBasicEqualer(float_tolerance={self.float_tolerance}, "
            f"int_tolerance={self.int_tolerance}, "
            f"string_transformer={self.string_transformer!r}, "
            f"time_layout={self.time_layout!r}, "
            f"time_tolerance={self.time_tolerance!r})"
        )
