"""Assertion helpers for test suites."""

from __future__ import annotations

from typing import Any, Callable, Optional

from .comparators import BasicEqualer
from .deep import DeepEqualer
from .differ import JSONDiffer


def assert_deep_equal(expected: Any, actual: Any, basic: Optional[BasicEqualer] = None, msg: str = ""):
    """
    Assert that two values are deeply equal.

    Raises:
        AssertionError: if they aren't
    """
    if not DeepEqualer(basic).equal(expected, actual):
        prefix = f"{msg}: " if msg else ""
        raise AssertionError(f"{prefix}{expected!r} != {actual!r}")


def assert_json_equal(
    expected: bytes | str,
    actual: bytes | str,
    basic: Optional[BasicEqualer] = None,
    ignore_paths: Optional[list[str]] = None,
    msg: str = ""
):
    """
    Assert that two JSON documents are equal. The assertion message holds
    the formatted diff.

    Raises:
        AssertionError: if they aren't
    """
    result = JSONDiffer(basic, ignore_paths).compare(expected, actual)
    if result.modified:
        prefix = f"{msg}\n" if msg else ""
        raise AssertionError(f"{prefix}JSON documents differ:\n{result.format()}")


def _check_cases(compare: Callable[[Any, Any], bool], cases: list[tuple[Any, Any, bool]]):
    failures = []
    for a, b, expected in cases:
        actual = compare(a, b)
        if actual != expected:
            failures.append(f"[{a!r} == {b!r}] expected {expected}; got {actual}")
    if failures:
        raise AssertionError("\n".join(failures))


def check_exact_bool(equaler: BasicEqualer):
    """Assert that an equaler compares booleans exactly."""
    _check_cases(equaler.equal_bool, [
        (False, False, True),
        (False, True, False),
        (True, False, False),
        (True, True, True),
    ])


def check_exact_int(equaler: BasicEqualer):
    """Assert that an equaler compares integers exactly."""
    _check_cases(equaler.equal_int, [
        (0, 0, True),
        (1, 1, True),
        (0, 1, False),
        (1, 0, False),
        (1, 2, False),
        (2, 1, False),
        (0, -1, False),
        (-1, 0, False),
        (-1, -1, True),
        (-1, -2, False),
        (-2, -1, False),
        (-1, 1, False),
        (1, -1, False),
    ])


def check_exact_float(equaler: BasicEqualer):
    """Assert that an equaler compares floats exactly."""
    _check_cases(equaler.equal_float, [
        (0.0, 0.0, True),
        (0.0, 0.1, False),
        (0.1, 0.0, False),
        (0.1, 0.1, True),
        (0.1, 0.2, False),
        (0.2, 0.1, False),
        (0.0, -0.1, False),
        (-0.1, 0.0, False),
        (-0.1, -0.1, True),
        (-0.1, -0.2, False),
        (-0.2, -0.1, False),
        (-0.1, 0.1, False),
        (0.1, -0.1, False),
    ])


def check_exact_string(equaler: BasicEqualer):
    """Assert that an equaler compares strings exactly."""
    _check_cases(equaler.equal_str, [
        ("", "", True),
        ("", "foo", False),
        ("foo", "", False),
        ("foo", "foo", True),
        ("foo", "bar", False),
        ("bar", "foo", False),
    ])
