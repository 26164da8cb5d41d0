"""Structural diffing of JSON documents."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .comparators import BasicEqualer, TolerantBasicEqualer
from .exceptions import ConfigError, ParseError
from .jsonpath_utils import JSONPathMatcher
from .models import ROOT_KEY, Delta, DeltaKind, DiffResult, Position
from .utils import sorted_keys, to_json_value

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ParseError(f"Invalid JSON literal: {name}")


def parse_json(data: bytes | str, label: str = "input") -> Any:
    """
    Parse JSON text into a JSON value. Every number becomes a float.

    Raises:
        ParseError: if the text is not valid JSON
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"{label} is not valid UTF-8: {e}") from e

    try:
        return json.loads(data, parse_int=float, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        logger.debug("Failed to parse %s: %s", label, e)
        raise ParseError(str(e), line=e.lineno, column=e.colno) from e


class JSONDiffer:
    """
    Compares JSON documents.

    Objects are compared key by key (keys visited in sorted order), arrays
    index by index. There's no attempt to find a longest common subsequence:
    an element inserted at the front of an array shows up as a modification
    of every following index. Values of basic types are compared with the
    leaf comparator.
    """

    def __init__(
        self,
        basic: Optional[BasicEqualer] = None,
        ignore_paths: Optional[list[str]] = None
    ):
        """
        Args:
            basic: Leaf comparator (compares exactly if not provided)
            ignore_paths: JSONPath expressions removed from both documents
                before comparing them
        """
        self.basic = basic or TolerantBasicEqualer()
        self.ignore_paths = list(ignore_paths or [])

        for path in self.ignore_paths:
            try:
                JSONPathMatcher.compile(path)
            except ValueError as e:
                raise ConfigError(str(e), "ignore_paths") from e

    def equal(self, left: bytes | str, right: bytes | str) -> bool:
        """
        Determine if two JSON strings represent the same value.

        Raises:
            ParseError: if the strings don't adhere to the JSON syntax
        """
        return not self.compare(left, right).modified

    def compare(self, left: bytes | str, right: bytes | str) -> DiffResult:
        """
        Return the differences between two JSON strings.

        Raises:
            ParseError: if the strings don't adhere to the JSON syntax
        """
        return self.compare_values(parse_json(left, "left"), parse_json(right, "right"))

    def compare_values(self, left: Any, right: Any) -> DiffResult:
        """
        Return the differences between two parsed JSON values.

        Raises:
            ParseError: if a value has no JSON counterpart
        """
        left = to_json_value(left)
        right = to_json_value(right)

        if self.ignore_paths:
            left = JSONPathMatcher.delete_paths(left, self.ignore_paths)
            right = JSONPathMatcher.delete_paths(right, self.ignore_paths)

        # explicit root, so that arrays and plain values take the object path
        deltas = self._object_deltas({ROOT_KEY: left}, {ROOT_KEY: right})
        result = DiffResult(left=left, deltas=deltas)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("JSON diff found %d change(s)", sum(1 for _ in result.leaves()))
        return result

    def _compare_at(self, position: Position, left: Any, right: Any) -> Optional[Delta]:
        """Return the delta for two values at the same position, if any."""
        if type(left) is not type(right):
            return Delta(DeltaKind.MODIFIED, position, left, right)

        if isinstance(left, list):
            children = self._array_deltas(left, right)
        elif isinstance(left, dict):
            children = self._object_deltas(left, right)
        else:
            return self._value_delta(position, left, right)

        if children:
            return Delta(DeltaKind.MODIFIED, position, left, right, children)
        return None

    def _array_deltas(self, left: list, right: list) -> list[Delta]:
        deltas = []

        for i, left_value in enumerate(left):
            if i < len(right):
                delta = self._compare_at(i, left_value, right[i])
                if delta is not None:
                    deltas.append(delta)
            else:
                deltas.append(Delta(DeltaKind.DELETED, i, left=left_value))

        for i in range(len(left), len(right)):
            deltas.append(Delta(DeltaKind.ADDED, i, right=right[i]))

        return deltas

    def _object_deltas(self, left: dict, right: dict) -> list[Delta]:
        deltas = []

        for key in sorted_keys(left):
            if key in right:
                delta = self._compare_at(key, left[key], right[key])
                if delta is not None:
                    deltas.append(delta)
            else:
                deltas.append(Delta(DeltaKind.DELETED, key, left=left[key]))

        for key in sorted_keys(right):
            if key not in left:
                deltas.append(Delta(DeltaKind.ADDED, key, right=right[key]))

        return deltas

    def _value_delta(self, position: Position, left: Any, right: Any) -> Optional[Delta]:
        """Return the delta for two basic values (null, boolean, number, string)."""
        if left is None:
            same = True
        elif isinstance(left, bool):
            same = self.basic.equal_bool(left, right)
        elif isinstance(left, float):
            same = self.basic.equal_float(left, right)
        elif isinstance(left, str):
            same = self.basic.equal_str(left, right)
        else:
            same = left == right

        if not same:
            return Delta(DeltaKind.MODIFIED, position, left, right)
        return None


def compare(
    left: bytes | str,
    right: bytes | str,
    basic: Optional[BasicEqualer] = None
) -> DiffResult:
    """
    Convenience function to diff two JSON strings.

    Args:
        left: The expected document
        right: The actual document
        basic: Optional leaf comparator (exact comparison by default)
    """
    return JSONDiffer(basic).compare(left, right)
