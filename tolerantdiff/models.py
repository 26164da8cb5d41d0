"""Data models for tolerantdiff."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Union

from .utils import build_path


ROOT_KEY = "$"

Position = Union[int, str]


class ValueKind(Enum):
    """Runtime kind of a value walked by the deep equality engine."""
    ABSENT = "absent"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    ARRAY = "array"
    LIST = "list"
    BYTES = "bytes"
    MAP = "map"
    SET = "set"
    REFERENCE = "reference"
    RECORD = "record"
    OPAQUE = "opaque"


class DeltaKind(Enum):
    ADDED = "ADDED"
    DELETED = "DELETED"
    MODIFIED = "MODIFIED"


@dataclass
class Delta:
    """A single difference between two JSON values at one position."""
    kind: DeltaKind
    position: Position
    left: Any = None
    right: Any = None
    children: list[Delta] = field(default_factory=list)

    @property
    def is_nested(self) -> bool:
        """True when this delta only groups the deltas of an array or object."""
        return bool(self.children)

    def to_dict(self) -> dict:
        result = {
            "kind": self.kind.value,
            "position": self.position,
        }
        if self.is_nested:
            result["children"] = [c.to_dict() for c in self.children]
            return result
        if self.kind != DeltaKind.ADDED:
            result["left"] = self.left
        if self.kind != DeltaKind.DELETED:
            result["right"] = self.right
        return result


@dataclass
class DiffResult:
    """
    Differences between two JSON documents.

    ``deltas`` lives under the synthetic root object ``{"$": ...}``, so it
    holds at most one delta, positioned at ``"$"``.
    """
    left: Any
    deltas: list[Delta] = field(default_factory=list)

    @property
    def modified(self) -> bool:
        return len(self.deltas) > 0

    def leaves(self) -> Iterator[tuple[str, Delta]]:
        """Yield (JSONPath, delta) for every non-nested delta, in order."""
        def walk(deltas: list[Delta], parent: Optional[str]) -> Iterator[tuple[str, Delta]]:
            for delta in deltas:
                path = ROOT_KEY if parent is None else build_path(parent, delta.position)
                if delta.is_nested:
                    yield from walk(delta.children, path)
                else:
                    yield path, delta

        yield from walk(self.deltas, None)

    def format(self, color: bool = False) -> str:
        from .formatter import format_diff
        return format_diff(self, color)

    def to_dict(self) -> dict:
        return {
            "modified": self.modified,
            "deltas": [d.to_dict() for d in self.deltas],
            "changes": [
                {"path": path, "kind": delta.kind.value}
                for path, delta in self.leaves()
            ],
        }


@dataclass
class ComparatorConfig:
    """Configuration of the leaf comparator and the JSON differ."""
    float_tolerance: float = 0.0
    int_tolerance: int = 0
    time_layout: str = "ISO8601"
    time_tolerance: Optional[str] = None
    strip_pattern: Optional[str] = None
    ignore_paths: list[str] = field(default_factory=list)
    color: bool = False

    def build_equaler(self):
        """Create the leaf comparator described by this configuration."""
        from .comparators import TolerantBasicEqualer, make_substring_deleter
        from .utils import parse_duration

        transformer = None
        if self.strip_pattern:
            transformer = make_substring_deleter(self.strip_pattern)

        return TolerantBasicEqualer(
            float_tolerance=self.float_tolerance,
            int_tolerance=self.int_tolerance,
            string_transformer=transformer,
            time_layout=self.time_layout,
            time_tolerance=parse_duration(self.time_tolerance) if self.time_tolerance else None,
        )

    def to_dict(self) -> dict:
        return {
            "float_tolerance": self.float_tolerance,
            "int_tolerance": self.int_tolerance,
            "time_layout": self.time_layout,
            "time_tolerance": self.time_tolerance,
            "strip_pattern": self.strip_pattern,
            "ignore_paths": list(self.ignore_paths),
            "color": self.color,
        }
