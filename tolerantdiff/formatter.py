"""Unified-diff-style rendering of JSON diff results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import ROOT_KEY, Delta, DeltaKind, DiffResult, Position
from .utils import format_number, sorted_keys


SAME = " "
ADDED = "+"
DELETED = "-"

STYLES = {
    ADDED: "30;42",
    DELETED: "30;41",
}


@dataclass
class _Line:
    marker: str
    indent: int
    key: str = ""
    text: str = ""


class AsciiFormatter:
    """
    Renders deltas against the left document, one value per line.

    Unchanged values are prefixed with a space, deleted values with ``-``,
    added values with ``+``. A modified value is printed twice, first as
    deleted and then as added. Every nesting level adds two spaces of
    indentation.
    """

    def __init__(self, left: Any, show_array_index: bool = True, coloring: bool = False):
        self.left = left
        self.show_array_index = show_array_index
        self.coloring = coloring

        self._lines: list[_Line] = []
        self._line: _Line = _Line(SAME, 0)
        self._size: list[int] = []
        self._in_array: list[bool] = []

    def format(self, deltas: list[Delta]) -> str:
        """
        Render the deltas of a diff, which are positioned under the
        synthetic root object.

        Raises:
            ValueError: if the deltas don't fit the structure of the left value
        """
        self._lines = []
        self._size = []
        self._in_array = []

        root = {ROOT_KEY: self.left}
        self._add_line(SAME, "{")
        self._push(len(root), False)
        self._process_object(root, deltas)
        self._pop()
        self._add_line(SAME, "}")

        return "".join(self._render(line) + "\n" for line in self._unwrap(deltas))

    def _unwrap(self, deltas: list[Delta]) -> list[tuple[str, str]]:
        """Strip the synthetic root object from the rendered lines."""
        body = self._lines[1:-1]
        basic = len(deltas) == 1 and deltas[0].kind == DeltaKind.MODIFIED and not deltas[0].is_nested

        unwrapped = []
        for line in body:
            if basic and line.indent == 1 and line.key:
                # first line of each side of a root modification
                unwrapped.append((line.marker, f"{line.marker} {line.text}"))
                continue
            key = "" if line.indent == 1 else line.key
            indent = "  " * (line.indent - 1)
            unwrapped.append((line.marker, f"{line.marker}{indent}{key}{line.text}"))
        return unwrapped

    def _render(self, line: tuple[str, str]) -> str:
        marker, text = line
        style = STYLES.get(marker)
        if self.coloring and style:
            return f"\x1b[{style}m{text}\x1b[0m"
        return text

    def _process_object(self, obj: dict, deltas: list[Delta]):
        for name in sorted_keys(obj):
            self._process_item(obj[name], deltas, name)

        for delta in deltas:
            if delta.kind == DeltaKind.ADDED:
                self._print_recursive(str(delta.position), delta.right, ADDED)

    def _process_array(self, array: list, deltas: list[Delta]):
        for index, value in enumerate(array):
            self._process_item(value, deltas, index)

        # additions past the end of the left array
        for delta in deltas:
            if delta.kind == DeltaKind.ADDED and delta.position >= len(array):
                self._print_recursive(str(delta.position), delta.right, ADDED)

    def _process_item(self, value: Any, deltas: list[Delta], position: Position):
        matched = [d for d in deltas if d.position == position]
        name = str(position)

        if not matched:
            self._print_recursive(name, value, SAME)
            return

        for delta in matched:
            if delta.is_nested:
                self._process_nested(value, delta, name)
            elif delta.kind == DeltaKind.ADDED:
                self._print_recursive(name, delta.right, ADDED)
                self._size[-1] += 1
            elif delta.kind == DeltaKind.MODIFIED:
                saved_size = self._size[-1]
                self._print_recursive(name, delta.left, DELETED)
                self._size[-1] = saved_size
                self._print_recursive(name, delta.right, ADDED)
            else:
                self._print_recursive(name, delta.left, DELETED)

    def _process_nested(self, value: Any, delta: Delta, name: str):
        if isinstance(value, dict):
            opening, closing = "{", "}"
        elif isinstance(value, list):
            opening, closing = "[", "]"
        else:
            raise ValueError(f"Type mismatch at {name!r}: nested delta for {type(value).__name__}")

        self._new_line(SAME)
        self._print_key(name)
        self._print(opening)
        self._close_line()

        self._push(len(value), isinstance(value, list))
        if isinstance(value, dict):
            self._process_object(value, delta.children)
        else:
            self._process_array(value, delta.children)
        self._pop()

        self._new_line(SAME)
        self._print(closing)
        self._print_comma()
        self._close_line()

    def _print_recursive(self, name: str, value: Any, marker: str):
        if isinstance(value, dict):
            self._new_line(marker)
            self._print_key(name)
            self._print("{")
            self._close_line()

            self._push(len(value), False)
            for key in sorted_keys(value):
                self._print_recursive(key, value[key], marker)
            self._pop()

            self._new_line(marker)
            self._print("}")
            self._print_comma()
            self._close_line()

        elif isinstance(value, list):
            self._new_line(marker)
            self._print_key(name)
            self._print("[")
            self._close_line()

            self._push(len(value), True)
            for i, item in enumerate(value):
                self._print_recursive(str(i), item, marker)
            self._pop()

            self._new_line(marker)
            self._print("]")
            self._print_comma()
            self._close_line()

        else:
            self._new_line(marker)
            self._print_key(name)
            self._print(self._format_value(value))
            self._print_comma()
            self._close_line()

    @staticmethod
    def _format_value(value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return f'"{value}"'
        if isinstance(value, float):
            return format_number(value)
        return str(value)

    def _push(self, size: int, array: bool):
        self._size.append(size)
        self._in_array.append(array)

    def _pop(self):
        self._size.pop()
        self._in_array.pop()

    def _add_line(self, marker: str, text: str):
        self._lines.append(_Line(marker, len(self._size), text=text))

    def _new_line(self, marker: str):
        self._line = _Line(marker, len(self._size))

    def _close_line(self):
        self._lines.append(self._line)

    def _print_key(self, name: str):
        if not self._in_array[-1]:
            self._line.key = f'"{name}": '
        elif self.show_array_index:
            self._line.key = f"{name}: "

    def _print_comma(self):
        self._size[-1] -= 1
        if self._size[-1] > 0:
            self._line.text += ","

    def _print(self, text: str):
        self._line.text += text


def format_diff(result: DiffResult, color: bool = False) -> str:
    """
    Render a diff result as unified-diff-style text.

    Args:
        result: The result of JSONDiffer.compare
        color: Whether to highlight added and deleted lines with ANSI colors
    """
    return AsciiFormatter(result.left, coloring=color).format(result.deltas)
