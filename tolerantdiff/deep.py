"""Deep comparison of arbitrary Python values."""

from __future__ import annotations

import dataclasses
import functools
import inspect
import io
import logging
import types
import weakref
from collections.abc import Mapping, MutableSequence, Sequence, Set
from enum import Enum
from typing import Any, Optional

from .comparators import BasicEqualer, TolerantBasicEqualer
from .exceptions import IntrospectionError
from .models import ValueKind
from .utils import build_path

logger = logging.getLogger(__name__)


_OPAQUE_TYPES = (
    types.FunctionType,
    functools.partial,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    types.CodeType,
    types.FrameType,
    types.TracebackType,
    io.IOBase,
    type,
    Enum,
)


def classify(value: Any) -> ValueKind:
    """Determine the runtime kind of a value."""
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, _OPAQUE_TYPES) or inspect.isroutine(value):
        return ValueKind.OPAQUE
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, complex):
        return ValueKind.COMPLEX
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (bytes, bytearray)):
        return ValueKind.BYTES
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return ValueKind.RECORD
    if isinstance(value, weakref.ref):
        return ValueKind.REFERENCE
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, Set):
        return ValueKind.SET
    if isinstance(value, MutableSequence):
        return ValueKind.LIST
    if isinstance(value, Sequence):
        return ValueKind.ARRAY
    if dataclasses.is_dataclass(value) or hasattr(value, "__dict__") or _slot_names(type(value)):
        return ValueKind.RECORD
    return ValueKind.OPAQUE


def _slot_names(cls: type) -> list[str]:
    names = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__") and name not in names:
                names.append(name)
    return names


def record_fields(value: Any) -> list[str]:
    """Field names of a record, in declaration order."""
    if dataclasses.is_dataclass(value):
        return [f.name for f in dataclasses.fields(value)]
    if isinstance(value, tuple):
        return list(type(value)._fields)

    names = _slot_names(type(value))
    if hasattr(value, "__dict__"):
        names.extend(name for name in vars(value) if name not in names)
    return names


def _child_path(path: str, key: Any) -> str:
    if isinstance(key, (str, int)) and not isinstance(key, bool):
        return build_path(path, key)
    return f"{path}[{key!r}]"


class DeepEqualer:
    """
    Determines if two values contain the same information.

    Composite values (sequences, mappings, sets, weak references, records)
    are walked recursively; values of basic types are handed to the leaf
    comparator. Differences in type are a plain "not equal".

    Limitations:

    1. There is no protection against cycles. Cyclic input ends in a
       RecursionError.

    2. Values without inspectable structure (functions, modules, handles,
       enum members, extension objects) fall back to ``==``. If such a value
       is reached through a private attribute (a name starting with an
       underscore), an IntrospectionError is raised instead.
    """

    def __init__(self, basic: Optional[BasicEqualer] = None):
        """
        Args:
            basic: Leaf comparator (compares exactly if not provided)
        """
        self.basic = basic or TolerantBasicEqualer()

    def equal(self, a: Any, b: Any) -> bool:
        """
        Compare two values.

        Raises:
            IntrospectionError: if the values can't be compared structurally
        """
        return self._equal(a, b, "$", False)

    def _equal(self, a: Any, b: Any, path: str, private: bool) -> bool:
        if a is None or b is None:
            return a is None and b is None

        if type(a) is not type(b):
            return False

        kind = classify(a)
        try:
            return self._dispatch(kind, a, b, path, private)
        except (IntrospectionError, RecursionError):
            raise
        except Exception as e:
            logger.debug("Fault while comparing %s values at %s: %r", kind.value, path, e)
            raise IntrospectionError(
                f"cannot inspect value of type {type(a).__name__}: {e}", path
            ) from e

    def _dispatch(self, kind: ValueKind, a: Any, b: Any, path: str, private: bool) -> bool:
        if kind == ValueKind.BOOL:
            return self.basic.equal_bool(a, b)
        elif kind == ValueKind.INTEGER:
            return self.basic.equal_int(a, b)
        elif kind == ValueKind.FLOAT:
            return self.basic.equal_float(a, b)
        elif kind == ValueKind.COMPLEX:
            return self._equal_complex(a, b)
        elif kind == ValueKind.STRING:
            return self.basic.equal_str(a, b)
        elif kind == ValueKind.ARRAY:
            return self._equal_sequences(a, b, path, private)
        elif kind == ValueKind.LIST:
            if a is b:
                return True
            return self._equal_sequences(a, b, path, private)
        elif kind == ValueKind.BYTES:
            return self._equal_bytes(a, b)
        elif kind == ValueKind.MAP:
            return self._equal_maps(a, b, path, private)
        elif kind == ValueKind.SET:
            return self._equal_sets(a, b)
        elif kind == ValueKind.REFERENCE:
            return self._equal_references(a, b, path, private)
        elif kind == ValueKind.RECORD:
            return self._equal_records(a, b, path, private)
        else:
            return self._equal_opaque(a, b, path, private)

    def _equal_sequences(self, a: Sequence, b: Sequence, path: str, private: bool) -> bool:
        if len(a) != len(b):
            return False
        for i in range(len(a)):
            if not self._equal(a[i], b[i], build_path(path, i), private):
                return False
        return True

    def _equal_bytes(self, a: bytes, b: bytes) -> bool:
        if len(a) != len(b):
            return False
        if a is b:
            return True
        equal_uint = getattr(self.basic, "equal_uint", self.basic.equal_int)
        return all(equal_uint(x, y) for x, y in zip(a, b))

    def _equal_complex(self, a: complex, b: complex) -> bool:
        equal_complex = getattr(self.basic, "equal_complex", None)
        if equal_complex is not None:
            return equal_complex(a, b)
        return self.basic.equal_float(a.real, b.real) and self.basic.equal_float(a.imag, b.imag)

    def _equal_maps(self, a: Mapping, b: Mapping, path: str, private: bool) -> bool:
        if len(a) != len(b):
            return False
        if a is b:
            return True
        for key, value in a.items():
            if key not in b:
                return False
            if not self._equal(value, b[key], _child_path(path, key), private):
                return False
        return True

    def _equal_sets(self, a: Set, b: Set) -> bool:
        if len(a) != len(b):
            return False
        if a is b:
            return True
        return all(item in b for item in a)

    def _equal_references(self, a: weakref.ref, b: weakref.ref, path: str, private: bool) -> bool:
        if a is b:
            return True
        referent_a, referent_b = a(), b()
        if referent_a is referent_b:
            return True
        return self._equal(referent_a, referent_b, path, private)

    def _equal_records(self, a: Any, b: Any, path: str, private: bool) -> bool:
        if a is b:
            return True

        fields_a = record_fields(a)
        fields_b = record_fields(b)
        if set(fields_a) != set(fields_b):
            return False

        for name in fields_a:
            child_private = private or name.startswith("_")
            if not self._equal(getattr(a, name), getattr(b, name), build_path(path, name), child_private):
                return False
        return True

    def _equal_opaque(self, a: Any, b: Any, path: str, private: bool) -> bool:
        if private:
            raise IntrospectionError(
                f"cannot compare {type(a).__name__} value obtained from a private attribute",
                path
            )
        return bool(a == b)


def equal(a: Any, b: Any, basic: Optional[BasicEqualer] = None) -> bool:
    """
    Convenience function to deep-compare two values.

    Args:
        a: The first value
        b: The second value
        basic: Optional leaf comparator (exact comparison by default)
    """
    return DeepEqualer(basic).equal(a, b)
