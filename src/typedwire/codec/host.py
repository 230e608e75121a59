"""Host Value Interface — how the codec reads and builds native values.

The encoder and decoder never inspect values directly; they go through a
:class:`HostValueInterface`. :class:`PythonHost` is the implementation over
plain Python objects and is what the library entry points use by default.
Other object models (ORM rows, foreign runtime handles) plug in by
implementing the protocol.
"""

from __future__ import annotations

import types
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from typedwire.domain.types import UNDEFINED, OrderedMap, UndefinedType


class ValueKind(StrEnum):
    """Result of classifying a host value."""

    NULL = "null"
    UNDEFINED = "undefined"
    BOOL = "bool"
    NUMBER = "number"
    TEXT = "text"
    BLOB = "blob"
    LIST = "list"
    ORDERED_MAP = "ordered_map"
    RECORD = "record"
    UNSUPPORTED = "unsupported"


@runtime_checkable
class HostValueInterface(Protocol):
    """Introspection and construction primitives used by the codec."""

    # -- read side (encoder) --

    def classify(self, value: Any) -> ValueKind: ...

    def read_primitive(self, value: Any) -> bool | int | float | str: ...

    def read_blob(self, value: Any) -> bytes: ...

    def iterate_list(self, value: Any) -> Sequence[Any]: ...

    def iterate_map_entries(self, value: Any) -> Iterable[tuple[Any, Any]]: ...

    def own_keys(self, value: Any) -> Iterable[str]: ...

    def read_field(self, value: Any, key: str) -> Any: ...

    # -- write side (decoder) --

    def make_null(self) -> Any: ...

    def make_undefined(self) -> Any: ...

    def make_primitive(self, value: bool | int | float | str) -> Any: ...

    def make_blob(self, data: bytes) -> Any: ...

    def make_list(self, length: int) -> Any: ...

    def set_index(self, target: Any, index: int, value: Any) -> None: ...

    def make_record(self) -> Any: ...

    def set_field(self, target: Any, key: str, value: Any) -> None: ...

    def make_map(self) -> Any: ...

    def insert_entry(self, target: Any, key: Any, value: Any) -> None: ...


_BLOB_TYPES = (bytes, bytearray, memoryview)
_NON_LIST_SEQUENCES = (str, bytes, bytearray, memoryview)


class PythonHost:
    """Host Value Interface over built-in Python values.

    Classification order: sentinels, primitives, blobs, ordered maps,
    lists, then records. ``bool`` is tested before numbers since it
    subclasses ``int``. A ``dict`` with any non-``str`` key cannot be a
    record and is treated as an ordered map.

    Args:
        encode_array_like: Classify any ``Sequence`` (e.g. ``range``) as a
            list. When False only ``list`` and ``tuple`` are lists and other
            sequences are unsupported.
    """

    def __init__(self, *, encode_array_like: bool = True) -> None:
        self.encode_array_like = encode_array_like

    def classify(self, value: Any) -> ValueKind:
        if value is None:
            return ValueKind.NULL
        if isinstance(value, UndefinedType):
            return ValueKind.UNDEFINED
        if isinstance(value, bool):
            return ValueKind.BOOL
        if isinstance(value, (int, float)):
            return ValueKind.NUMBER
        if isinstance(value, str):
            return ValueKind.TEXT
        if isinstance(value, _BLOB_TYPES):
            return ValueKind.BLOB
        if isinstance(value, OrderedMap):
            return ValueKind.ORDERED_MAP
        if isinstance(value, Mapping):
            if all(isinstance(k, str) for k in value):
                return ValueKind.RECORD
            return ValueKind.ORDERED_MAP
        if isinstance(value, (list, tuple)):
            return ValueKind.LIST
        if isinstance(value, Sequence) and not isinstance(value, _NON_LIST_SEQUENCES):
            return ValueKind.LIST if self.encode_array_like else ValueKind.UNSUPPORTED
        if isinstance(value, (type, types.ModuleType)) or callable(value):
            return ValueKind.UNSUPPORTED
        if hasattr(value, "__dict__"):
            return ValueKind.RECORD
        return ValueKind.UNSUPPORTED

    def read_primitive(self, value: Any) -> bool | int | float | str:
        return value

    def read_blob(self, value: Any) -> bytes:
        return bytes(value)

    def iterate_list(self, value: Any) -> Sequence[Any]:
        if isinstance(value, (list, tuple)):
            return value
        return [value[i] for i in range(len(value))]

    def iterate_map_entries(self, value: Any) -> Iterable[tuple[Any, Any]]:
        if isinstance(value, OrderedMap):
            return value.entries()
        return list(value.items())

    def own_keys(self, value: Any) -> Iterable[str]:
        if isinstance(value, Mapping):
            return list(value.keys())
        return list(vars(value).keys())

    def read_field(self, value: Any, key: str) -> Any:
        if isinstance(value, Mapping):
            return value[key]
        return vars(value)[key]

    def make_null(self) -> None:
        return None

    def make_undefined(self) -> UndefinedType:
        return UNDEFINED

    def make_primitive(self, value: bool | int | float | str) -> bool | int | float | str:
        return value

    def make_blob(self, data: bytes) -> bytes:
        return bytes(data)

    def make_list(self, length: int) -> list[Any]:
        return []

    def set_index(self, target: list[Any], index: int, value: Any) -> None:
        if index == len(target):
            target.append(value)
        else:
            target[index] = value

    def make_record(self) -> dict[str, Any]:
        return {}

    def set_field(self, target: dict[str, Any], key: str, value: Any) -> None:
        target[key] = value

    def make_map(self) -> OrderedMap:
        return OrderedMap()

    def insert_entry(self, target: OrderedMap, key: Any, value: Any) -> None:
        target.insert(key, value)
