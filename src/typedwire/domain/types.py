"""Envelope tags and the value types plain JSON has no shape for.

The tag set is closed: a decoder may rely on nothing but the type field
carrying one of the :class:`EnvelopeTag` values.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import StrEnum
from typing import Any, Final

DEFAULT_TYPE_KEY: Final = "type"
DEFAULT_VALUE_KEY: Final = "value"


class EnvelopeTag(StrEnum):
    """Type tags carried by every envelope."""

    NULL = "null"
    UNDEFINED = "undefined"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    BINARY = "binary"
    ARRAY = "array"
    OBJECT = "object"
    MAP = "map"


# Tags that never carry a value field.
VALUELESS_TAGS: frozenset[EnvelopeTag] = frozenset({EnvelopeTag.NULL, EnvelopeTag.UNDEFINED})

# Spellings used by the older ``$type``/``$value`` wire form.
LEGACY_TAG_ALIASES: dict[str, EnvelopeTag] = {
    "Buffer": EnvelopeTag.BINARY,
    "Array": EnvelopeTag.ARRAY,
    "Object": EnvelopeTag.OBJECT,
    "Map": EnvelopeTag.MAP,
}


class UndefinedType:
    """Type of the :data:`UNDEFINED` sentinel, distinct from ``None``."""

    _instance: UndefinedType | None = None

    def __new__(cls) -> UndefinedType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = UndefinedType()


class OrderedMap:
    """Insertion-ordered key/value pairs with keys of any type.

    Unlike a ``dict``, keys need not be hashable and duplicate keys are
    kept positionally. Equality compares the pair sequence, so order
    matters.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[tuple[Any, Any]] = ()) -> None:
        self._entries: list[tuple[Any, Any]] = [(k, v) for k, v in entries]

    def insert(self, key: Any, value: Any) -> None:
        """Append a pair, keeping any earlier pair with an equal key."""
        self._entries.append((key, value))

    def entries(self) -> list[tuple[Any, Any]]:
        return list(self._entries)

    def keys(self) -> list[Any]:
        return [k for k, _ in self._entries]

    def values(self) -> list[Any]:
        return [v for _, v in self._entries]

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the value of the first pair whose key equals *key*."""
        for k, v in self._entries:
            if k == key:
                return v
        return default

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderedMap):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"OrderedMap({self._entries!r})"
