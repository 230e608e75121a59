"""Structured value encoder — native value to envelope tree.

INVARIANT: every envelope produced here is a dict holding the type field
and, except for ``null``/``undefined``, the value field. Nothing else.

Failures at a member (a list element, record field, or map pair) drop that
member and keep going. Only a failure at the root of :meth:`Encoder.encode`
reaches the caller. Depth overruns are never absorbed.
"""

from __future__ import annotations

import logging
from typing import Any

from typedwire.codec.binary import encode_binary
from typedwire.codec.host import HostValueInterface, PythonHost, ValueKind
from typedwire.config.models import CodecOptions
from typedwire.domain.json_types import Envelope, JSONValue
from typedwire.domain.types import EnvelopeTag
from typedwire.errors import DepthExceededError, UnsupportedTypeError

logger = logging.getLogger(__name__)

_PRIMITIVE_TAGS: dict[ValueKind, EnvelopeTag] = {
    ValueKind.BOOL: EnvelopeTag.BOOLEAN,
    ValueKind.NUMBER: EnvelopeTag.NUMBER,
    ValueKind.TEXT: EnvelopeTag.STRING,
}


class Encoder:
    """Encode host values into envelopes.

    Instances hold only their options and host, so one encoder can be
    shared freely between threads.
    """

    def __init__(
        self,
        options: CodecOptions | None = None,
        host: HostValueInterface | None = None,
    ) -> None:
        self.options = options or CodecOptions()
        self.host = host or PythonHost(encode_array_like=self.options.encode_array_like)

    def encode(self, value: Any) -> Envelope:
        """Encode *value* into an envelope tree.

        Raises:
            UnsupportedTypeError: *value* itself cannot be classified.
            DepthExceededError: Nesting exceeds ``options.max_depth``.
        """
        return self._encode(value, 0)

    # ── dispatch ─────────────────────────────────────────────────────

    def _envelope(
        self, tag: EnvelopeTag, payload: JSONValue = None, *, valued: bool = True
    ) -> Envelope:
        env: Envelope = {self.options.type_key: tag.value}
        if valued:
            env[self.options.value_key] = payload
        return env

    def _encode(self, value: Any, depth: int) -> Envelope:
        kind = self.host.classify(value)

        if kind is ValueKind.NULL:
            return self._envelope(EnvelopeTag.NULL, valued=False)
        if kind is ValueKind.UNDEFINED:
            return self._envelope(EnvelopeTag.UNDEFINED, valued=False)

        tag = _PRIMITIVE_TAGS.get(kind)
        if tag is not None:
            return self._envelope(tag, self.host.read_primitive(value))

        if kind is ValueKind.BLOB:
            return self._envelope(EnvelopeTag.BINARY, encode_binary(self.host.read_blob(value)))

        if kind is ValueKind.ORDERED_MAP:
            self._check_depth(depth)
            return self._encode_map(value, depth)
        if kind is ValueKind.LIST:
            self._check_depth(depth)
            return self._encode_list(value, depth)
        if kind is ValueKind.RECORD:
            self._check_depth(depth)
            return self._encode_record(value, depth)

        raise UnsupportedTypeError(
            f"Unsupported type: {type(value).__name__}", python_type=type(value).__name__
        )

    def _check_depth(self, depth: int) -> None:
        limit = self.options.max_depth
        if limit is not None and depth >= limit:
            raise DepthExceededError(limit)

    def _encode_member(self, value: Any, depth: int, where: str) -> Envelope | None:
        """Encode a container member, returning None if it must be dropped."""
        try:
            return self._encode(value, depth)
        except UnsupportedTypeError as exc:
            logger.debug("Dropping %s: %s", where, exc.message)
            return None

    # ── containers ───────────────────────────────────────────────────

    def _encode_map(self, value: Any, depth: int) -> Envelope:
        pairs: list[JSONValue] = []
        for i, (key, item) in enumerate(self.host.iterate_map_entries(value)):
            enc_key = self._encode_member(key, depth + 1, f"map key #{i}")
            if enc_key is None:
                continue
            enc_item = self._encode_member(item, depth + 1, f"map value #{i}")
            if enc_item is None:
                continue
            pairs.append([enc_key, enc_item])
        return self._envelope(EnvelopeTag.MAP, pairs)

    def _encode_list(self, value: Any, depth: int) -> Envelope:
        items: list[JSONValue] = []
        for i, item in enumerate(self.host.iterate_list(value)):
            encoded = self._encode_member(item, depth + 1, f"element [{i}]")
            if encoded is not None:
                items.append(encoded)
        return self._envelope(EnvelopeTag.ARRAY, items)

    def _encode_record(self, value: Any, depth: int) -> Envelope:
        fields: dict[str, JSONValue] = {}
        for key in self.host.own_keys(value):
            item = self.host.read_field(value, key)
            encoded = self._encode_member(item, depth + 1, f"field {key!r}")
            if encoded is not None:
                fields[key] = encoded
        return self._envelope(EnvelopeTag.OBJECT, fields)
