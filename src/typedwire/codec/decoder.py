"""Structured value decoder — envelope tree back to native values.

Only the root can fail: a missing or unknown tag, or a missing payload,
raises :class:`InvalidEnvelopeError` there. The same faults inside a
container drop the offending member. Once a container tag is recognized
the decoder always produces a container, empty if the payload is unusable
(strict mode raises instead).
"""

from __future__ import annotations

import logging
from typing import Any

from typedwire.codec.binary import decode_binary
from typedwire.codec.host import HostValueInterface, PythonHost
from typedwire.config.models import CodecOptions
from typedwire.domain.types import LEGACY_TAG_ALIASES, EnvelopeTag
from typedwire.errors import DepthExceededError, InvalidEnvelopeError, TypedwireError

logger = logging.getLogger(__name__)

_PRIMITIVE_CHECKS: dict[EnvelopeTag, tuple[type, ...]] = {
    EnvelopeTag.NUMBER: (int, float),
    EnvelopeTag.STRING: (str,),
    EnvelopeTag.BOOLEAN: (bool,),
}


class Decoder:
    """Decode envelopes into host values."""

    def __init__(
        self,
        options: CodecOptions | None = None,
        host: HostValueInterface | None = None,
    ) -> None:
        self.options = options or CodecOptions()
        self.host = host or PythonHost(encode_array_like=self.options.encode_array_like)

    def decode(self, envelope: Any) -> Any:
        """Decode *envelope* into a host value.

        Raises:
            InvalidEnvelopeError: *envelope* is not a well-formed envelope.
            DepthExceededError: Nesting exceeds ``options.max_depth``.
        """
        return self._decode(envelope, 0)

    def resolve_tag(self, envelope: Any) -> EnvelopeTag:
        """Return the tag of *envelope*, or raise InvalidEnvelopeError."""
        if not isinstance(envelope, dict):
            raise InvalidEnvelopeError(
                f"Invalid encoded object: expected an object, got {type(envelope).__name__}"
            )
        type_key = self.options.type_key
        if type_key not in envelope:
            raise InvalidEnvelopeError(f"Invalid encoded object: missing {type_key!r} field")

        raw = envelope[type_key]
        if not isinstance(raw, str):
            raise InvalidEnvelopeError(f"Invalid encoded object: {type_key!r} must be a string")
        try:
            return EnvelopeTag(raw)
        except ValueError:
            pass
        if self.options.accept_legacy_tags and raw in LEGACY_TAG_ALIASES:
            return LEGACY_TAG_ALIASES[raw]
        raise InvalidEnvelopeError(f"Unknown type tag: {raw!r}", tag=raw)

    # ── dispatch ─────────────────────────────────────────────────────

    def _decode(self, envelope: Any, depth: int) -> Any:
        tag = self.resolve_tag(envelope)
        host = self.host

        if tag is EnvelopeTag.NULL:
            return host.make_null()
        if tag is EnvelopeTag.UNDEFINED:
            return host.make_undefined()

        value_key = self.options.value_key
        if value_key not in envelope:
            raise InvalidEnvelopeError(
                f"Invalid encoded object: {tag.value!r} envelope missing {value_key!r} field",
                tag=tag.value,
            )
        payload = envelope[value_key]

        expected = _PRIMITIVE_CHECKS.get(tag)
        if expected is not None:
            if self.options.strict_envelopes and not _is_instance(payload, tag, expected):
                raise InvalidEnvelopeError(
                    f"{tag.value!r} envelope carries {type(payload).__name__}", tag=tag.value
                )
            return host.make_primitive(payload)

        if tag is EnvelopeTag.BINARY:
            if not isinstance(payload, str):
                self._shape_error(tag, payload)
                return host.make_blob(b"")
            return host.make_blob(decode_binary(payload, strict=self.options.strict_binary))

        self._check_depth(depth)
        if tag is EnvelopeTag.ARRAY:
            return self._decode_array(payload, depth)
        if tag is EnvelopeTag.OBJECT:
            return self._decode_object(payload, depth)
        return self._decode_map(payload, depth)

    def _check_depth(self, depth: int) -> None:
        limit = self.options.max_depth
        if limit is not None and depth >= limit:
            raise DepthExceededError(limit)

    def _shape_error(self, tag: EnvelopeTag, payload: Any) -> None:
        """Raise in strict mode; lenient callers substitute an empty value."""
        if self.options.strict_envelopes:
            raise InvalidEnvelopeError(
                f"{tag.value!r} envelope carries {type(payload).__name__}", tag=tag.value
            )
        logger.debug("Ignoring %s payload of %r envelope", type(payload).__name__, tag.value)

    def _decode_member(self, envelope: Any, depth: int, where: str) -> tuple[bool, Any]:
        """Decode a container member; ``(False, None)`` means drop it."""
        try:
            return True, self._decode(envelope, depth)
        except DepthExceededError:
            raise
        except TypedwireError as exc:
            if self.options.strict_envelopes:
                raise
            logger.debug("Dropping %s: %s", where, exc.message)
            return False, None

    # ── containers ───────────────────────────────────────────────────

    def _decode_array(self, payload: Any, depth: int) -> Any:
        if not isinstance(payload, list):
            self._shape_error(EnvelopeTag.ARRAY, payload)
            return self.host.make_list(0)

        result = self.host.make_list(len(payload))
        index = 0
        for i, item in enumerate(payload):
            ok, value = self._decode_member(item, depth + 1, f"element [{i}]")
            if ok:
                self.host.set_index(result, index, value)
                index += 1
        return result

    def _decode_object(self, payload: Any, depth: int) -> Any:
        result = self.host.make_record()
        if not isinstance(payload, dict):
            self._shape_error(EnvelopeTag.OBJECT, payload)
            return result

        drop_undefined = self.options.drop_undefined_fields
        for key, item in payload.items():
            if drop_undefined and self._is_undefined(item):
                continue
            ok, value = self._decode_member(item, depth + 1, f"field {key!r}")
            if ok:
                self.host.set_field(result, key, value)
        return result

    def _decode_map(self, payload: Any, depth: int) -> Any:
        result = self.host.make_map()
        if not isinstance(payload, list):
            self._shape_error(EnvelopeTag.MAP, payload)
            return result

        for i, pair in enumerate(payload):
            if not isinstance(pair, list) or len(pair) != 2:
                self._shape_error(EnvelopeTag.MAP, pair)
                continue
            ok_key, key = self._decode_member(pair[0], depth + 1, f"map key #{i}")
            ok_value, value = self._decode_member(pair[1], depth + 1, f"map value #{i}")
            if ok_key and ok_value:
                self.host.insert_entry(result, key, value)
        return result

    def _is_undefined(self, envelope: Any) -> bool:
        if not isinstance(envelope, dict):
            return False
        try:
            return self.resolve_tag(envelope) is EnvelopeTag.UNDEFINED
        except InvalidEnvelopeError:
            return False


def _is_instance(payload: Any, tag: EnvelopeTag, expected: tuple[type, ...]) -> bool:
    if tag is EnvelopeTag.NUMBER and isinstance(payload, bool):
        return False
    return isinstance(payload, expected)
