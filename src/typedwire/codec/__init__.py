"""Codec entry points.

Data flow::

    value --encode_to_envelope--> envelope --serialize_json--> text
    text  --parse_json--> envelope --decode_from_envelope--> value

:func:`dumps` and :func:`loads` run the whole pipeline.
"""

from __future__ import annotations

from typing import Any

from typedwire.codec.binary import decode_binary, encode_binary
from typedwire.codec.decoder import Decoder
from typedwire.codec.encoder import Encoder
from typedwire.codec.host import HostValueInterface, PythonHost, ValueKind
from typedwire.codec.jsontext import parse_json, serialize_json
from typedwire.config.models import CodecOptions
from typedwire.domain.json_types import Envelope
from typedwire.errors import MalformedTextError

__all__ = [
    "Decoder",
    "Encoder",
    "HostValueInterface",
    "PythonHost",
    "ValueKind",
    "decode_binary",
    "decode_from_envelope",
    "dumps",
    "encode_binary",
    "encode_to_envelope",
    "loads",
    "parse_json",
    "serialize_json",
]


def encode_to_envelope(
    value: Any,
    options: CodecOptions | None = None,
    host: HostValueInterface | None = None,
) -> Envelope:
    """Encode *value* into an envelope (raises UnsupportedTypeError)."""
    return Encoder(options, host).encode(value)


def decode_from_envelope(
    envelope: Any,
    options: CodecOptions | None = None,
    host: HostValueInterface | None = None,
) -> Any:
    """Decode an envelope back into a value (raises InvalidEnvelopeError)."""
    return Decoder(options, host).decode(envelope)


def dumps(value: Any, options: CodecOptions | None = None) -> str:
    """Encode *value* and serialize the envelope to wire text."""
    opts = options or CodecOptions()
    envelope = Encoder(opts).encode(value)
    return serialize_json(envelope, strict=opts.strict_json, max_depth=opts.text_depth_limit)


def loads(text: str, options: CodecOptions | None = None) -> Any:
    """Parse wire text and decode the envelope it holds.

    Raises:
        MalformedTextError: The text holds no JSON object.
        InvalidEnvelopeError: The object is not an envelope.
    """
    opts = options or CodecOptions()
    envelope = parse_json(text, strict=opts.strict_json, max_depth=opts.text_depth_limit)
    if not isinstance(envelope, dict):
        raise MalformedTextError("Wire text does not hold a JSON object", position=0)
    return Decoder(opts).decode(envelope)
