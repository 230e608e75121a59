"""typedwire — type-preserving envelopes for structured values over JSON."""

from typedwire.codec import (
    Decoder,
    Encoder,
    HostValueInterface,
    PythonHost,
    ValueKind,
    decode_binary,
    decode_from_envelope,
    dumps,
    encode_binary,
    encode_to_envelope,
    loads,
    parse_json,
    serialize_json,
)
from typedwire.config.models import CodecOptions
from typedwire.domain.types import UNDEFINED, EnvelopeTag, OrderedMap, UndefinedType
from typedwire.errors import (
    BinaryDecodeError,
    DepthExceededError,
    InvalidEnvelopeError,
    MalformedTextError,
    SerializationError,
    TypedwireError,
    UnsupportedTypeError,
)

__version__ = "0.1.0"

__all__ = [
    "UNDEFINED",
    "BinaryDecodeError",
    "CodecOptions",
    "Decoder",
    "DepthExceededError",
    "Encoder",
    "EnvelopeTag",
    "HostValueInterface",
    "InvalidEnvelopeError",
    "MalformedTextError",
    "OrderedMap",
    "PythonHost",
    "SerializationError",
    "TypedwireError",
    "UndefinedType",
    "UnsupportedTypeError",
    "ValueKind",
    "__version__",
    "decode_binary",
    "decode_from_envelope",
    "dumps",
    "encode_binary",
    "encode_to_envelope",
    "loads",
    "parse_json",
    "serialize_json",
]
