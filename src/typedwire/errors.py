"""Exception hierarchy for typedwire.

Every error carries a stable ``code`` so the service layer can map it onto
a :class:`~typedwire.services.result.ServiceError` without string matching.
"""

from __future__ import annotations

from typing import Any, ClassVar


class TypedwireError(Exception):
    """Base class for all codec errors."""

    code: ClassVar[str] = "TYPEDWIRE_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class UnsupportedTypeError(TypedwireError):
    """A value could not be classified into any encodable kind."""

    code = "UNSUPPORTED_TYPE"


class InvalidEnvelopeError(TypedwireError):
    """A value handed to the decoder is not a well-formed envelope."""

    code = "INVALID_ENVELOPE"


class MalformedTextError(TypedwireError):
    """JSON text could not be parsed."""

    code = "MALFORMED_TEXT"

    def __init__(self, message: str, position: int = -1, **detail: Any) -> None:
        super().__init__(message, position=position, **detail)
        self.position = position


class DepthExceededError(TypedwireError):
    """Nesting went past the configured ceiling."""

    code = "DEPTH_EXCEEDED"

    def __init__(self, limit: int) -> None:
        super().__init__(f"Maximum nesting depth {limit} exceeded", limit=limit)
        self.limit = limit


class SerializationError(TypedwireError):
    """A value outside the envelope domain reached the JSON serializer."""

    code = "SERIALIZATION_ERROR"


class BinaryDecodeError(TypedwireError):
    """Text handed to the strict binary decoder is not valid base64."""

    code = "BINARY_DECODE_ERROR"
