"""Canonical JSON text codec for envelope trees.

The serializer emits compact JSON with no insignificant whitespace and
integral numbers written as integer literals. The parser is a recursive
descent over the JSON grammar with two error policies:

* lenient (default): a malformed token stops consumption and the current
  node is returned as built so far. Members whose value cannot be parsed
  are left out, trailing text is ignored, and input with no recognizable
  value yields ``None``.
* strict: the first malformed token raises :class:`MalformedTextError`.

``\\uXXXX`` escapes are honoured only up to U+007F; higher code points are
dropped in both modes. Non-ASCII text travels as raw characters, so text
written by :func:`serialize_json` never hits that limit.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Final

from typedwire.domain.types import UndefinedType
from typedwire.errors import DepthExceededError, MalformedTextError, SerializationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_TEXT_DEPTH: Final = 385

_WHITESPACE: Final = frozenset(" \t\n\r")

_ESCAPES: dict[str, str] = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_UNESCAPES: dict[str, str] = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Greedy scan: everything that could belong to a number token.
_NUMBER_SCAN = re.compile(r"-?(?:0|[1-9][0-9]*)?(?:\.[0-9]*)?(?:[eE][+-]?[0-9]*)?")
# What a strict parser accepts as a whole token.
_NUMBER_STRICT = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
# Longest convertible prefix of a sloppy token.
_NUMBER_PREFIX = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_PREFIX = re.compile(r"[0-9a-fA-F]*")

_NOTHING: Final = object()


# ── Serialize ────────────────────────────────────────────────────────


def escape_string(text: str) -> str:
    """Quote *text* as a JSON string literal."""
    out = ['"']
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def format_number(value: int | float, *, strict: bool = False) -> str:
    """Render a number, using an integer literal when it is integral."""
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError as exc:
            raise SerializationError(
                f"Integer with {value.bit_length()} bits exceeds the digit conversion limit"
            ) from exc
    if not math.isfinite(value):
        if strict:
            raise SerializationError(f"Cannot serialize non-finite number {value!r}")
        return "null"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def serialize_json(
    value: Any,
    *,
    strict: bool = False,
    max_depth: int | None = DEFAULT_MAX_TEXT_DEPTH,
) -> str:
    """Serialize an envelope-domain value to canonical JSON text.

    Raises:
        SerializationError: For non-``str`` keys, or (strict mode) for any
            value outside the envelope domain.
        DepthExceededError: When nesting exceeds *max_depth*.
    """
    parts: list[str] = []
    _write(value, parts, strict=strict, max_depth=max_depth, depth=0)
    return "".join(parts)


def _write(
    value: Any,
    parts: list[str],
    *,
    strict: bool,
    max_depth: int | None,
    depth: int,
) -> None:
    if value is None:
        parts.append("null")
    elif isinstance(value, bool):
        parts.append("true" if value else "false")
    elif isinstance(value, (int, float)):
        parts.append(format_number(value, strict=strict))
    elif isinstance(value, str):
        parts.append(escape_string(value))
    elif isinstance(value, (list, tuple)):
        if max_depth is not None and depth >= max_depth:
            raise DepthExceededError(max_depth)
        parts.append("[")
        for i, item in enumerate(value):
            if i:
                parts.append(",")
            _write(item, parts, strict=strict, max_depth=max_depth, depth=depth + 1)
        parts.append("]")
    elif isinstance(value, dict):
        if max_depth is not None and depth >= max_depth:
            raise DepthExceededError(max_depth)
        parts.append("{")
        first = True
        for key, item in value.items():
            if not isinstance(key, str):
                raise SerializationError(f"Object keys must be str, got {type(key).__name__}")
            if not first:
                parts.append(",")
            first = False
            parts.append(escape_string(key))
            parts.append(":")
            _write(item, parts, strict=strict, max_depth=max_depth, depth=depth + 1)
        parts.append("}")
    else:
        if strict:
            kind = "undefined" if isinstance(value, UndefinedType) else type(value).__name__
            raise SerializationError(f"Value of type {kind} is not JSON-representable")
        parts.append("null")


# ── Parse ────────────────────────────────────────────────────────────


def parse_json(
    text: str,
    *,
    strict: bool = False,
    max_depth: int | None = DEFAULT_MAX_TEXT_DEPTH,
) -> Any:
    """Parse JSON *text* into ``None``/bool/int/float/str/list/dict values.

    In lenient mode returns ``None`` when no value could be recognized; a
    literal ``null`` document also returns ``None``, so callers that must
    tell the two apart should use strict mode.

    Raises:
        MalformedTextError: Strict mode only, on any grammar violation.
        DepthExceededError: When nesting exceeds *max_depth*.
    """
    parser = _Parser(text, strict=strict, max_depth=max_depth)
    return parser.parse_document()


class _Parser:
    """Single-use recursive-descent parser over one text."""

    def __init__(self, text: str, *, strict: bool, max_depth: int | None) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.strict = strict
        self.max_depth = max_depth

    def parse_document(self) -> Any:
        value = self.parse_value(0)
        if value is _NOTHING:
            self.fail("Expected a JSON value")
            logger.debug("No JSON value recognized at offset %d", self.pos)
            return None
        if self.strict:
            self.skip_whitespace()
            if self.pos < self.length:
                self.fail("Unexpected trailing characters")
        return value

    # -- helpers --

    def fail(self, message: str) -> None:
        """Raise in strict mode; lenient callers fall through and stop."""
        if self.strict:
            raise MalformedTextError(f"{message} at offset {self.pos}", position=self.pos)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < self.length else ""

    def skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def match_literal(self, literal: str) -> bool:
        if self.text.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def enter(self, depth: int) -> None:
        if self.max_depth is not None and depth >= self.max_depth:
            raise DepthExceededError(self.max_depth)

    # -- grammar --

    def parse_value(self, depth: int) -> Any:
        self.skip_whitespace()
        if self.pos >= self.length:
            return _NOTHING

        ch = self.text[self.pos]
        if ch == "n" and self.match_literal("null"):
            return None
        if ch == "t" and self.match_literal("true"):
            return True
        if ch == "f" and self.match_literal("false"):
            return False
        if ch == '"':
            return self.parse_string()
        if ch == "-" or "0" <= ch <= "9":
            return self.parse_number()
        if ch == "[":
            return self.parse_array(depth)
        if ch == "{":
            return self.parse_object(depth)
        return _NOTHING

    def parse_string(self) -> str:
        text = self.text
        self.pos += 1  # opening quote
        out: list[str] = []
        while self.pos < self.length and text[self.pos] != '"':
            ch = text[self.pos]
            if ch == "\\" and self.pos + 1 < self.length:
                self.pos += 1
                esc = text[self.pos]
                if esc == "u":
                    self._parse_unicode_escape(out)
                elif esc in _UNESCAPES:
                    out.append(_UNESCAPES[esc])
                else:
                    self.fail(f"Invalid escape \\{esc}")
                    out.append(esc)
            else:
                if self.strict and (ch == "\\" or ord(ch) < 0x20):
                    self.fail("Invalid character in string")
                out.append(ch)
            self.pos += 1

        if self.pos < self.length:
            self.pos += 1  # closing quote
        else:
            self.fail("Unterminated string")
        return "".join(out)

    def _parse_unicode_escape(self, out: list[str]) -> None:
        # self.pos sits on the 'u'; leaves it on the last consumed character.
        digits = self.text[self.pos + 1 : self.pos + 5]
        if len(digits) < 4:
            self.fail("Truncated \\u escape")
            return
        hex_part = _HEX_PREFIX.match(digits).group()  # type: ignore[union-attr]
        if len(hex_part) < 4:
            self.fail("Invalid \\u escape")
        code_point = int(hex_part, 16) if hex_part else 0
        if code_point <= 0x7F:
            out.append(chr(code_point))
        self.pos += 4

    def parse_number(self) -> int | float:
        start = self.pos
        token = _NUMBER_SCAN.match(self.text, start).group()  # type: ignore[union-attr]
        self.pos = start + len(token)

        if self.strict:
            if not _NUMBER_STRICT.fullmatch(token):
                self.pos = start
                self.fail(f"Invalid number {token!r}")
            try:
                return _to_number(token, exact=True)
            except ValueError as exc:
                raise MalformedTextError(
                    f"Integer literal of {len(token)} digits exceeds the conversion limit"
                    f" at offset {start}",
                    position=start,
                ) from exc

        prefix = _NUMBER_PREFIX.match(token)
        if prefix is None:
            return 0
        return _to_number(prefix.group())

    def parse_array(self, depth: int) -> list[Any]:
        self.enter(depth)
        self.pos += 1  # '['
        self.skip_whitespace()
        items: list[Any] = []
        if self.peek() == "]":
            self.pos += 1
            return items

        while self.pos < self.length:
            item = self.parse_value(depth + 1)
            if item is _NOTHING:
                self.fail("Expected a value in array")
            else:
                items.append(item)
            self.skip_whitespace()
            ch = self.peek()
            if ch == ",":
                self.pos += 1
                self.skip_whitespace()
            elif ch == "]":
                self.pos += 1
                return items
            else:
                break
        self.fail("Expected ',' or ']'")
        return items

    def parse_object(self, depth: int) -> dict[str, Any]:
        self.enter(depth)
        self.pos += 1  # '{'
        self.skip_whitespace()
        members: dict[str, Any] = {}
        if self.peek() == "}":
            self.pos += 1
            return members

        while self.pos < self.length:
            self.skip_whitespace()
            if self.peek() != '"':
                self.fail("Expected a string key")
                return members
            key = self.parse_string()
            self.skip_whitespace()
            if self.peek() != ":":
                self.fail("Expected ':'")
                return members
            self.pos += 1

            value = self.parse_value(depth + 1)
            if value is _NOTHING:
                self.fail("Expected a value in object")
            else:
                members[key] = value
            self.skip_whitespace()
            ch = self.peek()
            if ch == ",":
                self.pos += 1
                self.skip_whitespace()
            elif ch == "}":
                self.pos += 1
                return members
            else:
                break
        self.fail("Expected ',' or '}'")
        return members


def _to_number(token: str, *, exact: bool = False) -> int | float:
    if any(c in token for c in ".eE"):
        return float(token)
    try:
        return int(token)
    except ValueError:
        # Past sys.get_int_max_str_digits(); float() has no such limit.
        if exact:
            raise
        return float(token)
