"""Byte <-> text transform over the standard base64 alphabet.

The decoder is lenient by default: characters outside the alphabet are
skipped and truncated groups yield whatever whole bytes they carry.
Strict mode rejects anything that is not canonical base64.
"""

from __future__ import annotations

from typing import Final

from typedwire.errors import BinaryDecodeError

ALPHABET: Final = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
PAD: Final = "="

_INDEX: dict[str, int] = {ch: i for i, ch in enumerate(ALPHABET)}


def encode_binary(data: bytes | bytearray | memoryview) -> str:
    """Encode *data* as base64 text, padding the last group with ``=``."""
    raw = bytes(data)
    n = len(raw)
    if n == 0:
        return ""

    out: list[str] = []
    for i in range(0, n, 3):
        value = raw[i] << 16
        if i + 1 < n:
            value |= raw[i + 1] << 8
        if i + 2 < n:
            value |= raw[i + 2]

        out.append(ALPHABET[(value >> 18) & 0x3F])
        out.append(ALPHABET[(value >> 12) & 0x3F])
        out.append(ALPHABET[(value >> 6) & 0x3F] if i + 1 < n else PAD)
        out.append(ALPHABET[value & 0x3F] if i + 2 < n else PAD)
    return "".join(out)


def decode_binary(text: str, *, strict: bool = False) -> bytes:
    """Decode base64 *text* back to bytes.

    Input is consumed in groups of four character positions. Within a
    group, ``=`` ends the group and unknown characters are passed over.
    A group with at least two valid characters yields ``valid - 1`` bytes.

    Raises:
        BinaryDecodeError: In strict mode, when *text* is not canonical base64.
    """
    if strict:
        _validate(text)
    if not text:
        return b""

    result = bytearray()
    n = len(text)
    for i in range(0, n, 4):
        value = 0
        valid = 0
        for j in range(min(4, n - i)):
            ch = text[i + j]
            if ch == PAD:
                break
            index = _INDEX.get(ch)
            if index is None:
                continue
            value = (value << 6) | index
            valid += 1

        if valid < 2:
            continue
        value <<= (4 - valid) * 6
        result.append((value >> 16) & 0xFF)
        if valid >= 3:
            result.append((value >> 8) & 0xFF)
        if valid >= 4:
            result.append(value & 0xFF)
    return bytes(result)


def _validate(text: str) -> None:
    if len(text) % 4:
        raise BinaryDecodeError(
            f"Base64 text length {len(text)} is not a multiple of 4", length=len(text)
        )
    for pos, ch in enumerate(text):
        if ch == PAD:
            continue
        if ch not in _INDEX:
            raise BinaryDecodeError(f"Invalid base64 character {ch!r} at {pos}", position=pos)

    body = text.rstrip(PAD)
    pad_count = len(text) - len(body)
    if pad_count > 2 or PAD in body:
        raise BinaryDecodeError("Misplaced base64 padding", position=text.find(PAD))
