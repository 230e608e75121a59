"""CodecService — file- and text-level encode/decode for the CLI.

Plain JSON documents come in through :mod:`json` (they are arbitrary user
input); envelope text goes through the canonical codec in
:mod:`typedwire.codec.jsontext`.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from typedwire.codec.binary import decode_binary, encode_binary
from typedwire.codec.decoder import Decoder
from typedwire.codec.encoder import Encoder
from typedwire.codec.jsontext import parse_json, serialize_json
from typedwire.config.models import CodecOptions, OutputConfig
from typedwire.domain.types import EnvelopeTag, OrderedMap, UndefinedType
from typedwire.errors import (
    DepthExceededError,
    InvalidEnvelopeError,
    MalformedTextError,
    TypedwireError,
)
from typedwire.services.result import ServiceResult
from typedwire.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class CodecService:
    """Text and file operations over one set of codec options."""

    def __init__(
        self,
        options: CodecOptions | None = None,
        output: OutputConfig | None = None,
    ) -> None:
        self._options = options or CodecOptions()
        self._output = output or OutputConfig()
        self._encoder = Encoder(self._options)
        self._decoder = Decoder(self._options)

    # ── envelopes ────────────────────────────────────────────────────

    @traced
    def encode_text(self, text: str, *, blob_prefix: str | None = None) -> ServiceResult:
        """Encode a plain JSON document into envelope wire text.

        With *blob_prefix*, strings starting with the prefix are treated as
        base64 blobs (``"base64:AAEC"`` becomes a ``binary`` envelope).
        """
        op = "encode"
        try:
            with trace_span("load_json"):
                document = json.loads(text)
        except json.JSONDecodeError as exc:
            return ServiceResult.failure(
                op,
                "INVALID_JSON",
                f"Input is not valid JSON: {exc.msg}",
                line=exc.lineno,
                column=exc.colno,
            )
        except ValueError as exc:
            # Integer literals past the interpreter's digit limit
            return ServiceResult.failure(op, "INVALID_JSON", f"Input is not valid JSON: {exc}")

        try:
            if blob_prefix:
                document = self._apply_blob_prefix(document, blob_prefix)
            with trace_span("encode"):
                envelope = self._encoder.encode(document)
            with trace_span("serialize") as span:
                content = self._serialize(envelope)
                if span:
                    span.annotate("chars", len(content))
        except TypedwireError as exc:
            return ServiceResult.from_exception(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={"content": content, "root": envelope[self._options.type_key]},
        )

    @traced
    def decode_text(self, text: str) -> ServiceResult:
        """Decode envelope wire text into a plain JSON rendering.

        Blobs render as base64 strings, maps as ``[key, value]`` pair lists,
        and undefined as ``null``.
        """
        op = "decode"
        warnings: list[str] = []
        try:
            envelope = self._parse_envelope(text, warnings)
            root = self._decoder.resolve_tag(envelope)
            with trace_span("decode"):
                value = self._decoder.decode(envelope)
        except TypedwireError as exc:
            return ServiceResult.from_exception(op, exc)

        plain = to_plain(value)
        if self._output.pretty:
            content = json.dumps(plain, ensure_ascii=False, indent=self._output.indent)
        else:
            content = json.dumps(plain, ensure_ascii=False, separators=(",", ":"))

        return ServiceResult(
            ok=True,
            op=op,
            data={"content": content, "root": root.value},
            warnings=warnings,
        )

    @traced
    def inspect_text(self, text: str) -> ServiceResult:
        """Summarize the tag tree of envelope wire text without decoding it."""
        op = "inspect"
        warnings: list[str] = []
        try:
            envelope = self._parse_envelope(text, warnings)
            root = self._decoder.resolve_tag(envelope)
            stats = _TreeStats()
            with trace_span("walk"):
                self._walk(envelope, 0, stats)
        except TypedwireError as exc:
            return ServiceResult.from_exception(op, exc)

        if stats.invalid:
            warnings.append(f"{stats.invalid} member(s) are not valid envelopes")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": root.value,
                "envelopes": sum(stats.tags.values()),
                "invalid": stats.invalid,
                "depth": stats.depth,
                "tags": dict(sorted(stats.tags.items())),
            },
            warnings=warnings,
        )

    # ── binary ───────────────────────────────────────────────────────

    @traced
    def encode_binary_file(self, path: Path) -> ServiceResult:
        """Read *path* and return its bytes as base64 text."""
        op = "binary_encode"
        try:
            raw = path.read_bytes()
        except OSError as exc:
            return ServiceResult.failure(op, "IO_ERROR", f"Cannot read {path}: {exc.strerror}")
        return ServiceResult(
            ok=True,
            op=op,
            data={"content": encode_binary(raw), "size": len(raw), "path": str(path)},
        )

    @traced
    def decode_binary_text(self, text: str) -> ServiceResult:
        """Decode base64 *text*; the bytes are returned in ``data["content"]``."""
        op = "binary_decode"
        try:
            raw = decode_binary(text.strip(), strict=self._options.strict_binary)
        except TypedwireError as exc:
            return ServiceResult.from_exception(op, exc)
        return ServiceResult(ok=True, op=op, data={"content": raw, "size": len(raw)})

    # ── Private helpers ──────────────────────────────────────────────

    def _serialize(self, envelope: Any) -> str:
        return serialize_json(
            envelope,
            strict=self._options.strict_json,
            max_depth=self._options.text_depth_limit,
        )

    def _parse_envelope(self, text: str, warnings: list[str]) -> dict[str, Any]:
        strict = self._options.strict_json
        with trace_span("parse"):
            envelope = parse_json(text, strict=strict, max_depth=self._options.text_depth_limit)
        if not isinstance(envelope, dict):
            raise MalformedTextError("Input does not hold an envelope object", position=0)

        if not strict:
            try:
                parse_json(text, strict=True, max_depth=self._options.text_depth_limit)
            except MalformedTextError as exc:
                logger.debug("Lenient parse recovered from: %s", exc.message)
                warnings.append(f"Input is malformed ({exc.message}); result is best-effort")
        return envelope

    def _apply_blob_prefix(self, value: Any, prefix: str) -> Any:
        if isinstance(value, str) and value.startswith(prefix):
            return decode_binary(value[len(prefix) :], strict=self._options.strict_binary)
        if isinstance(value, list):
            return [self._apply_blob_prefix(item, prefix) for item in value]
        if isinstance(value, dict):
            return {k: self._apply_blob_prefix(v, prefix) for k, v in value.items()}
        return value

    def _walk(self, envelope: Any, depth: int, stats: _TreeStats) -> None:
        limit = self._options.max_depth
        if limit is not None and depth > limit:
            raise DepthExceededError(limit)
        try:
            tag = self._decoder.resolve_tag(envelope)
        except InvalidEnvelopeError:
            stats.invalid += 1
            return

        stats.tags[tag.value] += 1
        stats.depth = max(stats.depth, depth)
        payload = envelope.get(self._options.value_key)

        if tag is EnvelopeTag.ARRAY and isinstance(payload, list):
            for item in payload:
                self._walk(item, depth + 1, stats)
        elif tag is EnvelopeTag.OBJECT and isinstance(payload, dict):
            for item in payload.values():
                self._walk(item, depth + 1, stats)
        elif tag is EnvelopeTag.MAP and isinstance(payload, list):
            for pair in payload:
                if isinstance(pair, list) and len(pair) == 2:
                    self._walk(pair[0], depth + 1, stats)
                    self._walk(pair[1], depth + 1, stats)
                else:
                    stats.invalid += 1


@dataclass
class _TreeStats:
    tags: Counter[str] = field(default_factory=Counter)
    invalid: int = 0
    depth: int = 0


def to_plain(value: Any) -> Any:
    """Render a decoded value with only JSON types.

    Lossy by nature: the envelope form is the lossless one.
    """
    if isinstance(value, UndefinedType):
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return encode_binary(value)
    if isinstance(value, OrderedMap):
        return [[to_plain(k), to_plain(v)] for k, v in value]
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    if isinstance(value, dict):
        return {
            str(k): to_plain(v) for k, v in value.items() if not isinstance(v, UndefinedType)
        }
    return value
