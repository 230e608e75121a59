"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, typedwire.toml only contains
overrides. An empty file (or none at all) gives the lenient codec.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field, model_validator

from typedwire.domain.types import DEFAULT_TYPE_KEY, DEFAULT_VALUE_KEY

# --- typedwire.toml sections ---


class CodecOptions(BaseModel):
    """[codec] section. Also passed directly to the library entry points.

    Attributes:
        type_key: Envelope field holding the tag.
        value_key: Envelope field holding the payload.
        max_depth: Ceiling on value nesting for encode/decode (None disables).
        max_text_depth: Ceiling on JSON text nesting. Left unset it is
            derived from max_depth (see text_depth_limit); an explicit value
            must leave room for a value nested to max_depth.
        drop_undefined_fields: Drop record fields that decode to UNDEFINED.
        encode_array_like: Encode non-list sequences (``range``, custom
            ``Sequence`` types) as arrays rather than rejecting them.
        accept_legacy_tags: Accept ``Buffer``/``Array``/``Object``/``Map`` tags.
        strict_binary: Reject non-canonical base64 payloads.
        strict_json: Raise on malformed JSON text instead of truncating.
        strict_envelopes: Raise on payloads whose shape does not match the tag.
    """

    model_config = {"frozen": True}

    type_key: str = Field(default=DEFAULT_TYPE_KEY, min_length=1)
    value_key: str = Field(default=DEFAULT_VALUE_KEY, min_length=1)
    max_depth: int | None = Field(default=128, ge=1)
    max_text_depth: int | None = Field(default=None, ge=1)
    drop_undefined_fields: bool = True
    encode_array_like: bool = True
    accept_legacy_tags: bool = True
    strict_binary: bool = False
    strict_json: bool = False
    strict_envelopes: bool = False

    @model_validator(mode="after")
    def _distinct_keys(self) -> Self:
        if self.type_key == self.value_key:
            msg = "type_key and value_key must differ"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def _text_depth_fits(self) -> Self:
        floor = _text_depth_for(self.max_depth)
        if self.max_text_depth is not None and floor is not None and self.max_text_depth < floor:
            msg = f"max_text_depth must be at least {floor} when max_depth is {self.max_depth}"
            raise ValueError(msg)
        return self

    @property
    def text_depth_limit(self) -> int | None:
        """JSON text ceiling handed to the parser and serializer."""
        if self.max_text_depth is not None:
            return self.max_text_depth
        return _text_depth_for(self.max_depth)

    @classmethod
    def strict(cls, **overrides: object) -> CodecOptions:
        """Options with every strict switch turned on."""
        values: dict[str, object] = {
            "strict_binary": True,
            "strict_json": True,
            "strict_envelopes": True,
        }
        values.update(overrides)
        return cls.model_validate(values)


def _text_depth_for(max_depth: int | None) -> int | None:
    # A value at depth d sits at text depth 3d: envelope, payload list, pair list.
    return None if max_depth is None else 3 * max_depth + 1


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    pretty: bool = False
    indent: int = Field(default=2, ge=0)


class TypedwireConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    codec: CodecOptions = Field(default_factory=CodecOptions)
    output: OutputConfig = Field(default_factory=OutputConfig)
