"""Tests for the structured value encoder."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from typedwire.codec import encode_to_envelope
from typedwire.codec.encoder import Encoder
from typedwire.config.models import CodecOptions
from typedwire.domain.types import UNDEFINED, OrderedMap
from typedwire.errors import DepthExceededError, UnsupportedTypeError
from tests.conftest import env, num, text


@dataclass
class Point:
    x: int
    y: int


class TestPrimitives:
    def test_null(self) -> None:
        assert encode_to_envelope(None) == {"type": "null"}

    def test_undefined(self) -> None:
        assert encode_to_envelope(UNDEFINED) == {"type": "undefined"}

    def test_number(self) -> None:
        assert encode_to_envelope(3) == num(3)
        assert encode_to_envelope(2.5) == num(2.5)

    def test_bool_is_not_number(self) -> None:
        assert encode_to_envelope(True) == env("boolean", True)
        assert encode_to_envelope(False) == env("boolean", False)

    def test_string(self) -> None:
        assert encode_to_envelope("hi") == text("hi")
        assert encode_to_envelope("") == text("")

    def test_blob(self) -> None:
        assert encode_to_envelope(b"\x00\x01\x02") == env("binary", "AAEC")

    def test_empty_blob(self) -> None:
        assert encode_to_envelope(b"") == env("binary", "")

    def test_bytearray_blob(self) -> None:
        assert encode_to_envelope(bytearray(b"foo")) == env("binary", "Zm9v")


class TestContainers:
    def test_list(self) -> None:
        assert encode_to_envelope([1, "a", None]) == env(
            "array", [num(1), text("a"), {"type": "null"}]
        )

    def test_tuple(self) -> None:
        assert encode_to_envelope((1,)) == env("array", [num(1)])

    def test_range_as_array(self) -> None:
        assert encode_to_envelope(range(2)) == env("array", [num(0), num(1)])

    def test_range_rejected_without_array_like(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            encode_to_envelope(range(2), CodecOptions(encode_array_like=False))

    def test_record(self) -> None:
        assert encode_to_envelope({"a": 1, "b": [True]}) == env(
            "object", {"a": num(1), "b": env("array", [env("boolean", True)])}
        )

    def test_record_keeps_undefined_field(self) -> None:
        assert encode_to_envelope({"u": UNDEFINED}) == env("object", {"u": {"type": "undefined"}})

    def test_object_attributes_as_record(self) -> None:
        assert encode_to_envelope(Point(1, 2)) == env("object", {"x": num(1), "y": num(2)})

    def test_ordered_map(self) -> None:
        value = OrderedMap([("k1", "v1"), ("k2", "v2")])
        assert encode_to_envelope(value) == env(
            "map", [[text("k1"), text("v1")], [text("k2"), text("v2")]]
        )

    def test_ordered_map_duplicate_keys_kept(self) -> None:
        value = OrderedMap([(1, "a"), (1, "b")])
        assert encode_to_envelope(value)["value"] == [
            [num(1), text("a")],
            [num(1), text("b")],
        ]

    def test_dict_with_non_str_keys_is_map(self) -> None:
        assert encode_to_envelope({1: "a", (2, 3): "b"}) == env(
            "map",
            [
                [num(1), text("a")],
                [env("array", [num(2), num(3)]), text("b")],
            ],
        )

    def test_empty_containers(self) -> None:
        assert encode_to_envelope([]) == env("array", [])
        assert encode_to_envelope({}) == env("object", {})
        assert encode_to_envelope(OrderedMap()) == env("map", [])


class TestUnsupported:
    def test_root_raises(self) -> None:
        with pytest.raises(UnsupportedTypeError) as exc_info:
            encode_to_envelope(lambda: None)
        assert exc_info.value.code == "UNSUPPORTED_TYPE"
        assert exc_info.value.detail["python_type"] == "function"

    def test_set_unsupported(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            encode_to_envelope({1, 2})

    def test_class_unsupported(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            encode_to_envelope(Point)

    def test_list_element_dropped_and_compacted(self) -> None:
        assert encode_to_envelope([1, print, 2]) == env("array", [num(1), num(2)])

    def test_record_field_dropped(self) -> None:
        assert encode_to_envelope({"a": 1, "f": print}) == env("object", {"a": num(1)})

    def test_map_pair_dropped_on_bad_key(self) -> None:
        value = OrderedMap([(print, 1), ("ok", 2)])
        assert encode_to_envelope(value) == env("map", [[text("ok"), num(2)]])

    def test_map_pair_dropped_on_bad_value(self) -> None:
        value = OrderedMap([("bad", print), ("ok", 2)])
        assert encode_to_envelope(value) == env("map", [[text("ok"), num(2)]])

    def test_dropped_member_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="typedwire.codec.encoder"):
            encode_to_envelope([print])
        assert "Dropping element [0]" in caplog.text


class TestDepth:
    def test_within_limit(self) -> None:
        assert encode_to_envelope([[1]], CodecOptions(max_depth=2)) == env(
            "array", [env("array", [num(1)])]
        )

    def test_over_limit(self) -> None:
        with pytest.raises(DepthExceededError):
            encode_to_envelope([[[1]]], CodecOptions(max_depth=2))

    def test_not_absorbed_inside_record(self) -> None:
        with pytest.raises(DepthExceededError):
            encode_to_envelope({"a": {"b": {}}}, CodecOptions(max_depth=2))

    def test_self_reference_hits_limit(self) -> None:
        loop: list = []
        loop.append(loop)
        with pytest.raises(DepthExceededError):
            encode_to_envelope(loop)

    def test_scalars_ignore_limit(self) -> None:
        assert encode_to_envelope(1, CodecOptions(max_depth=1)) == num(1)


class TestCustomKeys:
    def test_field_names(self) -> None:
        options = CodecOptions(type_key="$type", value_key="$value")
        assert Encoder(options).encode([None]) == {
            "$type": "array",
            "$value": [{"$type": "null"}],
        }
