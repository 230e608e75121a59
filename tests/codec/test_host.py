"""Tests for value classification and the pluggable host interface."""

from __future__ import annotations

import collections
import types
from typing import Any

import pytest

from typedwire.codec import Decoder, Encoder, HostValueInterface, PythonHost, ValueKind
from typedwire.domain.types import UNDEFINED, OrderedMap
from tests.conftest import env, num, text


class Slots:
    __slots__ = ("a",)

    def __init__(self) -> None:
        self.a = 1


class Plain:
    def __init__(self) -> None:
        self.name = "n"


class TestClassify:
    @pytest.fixture
    def host(self) -> PythonHost:
        return PythonHost()

    @pytest.mark.parametrize(
        ("value", "kind"),
        [
            (None, ValueKind.NULL),
            (UNDEFINED, ValueKind.UNDEFINED),
            (True, ValueKind.BOOL),
            (0, ValueKind.NUMBER),
            (1.5, ValueKind.NUMBER),
            ("", ValueKind.TEXT),
            (b"", ValueKind.BLOB),
            (bytearray(), ValueKind.BLOB),
            (memoryview(b"x"), ValueKind.BLOB),
            (OrderedMap(), ValueKind.ORDERED_MAP),
            ({1: 2}, ValueKind.ORDERED_MAP),
            ({}, ValueKind.RECORD),
            ({"a": 1}, ValueKind.RECORD),
            (collections.OrderedDict(a=1), ValueKind.RECORD),
            (types.MappingProxyType({"a": 1}), ValueKind.RECORD),
            ([], ValueKind.LIST),
            ((), ValueKind.LIST),
            (range(3), ValueKind.LIST),
            (Plain(), ValueKind.RECORD),
            ({1}, ValueKind.UNSUPPORTED),
            (len, ValueKind.UNSUPPORTED),
            (int, ValueKind.UNSUPPORTED),
            (types, ValueKind.UNSUPPORTED),
            (Slots(), ValueKind.UNSUPPORTED),
            (1j, ValueKind.UNSUPPORTED),
        ],
    )
    def test_kinds(self, host: PythonHost, value: Any, kind: ValueKind) -> None:
        assert host.classify(value) is kind

    def test_array_like_disabled(self) -> None:
        host = PythonHost(encode_array_like=False)
        assert host.classify(range(3)) is ValueKind.UNSUPPORTED
        assert host.classify([1]) is ValueKind.LIST

    def test_iterate_list_of_sequence(self, host: PythonHost) -> None:
        assert host.iterate_list(range(3)) == [0, 1, 2]

    def test_set_index_appends(self, host: PythonHost) -> None:
        target = host.make_list(2)
        host.set_index(target, 0, "a")
        host.set_index(target, 1, "b")
        host.set_index(target, 0, "c")
        assert target == ["c", "b"]

    def test_python_host_satisfies_protocol(self, host: PythonHost) -> None:
        assert isinstance(host, HostValueInterface)


class NamespaceHost(PythonHost):
    """Builds records as SimpleNamespace objects."""

    def make_record(self) -> types.SimpleNamespace:
        return types.SimpleNamespace()

    def set_field(self, target: Any, key: str, value: Any) -> None:
        setattr(target, key, value)


class TestCustomHost:
    def test_decoder_uses_host(self) -> None:
        envelope = env("object", {"a": num(1), "b": text("x")})
        result = Decoder(host=NamespaceHost()).decode(envelope)
        assert result == types.SimpleNamespace(a=1, b="x")

    def test_encoder_reads_namespace_through_host(self) -> None:
        value = types.SimpleNamespace(a=1)
        assert Encoder(host=NamespaceHost()).encode(value) == env("object", {"a": num(1)})
