from __future__ import annotations

from dataclasses import dataclass

import pytest
from hypothesis import given
from hypothesis import strategies as st

from protowkt.any import (
    Any,
    AnyDecodeError,
    TypeUrl,
    decode_varint,
    encode_varint,
    type_url_for,
)


@dataclass
class _Stamp:
    seconds: int = 0

    @classmethod
    def type_url(cls) -> str:
        return type_url_for("google.protobuf", "Timestamp")

    def encode(self) -> bytes:
        return b"\x08" + encode_varint(self.seconds) if self.seconds else b""

    @classmethod
    def decode(cls, data: bytes) -> "_Stamp":
        if not data:
            return cls()
        assert data[0] == 0x08
        value, _ = decode_varint(data, 1)
        return cls(value)


@dataclass
class _Span:
    seconds: int = 0

    @classmethod
    def type_url(cls) -> str:
        return type_url_for("google.protobuf", "Duration")

    def encode(self) -> bytes:
        return b""

    @classmethod
    def decode(cls, data: bytes) -> "_Span":
        return cls()


def test_any_serialization():
    message = _Stamp(946_684_800)
    any_msg = Any.from_msg(message)
    assert any_msg.type_url == "type.googleapis.com/google.protobuf.Timestamp"
    assert any_msg.to_msg(_Stamp) == message


def test_any_wrong_type_url():
    any_msg = Any.from_msg(_Stamp(946_684_800))
    with pytest.raises(AnyDecodeError) as info:
        any_msg.to_msg(_Span)
    assert 'expected type URL: "type.googleapis.com/google.protobuf.Duration"' in str(
        info.value
    )
    assert info.value.stack == [("unexpected type URL", "type_url")]


def test_any_unparseable_type_url():
    any_msg = Any(type_url="google.protobuf.Timestamp", value=b"")
    with pytest.raises(AnyDecodeError):
        any_msg.to_msg(_Stamp)


def test_any_matches_on_full_name_only():
    any_msg = Any(type_url="https://example.com/x/google.protobuf.Timestamp", value=b"\x08\x05")
    assert any_msg.to_msg(_Stamp) == _Stamp(5)


def test_type_url_parsing():
    name = "google.protobuf.Duration"
    assert TypeUrl.parse("type.googleapis.com/google.protobuf.Duration").full_name == name
    assert TypeUrl.parse("https://type.googleapis.com/google.protobuf.Duration").full_name == name
    assert TypeUrl.parse("/google.protobuf.Duration").full_name == name
    assert TypeUrl.parse("/.google.protobuf.Duration") is None
    assert TypeUrl.parse("google.protobuf.Duration") is None


def test_type_url_for():
    assert type_url_for("google.protobuf", "Any") == "type.googleapis.com/google.protobuf.Any"
    assert Any.type_url_of() == "type.googleapis.com/google.protobuf.Any"


def test_any_wraps_any():
    inner = Any(type_url="a/b.C", value=b"\x01\x02")
    outer = Any.from_msg(inner)
    assert outer.type_url == "type.googleapis.com/google.protobuf.Any"
    assert outer.to_msg(Any) == inner


@pytest.mark.parametrize(
    "value, encoded",
    [
        (0, b"\x00"),
        (1, b"\x01"),
        (127, b"\x7f"),
        (128, b"\x80\x01"),
        (300, b"\xac\x02"),
        (-1, b"\xff" * 9 + b"\x01"),
        ((1 << 64) - 1, b"\xff" * 9 + b"\x01"),
    ],
)
def test_encode_varint_values(value, encoded):
    assert encode_varint(value) == encoded


def test_encode_varint_out_of_range():
    with pytest.raises(ValueError):
        encode_varint(1 << 64)


@given(st.integers(min_value=0, max_value=(1 << 64) - 1))
def test_varint_roundtrip(value):
    encoded = encode_varint(value)
    assert decode_varint(encoded, 0) == (value, len(encoded))


def test_decode_varint_offset():
    assert decode_varint(b"\x00\xac\x02\x05", 1) == (300, 3)


@pytest.mark.parametrize("data", [b"", b"\x80", b"\xff" * 10 + b"\x01", b"\xff" * 9 + b"\x02"])
def test_decode_varint_invalid(data):
    with pytest.raises(AnyDecodeError):
        decode_varint(data, 0)


def test_any_encode_known_bytes():
    assert Any(type_url="a/b", value=b"\x01").encode() == b"\x0a\x03a/b\x12\x01\x01"
    assert Any().encode() == b""


@given(st.text(), st.binary())
def test_any_encode_decode_roundtrip(type_url, value):
    original = Any(type_url=type_url, value=value)
    assert Any.decode(original.encode()) == original


def test_any_decode_skips_unknown_fields():
    data = (
        b"\x18\x05"
        + b"\x21" + b"\x00" * 8
        + b"\x2d" + b"\x00" * 4
        + b"\x3a\x02hi"
        + b"\x43\x08\x01\x44"
        + b"\x0a\x03a/b"
    )
    assert Any.decode(data) == Any(type_url="a/b", value=b"")


def test_any_decode_last_value_wins():
    assert Any.decode(b"\x0a\x01x\x0a\x01y") == Any(type_url="y")


def test_any_decode_wrong_wire_type():
    with pytest.raises(AnyDecodeError) as info:
        Any.decode(b"\x08\x01")
    assert info.value.stack == [("Any", "type_url")]


def test_any_decode_invalid_utf8():
    with pytest.raises(AnyDecodeError) as info:
        Any.decode(b"\x0a\x01\xff")
    assert "UTF-8" in str(info.value)


@pytest.mark.parametrize(
    "data",
    [
        b"\x00\x00",
        b"\x12\x05ab",
        b"\x21\x00",
        b"\x44",
        b"\x43\x08\x01",
        b"\x0e",
    ],
)
def test_any_decode_malformed(data):
    with pytest.raises(AnyDecodeError):
        Any.decode(data)


def test_decode_error_display():
    err = AnyDecodeError("boom")
    err.push("Any", "value")
    assert str(err) == "failed to decode Protobuf message: Any.value: boom"