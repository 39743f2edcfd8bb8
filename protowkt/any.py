"""The ``google.protobuf.Any`` message, type URLs and varint helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any as _AnyType
from typing import Optional, TypeVar

__all__ = [
    "AnyDecodeError",
    "TypeUrl",
    "Any",
    "type_url_for",
    "encode_varint",
    "decode_varint",
]

PACKAGE = "google.protobuf"
_UINT64_LIMIT = 1 << 64
_RECURSION_LIMIT = 100

_M = TypeVar("_M")


class AnyDecodeError(ValueError):
    """Raised when protobuf bytes cannot be decoded into a message."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description
        self.stack: list[tuple[str, str]] = []

    def push(self, message: str, field_name: str) -> None:
        """Record the message and field in which the failure happened."""
        self.stack.append((message, field_name))

    def __str__(self) -> str:
        context = "".join(f"{message}.{name}: " for message, name in self.stack)
        return f"failed to decode Protobuf message: {context}{self.description}"


class _WireType(IntEnum):
    VARINT = 0
    SIXTY_FOUR_BIT = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    THIRTY_TWO_BIT = 5


def type_url_for(package: str, name: str) -> str:
    """Return the type URL of ``package.name`` under ``type.googleapis.com``."""
    return f"type.googleapis.com/{package}.{name}"


def encode_varint(value: int) -> bytes:
    """Encode an integer as a base-128 varint.

    Negative values are encoded as their 64-bit two's complement.
    """
    if value < 0:
        value += _UINT64_LIMIT
    if not 0 <= value < _UINT64_LIMIT:
        raise ValueError(f"value out of 64-bit range: {value}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, pos: int = 0) -> tuple[int, int]:
    """Decode an unsigned varint at ``pos``; return the value and the next position."""
    result = 0
    for count in range(10):
        if pos >= len(data):
            raise AnyDecodeError("invalid varint")
        byte = data[pos]
        pos += 1
        if count == 9 and byte > 0x01:
            raise AnyDecodeError("invalid varint")
        result |= (byte & 0x7F) << (7 * count)
        if byte < 0x80:
            return result, pos
    raise AnyDecodeError("invalid varint")


def _decode_key(data: bytes, pos: int) -> tuple[int, _WireType, int]:
    key, pos = decode_varint(data, pos)
    if key > 0xFFFFFFFF:
        raise AnyDecodeError(f"invalid key value: {key}")
    wire = key & 0x07
    if wire > _WireType.THIRTY_TWO_BIT:
        raise AnyDecodeError(f"invalid wire type value: {wire}")
    tag = key >> 3
    if tag == 0:
        raise AnyDecodeError("invalid tag value: 0")
    return tag, _WireType(wire), pos


def _read_length_delimited(data: bytes, pos: int) -> tuple[bytes, int]:
    length, pos = decode_varint(data, pos)
    end = pos + length
    if end > len(data):
        raise AnyDecodeError("buffer underflow")
    return bytes(data[pos:end]), end


def _skip_field(data: bytes, pos: int, wire: _WireType, tag: int, depth: int) -> int:
    if wire is _WireType.VARINT:
        _, pos = decode_varint(data, pos)
        return pos
    if wire is _WireType.SIXTY_FOUR_BIT or wire is _WireType.THIRTY_TWO_BIT:
        size = 8 if wire is _WireType.SIXTY_FOUR_BIT else 4
        if pos + size > len(data):
            raise AnyDecodeError("buffer underflow")
        return pos + size
    if wire is _WireType.LENGTH_DELIMITED:
        _, pos = _read_length_delimited(data, pos)
        return pos
    if wire is _WireType.END_GROUP:
        raise AnyDecodeError("unexpected end group tag")
    if depth >= _RECURSION_LIMIT:
        raise AnyDecodeError("recursion limit reached")
    while True:
        if pos >= len(data):
            raise AnyDecodeError("buffer underflow")
        inner_tag, inner_wire, pos = _decode_key(data, pos)
        if inner_wire is _WireType.END_GROUP:
            if inner_tag != tag:
                raise AnyDecodeError("unexpected end group tag")
            return pos
        pos = _skip_field(data, pos, inner_wire, inner_tag, depth + 1)


def _check_wire_type(actual: _WireType, expected: _WireType) -> None:
    if actual is not expected:
        raise AnyDecodeError(
            f"invalid wire type: {actual.name} (expected {expected.name})"
        )


@dataclass(frozen=True)
class TypeUrl:
    """The fully qualified type name taken from the last segment of a type URL."""

    full_name: str

    @classmethod
    def parse(cls, url: str) -> Optional[TypeUrl]:
        """Parse ``url``; return None if it has no '/' or a non-canonical name."""
        slash = url.rfind("/")
        if slash < 0:
            return None
        full_name = url[slash + 1:]
        if full_name.startswith("."):
            return None
        return cls(full_name)


def _type_url_of_type(msg_type: type) -> str:
    type_url_of = getattr(msg_type, "type_url_of", None)
    if callable(type_url_of):
        return type_url_of()
    return msg_type.type_url()


@dataclass
class Any:
    """An arbitrary serialized message together with the URL of its type."""

    type_url: str = ""
    value: bytes = field(default=b"")

    @classmethod
    def type_url_of(cls) -> str:
        """Return the type URL of ``google.protobuf.Any`` itself."""
        return type_url_for(PACKAGE, "Any")

    def encode(self) -> bytes:
        """Serialize to protobuf wire format, omitting empty fields."""
        out = bytearray()
        if self.type_url:
            raw = self.type_url.encode("utf-8")
            out += b"\x0a" + encode_varint(len(raw)) + raw
        if self.value:
            out += b"\x12" + encode_varint(len(self.value)) + bytes(self.value)
        return bytes(out)

    @classmethod
    def decode(cls, data: bytes) -> Any:
        """Parse protobuf wire format, skipping unknown fields."""
        result = cls()
        pos = 0
        while pos < len(data):
            tag, wire, pos = _decode_key(data, pos)
            if tag == 1:
                try:
                    _check_wire_type(wire, _WireType.LENGTH_DELIMITED)
                    raw, pos = _read_length_delimited(data, pos)
                    try:
                        result.type_url = raw.decode("utf-8")
                    except UnicodeDecodeError:
                        raise AnyDecodeError(
                            "invalid string value: data is not UTF-8 encoded"
                        ) from None
                except AnyDecodeError as err:
                    err.push("Any", "type_url")
                    raise
            elif tag == 2:
                try:
                    _check_wire_type(wire, _WireType.LENGTH_DELIMITED)
                    result.value, pos = _read_length_delimited(data, pos)
                except AnyDecodeError as err:
                    err.push("Any", "value")
                    raise
            else:
                pos = _skip_field(data, pos, wire, tag, 0)
        return result

    @classmethod
    def from_msg(cls, msg: _AnyType) -> Any:
        """Wrap ``msg``, which provides a type URL and ``encode()``."""
        return cls(type_url=_type_url_of_type(type(msg)), value=msg.encode())

    def to_msg(self, msg_type: type[_M]) -> _M:
        """Decode the wrapped message as ``msg_type`` after checking its type URL."""
        expected_url = _type_url_of_type(msg_type)
        expected = TypeUrl.parse(expected_url)
        actual = TypeUrl.parse(self.type_url)
        if expected is not None and actual is not None and expected == actual:
            return msg_type.decode(self.value)  # type: ignore[attr-defined]
        err = AnyDecodeError(
            f'expected type URL: "{expected_url}" (got: "{self.type_url}")'
        )
        err.push("unexpected type URL", "type_url")
        raise err