"""The ``google.protobuf.Timestamp`` message: a point in time at nanosecond resolution."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

from protowkt.any import (
    PACKAGE,
    AnyDecodeError,
    _check_wire_type,
    _decode_key,
    _skip_field,
    _WireType,
    decode_varint,
    encode_varint,
    type_url_for,
)
from protowkt.duration import (
    I64_MAX,
    I64_MIN,
    NANOS_PER_SECOND,
    _to_signed,
    _trunc_divmod,
)

__all__ = [
    "TimestampError",
    "TimestampOutOfRangeError",
    "TimestampOverflowError",
    "Timestamp",
]

NANOS_MAX = NANOS_PER_SECOND - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NANOS_PER_MICRO = 1_000
_SECONDS_PER_DAY = 86_400


class TimestampError(ValueError):
    """Raised when a timestamp cannot be converted or normalized."""


class TimestampOutOfRangeError(TimestampError):
    """Raised when a timestamp cannot be represented by the conversion target.

    ``timestamp`` holds the timestamp as it was before conversion.
    """

    def __init__(self, timestamp: Timestamp) -> None:
        super().__init__(
            f"{timestamp!r} is not representable as a time value "
            "because it is out of range"
        )
        self.timestamp = timestamp


class TimestampOverflowError(TimestampError):
    """Raised when normalization would overflow the seconds field.

    ``timestamp`` holds the original, unnormalized timestamp.
    """

    def __init__(self, timestamp: Timestamp) -> None:
        super().__init__(f"{timestamp!r} cannot be normalized without overflow")
        self.timestamp = timestamp


@dataclass
class Timestamp:
    """Seconds and non-negative nanoseconds since 1970-01-01T00:00:00Z.

    Equality compares the raw fields: a timestamp and its normalized form
    are not equal unless they already agree.
    """

    seconds: int = 0
    nanos: int = 0

    def __hash__(self) -> int:
        return hash((self.seconds, self.nanos))

    @classmethod
    def type_url(cls) -> str:
        """Return the type URL of ``google.protobuf.Timestamp``."""
        return type_url_for(PACKAGE, "Timestamp")

    def normalize(self) -> None:
        """Bring ``nanos`` into ``[0, 999_999_999]``, carrying into ``seconds``.

        Values that overflow saturate at the earliest or latest normal value.
        """
        if self.nanos <= -NANOS_PER_SECOND or self.nanos >= NANOS_PER_SECOND:
            carry, rest = _trunc_divmod(self.nanos, NANOS_PER_SECOND)
            seconds = self.seconds + carry
            if I64_MIN <= seconds <= I64_MAX:
                self.seconds = seconds
                self.nanos = rest
            elif self.nanos < 0:
                self.seconds = I64_MIN
                self.nanos = 0
            else:
                self.seconds = I64_MAX
                self.nanos = NANOS_MAX

        if self.nanos < 0:
            if self.seconds - 1 >= I64_MIN:
                self.seconds -= 1
                self.nanos += NANOS_PER_SECOND
            else:
                self.nanos = 0

    def try_normalize(self) -> Timestamp:
        """Return a normalized copy of this timestamp.

        Raises TimestampOverflowError, carrying the original, if normalization
        would saturate the seconds field.
        """
        before = replace(self)
        after = replace(self)
        after.normalize()
        if after.seconds in (I64_MIN, I64_MAX) and after.seconds != before.seconds:
            raise TimestampOverflowError(before)
        return after

    def encode(self) -> bytes:
        """Serialize to protobuf wire format, omitting zero fields."""
        out = bytearray()
        if self.seconds:
            out += b"\x08" + encode_varint(_to_signed(self.seconds, 64))
        if self.nanos:
            out += b"\x10" + encode_varint(_to_signed(self.nanos, 32))
        return bytes(out)

    @classmethod
    def decode(cls, data: bytes) -> Timestamp:
        """Parse protobuf wire format, skipping unknown fields."""
        result = cls()
        pos = 0
        while pos < len(data):
            tag, wire, pos = _decode_key(data, pos)
            if tag in (1, 2):
                name = "seconds" if tag == 1 else "nanos"
                try:
                    _check_wire_type(wire, _WireType.VARINT)
                    raw, pos = decode_varint(data, pos)
                except AnyDecodeError as err:
                    err.push("Timestamp", name)
                    raise
                if tag == 1:
                    result.seconds = _to_signed(raw, 64)
                else:
                    result.nanos = _to_signed(raw, 32)
            else:
                pos = _skip_field(data, pos, wire, tag, 0)
        return result

    @classmethod
    def from_time_ns(cls, ns: int) -> Timestamp:
        """Build from nanoseconds since the Unix epoch, as ``time.time_ns()`` gives."""
        seconds, nanos = divmod(ns, NANOS_PER_SECOND)
        return cls(seconds, nanos)

    def to_time_ns(self) -> int:
        """Return nanoseconds since the Unix epoch of the normalized timestamp.

        Raises TimestampOutOfRangeError if the seconds cannot be negated.
        """
        original = replace(self)
        normal = replace(self)
        normal.normalize()
        if normal.seconds == I64_MIN:
            raise TimestampOutOfRangeError(original)
        return normal.seconds * NANOS_PER_SECOND + normal.nanos

    @classmethod
    def from_datetime(cls, value: datetime) -> Timestamp:
        """Build from a ``datetime``; a naive value is taken to be in UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - _EPOCH
        seconds = delta.days * _SECONDS_PER_DAY + delta.seconds
        return cls(seconds, delta.microseconds * _NANOS_PER_MICRO)

    def to_datetime(self) -> datetime:
        """Convert to an aware UTC ``datetime``, truncating to microseconds.

        Raises TimestampOutOfRangeError if the time does not fit a ``datetime``.
        """
        original = replace(self)
        normal = replace(self)
        normal.normalize()
        micros = normal.nanos // _NANOS_PER_MICRO
        try:
            return _EPOCH + timedelta(seconds=normal.seconds, microseconds=micros)
        except OverflowError:
            raise TimestampOutOfRangeError(original) from None