"""The ``google.protobuf.Duration`` message: a signed span of time."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta

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

__all__ = [
    "DurationError",
    "NegativeDurationError",
    "DurationOutOfRangeError",
    "Duration",
]

NANOS_PER_SECOND = 1_000_000_000
NANOS_MAX = NANOS_PER_SECOND - 1
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
_UINT64_LIMIT = 1 << 64
_NANOS_PER_MICRO = 1_000
_MICROS_PER_SECOND = 1_000_000


def _trunc_divmod(value: int, divisor: int) -> tuple[int, int]:
    """Divide rounding toward zero; the remainder takes the dividend's sign."""
    quotient = abs(value) // divisor
    if value < 0:
        quotient = -quotient
    return quotient, value - quotient * divisor


def _to_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _format_magnitude(seconds: int, nanos: int) -> str:
    if nanos == 0:
        return f"{seconds}s"
    return f"{seconds}.{nanos:09d}".rstrip("0") + "s"


class DurationError(ValueError):
    """Raised when a duration cannot be converted."""


class NegativeDurationError(DurationError):
    """Raised when a negative duration is converted to an unsigned one.

    ``seconds`` and ``nanos`` hold the magnitude of the negative duration.
    """

    def __init__(self, seconds: int, nanos: int) -> None:
        super().__init__(
            f"failed to convert negative duration: {_format_magnitude(seconds, nanos)}"
        )
        self.seconds = seconds
        self.nanos = nanos


class DurationOutOfRangeError(DurationError):
    """Raised when a duration's magnitude exceeds what the target can hold."""

    def __init__(self) -> None:
        super().__init__("failed to convert duration out of range")


@dataclass
class Duration:
    """A signed, fixed-length span of time at nanosecond resolution."""

    seconds: int = 0
    nanos: int = 0

    def __hash__(self) -> int:
        return hash((self.seconds, self.nanos))

    @classmethod
    def type_url(cls) -> str:
        """Return the type URL of ``google.protobuf.Duration``."""
        return type_url_for(PACKAGE, "Duration")

    def normalize(self) -> None:
        """Bring ``nanos`` into range and give it the same sign as ``seconds``.

        Values that overflow saturate at the least or greatest normal value.
        """
        if self.nanos <= -NANOS_PER_SECOND or self.nanos >= NANOS_PER_SECOND:
            carry, rest = _trunc_divmod(self.nanos, NANOS_PER_SECOND)
            seconds = self.seconds + carry
            if I64_MIN <= seconds <= I64_MAX:
                self.seconds = seconds
                self.nanos = rest
            elif self.nanos < 0:
                self.seconds = I64_MIN
                self.nanos = -NANOS_MAX
            else:
                self.seconds = I64_MAX
                self.nanos = NANOS_MAX

        if self.seconds < 0 and self.nanos > 0:
            if self.seconds + 1 <= I64_MAX:
                self.seconds += 1
                self.nanos -= NANOS_PER_SECOND
            else:
                self.nanos = NANOS_MAX
        elif self.seconds > 0 and self.nanos < 0:
            if self.seconds - 1 >= I64_MIN:
                self.seconds -= 1
                self.nanos += NANOS_PER_SECOND
            else:
                self.nanos = -NANOS_MAX

    def _normalized(self) -> Duration:
        copy = replace(self)
        copy.normalize()
        return copy

    def __str__(self) -> str:
        normal = self._normalized()
        sign = "-" if self.seconds < 0 and self.nanos < 0 else ""
        text = f"{sign}{abs(normal.seconds)}"
        nanos = abs(normal.nanos)
        if nanos == 0:
            return f"{text}s"
        if nanos % 1_000_000 == 0:
            return f"{text}.{nanos // 1_000_000:03d}s"
        if nanos % 1_000 == 0:
            return f"{text}.{nanos // 1_000:06d}s"
        return f"{text}.{nanos:09d}s"

    def encode(self) -> bytes:
        """Serialize to protobuf wire format, omitting zero fields."""
        out = bytearray()
        if self.seconds:
            out += b"\x08" + encode_varint(_to_signed(self.seconds, 64))
        if self.nanos:
            out += b"\x10" + encode_varint(_to_signed(self.nanos, 32))
        return bytes(out)

    @classmethod
    def decode(cls, data: bytes) -> Duration:
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
                    err.push("Duration", name)
                    raise
                if tag == 1:
                    result.seconds = _to_signed(raw, 64)
                else:
                    result.nanos = _to_signed(raw, 32)
            else:
                pos = _skip_field(data, pos, wire, tag, 0)
        return result

    @classmethod
    def from_unsigned(cls, seconds: int, nanos: int = 0) -> Duration:
        """Build from a non-negative span; nanos past one second carry over.

        Raises DurationOutOfRangeError if the seconds exceed the signed 64-bit range.
        """
        if seconds < 0 or nanos < 0:
            raise ValueError("unsigned duration parts must not be negative")
        seconds += nanos // NANOS_PER_SECOND
        nanos %= NANOS_PER_SECOND
        if seconds >= _UINT64_LIMIT:
            raise OverflowError("overflow in duration")
        if seconds > I64_MAX:
            raise DurationOutOfRangeError()
        duration = cls(seconds, nanos)
        duration.normalize()
        return duration

    def to_unsigned(self) -> tuple[int, int]:
        """Return ``(seconds, nanos)`` of the normalized, non-negative span.

        Raises NegativeDurationError, carrying the magnitude, if it is negative.
        """
        normal = self._normalized()
        if normal.seconds >= 0 and normal.nanos >= 0:
            return normal.seconds, normal.nanos
        raise NegativeDurationError(-normal.seconds, -normal.nanos)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> Duration:
        """Build from a ``timedelta``."""
        total_micros = (delta.days * 86_400 + delta.seconds) * _MICROS_PER_SECOND
        total_micros += delta.microseconds
        seconds, micros = _trunc_divmod(total_micros, _MICROS_PER_SECOND)
        duration = cls(seconds, micros * _NANOS_PER_MICRO)
        duration.normalize()
        return duration

    def to_timedelta(self) -> timedelta:
        """Convert to a ``timedelta``, truncating sub-microsecond nanos toward zero.

        Raises DurationOutOfRangeError if the span does not fit a ``timedelta``.
        """
        normal = self._normalized()
        micros, _ = _trunc_divmod(normal.nanos, _NANOS_PER_MICRO)
        try:
            return timedelta(seconds=normal.seconds, microseconds=micros)
        except OverflowError:
            raise DurationOutOfRangeError() from None