# protowkt

Plain Python models of some Protocol Buffers well-known types. Nothing
outside the standard library is needed.

## What it provides

- `protowkt.duration.Duration`: a signed span of time as `seconds` and
  `nanos`. `normalize()` applies the canonical rules: `nanos` is brought
  into range and given the same sign as `seconds`, and it saturates at the
  64-bit limits. `str()` gives the JSON form, for example `"1.500s"` or
  `"-0.000000001s"`. `encode()` and `decode()` handle the binary wire format.
  `from_unsigned()` and `to_unsigned()` convert to and from a non-negative
  `(seconds, nanos)` pair, and `from_timedelta()` and `to_timedelta()` convert
  to and from `datetime.timedelta`.
- `protowkt.timestamp.Timestamp`: seconds and non-negative nanoseconds since
  the Unix epoch. It has `normalize()`, and `try_normalize()`, which returns
  a normalized copy or raises if the seconds would overflow. It has
  `encode()` and `decode()`, `from_time_ns()` and `to_time_ns()` for
  nanosecond counts such as `time.time_ns()` gives, and `from_datetime()`
  and `to_datetime()`. A naive `datetime` is read as UTC.
- `protowkt.any.Any`: a serialized message together with its type URL.
  `Any.from_msg(msg)` packs any object that has a `type_url()` (or
  `type_url_of()`) class method and an `encode()` method. `any.to_msg(cls)`
  unpacks it after checking that the type URLs name the same type.
  `TypeUrl.parse()` takes the fully qualified name from a type URL.
  `type_url_for()` builds a URL under `type.googleapis.com`.
  `encode_varint()` and `decode_varint()` are the base-128 varint helpers.
- `protowkt.codeinfo`: dataclasses for `UninterpretedOption` (with its
  `NamePart`s), `SourceCodeInfo` (with its `Location`s) and
  `GeneratedCodeInfo` (with its `Annotation`s). They only hold data and have
  no encoding.

## Installation

```
pip install protowkt
```

## Examples

```python
from datetime import timedelta

from protowkt.any import Any
from protowkt.duration import Duration
from protowkt.timestamp import Timestamp

d = Duration(seconds=-1, nanos=1)
d.normalize()
print(d.seconds, d.nanos)          # 0 -999999999

print(Duration.from_timedelta(timedelta(seconds=1.5)).to_timedelta())  # 0:00:01.500000

ts = Timestamp(seconds=1, nanos=-1)
ts.normalize()
print(ts.seconds, ts.nanos)        # 0 999999999

packed = Any.from_msg(ts)
print(packed.type_url)             # type.googleapis.com/google.protobuf.Timestamp
assert packed.to_msg(Timestamp) == ts
```

## Errors

- `AnyDecodeError`, a `ValueError`, is raised for malformed wire data. It is
  also raised when an `Any` is unpacked into a message type whose type URL
  does not match.
- `DurationError`, a `ValueError`, is the base for `NegativeDurationError`
  and `DurationOutOfRangeError`. `to_unsigned()` raises
  `NegativeDurationError`, which carries the magnitude in `seconds` and
  `nanos`. `from_unsigned()` and `to_timedelta()` raise
  `DurationOutOfRangeError`.
- `TimestampError`, a `ValueError`, is the base for
  `TimestampOutOfRangeError` and `TimestampOverflowError`. Both carry the
  original value in `timestamp`.

## What it does not do

- It does not model the descriptor messages, the option messages, the
  type-description messages, `Struct`, `Value`, `ListValue` or `FieldMask`,
  and it has no protobuf enumerations.
- It does not parse RFC 3339 timestamp strings or duration strings, and it
  does not format timestamps as RFC 3339 text.
- It is not a general protobuf runtime. Only `Duration`, `Timestamp` and
  `Any` can be encoded and decoded, and nothing is generated from `.proto`
  files.

## Running the tests

```
pip install -e ".[test]"
pytest
```