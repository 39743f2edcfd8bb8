"""Uninterpreted options and source/generated code location information."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

__all__ = [
    "NamePart",
    "UninterpretedOption",
    "Location",
    "SourceCodeInfo",
    "Annotation",
    "GeneratedCodeInfo",
]


@dataclass
class NamePart:
    """One segment of an option name; ``is_extension`` marks a parenthesised one."""

    name_part: str = ""
    is_extension: bool = False


@dataclass
class UninterpretedOption:
    """An option the parser did not recognize, kept with its raw value."""

    name: list[NamePart] = field(default_factory=list)
    identifier_value: Optional[str] = None
    positive_int_value: Optional[int] = None
    negative_int_value: Optional[int] = None
    double_value: Optional[float] = None
    string_value: Optional[bytes] = None
    aggregate_value: Optional[str] = None


@dataclass
class Location:
    """A piece of a .proto file that corresponds to a definition."""

    path: list[int] = field(default_factory=list)
    span: list[int] = field(default_factory=list)
    leading_comments: Optional[str] = None
    trailing_comments: Optional[str] = None
    leading_detached_comments: list[str] = field(default_factory=list)


@dataclass
class SourceCodeInfo:
    """Information about the source file a ``FileDescriptorProto`` came from."""

    location: list[Location] = field(default_factory=list)


@dataclass
class Annotation:
    """Connects a span of generated code to an element of its .proto file."""

    path: list[int] = field(default_factory=list)
    source_file: Optional[str] = None
    begin: Optional[int] = None
    end: Optional[int] = None


@dataclass
class GeneratedCodeInfo:
    """Relationship between one generated file and its source .proto files."""

    annotation: list[Annotation] = field(default_factory=list)