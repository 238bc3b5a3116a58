"""struct-map - convert records to and from flat string-list mappings.

The flat shape is the one used by URL query parameters, HTTP headers and
form submissions: ``dict[str, list[str]]``.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

from struct_map.core.cache import PlanCache
from struct_map.core.config import MapConfig
from struct_map.core.engine import StructMapper
from struct_map.core.enums import Direction
from struct_map.core.exceptions import (
    ConflictingOptionsError,
    IntegerRangeError,
    IntegerSyntaxError,
    InvalidOptionError,
    InvalidTargetError,
    ListElementError,
    MissingKeyError,
    MissingValueError,
    ParseIntError,
    PlanCompilationError,
    StructMapError,
    UnknownOptionError,
    UnsupportedKindError,
)
from struct_map.core.headers import canonical_header_key
from struct_map.mapping.fields import Bits, Int8, Int16, Int32, Int64, mapfield
from struct_map.mapping.protocol import ValueMarshaler, ValueUnmarshaler

default_mapper = StructMapper()

header_mapper = StructMapper(MapConfig(key_transform=canonical_header_key))


def marshal(src: Any, values: MutableMapping[str, list[str]]) -> None:
    """Marshal *src* into *values* with the default mapper."""
    default_mapper.marshal(src, values)


def unmarshal(values: Mapping[str, Sequence[str]] | None, dst: Any) -> None:
    """Unmarshal *values* into *dst* with the default mapper."""
    default_mapper.unmarshal(values, dst)


def marshal_header(src: Any, headers: MutableMapping[str, list[str]]) -> None:
    """Marshal *src* into *headers* using canonical header keys."""
    header_mapper.marshal(src, headers)


def unmarshal_header(headers: Mapping[str, Sequence[str]] | None, dst: Any) -> None:
    """Unmarshal *headers*, keyed by canonical header keys, into *dst*."""
    header_mapper.unmarshal(headers, dst)


__all__ = [
    # Engine
    "StructMapper",
    "MapConfig",
    "PlanCache",
    "Direction",
    "default_mapper",
    "header_mapper",
    "marshal",
    "unmarshal",
    "marshal_header",
    "unmarshal_header",
    "canonical_header_key",
    # Declarations
    "mapfield",
    "Bits",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "ValueMarshaler",
    "ValueUnmarshaler",
    # Exceptions
    "StructMapError",
    "PlanCompilationError",
    "UnsupportedKindError",
    "UnknownOptionError",
    "ConflictingOptionsError",
    "InvalidOptionError",
    "InvalidTargetError",
    "MissingValueError",
    "MissingKeyError",
    "ParseIntError",
    "IntegerSyntaxError",
    "IntegerRangeError",
    "ListElementError",
]
