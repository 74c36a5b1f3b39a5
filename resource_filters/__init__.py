"""
Composable filters over string-valued resources.

Build filters with the `Filter` factory (alias `F`), evaluate them with
`matches()`, and move them between processes with the canonical JSON
encoding (`encode` / `decode`).

Example:
    from resource_filters import F, decode, encode

    filter = F.and_([F.greater_than("age", 30), F.equals_to("role", "administrator")])
    filter.matches({"age": "35", "role": "administrator"})  # True

    assert decode(encode(filter)) == filter
"""

from __future__ import annotations

from .config import DEFAULT_DECODE_LIMITS, DecodeLimits
from .decoding import decode, from_record
from .encoding import encode, to_record
from .exceptions import (
    FilterDecodeError,
    FilterError,
    InvalidArgumentError,
    InvalidFieldTypeError,
    MalformedFilterError,
    UnknownFilterTypeError,
)
from .filters import F, Filter, FilterExpression
from .types import FilterType, Resource

__version__ = "0.1.0"

__all__ = [
    # Construction
    "Filter",
    "F",
    "FilterExpression",
    "FilterType",
    "Resource",
    # Encoding
    "encode",
    "to_record",
    "decode",
    "from_record",
    # Configuration
    "DecodeLimits",
    "DEFAULT_DECODE_LIMITS",
    # Exceptions
    "FilterError",
    "InvalidArgumentError",
    "InvalidFieldTypeError",
    "FilterDecodeError",
    "MalformedFilterError",
    "UnknownFilterTypeError",
    "__version__",
]
