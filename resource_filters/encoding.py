"""
Canonical JSON encoding of filter expressions.

Every filter encodes to exactly one text. Records use a fixed key order
(`type`, then `field`/`value` for leaves, `filters` or `filter` for
combinators) and compact separators, so equal filters always produce equal
text and `decoding.decode` reproduces the same filter.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from .filters import (
    And,
    FalseFilter,
    FilterExpression,
    GreaterThan,
    IsEqual,
    IsPresent,
    LessThan,
    MatchesExpression,
    Not,
    Or,
    TrueFilter,
)
from .types import FilterType


def format_number(value: float) -> str:
    """
    Render a finite number as plain decimal text.

    Uses the shortest representation that round-trips through `float()`,
    expanded out of scientific notation, e.g. `30` -> "30.0",
    `1e-7` -> "0.0000001".
    """
    text = format(Decimal(repr(float(value))), "f")
    return text if "." in text else f"{text}.0"


def to_record(expr: FilterExpression) -> dict[str, Any]:
    """Build the JSON-ready record for a filter, recursing into children."""
    match expr:
        case TrueFilter():
            return {"type": FilterType.TRUE.tag, "value": "true"}
        case FalseFilter():
            return {"type": FilterType.FALSE.tag, "value": "false"}
        case GreaterThan(field=field, value=value) | LessThan(field=field, value=value):
            return {"type": expr.kind.tag, "field": field, "value": format_number(value)}
        case IsEqual(field=field, value=value):
            return {"type": FilterType.IS_EQUAL.tag, "field": field, "value": value}
        case IsPresent(field=field):
            return {"type": FilterType.IS_PRESENT.tag, "field": field}
        case MatchesExpression(field=field, pattern=pattern):
            return {"type": FilterType.MATCHES_EXPRESSION.tag, "field": field, "value": pattern}
        case And(filters=children) | Or(filters=children):
            return {"type": expr.kind.tag, "filters": [to_record(child) for child in children]}
        case Not(expr=child):
            return {"type": FilterType.NOT.tag, "filter": to_record(child)}
    raise TypeError(f"Unsupported filter expression: {type(expr).__name__}")


def encode(expr: FilterExpression) -> str:
    """
    Encode a filter as canonical JSON text.

    Example:
        >>> encode(F.greater_than("age", 30))
        '{"type":"GreaterThan","field":"age","value":"30.0"}'
    """
    return json.dumps(to_record(expr), separators=(",", ":"))
