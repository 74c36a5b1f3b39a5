"""
Decoding of filter expressions from their JSON encoding.

Decoding reads each record's `type` tag (case-insensitive), validates the
record's attributes, decodes any children, and rebuilds the filter through
the `Filter` factory so that every construction check still applies.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .config import DEFAULT_DECODE_LIMITS, DecodeLimits
from .exceptions import (
    FilterDecodeError,
    InvalidArgumentError,
    MalformedFilterError,
    UnknownFilterTypeError,
)
from .filters import Filter, FilterExpression
from .records import (
    CompoundRecord,
    FieldRecord,
    LiteralRecord,
    NegationRecord,
    TextRecord,
    ThresholdRecord,
)
from .types import FilterType

logger = logging.getLogger(__name__)

ROOT_PATH = "$"

TRecord = TypeVar("TRecord", bound=BaseModel)


def _parse_json_payload(payload: bytes | bytearray | str) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedFilterError("Encoded filter bytes are not valid UTF-8") from e
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedFilterError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise MalformedFilterError("Encoded filter is nested too deeply") from e


def _describe_validation_error(error: ValidationError) -> str:
    errors = error.errors()
    messages = [
        f"'{'.'.join(str(loc) for loc in err['loc'])}': {err['msg']}"
        if err["loc"]
        else err["msg"]
        for err in errors
    ]
    if len(messages) == 1:
        return f"Invalid attribute {messages[0]}"
    return "Invalid attributes:\n" + "\n".join(messages)


class _Decoder:
    """Recursive-descent decoder with depth and node-count bounds."""

    def __init__(self, limits: DecodeLimits) -> None:
        self._limits = limits
        self._nodes = 0

    def decode(self, data: Any, path: str, depth: int) -> FilterExpression:
        if depth > self._limits.max_depth:
            raise MalformedFilterError(
                f"Filter nesting exceeds the maximum depth of {self._limits.max_depth}",
                path=path,
            )
        self._nodes += 1
        if self._nodes > self._limits.max_nodes:
            raise MalformedFilterError(
                f"Filter exceeds the maximum of {self._limits.max_nodes} records",
                path=path,
            )

        if not isinstance(data, Mapping):
            raise MalformedFilterError("Filter record must be a JSON object", path=path)

        kind = self._read_kind(data, path)
        logger.debug(f"Decoding {kind.tag} record at {path}")
        try:
            return self._build(kind, data, path, depth)
        except InvalidArgumentError as e:
            raise MalformedFilterError(e.message, path=path) from e

    def _read_kind(self, data: Mapping[str, Any], path: str) -> FilterType:
        if "type" not in data:
            raise MalformedFilterError("Filter record is missing required key: type", path=path)
        tag = data["type"]
        if not isinstance(tag, str):
            raise MalformedFilterError("Filter 'type' must be a string", path=path)
        kind = FilterType.from_tag(tag)
        if kind is None:
            raise UnknownFilterTypeError(tag, path=path)
        return kind

    def _build(
        self, kind: FilterType, data: Mapping[str, Any], path: str, depth: int
    ) -> FilterExpression:
        match kind:
            case FilterType.TRUE | FilterType.FALSE:
                literal = _validate(LiteralRecord, data, path)
                expected = "true" if kind is FilterType.TRUE else "false"
                if literal.value is not None and literal.value.lower() != expected:
                    raise MalformedFilterError(
                        f"{kind.tag} value must be '{expected}', got {literal.value!r}",
                        path=path,
                    )
                return Filter.true_filter() if kind is FilterType.TRUE else Filter.false_filter()
            case FilterType.GREATER_THAN:
                threshold = _validate(ThresholdRecord, data, path)
                return Filter.greater_than(threshold.field, threshold.value)
            case FilterType.LESS_THAN:
                threshold = _validate(ThresholdRecord, data, path)
                return Filter.less_than(threshold.field, threshold.value)
            case FilterType.IS_EQUAL:
                text = _validate(TextRecord, data, path)
                return Filter.equals_to(text.field, text.value)
            case FilterType.IS_PRESENT:
                presence = _validate(FieldRecord, data, path)
                return Filter.is_present(presence.field)
            case FilterType.MATCHES_EXPRESSION:
                text = _validate(TextRecord, data, path)
                return Filter.matches_expression(text.field, text.value)
            case FilterType.AND | FilterType.OR:
                compound = _validate(CompoundRecord, data, path)
                children = [
                    self.decode(child, f"{path}.filters[{index}]", depth + 1)
                    for index, child in enumerate(compound.filters)
                ]
                if kind is FilterType.AND:
                    return Filter.and_(children)
                return Filter.or_(children)
            case FilterType.NOT:
                negation = _validate(NegationRecord, data, path)
                return Filter.not_(self.decode(negation.filter, f"{path}.filter", depth + 1))
        raise UnknownFilterTypeError(kind.tag, path=path)


def _validate(model: type[TRecord], data: Mapping[str, Any], path: str) -> TRecord:
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        raise MalformedFilterError(_describe_validation_error(e), path=path) from None


def decode(
    payload: str | bytes | bytearray | Mapping[str, Any],
    *,
    limits: DecodeLimits = DEFAULT_DECODE_LIMITS,
) -> FilterExpression:
    """
    Decode an encoded filter.

    Args:
        payload: JSON text (str or UTF-8 bytes), or an already-decoded record.
        limits: Bounds on nesting depth and total record count.

    Returns:
        A filter equivalent to the one that produced the encoding.

    Raises:
        MalformedFilterError: If the input is not valid JSON, is not a filter
            record, misses a required attribute, has an attribute of the wrong
            type, violates a construction rule, or exceeds `limits`.
        UnknownFilterTypeError: If a record's `type` names no known filter.

    Examples:
        >>> decode('{"type":"GreaterThan","field":"age","value":"30.0"}').matches({"age": "35"})
        True

        >>> decode('{"type":"not","filter":{"type":"TrueFilter"}}').matches({})
        False
    """
    try:
        data: Any = (
            _parse_json_payload(payload)
            if isinstance(payload, (str, bytes, bytearray))
            else payload
        )
        try:
            return _Decoder(limits).decode(data, ROOT_PATH, depth=1)
        except RecursionError as e:
            raise MalformedFilterError("Encoded filter is nested too deeply") from e
    except FilterDecodeError as e:
        logger.debug(f"Rejected encoded filter: {e}")
        raise


def from_record(
    record: Mapping[str, Any], *, limits: DecodeLimits = DEFAULT_DECODE_LIMITS
) -> FilterExpression:
    """Decode a filter from an already-parsed record (e.g. `to_record()` output)."""
    return decode(record, limits=limits)
