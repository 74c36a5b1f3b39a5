"""
Filter expressions over string-valued resources.

A filter is a predicate over a resource (a mapping of field name to string
value). Filters form a closed set of kinds: boolean literals, field
comparisons, and the `AND`/`OR`/`NOT` combinators. Build them with the
`Filter` factory, which validates every argument up front; a constructed
filter never fails because of its own configuration.

Example:
    from resource_filters import F

    admins_over_30 = F.and_([
        F.greater_than("age", 30),
        F.equals_to("role", "administrator"),
    ])
    admins_over_30.matches({"age": "35", "role": "Administrator"})  # True

    # Operators are shorthand for the combinators
    filter = (F.is_present("email") | F.is_present("phone")) & ~F.equals_to("status", "archived")

    # Portable JSON form
    text = filter.to_json()
    assert F.from_json(text) == filter
"""

from __future__ import annotations

import dataclasses
import math
import numbers
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from .config import DEFAULT_DECODE_LIMITS, DecodeLimits
from .exceptions import InvalidArgumentError, InvalidFieldTypeError
from .types import FilterType, Resource

# Plain decimal notation; excludes inf/nan, hex and digit separators that
# float() would otherwise accept.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_decimal(text: str | None) -> float | None:
    """Parse a field value as a finite number, or return None."""
    if text is None:
        return None
    candidate = text.strip()
    if not _DECIMAL_RE.fullmatch(candidate):
        return None
    number = float(candidate)
    return number if math.isfinite(number) else None


def _numeric_field(resource: Resource, field: str) -> float | None:
    """
    Read a field as a number.

    Returns None when the field is absent. Raises `InvalidFieldTypeError` when
    the field is present but `None` or not a finite decimal number.
    """
    if field not in resource:
        return None
    raw = resource[field]
    number = parse_decimal(raw)
    if number is None:
        raise InvalidFieldTypeError(
            f"Field '{field}' must be a valid number, but found: {raw!r}",
            field=field,
            value=raw,
        )
    return number


class FilterExpression:
    """Base class for filter expressions."""

    __slots__ = ()

    kind: ClassVar[FilterType]

    def matches(self, resource: Resource) -> bool:
        """
        Evaluate the filter against a resource.

        Evaluation recurses once per nesting level, so trees nested deeper than
        the interpreter recursion limit (about a thousand levels) raise
        `RecursionError`.

        Raises:
            InvalidFieldTypeError: If a numeric comparison reaches a field whose
                value is not a number.
        """
        return evaluate(self, resource)

    def to_record(self) -> dict[str, Any]:
        """Convert the expression to its canonical JSON-ready record."""
        from .encoding import to_record

        return to_record(self)

    def to_json(self) -> str:
        """Convert the expression to its canonical JSON text."""
        from .encoding import encode

        return encode(self)

    def __and__(self, other: FilterExpression) -> FilterExpression:
        """Combine two expressions with `&`."""
        return Filter.and_([self, other])

    def __or__(self, other: FilterExpression) -> FilterExpression:
        """Combine two expressions with `|`."""
        return Filter.or_([self, other])

    def __invert__(self) -> FilterExpression:
        """Negate the expression with `~`."""
        return Filter.not_(self)

    def __str__(self) -> str:
        return self.to_json()


# =============================================================================
# Leaf predicates
# =============================================================================


@dataclass(frozen=True, slots=True)
class TrueFilter(FilterExpression):
    """Matches every resource."""

    kind: ClassVar[FilterType] = FilterType.TRUE


@dataclass(frozen=True, slots=True)
class FalseFilter(FilterExpression):
    """Matches no resource."""

    kind: ClassVar[FilterType] = FilterType.FALSE


@dataclass(frozen=True, slots=True)
class GreaterThan(FilterExpression):
    """Field, read as a number, is strictly greater than `value`."""

    kind: ClassVar[FilterType] = FilterType.GREATER_THAN

    field: str
    value: float


@dataclass(frozen=True, slots=True)
class LessThan(FilterExpression):
    """Field, read as a number, is strictly less than `value`."""

    kind: ClassVar[FilterType] = FilterType.LESS_THAN

    field: str
    value: float


@dataclass(frozen=True, slots=True)
class IsEqual(FilterExpression):
    """Field equals `value`, ignoring case."""

    kind: ClassVar[FilterType] = FilterType.IS_EQUAL

    field: str
    value: str


@dataclass(frozen=True, slots=True)
class IsPresent(FilterExpression):
    """Field exists and holds a non-blank value."""

    kind: ClassVar[FilterType] = FilterType.IS_PRESENT

    field: str


@dataclass(frozen=True, slots=True)
class MatchesExpression(FilterExpression):
    """Field contains a match for a case-insensitive regular expression."""

    kind: ClassVar[FilterType] = FilterType.MATCHES_EXPRESSION

    field: str
    pattern: str
    regex: re.Pattern[str] = dataclasses.field(compare=False, repr=False)


# =============================================================================
# Combinators
# =============================================================================


@dataclass(frozen=True, slots=True)
class And(FilterExpression):
    """All child filters match."""

    kind: ClassVar[FilterType] = FilterType.AND

    filters: tuple[FilterExpression, ...]


@dataclass(frozen=True, slots=True)
class Or(FilterExpression):
    """At least one child filter matches."""

    kind: ClassVar[FilterType] = FilterType.OR

    filters: tuple[FilterExpression, ...]


@dataclass(frozen=True, slots=True)
class Not(FilterExpression):
    """The child filter does not match."""

    kind: ClassVar[FilterType] = FilterType.NOT

    expr: FilterExpression


_TRUE = TrueFilter()
_FALSE = FalseFilter()


def evaluate(expr: FilterExpression, resource: Resource) -> bool:
    """
    Evaluate a filter expression against a resource.

    Combinators evaluate children in order and stop as soon as the result is
    known. Errors raised by an evaluated child propagate unchanged.
    """
    match expr:
        case TrueFilter():
            return True
        case FalseFilter():
            return False
        case GreaterThan(field=field, value=threshold):
            number = _numeric_field(resource, field)
            return number is not None and number > threshold
        case LessThan(field=field, value=threshold):
            number = _numeric_field(resource, field)
            return number is not None and number < threshold
        case IsEqual(field=field, value=expected):
            actual = resource.get(field)
            return actual is not None and actual.lower() == expected.lower()
        case IsPresent(field=field):
            actual = resource.get(field)
            return actual is not None and actual.strip() != ""
        case MatchesExpression(field=field, regex=regex):
            # A None value cannot contain a match.
            actual = resource.get(field)
            return actual is not None and regex.search(actual) is not None
        case And(filters=children):
            return all(evaluate(child, resource) for child in children)
        case Or(filters=children):
            return any(evaluate(child, resource) for child in children)
        case Not(expr=child):
            return not evaluate(child, resource)
    raise TypeError(f"Unsupported filter expression: {type(expr).__name__}")


# =============================================================================
# Construction API
# =============================================================================


def _require_field(field: Any) -> str:
    if field is None:
        raise InvalidArgumentError("field must not be None", argument="field")
    if not isinstance(field, str):
        raise InvalidArgumentError(
            f"field must be a string, got {type(field).__name__}", argument="field"
        )
    if not field:
        raise InvalidArgumentError("field must not be empty", argument="field")
    return field


def _require_threshold(value: Any) -> float:
    # bool is an int subclass but never a meaningful threshold
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(
            f"value must be a real number, got {type(value).__name__}", argument="value"
        )
    number = float(value)
    if not math.isfinite(number):
        raise InvalidArgumentError(f"value must be finite, got {number!r}", argument="value")
    return number


def _require_text(value: Any, argument: str) -> str:
    if value is None:
        raise InvalidArgumentError(f"{argument} must not be None", argument=argument)
    if not isinstance(value, str):
        raise InvalidArgumentError(
            f"{argument} must be a string, got {type(value).__name__}", argument=argument
        )
    return value


def _require_expression(expr: Any, argument: str) -> FilterExpression:
    if expr is None:
        raise InvalidArgumentError(f"{argument} must not be None", argument=argument)
    if not isinstance(expr, FilterExpression):
        raise InvalidArgumentError(
            f"{argument} must be a filter expression, got {type(expr).__name__}",
            argument=argument,
        )
    return expr


def _require_filters(filters: Any, operation: str) -> tuple[FilterExpression, ...]:
    if filters is None:
        raise InvalidArgumentError(f"{operation}() filters must not be None", argument="filters")
    if isinstance(filters, (str, bytes)) or not isinstance(filters, Sequence):
        raise InvalidArgumentError(
            f"{operation}() requires a sequence of filters, got {type(filters).__name__}",
            argument="filters",
        )
    if not filters:
        raise InvalidArgumentError(
            f"{operation}() requires at least one filter", argument="filters"
        )
    return tuple(
        _require_expression(expr, f"filters[{index}]") for index, expr in enumerate(filters)
    )


class Filter:
    """
    Factory for building filter expressions.

    This is the supported way to construct filters: every factory validates
    its arguments and raises `InvalidArgumentError` on bad input.

    Example:
        # Simple comparison
        Filter.greater_than("age", 30)

        # Complex boolean logic
        Filter.and_([
            Filter.equals_to("role", "administrator"),
            Filter.not_(Filter.matches_expression("email", r"@example\\.com$")),
        ])
    """

    @staticmethod
    def true_filter() -> FilterExpression:
        """Filter that matches every resource."""
        return _TRUE

    @staticmethod
    def false_filter() -> FilterExpression:
        """Filter that matches no resource."""
        return _FALSE

    @staticmethod
    def greater_than(field: str, value: float) -> FilterExpression:
        """Field is a number strictly greater than `value`."""
        return GreaterThan(_require_field(field), _require_threshold(value))

    @staticmethod
    def less_than(field: str, value: float) -> FilterExpression:
        """Field is a number strictly less than `value`."""
        return LessThan(_require_field(field), _require_threshold(value))

    @staticmethod
    def equals_to(field: str, value: str) -> FilterExpression:
        """Field equals `value` (case-insensitive). An empty `value` is allowed."""
        return IsEqual(_require_field(field), _require_text(value, "value"))

    @staticmethod
    def is_present(field: str) -> FilterExpression:
        """Field exists with a non-blank value."""
        return IsPresent(_require_field(field))

    @staticmethod
    def matches_expression(field: str, pattern: str) -> FilterExpression:
        """
        Field contains a match for `pattern`.

        The pattern is compiled case-insensitively and searched anywhere in the
        value; use `^`/`$` to anchor it.
        """
        field = _require_field(field)
        pattern = _require_text(pattern, "pattern")
        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidArgumentError(
                f"Pattern {pattern!r} is not a valid regular expression: {e}",
                argument="pattern",
            ) from e
        return MatchesExpression(field, pattern, regex)

    @staticmethod
    def and_(filters: Sequence[FilterExpression]) -> FilterExpression:
        """All of `filters` match. Children are evaluated in order."""
        return And(_require_filters(filters, "and_"))

    @staticmethod
    def or_(filters: Sequence[FilterExpression]) -> FilterExpression:
        """Any of `filters` matches. Children are evaluated in order."""
        return Or(_require_filters(filters, "or_"))

    @staticmethod
    def not_(expr: FilterExpression) -> FilterExpression:
        """Negate `expr`."""
        return Not(_require_expression(expr, "expr"))

    @staticmethod
    def from_json(
        text: str | bytes, *, limits: DecodeLimits = DEFAULT_DECODE_LIMITS
    ) -> FilterExpression:
        """
        Decode a filter from its JSON encoding.

        See `resource_filters.decoding.decode`.
        """
        from .decoding import decode

        return decode(text, limits=limits)


# Shorthand alias for convenience
F = Filter
