"""
Exception hierarchy.

All errors raised by this package derive from `FilterError`:

- `InvalidArgumentError`: a filter could not be constructed.
- `InvalidFieldTypeError`: a filter could not be evaluated against a resource.
- `FilterDecodeError`: an encoded filter could not be decoded
  (`MalformedFilterError`, `UnknownFilterTypeError`).
"""

from __future__ import annotations


class FilterError(Exception):
    """Base class for all filter errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Construction
# =============================================================================


class InvalidArgumentError(FilterError, ValueError):
    """A factory argument is missing or invalid."""

    def __init__(self, message: str, *, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


# =============================================================================
# Evaluation
# =============================================================================


class InvalidFieldTypeError(FilterError, TypeError):
    """
    A resource field cannot be coerced to the type a predicate needs.

    Raised by numeric comparisons when the field is present but its value is
    `None` or not a finite decimal number. An absent field is never an error.
    """

    def __init__(self, message: str, *, field: str, value: str | None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


# =============================================================================
# Decoding
# =============================================================================


class FilterDecodeError(FilterError):
    """Base class for errors raised while decoding an encoded filter."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(f"{message} (at {path})" if path else message)
        self.path = path


class MalformedFilterError(FilterDecodeError):
    """The input is not a structurally valid filter record."""


class UnknownFilterTypeError(FilterDecodeError):
    """The record's `type` tag names no known filter."""

    def __init__(self, tag: str, *, path: str = "") -> None:
        super().__init__(f"Unknown filter type: {tag!r}", path=path)
        self.tag = tag
