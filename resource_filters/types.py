"""
Shared type definitions.

`FilterType` is the closed set of filter kinds. Its values are the canonical
tags used by the JSON encoding.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TypeAlias

Resource: TypeAlias = Mapping[str, str | None]
"""A resource: field name -> field value. A value may be present but `None`."""


class FilterType(Enum):
    """Kinds of filter, valued by their canonical encoding tag."""

    TRUE = "TrueFilter"
    FALSE = "FalseFilter"
    GREATER_THAN = "GreaterThan"
    LESS_THAN = "LessThan"
    IS_EQUAL = "IsEqual"
    IS_PRESENT = "IsPresent"
    MATCHES_EXPRESSION = "MatchesExpression"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    @property
    def tag(self) -> str:
        return self.value

    @classmethod
    def from_tag(cls, tag: str) -> FilterType | None:
        """Look up a kind by tag, ignoring case. Returns None for unknown tags."""
        return _BY_FOLDED_TAG.get(tag.casefold())


_BY_FOLDED_TAG: dict[str, FilterType] = {kind.value.casefold(): kind for kind in FilterType}
