"""
Pydantic models for the attributes of encoded filter records.

Each model validates one record shape; the `type` tag is dispatched by the
decoder before a model is chosen, and unrelated keys are ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, StrictStr, field_validator

from .filters import parse_decimal


class _RecordModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
    )


class LiteralRecord(_RecordModel):
    """`TrueFilter` / `FalseFilter`. The literal value is optional."""

    value: StrictStr | None = None


class FieldRecord(_RecordModel):
    """`IsPresent`."""

    field: StrictStr


class TextRecord(_RecordModel):
    """`IsEqual` and `MatchesExpression`; `value` holds the string or pattern."""

    field: StrictStr
    value: StrictStr


class ThresholdRecord(_RecordModel):
    """
    `GreaterThan` / `LessThan`.

    `value` may be a JSON number or decimal text ("30.0").
    """

    field: StrictStr
    value: FiniteFloat

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_decimal(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        if isinstance(value, str):
            number = parse_decimal(value)
            if number is None:
                raise ValueError(f"must be a finite decimal number, got {value!r}")
            return number
        return value


class CompoundRecord(_RecordModel):
    """`AND` / `OR`. Children are decoded separately."""

    filters: list[Any] = Field(min_length=1)


class NegationRecord(_RecordModel):
    """`NOT`. The child is decoded separately."""

    filter: Any
