"""Tests for filter evaluation with matches()."""

from __future__ import annotations

import dataclasses

import pytest

from resource_filters import F, InvalidFieldTypeError
from resource_filters.filters import And, Not, Or, TrueFilter

# =============================================================================
# Boolean literals
# =============================================================================


def test_true_filter_matches_everything(user_age_35: dict, user_null: dict) -> None:
    """TrueFilter ignores the resource."""
    assert F.true_filter().matches(user_age_35)
    assert F.true_filter().matches(user_null)
    assert F.true_filter().matches({})


def test_false_filter_matches_nothing(user_age_25: dict) -> None:
    """FalseFilter ignores the resource."""
    assert not F.false_filter().matches(user_age_25)
    assert not F.false_filter().matches({})


def test_boolean_literals_are_shared_but_not_required_to_be() -> None:
    """Factories return shared instances; fresh instances behave the same."""
    assert F.true_filter() is F.true_filter()
    assert TrueFilter() == F.true_filter()
    assert TrueFilter().matches({})


# =============================================================================
# IsPresent
# =============================================================================


def test_is_present(user_age_35: dict) -> None:
    """Present, non-blank fields match."""
    assert F.is_present("firstname").matches(user_age_35)
    assert F.is_present("lastname").matches(user_age_35)
    assert F.is_present("age").matches(user_age_35)


def test_is_present_distinguishes_absent_null_and_empty(user_age_35: dict) -> None:
    """Absent, None and empty values all fail without raising."""
    assert not F.is_present("extra").matches(user_age_35)
    assert not F.is_present("testNull").matches(user_age_35)
    assert not F.is_present("testEmpty").matches(user_age_35)


def test_is_present_blank_value() -> None:
    """Whitespace-only values count as blank."""
    assert not F.is_present("note").matches({"note": "  \t"})
    assert F.is_present("note").matches({"note": " x "})


def test_is_present_field_name_is_case_sensitive(user_age_35: dict) -> None:
    assert not F.is_present("LastName").matches(user_age_35)


# =============================================================================
# IsEqual
# =============================================================================


def test_equals_to(user_age_35: dict) -> None:
    """Exact match on value."""
    assert F.equals_to("firstname", "Joe").matches(user_age_35)
    assert F.equals_to("lastname", "Bloggs").matches(user_age_35)
    assert F.equals_to("age", "35").matches(user_age_35)


def test_equals_to_ignores_value_case(user_age_35: dict) -> None:
    assert F.equals_to("lastname", "bloggs").matches(user_age_35)
    assert F.equals_to("lastname", "BLOGGS").matches(user_age_35)


def test_equals_to_non_matching(user_age_35: dict) -> None:
    """Different value, empty expected value, wrong key case, missing key."""
    assert not F.equals_to("firstname", "John").matches(user_age_35)
    assert not F.equals_to("firstname", "").matches(user_age_35)
    assert not F.equals_to("FirstName", "Joe").matches(user_age_35)
    assert not F.equals_to("extra", "any").matches(user_age_35)
    assert not F.equals_to("age", "25").matches(user_age_35)


def test_equals_to_null_and_empty_values(user_age_35: dict) -> None:
    """A None value never equals anything; an empty value equals ''."""
    assert not F.equals_to("testNull", "").matches(user_age_35)
    assert F.equals_to("testEmpty", "").matches(user_age_35)


def test_equals_to_is_not_a_substring_match() -> None:
    assert not F.equals_to("name", "Acme").matches({"name": "Acme Corp"})


# =============================================================================
# GreaterThan / LessThan
# =============================================================================


def test_greater_than(user_age_35: dict) -> None:
    assert F.greater_than("age", 30).matches(user_age_35)
    assert not F.greater_than("age", 40).matches(user_age_35)


def test_greater_than_is_strict(user_age_35: dict) -> None:
    assert not F.greater_than("age", 35).matches(user_age_35)
    assert not F.less_than("age", 35).matches(user_age_35)


def test_less_than(user_age_25: dict) -> None:
    assert F.less_than("age", 30).matches(user_age_25)
    assert not F.less_than("age", 24).matches(user_age_25)


def test_less_than_fractional(user_age_25: dict) -> None:
    """Fractional values compare as floats."""
    assert not F.less_than("height", 1.20).matches(user_age_25)
    assert F.less_than("height", 1.71).matches(user_age_25)


def test_numeric_comparison_absent_field_is_false(user_age_35: dict) -> None:
    """An absent field is a non-match, not an error."""
    assert not F.greater_than("height", 0).matches(user_age_35)
    assert not F.less_than("height", 0).matches(user_age_35)
    assert not F.greater_than("age", 0).matches({})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (" 35 ", True),
        ("+31", True),
        ("1e2", True),
        ("30.5", True),
        (".5", False),
        ("-2E3", False),
    ],
)
def test_numeric_value_formats(raw: str, expected: bool) -> None:
    assert F.greater_than("n", 30).matches({"n": raw}) is expected


def test_greater_than_non_numeric_value_raises(user_age_35: dict) -> None:
    """A present, non-numeric value makes the predicate inapplicable."""
    with pytest.raises(InvalidFieldTypeError) as exc_info:
        F.greater_than("firstname", 30).matches(user_age_35)
    assert exc_info.value.field == "firstname"
    assert exc_info.value.value == "Joe"


def test_less_than_non_numeric_value_raises(user_age_35: dict) -> None:
    with pytest.raises(InvalidFieldTypeError):
        F.less_than("lastname", 20).matches(user_age_35)


def test_numeric_comparison_null_value_raises(user_null: dict) -> None:
    """A present-but-None value is not a number."""
    with pytest.raises(InvalidFieldTypeError):
        F.greater_than("age", 30).matches(user_null)
    with pytest.raises(InvalidFieldTypeError):
        F.less_than("age", 30).matches(user_null)


@pytest.mark.parametrize("raw", ["", "abc", "inf", "NaN", "1_000", "0x1A", "1e999", "3 5"])
def test_numeric_comparison_rejects_non_decimal_values(raw: str) -> None:
    with pytest.raises(InvalidFieldTypeError):
        F.greater_than("n", 0).matches({"n": raw})


# =============================================================================
# MatchesExpression
# =============================================================================


def test_matches_expression(user_age_35: dict) -> None:
    assert F.matches_expression("firstname", "Joe").matches(user_age_35)
    assert F.matches_expression("lastname", "Blog*.").matches(user_age_35)
    assert F.matches_expression("lastname", "bloggs").matches(user_age_35)
    assert F.matches_expression("age", "35").matches(user_age_35)


def test_matches_expression_non_matching(user_age_35: dict) -> None:
    assert not F.matches_expression("firstname", "John").matches(user_age_35)
    assert not F.matches_expression("FirstName", "Joe").matches(user_age_35)
    assert not F.matches_expression("extra", "any").matches(user_age_35)


def test_matches_expression_searches_substrings() -> None:
    """Unanchored patterns match anywhere; anchors are honored."""
    resource = {"email": "AbcXyz"}
    assert F.matches_expression("email", "cx").matches(resource)
    assert F.matches_expression("email", "^a.*z$").matches(resource)
    assert not F.matches_expression("email", "^b").matches(resource)


def test_matches_expression_null_value_is_false(user_age_35: dict) -> None:
    """A None value is treated as non-matching rather than an error."""
    assert not F.matches_expression("testNull", ".*").matches(user_age_35)
    assert F.matches_expression("testEmpty", "^$").matches(user_age_35)


# =============================================================================
# Combinators
# =============================================================================


def test_not() -> None:
    assert not F.not_(F.true_filter()).matches({})
    assert F.not_(F.false_filter()).matches({})


def test_and() -> None:
    t, f = F.true_filter(), F.false_filter()
    assert not F.and_([f, t]).matches({})
    assert not F.and_([f, f, f]).matches({})
    assert F.and_([t, t, t]).matches({})


def test_or() -> None:
    t, f = F.true_filter(), F.false_filter()
    assert F.or_([f, t]).matches({})
    assert F.or_([f, f, t]).matches({})
    assert not F.or_([f, f, f]).matches({})


def test_nested_combinators() -> None:
    t, f = F.true_filter(), F.false_filter()
    and_true = F.and_([t, t])
    and_false = F.and_([t, f])
    assert F.or_([and_true, and_false]).matches({})
    assert not F.or_([and_false, and_false]).matches({})
    assert F.not_(F.or_([and_false, and_false])).matches({})


def test_and_short_circuits_before_failing_child(user_age_35: dict) -> None:
    """A child after the first False is never evaluated."""
    failing = F.greater_than("firstname", 1)
    assert not F.and_([F.false_filter(), failing]).matches(user_age_35)
    with pytest.raises(InvalidFieldTypeError):
        F.and_([F.true_filter(), failing]).matches(user_age_35)


def test_or_short_circuits_before_failing_child(user_age_35: dict) -> None:
    """A child after the first True is never evaluated."""
    failing = F.greater_than("firstname", 1)
    assert F.or_([F.true_filter(), failing]).matches(user_age_35)
    with pytest.raises(InvalidFieldTypeError):
        F.or_([F.false_filter(), failing]).matches(user_age_35)


def test_not_propagates_errors(user_age_35: dict) -> None:
    with pytest.raises(InvalidFieldTypeError):
        F.not_(F.less_than("firstname", 1)).matches(user_age_35)


@pytest.mark.parametrize(
    "expr",
    [
        F.true_filter(),
        F.is_present("age"),
        F.equals_to("role", "Administrator"),
        F.greater_than("age", 30),
        F.or_([F.less_than("age", 30), F.matches_expression("lastname", "^b")]),
    ],
)
def test_double_negation(expr, user_age_35: dict, user_age_25: dict) -> None:
    for resource in (user_age_35, user_age_25, {}):
        assert F.not_(F.not_(expr)).matches(resource) == expr.matches(resource)


def test_combinator_order_does_not_change_result(user_age_35: dict) -> None:
    a = F.greater_than("age", 30)
    b = F.equals_to("role", "administrator")
    c = F.is_present("extra")
    assert F.and_([a, b]).matches(user_age_35) == F.and_([b, a]).matches(user_age_35)
    assert F.or_([a, c]).matches(user_age_35) == F.or_([c, a]).matches(user_age_35)


# =============================================================================
# Operators and value semantics
# =============================================================================


def test_operators_build_combinators() -> None:
    a = F.is_present("a")
    b = F.is_present("b")
    assert a & b == And((a, b))
    assert a | b == Or((a, b))
    assert ~a == Not(a)


def test_operators_evaluate() -> None:
    expr = (F.equals_to("status", "A") | F.equals_to("status", "B")) & ~F.is_present("archived")
    assert expr.matches({"status": "a"})
    assert expr.matches({"status": "B", "archived": ""})
    assert not expr.matches({"status": "B", "archived": "yes"})
    assert not expr.matches({"status": "C"})


def test_filters_are_immutable() -> None:
    expr = F.greater_than("age", 30)
    with pytest.raises(dataclasses.FrozenInstanceError):
        expr.field = "height"  # type: ignore[misc]


def test_filters_compare_structurally() -> None:
    """Equal arguments give equal, hashable filters; compiled regex is not compared."""
    assert F.matches_expression("a", "x+") == F.matches_expression("a", "x+")
    assert F.matches_expression("a", "x+") != F.matches_expression("a", "y+")
    assert F.and_([F.is_present("a")]) == F.and_((F.is_present("a"),))
    assert len({F.greater_than("age", 30), F.greater_than("age", 30.0)}) == 1


def test_matches_does_not_mutate_resource(user_age_35: dict) -> None:
    snapshot = dict(user_age_35)
    F.and_([F.is_present("age"), F.matches_expression("lastname", "g+")]).matches(user_age_35)
    assert user_age_35 == snapshot


def test_evaluation_depth_is_bounded_by_interpreter() -> None:
    """Evaluation recurses per level; very deep trees hit the recursion limit."""
    expr = F.true_filter()
    for _ in range(10_000):
        expr = F.not_(expr)
    with pytest.raises(RecursionError):
        expr.matches({})
