"""Tests for the expression parser."""

import pytest

from schedlang.errors import ErrorReporter, ScheduleSyntaxError
from schedlang.nodes import Argument, ArgumentType, Expression, MonthDay, Range
from schedlang.parser import Parser
from schedlang.tokens import Token, tokenize


def parse(text, **kwargs):
    return Parser(tokenize(text), ErrorReporter(text), **kwargs).parse()


def parse_args(text):
    (expression,) = parse(text)
    return expression.arguments


def parse_error(text, **kwargs):
    with pytest.raises(ScheduleSyntaxError) as exc_info:
        parse(text, **kwargs)
    return exc_info.value


# =============================================================================
# Expression Tests
# =============================================================================


class TestExpressions:
    """Tests for name(...) expressions."""

    def test_single_expression(self):
        ast = parse("hour(5)")
        assert ast == [
            Expression(
                "hour",
                Token(0, "hour"),
                [Argument(ArgumentType.NUMBER, 5, Token(5, "5"))],
            )
        ]

    def test_empty_argument_list(self):
        (expression,) = parse("hour()")
        assert expression.arguments == []

    def test_multiple_top_level_expressions(self):
        """Test that top-level commas are optional."""
        assert [e.name for e in parse("hour(1) min(2)")] == ["hour", "min"]
        assert [e.name for e in parse("hour(1), min(2)")] == ["hour", "min"]

    def test_commas_between_arguments_are_optional(self):
        assert [a.value for a in parse_args("hour(1 2, 3)")] == [1, 2, 3]

    def test_nested_group(self):
        (group,) = parse("group(hour(1) min(2))")
        assert group.is_group
        assert [e.name for e in group.arguments] == ["hour", "min"]
        assert all(isinstance(e, Expression) for e in group.arguments)

    def test_name_keeps_case(self):
        (expression,) = parse("HOUR(1)")
        assert expression.name == "HOUR"

    def test_unknown_names_still_parse(self):
        (expression,) = parse("foo(1)")
        assert expression.name == "foo"


# =============================================================================
# Argument Tests
# =============================================================================


class TestArguments:
    """Tests for individual arguments."""

    def test_number(self):
        (arg,) = parse_args("hour(12)")
        assert arg.type is ArgumentType.NUMBER
        assert arg.value == 12
        assert not arg.is_exclude
        assert arg.modulus is None

    def test_negative_number(self):
        (arg,) = parse_args("dom(-1)")
        assert arg.type is ArgumentType.NUMBER
        assert arg.value == -1
        assert arg.first_token == Token(4, "-")

    def test_range(self):
        (arg,) = parse_args("hour(9-17)")
        assert arg.type is ArgumentType.RANGE
        assert arg.value == Range(9, 17)

    def test_range_to_negative(self):
        (arg,) = parse_args("dom(25--1)")
        assert arg.value == Range(25, -1)

    def test_day_range(self):
        (arg,) = parse_args("day(fri-mon)")
        assert arg.type is ArgumentType.DAYS
        assert arg.value == Range(5, 1)

    def test_single_day(self):
        (arg,) = parse_args("day(Sunday)")
        assert arg.type is ArgumentType.DAYS
        assert arg.value == Range(7, 7)

    def test_day_to_number_range(self):
        (arg,) = parse_args("day(mon-5)")
        assert arg.type is ArgumentType.DAYS
        assert arg.value == Range(1, 5)

    def test_number_to_day_range(self):
        (arg,) = parse_args("day(1-fri)")
        assert arg.type is ArgumentType.DAYS
        assert arg.value == Range(1, 5)

    def test_date(self):
        (arg,) = parse_args("date(12/25)")
        assert arg.type is ArgumentType.DATES
        assert arg.value == Range(MonthDay(12, 25), MonthDay(12, 25))

    def test_date_range(self):
        (arg,) = parse_args("date(11/15 - 2/1)")
        assert arg.type is ArgumentType.DATES
        assert arg.value == Range(MonthDay(11, 15), MonthDay(2, 1))

    def test_leap_day(self):
        (arg,) = parse_args("date(2/29)")
        assert arg.value.low == MonthDay(2, 29)

    def test_wildcard(self):
        (arg,) = parse_args("min(%)")
        assert arg.type is ArgumentType.WILDCARD
        assert arg.value is None
        assert arg.modulus is None

    @pytest.mark.parametrize("text", ["min(%15)", "min(%%15)", "min(% 15)"])
    def test_wildcard_modulus(self, text):
        (arg,) = parse_args(text)
        assert arg.type is ArgumentType.WILDCARD
        assert arg.modulus == 15

    def test_wildcard_followed_by_argument(self):
        args = parse_args("min(%, 5)")
        assert [a.type for a in args] == [ArgumentType.WILDCARD, ArgumentType.NUMBER]
        assert args[0].modulus is None

    def test_number_modulus(self):
        (arg,) = parse_args("min(0%15)")
        assert arg.type is ArgumentType.NUMBER
        assert arg.value == 0
        assert arg.modulus == 15

    def test_negative_modulus_parses(self):
        (arg,) = parse_args("hour(1%-2)")
        assert arg.modulus == -2

    def test_range_modulus(self):
        (arg,) = parse_args("hour(8-18%2)")
        assert arg.value == Range(8, 18)
        assert arg.modulus == 2

    def test_exclude(self):
        (arg,) = parse_args("hour(!12)")
        assert arg.is_exclude
        assert arg.value == 12
        assert arg.first_token == Token(5, "!")

    def test_wildcard_value_invariant(self):
        with pytest.raises(ValueError):
            Argument(ArgumentType.WILDCARD, 5, Token(0, "%"))
        with pytest.raises(ValueError):
            Argument(ArgumentType.NUMBER, None, Token(0, "5"))


# =============================================================================
# Syntax Error Tests
# =============================================================================


class TestSyntaxErrors:
    """Tests for malformed input."""

    def test_missing_closing_parenthesis(self):
        error = parse_error("hour(")
        assert error.message == "Expression is missing a closing parenthesis."
        assert error.position == 0

    def test_missing_closing_parenthesis_after_arguments(self):
        error = parse_error("min(1) hour(5")
        assert error.message == "Expression is missing a closing parenthesis."
        assert error.position == 7

    def test_no_opening_parenthesis(self):
        error = parse_error("hour")
        assert error.message == "Expression has no opening parenthesis."
        assert error.position == 0

    def test_wrong_token_instead_of_parenthesis(self):
        error = parse_error("hour 5")
        assert error.message == "Unexpected token. Expected an opening parenthesis."
        assert error.position == 5

    @pytest.mark.parametrize("text", ["5", "(hour(1))", ", hour(1)", "hour(1) )"])
    def test_expected_expression(self, text):
        error = parse_error(text)
        assert error.message == "Unexpected token. Expected an expression."

    def test_empty_argument(self):
        error = parse_error("hour(1,,2)")
        assert error.message == "Empty argument."
        assert error.position == 7

    def test_leading_comma_argument(self):
        error = parse_error("hour(,1)")
        assert error.message == "Empty argument."

    def test_exclude_without_operand(self):
        error = parse_error("hour(!)")
        assert error.message == "Empty argument."
        assert error.position == 5

    def test_end_after_exclude(self):
        error = parse_error("hour(!")
        assert error.message == "Unexpected end of format string."

    def test_end_after_range_dash(self):
        error = parse_error("hour(1-")
        assert error.message == "Unexpected end of format string."

    def test_exclude_before_expression(self):
        error = parse_error("group(!hour(1))")
        assert error.message == "Unexpected token in argument."
        assert error.position == 6

    def test_non_numeric_argument(self):
        error = parse_error("hour(1x)")
        assert error.message == "Unknown argument syntax. Expected a number."
        assert error.position == 5

    def test_special_token_as_range_bound(self):
        error = parse_error("hour(1-)")
        assert error.message == "Unexpected token in argument."

    def test_invalid_month(self):
        error = parse_error("date(13/1)")
        assert error.message == "Invalid Month"
        assert error.position == 5

    @pytest.mark.parametrize("text", ["date(2/30)", "date(4/31)", "date(1/0)"])
    def test_invalid_date(self, text):
        error = parse_error(text)
        assert error.message == "Invalid Date"
        assert error.position == 5

    def test_invalid_date_anchored_at_excluded_argument(self):
        error = parse_error("date(!6/31)")
        assert error.message == "Invalid Date"
        assert error.position == 5

    @pytest.mark.parametrize("text", ["date(1/1-5)", "hour(1-1/5)", "day(mon-1/5)"])
    def test_mixed_range_bounds(self, text):
        error = parse_error(text)
        assert error.message == "Cannot mix numeric and date ranges."

    @pytest.mark.parametrize("text", ["hour(" + "9" * 5000 + ")", "hour(1-" + "9" * 10 + ")", "dom(-" + "1" * 20 + ")"])
    def test_number_too_large(self, text):
        error = parse_error(text)
        assert error.message == "Number is too large."

    def test_number_too_large_anchored_at_number(self):
        error = parse_error("hour(" + "9" * 5000 + ")")
        assert error.position == 5

    def test_leading_zeros_do_not_count_toward_length(self):
        assert parse_args("hour(0000000000007)")[0].value == 7


# =============================================================================
# Nesting Depth Tests
# =============================================================================


class TestNestingDepth:
    """Tests for the nesting bound."""

    def test_limit_enforced(self):
        error = parse_error("group(group(group(hour(1))))", max_depth=2)
        assert error.message == "Expressions are nested too deeply."
        assert error.position == 12

    def test_within_limit(self):
        assert len(parse("group(hour(1))", max_depth=2)) == 1

    def test_adversarial_nesting_fails_cleanly(self):
        text = "group(" * 500 + ")" * 500
        error = parse_error(text)
        assert error.message == "Expressions are nested too deeply."
