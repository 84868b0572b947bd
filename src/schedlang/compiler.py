"""Compiles the expression syntax tree into rule groups.

Each ``group(...)`` expression becomes its own ``RuleGroup``. All other
top-level expressions are collected into one implicit group that follows the
explicit ones. Within a group every argument is normalized into a ``Range``
that has been checked against the bounds of its field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from schedlang.errors import ErrorReporter
from schedlang.fields import FieldKind, resolve_field
from schedlang.nodes import Argument, ArgumentType, Expression, MonthDay, Node, Range
from schedlang.tokens import Token

logger = logging.getLogger(__name__)

# finest first
TIME_FIELDS = (FieldKind.SECONDS, FieldKind.MINUTES, FieldKind.HOURS)

FIRST_DATE = MonthDay(1, 1)
LAST_DATE = MonthDay(12, 31)


# =============================================================================
# Rule Group
# =============================================================================


def _ranges_property(kind: FieldKind, exclude: bool = False) -> property:
    def getter(self: "RuleGroup") -> list[Range]:
        source = self.excludes if exclude else self.includes
        return source.get(kind, [])

    suffix = " excluded from" if exclude else " allowed in"
    getter.__doc__ = f"Ranges{suffix} {kind.value}."
    return property(getter)


@dataclass
class RuleGroup:
    """One compiled alternative of a schedule.

    ``includes`` maps each constrained field to its allowed ranges and
    ``excludes`` to the ranges removed from it. A field missing from both is
    unconstrained. ``has_dates`` is set when the group contains a dates
    expression, including an argument-less ``date()`` which adds no range.
    """

    includes: dict[FieldKind, list[Range]] = field(default_factory=dict)
    excludes: dict[FieldKind, list[Range]] = field(default_factory=dict)
    has_dates: bool = False

    seconds = _ranges_property(FieldKind.SECONDS)
    seconds_exclude = _ranges_property(FieldKind.SECONDS, exclude=True)
    minutes = _ranges_property(FieldKind.MINUTES)
    minutes_exclude = _ranges_property(FieldKind.MINUTES, exclude=True)
    hours = _ranges_property(FieldKind.HOURS)
    hours_exclude = _ranges_property(FieldKind.HOURS, exclude=True)
    days_of_week = _ranges_property(FieldKind.DAYS_OF_WEEK)
    days_of_week_exclude = _ranges_property(FieldKind.DAYS_OF_WEEK, exclude=True)
    days_of_month = _ranges_property(FieldKind.DAYS_OF_MONTH)
    days_of_month_exclude = _ranges_property(FieldKind.DAYS_OF_MONTH, exclude=True)
    dates = _ranges_property(FieldKind.DATES)
    dates_exclude = _ranges_property(FieldKind.DATES, exclude=True)

    def add(self, kind: FieldKind, value: Range, exclude: bool = False) -> None:
        target = self.excludes if exclude else self.includes
        target.setdefault(kind, []).append(value)

    def has(self, kind: FieldKind) -> bool:
        """True if ``kind`` has include or exclude ranges."""
        return kind in self.includes or kind in self.excludes

    @property
    def fields(self) -> list[FieldKind]:
        return [kind for kind in FieldKind if self.has(kind)]


# =============================================================================
# Compiler
# =============================================================================


class GroupCompiler:
    """Turns top-level expressions into ``RuleGroup`` objects."""

    def __init__(self, reporter: ErrorReporter) -> None:
        self.reporter = reporter

    def compile(self, ast: list[Node]) -> list[RuleGroup]:
        """Compile a parsed document.

        Raises:
            ScheduleSyntaxError: If the document has no rules or any
                expression is invalid.
        """
        groups: list[RuleGroup] = []
        implicit: list[Node] = []

        for node in ast:
            if not isinstance(node, Expression):
                raise self.reporter.error(
                    "Syntax tree is invalid. Top-level item is not an expression.",
                    node.first_token,
                )
            if node.is_group:
                groups.append(self.compile_group(node.arguments, node.first_token))
            else:
                implicit.append(node)

        if implicit:
            groups.append(self.compile_group(implicit, implicit[0].first_token))

        if not groups:
            raise self.reporter.error("No rules in schedule.", Token(0, ""))

        logger.debug("Compiled %d rule groups", len(groups))
        return groups

    def compile_group(self, expressions: list[Node], anchor: Token) -> RuleGroup:
        """Compile the expressions of one group."""
        group = RuleGroup()
        something_set = False

        for node in expressions:
            if not isinstance(node, Expression):
                raise self.reporter.error("Expected an expression argument.", node.first_token)
            if node.is_group:
                raise self.reporter.error("Groups cannot be nested.", node.first_token)

            kind = resolve_field(node.name)
            if kind is None:
                raise self.reporter.error(f"Unknown expression {node.name}", node.first_token)

            arguments = list(node.arguments)
            if kind is FieldKind.DATES:
                group.has_dates = True
            if not arguments:
                if kind is FieldKind.DATES:
                    # no range: every date
                    something_set = True
                    continue
                arguments.append(Argument(ArgumentType.WILDCARD, None, node.first_token))

            for argument in arguments:
                if isinstance(argument, Expression):
                    raise self.reporter.error(
                        f"Invalid argument. Expressions cannot be nested inside {node.name}.",
                        argument.first_token,
                    )
                group.add(kind, self.normalize(kind, node, argument), exclude=argument.is_exclude)
                something_set = True

        if not something_set:
            raise self.reporter.error("No rules in schedule.", anchor)

        self._apply_implied_defaults(group)
        return group

    def normalize(self, kind: FieldKind, expression: Expression, argument: Argument) -> Range:
        """Validate ``argument`` for ``kind`` and convert it to a ``Range``."""
        if kind is FieldKind.DATES:
            return self._normalize_dates(argument)

        constraints = kind.constraints
        min_value = constraints.min_value
        max_value = constraints.max_value
        split = False

        if argument.type is ArgumentType.WILDCARD:
            low, high = constraints.wildcard_low, max_value

        elif argument.type is ArgumentType.DATES:
            raise self.reporter.error(
                "Invalid argument. Dates can only be used inside dates expressions.",
                argument.first_token,
            )

        elif argument.type is ArgumentType.DAYS or (
            argument.type is ArgumentType.RANGE and kind is FieldKind.DAYS_OF_WEEK
        ):
            if kind is not FieldKind.DAYS_OF_WEEK:
                raise self.reporter.error(
                    "Weekday names can only be used inside days_of_week expressions.",
                    argument.first_token,
                )
            assert isinstance(argument.value, Range)
            low, high = argument.value.low, argument.value.high
            if high < low:
                # wraps the end of the week
                split = True
            elif argument.modulus and high == low:
                high = max_value

        elif argument.type is ArgumentType.NUMBER:
            assert isinstance(argument.value, int)
            low = high = argument.value
            if argument.modulus:
                high = max_value

        elif argument.type is ArgumentType.RANGE:
            assert isinstance(argument.value, Range)
            low, high = argument.value.low, argument.value.high
            # negative values count back from the end and sort after positive ones
            if low > high and not (low >= 0 and high < 0):
                split = True

        else:
            raise self.reporter.error(
                f"Invalid argument in {expression.name} expression.", argument.first_token
            )

        if low < min_value or high < min_value:
            raise self.reporter.error(
                f"Minimum {kind.value} value is {min_value}", argument.first_token
            )
        if low > max_value or high > max_value:
            raise self.reporter.error(
                f"Maximum {kind.value} value is {max_value}", argument.first_token
            )
        if kind is FieldKind.DAYS_OF_MONTH and (low == 0 or high == 0):
            raise self.reporter.error("Day of month cannot be zero.", argument.first_token)

        if kind is FieldKind.DAYS_OF_WEEK:
            # Monday=0, as datetime.weekday()
            low -= 1
            high -= 1

        self._check_modulus(argument)
        return Range(low, high, split, argument.modulus)

    def _normalize_dates(self, argument: Argument) -> Range:
        # dates were validated by the parser
        if argument.type is ArgumentType.WILDCARD:
            low, high = FIRST_DATE, LAST_DATE
        elif argument.type is ArgumentType.DATES:
            assert isinstance(argument.value, Range)
            low, high = argument.value.low, argument.value.high
        else:
            raise self.reporter.error("Invalid argument. Expected a date.", argument.first_token)

        assert isinstance(low, MonthDay) and isinstance(high, MonthDay)
        split = low > high

        self._check_modulus(argument)
        return Range(
            MonthDay(low.month - 1, low.day),
            MonthDay(high.month - 1, high.day),
            split,
            argument.modulus,
        )

    def _check_modulus(self, argument: Argument) -> None:
        if argument.modulus is not None and argument.modulus < 0:
            raise self.reporter.error(
                "Modulus value cannot be negative.", argument.first_token
            )

    @staticmethod
    def _apply_implied_defaults(group: RuleGroup) -> None:
        """Pin unset time fields below the finest set one to zero.

        ``hour(9)`` means 09:00:00 and ``date(1/1)`` alone means midnight.
        """
        for kind in TIME_FIELDS:
            if group.has(kind):
                break
            group.includes[kind] = [Range(0, 0)]
