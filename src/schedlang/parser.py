"""Recursive-descent parser producing the expression syntax tree.

Every parse method takes the index of the current token and returns the index
of the first token it did not consume. Parsed nodes are appended to the
``context`` list handed in by the caller.
"""

from __future__ import annotations

import logging

from schedlang.errors import ErrorReporter
from schedlang.fields import days_in_month
from schedlang.nodes import Argument, ArgumentType, Bound, Expression, MonthDay, Node, Range
from schedlang.tokens import Token

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 16
MAX_DEPTH_LIMIT = 256
MAX_NUMBER_DIGITS = 9


class Parser:
    """Builds the syntax tree for one tokenized expression.

    A parser keeps no cursor of its own, but it is bound to a single token
    list. Create one per expression.
    """

    def __init__(
        self,
        tokens: list[Token],
        reporter: ErrorReporter,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.tokens = tokens
        self.reporter = reporter
        self.max_depth = max_depth

    # -------------------------------------------------------------------------
    # Token access
    # -------------------------------------------------------------------------

    def _peek(self, i: int) -> Token | None:
        return self.tokens[i] if i < len(self.tokens) else None

    def _value_at(self, i: int) -> str | None:
        token = self._peek(i)
        return token.value if token is not None else None

    def _require(self, i: int) -> Token:
        """Return the token at ``i`` or fail with an end-of-input error."""
        token = self._peek(i)
        if token is None:
            last = self.tokens[-1] if self.tokens else Token(0, "")
            raise self.reporter.error("Unexpected end of format string.", last)
        return token

    # -------------------------------------------------------------------------
    # Document
    # -------------------------------------------------------------------------

    def parse(self) -> list[Expression]:
        """Parse the whole token list into top-level expressions."""
        ast: list[Node] = []
        i = 0
        while i < len(self.tokens):
            token = self.tokens[i]
            if token.is_expression:
                i = self.build_expression(i, ast)
            elif i > 0 and token.value == ",":
                # commas between top-level expressions are optional
                i += 1
            else:
                raise self.reporter.error("Unexpected token. Expected an expression.", token)

        logger.debug("Parsed %d top-level expressions", len(ast))
        return [node for node in ast if isinstance(node, Expression)]

    def build_expression(self, i: int, context: list[Node], depth: int = 1) -> int:
        """Parse ``name ( argument [, argument]* )`` starting at ``i``."""
        name_token = self.tokens[i]
        if depth > self.max_depth:
            raise self.reporter.error("Expressions are nested too deeply.", name_token)

        expression = Expression(name_token.value, name_token)

        i += 1
        opening = self._peek(i)
        if opening is None:
            raise self.reporter.error("Expression has no opening parenthesis.", name_token)
        if opening.value != "(":
            raise self.reporter.error(
                "Unexpected token. Expected an opening parenthesis.", opening
            )

        i += 1
        while i < len(self.tokens) and self.tokens[i].value != ")":
            i = self.build_argument(i, expression.arguments, depth)
            if self._value_at(i) == ",":
                i += 1

        if i >= len(self.tokens):
            raise self.reporter.error(
                "Expression is missing a closing parenthesis.", name_token
            )

        context.append(expression)
        return i + 1

    # -------------------------------------------------------------------------
    # Arguments
    # -------------------------------------------------------------------------

    def build_argument(self, i: int, context: list[Node], depth: int = 1) -> int:
        """Parse one argument, or a nested expression, starting at ``i``."""
        token = self._require(i)
        first_token = token
        is_exclude = False

        if token.value == "!":
            is_exclude = True
            i += 1
            token = self._require(i)

        if token.value == ")":
            if is_exclude:
                raise self.reporter.error("Empty argument.", first_token)
            return i
        if token.value == ",":
            raise self.reporter.error("Empty argument.", token)

        if token.is_expression:
            if is_exclude:
                raise self.reporter.error("Unexpected token in argument.", first_token)
            return self.build_expression(i, context, depth + 1)

        if token.value == "%":
            return self._build_wildcard(i + 1, context, first_token, is_exclude)

        is_day = False
        is_date = False
        low: Bound
        if token.is_day_keyword:
            is_day = True
            low = token.to_day_of_week()
            i += 1
        else:
            low, i = self._parse_number_or_date(i, first_token)
            is_date = isinstance(low, MonthDay)

        arg_type: ArgumentType
        value: int | Range
        if self._value_at(i) == "-":
            i += 1
            token = self._require(i)
            high: Bound
            if token.is_day_keyword and not is_date:
                is_day = True
                high = token.to_day_of_week()
                i += 1
            else:
                high, i = self._parse_number_or_date(i, first_token)
                if is_date != isinstance(high, MonthDay):
                    raise self.reporter.error(
                        "Cannot mix numeric and date ranges.", first_token
                    )

            if is_day:
                arg_type = ArgumentType.DAYS
            elif is_date:
                arg_type = ArgumentType.DATES
            else:
                arg_type = ArgumentType.RANGE
            value = Range(low, high)
        elif is_date:
            arg_type = ArgumentType.DATES
            value = Range(low, low)
        elif is_day:
            arg_type = ArgumentType.DAYS
            value = Range(low, low)
        else:
            arg_type = ArgumentType.NUMBER
            value = low  # type: ignore[assignment]

        modulus = None
        if self._value_at(i) == "%":
            modulus, i = self._parse_number(i + 1)

        context.append(Argument(arg_type, value, first_token, is_exclude, modulus))
        return i

    def _build_wildcard(
        self,
        i: int,
        context: list[Node],
        first_token: Token,
        is_exclude: bool,
    ) -> int:
        """Parse what follows ``%``: nothing, ``N`` or ``%N``."""
        modulus = None
        token = self._peek(i)
        if token is not None:
            if token.value == "%":
                modulus, i = self._parse_number(i + 1)
            elif token.is_number or token.value == "-":
                modulus, i = self._parse_number(i)

        context.append(Argument(ArgumentType.WILDCARD, None, first_token, is_exclude, modulus))
        return i

    def _parse_number(self, i: int) -> tuple[int, int]:
        """Parse an optionally negative integer. Returns ``(value, next_index)``."""
        token = self._require(i)
        negative = False
        if token.is_special:
            if token.value != "-":
                raise self.reporter.error("Unexpected token in argument.", token)
            negative = True
            i += 1
            token = self._require(i)

        if not token.is_number:
            raise self.reporter.error("Unknown argument syntax. Expected a number.", token)

        if len(token.value.lstrip("0")) > MAX_NUMBER_DIGITS:
            raise self.reporter.error("Number is too large.", token)

        number = int(token.value)
        return (-number if negative else number), i + 1

    def _parse_number_or_date(self, i: int, first_token: Token) -> tuple[Bound, int]:
        """Parse a number, or a ``month/day`` date when a slash follows it."""
        number, i = self._parse_number(i)
        if self._value_at(i) != "/":
            return number, i

        month = number
        if month < 1 or month > 12:
            raise self.reporter.error("Invalid Month", first_token)

        day, i = self._parse_number(i + 1)
        if day < 1 or day > days_in_month(month):
            raise self.reporter.error("Invalid Date", first_token)

        return MonthDay(month, day), i
