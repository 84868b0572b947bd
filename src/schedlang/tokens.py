"""Tokenizer for schedule expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass


SPECIAL_CHARACTERS = frozenset("()-,!/%")
WHITESPACE = frozenset(" \t\n\r")

# ISO numbering, Monday=1 .. Sunday=7
DAY_KEYWORDS: dict[str, int] = {
    "mo": 1, "mon": 1, "monday": 1,
    "tu": 2, "tue": 2, "tues": 2, "tuesday": 2,
    "we": 3, "wed": 3, "wednesday": 3,
    "th": 4, "thu": 4, "thur": 4, "thurs": 4, "thursday": 4,
    "fr": 5, "fri": 5, "friday": 5,
    "sa": 6, "sat": 6, "saturday": 6,
    "su": 7, "sun": 7, "sunday": 7,
}

_NUMBER_PATTERN = re.compile(r"[0-9]+")
_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


@dataclass(frozen=True)
class Token:
    """A lexical unit and its offset in the source text."""

    index: int
    value: str

    @property
    def is_special(self) -> bool:
        return len(self.value) == 1 and self.value in SPECIAL_CHARACTERS

    @property
    def is_number(self) -> bool:
        return _NUMBER_PATTERN.fullmatch(self.value) is not None

    @property
    def is_identifier(self) -> bool:
        return _IDENTIFIER_PATTERN.fullmatch(self.value) is not None

    @property
    def is_day_keyword(self) -> bool:
        return self.value.lower() in DAY_KEYWORDS

    @property
    def is_expression(self) -> bool:
        """True for names that introduce ``name(...)`` expressions."""
        return self.is_identifier and not self.is_day_keyword

    def to_day_of_week(self) -> int:
        """Resolve a weekday keyword to its ordinal (Monday=1 .. Sunday=7).

        Raises:
            ValueError: If the token is not a weekday keyword.
        """
        try:
            return DAY_KEYWORDS[self.value.lower()]
        except KeyError:
            raise ValueError(f"{self.value!r} is not a day of the week") from None


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into tokens.

    Whitespace separates tokens and is dropped. Each special character is a
    token of its own. Everything else accumulates into the current token.
    """
    tokens: list[Token] = []
    start = 0
    value: list[str] = []

    for i, char in enumerate(text):
        if char in WHITESPACE:
            if value:
                tokens.append(Token(start, "".join(value)))
            value = []
            start = i + 1
        elif char in SPECIAL_CHARACTERS:
            if value:
                tokens.append(Token(start, "".join(value)))
            tokens.append(Token(i, char))
            value = []
            start = i + 1
        else:
            value.append(char)

    if value:
        tokens.append(Token(start, "".join(value)))

    return tokens
