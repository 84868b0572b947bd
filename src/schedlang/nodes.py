"""Syntax tree and value types shared by the parser and the compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Union

from schedlang.tokens import Token


# =============================================================================
# Values
# =============================================================================


class MonthDay(NamedTuple):
    """A calendar date without a year. Ordered by month, then day."""

    month: int
    day: int

    def __str__(self) -> str:
        return f"{self.month}/{self.day}"


Bound = Union[int, MonthDay]


@dataclass(frozen=True)
class Range:
    """An inclusive ``(low, high)`` pair.

    ``split`` marks a range that wraps past the end of its domain and must be
    read as ``[low, max]`` plus ``[min, high]``. ``modulus`` selects every Nth
    value starting at ``low``.
    """

    low: Bound
    high: Bound
    split: bool = False
    modulus: int | None = None

    def __str__(self) -> str:
        text = f"{self.low}" if self.low == self.high else f"{self.low}-{self.high}"
        if self.split:
            text += " (split)"
        if self.modulus is not None:
            text += f" %{self.modulus}"
        return text


# =============================================================================
# Syntax Tree
# =============================================================================


class ArgumentType(Enum):
    """Kinds of literal arguments."""

    NUMBER = "number"
    RANGE = "range"
    DAYS = "days"
    DATES = "dates"
    WILDCARD = "wildcard"


@dataclass(frozen=True)
class Argument:
    """One literal operand of a field expression.

    ``value`` is an ``int`` for ``NUMBER``, a ``Range`` for ``RANGE``, ``DAYS``
    and ``DATES``, and ``None`` for ``WILDCARD``.
    """

    type: ArgumentType
    value: int | Range | None
    first_token: Token
    is_exclude: bool = False
    modulus: int | None = None

    def __post_init__(self) -> None:
        if (self.type is ArgumentType.WILDCARD) != (self.value is None):
            raise ValueError("wildcard arguments carry no value")


@dataclass
class Expression:
    """A ``name(arguments...)`` node."""

    name: str
    first_token: Token
    arguments: list["Node"] = field(default_factory=list)

    @property
    def is_group(self) -> bool:
        return self.name.lower() == "group"


Node = Union[Expression, Argument]
