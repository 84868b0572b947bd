"""Canonical schedule fields and their bounds."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Field Types
# =============================================================================


class FieldKind(Enum):
    """Canonical time fields, finest first."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS_OF_WEEK = "days_of_week"
    DAYS_OF_MONTH = "days_of_month"
    DATES = "dates"

    @property
    def constraints(self) -> "FieldConstraints":
        return FIELD_CONSTRAINTS[self]


@dataclass(frozen=True)
class FieldConstraints:
    """Bounds and spellings of a field.

    ``wildcard_min`` is the low end a wildcard expands to, which differs from
    ``min_value`` only for days of month (zero is not a day).
    """

    min_value: int
    max_value: int
    aliases: tuple[str, ...]
    wildcard_min: int | None = None

    @property
    def wildcard_low(self) -> int:
        return self.min_value if self.wildcard_min is None else self.wildcard_min


FIELD_CONSTRAINTS: dict[FieldKind, FieldConstraints] = {
    FieldKind.SECONDS: FieldConstraints(
        0, 59,
        aliases=("s", "sec", "second", "seconds", "secondofminute", "secondsofminute"),
    ),
    FieldKind.MINUTES: FieldConstraints(
        0, 59,
        aliases=("m", "min", "minute", "minutes", "minuteofhour", "minutesofhour"),
    ),
    FieldKind.HOURS: FieldConstraints(
        0, 23,
        aliases=("h", "hour", "hours", "hourofday", "hoursofday"),
    ),
    FieldKind.DAYS_OF_WEEK: FieldConstraints(
        1, 7,
        aliases=("day", "days", "dow", "dayofweek", "daysofweek"),
    ),
    FieldKind.DAYS_OF_MONTH: FieldConstraints(
        -31, 31,
        aliases=("dom", "dayofmonth", "daysofmonth"),
        wildcard_min=1,
    ),
    FieldKind.DATES: FieldConstraints(
        1, 31,
        aliases=("date", "dates"),
    ),
}

GROUP_KEYWORD = "group"

_ALIASES: dict[str, FieldKind] = {
    alias: kind
    for kind, constraints in FIELD_CONSTRAINTS.items()
    for alias in constraints.aliases
}


def resolve_field(name: str) -> FieldKind | None:
    """Map an expression name (any case) to its field, or ``None``."""
    return _ALIASES.get(name.lower())


def days_in_month(month: int) -> int:
    """Number of days in a 1-based month, counting February as 29."""
    if month < 1 or month > 12:
        raise ValueError(f"Invalid month: {month}")
    # 2000 is a leap year
    return calendar.monthrange(2000, month)[1]
