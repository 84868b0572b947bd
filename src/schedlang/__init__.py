"""Schedule expression compiler.

schedlang turns a compact schedule expression into rule groups: per-field
lists of ranges that a scheduling engine can evaluate.

Syntax Reference:
    Field          Names                          Values
    ─────────────────────────────────────────────────────────────
    Seconds        s, sec, second(s)              0-59
    Minutes        m, min, minute(s)              0-59
    Hours          h, hour(s)                     0-23
    Day of Week    day(s), dow, dayofweek         1-7 or MON-SUN
    Day of Month   dom, dayofmonth                1-31, -31 to -1 from the end
    Dates          date(s)                        month/day

Argument Syntax:
    5           A single value
    1-5         A range; FRI-MON and 11/15-2/1 wrap around
    %           Every value
    %15, 0%15   Every 15th value
    !12         Exclude a value or range
    group(...)  An independent alternative schedule

Usage:
    >>> from schedlang import compile_schedule
    >>>
    >>> groups = compile_schedule("hour(9-17, !12) day(mon-fri)")
    >>> groups[0].hours
    [Range(low=9, high=17, split=False, modulus=None)]
    >>> groups[0].minutes
    [Range(low=0, high=0, split=False, modulus=None)]
"""

from schedlang.builder import (
    ScheduleBuilder,
    compile_schedule,
    is_valid_expression,
    validate_expression,
)
from schedlang.compiler import GroupCompiler, RuleGroup
from schedlang.config import CompilerConfig, load_config
from schedlang.errors import ScheduleSyntaxError, format_diagnostic
from schedlang.fields import FIELD_CONSTRAINTS, FieldConstraints, FieldKind, resolve_field
from schedlang.nodes import Argument, ArgumentType, Expression, MonthDay, Range
from schedlang.parser import Parser
from schedlang.tokens import Token, tokenize

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "ScheduleBuilder",
    "compile_schedule",
    "validate_expression",
    "is_valid_expression",
    # Stages
    "tokenize",
    "Parser",
    "GroupCompiler",
    # Types
    "Token",
    "Expression",
    "Argument",
    "ArgumentType",
    "MonthDay",
    "Range",
    "RuleGroup",
    # Fields
    "FieldKind",
    "FieldConstraints",
    "FIELD_CONSTRAINTS",
    "resolve_field",
    # Errors
    "ScheduleSyntaxError",
    "format_diagnostic",
    # Configuration
    "CompilerConfig",
    "load_config",
]
