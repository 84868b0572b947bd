"""Entry points that run the whole tokenize, parse and compile pipeline."""

from __future__ import annotations

import logging

from schedlang.compiler import GroupCompiler, RuleGroup
from schedlang.config import CompilerConfig
from schedlang.errors import ErrorReporter, ScheduleSyntaxError
from schedlang.nodes import Expression
from schedlang.parser import Parser
from schedlang.tokens import Token, tokenize

logger = logging.getLogger(__name__)


class ScheduleBuilder:
    """Compiles one schedule expression.

    The builder keeps the tokens and syntax tree of the last run, so an
    instance belongs to a single expression and a single thread. Use
    ``compile_schedule`` for one-off compilation.

    Example:
        >>> builder = ScheduleBuilder("hour(9-17, !12) day(mon-fri)")
        >>> groups = builder.compile()
        >>> groups[0].hours
        [Range(low=9, high=17, split=False, modulus=None)]
    """

    def __init__(self, text: str, config: CompilerConfig | None = None) -> None:
        self.text = text
        self.config = config or CompilerConfig()
        self.reporter = ErrorReporter(
            text,
            context_before=self.config.context_before,
            context_after=self.config.context_after,
        )
        self.tokens: list[Token] = []
        self.ast: list[Expression] = []

    def tokenize(self) -> list[Token]:
        self.tokens = tokenize(self.text)
        logger.debug("Tokenized %r into %d tokens", self.text, len(self.tokens))
        return self.tokens

    def build_ast(self) -> list[Expression]:
        if not self.tokens:
            self.tokenize()
        parser = Parser(self.tokens, self.reporter, max_depth=self.config.max_depth)
        self.ast = parser.parse()
        return self.ast

    def compile(self) -> list[RuleGroup]:
        """Run every stage and return the compiled rule groups.

        Raises:
            ScheduleSyntaxError: If the expression is invalid.
        """
        try:
            self.tokenize()
            self.build_ast()
            return GroupCompiler(self.reporter).compile(list(self.ast))
        except ScheduleSyntaxError as e:
            logger.debug("Failed to compile %r: %s", self.text, e.message)
            raise


def compile_schedule(text: str, config: CompilerConfig | None = None) -> list[RuleGroup]:
    """Compile a schedule expression into rule groups.

    Args:
        text: Schedule expression, e.g. ``"hour(9-17) day(mon-fri)"``.
        config: Optional compiler settings.

    Returns:
        One ``RuleGroup`` per ``group(...)``, followed by the implicit group
        of top-level expressions if there is one.

    Raises:
        ScheduleSyntaxError: If the expression is invalid.
    """
    return ScheduleBuilder(text, config).compile()


def validate_expression(text: str, config: CompilerConfig | None = None) -> list[str]:
    """Validate a schedule expression.

    Returns:
        List of validation errors (empty if valid).
    """
    errors = []

    try:
        compile_schedule(text, config)
    except ScheduleSyntaxError as e:
        errors.append(str(e))

    return errors


def is_valid_expression(text: str, config: CompilerConfig | None = None) -> bool:
    """Check if a schedule expression is valid."""
    try:
        compile_schedule(text, config)
        return True
    except ScheduleSyntaxError:
        return False
