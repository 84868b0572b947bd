"""Diagnostics for schedule expressions.

Every fatal problem found while tokenizing, parsing or compiling a schedule
expression is raised as a ``ScheduleSyntaxError``. The rendered message embeds
a slice of the source text around the offending token and a caret line that
points at the token's offset:

    Unknown expression foo
        foo(1)
        ^
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from schedlang.tokens import Token


DEFAULT_CONTEXT_BEFORE = 10
DEFAULT_CONTEXT_AFTER = 20


# =============================================================================
# Exceptions
# =============================================================================


class ScheduleSyntaxError(ValueError):
    """Raised when a schedule expression cannot be compiled.

    Attributes:
        message: The bare message, without source context.
        expression: The full source text being compiled.
        position: Offset of the offending token (-1 when unknown).
        token: The offending token, if any.
    """

    def __init__(
        self,
        message: str,
        expression: str = "",
        token: "Token | None" = None,
        *,
        context_before: int = DEFAULT_CONTEXT_BEFORE,
        context_after: int = DEFAULT_CONTEXT_AFTER,
    ) -> None:
        self.message = message
        self.expression = expression
        self.token = token
        self.position = token.index if token is not None else -1

        if token is not None:
            rendered = format_diagnostic(
                message,
                expression,
                token.index,
                len(token.value),
                context_before=context_before,
                context_after=context_after,
            )
        else:
            rendered = message
        super().__init__(rendered)


# =============================================================================
# Rendering
# =============================================================================


class ErrorReporter:
    """Builds ``ScheduleSyntaxError`` instances for one source text."""

    def __init__(
        self,
        text: str,
        context_before: int = DEFAULT_CONTEXT_BEFORE,
        context_after: int = DEFAULT_CONTEXT_AFTER,
    ) -> None:
        self.text = text
        self.context_before = context_before
        self.context_after = context_after

    def error(self, message: str, token: "Token") -> ScheduleSyntaxError:
        """Create (not raise) an error anchored at ``token``."""
        return ScheduleSyntaxError(
            message,
            self.text,
            token,
            context_before=self.context_before,
            context_after=self.context_after,
        )


def format_diagnostic(
    message: str,
    text: str,
    index: int,
    length: int = 0,
    *,
    context_before: int = DEFAULT_CONTEXT_BEFORE,
    context_after: int = DEFAULT_CONTEXT_AFTER,
) -> str:
    """Render a message with a source snippet and a caret line.

    Args:
        message: Human readable message.
        text: Full source text.
        index: Offset of the offending token.
        length: Length of the offending token.
        context_before: Characters of context before the token.
        context_after: Characters of context after the end of the token.

    Returns:
        ``message``, the snippet and the caret line, separated by newlines.
    """
    start = max(index - context_before, 0)
    end = min(index + length + context_after, len(text))

    snippet = text[start:end]
    pointer = "".join("^" if i == index else " " for i in range(start, end))
    if index >= end:
        # token sits at the very end of the text (or the text is empty)
        pointer += "^"

    return f"{message}\n    {snippet}\n    {pointer}"
