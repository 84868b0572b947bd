"""CLI error handling utilities."""

from __future__ import annotations

import functools
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, TypeVar

import typer

from schedlang.config import ConfigError
from schedlang.errors import ScheduleSyntaxError

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================


class ErrorCode(Enum):
    """Standard CLI exit codes."""

    GENERAL_ERROR = 1

    FILE_NOT_FOUND = 10

    VALIDATION_FAILED = 20

    CONFIG_INVALID = 31


# =============================================================================
# Exception Classes
# =============================================================================


class CLIError(Exception):
    """Base exception for CLI errors.

    Attributes:
        message: Error message
        code: Exit code
        hint: Helpful hint for resolution
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.GENERAL_ERROR,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        return "\n".join(parts)


class InvalidScheduleError(CLIError):
    """The schedule expression did not compile."""

    def __init__(self, error: ScheduleSyntaxError) -> None:
        super().__init__(str(error), code=ErrorCode.VALIDATION_FAILED)
        self.error = error


class ConfigurationError(CLIError):
    """Error with configuration."""

    def __init__(self, message: str, config_path: Path | str | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.CONFIG_INVALID,
            hint="Check the configuration file format and values.",
        )
        self.config_path = config_path


class FileNotFoundError(CLIError):
    """Error when a file is not found."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(
            message=f"File not found: {path}",
            code=ErrorCode.FILE_NOT_FOUND,
            hint="Check that the file exists and the path is correct.",
        )
        self.path = path


# =============================================================================
# Decorator
# =============================================================================

F = TypeVar("F", bound=Callable[..., Any])


def error_boundary(func: F) -> F:
    """Convert library errors raised by a command into CLI exits."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except ScheduleSyntaxError as e:
            _report(InvalidScheduleError(e))
        except ConfigError as e:
            _report(ConfigurationError(str(e)))
        except CLIError as e:
            _report(e)
        except Exception as e:
            logger.exception("Unexpected error")
            typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
            raise typer.Exit(ErrorCode.GENERAL_ERROR.value)

    return wrapper  # type: ignore


def _report(error: CLIError) -> None:
    typer.echo(typer.style(f"Error: {error.message}", fg="red"), err=True)
    if error.hint:
        typer.echo(typer.style(f"Hint: {error.hint}", fg="yellow"), err=True)
    raise typer.Exit(error.code.value)


def require_file(path: Path) -> Path:
    """Require that a file exists."""
    if not path.exists():
        raise FileNotFoundError(path)
    return path
