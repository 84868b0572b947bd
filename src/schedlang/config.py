"""Configuration for the schedule compiler.

Values are resolved from, lowest priority first:
- built-in defaults
- a YAML file (either flat or nested under a ``schedlang:`` key)
- ``SCHEDLANG_*`` environment variables

Usage:
    >>> from schedlang.config import load_config
    >>>
    >>> config = load_config("schedlang.yaml")
    >>> config.max_depth
    16
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from schedlang.errors import DEFAULT_CONTEXT_AFTER, DEFAULT_CONTEXT_BEFORE
from schedlang.parser import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT

ENV_PREFIX = "SCHEDLANG_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]{1,18}")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(Exception):
    """Base configuration error."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Configuration validation failed: {', '.join(errors)}")


class ConfigSourceError(ConfigError):
    """A configuration file could not be read."""

    pass


# =============================================================================
# Compiler Configuration
# =============================================================================


@dataclass(frozen=True)
class CompilerConfig:
    """Settings shared by every stage of a compilation.

    Attributes:
        max_depth: Deepest allowed nesting of ``name(...)`` expressions.
        context_before: Characters of source shown before an error.
        context_after: Characters of source shown after an error.
        log_level: Level name used by ``configure_logging``.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    context_before: int = DEFAULT_CONTEXT_BEFORE
    context_after: int = DEFAULT_CONTEXT_AFTER
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        errors = []
        if self.max_depth < 1:
            errors.append(f"max_depth must be at least 1, got {self.max_depth}")
        elif self.max_depth > MAX_DEPTH_LIMIT:
            errors.append(f"max_depth cannot exceed {MAX_DEPTH_LIMIT}, got {self.max_depth}")
        if self.context_before < 0:
            errors.append(f"context_before cannot be negative, got {self.context_before}")
        if self.context_after < 0:
            errors.append(f"context_after cannot be negative, got {self.context_after}")
        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")
        if errors:
            raise ConfigValidationError(errors)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CompilerConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        return cls().merge(values)

    @classmethod
    def from_file(cls, path: str | Path) -> "CompilerConfig":
        """Load a YAML configuration file."""
        return cls.from_mapping(_read_yaml(Path(path)))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CompilerConfig":
        """Load ``SCHEDLANG_*`` environment variables over the defaults."""
        return cls().merge(_env_values(os.environ if environ is None else environ))

    def merge(self, values: Mapping[str, Any]) -> "CompilerConfig":
        """Return a copy with known keys from ``values`` applied."""
        updates: dict[str, Any] = {}
        errors = []
        for f in fields(self):
            if f.name not in values or values[f.name] is None:
                continue
            raw = values[f.name]
            if isinstance(getattr(self, f.name), int):
                value = _as_int(raw)
                if value is None:
                    errors.append(f"{f.name} must be an integer, got {raw!r}")
                else:
                    updates[f.name] = value
            else:
                updates[f.name] = str(raw)
        if errors:
            raise ConfigValidationError(errors)
        return replace(self, **updates)


def _as_int(raw: Any) -> int | None:
    # bool is a subclass of int
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and _INTEGER_PATTERN.fullmatch(raw.strip()):
        return int(raw)
    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigSourceError(f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigSourceError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigSourceError(f"Configuration file {path} must contain a mapping")

    nested = data.get("schedlang")
    if isinstance(nested, dict):
        return nested
    return data


def _env_values(environ: Mapping[str, str]) -> dict[str, str]:
    values = {}
    for f in fields(CompilerConfig):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            values[f.name] = environ[key]
    return values


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CompilerConfig:
    """Resolve configuration from defaults, an optional file and the environment."""
    config = CompilerConfig()
    if path is not None:
        config = CompilerConfig.from_file(path)
    return config.merge(_env_values(os.environ if environ is None else environ))


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Attach a stream handler to the ``schedlang`` logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger("schedlang")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
