"""Error formatting utilities for the marketplace tools.

Provides clean, user-friendly error messages from Pydantic validation errors
and the exception types raised across the package.
"""

import json
from collections.abc import Iterator
from pathlib import Path

import yaml
from pydantic import ValidationError

from marketplace import cli_logger, exit_codes

_UNION_TAGS = {"str", "list[str]"}


class ConfigError(Exception):
    """Raised when validator.yaml cannot be parsed or fails validation."""


class PluginsRootNotFoundError(Exception):
    """Raised when the plugins/ directory itself is missing."""

    def __init__(self, path: Path) -> None:
        """Initialize with the missing plugins root."""
        self.path = path
        super().__init__(f"Plugins directory not found: {path}")


class MigrationSourceNotFoundError(Exception):
    """Raised when the legacy source directory does not exist."""

    def __init__(self, path: Path) -> None:
        """Initialize with the missing source directory."""
        self.path = path
        super().__init__(f"Source directory not found: {path}")


def _pointer(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic location tuple as a JSON pointer ("/plugins/0/name").

    Union members and tagged variants add non-field entries to the location
    (e.g. "str" or "AuthorInfo"); those are dropped.
    """
    parts = []
    for part in loc:
        if isinstance(part, str) and (part[:1].isupper() or part in _UNION_TAGS):
            continue
        parts.append(str(part))
    return "/" + "/".join(parts)


def _reason(err: dict) -> str:
    """Turn a single pydantic error entry into a short lower-case reason."""
    error_type = err["type"]

    if error_type == "missing":
        return "field is required"
    if error_type == "string_type":
        return "expected string"
    if error_type == "list_type":
        return "expected list"
    if error_type in ("model_type", "dict_type", "model_attributes_type"):
        return "expected object"
    if error_type == "string_too_short":
        return f"must be at least {err['ctx']['min_length']} characters"
    if error_type == "string_pattern_mismatch":
        return f"must match pattern \"{err['ctx']['pattern']}\""
    # Custom validators report "Value error, <message>"
    msg = err["msg"]
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return msg[:1].lower() + msg[1:]


def schema_issues(error: ValidationError) -> Iterator[tuple[str, str]]:
    """Yield (field path, reason) pairs for every error in a ValidationError.

    Errors raised against the same path with the same reason (which happens
    when a union tries several members) are reported once.
    """
    seen: set[tuple[str, str]] = set()
    for err in error.errors():
        issue = (_pointer(err["loc"]), _reason(err))
        if issue in seen:
            continue
        seen.add(issue)
        yield issue


def format_validation_errors(error: ValidationError) -> str:
    """Format Pydantic ValidationError into clean, user-friendly message.

    Removes Pydantic-specific URLs and technical jargon, producing a message
    suitable for CLI output.

    Args:
        error: The Pydantic ValidationError to format.

    Returns:
        A clean, human-readable error message.
    """
    messages = [f"'{path}': {reason}" for path, reason in schema_issues(error)]
    return "; ".join(messages)


def handle_cli_error(error: Exception) -> int:
    """Handle an unhandled exception at the CLI boundary.

    Formats the error into a clean user-friendly message and returns
    an appropriate exit code. This prevents raw tracebacks from reaching
    the user.

    Args:
        error: The exception to handle.

    Returns:
        An exit code from exit_codes.
    """
    if isinstance(error, ValidationError):
        cli_logger.error(f"Invalid configuration: {format_validation_errors(error)}")
        return exit_codes.GENERAL_ERROR

    if isinstance(error, json.JSONDecodeError):
        cli_logger.error(f"Invalid JSON: {error}")
        return exit_codes.GENERAL_ERROR

    if isinstance(error, OSError):
        if error.filename:
            cli_logger.error(f"{error.strerror}: {error.filename}")
        else:
            cli_logger.error(str(error))
        return exit_codes.GENERAL_ERROR

    if isinstance(error, yaml.YAMLError):
        cli_logger.error(f"Invalid YAML: {error}")
        return exit_codes.GENERAL_ERROR

    cli_logger.error(f"Unexpected error: {error}")
    return exit_codes.GENERAL_ERROR
