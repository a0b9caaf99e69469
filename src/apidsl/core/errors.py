"""
Error types for apidsl design evaluation.

Design evaluation never stops at the first problem: every failed DSL call is
recorded as an ``EvalError`` in the ``ErrorCollector`` owned by the
evaluation context, and the collected errors are inspected once the whole
design has run. Exceptions are reserved for failures outside a design pass
(bad configuration, unloadable design files) and for callers that want to
turn a failed pass into an exception via ``ErrorCollector.raise_if_errors``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class ApiDslError(Exception):
    """Base exception for all apidsl errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigError(ApiDslError):
    """
    Raised when an apidsl configuration file is malformed.

    Examples:
    - Invalid TOML
    - Wrong value type for a known setting
    """

    pass


class LoadError(ApiDslError):
    """
    Raised when a design file cannot be loaded.

    Examples:
    - File does not exist
    - Module raises on import
    - Module does not define a ``design`` callable
    """

    pass


class DesignError(ApiDslError):
    """
    Raised when a design pass finished with reported errors.

    Carries every error of the pass so callers can report them together.
    """

    def __init__(self, errors: list[EvalError]):
        self.errors = list(errors)
        lines = [str(err) for err in self.errors]
        super().__init__(f"{len(lines)} design error(s):\n" + "\n".join(lines))


@dataclass
class ErrorContext:
    """
    Source location of the design code that caused an error.

    Attributes:
        file: Path to the design source file
        line: Line number (1-indexed)
        column: Optional column number (1-indexed)
        snippet: Optional source line shown under the location
    """

    file: Path
    line: int
    column: int | None = None
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Location, followed by the snippet when one was captured
        """
        if self.snippet:
            return f"{self.location()}\n{self.format_snippet()}"
        return self.location()

    def location(self) -> str:
        """Location only, like "design.py:10" or "design.py:10:5"."""
        location = f"{self.file}:{self.line}"
        if self.column:
            location += f":{self.column}"
        return location

    def format_snippet(self) -> str:
        """Format the source line with its number and an error marker."""
        if not self.snippet:
            return ""

        prefix = f"{self.line:4d} | "
        formatted = [prefix + self.snippet]
        if self.column:
            formatted.append(" " * (len(prefix) + self.column - 1) + "^^^")
        return "\n".join(formatted)


class ErrorKind(StrEnum):
    """Classification of errors reported during design evaluation."""

    INCOMPATIBLE_TARGET = "incompatible_target"  # DSL used in the wrong block
    INCOMPATIBLE_TYPE = "incompatible_type"  # validation does not apply to the type
    INVALID_VALUE = "invalid_value"  # value fails parsing or compatibility


@dataclass(frozen=True)
class EvalError:
    """
    A single error reported while evaluating a design.

    Attributes:
        kind: Error classification
        message: Human-readable description
        target: Display name of the node being configured, if any
        context: Source location of the offending DSL call, if captured
    """

    kind: ErrorKind
    message: str
    target: str | None = None
    context: ErrorContext | None = None

    def __str__(self) -> str:
        text = self.message
        if self.target:
            text = f"{self.target}: {text}"
        if self.context:
            text = f"{self.context.location()}: {text}"
        return text


class ErrorCollector:
    """Accumulates the errors reported during one design evaluation pass."""

    def __init__(self) -> None:
        self._errors: list[EvalError] = []

    def report(self, error: EvalError) -> None:
        self._errors.append(error)

    @property
    def errors(self) -> list[EvalError]:
        return list(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[EvalError]:
        return iter(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def by_kind(self, kind: ErrorKind) -> list[EvalError]:
        """Return the collected errors of a single kind, in report order."""
        return [err for err in self._errors if err.kind == kind]

    def format(self) -> str:
        """Format all errors, one per line."""
        return "\n".join(str(err) for err in self._errors)

    def raise_if_errors(self) -> None:
        """
        Raise a ``DesignError`` carrying every collected error.

        Raises:
            DesignError: If at least one error was reported
        """
        if self._errors:
            raise DesignError(self._errors)
