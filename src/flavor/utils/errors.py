"""
Error types and source span tracking for the Flavor toolchain.

Every stage of the pipeline reports failures through a single exception
type, ``FlavorError``, tagged with the phase in which it was raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Span:
    """
    A range in the source code.

    Attributes:
        start_line: 1-indexed line of the first character
        start_column: 1-indexed column of the first character
        end_line: 1-indexed line of the last character
        end_column: 1-indexed column of the last character (inclusive)
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def point(cls, line: int, column: int) -> "Span":
        """Create a span covering a single position."""
        return cls(line, column, line, column)

    def merge(self, other: "Span") -> "Span":
        """Return the smallest span covering both ``self`` and ``other``."""
        start = min(
            (self.start_line, self.start_column),
            (other.start_line, other.start_column),
        )
        end = max(
            (self.end_line, self.end_column),
            (other.end_line, other.end_column),
        )
        return Span(start[0], start[1], end[0], end[1])

    @property
    def is_multiline(self) -> bool:
        return self.start_line != self.end_line

    def __str__(self) -> str:
        return f"{self.start_line}:{self.start_column}"


def merge_spans(first: Span, *rest: Span) -> Span:
    """Merge any number of spans into one covering span."""
    span = first
    for other in rest:
        span = span.merge(other)
    return span


class ErrorPhase(Enum):
    """Pipeline stage a diagnostic originated from."""

    LEXING = "Lexing"
    PARSING = "Parsing"
    TYPE_CHECKING = "TypeChecking"
    RUNTIME = "Runtime"

    def __str__(self) -> str:
        return self.value


class FlavorError(Exception):
    """Base exception for all Flavor diagnostics."""

    phase: ErrorPhase = ErrorPhase.RUNTIME

    def __init__(
        self,
        message: str,
        span: Optional[Span] = None,
        phase: Optional[ErrorPhase] = None,
        notes: Optional[list[str]] = None,
    ) -> None:
        self.message = message
        self.span = span
        if phase is not None:
            self.phase = phase
        self.notes = list(notes) if notes else []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.span:
            return f"[{self.phase}] {self.message} (at {self.span})"
        return f"[{self.phase}] {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlavorError):
            return NotImplemented
        return (
            self.phase == other.phase
            and self.message == other.message
            and self.span == other.span
        )

    def __hash__(self) -> int:
        return hash((self.phase, self.message, self.span))


class LexerError(FlavorError):
    """Raised when the lexer encounters text no token pattern accepts."""

    phase = ErrorPhase.LEXING


class ParserError(FlavorError):
    """Raised when the parser encounters a syntax error."""

    phase = ErrorPhase.PARSING


class FlavorTypeError(FlavorError):
    """Raised when type checking fails."""

    phase = ErrorPhase.TYPE_CHECKING


class FlavorRuntimeError(FlavorError):
    """Raised when evaluation fails."""

    phase = ErrorPhase.RUNTIME
