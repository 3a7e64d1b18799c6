"""
Value types shared by the parsing layer and ProcessedSource.
"""

import re
import tokenize
from dataclasses import dataclass, replace
from enum import Enum

from codegraph_source.exceptions import UnknownDialectError

_VERSION_PATTERN = re.compile(r"^\s*(\d+)\.(\d+)\s*$")


@dataclass(frozen=True, slots=True)
class Span:
    """
    Source code location (immutable).

    Attributes:
        start_line: Starting line number (1-indexed)
        start_col: Starting column (0-indexed, characters)
        end_line: Ending line number (1-indexed)
        end_col: Ending column (0-indexed, characters, exclusive)
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @property
    def line(self) -> int:
        return self.start_line

    @property
    def column(self) -> int:
        return self.start_col

    @property
    def last_line(self) -> int:
        return self.end_line

    @property
    def last_column(self) -> int:
        return self.end_col

    def overlaps(self, other: "Span") -> bool:
        """Check if this span overlaps with another"""
        return not (self.end_line < other.start_line or other.end_line < self.start_line)

    def contains_line(self, line: int) -> bool:
        """Check if span contains the given line"""
        return self.start_line <= line <= self.end_line

    def contains(self, line: int, column: int) -> bool:
        """Check if the position falls inside the span (end exclusive)"""
        return (self.start_line, self.start_col) <= (line, column) < (self.end_line, self.end_col)


class Severity(str, Enum):
    """Diagnostic severity levels."""

    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def is_error(self) -> bool:
        return self is not Severity.WARNING


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic reported by a parser backend."""

    level: Severity
    message: str
    location: Span | None = None
    reason: str = "syntax"

    @property
    def is_error(self) -> bool:
        return self.level.is_error

    def escalate(self) -> "Diagnostic":
        """Return a fatal copy of this diagnostic."""
        return replace(self, level=Severity.FATAL)

    def __str__(self) -> str:
        if self.location is None:
            return f"{self.level.value}: {self.message}"
        return f"{self.location.line}:{self.location.column}: {self.level.value}: {self.message}"


@dataclass(frozen=True, slots=True)
class Comment:
    """A comment occurrence in source."""

    text: str
    location: Span

    @property
    def line(self) -> int:
        return self.location.line


@dataclass(frozen=True, slots=True)
class Token:
    """
    Uniform token representation.

    `type` is the exact token name (NAME, EQUAL, NUMBER, COMMENT, ...).
    """

    type: str
    text: str
    pos: Span

    @property
    def line(self) -> int:
        return self.pos.line

    @property
    def column(self) -> int:
        return self.pos.column

    @property
    def is_comment(self) -> bool:
        return self.type == "COMMENT"

    @classmethod
    def from_token_info(cls, info: tokenize.TokenInfo) -> "Token":
        """Wrap a raw `tokenize` token."""
        return cls(
            type=tokenize.tok_name[info.exact_type],
            text=info.string,
            pos=Span(
                start_line=info.start[0],
                start_col=info.start[1],
                end_line=info.end[0],
                end_col=info.end[1],
            ),
        )


@dataclass(frozen=True, order=True, slots=True)
class DialectVersion:
    """Python language release selecting a parser backend."""

    major: int
    minor: int

    @classmethod
    def parse(cls, value: "DialectVersion | tuple[int, int] | str") -> "DialectVersion":
        """
        Normalize a version selector.

        Args:
            value: DialectVersion, (major, minor) tuple, or "3.10" string

        Returns:
            DialectVersion

        Raises:
            UnknownDialectError: If value is not a recognizable version
        """
        if isinstance(value, DialectVersion):
            return value

        if isinstance(value, tuple) and len(value) == 2 and all(type(part) is int for part in value):
            return cls(value[0], value[1])

        if isinstance(value, str):
            match = _VERSION_PATTERN.match(value)
            if match:
                return cls(int(match.group(1)), int(match.group(2)))

        raise UnknownDialectError(f"Unknown dialect version: {value!r}")

    def as_tuple(self) -> tuple[int, int]:
        return (self.major, self.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"
