"""Source spans and grammar errors with annotated excerpts."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Iterable, TypeVar

T = TypeVar("T")


@total_ordering
@dataclass(frozen=True)
class Span:
    """A range ``[start, end)`` of character offsets into ``text``."""

    text: str = field(repr=False)
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= len(self.text):
            raise ValueError(
                f"invalid span {self.start}..{self.end} for input of length {len(self.text)}"
            )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Span):
            return NotImplemented
        return (self.start, self.end, self.text) < (other.start, other.end, other.text)

    def as_str(self) -> str:
        """Return the covered text."""
        return self.text[self.start : self.end]

    def line_col(self) -> tuple[int, int]:
        """Return the 1-based line and column of the start."""
        line = self.text.count("\n", 0, self.start) + 1
        line_start = self.text.rfind("\n", 0, self.start) + 1
        return line, self.start - line_start + 1

    def join(self, other: "Span") -> "Span":
        """Return the span from this span's start to ``other``'s end."""
        if other.text != self.text:
            raise ValueError("cannot join spans over different inputs")
        return Span(self.text, self.start, other.end)

    def _line(self) -> tuple[int, str]:
        line_start = self.text.rfind("\n", 0, self.start) + 1
        line_end = self.text.find("\n", self.start)
        if line_end == -1:
            line_end = len(self.text)
        line = self.text[line_start:line_end]
        if line.endswith("\r"):
            line = line[:-1]
        return line_start, line


class GrammarError(Exception):
    """An error located at a span of the grammar source."""

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def __str__(self) -> str:
        line_no, col = self.span.line_col()
        line_start, line = self.span._line()
        pad = " " * len(str(line_no))
        end = min(self.span.end, line_start + len(line))
        width = end - self.span.start
        indent = "".join("\t" if c == "\t" else " " for c in line[: col - 1])
        marker = "^" + "-" * (width - 2) + "^" if width > 1 else "^"
        return "\n".join(
            [
                f"{pad}--> {line_no}:{col}",
                f"{pad} |",
                f"{line_no} | {line}",
                f"{pad} | {indent}{marker}",
                f"{pad} |",
                f"{pad} = {self.message}",
            ]
        )


def format_errors(errors: Iterable[GrammarError]) -> str:
    """Render a list of errors under a common heading."""
    return "grammar error\n\n" + "\n\n".join(str(error) for error in errors)


class GrammarErrors(Exception):
    """One or more grammar errors reported together."""

    def __init__(self, errors: Iterable[GrammarError]) -> None:
        self.errors = list(errors)
        super().__init__(format_errors(self.errors))

    def __str__(self) -> str:
        return format_errors(self.errors)


def unwrap_or_report(errors: Iterable[GrammarError], value: T = None) -> T:
    """Return ``value`` when there are no errors, else raise them all."""
    errors = list(errors)
    if errors:
        raise GrammarErrors(errors)
    return value