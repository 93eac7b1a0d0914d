from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """A concrete source position.

    Offsets are 0-based; line/column are 1-based for user-facing messages.
    """

    offset: int
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open span [start, end) in a single file."""

    file: str
    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.start.offset > self.end.offset:
            # Imported lazily: errors.py depends on this module.
            from .errors import SpanError

            raise SpanError(self.start.offset, self.end.offset, "span starts after it ends")

    @property
    def lo(self) -> int:
        return self.start.offset

    @property
    def hi(self) -> int:
        return self.end.offset

    def format(self) -> str:
        return f"{self.file}:{self.start.line}:{self.start.column}"


@dataclass(frozen=True, slots=True, order=True)
class LineRange:
    """Inclusive range of 1-based line numbers."""

    lo: int
    hi: int

    def intersects(self, other: LineRange) -> bool:
        return self.lo <= other.hi and other.lo <= self.hi
