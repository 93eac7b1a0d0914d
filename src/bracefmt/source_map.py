from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field

from .errors import SpanError
from .spans import LineRange, Position, Span


@dataclass(frozen=True, slots=True)
class SourceFile:
    """Immutable text of one file plus offset/line bookkeeping.

    Offsets index the Python string (code points), not encoded bytes.
    """

    name: str
    text: str
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        for i, ch in enumerate(self.text):
            if ch == "\n":
                starts.append(i + 1)
        object.__setattr__(self, "_line_starts", tuple(starts))

    def __len__(self) -> int:
        return len(self.text)

    def _check(self, lo: int, hi: int) -> None:
        if lo > hi:
            raise SpanError(lo, hi, "span starts after it ends")
        if lo < 0 or hi > len(self.text):
            raise SpanError(lo, hi, f"outside of {self.name} (length {len(self.text)})")

    def position(self, offset: int) -> Position:
        self._check(offset, offset)
        idx = bisect_right(self._line_starts, offset) - 1
        return Position(offset=offset, line=idx + 1, column=offset - self._line_starts[idx] + 1)

    def span(self, lo: int, hi: int) -> Span:
        self._check(lo, hi)
        return Span(file=self.name, start=self.position(lo), end=self.position(hi))

    def text_between(self, lo: int, hi: int) -> str:
        self._check(lo, hi)
        return self.text[lo:hi]

    def snippet(self, span: Span) -> str:
        return self.text_between(span.lo, span.hi)

    def line_range(self, lo: int, hi: int) -> LineRange:
        """Lines touched by [lo, hi); an empty range touches the line it sits on."""
        self._check(lo, hi)
        last = hi - 1 if hi > lo else hi
        return LineRange(self.position(lo).line, self.position(last).line)
