from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .spans import Span


@dataclass(slots=True)
class ParseError(Exception):
    span: Span
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        base = f"{self.span.format()}: {self.message}"
        if self.hint:
            return f"{base}\nhint: {self.hint}"
        return base


class FormatInvariantError(Exception):
    """An internal invariant of the formatting pass was violated.

    Fatal for the file being formatted; the driver reports it and moves on.
    """


@dataclass(slots=True)
class SpanError(FormatInvariantError):
    lo: int
    hi: int
    message: str

    def __str__(self) -> str:
        return f"invalid span [{self.lo}, {self.hi}): {self.message}"


@dataclass(slots=True)
class IndentMismatchError(FormatInvariantError):
    message: str

    def __str__(self) -> str:
        return f"unbalanced block indentation: {self.message}"


@dataclass(slots=True)
class ConfigError(Exception):
    key: str
    message: str

    def __str__(self) -> str:
        return f"invalid config option {self.key!r}: {self.message}"
