"""Style configuration consumed by the formatter."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import Enum

from .errors import ConfigError
from .spans import LineRange


class NewlineStyle(str, Enum):
    AUTO = "Auto"  # detect from the raw input
    WINDOWS = "Windows"  # \r\n
    UNIX = "Unix"  # \n
    NATIVE = "Native"  # \r\n on Windows, \n elsewhere

    @staticmethod
    def auto_detect(raw_input_text: str) -> NewlineStyle:
        pos = raw_input_text.find("\n")
        if pos == -1:
            return NewlineStyle.NATIVE
        if pos > 0 and raw_input_text[pos - 1] == "\r":
            return NewlineStyle.WINDOWS
        return NewlineStyle.UNIX

    @staticmethod
    def native() -> NewlineStyle:
        return NewlineStyle.WINDOWS if os.name == "nt" else NewlineStyle.UNIX

    def apply(self, formatted_text: str, raw_input_text: str) -> str:
        """Return `formatted_text` with this style's line endings.

        `Auto` looks at `raw_input_text`; when that has no newline at all the
        native style is used.
        """
        style = self
        if style is NewlineStyle.AUTO:
            style = NewlineStyle.auto_detect(raw_input_text)
        if style is NewlineStyle.NATIVE:
            style = NewlineStyle.native()
        if style is NewlineStyle.WINDOWS:
            return formatted_text.replace("\r", "").replace("\n", "\r\n")
        return formatted_text


class BraceStyle(str, Enum):
    ALWAYS_NEXT_LINE = "AlwaysNextLine"
    PREFER_SAME_LINE = "PreferSameLine"
    # Same line unless the header has a where-clause.
    SAME_LINE_WHERE = "SameLineWhere"


class ControlBraceStyle(str, Enum):
    ALWAYS_SAME_LINE = "AlwaysSameLine"  # K&R
    CLOSING_NEXT_LINE = "ClosingNextLine"  # Stroustrup
    ALWAYS_NEXT_LINE = "AlwaysNextLine"  # Allman


@dataclass(frozen=True, slots=True)
class FileLines:
    """Line ranges formatting is restricted to. `None` means the whole file."""

    ranges: tuple[LineRange, ...] | None = None

    @staticmethod
    def all() -> FileLines:
        return FileLines()

    @staticmethod
    def parse(text: str) -> FileLines:
        """Parse `"1-10,14,20-22"` into ranges."""
        out: list[LineRange] = []
        for part in text.split(","):
            part = part.strip()
            if not part:
                continue
            lo_s, sep, hi_s = part.partition("-")
            lo = int(lo_s)
            hi = int(hi_s) if sep else lo
            if lo < 1 or hi < lo:
                raise ValueError(f"bad line range {part!r}")
            out.append(LineRange(lo, hi))
        return FileLines(tuple(sorted(out)))

    def is_all(self) -> bool:
        return self.ranges is None

    def intersects(self, lines: LineRange) -> bool:
        if self.ranges is None:
            return True
        return any(r.intersects(lines) for r in self.ranges)


@dataclass(frozen=True, slots=True)
class Config:
    max_width: int = 100
    tab_spaces: int = 4
    hard_tabs: bool = False
    comment_width: int = 80
    wrap_comments: bool = False
    normalize_comments: bool = False
    reorder_imports: bool = True
    trailing_semicolon: bool = True
    empty_item_single_line: bool = True
    brace_style: BraceStyle = BraceStyle.SAME_LINE_WHERE
    control_brace_style: ControlBraceStyle = ControlBraceStyle.ALWAYS_SAME_LINE
    newline_style: NewlineStyle = NewlineStyle.AUTO
    file_lines: FileLines = field(default_factory=FileLines.all)

    def __post_init__(self) -> None:
        if self.max_width <= 0:
            raise ConfigError("max_width", "must be positive")
        if self.tab_spaces <= 0:
            raise ConfigError("tab_spaces", "must be positive")

    def with_overrides(self, overrides: Mapping[str, str]) -> Config:
        """Apply `key=value` style string overrides (as given on a command line)."""
        known = {f.name: f for f in fields(self)}
        changes: dict[str, object] = {}
        for key, raw in overrides.items():
            if key not in known:
                raise ConfigError(key, "unknown option")
            current = getattr(self, key)
            try:
                changes[key] = _coerce(current, raw)
            except ValueError as e:
                raise ConfigError(key, str(e)) from e
        return replace(self, **changes)


_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _coerce(current: object, raw: str) -> object:
    if isinstance(current, bool):
        v = raw.strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
        raise ValueError(f"expected a boolean, got {raw!r}")
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, Enum):
        enum_type = type(current)
        for member in enum_type:
            if member.value.lower() == raw.strip().lower():
                return member
        choices = ", ".join(m.value for m in enum_type)
        raise ValueError(f"expected one of: {choices}")
    if isinstance(current, FileLines):
        return FileLines.parse(raw)
    raise ValueError(f"cannot set option of type {type(current).__name__}")
