from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import IndentMismatchError

if TYPE_CHECKING:
    from .config import Config


@dataclass(frozen=True, slots=True)
class Indent:
    """Leading whitespace of a line, in columns.

    `block` grows by `tab_spaces` per nesting level; `alignment` is extra
    visual offset (e.g. a trailing comment lined up after code).
    """

    block: int = 0
    alignment: int = 0

    def width(self) -> int:
        return self.block + self.alignment

    def level(self, config: Config) -> int:
        return self.block // config.tab_spaces

    def block_indent(self, config: Config) -> Indent:
        return Indent(self.block + config.tab_spaces, self.alignment)

    def block_unindent(self, config: Config) -> Indent:
        if self.block < config.tab_spaces:
            raise IndentMismatchError(f"cannot unindent below column 0 (at {self.block})")
        return Indent(self.block - config.tab_spaces, self.alignment)

    def to_string(self, config: Config) -> str:
        if config.hard_tabs:
            tabs, spaces = self.block // config.tab_spaces, self.block % config.tab_spaces + self.alignment
        else:
            tabs, spaces = 0, self.width()
        spaces = min(spaces, config.max_width)
        return "\t" * tabs + " " * spaces

    def to_string_with_newline(self, config: Config) -> str:
        return "\n" + self.to_string(config)


@dataclass(frozen=True, slots=True)
class Shape:
    """Room left on the current line: `width` columns starting at `indent`."""

    width: int
    indent: Indent
    offset: int = 0

    @staticmethod
    def indented(indent: Indent, config: Config) -> Shape:
        return Shape(
            width=max(0, config.max_width - indent.width()),
            indent=indent,
            offset=indent.alignment,
        )

    def comment(self, config: Config) -> Shape:
        # comment_width only caps comments that are going to be re-flowed
        if not config.wrap_comments:
            return self
        width = min(self.width, max(0, config.comment_width - self.indent.width()))
        return Shape(width=width, indent=self.indent, offset=self.offset)

    def visual_indent(self, extra_width: int) -> Shape:
        alignment = self.offset + extra_width
        return Shape(
            width=self.width,
            indent=Indent(self.indent.block, alignment),
            offset=alignment,
        )

    def sub_width(self, width: int) -> Shape | None:
        if width > self.width:
            return None
        return Shape(width=self.width - width, indent=self.indent, offset=self.offset)
