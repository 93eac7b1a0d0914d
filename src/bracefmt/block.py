"""Formatting of braced blocks.

`visit_block` is the entry point used for every `{ ... }` the formatter meets:
function bodies, control flow arms and `mod`/`impl`/`trait` bodies. It emits
the braces, hands the entries to the item visitor and rebuilds whatever sits
between the last entry and the closing brace from the original source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from . import ast as A
from .comment import CodeCharKind, comment_code_slices, contains_comment
from .imports import leading_use_run
from .missed_spans import splice_missing
from .spans import Span
from .visitable import ModuleEntry, Statement, Visitable

if TYPE_CHECKING:
    from .visitor import FmtVisitor


LOGGER = logging.getLogger(__name__)

# Width of the opening and closing delimiter.
BRACE_COMPENSATION = 1


class EmptyBlockStyle(str, Enum):
    SINGLE_LINE = "SingleLine"  # `{}` may stay on the line of its opener
    MULTI_LINE = "MultiLine"  # always put `}` on its own line


@dataclass(frozen=True, slots=True)
class Block:
    items: tuple[Visitable, ...]
    inner_attrs: tuple[A.Attribute, ...] | None
    empty_block_style: EmptyBlockStyle
    span: Span

    @staticmethod
    def from_ast_block(block: A.Block, empty_block_style: EmptyBlockStyle) -> Block:
        return Block(
            items=tuple(Statement(s) for s in block.stmts),
            inner_attrs=block.inner_attrs or None,
            empty_block_style=empty_block_style,
            span=block.span,
        )

    @staticmethod
    def from_ast_module(body: A.ItemBody, empty_block_style: EmptyBlockStyle) -> Block:
        return Block(
            items=tuple(ModuleEntry(it) for it in body.items),
            inner_attrs=body.inner_attrs or None,
            empty_block_style=empty_block_style,
            span=body.span,
        )


def is_empty_block(visitor: FmtVisitor, b: Block) -> bool:
    return not b.items and not b.inner_attrs and not contains_comment(visitor.source.snippet(b.span))


def visit_block(visitor: FmtVisitor, b: Block, *, if_else: bool = False) -> None:
    """Format `b`; the visitor's cursor must sit on the opening brace.

    `if_else` marks the body of an `if` that continues with `else`: a comment
    right before its closing brace is then indented like the `} else {` line.
    """
    source = visitor.source
    config = visitor.config
    LOGGER.debug("visit_block: %s %s", source.position(b.span.lo), source.position(b.span.hi))

    with visitor.balanced_indent():
        visitor.last_pos += BRACE_COMPENSATION
        visitor.push_block_indent()
        visitor.push_str("{")

        if is_empty_block(visitor, b):
            visitor.pop_block_indent()
            if (
                b.empty_block_style is EmptyBlockStyle.SINGLE_LINE
                and visitor.buffer.last_line_width() < config.max_width
            ):
                visitor.push_str("}")
            else:
                visitor.push_newline_indent()
                visitor.push_str("}")
            visitor.last_pos = b.span.hi
            return

        trim_spaces_after_opening_brace(visitor, b)

        if b.inner_attrs:
            visitor.visit_attrs(b.inner_attrs)

        visit_items(visitor, b.items)

        if b.items and b.items[-1].requires_semicolon(config):
            visitor.push_str(";")

        rest_lo = visitor.last_pos
        if visitor.out_of_file_lines(rest_lo, b.span.hi):
            visitor.push_str(source.text_between(rest_lo, b.span.hi))
            visitor.pop_block_indent()
        else:
            close_block(
                visitor,
                rest_lo,
                b.span.hi - BRACE_COMPENSATION,
                unindent_comment=if_else and bool(b.items),
            )
        visitor.last_pos = b.span.hi


def trim_spaces_after_opening_brace(visitor: FmtVisitor, b: Block) -> None:
    """Skip the whitespace between `{` and the first attribute or item.

    The cursor moves up to the last newline of that run so the first entry
    never starts with a blank line.
    """
    if b.inner_attrs:
        hi = b.inner_attrs[0].span.lo
    elif b.items:
        hi = b.items[0].lo
    else:
        return
    slices = comment_code_slices(visitor.source.text_between(visitor.last_pos, hi))
    if slices and slices[0].kind is CodeCharKind.NORMAL:
        nl = slices[0].text.rfind("\n")
        if nl != -1:
            visitor.last_pos += nl


def visit_items(visitor: FmtVisitor, items: tuple[Visitable, ...]) -> None:
    if not items:
        return
    if isinstance(items[0], Statement):
        walk_stmts(visitor, items)
    else:
        visitor.visit_items_with_reordering(items)


def walk_stmts(visitor: FmtVisitor, stmts: tuple[Visitable, ...]) -> None:
    """Visit statements in order, grouping each leading run of `use` items."""
    i = 0
    while i < len(stmts):
        consumed = group_leading_uses(visitor, stmts[i:])
        if consumed:
            i += consumed
            continue
        visitor.visit_stmt(stmts[i].node)
        i += 1


def group_leading_uses(visitor: FmtVisitor, stmts: tuple[Visitable, ...]) -> int:
    """Emit the leading `use` run of `stmts` as one unit; return its length."""
    n = leading_use_run(stmts)
    if n:
        visitor.visit_items_with_reordering(tuple(ModuleEntry(s.to_item()) for s in stmts[:n]))
    return n


def close_block(visitor: FmtVisitor, lo: int, hi: int, *, unindent_comment: bool) -> None:
    """Rebuild [lo, hi) (the tail of a block before `}`) and emit the `}`."""
    config = visitor.config
    LOGGER.debug("close_block: [%d, %d) unindent_comment=%s", lo, hi, unindent_comment)
    outcome = splice_missing(visitor, lo, hi, unindent_comment=unindent_comment)
    if outcome.unindented:
        visitor.block_indent = visitor.block_indent.block_indent(config)
    visitor.pop_block_indent()
    visitor.push_newline_indent()
    visitor.push_str("}")
