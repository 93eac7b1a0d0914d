"""Formatting state for one file and the item/statement walk built on it."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from . import ast as A
from .block import Block, EmptyBlockStyle, visit_block
from .buffer import FormatBuffer
from .comment import CodeCharKind, comment_code_slices, count_newlines, rewrite_comment
from .config import BraceStyle, Config, ControlBraceStyle
from .errors import IndentMismatchError
from .imports import leading_use_run, rewrite_use, segment_use_run, use_sort_key
from .missed_spans import splice_missing
from .rewrite import ends_with_line_comment, has_where_clause, normalize_code
from .shape import Indent, Shape
from .source_map import SourceFile
from .visitable import ModuleEntry


LOGGER = logging.getLogger(__name__)


class FmtVisitor:
    """Output buffer, source cursor and current indent of one formatting pass.

    `last_pos` is the offset up to which the original source has been
    accounted for; everything in [last_pos, next construct) is still to be
    spliced in from the source.
    """

    def __init__(self, source: SourceFile, config: Config) -> None:
        self.source = source
        self.config = config
        self.buffer = FormatBuffer()
        self.last_pos = 0
        self.block_indent = Indent()
        self._indent_depth = 0

    # -- output ---------------------------------------------------------------

    def push_str(self, s: str) -> None:
        self.buffer.push_str(s)

    def push_newline_indent(self) -> None:
        if self.buffer.is_empty():
            self.push_str(self.block_indent.to_string(self.config))
        else:
            self.push_str(self.block_indent.to_string_with_newline(self.config))

    def push_blank_line(self) -> None:
        if not self.buffer.is_empty():
            self.push_str("\n")

    def push_block_indent(self) -> None:
        self.block_indent = self.block_indent.block_indent(self.config)
        self._indent_depth += 1

    def pop_block_indent(self) -> None:
        if self._indent_depth == 0:
            raise IndentMismatchError("block indent popped more often than pushed")
        self.block_indent = self.block_indent.block_unindent(self.config)
        self._indent_depth -= 1

    @contextmanager
    def balanced_indent(self) -> Iterator[None]:
        """Fail if the wrapped code leaves the indent different from how it found it."""
        depth, indent = self._indent_depth, self.block_indent
        yield
        if self._indent_depth != depth or self.block_indent != indent:
            raise IndentMismatchError(
                f"indent changed from {indent.width()} (depth {depth}) "
                f"to {self.block_indent.width()} (depth {self._indent_depth})"
            )

    # -- source ---------------------------------------------------------------

    def snippet(self, node: A.Node) -> str:
        return self.source.snippet(node.span)

    def out_of_file_lines(self, lo: int, hi: int) -> bool:
        file_lines = self.config.file_lines
        if file_lines.is_all():
            return False
        return not file_lines.intersects(self.source.line_range(lo, hi))

    def format_missing_with_indent(self, end: int) -> None:
        """Splice the source up to `end` and start a fresh line for what follows."""
        outcome = splice_missing(self, self.last_pos, end)
        tail = self.source.text_between(outcome.last_hi, end)
        if count_newlines(tail) >= 2 or outcome.pending_blank_line:
            self.push_blank_line()
        self.push_newline_indent()
        self.last_pos = end

    def format_missing(self, end: int) -> None:
        """Splice trailing comments up to `end`; nothing follows them."""
        splice_missing(self, self.last_pos, end)
        self.last_pos = end

    def push_verbatim(self, hi: int) -> None:
        """Copy the source up to `hi` unchanged, leading whitespace included."""
        self.push_str(self.source.text_between(self.last_pos, hi))
        self.last_pos = hi

    # -- items ----------------------------------------------------------------

    def visit_attrs(self, attrs: Sequence[A.Attribute]) -> None:
        for attr in attrs:
            self.format_missing_with_indent(attr.span.lo)
            self.push_str(normalize_code(self.snippet(attr)))
            self.last_pos = attr.span.hi

    def visit_items_with_reordering(self, items: Sequence[ModuleEntry]) -> None:
        i = 0
        while i < len(items):
            n = leading_use_run(items[i:])
            if not n:
                self.visit_item(items[i].node)
                i += 1
                continue
            for segment in segment_use_run(self.source, items[i : i + n]):
                self._visit_use_segment(segment)
            i += n

    def _visit_use_segment(self, segment: list[ModuleEntry]) -> None:
        lo, hi = segment[0].lo, segment[-1].hi
        if len(segment) == 1 or self.out_of_file_lines(lo, hi):
            for entry in segment:
                self.visit_item(entry.node)
            return
        ordered = segment
        if self.config.reorder_imports:
            ordered = sorted(segment, key=lambda e: use_sort_key(e.node))
        LOGGER.debug("use segment of %d at %s", len(segment), self.source.position(lo))
        self.format_missing_with_indent(lo)
        for k, entry in enumerate(ordered):
            if k:
                self.push_newline_indent()
            self.push_str(rewrite_use(entry.node, self.source))
        self.last_pos = hi

    def visit_item(self, item: A.Item) -> None:
        lo = A.full_lo(item)
        if self.out_of_file_lines(lo, item.span.hi):
            self.push_verbatim(item.span.hi)
            return
        self.visit_attrs(item.attrs)
        self.format_missing_with_indent(item.span.lo)

        if isinstance(item, A.UseDecl):
            self.push_str(rewrite_use(item, self.source))
        elif isinstance(item, A.FnDecl):
            self._visit_fn(item)
        elif isinstance(item, A.Module):
            header = self.source.text_between(item.header.lo, item.body.span.lo)
            self._push_header(header, next_line=self._item_brace_next_line(header))
            self.last_pos = item.body.span.lo
            style = EmptyBlockStyle.SINGLE_LINE
            if item.kind == "mod" and not self.config.empty_item_single_line:
                style = EmptyBlockStyle.MULTI_LINE
            visit_block(self, Block.from_ast_module(item.body, style))
        else:
            self.push_str(normalize_code(self.snippet(item)))
        self.last_pos = item.span.hi

    def _visit_fn(self, fn: A.FnDecl) -> None:
        if fn.body is None:
            self.push_str(normalize_code(self.snippet(fn)))
            return
        header = self.source.text_between(fn.header.lo, fn.body.span.lo)
        self._push_header(header, next_line=self._item_brace_next_line(header))
        self.last_pos = fn.body.span.lo
        style = EmptyBlockStyle.SINGLE_LINE if self.config.empty_item_single_line else EmptyBlockStyle.MULTI_LINE
        visit_block(self, Block.from_ast_block(fn.body, style))

    def _item_brace_next_line(self, header: str) -> bool:
        style = self.config.brace_style
        if style is BraceStyle.ALWAYS_NEXT_LINE:
            return True
        return style is BraceStyle.SAME_LINE_WHERE and has_where_clause(header)

    def _push_header(self, header: str, *, next_line: bool) -> None:
        """Push `header` and the separator before the opening brace."""
        header = normalize_code(header)
        self.push_str(header)
        if next_line or ends_with_line_comment(header):
            self.push_newline_indent()
        else:
            self.push_str(" ")

    # -- statements -----------------------------------------------------------

    def visit_stmt(self, stmt: A.Stmt) -> None:
        if isinstance(stmt, A.ItemStmt):
            self.visit_item(stmt.item)
            return
        lo = A.full_lo(stmt)
        if self.out_of_file_lines(lo, stmt.span.hi):
            self.push_verbatim(stmt.span.hi)
            return
        self.visit_attrs(stmt.attrs)
        self.format_missing_with_indent(stmt.span.lo)

        if isinstance(stmt, A.Local):
            self.push_str(normalize_code(self.snippet(stmt)))
            self.last_pos = stmt.span.hi
            return

        expr = stmt.expr
        if isinstance(expr, (A.OpaqueExpr, A.JumpExpr)):
            self.push_str(normalize_code(self.snippet(stmt)))
            self.last_pos = stmt.span.hi
            return

        if isinstance(expr, A.IfExpr):
            self.visit_if(expr)
        elif isinstance(expr, A.LoopExpr):
            header = self.source.text_between(expr.span.lo, expr.body.span.lo)
            self._push_header(header, next_line=self._control_brace_next_line())
            self.last_pos = expr.body.span.lo
            visit_block(self, Block.from_ast_block(expr.body, EmptyBlockStyle.SINGLE_LINE))
        else:
            self.last_pos = expr.span.lo
            visit_block(self, Block.from_ast_block(expr.block, EmptyBlockStyle.SINGLE_LINE))

        if stmt.has_semi:
            tail = self.source.text_between(expr.span.hi, stmt.span.hi)
            if tail.strip() == ";":
                self.push_str(";")
            else:
                self.push_str(" " + normalize_code(tail))
        self.last_pos = stmt.span.hi

    def _control_brace_next_line(self) -> bool:
        return self.config.control_brace_style is ControlBraceStyle.ALWAYS_NEXT_LINE

    def visit_if(self, expr: A.IfExpr) -> None:
        """Format an `if`/`else if`/`else` chain.

        Every block of a chain that ends in `else` keeps `{` and `}` on
        separate lines when empty.
        """
        style = EmptyBlockStyle.MULTI_LINE if expr.else_ is not None else EmptyBlockStyle.SINGLE_LINE
        node = expr
        while True:
            header = self.source.text_between(node.span.lo, node.then.span.lo)
            self._push_header(header, next_line=self._control_brace_next_line())
            self.last_pos = node.then.span.lo
            visit_block(self, Block.from_ast_block(node.then, style), if_else=node.else_ is not None)

            else_ = node.else_
            if else_ is None:
                break
            connector = self.source.text_between(node.then.span.hi, else_.span.lo)
            after_line_comment = self._push_else(connector)
            if isinstance(else_, A.IfExpr):
                # `else if` stays on one line unless a line comment is in the way
                if after_line_comment:
                    self.push_newline_indent()
                else:
                    self.push_str(" ")
                node = else_
                continue
            if self._control_brace_next_line() or after_line_comment:
                self.push_newline_indent()
            else:
                self.push_str(" ")
            self.last_pos = else_.span.lo
            visit_block(self, Block.from_ast_block(else_, style))
            break
        self.last_pos = expr.span.hi

    def _push_else(self, connector: str) -> bool:
        """Emit the `else` between two arms, keeping any comments around it.

        Leaves the buffer right after `else` (or after a comment following it)
        and returns whether it ends in a line comment; the caller adds the
        separator before the next arm.
        """
        slices = comment_code_slices(connector)
        if not any(s.kind is CodeCharKind.COMMENT for s in slices):
            if self.config.control_brace_style is ControlBraceStyle.ALWAYS_SAME_LINE:
                self.push_str(" else")
            else:
                self.push_newline_indent()
                self.push_str("else")
            return False

        shape = Shape.indented(self.block_indent, self.config)
        lines: list[str] = []
        current = ""
        for kind, _, text in slices:
            if kind is CodeCharKind.COMMENT:
                rewritten = rewrite_comment(text, shape, self.config) or text.rstrip("\r\n")
                current = f"{current} {rewritten}" if current else rewritten
                if rewritten.rsplit("\n", 1)[-1].lstrip().startswith("//"):
                    lines.append(current)
                    current = ""
                continue
            for k, part in enumerate(text.split("\n")):
                if k and current:
                    lines.append(current)
                    current = ""
                if part.strip():
                    current = f"{current} {part.strip()}" if current else part.strip()
        ends_in_line_comment = not current
        if current:
            lines.append(current)

        for line in lines:
            self.push_newline_indent()
            self.push_str(line)
        return ends_in_line_comment
