"""Re-emitting the source between formatted constructs.

Formatted code comes from the rewriters; everything between two constructs
(comments, blank lines, stray semicolons) comes from the original text. This
module walks such a gap slice by slice and splices the comments back in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .comment import CodeCharKind, comment_code_slices, count_newlines, is_skippable_filler, rewrite_comment
from .shape import Shape

if TYPE_CHECKING:
    from .visitor import FmtVisitor


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpliceOutcome:
    unindented: bool
    last_hi: int  # end of the last emitted slice
    pending_blank_line: bool  # skipped filler after it spanned a line break


def splice_missing(visitor: FmtVisitor, lo: int, hi: int, *, unindent_comment: bool = False) -> SpliceOutcome:
    """Emit the comments and stray code found in [lo, hi).

    Filler (whitespace, lone semicolons) is dropped; a blank line is kept in
    front of a comment that had one or more blank lines before it. With
    `unindent_comment`, the block indent drops one level at the first comment
    and stays there; the caller restores it.
    """
    config = visitor.config
    source = visitor.source

    last_hi = lo
    unindented = False
    prev_ends_with_newline = False
    after_line_comment = False
    extra_newline = False

    for kind, offset, sub_slice in comment_code_slices(source.text_between(lo, hi)):
        LOGGER.debug("splice_missing: %s %d %r", kind.value, offset, sub_slice)

        if kind is CodeCharKind.COMMENT:
            if unindent_comment and not unindented:
                unindented = True
                visitor.block_indent = visitor.block_indent.block_unindent(config)

            snippet_in_between = source.text_between(last_hi, lo + offset)
            # a line comment owns its newline, so nothing can follow it on its line
            comment_on_same_line = (
                "\n" not in snippet_in_between
                and not prev_ends_with_newline
                and not after_line_comment
                and not visitor.buffer.is_empty()
            )

            rewritten = None
            if comment_on_same_line:
                # 1 = a space before the comment marker
                offset_len = 1 + max(0, visitor.buffer.last_line_width() - visitor.block_indent.width())
                trailing = Shape.indented(visitor.block_indent, config).comment(config).sub_width(offset_len)
                if trailing is not None and trailing.width > 0:
                    rewritten = rewrite_comment(sub_slice, trailing.visual_indent(offset_len), config)
                    # a wrapped line comment continues on lines of its own
                    if sub_slice.startswith("//") and rewritten is not None and "\n" in rewritten:
                        comment_on_same_line = False
                else:
                    comment_on_same_line = False

            if comment_on_same_line:
                visitor.push_str(" ")
            else:
                if count_newlines(snippet_in_between) >= 2 or extra_newline:
                    visitor.push_blank_line()
                visitor.push_newline_indent()
                own_line = Shape.indented(visitor.block_indent, config).comment(config)
                rewritten = rewrite_comment(sub_slice, own_line, config)

            if rewritten is None:
                LOGGER.debug("keeping comment at %d verbatim", lo + offset)
                # the line terminator is not part of the comment
                rewritten = sub_slice.rstrip("\r\n")
            visitor.push_str(rewritten)
            after_line_comment = rewritten.rsplit("\n", 1)[-1].lstrip().startswith("//")
        elif is_skippable_filler(sub_slice):
            extra_newline = prev_ends_with_newline and "\n" in sub_slice
            continue
        else:
            visitor.push_newline_indent()
            visitor.push_str(sub_slice.strip())
            after_line_comment = False

        prev_ends_with_newline = sub_slice.endswith("\n")
        extra_newline = False
        last_hi = lo + offset + len(sub_slice)

    return SpliceOutcome(unindented=unindented, last_hi=last_hi, pending_blank_line=extra_newline)
