"""Single-line layout of the constructs the formatter does not break apart."""

from __future__ import annotations

import re

from .comment import CodeCharKind, comment_code_slices, contains_comment

_LITERAL_OR_SPACE_RE = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.[^\'\n]*|[^\\\'\n])\'|\s+', re.DOTALL)


def _collapse(m: re.Match[str]) -> str:
    tok = m.group()
    return tok if tok[0] in "\"'" else " "


def normalize_code(text: str) -> str:
    """Collapse whitespace runs outside literals to one space.

    Text holding a comment or spanning lines is only trimmed.
    """
    text = text.strip()
    if "\n" in text or contains_comment(text):
        return text
    return _LITERAL_OR_SPACE_RE.sub(_collapse, text)


def ends_with_line_comment(text: str) -> bool:
    """Anything appended to `text` on the same line would be commented out."""
    slices = comment_code_slices(text.rstrip())
    return bool(slices) and slices[-1].kind is CodeCharKind.COMMENT and slices[-1].text.startswith("//")


def has_where_clause(header: str) -> bool:
    return re.search(r"\bwhere\b", header) is not None
