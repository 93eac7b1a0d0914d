"""Locating and re-indenting comments inside raw source text."""

from __future__ import annotations

import logging
import re
import textwrap
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .config import Config
    from .shape import Shape


LOGGER = logging.getLogger(__name__)

_STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"?', re.DOTALL)
_CHAR_RE = re.compile(r"'(?:\\.[^'\n]*|[^\\'\n])'")
_LINE_COMMENT_RE = re.compile(r"^(//[/!]?)[ \t]?(.*)$")


class CodeCharKind(str, Enum):
    COMMENT = "Comment"
    NORMAL = "Normal"


class CodeSlice(NamedTuple):
    kind: CodeCharKind
    offset: int  # relative to the start of the sliced text
    text: str


def _starts_own_line(text: str, i: int) -> bool:
    # the start of `text` may sit right after code, so it does not count
    nl = text.rfind("\n", 0, i)
    return nl != -1 and not text[nl + 1 : i].strip()


def _comment_end(text: str, i: int) -> int:
    """End (exclusive) of the comment starting at `i`.

    A line comment owns its terminating newline. Consecutive line comments
    separated only by indentation belong to the same slice when the first one
    starts its own line; a blank line breaks the run. A line comment trailing
    code ends at its newline. An unterminated block comment runs to the end.
    """
    n = len(text)
    if text.startswith("/*", i):
        j = text.find("*/", i + 2)
        return n if j == -1 else j + 2

    if not _starts_own_line(text, i):
        nl = text.find("\n", i)
        return n if nl == -1 else nl + 1

    end = i
    while True:
        nl = text.find("\n", end)
        if nl == -1:
            return n
        end = nl + 1
        j = end
        while j < n and text[j] in " \t":
            j += 1
        if not text.startswith("//", j):
            return end
        end = j


def comment_code_slices(text: str) -> list[CodeSlice]:
    """Split `text` into alternating comment and normal slices.

    Concatenating the `text` of every slice gives back the input. String and
    char literals never start a comment. Empty slices are not produced.
    """
    out: list[CodeSlice] = []
    n = len(text)
    start = 0
    i = 0
    while i < n:
        ch = text[i]
        if ch == "/" and i + 1 < n and text[i + 1] in "/*":
            if i > start:
                out.append(CodeSlice(CodeCharKind.NORMAL, start, text[start:i]))
            end = _comment_end(text, i)
            out.append(CodeSlice(CodeCharKind.COMMENT, i, text[i:end]))
            start = i = end
            continue
        if ch == '"':
            i = _STRING_RE.match(text, i).end()
            continue
        if ch == "'":
            m = _CHAR_RE.match(text, i)
            i = m.end() if m else i + 1
            continue
        i += 1
    if start < n:
        out.append(CodeSlice(CodeCharKind.NORMAL, start, text[start:]))
    return out


def contains_comment(text: str) -> bool:
    return any(s.kind is CodeCharKind.COMMENT for s in comment_code_slices(text))


def count_newlines(text: str) -> int:
    return text.count("\n")


def is_skippable_filler(text: str) -> bool:
    """Whitespace and stray semicolons that can be dropped between items."""
    return all(c == ";" or c.isspace() for c in text)


def rewrite_comment(orig: str, shape: Shape, config: Config) -> str | None:
    """Re-indent (and optionally re-flow) a comment slice for `shape`.

    Returns None when the text cannot be rewritten; callers then emit it
    unchanged.
    """
    orig = orig.rstrip()
    if orig.startswith("/*"):
        if len(orig) < 4 or not orig.endswith("*/"):
            return None
        if config.normalize_comments:
            normalized = _block_to_line_comment(orig)
            if normalized is not None:
                return normalized
        return _light_rewrite(orig, shape, config)
    if not orig.startswith("//"):
        return None
    if config.wrap_comments:
        return _wrap_line_comments(orig, shape, config)
    return _light_rewrite(orig, shape, config)


def _light_rewrite(orig: str, shape: Shape, config: Config) -> str:
    lines: list[str] = []
    for line in orig.splitlines():
        stripped = line.lstrip()
        # keep one space before a leading `*` so it lines up with the `*` of `/*`
        if stripped.startswith("*") and len(stripped) < len(line):
            stripped = " " + stripped
        lines.append(stripped.rstrip())
    return _join_indented(lines, shape, config)


def _join_indented(lines: list[str], shape: Shape, config: Config) -> str:
    indent = shape.indent.to_string(config)
    head, *rest = lines
    return head + "".join(f"\n{indent}{line}" if line else "\n" for line in rest)


def _block_to_line_comment(orig: str) -> str | None:
    # doc comments and multi-line blocks keep their form
    if orig.startswith(("/**", "/*!")) or "\n" in orig:
        return None
    body = orig[2:-2].strip()
    return f"// {body}" if body else "//"


def _wrap_line_comments(orig: str, shape: Shape, config: Config) -> str | None:
    out: list[str] = []
    for line in orig.splitlines():
        m = _LINE_COMMENT_RE.match(line.strip())
        if m is None:
            return None
        prefix, body = m.group(1), m.group(2).rstrip()
        text = f"{prefix} {body}" if body else prefix
        if len(text) <= shape.width:
            out.append(text)
            continue
        room = shape.width - len(prefix) - 1
        if room <= 0:
            LOGGER.debug("no room to wrap comment %r at width %d", line, shape.width)
            return None
        wrapped = textwrap.wrap(body, width=room, break_long_words=False, break_on_hyphens=False)
        out.extend(f"{prefix} {w}" for w in wrapped)
    return _join_indented(out, shape, config)
