from __future__ import annotations

import re
from collections.abc import Sequence

from . import ast as A
from .comment import contains_comment, count_newlines
from .source_map import SourceFile
from .visitable import ModuleEntry, Visitable


_PATH_SEP_RE = re.compile(r"\s*::\s*")
_OPEN_LIST_RE = re.compile(r"\{\s*")
_CLOSE_LIST_RE = re.compile(r"\s*,?\s*\}")
_LIST_SEP_RE = re.compile(r"\s*,\s*")


def leading_use_run(items: Sequence[Visitable]) -> int:
    """Number of `use` declarations at the start of `items`."""
    n = 0
    for it in items:
        if not it.is_use_item():
            break
        n += 1
    return n


def normalize_use_path(path: str) -> str:
    """`std :: { io , fmt , }` -> `std::{io, fmt}`."""
    path = " ".join(path.split())
    path = _PATH_SEP_RE.sub("::", path)
    path = _OPEN_LIST_RE.sub("{", path)
    path = _CLOSE_LIST_RE.sub("}", path)
    return _LIST_SEP_RE.sub(", ", path)


def rewrite_use(use: A.UseDecl, source: SourceFile) -> str:
    text = source.snippet(use.span)
    if contains_comment(text):
        return text.strip()
    head = f"{use.vis} use" if use.vis else "use"
    return f"{head} {normalize_use_path(use.path)};"


def use_sort_key(use: A.UseDecl) -> tuple[tuple[str, ...], str]:
    return tuple(normalize_use_path(use.path).split("::")), use.vis or ""


def segment_use_run(source: SourceFile, run: Sequence[ModuleEntry]) -> list[list[ModuleEntry]]:
    """Split a run of `use` entries into independently sortable segments.

    A comment or blank line between two neighbours starts a new segment. An
    entry with outer attributes is always a segment of its own.
    """
    segments: list[list[ModuleEntry]] = []
    prev: ModuleEntry | None = None
    for entry in run:
        attrs = A.outer_attrs(entry.node)
        if prev is None or attrs or A.outer_attrs(prev.node):
            segments.append([entry])
        else:
            gap = source.text_between(prev.hi, entry.lo)
            if contains_comment(gap) or count_newlines(gap) >= 2:
                segments.append([entry])
            else:
                segments[-1].append(entry)
        prev = entry
    return segments
