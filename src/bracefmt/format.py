from __future__ import annotations

import logging

from . import ast as A
from .config import Config
from .source_map import SourceFile
from .visitable import ModuleEntry
from .visitor import FmtVisitor


LOGGER = logging.getLogger(__name__)


def format_source_unit(
    unit: A.SourceUnit,
    source: SourceFile,
    config: Config,
    *,
    raw_input_text: str | None = None,
) -> str:
    """Format a parsed file. The result ends in exactly one newline unless empty.

    `raw_input_text` is the file as read, before line endings were unified;
    `NewlineStyle.AUTO` detects the style from it.
    """
    visitor = FmtVisitor(source, config)
    with visitor.balanced_indent():
        if unit.inner_attrs:
            visitor.visit_attrs(unit.inner_attrs)
        visitor.visit_items_with_reordering(tuple(ModuleEntry(it) for it in unit.items))
        visitor.format_missing(len(source))

    text = visitor.buffer.getvalue().rstrip()
    if text:
        text += "\n"
    LOGGER.debug("formatted %s: %d -> %d chars", source.name, len(source), len(text))
    raw = source.text if raw_input_text is None else raw_input_text
    return config.newline_style.apply(text, raw)
