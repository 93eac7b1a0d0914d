from __future__ import annotations

from .api import FileFailure, FormatReport, FormatResult, format_file, format_files, format_source, parse_source
from .config import BraceStyle, Config, ControlBraceStyle, FileLines, NewlineStyle
from .errors import ConfigError, FormatInvariantError, IndentMismatchError, ParseError, SpanError
from .format import format_source_unit

__all__ = [
    "BraceStyle",
    "Config",
    "ConfigError",
    "ControlBraceStyle",
    "FileFailure",
    "FileLines",
    "FormatInvariantError",
    "FormatReport",
    "FormatResult",
    "IndentMismatchError",
    "NewlineStyle",
    "ParseError",
    "SpanError",
    "format_file",
    "format_files",
    "format_source",
    "format_source_unit",
    "parse_source",
]
