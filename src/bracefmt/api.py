from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .ast import SourceUnit
from .config import Config
from .errors import FormatInvariantError, ParseError
from .format import format_source_unit
from .lexer import tokenize
from .parser import Parser
from .source_map import SourceFile


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FormatResult:
    path: str
    original: str
    formatted: str

    @property
    def changed(self) -> bool:
        return self.original != self.formatted


@dataclass(frozen=True, slots=True)
class FileFailure:
    path: str
    error: ParseError | FormatInvariantError | UnicodeDecodeError


@dataclass(frozen=True, slots=True)
class FormatReport:
    results: tuple[FormatResult, ...] = ()
    failures: tuple[FileFailure, ...] = ()
    changed: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


def parse_source(src: str, *, file: str = "<memory>") -> SourceUnit:
    toks = tokenize(src, file=file)
    return Parser(toks, src, file=file).parse_unit()


def format_source(src: str, *, file: str = "<memory>", config: Config | None = None) -> str:
    """Format `src`; raises ParseError or FormatInvariantError."""
    config = config or Config()
    # the engine works on `\n`; the newline style restores the requested endings
    text = src.replace("\r\n", "\n")
    unit = parse_source(text, file=file)
    return format_source_unit(unit, SourceFile(file, text), config, raw_input_text=src)


def format_file(path: str | Path, config: Config | None = None) -> FormatResult:
    p = Path(path).expanduser().resolve()
    # newline="" keeps `\r\n` so the original line endings can be detected
    with p.open(encoding="utf-8", newline="") as f:
        src = f.read()
    return FormatResult(path=str(p), original=src, formatted=format_source(src, file=str(p), config=config))


def format_files(paths: Iterable[str | Path], config: Config | None = None) -> FormatReport:
    """Format every file; a file that fails is reported and the rest go on."""
    results: list[FormatResult] = []
    failures: list[FileFailure] = []
    for path in paths:
        try:
            res = format_file(path, config)
        except (ParseError, FormatInvariantError, UnicodeDecodeError) as e:
            LOGGER.warning("failed to format %s: %s", path, e)
            failures.append(FileFailure(path=str(path), error=e))
            continue
        results.append(res)
    return FormatReport(
        results=tuple(results),
        failures=tuple(failures),
        changed=tuple(r.path for r in results if r.changed),
    )
