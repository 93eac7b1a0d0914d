from __future__ import annotations

import logging
from pathlib import Path

import pytest

from bracefmt import (
    Config,
    IndentMismatchError,
    NewlineStyle,
    ParseError,
    format_file,
    format_files,
    format_source,
)
from bracefmt.source_map import SourceFile
from bracefmt.visitor import FmtVisitor


def test_top_level_layout() -> None:
    src = "// header\n\n\n#![allow(x)]\nuse  std :: { io ,fmt };\nuse a::b;\nfn f() {}\n\n\n\nfn g() {}  // end"
    assert format_source(src) == (
        "// header\n\n#![allow(x)]\nuse a::b;\nuse std::{io, fmt};\nfn f() {}\n\nfn g() {} // end\n"
    )


def test_comment_splits_use_groups() -> None:
    src = "use b;\n// keep\nuse a;\n"
    assert format_source(src) == src


def test_attributes_go_on_their_own_line() -> None:
    assert format_source("#[inline] fn f() {}") == "#[inline]\nfn f() {}\n"


def test_empty_source_formats_to_nothing() -> None:
    assert format_source("") == ""
    assert format_source("\n\n  \n") == ""


def test_windows_line_endings_are_kept() -> None:
    src = "fn f() {\r\n    x;\r\n}\r\n"
    assert format_source(src) == src
    assert format_source(src, config=Config(newline_style=NewlineStyle.UNIX)) == "fn f() {\n    x;\n}\n"


def test_format_file(tmp_path: Path) -> None:
    p = tmp_path / "a.bf"
    p.write_text("fn f(){x;}", encoding="utf-8")
    res = format_file(p)
    assert res.path == str(p.resolve())
    assert res.formatted == "fn f() {\n    x;\n}\n"
    assert res.changed


def test_format_files_reports_failures_and_keeps_going(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    good = tmp_path / "good.bf"
    good.write_text("fn f() {}\n", encoding="utf-8")
    messy = tmp_path / "messy.bf"
    messy.write_text("fn  g()  {  }", encoding="utf-8")
    bad = tmp_path / "bad.bf"
    bad.write_text("fn f() {\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="bracefmt"):
        report = format_files([good, bad, messy])

    assert [Path(r.path).name for r in report.results] == ["good.bf", "messy.bf"]
    assert report.changed == (str(messy.resolve()),)
    assert not report.ok
    (failure,) = report.failures
    assert failure.path == str(bad)
    assert isinstance(failure.error, ParseError)
    assert any("failed to format" in r.getMessage() and r.levelno == logging.WARNING for r in caplog.records)


def test_undecodable_file_is_a_failure(tmp_path: Path) -> None:
    bad = tmp_path / "latin.bf"
    bad.write_bytes(b"fn f() { \xff }\n")
    good = tmp_path / "good.bf"
    good.write_text("fn f() {}\n", encoding="utf-8")

    report = format_files([bad, good])

    assert [Path(r.path).name for r in report.results] == ["good.bf"]
    (failure,) = report.failures
    assert failure.path == str(bad)
    assert isinstance(failure.error, UnicodeDecodeError)


def test_indent_stack_discipline() -> None:
    visitor = FmtVisitor(SourceFile("t", ""), Config())
    with pytest.raises(IndentMismatchError):
        visitor.pop_block_indent()
    with pytest.raises(IndentMismatchError):
        with visitor.balanced_indent():
            visitor.push_block_indent()
