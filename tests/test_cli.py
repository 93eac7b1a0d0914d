from __future__ import annotations

import io
from pathlib import Path

import pytest

from bracefmt.cli import main


def _write(tmp_path: Path, name: str, text: str) -> Path:
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


def test_prints_formatted_text(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = _write(tmp_path, "a.bf", "fn f(){x;}")
    assert main([str(p)]) == 0
    assert capsys.readouterr().out == "fn f() {\n    x;\n}\n"
    assert p.read_text(encoding="utf-8") == "fn f(){x;}"


def test_check_lists_changed_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    clean = _write(tmp_path, "clean.bf", "fn f() {}\n")
    dirty = _write(tmp_path, "dirty.bf", "fn f(){}")
    assert main(["--check", str(clean)]) == 0
    assert main(["--check", str(clean), str(dirty)]) == 1
    assert capsys.readouterr().out.splitlines() == [str(dirty.resolve())]


def test_write_rewrites_in_place(tmp_path: Path) -> None:
    p = _write(tmp_path, "a.bf", "use b;\nuse a;\n")
    assert main(["--write", str(p)]) == 0
    assert p.read_text(encoding="utf-8") == "use a;\nuse b;\n"


def test_config_overrides(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = _write(tmp_path, "a.bf", "use b;\nuse a;\n")
    assert main(["--config", "reorder_imports=false", str(p)]) == 0
    assert capsys.readouterr().out == "use b;\nuse a;\n"


def test_bad_config_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config", "max_width"]) == 2
    assert main(["--config", "nope=1"]) == 2
    assert "invalid config option 'nope'" in capsys.readouterr().err


def test_failed_file_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    good = _write(tmp_path, "good.bf", "fn f() {}\n")
    bad = _write(tmp_path, "bad.bf", "fn f() {")
    assert main([str(bad), str(good)]) == 1
    captured = capsys.readouterr()
    assert captured.out == "fn f() {}\n"
    assert "error:" in captured.err
    assert "expected `}`" in captured.err


def _stdin(data: bytes) -> io.TextIOWrapper:
    return io.TextIOWrapper(io.BytesIO(data), encoding="utf-8")


def test_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", _stdin(b"fn  f() {}"))
    assert main([]) == 0
    assert capsys.readouterr().out == "fn f() {}\n"


def test_stdin_keeps_windows_line_endings(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", _stdin(b"fn  f() {\r\n    x;\r\n}\r\n"))
    assert main([]) == 0
    assert capsys.readouterr().out == "fn f() {\r\n    x;\r\n}\r\n"
