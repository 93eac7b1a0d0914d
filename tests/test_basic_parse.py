from __future__ import annotations

import pytest

from bracefmt import ParseError, SpanError, parse_source
from bracefmt import ast as A
from bracefmt.lexer import tokenize
from bracefmt.source_map import SourceFile
from bracefmt.tokens import TokenKind


def test_unclosed_block_is_error() -> None:
    with pytest.raises(ParseError) as e:
        parse_source("fn f() {\n    x;\n", file="x.bf")
    assert "expected `}`, found end of file" in str(e.value)
    assert "x.bf:3:1" in str(e.value)
    assert "hint: close the block opened at line 1" in str(e.value)


def test_unmatched_closing_brace_is_error() -> None:
    with pytest.raises(ParseError) as e:
        parse_source("fn f() {}\n}", file="x.bf")
    assert "unexpected `}`" in str(e.value)


def test_unterminated_block_comment_is_error() -> None:
    with pytest.raises(ParseError) as e:
        tokenize("fn f() {} /* open", file="x.bf")
    assert "unterminated block comment" in str(e.value)
    assert e.value.hint == "add closing */"


def test_newline_in_string_is_error() -> None:
    with pytest.raises(ParseError):
        tokenize('let s = "a\nb";')


def test_tokens_skip_comments_and_keep_spans() -> None:
    toks = tokenize("use a; // c\nfn")
    assert [t.kind for t in toks] == [TokenKind.USE, TokenKind.IDENT, TokenKind.SEMI, TokenKind.FN, TokenKind.EOF]
    assert toks[3].span.start.line == 2
    assert toks[3].span.start.column == 1


def test_parse_items_and_statements() -> None:
    src = """#![allow(x)]
pub use a :: b;

#[test]
fn f(x: i32) -> bool {
    let y = x;
    if y { return true } else if z { g(); } else { h() }
    while y {}
    struct S { a: u8 }
    match y { _ => {} }
    false
}

mod m {
    fn g();
    const C: u8 = 1;
}
"""
    unit = parse_source(src)
    assert len(unit.inner_attrs) == 1
    use, fn, mod = unit.items
    assert isinstance(use, A.UseDecl)
    assert use.vis == "pub"
    assert use.path == "a :: b"

    assert isinstance(fn, A.FnDecl)
    assert len(fn.attrs) == 1
    # outer attributes are not part of the item span
    assert src[fn.span.lo : fn.span.lo + 2] == "fn"
    assert A.full_lo(fn) == src.index("#[test]")

    local, if_stmt, loop, struct, match, tail = fn.body.stmts
    assert isinstance(local, A.Local)
    assert isinstance(if_stmt.expr, A.IfExpr)
    assert isinstance(if_stmt.expr.else_, A.IfExpr)
    assert isinstance(if_stmt.expr.else_.else_, A.Block)
    assert isinstance(loop.expr, A.LoopExpr)
    assert isinstance(struct, A.ItemStmt)
    assert isinstance(struct.item, A.OpaqueItem)
    assert isinstance(match.expr, A.OpaqueExpr)
    assert not match.has_semi
    assert isinstance(tail.expr, A.OpaqueExpr)

    assert isinstance(mod, A.Module)
    assert mod.kind == "mod"
    decl, const = mod.body.items
    assert isinstance(decl, A.FnDecl) and decl.body is None
    assert isinstance(const, A.OpaqueItem)


def test_jump_without_semicolon_ends_at_brace() -> None:
    unit = parse_source("fn f() { return 1 }")
    (stmt,) = unit.items[0].body.stmts
    assert isinstance(stmt.expr, A.JumpExpr)
    assert stmt.expr.keyword == "return"
    assert not stmt.has_semi


def test_span_outside_source_is_invariant_error() -> None:
    source = SourceFile("x.bf", "abc")
    with pytest.raises(SpanError):
        source.text_between(2, 1)
    with pytest.raises(SpanError):
        source.text_between(0, 10)
    assert source.line_range(0, 3).lo == 1
