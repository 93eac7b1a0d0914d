from __future__ import annotations

from dataclasses import dataclass

from . import ast as A
from .errors import ParseError
from .spans import Position, Span
from .tokens import CLOSE_DELIMS, OPEN_DELIMS, Token, TokenKind


_CLOSER: dict[TokenKind, TokenKind] = {
    TokenKind.LBRACE: TokenKind.RBRACE,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
    TokenKind.LPAREN: TokenKind.RPAREN,
}

# Words that may precede `fn`, `mod`, `impl` or `trait` in an item header.
_QUALIFIERS = frozenset({"async", "unsafe", "const", "extern", "default"})

# Expression statements that end at their closing brace without a `;`.
_BLOCK_LIKE = frozenset({"match", "unsafe", "async"})

_OPAQUE_ITEM_WORDS = frozenset({"struct", "enum", "union", "const", "static", "type"})

_ITEM_KINDS = frozenset({TokenKind.USE, TokenKind.FN, TokenKind.MOD, TokenKind.IMPL, TokenKind.TRAIT})


def join_span(first: Span, last: Span) -> Span:
    """Span from the start of `first` to the end of `last`."""
    return Span(file=first.file, start=first.start, end=last.end)


def _describe(tok: Token) -> str:
    if tok.kind is TokenKind.EOF:
        return "end of file"
    return f"`{tok.lexeme}`"


@dataclass(slots=True)
class Parser:
    tokens: list[Token]
    src: str
    file: str = "<memory>"
    i: int = 0

    # -- token plumbing -----------------------------------------------------

    def peek(self, n: int = 0) -> Token:
        j = min(self.i + n, len(self.tokens) - 1)
        return self.tokens[j]

    def at(self, kind: TokenKind) -> bool:
        return self.peek().kind is kind

    def bump(self) -> Token:
        tok = self.tokens[self.i]
        if tok.kind is not TokenKind.EOF:
            self.i += 1
        return tok

    def expect(self, kind: TokenKind, hint: str | None = None) -> Token:
        tok = self.peek()
        if tok.kind is not kind:
            raise self.error(tok, f"expected `{kind.value}`, found {_describe(tok)}", hint)
        return self.bump()

    def error(self, tok: Token, message: str, hint: str | None = None) -> ParseError:
        return ParseError(span=tok.span, message=message, hint=hint)

    def text(self, span: Span) -> str:
        return self.src[span.lo : span.hi]

    def _skip_group(self) -> Token:
        """Consume a balanced delimiter group; return its closing token."""
        stack: list[TokenKind] = []
        while True:
            tok = self.peek()
            if tok.kind is TokenKind.EOF:
                raise self.error(
                    tok,
                    f"expected `{stack[-1].value}`, found end of file",
                    hint="close the delimiter",
                )
            self.bump()
            if tok.kind in OPEN_DELIMS:
                stack.append(_CLOSER[tok.kind])
            elif tok.kind in CLOSE_DELIMS:
                expected = stack.pop()
                if tok.kind is not expected:
                    raise self.error(tok, f"expected `{expected.value}`, found {_describe(tok)}")
                if not stack:
                    return tok

    def _skip_until(self, stops: frozenset[TokenKind] | set[TokenKind]) -> Token | None:
        """Consume tokens (groups as a whole) up to a top-level token in `stops`.

        The stop token is not consumed. Returns the last consumed token.
        """
        last: Token | None = None
        while True:
            tok = self.peek()
            if tok.kind in stops:
                return last
            if tok.kind is TokenKind.EOF:
                wanted = " or ".join(sorted(f"`{k.value}`" for k in stops))
                raise self.error(tok, f"expected {wanted}, found end of file")
            if tok.kind in OPEN_DELIMS:
                last = self._skip_group()
                continue
            if tok.kind in CLOSE_DELIMS:
                raise self.error(tok, f"unexpected {_describe(tok)}", hint="remove the unmatched delimiter")
            last = self.bump()

    def _skip_qualifiers(self, j: int) -> int:
        toks = self.tokens
        while True:
            tok = toks[j]
            if tok.kind is TokenKind.PUB:
                j += 1
                if toks[j].kind is TokenKind.LPAREN:
                    while toks[j].kind not in (TokenKind.RPAREN, TokenKind.EOF):
                        j += 1
                    j = min(j + 1, len(toks) - 1)
                continue
            if tok.kind is TokenKind.IDENT and tok.lexeme in _QUALIFIERS:
                j += 1
                if tok.lexeme == "extern" and toks[j].kind is TokenKind.STRING:
                    j += 1
                continue
            return min(j, len(toks) - 1)

    # -- attributes ---------------------------------------------------------

    def _parse_attribute(self, *, inner: bool) -> A.Attribute:
        pound = self.expect(TokenKind.POUND)
        if inner:
            self.expect(TokenKind.BANG)
        if not self.at(TokenKind.LBRACKET):
            raise self.error(self.peek(), f"expected `[`, found {_describe(self.peek())}")
        close = self._skip_group()
        return A.Attribute(span=join_span(pound.span, close.span), inner=inner)

    def _parse_inner_attrs(self) -> tuple[A.Attribute, ...]:
        out: list[A.Attribute] = []
        while (
            self.at(TokenKind.POUND)
            and self.peek(1).kind is TokenKind.BANG
            and self.peek(2).kind is TokenKind.LBRACKET
        ):
            out.append(self._parse_attribute(inner=True))
        return tuple(out)

    def _parse_outer_attrs(self) -> tuple[A.Attribute, ...]:
        out: list[A.Attribute] = []
        while self.at(TokenKind.POUND) and self.peek(1).kind is TokenKind.LBRACKET:
            out.append(self._parse_attribute(inner=False))
        return tuple(out)

    # -- items --------------------------------------------------------------

    def parse_unit(self) -> A.SourceUnit:
        inner = self._parse_inner_attrs()
        items: list[A.Item] = []
        while not self.at(TokenKind.EOF):
            if self.at(TokenKind.SEMI):
                self.bump()
                continue
            items.append(self._parse_item())
        eof = self.peek()
        start = Position(offset=0, line=1, column=1)
        return A.SourceUnit(
            span=Span(file=self.file, start=start, end=eof.span.end),
            inner_attrs=inner,
            items=tuple(items),
        )

    def _parse_item(self) -> A.Item:
        return self._parse_item_with(self._parse_outer_attrs())

    def _parse_item_with(self, attrs: tuple[A.Attribute, ...]) -> A.Item:
        tok = self.peek()
        if tok.kind is TokenKind.RBRACE:
            raise self.error(tok, "unexpected `}`", hint="remove the unmatched closing brace")
        kind = self.tokens[self._skip_qualifiers(self.i)].kind
        if kind is TokenKind.USE:
            return self._parse_use(attrs)
        if kind is TokenKind.FN:
            return self._parse_fn(attrs)
        if kind in (TokenKind.MOD, TokenKind.IMPL, TokenKind.TRAIT):
            j = self._skip_qualifiers(self.i)
            # `mod foo;` has no body
            if not (kind is TokenKind.MOD and self.tokens[min(j + 2, len(self.tokens) - 1)].kind is TokenKind.SEMI):
                return self._parse_module(attrs)
        return self._parse_opaque_item(attrs)

    def _parse_use(self, attrs: tuple[A.Attribute, ...]) -> A.UseDecl:
        start = self.peek()
        vis: str | None = None
        if not self.at(TokenKind.USE):
            self._skip_until({TokenKind.USE})
            vis = self.src[start.span.lo : self.peek().span.lo].strip()
        use = self.expect(TokenKind.USE)
        last = self._skip_until({TokenKind.SEMI, TokenKind.RBRACE})
        if last is None:
            raise self.error(self.peek(), f"expected path, found {_describe(self.peek())}")
        semi = self.expect(TokenKind.SEMI, hint="terminate the import with `;`")
        return A.UseDecl(
            span=join_span(start.span, semi.span),
            path=self.src[use.span.hi : semi.span.lo].strip(),
            vis=vis,
            attrs=attrs,
        )

    def _parse_fn(self, attrs: tuple[A.Attribute, ...]) -> A.FnDecl:
        start = self.peek()
        last = self._skip_until({TokenKind.LBRACE, TokenKind.SEMI})
        header = join_span(start.span, (last or start).span)
        if self.at(TokenKind.SEMI):
            semi = self.bump()
            return A.FnDecl(span=join_span(start.span, semi.span), header=header, attrs=attrs)
        body = self._parse_block()
        return A.FnDecl(span=join_span(start.span, body.span), header=header, body=body, attrs=attrs)

    def _parse_module(self, attrs: tuple[A.Attribute, ...]) -> A.Module:
        start = self.peek()
        kind = self.tokens[self._skip_qualifiers(self.i)].kind.value
        last = self._skip_until({TokenKind.LBRACE})
        header = join_span(start.span, (last or start).span)
        body = self._parse_item_body()
        return A.Module(
            span=join_span(start.span, body.span),
            kind=kind,
            header=header,
            body=body,
            attrs=attrs,
        )

    def _parse_item_body(self) -> A.ItemBody:
        lbrace = self.expect(TokenKind.LBRACE)
        inner = self._parse_inner_attrs()
        items: list[A.Item] = []
        while True:
            tok = self.peek()
            if tok.kind is TokenKind.RBRACE:
                rbrace = self.bump()
                break
            if tok.kind is TokenKind.EOF:
                raise self.error(
                    tok,
                    "expected `}`, found end of file",
                    hint=f"close the block opened at line {lbrace.span.start.line}",
                )
            if tok.kind is TokenKind.SEMI:
                self.bump()
                continue
            items.append(self._parse_item())
        return A.ItemBody(span=join_span(lbrace.span, rbrace.span), inner_attrs=inner, items=tuple(items))

    def _parse_opaque_item(self, attrs: tuple[A.Attribute, ...]) -> A.OpaqueItem:
        start = self.peek()
        stops = {TokenKind.SEMI, TokenKind.LBRACE, TokenKind.RBRACE}
        while True:
            self._skip_until(stops)
            tok = self.peek()
            if tok.kind is TokenKind.SEMI:
                end = self.bump()
                break
            if tok.kind is TokenKind.LBRACE:
                end = self._skip_group()
                # `struct S { .. }` ends at its brace; `const X: S = S { .. };` goes on
                nxt = self.peek()
                if nxt.kind is not TokenKind.EOF and nxt.span.start.line == end.span.end.line:
                    continue
                break
            raise self.error(tok, f"expected `;`, found {_describe(tok)}", hint="terminate the item with `;`")
        return A.OpaqueItem(span=join_span(start.span, end.span), attrs=attrs)

    # -- statements ---------------------------------------------------------

    def _parse_block(self) -> A.Block:
        lbrace = self.expect(TokenKind.LBRACE)
        inner = self._parse_inner_attrs()
        stmts: list[A.Stmt] = []
        while True:
            tok = self.peek()
            if tok.kind is TokenKind.RBRACE:
                rbrace = self.bump()
                break
            if tok.kind is TokenKind.EOF:
                raise self.error(
                    tok,
                    "expected `}`, found end of file",
                    hint=f"close the block opened at line {lbrace.span.start.line}",
                )
            if tok.kind is TokenKind.SEMI:
                self.bump()
                continue
            stmts.append(self._parse_stmt())
        return A.Block(span=join_span(lbrace.span, rbrace.span), inner_attrs=inner, stmts=tuple(stmts))

    def _parse_stmt(self) -> A.Stmt:
        attrs = self._parse_outer_attrs()
        start = self.peek()
        if start.kind is TokenKind.LET:
            self._skip_until({TokenKind.SEMI, TokenKind.RBRACE})
            semi = self.expect(TokenKind.SEMI, hint="terminate the statement with `;`")
            return A.Local(span=join_span(start.span, semi.span), attrs=attrs)

        if self.tokens[self._skip_qualifiers(self.i)].kind in _ITEM_KINDS:
            item = self._parse_item_with(attrs)
            return A.ItemStmt(span=item.span, item=item)
        if start.kind is TokenKind.IDENT and start.lexeme in _OPAQUE_ITEM_WORDS:
            item = self._parse_opaque_item(attrs)
            return A.ItemStmt(span=item.span, item=item)

        expr = self._parse_expr()
        end = expr.span
        has_semi = self.at(TokenKind.SEMI)
        if has_semi:
            end = self.bump().span
        return A.ExprStmt(span=join_span(start.span, end), expr=expr, has_semi=has_semi, attrs=attrs)

    def _parse_expr(self) -> A.Expr:
        tok = self.peek()
        if tok.kind is TokenKind.IF:
            return self._parse_if()
        if tok.kind in (TokenKind.WHILE, TokenKind.FOR, TokenKind.LOOP):
            last = self._skip_until({TokenKind.LBRACE})
            header = join_span(tok.span, (last or tok).span)
            body = self._parse_block()
            return A.LoopExpr(span=join_span(tok.span, body.span), header=header, body=body)
        if tok.kind is TokenKind.LBRACE:
            block = self._parse_block()
            return A.BlockExpr(span=block.span, block=block)
        if tok.kind in (TokenKind.RETURN, TokenKind.BREAK, TokenKind.CONTINUE):
            last = self._skip_until({TokenKind.SEMI, TokenKind.RBRACE})
            return A.JumpExpr(span=join_span(tok.span, (last or tok).span), keyword=tok.kind.value)

        if tok.kind is TokenKind.IDENT and tok.lexeme in _BLOCK_LIKE:
            last = self._skip_until({TokenKind.LBRACE, TokenKind.SEMI, TokenKind.RBRACE})
            if self.at(TokenKind.LBRACE):
                last = self._skip_group()
            return A.OpaqueExpr(span=join_span(tok.span, (last or tok).span))

        last = self._skip_until({TokenKind.SEMI, TokenKind.RBRACE})
        if last is None:
            raise self.error(tok, f"expected expression, found {_describe(tok)}")
        return A.OpaqueExpr(span=join_span(tok.span, last.span))

    def _parse_if(self) -> A.IfExpr:
        kw = self.expect(TokenKind.IF)
        cond_start = self.peek()
        last = self._skip_until({TokenKind.LBRACE})
        if last is None:
            raise self.error(cond_start, "expected condition, found `{`")
        then = self._parse_block()
        else_: A.IfExpr | A.Block | None = None
        end = then.span
        if self.at(TokenKind.ELSE):
            self.bump()
            if self.at(TokenKind.IF):
                else_ = self._parse_if()
            else:
                else_ = self._parse_block()
            end = else_.span
        return A.IfExpr(
            span=join_span(kw.span, end),
            cond=join_span(cond_start.span, last.span),
            then=then,
            else_=else_,
        )
