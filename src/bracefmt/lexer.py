from __future__ import annotations

import re
from dataclasses import dataclass, field

from .errors import ParseError
from .spans import Position, Span
from .tokens import KEYWORDS, Token, TokenKind


_WS_RE = re.compile(r"[ \t\r\n]+")
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
# 1, 1_000, 0xff, 2u8, 1.5, 1.5f32, 1e10; `0..10` stays a range
_NUMBER_RE = re.compile(r"[0-9][A-Za-z0-9_]*(?:\.[0-9][A-Za-z0-9_]*)?")
_CHAR_RE = re.compile(r"'(?:\\.[^'\n]*|[^\\'\n])'")
# an escape may not swallow the newline that ends an unterminated literal
_STRING_BODY_RE = re.compile(r'(?:\\[^\n]|[^"\\\n])*')

_SINGLE: dict[str, TokenKind] = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ";": TokenKind.SEMI,
    ",": TokenKind.COMMA,
    "#": TokenKind.POUND,
    "!": TokenKind.BANG,
}
_PUNCT = frozenset(".=:<>+-*/&|^%?@~$'")


@dataclass(slots=True)
class _Lexer:
    file: str
    src: str
    i: int = 0
    line: int = 1
    line_start: int = 0
    tokens: list[Token] = field(default_factory=list)

    def pos(self) -> Position:
        return Position(offset=self.i, line=self.line, column=self.i - self.line_start + 1)

    def move_to(self, j: int) -> None:
        """Advance to offset `j`, keeping line bookkeeping in step."""
        nl = self.src.rfind("\n", self.i, j)
        if nl != -1:
            self.line += self.src.count("\n", self.i, j)
            self.line_start = nl + 1
        self.i = j

    def error(self, start: Position, message: str, hint: str | None = None) -> ParseError:
        end = self.pos()
        if end.offset < start.offset:
            end = start
        return ParseError(span=Span(self.file, start, end), message=message, hint=hint)

    def emit(self, kind: TokenKind, start: Position) -> None:
        end = self.pos()
        self.tokens.append(Token(kind, self.src[start.offset : end.offset], Span(self.file, start, end)))

    def skip_trivia(self) -> None:
        """Skip whitespace and comments."""
        src = self.src
        while True:
            m = _WS_RE.match(src, self.i) or _LINE_COMMENT_RE.match(src, self.i)
            if m is not None:
                self.move_to(m.end())
                continue
            if not src.startswith("/*", self.i):
                return
            start = self.pos()
            close = src.find("*/", self.i + 2)
            if close == -1:
                self.move_to(len(src))
                raise self.error(start, "unterminated block comment", hint="add closing */")
            self.move_to(close + 2)

    def string(self, start: Position) -> None:
        body = _STRING_BODY_RE.match(self.src, self.i + 1)
        self.move_to(body.end())
        if not self.src.startswith('"', self.i):
            raise self.error(start, "unterminated string literal", hint="close the quote")
        self.move_to(self.i + 1)
        self.emit(TokenKind.STRING, start)

    def next_token(self) -> None:
        src = self.src
        ch = src[self.i]
        start = self.pos()

        if ch == '"':
            self.string(start)
            return

        # a quote that does not start a char literal is a lifetime/label marker
        for kind, pattern in ((TokenKind.CHAR, _CHAR_RE), (TokenKind.NUMBER, _NUMBER_RE)):
            m = pattern.match(src, self.i)
            if m:
                self.move_to(m.end())
                self.emit(kind, start)
                return

        m = _IDENT_RE.match(src, self.i)
        if m:
            self.move_to(m.end())
            self.emit(KEYWORDS.get(m.group(0), TokenKind.IDENT), start)
            return

        kind = _SINGLE.get(ch)
        if kind is None and ch in _PUNCT:
            kind = TokenKind.PUNCT
        if kind is None:
            raise self.error(
                start,
                f"unexpected character {ch!r}",
                hint="remove the character or replace it with valid syntax",
            )
        self.move_to(self.i + 1)
        self.emit(kind, start)


def tokenize(src: str, *, file: str = "<memory>") -> list[Token]:
    """Split `src` into tokens, dropping whitespace and comments; ends with EOF."""
    lx = _Lexer(file=file, src=src)
    while True:
        lx.skip_trivia()
        if lx.i >= len(src):
            break
        lx.next_token()
    eof = lx.pos()
    lx.tokens.append(Token(TokenKind.EOF, "", Span(file, eof, eof)))
    return lx.tokens
