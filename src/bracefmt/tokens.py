from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


class TokenKind(str, Enum):
    # Identifiers and literals
    IDENT = "IDENT"
    NUMBER = "NUMBER"
    STRING = "STRING"
    CHAR = "CHAR"

    # Structural punctuation
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    SEMI = ";"
    COMMA = ","
    POUND = "#"
    BANG = "!"
    # Any other single operator character
    PUNCT = "PUNCT"

    # Keywords
    FN = "fn"
    MOD = "mod"
    USE = "use"
    PUB = "pub"
    LET = "let"
    IF = "if"
    ELSE = "else"
    WHILE = "while"
    FOR = "for"
    LOOP = "loop"
    RETURN = "return"
    BREAK = "break"
    CONTINUE = "continue"
    IMPL = "impl"
    TRAIT = "trait"

    EOF = "EOF"


KEYWORDS: dict[str, TokenKind] = {
    k.value: k
    for k in (
        TokenKind.FN,
        TokenKind.MOD,
        TokenKind.USE,
        TokenKind.PUB,
        TokenKind.LET,
        TokenKind.IF,
        TokenKind.ELSE,
        TokenKind.WHILE,
        TokenKind.FOR,
        TokenKind.LOOP,
        TokenKind.RETURN,
        TokenKind.BREAK,
        TokenKind.CONTINUE,
        TokenKind.IMPL,
        TokenKind.TRAIT,
    )
}

OPEN_DELIMS = frozenset({TokenKind.LBRACE, TokenKind.LBRACKET, TokenKind.LPAREN})
CLOSE_DELIMS = frozenset({TokenKind.RBRACE, TokenKind.RBRACKET, TokenKind.RPAREN})


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    lexeme: str
    span: Span

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.lexeme!r}, {self.span.format()})"
