from __future__ import annotations

from dataclasses import dataclass

from .spans import Span


@dataclass(frozen=True, slots=True)
class Node:
    span: Span


@dataclass(frozen=True, slots=True)
class Attribute(Node):
    """`#![...]` (inner) or `#[...]` (outer); the span covers the whole attribute."""

    inner: bool


# ---------------------------------------------------------------------------
# Items (module entries)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UseDecl(Node):
    path: str  # raw source text between `use` and `;`
    vis: str | None = None  # raw visibility text, e.g. "pub" or "pub(crate)"
    attrs: tuple[Attribute, ...] = ()


@dataclass(frozen=True, slots=True)
class FnDecl(Node):
    header: Span  # `fn name(...) -> T where ...`, up to the body
    body: "Block | None" = None  # None for `fn f();`
    attrs: tuple[Attribute, ...] = ()


@dataclass(frozen=True, slots=True)
class ItemBody(Node):
    """Braced list of items of a `mod`, `impl` or `trait`; span includes braces."""

    inner_attrs: tuple[Attribute, ...] = ()
    items: tuple["Item", ...] = ()


@dataclass(frozen=True, slots=True)
class Module(Node):
    kind: str  # "mod" | "impl" | "trait"
    header: Span
    body: ItemBody
    attrs: tuple[Attribute, ...] = ()


@dataclass(frozen=True, slots=True)
class OpaqueItem(Node):
    """Any other item (`struct`, `const`, `type`, `mod foo;`...), kept as written."""

    attrs: tuple[Attribute, ...] = ()


Item = UseDecl | FnDecl | Module | OpaqueItem


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OpaqueExpr(Node):
    pass


@dataclass(frozen=True, slots=True)
class JumpExpr(Node):
    keyword: str  # "return" | "break" | "continue"


@dataclass(frozen=True, slots=True)
class BlockExpr(Node):
    block: "Block"


@dataclass(frozen=True, slots=True)
class IfExpr(Node):
    cond: Span
    then: "Block"
    else_: "IfExpr | Block | None" = None


@dataclass(frozen=True, slots=True)
class LoopExpr(Node):
    header: Span  # `while cond`, `for x in xs`, `loop`
    body: "Block"


Expr = OpaqueExpr | JumpExpr | BlockExpr | IfExpr | LoopExpr


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Local(Node):
    """`let ...;`; the span includes the semicolon."""

    attrs: tuple[Attribute, ...] = ()


@dataclass(frozen=True, slots=True)
class ExprStmt(Node):
    expr: Expr
    has_semi: bool = False
    attrs: tuple[Attribute, ...] = ()


@dataclass(frozen=True, slots=True)
class ItemStmt(Node):
    item: Item


Stmt = Local | ExprStmt | ItemStmt


@dataclass(frozen=True, slots=True)
class Block(Node):
    """A braced statement list; the span includes both braces."""

    inner_attrs: tuple[Attribute, ...] = ()
    stmts: tuple[Stmt, ...] = ()


@dataclass(frozen=True, slots=True)
class SourceUnit(Node):
    inner_attrs: tuple[Attribute, ...] = ()
    items: tuple[Item, ...] = ()


def outer_attrs(node: Item | Stmt) -> tuple[Attribute, ...]:
    if isinstance(node, ItemStmt):
        return outer_attrs(node.item)
    return node.attrs


def full_lo(node: Item | Stmt) -> int:
    """Start of `node` including its outer attributes."""
    attrs = outer_attrs(node)
    return attrs[0].span.lo if attrs else node.span.lo
