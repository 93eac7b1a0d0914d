"""The two kinds of entries a block can hold.

A block is either a statement list (function bodies, control flow arms) or a
list of module entries (`mod`, `impl` and `trait` bodies). Both expose the
same three capabilities the block visitor needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from . import ast as A

if TYPE_CHECKING:
    from .config import Config


@dataclass(frozen=True, slots=True)
class Statement:
    node: A.Stmt

    @property
    def lo(self) -> int:
        return A.full_lo(self.node)

    @property
    def hi(self) -> int:
        return self.node.span.hi

    def requires_semicolon(self, config: Config) -> bool:
        """A trailing `return`/`break`/`continue` without `;` gets one."""
        node = self.node
        return (
            isinstance(node, A.ExprStmt)
            and not node.has_semi
            and isinstance(node.expr, A.JumpExpr)
            and config.trailing_semicolon
        )

    def to_item(self) -> A.Item | None:
        if isinstance(self.node, A.ItemStmt):
            return self.node.item
        return None

    def is_use_item(self) -> bool:
        return isinstance(self.to_item(), A.UseDecl)


@dataclass(frozen=True, slots=True)
class ModuleEntry:
    node: A.Item

    @property
    def lo(self) -> int:
        return A.full_lo(self.node)

    @property
    def hi(self) -> int:
        return self.node.span.hi

    def requires_semicolon(self, config: Config) -> bool:
        return False

    def to_item(self) -> A.Item:
        return self.node

    def is_use_item(self) -> bool:
        return isinstance(self.node, A.UseDecl)


Visitable = Statement | ModuleEntry
