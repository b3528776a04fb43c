"""Concrete syntax tree."""

from typstfmt.cst.green import GreenElement, GreenNode, GreenToken, TreeBuilder
from typstfmt.cst.red import (
    SyntaxElement,
    SyntaxNode,
    SyntaxToken,
    dump_tree,
    from_green,
)

__all__ = [
    "GreenElement",
    "GreenNode",
    "GreenToken",
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "TreeBuilder",
    "dump_tree",
    "from_green",
]
