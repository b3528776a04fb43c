"""Syntax kinds."""

from typstfmt.syntax.kind import KEYWORDS, SyntaxKind

__all__ = [
    "KEYWORDS",
    "SyntaxKind",
]
