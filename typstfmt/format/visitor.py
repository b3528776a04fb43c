"""Post-order traversal that renders a syntax tree back to text."""

from __future__ import annotations

from collections.abc import Sequence

from typstfmt.cst import SyntaxElement, SyntaxNode, SyntaxToken
from typstfmt.format.args import format_args
from typstfmt.format.context import FormatContext
from typstfmt.format.options import FormatOptions
from typstfmt.lexer.lexer import NEWLINE_CHARS
from typstfmt.syntax import SyntaxKind


def format_tree(root: SyntaxNode, options: FormatOptions) -> str:
    """Render ``root`` with a fresh context."""
    return visit(root, FormatContext.from_options(options))


def visit(element: SyntaxElement, ctx: FormatContext) -> str:
    children: list[str] = []
    if isinstance(element, SyntaxNode):
        for child in element.children:
            children.append(visit(child, ctx))
            ctx.pushed_raw()

    match element:
        case SyntaxNode(kind=SyntaxKind.ARGS):
            return format_args(element, children, ctx)
        case SyntaxToken(kind=SyntaxKind.SPACE):
            return format_space(element, ctx)
        case _:
            return format_default(element, children, ctx)


def format_space(token: SyntaxToken, ctx: FormatContext) -> str:
    """One space, or line breaks that keep the next line's indentation.

    Line breaks end list items and code statements, so they are never joined.
    Runs of them collapse to one blank line like a paragraph break.
    """
    text = token.text
    lines = text.splitlines(keepends=True)
    breaks = sum(1 for line in lines if line[-1] in NEWLINE_CHARS)
    if breaks == 0:
        return " "
    indentation = "" if text[-1] in NEWLINE_CHARS else lines[-1]
    return "".join(ctx.process("\n") for _ in range(breaks)) + indentation


def format_default(element: SyntaxElement, children: Sequence[str], ctx: FormatContext) -> str:
    if element.kind == SyntaxKind.PARBREAK:
        return "".join(ctx.process("\n") for _ in element.text.splitlines())

    parts = [element.text if isinstance(element, SyntaxToken) else ""]
    for fragment in children:
        parts.append(fragment)
        ctx.pushed_raw()
    return "".join(parts)
