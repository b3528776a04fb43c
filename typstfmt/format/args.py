"""Argument list layout: one line when it fits, one argument per line otherwise."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from typstfmt.cst import SyntaxElement, SyntaxNode, SyntaxToken
from typstfmt.format.context import FormatContext
from typstfmt.format.navigation import is_last_comma, is_trailing_comma, next_is_ignoring
from typstfmt.format.width import effective_line_length
from typstfmt.lexer.lexer import NEWLINE_CHARS
from typstfmt.syntax import SyntaxKind

logger = structlog.get_logger(__name__)

COMMENT_KINDS: frozenset[SyntaxKind] = frozenset({SyntaxKind.LINE_COMMENT, SyntaxKind.BLOCK_COMMENT})


def format_args(node: SyntaxNode, children: Sequence[str], ctx: FormatContext) -> str:
    """Render an ARGS node from its children's fragments.

    A line comment runs to the end of its line, so a list holding one is
    always broken.
    """
    one_line = format_args_one_line(node, children, ctx)
    length = effective_line_length(one_line)
    has_line_comment = any(child.kind == SyntaxKind.LINE_COMMENT for child in node.children)
    if has_line_comment or length >= ctx.max_line_length:
        logger.debug("Breaking argument list", offset=node.start, length=length, line_comment=has_line_comment)
        ctx.pushed_raw()
        return format_args_breaking(node, children, ctx)
    logger.debug("Keeping argument list on one line", offset=node.start, length=length)
    return one_line


def format_args_one_line(node: SyntaxNode, children: Sequence[str], ctx: FormatContext) -> str:
    parts: list[str] = []
    for child, fragment in zip(node.children, children, strict=True):
        match child.kind:
            case SyntaxKind.SPACE:
                if _spaces_comment(child):
                    parts.append(" ")
            case SyntaxKind.COMMA:
                if not is_trailing_comma(child):
                    parts.append(_own_text(child) + " ")
                    ctx.pushed_raw()
            case _:
                parts.append(fragment)
                ctx.pushed_raw()
    return "".join(parts)


def format_args_breaking(node: SyntaxNode, children: Sequence[str], ctx: FormatContext) -> str:
    parts: list[str] = []
    for child, fragment in zip(node.children, children, strict=True):
        match child.kind:
            case SyntaxKind.LEFT_PAREN:
                parts.append(_own_text(child) + _line_end(child, ctx.indent))
            case SyntaxKind.SPACE:
                parts.append(_space_beside_comment(child, ctx.indent))
            case SyntaxKind.COMMA:
                # The closing paren goes to column 0 after the final comma.
                if is_last_comma(child) and is_trailing_comma(child):
                    parts.append(_own_text(child) + _line_end(child, ""))
                else:
                    parts.append(_own_text(child) + _line_end(child, ctx.indent))
                ctx.pushed_raw()
            case kind if kind in COMMENT_KINDS:
                following = child.next_sibling()
                if following is not None and following.kind == SyntaxKind.RIGHT_PAREN:
                    parts.append(fragment + "\n")
                else:
                    parts.append(fragment)
                ctx.pushed_raw()
            case _:
                if next_is_ignoring(child, SyntaxKind.RIGHT_PAREN, ignoring=COMMENT_KINDS | {SyntaxKind.SPACE}):
                    parts.append(fragment + "," + _line_end(child, ""))
                else:
                    parts.append(fragment)
                ctx.pushed_raw()
    return "".join(parts)


def _line_end(element: SyntaxElement, indent: str) -> str:
    """Newline plus ``indent``, unless a comment follows and the space before it decides."""
    following = element.next_sibling()
    if following is not None and following.kind in COMMENT_KINDS:
        return " "
    if following is not None and following.kind == SyntaxKind.SPACE:
        after = following.next_sibling()
        if after is not None and after.kind in COMMENT_KINDS:
            return ""
    return "\n" + indent


def _spaces_comment(space: SyntaxElement) -> bool:
    """Whether ``space`` separates a comment from an argument on the one-line layout."""
    previous = space.prev_sibling()
    following = space.next_sibling()
    if previous is None or following is None:
        return False
    if previous.kind in (SyntaxKind.COMMA, SyntaxKind.LEFT_PAREN) or following.kind.is_terminator:
        return False
    return previous.kind in COMMENT_KINDS or following.kind in COMMENT_KINDS


def _space_beside_comment(space: SyntaxElement, indent: str) -> str:
    previous = space.prev_sibling()
    following = space.next_sibling()
    beside_comment = (previous is not None and previous.kind in COMMENT_KINDS) or (
        following is not None and following.kind in COMMENT_KINDS
    )
    if not beside_comment:
        return ""
    if next_is_ignoring(space, SyntaxKind.RIGHT_PAREN):
        return "\n"
    if not any(char in NEWLINE_CHARS for char in _own_text(space)):
        return " "
    return "\n" + indent


def _own_text(element: SyntaxNode | SyntaxToken) -> str:
    return element.text if isinstance(element, SyntaxToken) else ""
