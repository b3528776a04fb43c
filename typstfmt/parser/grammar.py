"""Markup and math grammar routines that emit CST events.

Code expressions live in ``typstfmt.parser.code``; the two modules call into
each other for embedded code (``#expr``) and content blocks (``[markup]``).
"""

import sys
from collections.abc import Callable
from typing import TypeAlias

from typstfmt.diagnostics import Diagnostic
from typstfmt.diagnostics.codes import PARSER_EXPECTED_EXPRESSION, PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK
from typstfmt.lexer import LexMode
from typstfmt.parser.marker import CompletedMarker
from typstfmt.parser.options import NewlineMode, ParseMode
from typstfmt.parser.parser import Parser, ParserProgress
from typstfmt.syntax import SyntaxKind
from typstfmt.text import TextRange

StopPredicate: TypeAlias = Callable[[Parser], bool]

# min_indent value that ends the markup at the first line break.
LINE_END = sys.maxsize

# Markup tokens that only mean something at the start of a line or inside a
# matching construct; anywhere else they are plain text.
STRAY_MARKUP: frozenset[SyntaxKind] = frozenset(
    {
        SyntaxKind.LEFT_BRACKET,
        SyntaxKind.RIGHT_BRACKET,
        SyntaxKind.HEADING_MARKER,
        SyntaxKind.LIST_MARKER,
        SyntaxKind.ENUM_MARKER,
        SyntaxKind.TERM_MARKER,
        SyntaxKind.COLON,
    }
)

ITEM_KINDS: dict[SyntaxKind, SyntaxKind] = {
    SyntaxKind.LIST_MARKER: SyntaxKind.LIST_ITEM,
    SyntaxKind.ENUM_MARKER: SyntaxKind.ENUM_ITEM,
}


def parse_root(parser: Parser, mode: ParseMode) -> CompletedMarker:
    match mode:
        case ParseMode.CODE:
            return parse_code(parser, stop=lambda _: False)
        case ParseMode.MATH:
            return parse_math(parser, stop=lambda _: False)
        case _:
            return parse_markup(parser, at_start=True, min_indent=0, stop=lambda _: False)


# -------------------------
# Markup
# -------------------------


def parse_markup(
    parser: Parser,
    *,
    at_start: bool,
    min_indent: int,
    stop: StopPredicate,
) -> CompletedMarker:
    """Parse markup into a MARKUP node.

    ``min_indent`` ends the markup at a line whose indentation is smaller
    (0 disables the check, ``LINE_END`` stops at any line break).
    Brackets opened inside the markup are balanced before ``stop`` applies.
    """
    marker = parser.start()
    progress = ParserProgress()
    nesting = 0

    while not parser.at(SyntaxKind.EOF):
        progress.assert_progressing(parser)

        if parser.at(SyntaxKind.LEFT_BRACKET):
            nesting += 1
        elif parser.at(SyntaxKind.RIGHT_BRACKET) and nesting > 0:
            nesting -= 1
        elif stop(parser):
            break

        if _at_newline(parser):
            at_start = True
            if min_indent > 0 and parser.column(parser.current_range.end.value) < min_indent:
                break
            parser.bump()
            continue

        at_start = _parse_markup_expr(parser, at_start)

    return marker.complete(parser, SyntaxKind.MARKUP)


def _parse_markup_expr(parser: Parser, at_start: bool) -> bool:
    """Parse one markup element; returns whether the next one still starts a line."""
    match parser.current:
        case SyntaxKind.SPACE | SyntaxKind.LINE_COMMENT | SyntaxKind.BLOCK_COMMENT:
            parser.bump()
            return at_start
        case SyntaxKind.HASH:
            parse_embedded_code(parser)
        case SyntaxKind.STAR:
            _parse_delimited(parser, SyntaxKind.STAR, SyntaxKind.STRONG)
        case SyntaxKind.UNDERSCORE:
            _parse_delimited(parser, SyntaxKind.UNDERSCORE, SyntaxKind.EMPH)
        case SyntaxKind.HEADING_MARKER if at_start:
            _parse_heading(parser)
        case SyntaxKind.LIST_MARKER | SyntaxKind.ENUM_MARKER if at_start:
            _parse_list_item(parser, ITEM_KINDS[parser.current])
        case SyntaxKind.TERM_MARKER if at_start:
            _parse_term_item(parser)
        case SyntaxKind.REF_MARKER:
            _parse_reference(parser)
        case SyntaxKind.DOLLAR:
            parse_equation(parser)
        case kind if kind in STRAY_MARKUP:
            parser.bump_remap(SyntaxKind.TEXT)
        case _:
            parser.bump()
    return False


def _at_newline(parser: Parser) -> bool:
    if parser.at(SyntaxKind.PARBREAK):
        return True
    return parser.at(SyntaxKind.SPACE) and parser.source.current_token.contains_newline()


def _eat_line_whitespace(parser: Parser) -> None:
    while parser.at(SyntaxKind.SPACE) and not _at_newline(parser):
        parser.bump()


def _parse_delimited(parser: Parser, delimiter: SyntaxKind, kind: SyntaxKind) -> None:
    marker = parser.start()
    opening = parser.current_range
    parser.bump()
    parse_markup(
        parser,
        at_start=False,
        min_indent=0,
        stop=lambda p: p.at_set({delimiter, SyntaxKind.PARBREAK, SyntaxKind.RIGHT_BRACKET}),
    )
    parser.expect_closing_delimiter(opening, delimiter)
    marker.complete(parser, kind)


def _parse_heading(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    _eat_line_whitespace(parser)
    parse_markup(
        parser,
        at_start=False,
        min_indent=LINE_END,
        stop=lambda p: p.at_set({SyntaxKind.LABEL, SyntaxKind.RIGHT_BRACKET}),
    )
    marker.complete(parser, SyntaxKind.HEADING)


def _parse_list_item(parser: Parser, kind: SyntaxKind) -> None:
    marker = parser.start()
    # The body continues on lines indented past the marker.
    min_indent = parser.column(parser.position.value) + 1
    parser.bump()
    _eat_line_whitespace(parser)
    parse_markup(parser, at_start=False, min_indent=min_indent, stop=lambda p: p.at(SyntaxKind.RIGHT_BRACKET))
    marker.complete(parser, kind)


def _parse_term_item(parser: Parser) -> None:
    marker = parser.start()
    min_indent = parser.column(parser.position.value) + 1
    parser.bump()
    _eat_line_whitespace(parser)
    parse_markup(
        parser,
        at_start=False,
        min_indent=LINE_END,
        stop=lambda p: p.at_set({SyntaxKind.COLON, SyntaxKind.RIGHT_BRACKET}),
    )
    parser.expect(SyntaxKind.COLON)
    _eat_line_whitespace(parser)
    parse_markup(parser, at_start=False, min_indent=min_indent, stop=lambda p: p.at(SyntaxKind.RIGHT_BRACKET))
    marker.complete(parser, SyntaxKind.TERM_ITEM)


def _parse_reference(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    if parser.directly_at(SyntaxKind.LEFT_BRACKET):
        parse_content_block(parser)
    marker.complete(parser, SyntaxKind.REF)


def parse_embedded_code(parser: Parser) -> None:
    """Parse ``#`` followed by one atomic expression or statement."""
    parser.bump()
    parser.enter_mode(LexMode.CODE)
    parser.enter_newline_mode(NewlineMode.STOP)

    if parser.has_preceding_trivia or parser.at_end() or not parser.at_set(EMBEDDED_EXPR_START):
        parser.error(_expected_expression(parser))
    else:
        is_statement = parser.at_set(STATEMENT_START)
        parse_expression(parser, atomic=True)

        has_semicolon = (is_statement or parser.directly_at(SyntaxKind.SEMICOLON)) and parser.eat(
            SyntaxKind.SEMICOLON
        )
        if is_statement and not has_semicolon and not parser.at_end() and not parser.at(SyntaxKind.RIGHT_BRACKET):
            parser.error(
                Diagnostic.from_spec(
                    PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK,
                    TextRange.empty(parser.position),
                )
            )

    parser.exit_newline_mode()
    parser.exit_mode()


# -------------------------
# Blocks shared with code
# -------------------------


def parse_content_block(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    opening = parser.current_range
    parser.bump()

    parser.enter_mode(LexMode.MARKUP)
    parse_markup(parser, at_start=True, min_indent=0, stop=lambda p: p.at(SyntaxKind.RIGHT_BRACKET))
    parser.expect_closing_delimiter(opening, SyntaxKind.RIGHT_BRACKET)
    parser.exit_mode()
    return marker.complete(parser, SyntaxKind.CONTENT_BLOCK)


def parse_equation(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    opening = parser.current_range
    parser.bump()

    parser.enter_mode(LexMode.MATH)
    parser.enter_newline_mode(NewlineMode.CONTINUE)
    parse_math(parser, stop=lambda p: p.at(SyntaxKind.DOLLAR))
    parser.expect_closing_delimiter(opening, SyntaxKind.DOLLAR)
    parser.exit_newline_mode()
    parser.exit_mode()
    return marker.complete(parser, SyntaxKind.EQUATION)


# -------------------------
# Math
# -------------------------


def parse_math(parser: Parser, stop: StopPredicate) -> CompletedMarker:
    """Parse math as a flat MATH node; only embedded code gets structure."""
    marker = parser.start()
    progress = ParserProgress()

    while not parser.at(SyntaxKind.EOF) and not stop(parser):
        progress.assert_progressing(parser)
        if parser.at(SyntaxKind.HASH):
            parse_embedded_code(parser)
        else:
            parser.bump()

    return marker.complete(parser, SyntaxKind.MATH)


def _expected_expression(parser: Parser) -> Diagnostic:
    return Diagnostic.from_spec(PARSER_EXPECTED_EXPRESSION, TextRange.empty(parser.position))


from typstfmt.parser.code import (  # noqa: E402
    EMBEDDED_EXPR_START,
    STATEMENT_START,
    parse_code,
    parse_expression,
)
