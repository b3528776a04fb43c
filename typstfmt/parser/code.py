"""Code-mode grammar: statements, expressions and argument lists."""

from collections.abc import Callable
from enum import StrEnum

from typstfmt.diagnostics import Diagnostic
from typstfmt.diagnostics.codes import (
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK,
    PARSER_UNEXPECTED_TOKEN,
)
from typstfmt.parser.marker import CompletedMarker
from typstfmt.parser.options import NewlineMode
from typstfmt.parser.parse_lists import ParseNodeList
from typstfmt.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from typstfmt.parser.parser import Parser, ParserProgress
from typstfmt.syntax import SyntaxKind
from typstfmt.text import TextRange

LITERALS: frozenset[SyntaxKind] = frozenset(
    {
        SyntaxKind.NONE,
        SyntaxKind.AUTO,
        SyntaxKind.BOOL,
        SyntaxKind.INT,
        SyntaxKind.FLOAT,
        SyntaxKind.NUMERIC,
        SyntaxKind.STR,
        SyntaxKind.RAW,
        SyntaxKind.LABEL,
    }
)

STATEMENT_START: frozenset[SyntaxKind] = frozenset(
    {
        SyntaxKind.LET,
        SyntaxKind.SET,
        SyntaxKind.SHOW,
        SyntaxKind.IMPORT,
        SyntaxKind.INCLUDE,
        SyntaxKind.RETURN,
    }
)

# Everything that may directly follow `#` in markup or math.
EMBEDDED_EXPR_START: frozenset[SyntaxKind] = (
    LITERALS
    | STATEMENT_START
    | {
        SyntaxKind.IDENT,
        SyntaxKind.LEFT_BRACE,
        SyntaxKind.LEFT_BRACKET,
        SyntaxKind.LEFT_PAREN,
        SyntaxKind.DOLLAR,
        SyntaxKind.CONTEXT,
        SyntaxKind.IF,
        SyntaxKind.WHILE,
        SyntaxKind.FOR,
        SyntaxKind.BREAK,
        SyntaxKind.CONTINUE,
    }
)

UNARY_OPERATORS: dict[SyntaxKind, int] = {
    SyntaxKind.PLUS: 7,
    SyntaxKind.MINUS: 7,
    SyntaxKind.NOT: 4,
}

UNARY_START: frozenset[SyntaxKind] = frozenset(UNARY_OPERATORS)

EXPR_START: frozenset[SyntaxKind] = EMBEDDED_EXPR_START | UNARY_START | {SyntaxKind.UNDERSCORE}

BINARY_OPERATORS: dict[SyntaxKind, int] = {
    SyntaxKind.STAR: 6,
    SyntaxKind.SLASH: 6,
    SyntaxKind.PLUS: 5,
    SyntaxKind.MINUS: 5,
    SyntaxKind.EQ_EQ: 4,
    SyntaxKind.EXCL_EQ: 4,
    SyntaxKind.LT: 4,
    SyntaxKind.LT_EQ: 4,
    SyntaxKind.GT: 4,
    SyntaxKind.GT_EQ: 4,
    SyntaxKind.IN: 4,
    SyntaxKind.AND: 3,
    SyntaxKind.OR: 2,
    SyntaxKind.EQ: 1,
    SyntaxKind.PLUS_EQ: 1,
    SyntaxKind.HYPH_EQ: 1,
    SyntaxKind.STAR_EQ: 1,
    SyntaxKind.SLASH_EQ: 1,
}

NOT_IN_PRECEDENCE = 4
ASSIGNMENT_PRECEDENCE = 1

CLOSING_DELIMITERS: frozenset[SyntaxKind] = frozenset(
    {SyntaxKind.RIGHT_BRACE, SyntaxKind.RIGHT_BRACKET, SyntaxKind.RIGHT_PAREN}
)

STATEMENT_RECOVERY = ParseRecoveryTokenSet(
    node_kind=SyntaxKind.ERROR_NODE,
    recovery_set=EXPR_START | {SyntaxKind.SEMICOLON, SyntaxKind.END},
)

ITEM_RECOVERY = ParseRecoveryTokenSet(
    node_kind=SyntaxKind.ERROR_NODE,
    recovery_set=CLOSING_DELIMITERS | {SyntaxKind.COMMA, SyntaxKind.SEMICOLON, SyntaxKind.END},
)


class ItemKind(StrEnum):
    """What one entry between parentheses turned out to be."""

    POSITIONAL = "positional"
    NAMED = "named"
    KEYED = "keyed"
    SPREAD = "spread"
    MISSING = "missing"


# -------------------------
# Statements
# -------------------------


def parse_code(parser: Parser, stop: Callable[[Parser], bool]) -> CompletedMarker:
    """Parse a sequence of statements separated by semicolons or line breaks into a CODE node."""

    def parse_statement(current: Parser) -> bool:
        if current.eat(SyntaxKind.SEMICOLON):
            return True
        if not current.at_set(EXPR_START):
            return False

        current.enter_newline_mode(NewlineMode.CONTEXTUAL)
        parse_expression(current)
        if not (current.at_end() or stop(current) or current.eat(SyntaxKind.SEMICOLON)):
            current.error(
                Diagnostic.from_spec(
                    PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK,
                    TextRange.empty(current.position),
                )
            )
        current.exit_newline_mode()
        return True

    def recover(current: Parser) -> bool:
        current.error(_unexpected_token(current))
        _, recovery_error = STATEMENT_RECOVERY.recover(current)
        return recovery_error is None

    return ParseNodeList(
        list_kind=SyntaxKind.CODE,
        is_at_list_end=lambda current: current.at_end() or stop(current),
        parse_element=parse_statement,
        recover=recover,
    ).parse_list(parser)


def parse_code_block(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    opening = parser.current_range
    parser.enter_newline_mode(NewlineMode.CONTINUE)
    parser.bump()
    parse_code(parser, stop=lambda current: current.at_set(CLOSING_DELIMITERS))
    parser.expect_closing_delimiter(opening, SyntaxKind.RIGHT_BRACE)
    parser.exit_newline_mode()
    return marker.complete(parser, SyntaxKind.CODE_BLOCK)


# -------------------------
# Expressions
# -------------------------


def parse_expression(parser: Parser, *, atomic: bool = False, min_prec: int = 0) -> None:
    """Precedence-climbing expression parser.

    Atomic expressions (directly after `#`) stop before binary operators and
    only continue with directly attached calls and field accesses.
    """
    marker = parser.start()
    if not atomic and parser.at_set(UNARY_START):
        precedence = UNARY_OPERATORS[parser.current]
        parser.bump()
        parse_expression(parser, min_prec=precedence)
        marker = marker.complete(parser, SyntaxKind.UNARY).precede(parser)
    else:
        _parse_primary(parser, atomic)

    while True:
        if parser.directly_at(SyntaxKind.LEFT_PAREN) or parser.directly_at(SyntaxKind.LEFT_BRACKET):
            parse_args(parser)
            marker = marker.complete(parser, SyntaxKind.FUNC_CALL).precede(parser)
            continue

        at_field_access = parser.directly_at(SyntaxKind.DOT) and parser.nth_directly(1, SyntaxKind.IDENT)
        if atomic and not at_field_access:
            break

        if parser.eat(SyntaxKind.DOT):
            parser.expect(SyntaxKind.IDENT)
            marker = marker.complete(parser, SyntaxKind.FIELD_ACCESS).precede(parser)
            continue

        if parser.at(SyntaxKind.NOT) and parser.nth(1) == SyntaxKind.IN:
            precedence = NOT_IN_PRECEDENCE
        elif parser.current in BINARY_OPERATORS:
            precedence = BINARY_OPERATORS[parser.current]
        else:
            break

        if precedence < min_prec:
            break

        # `not in` is two tokens.
        parser.eat(SyntaxKind.NOT)
        parser.bump()
        # Assignments are right-associative, everything else binds left.
        next_prec = precedence if precedence == ASSIGNMENT_PRECEDENCE else precedence + 1
        parse_expression(parser, min_prec=next_prec)
        marker = marker.complete(parser, SyntaxKind.BINARY).precede(parser)

    marker.abandon(parser)


def _parse_primary(parser: Parser, atomic: bool) -> None:
    match parser.current:
        case SyntaxKind.IDENT | SyntaxKind.UNDERSCORE:
            if not atomic and parser.nth(1) == SyntaxKind.ARROW:
                _parse_single_param_closure(parser)
            else:
                parser.bump()
        case SyntaxKind.LEFT_BRACE:
            parse_code_block(parser)
        case SyntaxKind.LEFT_BRACKET:
            parse_content_block(parser)
        case SyntaxKind.LEFT_PAREN:
            _parse_parenthesized_or_closure(parser, atomic)
        case SyntaxKind.DOLLAR:
            parse_equation(parser)
        case SyntaxKind.LET:
            _parse_let_binding(parser)
        case SyntaxKind.SET:
            _parse_set_rule(parser)
        case SyntaxKind.SHOW:
            _parse_show_rule(parser)
        case SyntaxKind.CONTEXT:
            _parse_contextual(parser, atomic)
        case SyntaxKind.IF:
            _parse_conditional(parser)
        case SyntaxKind.WHILE:
            _parse_while_loop(parser)
        case SyntaxKind.FOR:
            _parse_for_loop(parser)
        case SyntaxKind.IMPORT:
            _parse_module_import(parser)
        case SyntaxKind.INCLUDE:
            _parse_keyword_with_expression(parser, SyntaxKind.MODULE_INCLUDE)
        case SyntaxKind.BREAK:
            _parse_keyword_only(parser, SyntaxKind.LOOP_BREAK)
        case SyntaxKind.CONTINUE:
            _parse_keyword_only(parser, SyntaxKind.LOOP_CONTINUE)
        case SyntaxKind.RETURN:
            _parse_return(parser)
        case kind if kind in LITERALS:
            parser.bump()
        case _:
            parser.error(Diagnostic.from_spec(PARSER_EXPECTED_EXPRESSION, TextRange.empty(parser.position)))


def _parse_single_param_closure(parser: Parser) -> None:
    params = parser.start()
    parser.bump()
    closure = params.complete(parser, SyntaxKind.PARAMS).precede(parser)
    parser.bump()
    parse_expression(parser)
    closure.complete(parser, SyntaxKind.CLOSURE)


def _parse_parenthesized_or_closure(parser: Parser, atomic: bool) -> None:
    checkpoint = parser.checkpoint()
    collection = _parse_collection(parser)
    if atomic:
        return

    if parser.at(SyntaxKind.ARROW):
        # Same tokens again, this time as parameters.
        parser.rewind(checkpoint)
        closure = _parse_collection(parser, kind=SyntaxKind.PARAMS).precede(parser)
        parser.bump()
        parse_expression(parser)
        closure.complete(parser, SyntaxKind.CLOSURE)
    elif parser.at(SyntaxKind.EQ) and collection.kind(parser) != SyntaxKind.PARENTHESIZED:
        collection.change_kind(parser, SyntaxKind.DESTRUCTURING)


def _parse_collection(parser: Parser, *, kind: SyntaxKind | None = None) -> CompletedMarker:
    """Parse `(...)` as a parenthesized expression, array or dictionary.

    ``kind`` forces the node kind (parameters, patterns).
    """
    marker = parser.start()
    if parser.at(SyntaxKind.LEFT_PAREN) and parser.nth(1) == SyntaxKind.COLON and parser.nth(2) == SyntaxKind.RIGHT_PAREN:
        parser.bump()
        parser.bump()
        parser.bump()
        return marker.complete(parser, kind or SyntaxKind.DICT)

    items, has_comma = _parse_parenthesized_items(parser)

    if kind is None:
        if any(item in (ItemKind.NAMED, ItemKind.KEYED) for item in items):
            kind = SyntaxKind.DICT
        elif items == [ItemKind.POSITIONAL] and not has_comma:
            kind = SyntaxKind.PARENTHESIZED
        else:
            kind = SyntaxKind.ARRAY
    return marker.complete(parser, kind)


def _parse_parenthesized_items(parser: Parser) -> tuple[list[ItemKind], bool]:
    """Parse `(item, item, ...)`; returns the item kinds and whether a comma was seen."""
    opening = parser.current_range
    parser.enter_newline_mode(NewlineMode.CONTINUE)
    parser.expect(SyntaxKind.LEFT_PAREN)

    items: list[ItemKind] = []
    has_comma = False
    progress = ParserProgress()
    while not _at_terminator(parser):
        progress.assert_progressing(parser)

        item = _parse_item(parser)
        if item == ItemKind.MISSING:
            parser.error(_unexpected_token(parser))
            _, recovery_error = ITEM_RECOVERY.recover(parser)
            if recovery_error == RecoveryError.EOF:
                break
        else:
            items.append(item)

        if _at_terminator(parser):
            break
        has_comma = parser.expect(SyntaxKind.COMMA) or has_comma

    parser.expect_closing_delimiter(opening, SyntaxKind.RIGHT_PAREN)
    parser.exit_newline_mode()
    return items, has_comma


def _parse_item(parser: Parser) -> ItemKind:
    if parser.at(SyntaxKind.DOTS):
        marker = parser.start()
        parser.bump()
        if parser.at_set(EXPR_START):
            parse_expression(parser)
        marker.complete(parser, SyntaxKind.SPREAD)
        return ItemKind.SPREAD

    if not parser.at_set(EXPR_START):
        return ItemKind.MISSING

    marker = parser.start()
    if parser.at(SyntaxKind.IDENT) and parser.nth(1) == SyntaxKind.COLON:
        parser.bump()
        parser.bump()
        parse_expression(parser)
        marker.complete(parser, SyntaxKind.NAMED)
        return ItemKind.NAMED

    parse_expression(parser)
    if parser.eat(SyntaxKind.COLON):
        parse_expression(parser)
        marker.complete(parser, SyntaxKind.KEYED)
        return ItemKind.KEYED

    marker.abandon(parser)
    return ItemKind.POSITIONAL


def parse_args(parser: Parser) -> CompletedMarker:
    """Parse call arguments: an optional parenthesized list, then directly attached content blocks."""
    marker = parser.start()
    if parser.at(SyntaxKind.LEFT_PAREN):
        _parse_parenthesized_items(parser)
    while parser.directly_at(SyntaxKind.LEFT_BRACKET):
        parse_content_block(parser)
    return marker.complete(parser, SyntaxKind.ARGS)


def _parse_pattern(parser: Parser) -> None:
    if parser.at(SyntaxKind.IDENT) or parser.at(SyntaxKind.UNDERSCORE):
        parser.bump()
    elif parser.at(SyntaxKind.LEFT_PAREN):
        pattern = _parse_collection(parser)
        if pattern.kind(parser) != SyntaxKind.PARENTHESIZED:
            pattern.change_kind(parser, SyntaxKind.DESTRUCTURING)
    else:
        parser.expect(SyntaxKind.IDENT, "pattern")


# -------------------------
# Keyword expressions
# -------------------------


def _parse_let_binding(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()

    closure = parser.start()
    is_closure = False
    needs_init = True
    if parser.at(SyntaxKind.IDENT):
        parser.bump()
        if parser.directly_at(SyntaxKind.LEFT_PAREN):
            _parse_collection(parser, kind=SyntaxKind.PARAMS)
            is_closure = True
        else:
            needs_init = False
    else:
        _parse_pattern(parser)

    if needs_init:
        if parser.expect(SyntaxKind.EQ):
            parse_expression(parser)
    elif parser.eat(SyntaxKind.EQ):
        parse_expression(parser)

    if is_closure:
        closure.complete(parser, SyntaxKind.CLOSURE)
    else:
        closure.abandon(parser)
    marker.complete(parser, SyntaxKind.LET_BINDING)


def _parse_set_rule(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()

    target = parser.start()
    parser.expect(SyntaxKind.IDENT)
    while parser.eat(SyntaxKind.DOT):
        parser.expect(SyntaxKind.IDENT)
        target = target.complete(parser, SyntaxKind.FIELD_ACCESS).precede(parser)
    target.abandon(parser)

    if parser.at(SyntaxKind.LEFT_PAREN) or parser.at(SyntaxKind.LEFT_BRACKET):
        parse_args(parser)
    else:
        parser.expect(SyntaxKind.LEFT_PAREN)

    if parser.eat(SyntaxKind.IF):
        parse_expression(parser)
    marker.complete(parser, SyntaxKind.SET_RULE)


def _parse_show_rule(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    if not parser.at(SyntaxKind.COLON):
        parse_expression(parser)
    if parser.expect(SyntaxKind.COLON):
        parse_expression(parser)
    marker.complete(parser, SyntaxKind.SHOW_RULE)


def _parse_contextual(parser: Parser, atomic: bool) -> None:
    marker = parser.start()
    parser.bump()
    parse_expression(parser, atomic=atomic)
    marker.complete(parser, SyntaxKind.CONTEXTUAL)


def _parse_conditional(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    parse_expression(parser)
    _parse_block(parser)
    if parser.eat(SyntaxKind.ELSE):
        if parser.at(SyntaxKind.IF):
            _parse_conditional(parser)
        else:
            _parse_block(parser)
    marker.complete(parser, SyntaxKind.CONDITIONAL)


def _parse_while_loop(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    parse_expression(parser)
    _parse_block(parser)
    marker.complete(parser, SyntaxKind.WHILE_LOOP)


def _parse_for_loop(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    _parse_pattern(parser)
    if parser.expect(SyntaxKind.IN):
        parse_expression(parser)
    _parse_block(parser)
    marker.complete(parser, SyntaxKind.FOR_LOOP)


def _parse_block(parser: Parser) -> None:
    if parser.at(SyntaxKind.LEFT_BRACKET):
        parse_content_block(parser)
    elif parser.at(SyntaxKind.LEFT_BRACE):
        parse_code_block(parser)
    else:
        parser.expect(SyntaxKind.LEFT_BRACE, "block")


def _parse_module_import(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    parse_expression(parser)
    if parser.eat(SyntaxKind.AS):
        parser.expect(SyntaxKind.IDENT)

    if parser.eat(SyntaxKind.COLON):
        if parser.at(SyntaxKind.LEFT_PAREN):
            opening = parser.current_range
            parser.enter_newline_mode(NewlineMode.CONTINUE)
            parser.bump()
            _parse_import_items(parser)
            parser.expect_closing_delimiter(opening, SyntaxKind.RIGHT_PAREN)
            parser.exit_newline_mode()
        elif not parser.eat(SyntaxKind.STAR):
            _parse_import_items(parser)
    marker.complete(parser, SyntaxKind.MODULE_IMPORT)


def _parse_import_items(parser: Parser) -> None:
    items = parser.start()
    progress = ParserProgress()
    while not _at_terminator(parser):
        progress.assert_progressing(parser)

        if parser.at(SyntaxKind.IDENT):
            item = parser.start()
            parser.bump()
            while parser.eat(SyntaxKind.DOT):
                parser.expect(SyntaxKind.IDENT)
            if parser.eat(SyntaxKind.AS):
                parser.expect(SyntaxKind.IDENT)
                item.complete(parser, SyntaxKind.RENAMED_IMPORT_ITEM)
            else:
                item.abandon(parser)
        else:
            parser.error(_unexpected_token(parser))
            _, recovery_error = ITEM_RECOVERY.recover(parser)
            if recovery_error == RecoveryError.EOF:
                break

        if not _at_terminator(parser):
            parser.expect(SyntaxKind.COMMA)
    items.complete(parser, SyntaxKind.IMPORT_ITEMS)


def _parse_keyword_with_expression(parser: Parser, kind: SyntaxKind) -> None:
    marker = parser.start()
    parser.bump()
    parse_expression(parser)
    marker.complete(parser, kind)


def _parse_keyword_only(parser: Parser, kind: SyntaxKind) -> None:
    marker = parser.start()
    parser.bump()
    marker.complete(parser, kind)


def _parse_return(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    if parser.at_set(EXPR_START):
        parse_expression(parser)
    marker.complete(parser, SyntaxKind.FUNC_RETURN)


def _at_terminator(parser: Parser) -> bool:
    return parser.current.is_terminator or parser.at(SyntaxKind.EOF)


def _unexpected_token(parser: Parser) -> Diagnostic:
    return Diagnostic.from_spec(
        PARSER_UNEXPECTED_TOKEN,
        parser.current_range,
        message=f"Unexpected token {parser.current.name}",
    )


from typstfmt.parser.grammar import parse_content_block, parse_equation  # noqa: E402
