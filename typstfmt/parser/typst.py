"""High-level parse entrypoint for Typst source text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typstfmt.diagnostics import collect_diagnostics
from typstfmt.lexer import Lexer
from typstfmt.parser.event import process_events
from typstfmt.parser.grammar import parse_root
from typstfmt.parser.options import ParseMode
from typstfmt.parser.parser import Parser
from typstfmt.parser.token_source import TokenSource
from typstfmt.parser.tree_sink import LosslessTreeSink, ParsedGreenTree

if TYPE_CHECKING:
    from typstfmt.pipeline import TypstParseResult


def parse(text: str, *, mode: ParseMode = ParseMode.MARKUP) -> ParsedGreenTree:
    """Parse ``text`` into a lossless green tree whose root kind follows ``mode``."""
    lexer = Lexer(text, mode=mode.lex_mode)
    source = TokenSource(lexer)
    parser = Parser(source)

    parse_root(parser, mode)
    events, parser_diagnostics = parser.finish()
    trivia, lexer_diagnostics = source.finish()
    diagnostics = collect_diagnostics(lexer_diagnostics, parser_diagnostics)

    sink = LosslessTreeSink(text=text, trivia=trivia)
    process_events(sink, events, diagnostics)
    return sink.finish()


def parse_result(text: str, *, mode: ParseMode = ParseMode.MARKUP) -> TypstParseResult:
    from typstfmt.pipeline import TypstParseResult

    return TypstParseResult(source_text=text, parsed=parse(text, mode=mode), mode=mode)
