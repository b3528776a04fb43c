"""Reusable node-list parse loop."""

from collections.abc import Callable
from dataclasses import dataclass

from typstfmt.parser.marker import CompletedMarker
from typstfmt.parser.parser import Parser, ParserProgress
from typstfmt.syntax import SyntaxKind


@dataclass(slots=True)
class ParseNodeList:
    """Non-separated list parser with progress checks and a recovery hook.

    ``parse_element`` reports whether it recognised an element; when it did
    not, ``recover`` decides whether the loop may continue.
    """

    list_kind: SyntaxKind
    is_at_list_end: Callable[[Parser], bool]
    parse_element: Callable[[Parser], bool]
    recover: Callable[[Parser], bool]

    def parse_list(self, parser: Parser) -> CompletedMarker:
        marker = parser.start()
        progress = ParserProgress()

        while not parser.at(SyntaxKind.EOF) and not self.is_at_list_end(parser):
            progress.assert_progressing(parser)
            if not self.parse_element(parser) and not self.recover(parser):
                break

        return marker.complete(parser, self.list_kind)
