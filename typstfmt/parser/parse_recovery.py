"""Parser recovery primitives."""

from dataclasses import dataclass
from enum import StrEnum

from typstfmt.parser.marker import CompletedMarker
from typstfmt.parser.parser import Parser
from typstfmt.syntax import SyntaxKind


class RecoveryError(StrEnum):
    EOF = "eof"
    ALREADY_RECOVERED = "already_recovered"


@dataclass(frozen=True, slots=True)
class ParseRecoveryTokenSet:
    """Recover by consuming tokens into an error node until a safe token is reached."""

    node_kind: SyntaxKind
    recovery_set: frozenset[SyntaxKind]

    def recover(self, parser: Parser) -> tuple[CompletedMarker | None, RecoveryError | None]:
        if parser.at_end():
            return None, RecoveryError.EOF

        if self.is_at_recovered(parser):
            return None, RecoveryError.ALREADY_RECOVERED

        marker = parser.start()
        while not parser.at_end() and not self.is_at_recovered(parser):
            parser.bump()

        return marker.complete(parser, self.node_kind), None

    def is_at_recovered(self, parser: Parser) -> bool:
        return parser.at_set(self.recovery_set)
