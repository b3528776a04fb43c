"""Event-based parser core."""

from dataclasses import dataclass

from typstfmt.diagnostics import Diagnostic
from typstfmt.diagnostics.codes import PARSER_EXPECTED_TOKEN, PARSER_UNCLOSED_DELIMITER
from typstfmt.lexer import LexMode
from typstfmt.parser.event import TOMBSTONE, Event, TokenEvent
from typstfmt.parser.marker import Marker
from typstfmt.parser.options import NewlineMode
from typstfmt.parser.token_source import TokenSource, TokenSourceCheckpoint
from typstfmt.syntax import SyntaxKind
from typstfmt.text import TextRange, TextSize

# Kinds that keep a CONTEXTUAL expression going across a line break.
CONTINUES_AFTER_LINE_BREAK: frozenset[SyntaxKind] = frozenset({SyntaxKind.ELSE, SyntaxKind.DOT})


@dataclass(frozen=True, slots=True)
class ParserCheckpoint:
    source_checkpoint: TokenSourceCheckpoint
    events_len: int
    diagnostics_len: int
    modes: tuple[LexMode, ...]
    newline_modes: tuple[tuple[NewlineMode, int], ...]


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: TextSize | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current.name} {parser.current_range}")


class Parser:
    """Event-based parser with a lexer-mode stack and a newline-mode stack."""

    def __init__(self, source: TokenSource) -> None:
        self._source = source
        self._events: list[Event] = []
        self._diagnostics: list[Diagnostic] = []
        self._modes: list[LexMode] = []
        # Each entry remembers where it was entered: the token current at that
        # point keeps the kind it was lexed with.
        self._newline_modes: list[tuple[NewlineMode, int]] = []

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def text(self) -> str:
        return self._source.text

    @property
    def events(self) -> list[Event]:
        return self._events

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def current(self) -> SyntaxKind:
        """Current token kind, or END when a line break ends the expression here."""
        kind = self._source.current
        if not self._newline_modes or not self._source.has_preceding_line_break:
            return kind

        mode, entered_at = self._newline_modes[-1]
        if self.position.value == entered_at:
            return kind
        match mode:
            case NewlineMode.STOP:
                return SyntaxKind.END
            case NewlineMode.CONTEXTUAL if kind not in CONTINUES_AFTER_LINE_BREAK:
                return SyntaxKind.END
            case _:
                return kind

    @property
    def current_range(self) -> TextRange:
        return self._source.current_range

    @property
    def position(self) -> TextSize:
        return self._source.position

    @property
    def has_preceding_trivia(self) -> bool:
        return self._source.has_preceding_trivia

    def at(self, kind: SyntaxKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[SyntaxKind] | set[SyntaxKind]) -> bool:
        return self.current in kinds

    def at_end(self) -> bool:
        return self.current in (SyntaxKind.END, SyntaxKind.EOF)

    def directly_at(self, kind: SyntaxKind) -> bool:
        """At ``kind`` with nothing (not even a space) in between."""
        return self.at(kind) and not self.has_preceding_trivia

    def nth(self, n: int) -> SyntaxKind:
        return self._source.nth(n)

    def nth_directly(self, n: int, kind: SyntaxKind) -> bool:
        lookahead = self._source.lookahead(n)
        return lookahead.token.kind == kind and not lookahead.preceding_trivia

    def column(self, offset: int) -> int:
        """Zero-based column of ``offset`` in the source text."""
        line_start = self.text.rfind("\n", 0, offset) + 1
        return offset - line_start

    def start(self) -> Marker:
        pos = len(self._events)
        self._events.append(TOMBSTONE)
        return Marker(pos=pos)

    def checkpoint(self) -> ParserCheckpoint:
        return ParserCheckpoint(
            source_checkpoint=self._source.checkpoint,
            events_len=len(self._events),
            diagnostics_len=len(self._diagnostics),
            modes=tuple(self._modes),
            newline_modes=tuple(self._newline_modes),
        )

    def rewind(self, checkpoint: ParserCheckpoint) -> None:
        self._source.rewind(checkpoint.source_checkpoint)
        del self._events[checkpoint.events_len :]
        del self._diagnostics[checkpoint.diagnostics_len :]
        self._modes = list(checkpoint.modes)
        self._newline_modes = list(checkpoint.newline_modes)

    def enter_mode(self, mode: LexMode) -> None:
        self._modes.append(self._source.mode)
        if mode != self._source.mode:
            self._source.relex(mode)

    def exit_mode(self) -> None:
        previous = self._modes.pop()
        if previous != self._source.mode:
            self._source.relex(previous)

    def enter_newline_mode(self, mode: NewlineMode) -> None:
        self._newline_modes.append((mode, self.position.value))

    def exit_newline_mode(self) -> None:
        self._newline_modes.pop()

    def bump(self) -> None:
        self.bump_remap(self._source.current)

    def bump_remap(self, kind: SyntaxKind) -> None:
        """Consume the current token, recording it as ``kind``."""
        if self.at_end():
            return
        self._events.append(TokenEvent(kind=kind, end=self.current_range.end))
        self._source.bump()

    def eat(self, kind: SyntaxKind) -> bool:
        if self.at(kind):
            self.bump()
            return True
        return False

    def expect(self, kind: SyntaxKind, description: str | None = None) -> bool:
        if self.eat(kind):
            return True
        what = description if description is not None else _describe(kind)
        self.error(Diagnostic.from_spec(PARSER_EXPECTED_TOKEN, self._error_range(), message=f"Expected {what}"))
        return False

    def expect_closing_delimiter(self, opening: TextRange, kind: SyntaxKind) -> bool:
        if self.eat(kind):
            return True
        self.error(
            Diagnostic.from_spec(
                PARSER_UNCLOSED_DELIMITER,
                opening,
                message=f"Unclosed delimiter, expected {_describe(kind)}",
            )
        )
        return False

    def error(self, diagnostic: Diagnostic) -> None:
        if self._diagnostics:
            previous = self._diagnostics[-1]
            if previous.range.start == diagnostic.range.start:
                return
        self._diagnostics.append(diagnostic)

    def finish(self) -> tuple[list[Event], list[Diagnostic]]:
        return self._events, self._diagnostics

    def _error_range(self) -> TextRange:
        # Errors at a virtual END point right after the last consumed token.
        if self.at(SyntaxKind.END):
            return TextRange.from_offsets(self._source.prev_end, self._source.prev_end)
        return self.current_range


TOKEN_DESCRIPTIONS: dict[SyntaxKind, str] = {
    SyntaxKind.LEFT_PAREN: "opening paren",
    SyntaxKind.RIGHT_PAREN: "closing paren",
    SyntaxKind.LEFT_BRACKET: "opening bracket",
    SyntaxKind.RIGHT_BRACKET: "closing bracket",
    SyntaxKind.LEFT_BRACE: "opening brace",
    SyntaxKind.RIGHT_BRACE: "closing brace",
    SyntaxKind.DOLLAR: "dollar sign",
    SyntaxKind.STAR: "star",
    SyntaxKind.UNDERSCORE: "underscore",
    SyntaxKind.COMMA: "comma",
    SyntaxKind.COLON: "colon",
    SyntaxKind.EQ: "equals sign",
    SyntaxKind.IDENT: "identifier",
    SyntaxKind.IN: "keyword `in`",
}


def _describe(kind: SyntaxKind) -> str:
    return TOKEN_DESCRIPTIONS.get(kind, kind.name.lower())
