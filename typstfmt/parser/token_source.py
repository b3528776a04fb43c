"""Token source that hides code/math trivia and records it separately."""

from dataclasses import dataclass

from typstfmt.diagnostics import Diagnostic
from typstfmt.lexer import EOF_TOKEN, LexMode, Lexer, LexerCheckpoint, Token, Trivia
from typstfmt.syntax import SyntaxKind
from typstfmt.text import TextRange, TextSize


@dataclass(frozen=True, slots=True)
class TokenSourceCheckpoint:
    lexer_checkpoint: LexerCheckpoint
    current: Token
    prev_end: int
    trivia_len: int
    preceding_trivia: bool
    preceding_line_break: bool


@dataclass(frozen=True, slots=True)
class Lookahead:
    token: Token
    preceding_trivia: bool
    preceding_line_break: bool


class TokenSource:
    """Bridge between lexer and parser.

    In code and math, whitespace and comments are recorded as ``Trivia`` and
    never shown to the grammar. In markup every token is significant.
    """

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer
        self._trivia: list[Trivia] = []
        self._current: Token = EOF_TOKEN
        self._prev_end = 0
        self._preceding_trivia = False
        self._preceding_line_break = False
        self._next_non_trivia_token()

    @property
    def current(self) -> SyntaxKind:
        return self._current.kind

    @property
    def current_token(self) -> Token:
        return self._current

    @property
    def current_range(self) -> TextRange:
        return self._current.range

    @property
    def text(self) -> str:
        return self._lexer.source

    @property
    def mode(self) -> LexMode:
        return self._lexer.mode

    @property
    def position(self) -> TextSize:
        return self._current.range.start

    @property
    def prev_end(self) -> int:
        """End offset of the last consumed token."""
        return self._prev_end

    @property
    def has_preceding_trivia(self) -> bool:
        return self._preceding_trivia

    @property
    def has_preceding_line_break(self) -> bool:
        return self._preceding_line_break

    @property
    def trivia(self) -> list[Trivia]:
        return self._trivia

    @property
    def checkpoint(self) -> TokenSourceCheckpoint:
        return TokenSourceCheckpoint(
            lexer_checkpoint=self._lexer.checkpoint,
            current=self._current,
            prev_end=self._prev_end,
            trivia_len=len(self._trivia),
            preceding_trivia=self._preceding_trivia,
            preceding_line_break=self._preceding_line_break,
        )

    def rewind(self, checkpoint: TokenSourceCheckpoint) -> None:
        self._lexer.rewind(checkpoint.lexer_checkpoint)
        del self._trivia[checkpoint.trivia_len :]
        self._current = checkpoint.current
        self._prev_end = checkpoint.prev_end
        self._preceding_trivia = checkpoint.preceding_trivia
        self._preceding_line_break = checkpoint.preceding_line_break

    def bump(self) -> None:
        if self._current.kind == SyntaxKind.EOF:
            return
        self._prev_end = self._current.range.end.value
        self._next_non_trivia_token()

    def relex(self, mode: LexMode) -> None:
        """Switch lexer mode and lex the current token again from the end of the last consumed one."""
        self._lexer.jump_to(self._prev_end)
        self._lexer.mode = mode
        while self._trivia and self._trivia[-1].range.start.value >= self._prev_end:
            self._trivia.pop()
        self._next_non_trivia_token()

    def nth(self, n: int) -> SyntaxKind:
        return self.lookahead(n).token.kind

    def lookahead(self, n: int) -> Lookahead:
        """Peek ``n`` non-trivia tokens ahead of the current one without consuming anything."""
        if n == 0:
            return Lookahead(self._current, self._preceding_trivia, self._preceding_line_break)

        checkpoint = self._lexer.checkpoint
        try:
            for _ in range(n):
                token, trivia = self._lex_skipping_trivia()
                if token.kind == SyntaxKind.EOF:
                    break
        finally:
            self._lexer.rewind(checkpoint)

        return Lookahead(
            token=token,
            preceding_trivia=bool(trivia),
            preceding_line_break=any(piece.contains_newline for piece in trivia),
        )

    def finish(self) -> tuple[list[Trivia], list[Diagnostic]]:
        return self._trivia, self._lexer.diagnostics

    def _next_non_trivia_token(self) -> None:
        token, trivia = self._lex_skipping_trivia()
        self._trivia.extend(trivia)
        self._current = token
        self._preceding_trivia = bool(trivia)
        self._preceding_line_break = any(piece.contains_newline for piece in trivia)

    def _lex_skipping_trivia(self) -> tuple[Token, list[Trivia]]:
        trivia: list[Trivia] = []
        while True:
            token = self._lexer.next_token()
            if self._lexer.mode == LexMode.MARKUP or not token.kind.is_trivia:
                return token, trivia
            trivia.append(Trivia(token.kind, token.range, token.contains_newline()))
