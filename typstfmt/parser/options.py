"""Parse modes."""

from enum import StrEnum

from typstfmt.lexer import LexMode
from typstfmt.syntax import SyntaxKind


class ParseMode(StrEnum):
    """Which sub-language the whole source is read as."""

    MARKUP = "markup"
    CODE = "code"
    MATH = "math"

    @property
    def lex_mode(self) -> LexMode:
        return LexMode(self.value)

    @property
    def root_kind(self) -> SyntaxKind:
        match self:
            case ParseMode.CODE:
                return SyntaxKind.CODE
            case ParseMode.MATH:
                return SyntaxKind.MATH
            case _:
                return SyntaxKind.MARKUP


class NewlineMode(StrEnum):
    """How a line break in code affects the token after it."""

    # A line break ends the expression.
    STOP = "stop"
    # A line break ends the expression unless `else` or `.` follows.
    CONTEXTUAL = "contextual"
    # Line breaks are plain trivia.
    CONTINUE = "continue"
