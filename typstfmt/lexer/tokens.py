"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntFlag, StrEnum
from typing import Final

from typstfmt.syntax import SyntaxKind
from typstfmt.text import TextRange, TextSize


class LexMode(StrEnum):
    """Which of the three Typst sub-languages the lexer is reading."""

    MARKUP = "markup"
    CODE = "code"
    MATH = "math"


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    CONTAINS_NEWLINE = 1 << 0  # whitespace spanning at least one line break
    HAS_ESCAPE = 1 << 1


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or not)."""

    kind: SyntaxKind
    range: TextRange
    flags: TokenFlags = TokenFlags.NONE

    def contains_newline(self) -> bool:
        return bool(self.flags & TokenFlags.CONTAINS_NEWLINE)


@dataclass(frozen=True, slots=True)
class Trivia:
    """Code/math trivia recorded by the TokenSource, reattached by the tree sink."""

    kind: SyntaxKind
    range: TextRange
    contains_newline: bool = False


EOF_TOKEN: Final[Token] = Token(SyntaxKind.EOF, TextRange.empty(TextSize.from_int(0)))
