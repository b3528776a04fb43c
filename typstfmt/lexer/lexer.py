"""Lexer."""

from dataclasses import dataclass

from typstfmt.diagnostics import Diagnostic
from typstfmt.diagnostics.codes import (
    LEXER_INVALID_CHARACTER,
    LEXER_UNTERMINATED_BLOCK_COMMENT,
    LEXER_UNTERMINATED_RAW,
    LEXER_UNTERMINATED_STRING,
    DiagnosticSpec,
)
from typstfmt.lexer.tokens import LexMode, Token, TokenFlags
from typstfmt.syntax import KEYWORDS, SyntaxKind
from typstfmt.text import TextRange, slice_text_range

NEWLINE_CHARS = frozenset("\n\x0b\x0c\r\x85\u2028\u2029")

# Characters that may end a markup text run.
MARKUP_SPECIAL_CHARS = frozenset(" \t\\/[]~-.'\"*_:h`$<>@#") | NEWLINE_CHARS

UNITS = frozenset({"pt", "mm", "cm", "in", "em", "fr", "deg", "rad"})

LINK_TRAILING_PUNCTUATION = frozenset(".,;:!?'")

TWO_CHAR_OPERATORS: dict[str, SyntaxKind] = {
    "=>": SyntaxKind.ARROW,
    "==": SyntaxKind.EQ_EQ,
    "!=": SyntaxKind.EXCL_EQ,
    "<=": SyntaxKind.LT_EQ,
    ">=": SyntaxKind.GT_EQ,
    "+=": SyntaxKind.PLUS_EQ,
    "-=": SyntaxKind.HYPH_EQ,
    "*=": SyntaxKind.STAR_EQ,
    "/=": SyntaxKind.SLASH_EQ,
    "..": SyntaxKind.DOTS,
}

ONE_CHAR_OPERATORS: dict[str, SyntaxKind] = {
    "=": SyntaxKind.EQ,
    "<": SyntaxKind.LT,
    ">": SyntaxKind.GT,
    "+": SyntaxKind.PLUS,
    "-": SyntaxKind.MINUS,
    "*": SyntaxKind.STAR,
    "/": SyntaxKind.SLASH,
    ".": SyntaxKind.DOT,
    ",": SyntaxKind.COMMA,
    ";": SyntaxKind.SEMICOLON,
    ":": SyntaxKind.COLON,
    "(": SyntaxKind.LEFT_PAREN,
    ")": SyntaxKind.RIGHT_PAREN,
    "[": SyntaxKind.LEFT_BRACKET,
    "]": SyntaxKind.RIGHT_BRACKET,
    "{": SyntaxKind.LEFT_BRACE,
    "}": SyntaxKind.RIGHT_BRACE,
    "$": SyntaxKind.DOLLAR,
}


@dataclass(frozen=True, slots=True)
class LexerCheckpoint:
    """Lexer checkpoint."""

    position: int
    mode: LexMode
    diagnostics_position: int



class Lexer:
    """Lossless, mode-aware lexer: every character of the source ends up in exactly one token."""

    def __init__(self, source: str, *, mode: LexMode = LexMode.MARKUP) -> None:
        self._source = source
        self._position = 0
        self._mode = mode
        self._flags = TokenFlags.NONE
        self._diagnostics: list[Diagnostic] = []

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """List of diagnostics emitted during lexing."""
        return self._diagnostics

    @property
    def mode(self) -> LexMode:
        return self._mode

    @mode.setter
    def mode(self, mode: LexMode) -> None:
        self._mode = mode

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    @property
    def checkpoint(self) -> LexerCheckpoint:
        return LexerCheckpoint(
            position=self._position,
            mode=self._mode,
            diagnostics_position=len(self._diagnostics),
        )

    def rewind(self, checkpoint: LexerCheckpoint) -> None:
        self._position = checkpoint.position
        self._mode = checkpoint.mode
        if len(self._diagnostics) > checkpoint.diagnostics_position:
            del self._diagnostics[checkpoint.diagnostics_position :]

    def jump_to(self, position: int) -> None:
        """Move back to ``position``, forgetting diagnostics raised at or after it."""
        self._position = position
        self._diagnostics = [d for d in self._diagnostics if d.range.start.value < position]

    def next_token(self) -> Token:
        start = self._position
        self._flags = TokenFlags.NONE

        if self.is_eof:
            return Token(SyntaxKind.EOF, TextRange.from_offsets(start, start))

        kind = self._lex_token()
        return Token(kind, TextRange.from_offsets(start, self._position), self._flags)

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind == SyntaxKind.EOF:
                break
        return tokens

    def _lex_token(self) -> SyntaxKind:
        ch = self._current_char()

        if self._is_space(ch):
            return self._lex_whitespace()

        if ch == "/" and self._peek_char() == "/":
            return self._lex_line_comment()
        if ch == "/" and self._peek_char() == "*":
            return self._lex_block_comment()

        match self._mode:
            case LexMode.MARKUP:
                return self._lex_markup()
            case LexMode.MATH:
                return self._lex_math()
            case _:
                return self._lex_code()

    # -------------------------
    # Shared
    # -------------------------

    def _lex_whitespace(self) -> SyntaxKind:
        newlines = 0
        while not self.is_eof:
            ch = self._current_char()
            if not self._is_space(ch):
                break
            if ch == "\r" and self._peek_char() == "\n":
                self._advance(2)
                newlines += 1
                continue
            if ch in NEWLINE_CHARS:
                newlines += 1
            self._advance(1)

        if newlines > 0:
            self._flags |= TokenFlags.CONTAINS_NEWLINE
        if self._mode == LexMode.MARKUP and newlines >= 2:
            return SyntaxKind.PARBREAK
        return SyntaxKind.SPACE

    def _lex_line_comment(self) -> SyntaxKind:
        # Consume until end of line, do not consume the newline itself.
        self._advance(2)
        while not self.is_eof and self._current_char() not in NEWLINE_CHARS:
            self._advance(1)
        return SyntaxKind.LINE_COMMENT

    def _lex_block_comment(self) -> SyntaxKind:
        start = self._position
        self._advance(2)
        depth = 1
        while not self.is_eof:
            if self._at("*/"):
                self._advance(2)
                depth -= 1
                if depth == 0:
                    return SyntaxKind.BLOCK_COMMENT
                continue
            if self._at("/*"):
                self._advance(2)
                depth += 1
                continue
            self._advance(1)

        self._error(LEXER_UNTERMINATED_BLOCK_COMMENT, start)
        return SyntaxKind.BLOCK_COMMENT

    def _lex_backslash(self) -> SyntaxKind:
        self._advance(1)
        if self.is_eof or self._is_space(self._current_char()):
            return SyntaxKind.LINEBREAK

        self._flags |= TokenFlags.HAS_ESCAPE
        if self._at("u{"):
            self._advance(2)
            while not self.is_eof and self._current_char() != "}":
                self._advance(1)
            if not self.is_eof:
                self._advance(1)
            return SyntaxKind.ESCAPE

        self._advance(1)
        return SyntaxKind.ESCAPE

    def _lex_string(self) -> SyntaxKind:
        start = self._position
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch == '"':
                self._advance(1)
                return SyntaxKind.STR
            if ch == "\\":
                self._flags |= TokenFlags.HAS_ESCAPE
                self._advance(2 if self._position + 1 < len(self._source) else 1)
                continue
            self._advance(1)

        self._error(LEXER_UNTERMINATED_STRING, start)
        return SyntaxKind.STR

    def _lex_raw(self) -> SyntaxKind:
        start = self._position
        backticks = 0
        while self._current_char() == "`":
            self._advance(1)
            backticks += 1

        if backticks == 2:
            return SyntaxKind.RAW

        found = 0
        while not self.is_eof:
            found = found + 1 if self._current_char() == "`" else 0
            self._advance(1)
            if found == backticks:
                return SyntaxKind.RAW

        self._error(LEXER_UNTERMINATED_RAW, start)
        return SyntaxKind.RAW

    def _lex_label(self) -> SyntaxKind | None:
        """Lex `<name>`; returns None (and consumes nothing) when it is not closed."""
        end = self._position + 1
        while end < len(self._source) and _is_label_char(self._source[end]):
            end += 1
        if end < len(self._source) and self._source[end] == ">" and end > self._position + 1:
            self._advance(end + 1 - self._position)
            return SyntaxKind.LABEL
        return None

    # -------------------------
    # Markup
    # -------------------------

    def _lex_markup(self) -> SyntaxKind:
        ch = self._current_char()

        if ch == "\\":
            return self._lex_backslash()
        if ch == "`":
            return self._lex_raw()
        if ch == "h" and (self._at("http://") or self._at("https://")):
            return self._lex_link()
        if ch == "<" and _is_label_char(self._peek_char()):
            label = self._lex_label()
            if label is not None:
                return label
        if ch == "@" and _is_label_char(self._peek_char()):
            return self._lex_ref_marker()

        if self._at("..."):
            self._advance(3)
            return SyntaxKind.SHORTHAND
        if self._at("---"):
            self._advance(3)
            return SyntaxKind.SHORTHAND
        if self._at("--") or self._at("-?"):
            self._advance(2)
            return SyntaxKind.SHORTHAND
        if ch == "-" and self._peek_char().isdigit():
            self._advance(1)
            return SyntaxKind.SHORTHAND
        if ch == "~":
            self._advance(1)
            return SyntaxKind.SHORTHAND

        if ch == "*" and not self._in_word():
            self._advance(1)
            return SyntaxKind.STAR
        if ch == "_" and not self._in_word():
            self._advance(1)
            return SyntaxKind.UNDERSCORE

        single = {
            "#": SyntaxKind.HASH,
            "[": SyntaxKind.LEFT_BRACKET,
            "]": SyntaxKind.RIGHT_BRACKET,
            "'": SyntaxKind.SMART_QUOTE,
            '"': SyntaxKind.SMART_QUOTE,
            "$": SyntaxKind.DOLLAR,
            ":": SyntaxKind.COLON,
        }.get(ch)
        if single is not None:
            self._advance(1)
            return single

        if ch == "=":
            while self._current_char() == "=":
                self._advance(1)
            if self._space_or_end():
                return SyntaxKind.HEADING_MARKER
            return self._lex_text()

        markers = {
            "-": SyntaxKind.LIST_MARKER,
            "+": SyntaxKind.ENUM_MARKER,
            "/": SyntaxKind.TERM_MARKER,
        }
        if ch in markers:
            self._advance(1)
            if self._space_or_end():
                return markers[ch]
            return self._lex_text()

        if ch.isdigit():
            while self._current_char().isdigit():
                self._advance(1)
            if self._current_char() == "." and self._space_or_end(ahead=1):
                self._advance(1)
                return SyntaxKind.ENUM_MARKER
            return self._lex_text()

        self._advance(1)
        return self._lex_text()

    def _lex_text(self) -> SyntaxKind:
        while True:
            while not self.is_eof and self._current_char() not in MARKUP_SPECIAL_CHARS:
                if self._is_space(self._current_char()):
                    break
                self._advance(1)
            if self.is_eof:
                break

            # Keep going when the next character would be lexed as text anyway.
            ch = self._current_char()
            following = self._peek_char()
            if ch == " " and following.isalnum():
                pass
            elif ch == "/" and following not in ("/", "*"):
                pass
            elif ch == "-" and following not in ("-", "?"):
                pass
            elif ch == "." and not self._at("..."):
                pass
            elif ch == "h" and not (self._at("http://") or self._at("https://")):
                pass
            elif ch == "@" and not _is_label_char(following):
                pass
            else:
                break
            self._advance(1)
        return SyntaxKind.TEXT

    def _lex_link(self) -> SyntaxKind:
        depth = 0
        while not self.is_eof:
            ch = self._current_char()
            if self._is_space(ch) or ch in '<>"':
                break
            if ch in "([":
                depth += 1
            elif ch in ")]":
                if depth == 0:
                    break
                depth -= 1
            self._advance(1)

        while self._source[self._position - 1] in LINK_TRAILING_PUNCTUATION:
            self._position -= 1
        return SyntaxKind.LINK

    def _lex_ref_marker(self) -> SyntaxKind:
        self._advance(1)
        while not self.is_eof and _is_label_char(self._current_char()):
            self._advance(1)
        # A reference never ends in punctuation: `@intro.` refers to `intro`.
        while self._source[self._position - 1] in ".:":
            self._position -= 1
        return SyntaxKind.REF_MARKER

    # -------------------------
    # Math
    # -------------------------

    def _lex_math(self) -> SyntaxKind:
        ch = self._current_char()
        if ch == "\\":
            return self._lex_backslash()
        if ch == '"':
            return self._lex_string()
        if ch == "$":
            self._advance(1)
            return SyntaxKind.DOLLAR
        if ch == "#":
            self._advance(1)
            return SyntaxKind.HASH

        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if self._is_space(ch) or ch in '$#\\"':
                break
            if self._at("//") or self._at("/*"):
                break
            self._advance(1)
        return SyntaxKind.MATH_TEXT

    # -------------------------
    # Code
    # -------------------------

    def _lex_code(self) -> SyntaxKind:
        ch = self._current_char()

        if ch == '"':
            return self._lex_string()
        if ch == "`":
            return self._lex_raw()
        if ch == "<" and _is_label_char(self._peek_char()):
            label = self._lex_label()
            if label is not None:
                return label

        if ch.isdigit() or (ch == "." and self._peek_char().isdigit()):
            return self._lex_number()

        if ch == "_" and not _is_ident_continue(self._peek_char()):
            self._advance(1)
            return SyntaxKind.UNDERSCORE
        if _is_ident_start(ch):
            return self._lex_ident()

        two = self._source[self._position : self._position + 2]
        if two in TWO_CHAR_OPERATORS:
            self._advance(2)
            return TWO_CHAR_OPERATORS[two]
        if ch in ONE_CHAR_OPERATORS:
            self._advance(1)
            return ONE_CHAR_OPERATORS[ch]

        start = self._position
        self._advance(1)
        self._error(LEXER_INVALID_CHARACTER, start, message=f"Invalid character {ch!r} in code.")
        return SyntaxKind.ERROR

    def _lex_ident(self) -> SyntaxKind:
        start = self._position
        self._advance(1)
        while not self.is_eof and (_is_ident_continue(self._current_char()) or self._current_char() == "-"):
            self._advance(1)
        text = self._source[start : self._position]
        return KEYWORDS.get(text, SyntaxKind.IDENT)

    def _lex_number(self) -> SyntaxKind:
        is_float = False

        if self._current_char() == "0" and self._peek_char() in ("x", "b", "o"):
            self._advance(2)
            while self._current_char().isalnum():
                self._advance(1)
            return SyntaxKind.INT

        while self._current_char().isdigit():
            self._advance(1)
        if self._current_char() == "." and self._peek_char().isdigit():
            is_float = True
            self._advance(1)
            while self._current_char().isdigit():
                self._advance(1)
        if self._current_char() in ("e", "E"):
            following = self._peek_char()
            if following.isdigit() or (following in ("+", "-") and self._peek_char(2).isdigit()):
                is_float = True
                self._advance(2)
                while self._current_char().isdigit():
                    self._advance(1)

        if self._current_char() == "%":
            self._advance(1)
            return SyntaxKind.NUMERIC

        suffix_end = self._position
        while suffix_end < len(self._source) and self._source[suffix_end].isalpha():
            suffix_end += 1
        if self._source[self._position : suffix_end] in UNITS:
            self._position = suffix_end
            return SyntaxKind.NUMERIC

        return SyntaxKind.FLOAT if is_float else SyntaxKind.INT

    # -------------------------
    # Cursor helpers
    # -------------------------

    def _is_space(self, ch: str) -> bool:
        if self._mode == LexMode.MARKUP:
            return ch in (" ", "\t") or ch in NEWLINE_CHARS
        return ch != "\0" and ch.isspace()

    def _space_or_end(self, ahead: int = 0) -> bool:
        ch = self._peek_char(ahead) if ahead else self._current_char()
        return ch == "\0" or self._is_space(ch)

    def _in_word(self) -> bool:
        before = self._source[self._position - 1] if self._position > 0 else "\0"
        return before.isalnum() and self._peek_char().isalnum()

    def _at(self, text: str) -> bool:
        return self._source.startswith(text, self._position)

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps

    def _error(self, spec: DiagnosticSpec, start: int, message: str | None = None) -> None:
        self._diagnostics.append(
            Diagnostic.from_spec(spec, TextRange.from_offsets(start, self._position), message=message)
        )


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_ident_continue(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _is_label_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-.:"


def token_text(source: str, token: Token) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == SyntaxKind.EOF:
        return ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str) -> str:
    """Render a token list with kind, range, flags and text, one per line."""
    lines: list[str] = []
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        lines.append(f"{i:03d} {tok.kind.name:<18} range={tok.range.as_tuple()} flags={tok.flags} text={text!r}")
    return "\n".join(lines)
