"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with a double quote.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_RAW: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_RAW",
    message="Unterminated raw text.",
    hint="Close the raw block with the same number of backticks it was opened with.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_BLOCK_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_BLOCK_COMMENT",
    message="Unterminated block comment.",
    hint="Close the comment with `*/`.",
    severity="error",
    category="lexer",
)

LEXER_INVALID_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_CHARACTER",
    message="Invalid character in code.",
    severity="error",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_EXPRESSION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_EXPRESSION",
    message="Expected expression",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK",
    message="Expected semicolon or line break",
    hint="Separate statements with `;` or put them on their own lines.",
    severity="error",
    category="parser",
)

PARSER_UNCLOSED_DELIMITER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNCLOSED_DELIMITER",
    message="Unclosed delimiter",
    severity="error",
    category="parser",
)
