"""Diagnostics."""

from typstfmt.diagnostics.codes import (
    LEXER_INVALID_CHARACTER,
    LEXER_UNTERMINATED_BLOCK_COMMENT,
    LEXER_UNTERMINATED_RAW,
    LEXER_UNTERMINATED_STRING,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK,
    PARSER_EXPECTED_TOKEN,
    PARSER_UNCLOSED_DELIMITER,
    PARSER_UNEXPECTED_TOKEN,
    DiagnosticSpec,
)
from typstfmt.diagnostics.diagnostic import Diagnostic, Severity
from typstfmt.diagnostics.report import collect_diagnostics, has_errors, sort_diagnostics

__all__ = [
    "LEXER_INVALID_CHARACTER",
    "LEXER_UNTERMINATED_BLOCK_COMMENT",
    "LEXER_UNTERMINATED_RAW",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_EXPECTED_EXPRESSION",
    "PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_UNCLOSED_DELIMITER",
    "PARSER_UNEXPECTED_TOKEN",
    "Diagnostic",
    "DiagnosticSpec",
    "Severity",
    "collect_diagnostics",
    "has_errors",
    "sort_diagnostics",
]
