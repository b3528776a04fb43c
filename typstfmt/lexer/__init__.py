"""Lexer."""

from typstfmt.lexer.lexer import Lexer, LexerCheckpoint, dump_tokens, token_text
from typstfmt.lexer.tokens import EOF_TOKEN, LexMode, Token, TokenFlags, Trivia

__all__ = [
    "EOF_TOKEN",
    "LexMode",
    "Lexer",
    "LexerCheckpoint",
    "Token",
    "TokenFlags",
    "Trivia",
    "dump_tokens",
    "token_text",
]
