"""Shared debug printers for lexer/parser/format tests."""

from __future__ import annotations

import os

from typstfmt.cst import GreenNode, GreenToken
from typstfmt.diagnostics import Diagnostic
from typstfmt.lexer import Token, dump_tokens

_TRUTHY = {"1", "true", "yes", "on"}

PRINT_TOKENS = os.getenv("PRINT_TOKENS", "0").lower() in _TRUTHY
PRINT_CST = os.getenv("PRINT_CST", "0").lower() in _TRUTHY
PRINT_SOURCE = os.getenv("PRINT_SOURCE", "0").lower() in _TRUTHY
PRINT_DIAGNOSTICS = os.getenv("PRINT_DIAGNOSTICS", "0").lower() in _TRUTHY
PRINT_FORMATTED = os.getenv("PRINT_FORMATTED", "0").lower() in _TRUTHY


def debug_print_source(test_name: str, source: str) -> None:
    if not PRINT_SOURCE:
        return
    print(f"\n===== {test_name} SOURCE =====")
    print(source)


def debug_dump_tokens(test_name: str, source: str, tokens: list[Token]) -> None:
    if not PRINT_TOKENS:
        return
    debug_print_source(test_name, source)
    print(f"\n===== {test_name} TOKENS =====")
    print(dump_tokens(tokens, source))


def debug_dump_cst(test_name: str, source: str, root: GreenNode) -> None:
    if not PRINT_CST:
        return
    debug_print_source(test_name, source)
    print(f"===== {test_name} CST =====")
    print(_dump_cst(root))


def debug_dump_diagnostics(test_name: str, diagnostics: list[Diagnostic], source: str | None = None) -> None:
    if not PRINT_DIAGNOSTICS:
        return
    if source is not None:
        debug_print_source(test_name, source)
    print(f"===== {test_name} DIAGNOSTICS =====")
    if not diagnostics:
        print("(none)")
        return
    for diagnostic in diagnostics:
        print(diagnostic)


def debug_dump_formatted(test_name: str, source: str, formatted: str) -> None:
    if not PRINT_FORMATTED:
        return
    print(f"\n===== {test_name} BEFORE =====")
    print(repr(source))
    print(f"===== {test_name} AFTER =====")
    print(repr(formatted))


def _dump_cst(node: GreenNode) -> str:
    lines: list[str] = []

    def walk_node(current: GreenNode, depth: int) -> None:
        indent = "  " * depth
        lines.append(f"{indent}{current.kind.name}")
        for child in current.children:
            if isinstance(child, GreenNode):
                walk_node(child, depth + 1)
            else:
                walk_token(child, depth + 1)

    def walk_token(token: GreenToken, depth: int) -> None:
        indent = "  " * depth
        text = token.text.replace("\n", "\\n").replace("\r", "\\r")
        lines.append(f"{indent}{token.kind.name} text={text!r}")

    walk_node(node, 0)
    return "\n".join(lines)
