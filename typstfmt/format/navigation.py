"""Sibling predicates used by the argument list layouts."""

from __future__ import annotations

from collections.abc import Set

from typstfmt.cst import SyntaxElement
from typstfmt.syntax import SyntaxKind


class MalformedTreeError(RuntimeError):
    """The syntax tree breaks a structural guarantee of the parser."""


def is_trailing_comma(comma: SyntaxElement) -> bool:
    """Whether the next sibling, skipping at most one space, closes the list."""
    _require_comma(comma)
    following = comma.next_sibling()
    if following is not None and following.kind == SyntaxKind.SPACE:
        following = following.next_sibling()
    return following is not None and following.kind.is_terminator


def is_last_comma(comma: SyntaxElement) -> bool:
    """Whether a terminator follows ``comma`` before any other comma does."""
    _require_comma(comma)
    following = comma.next_sibling()
    while following is not None:
        if following.kind == SyntaxKind.COMMA:
            return False
        if following.kind.is_terminator:
            return True
        following = following.next_sibling()
    raise MalformedTreeError(f"Comma at offset {comma.start} is not followed by a closing delimiter")


def next_is_ignoring(
    element: SyntaxElement,
    kind: SyntaxKind,
    ignoring: Set[SyntaxKind] = frozenset({SyntaxKind.SPACE}),
) -> bool:
    """Whether the first following sibling outside ``ignoring`` has ``kind``."""
    following = element.next_sibling()
    while following is not None and following.kind in ignoring:
        following = following.next_sibling()
    return following is not None and following.kind == kind


def _require_comma(element: SyntaxElement) -> None:
    if element.kind != SyntaxKind.COMMA:
        raise ValueError(f"Expected a comma, got {element.kind.name}")
